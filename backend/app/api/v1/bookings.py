"""
Booking management endpoints for Rail Connect
"""
from fastapi import APIRouter, HTTPException, status, Depends
from typing import Dict, Any
import logging

from app.api.deps import get_booking_manager
from app.core.errors import BookingError
from app.core.security import get_current_user
from app.schemas.booking import BookingListResponse, BookingResponse
from app.services.booking import BookingManager

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bookings", tags=["bookings"])


@router.get("", response_model=BookingListResponse)
async def list_bookings(
    current_user: Dict[str, Any] = Depends(get_current_user),
    manager: BookingManager = Depends(get_booking_manager),
):
    """
    Bookings of the signed-in user

    Upcoming trips soonest first; past and cancelled trips most recent first.
    """
    try:
        return await manager.list_for_user(current_user)
    except BookingError as e:
        raise e.to_http()
    except Exception as e:
        logger.error(f"Error listing bookings for {current_user['uid']}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load bookings"
        )


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: str,
    current_user: Dict[str, Any] = Depends(get_current_user),
    manager: BookingManager = Depends(get_booking_manager),
):
    try:
        booking = await manager.get(booking_id, current_user)
        return manager.to_response(booking)
    except BookingError as e:
        raise e.to_http()
    except Exception as e:
        logger.error(f"Error retrieving booking {booking_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve booking"
        )


@router.post("/{booking_id}/cancel", response_model=BookingResponse)
async def cancel_booking(
    booking_id: str,
    current_user: Dict[str, Any] = Depends(get_current_user),
    manager: BookingManager = Depends(get_booking_manager),
):
    """Cancel an upcoming booking; fare amounts are kept as booked"""
    try:
        booking = await manager.cancel(booking_id, current_user)
        return manager.to_response(booking)
    except BookingError as e:
        raise e.to_http()
    except Exception as e:
        logger.error(f"Error cancelling booking {booking_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to cancel booking"
        )
