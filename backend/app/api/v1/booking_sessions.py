"""
Booking session endpoints for Rail Connect
Drives a booking from seat selection through payment to confirmation
"""
from fastapi import APIRouter, HTTPException, status, Depends
from typing import Dict, Any, Optional
import logging

from app.api.deps import get_booking_flow
from app.core.errors import BookingError
from app.core.security import get_current_user, get_current_user_optional
from app.schemas.booking import (
    BookingResponse,
    BookingSession,
    LayoutChangeRequest,
    PrefillRequest,
    SessionCreateRequest,
    SessionResponse,
)
from app.schemas.passenger import Passenger, PassengerInput
from app.services.booking import BookingFlow
from app.services.seating import NO_LAYOUT_MESSAGE

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/booking-sessions", tags=["booking"])


# ==================== Helper Functions ====================

def session_to_response(session: BookingSession, flow: BookingFlow) -> SessionResponse:
    rows = session.grid()
    return SessionResponse(
        id=session.id,
        state=session.state,
        train=session.train,
        travel_date=session.travel_date,
        selected_class=session.selected_class,
        origin=session.origin,
        destination=session.destination,
        rows=rows,
        layout_message=None if rows else NO_LAYOUT_MESSAGE,
        selected_seats=session.selected_seat_numbers(),
        passengers=session.passengers,
        prefill=session.prefill,
        fare=flow.fare_for(session),
        booking_id=session.booking_id,
    )


def unexpected_error(action: str, e: Exception) -> HTTPException:
    logger.error(f"Error {action}: {str(e)}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Failed {action}"
    )


# ==================== Endpoints ====================

@router.post("", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def start_session(
    body: SessionCreateRequest,
    current_user: Optional[Dict[str, Any]] = Depends(get_current_user_optional),
    flow: BookingFlow = Depends(get_booking_flow),
):
    """
    Start a booking for a train, date and class

    Signing in is only required at confirmation; a session started
    anonymously is claimed by the user who confirms it.
    """
    try:
        session = await flow.start(body, current_user)
        return session_to_response(session, flow)
    except BookingError as e:
        raise e.to_http()
    except Exception as e:
        raise unexpected_error("starting booking", e)


@router.get("/{session_id}", response_model=SessionResponse)
async def get_session(
    session_id: str,
    current_user: Optional[Dict[str, Any]] = Depends(get_current_user_optional),
    flow: BookingFlow = Depends(get_booking_flow),
):
    try:
        session = await flow.get(session_id, current_user)
        return session_to_response(session, flow)
    except BookingError as e:
        raise e.to_http()
    except Exception as e:
        raise unexpected_error(f"retrieving booking session {session_id}", e)


@router.post("/{session_id}/layout", response_model=SessionResponse)
async def change_layout(
    session_id: str,
    body: LayoutChangeRequest,
    current_user: Optional[Dict[str, Any]] = Depends(get_current_user_optional),
    flow: BookingFlow = Depends(get_booking_flow),
):
    """Regenerate the coach for a new date or class; clears selected seats"""
    try:
        session = await flow.change_layout(session_id, body, current_user)
        return session_to_response(session, flow)
    except BookingError as e:
        raise e.to_http()
    except Exception as e:
        raise unexpected_error("changing layout", e)


@router.post("/{session_id}/seats/{seat_id}/toggle", response_model=SessionResponse)
async def toggle_seat(
    session_id: str,
    seat_id: str,
    current_user: Optional[Dict[str, Any]] = Depends(get_current_user_optional),
    flow: BookingFlow = Depends(get_booking_flow),
):
    try:
        session = await flow.toggle_seat(session_id, seat_id, current_user)
        return session_to_response(session, flow)
    except BookingError as e:
        raise e.to_http()
    except Exception as e:
        raise unexpected_error(f"toggling seat {seat_id}", e)


@router.post("/{session_id}/passenger-entry", response_model=SessionResponse)
async def start_passenger_entry(
    session_id: str,
    current_user: Optional[Dict[str, Any]] = Depends(get_current_user_optional),
    flow: BookingFlow = Depends(get_booking_flow),
):
    try:
        session = await flow.start_passenger_entry(session_id, current_user)
        return session_to_response(session, flow)
    except BookingError as e:
        raise e.to_http()
    except Exception as e:
        raise unexpected_error("continuing to passenger details", e)


@router.post("/{session_id}/passengers", response_model=Passenger, status_code=status.HTTP_201_CREATED)
async def add_passenger(
    session_id: str,
    body: Optional[PassengerInput] = None,
    current_user: Optional[Dict[str, Any]] = Depends(get_current_user_optional),
    flow: BookingFlow = Depends(get_booking_flow),
):
    """
    Add a passenger for the next selected seat

    Fields left out are taken from the staged saved passenger, if any.
    """
    try:
        return await flow.add_passenger(session_id, body, current_user)
    except BookingError as e:
        raise e.to_http()
    except Exception as e:
        raise unexpected_error("adding passenger", e)


@router.delete("/{session_id}/passengers/{index}", response_model=SessionResponse)
async def remove_passenger(
    session_id: str,
    index: int,
    current_user: Optional[Dict[str, Any]] = Depends(get_current_user_optional),
    flow: BookingFlow = Depends(get_booking_flow),
):
    try:
        session = await flow.remove_passenger(session_id, index, current_user)
        return session_to_response(session, flow)
    except BookingError as e:
        raise e.to_http()
    except Exception as e:
        raise unexpected_error("removing passenger", e)


@router.post("/{session_id}/prefill", response_model=SessionResponse)
async def prefill_passenger(
    session_id: str,
    body: PrefillRequest,
    current_user: Dict[str, Any] = Depends(get_current_user),
    flow: BookingFlow = Depends(get_booking_flow),
):
    """Stage one of the user's saved passengers for the next add"""
    try:
        session = await flow.prefill(session_id, body.saved_passenger_id, current_user)
        return session_to_response(session, flow)
    except BookingError as e:
        raise e.to_http()
    except Exception as e:
        raise unexpected_error("loading saved passenger", e)


@router.post("/{session_id}/payment", response_model=SessionResponse)
async def proceed_to_payment(
    session_id: str,
    current_user: Optional[Dict[str, Any]] = Depends(get_current_user_optional),
    flow: BookingFlow = Depends(get_booking_flow),
):
    try:
        session = await flow.proceed_to_payment(session_id, current_user)
        return session_to_response(session, flow)
    except BookingError as e:
        raise e.to_http()
    except Exception as e:
        raise unexpected_error("continuing to payment", e)


@router.post("/{session_id}/back", response_model=SessionResponse)
async def go_back(
    session_id: str,
    current_user: Optional[Dict[str, Any]] = Depends(get_current_user_optional),
    flow: BookingFlow = Depends(get_booking_flow),
):
    try:
        session = await flow.back(session_id, current_user)
        return session_to_response(session, flow)
    except BookingError as e:
        raise e.to_http()
    except Exception as e:
        raise unexpected_error("going back", e)


@router.post("/{session_id}/confirm", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def confirm_payment(
    session_id: str,
    current_user: Dict[str, Any] = Depends(get_current_user),
    flow: BookingFlow = Depends(get_booking_flow),
):
    """
    Confirm payment and store the booking

    Payment is simulated. A 503 with retryable=true means the booking
    was not stored and the session is still in payment.
    """
    try:
        booking = await flow.confirm(session_id, current_user)
        return BookingResponse(**booking.model_dump(), display_status=booking.status)
    except BookingError as e:
        raise e.to_http()
    except Exception as e:
        raise unexpected_error("confirming booking", e)


@router.post("/{session_id}/abandon", response_model=SessionResponse)
async def abandon_session(
    session_id: str,
    current_user: Optional[Dict[str, Any]] = Depends(get_current_user_optional),
    flow: BookingFlow = Depends(get_booking_flow),
):
    try:
        session = await flow.abandon(session_id, current_user)
        return session_to_response(session, flow)
    except BookingError as e:
        raise e.to_http()
    except Exception as e:
        raise unexpected_error("abandoning booking", e)
