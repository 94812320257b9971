"""
Train catalog endpoints for Rail Connect
Search, details, availability calendar and seat layout preview
"""
from fastapi import APIRouter, HTTPException, status, Depends, Query, Request
from typing import Optional
from datetime import date
import logging

from app.api.deps import get_app_settings, get_catalog
from app.core.config import Settings
from app.core.errors import BookingError
from app.schemas.train import (
    AvailabilityResponse,
    LayoutResponse,
    SeatStatus,
    Train,
    TrainListResponse,
)
from app.services.catalog import TrainCatalog
from app.services.seating import NO_LAYOUT_MESSAGE, generate_for_train

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/trains", tags=["trains"])


@router.get("", response_model=TrainListResponse)
async def list_trains(
    origin: Optional[str] = Query(None, description="Origin station"),
    destination: Optional[str] = Query(None, description="Destination station"),
    catalog: TrainCatalog = Depends(get_catalog),
):
    """
    List trains, optionally filtered by origin and destination

    Station names match case-insensitively.
    """
    trains = catalog.search(origin, destination)
    return TrainListResponse(trains=trains, total=len(trains))


@router.get("/{train_id}", response_model=Train)
async def get_train(train_id: str, catalog: TrainCatalog = Depends(get_catalog)):
    try:
        return catalog.get(train_id)
    except BookingError as e:
        raise e.to_http()


@router.get("/{train_id}/availability", response_model=AvailabilityResponse)
async def get_availability(
    train_id: str,
    selected_class: str = Query(..., alias="class"),
    start: Optional[date] = Query(None, description="First day of the calendar"),
    catalog: TrainCatalog = Depends(get_catalog),
):
    """10-day availability calendar for a train and class"""
    try:
        days = catalog.availability(train_id, start or date.today())
        return AvailabilityResponse(train_id=train_id, selected_class=selected_class, days=days)
    except BookingError as e:
        raise e.to_http()


@router.get("/{train_id}/layout", response_model=LayoutResponse)
async def preview_layout(
    request: Request,
    train_id: str,
    selected_class: str = Query(..., alias="class"),
    travel_date: date = Query(..., alias="date"),
    catalog: TrainCatalog = Depends(get_catalog),
    settings: Settings = Depends(get_app_settings),
):
    """
    Seat layout preview for a class and date

    Nothing is held; start a booking session to select seats.
    """
    try:
        train = catalog.get(train_id)
    except BookingError as e:
        raise e.to_http()

    if travel_date < date.today():
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Travel date cannot be in the past"
        )

    rows = generate_for_train(
        train,
        selected_class,
        availability_rate=settings.SEAT_AVAILABILITY_RATE,
        rng=request.app.state.rng,
    )
    available = sum(1 for row in rows for seat in row if seat.is_seat and seat.status == SeatStatus.AVAILABLE)

    return LayoutResponse(
        train_id=train.id,
        selected_class=selected_class,
        travel_date=travel_date,
        rows=rows,
        available_count=available,
        message=None if rows else NO_LAYOUT_MESSAGE,
    )
