"""
Booking, booking session and fare schemas
"""
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, model_validator

from app.schemas.passenger import Passenger, PassengerDetails
from app.schemas.train import Seat, Train


class FareBreakdown(BaseModel):
    ticket_fare: float = Field(..., ge=0)
    convenience_fee: float = Field(..., ge=0)
    total_price: float = Field(..., ge=0)


class BookingStatus(str, Enum):
    UPCOMING = "upcoming"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Booking(BaseModel):
    """Confirmed booking as stored in the bookings collection"""
    id: Optional[str] = None
    user_id: str
    train_id: str
    train_name: str
    train_number: str
    origin: str
    destination: str
    travel_date: date
    departure_time: str
    arrival_time: str
    selected_class: str
    quota: str = "GENERAL (GN)"
    seats: List[int]
    num_passengers: int = Field(..., ge=1)
    passengers: List[Passenger]
    fare: FareBreakdown
    status: BookingStatus = BookingStatus.UPCOMING
    pnr: str
    transaction_id: str
    session_id: Optional[str] = None
    created_at: datetime
    cancelled_at: Optional[datetime] = None

    @model_validator(mode="after")
    def check_invariants(self):
        if len(self.passengers) != len(self.seats) or self.num_passengers != len(self.passengers):
            raise ValueError("Passenger count must equal seat count")
        fare = self.fare
        if round(fare.ticket_fare + fare.convenience_fee, 2) != round(fare.total_price, 2):
            raise ValueError("total_price must equal ticket_fare + convenience_fee")
        return self

    def effective_status(self, today: date) -> BookingStatus:
        """An upcoming booking whose travel date has passed reads as completed"""
        if self.status == BookingStatus.UPCOMING and self.travel_date < today:
            return BookingStatus.COMPLETED
        return self.status

    def to_document(self) -> Dict[str, Any]:
        """Firestore representation; dates as ISO strings so travel_date orders lexically"""
        doc = self.model_dump(mode="json", exclude={"id"})
        doc["created_at"] = self.created_at
        doc["cancelled_at"] = self.cancelled_at
        return doc


class BookingResponse(Booking):
    display_status: BookingStatus


class BookingListResponse(BaseModel):
    upcoming: List[BookingResponse]
    past: List[BookingResponse]


# ==================== Booking Session ====================

class SessionState(str, Enum):
    SEAT_SELECTION = "seat_selection"
    PASSENGER_ENTRY = "passenger_entry"
    PAYMENT = "payment"
    CONFIRMED = "confirmed"
    ABANDONED = "abandoned"


class BookingSession(BaseModel):
    """In-progress booking held in the booking_sessions collection"""
    id: str
    user_id: Optional[str] = None
    state: SessionState = SessionState.SEAT_SELECTION
    train: Train
    travel_date: date
    selected_class: str
    origin: str
    destination: str
    layout_rows: int = 0
    # Flat cell list; Firestore cannot store nested arrays
    seats: List[Seat] = Field(default_factory=list)
    selected_seat_ids: List[str] = Field(default_factory=list)
    passengers: List[Passenger] = Field(default_factory=list)
    prefill: Optional[PassengerDetails] = None
    booking_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    def grid(self) -> List[List[Seat]]:
        rows: List[List[Seat]] = [[] for _ in range(self.layout_rows)]
        for seat in self.seats:
            rows[seat.row].append(seat)
        for row in rows:
            row.sort(key=lambda s: s.column)
        return rows

    def seat_by_id(self, seat_id: str) -> Optional[Seat]:
        return next((s for s in self.seats if s.id == seat_id), None)

    def selected_seat_numbers(self) -> List[int]:
        by_id = {s.id: s for s in self.seats}
        return [by_id[seat_id].number for seat_id in self.selected_seat_ids]

    def to_document(self) -> Dict[str, Any]:
        doc = self.model_dump(mode="json", exclude={"id"})
        doc["created_at"] = self.created_at
        doc["updated_at"] = self.updated_at
        return doc


class SessionCreateRequest(BaseModel):
    train_id: str
    travel_date: date
    selected_class: str
    origin: Optional[str] = None
    destination: Optional[str] = None


class LayoutChangeRequest(BaseModel):
    travel_date: Optional[date] = None
    selected_class: Optional[str] = None


class PrefillRequest(BaseModel):
    saved_passenger_id: str


class SessionResponse(BaseModel):
    id: str
    state: SessionState
    train: Train
    travel_date: date
    selected_class: str
    origin: str
    destination: str
    rows: List[List[Seat]]
    layout_message: Optional[str] = None
    selected_seats: List[int]
    passengers: List[Passenger]
    prefill: Optional[PassengerDetails] = None
    fare: Optional[FareBreakdown] = None
    booking_id: Optional[str] = None
