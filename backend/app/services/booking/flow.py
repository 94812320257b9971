"""
Booking flow state machine

seat_selection -> passenger_entry -> payment -> confirmed
Any open state may move to abandoned.

Back navigation steps one state towards seat_selection. Each operation
loads the session, checks the guard for its state, applies the change and
saves the session; a failed guard leaves the stored session untouched.
"""
import logging
import random
import uuid
from datetime import date
from typing import Any, Callable, Dict, Optional, get_args

from app.core.errors import (
    AuthorizationError,
    InvalidTransition,
    NotFound,
    StoreWriteFailure,
    ValidationError,
)
from app.core.firebase import utcnow
from app.schemas.booking import (
    Booking,
    BookingSession,
    FareBreakdown,
    LayoutChangeRequest,
    SessionCreateRequest,
    SessionState,
)
from app.schemas.passenger import Passenger, PassengerDetails, PassengerInput
from app.schemas.train import FareClass, SeatStatus
from app.services.booking.fare import FareCalculator
from app.services.booking.passengers import PassengerCollector
from app.services.booking.store import BookingSessionStore, BookingStore
from app.services.catalog import TrainCatalog
from app.services.profile import SavedPassengerStore
from app.services.seating import generate_for_train

logger = logging.getLogger(__name__)

# -------------------------
# State Machine Definition
# -------------------------

TRANSITIONS: Dict[SessionState, set] = {
    SessionState.SEAT_SELECTION: {SessionState.PASSENGER_ENTRY, SessionState.ABANDONED},
    SessionState.PASSENGER_ENTRY: {SessionState.PAYMENT, SessionState.SEAT_SELECTION, SessionState.ABANDONED},
    SessionState.PAYMENT: {SessionState.CONFIRMED, SessionState.PASSENGER_ENTRY, SessionState.ABANDONED},
    SessionState.CONFIRMED: set(),
    SessionState.ABANDONED: set(),
}

PREVIOUS_STATE: Dict[SessionState, SessionState] = {
    SessionState.PASSENGER_ENTRY: SessionState.SEAT_SELECTION,
    SessionState.PAYMENT: SessionState.PASSENGER_ENTRY,
}

KNOWN_CLASSES = set(get_args(FareClass))


def generate_pnr(rng: random.Random) -> str:
    """10-digit passenger name record"""
    return f"{rng.randint(1, 9)}{rng.randint(0, 10**9 - 1):09d}"


def generate_transaction_id(rng: random.Random) -> str:
    """15-digit payment transaction reference"""
    return f"{rng.randint(1, 9)}{rng.randint(0, 10**14 - 1):014d}"


class BookingFlow:
    """Drives a booking session from seat selection to a stored booking"""

    def __init__(
        self,
        *,
        catalog: TrainCatalog,
        sessions: BookingSessionStore,
        bookings: BookingStore,
        saved_passengers: SavedPassengerStore,
        fare_calculator: FareCalculator,
        availability_rate: float = 0.7,
        quota: str = "GENERAL (GN)",
        rng: Optional[random.Random] = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.catalog = catalog
        self.sessions = sessions
        self.bookings = bookings
        self.saved_passengers = saved_passengers
        self.fare_calculator = fare_calculator
        self.availability_rate = availability_rate
        self.quota = quota
        self.rng = rng or random.Random()
        self.today = today

    # -------------------------
    # Session lifecycle
    # -------------------------

    async def start(self, request: SessionCreateRequest, user: Optional[Dict[str, Any]]) -> BookingSession:
        """Open a session in seat_selection with a freshly generated layout"""
        train = self.catalog.get(request.train_id)
        self._validate_trip(request.travel_date, request.selected_class)

        now = utcnow()
        session = BookingSession(
            id=uuid.uuid4().hex,
            user_id=user["uid"] if user else None,
            train=train,
            travel_date=request.travel_date,
            selected_class=request.selected_class,
            origin=request.origin or train.origin,
            destination=request.destination or train.destination,
            created_at=now,
            updated_at=now,
        )
        self._regenerate_layout(session)
        await self.sessions.save(session)

        logger.info(
            f"Session {session.id}: started for train {train.id} "
            f"class={session.selected_class} date={session.travel_date}"
        )
        return session

    async def get(self, session_id: str, user: Optional[Dict[str, Any]]) -> BookingSession:
        session = await self.sessions.get(session_id)
        self._check_owner(session, user)
        return session

    async def change_layout(
        self, session_id: str, request: LayoutChangeRequest, user: Optional[Dict[str, Any]]
    ) -> BookingSession:
        """New date and/or class; regenerating discards any selected seats"""
        session = await self.get(session_id, user)
        self._require_state(session, SessionState.SEAT_SELECTION)

        travel_date = request.travel_date or session.travel_date
        selected_class = request.selected_class or session.selected_class
        self._validate_trip(travel_date, selected_class)

        session.travel_date = travel_date
        session.selected_class = selected_class
        self._regenerate_layout(session)
        await self.sessions.save(session)
        return session

    async def toggle_seat(self, session_id: str, seat_id: str, user: Optional[Dict[str, Any]]) -> BookingSession:
        session = await self.get(session_id, user)
        self._require_state(session, SessionState.SEAT_SELECTION)

        seat = session.seat_by_id(seat_id)
        if seat is None:
            raise NotFound(f"Seat {seat_id} not found in this coach")
        if not seat.is_seat:
            raise ValidationError(f"{seat_id} is not a seat in this coach", field="seat_id")

        if seat.status == SeatStatus.SELECTED:
            seat.status = SeatStatus.AVAILABLE
            session.selected_seat_ids.remove(seat.id)
        elif seat.status == SeatStatus.AVAILABLE:
            seat.status = SeatStatus.SELECTED
            session.selected_seat_ids.append(seat.id)
        else:
            raise ValidationError(f"Seat {seat.number} is already booked", field="seat_id")

        # Keep passenger seat assignments in step with the selection
        self._apply(session, self._collector(session))
        await self.sessions.save(session)
        return session

    async def start_passenger_entry(self, session_id: str, user: Optional[Dict[str, Any]]) -> BookingSession:
        session = await self.get(session_id, user)
        if not session.selected_seat_ids:
            self._require_state(session, SessionState.SEAT_SELECTION)
            raise ValidationError("Please select at least one seat to continue")
        self._transition(session, SessionState.PASSENGER_ENTRY)
        await self.sessions.save(session)
        return session

    async def add_passenger(
        self, session_id: str, details: Optional[PassengerInput], user: Optional[Dict[str, Any]]
    ) -> Passenger:
        session = await self.get(session_id, user)
        self._require_state(session, SessionState.PASSENGER_ENTRY)

        collector = self._collector(session)
        passenger = collector.add_passenger(details)
        self._apply(session, collector)
        await self.sessions.save(session)
        return passenger

    async def remove_passenger(self, session_id: str, index: int, user: Optional[Dict[str, Any]]) -> BookingSession:
        session = await self.get(session_id, user)
        self._require_state(session, SessionState.PASSENGER_ENTRY)

        collector = self._collector(session)
        collector.remove_passenger(index)
        self._apply(session, collector)
        await self.sessions.save(session)
        return session

    async def prefill(self, session_id: str, saved_passenger_id: str, user: Optional[Dict[str, Any]]) -> BookingSession:
        """Stage a saved passenger as the template for the next add"""
        if not user:
            raise AuthorizationError("Please sign in to use saved passengers")
        session = await self.get(session_id, user)
        self._require_state(session, SessionState.PASSENGER_ENTRY)

        saved = await self.saved_passengers.get(saved_passenger_id, user["uid"])
        collector = self._collector(session)
        collector.prefill_from(PassengerDetails(**saved.model_dump(include={"name", "age", "gender", "preferred_berth"})))
        self._apply(session, collector)
        await self.sessions.save(session)
        return session

    async def proceed_to_payment(self, session_id: str, user: Optional[Dict[str, Any]]) -> BookingSession:
        session = await self.get(session_id, user)
        self._require_state(session, SessionState.PASSENGER_ENTRY)
        self._collector(session).require_complete()
        self._transition(session, SessionState.PAYMENT)
        await self.sessions.save(session)
        return session

    async def back(self, session_id: str, user: Optional[Dict[str, Any]]) -> BookingSession:
        session = await self.get(session_id, user)
        previous = PREVIOUS_STATE.get(session.state)
        if previous is None:
            raise InvalidTransition(f"Cannot go back from {session.state.value}")
        self._transition(session, previous)
        await self.sessions.save(session)
        return session

    async def abandon(self, session_id: str, user: Optional[Dict[str, Any]]) -> BookingSession:
        session = await self.get(session_id, user)
        self._transition(session, SessionState.ABANDONED)
        await self.sessions.save(session)
        logger.info(f"Session {session.id}: abandoned")
        return session

    async def confirm(self, session_id: str, user: Optional[Dict[str, Any]]) -> Booking:
        """
        Payment -> Confirmed.

        Writes the booking first; if that write fails the session stays
        in payment and a retryable StoreWriteFailure reaches the caller.
        """
        if not user or not user.get("uid"):
            raise AuthorizationError("Please sign in to complete your booking")

        session = await self.get(session_id, user)
        self._require_state(session, SessionState.PAYMENT)
        # Not atomic with the booking write below: two concurrent confirms of one
        # session can both pass this check. Sessions are driven by a single client.

        collector = self._collector(session)
        collector.require_complete()
        fare = self.fare_calculator.calculate(session.train.price, len(collector.passengers)).rounded()

        train = session.train
        booking = Booking(
            user_id=user["uid"],
            train_id=train.id,
            train_name=train.train_name,
            train_number=train.train_number,
            origin=session.origin,
            destination=session.destination,
            travel_date=session.travel_date,
            departure_time=train.departure_time,
            arrival_time=train.arrival_time,
            selected_class=session.selected_class,
            quota=self.quota,
            seats=session.selected_seat_numbers(),
            num_passengers=len(collector.passengers),
            passengers=collector.passengers,
            fare=fare,
            pnr=generate_pnr(self.rng),
            transaction_id=generate_transaction_id(self.rng),
            session_id=session.id,
            created_at=utcnow(),
        )

        booking.id = await self.bookings.create(booking)

        self._transition(session, SessionState.CONFIRMED)
        session.user_id = user["uid"]
        session.booking_id = booking.id
        session.passengers = []
        try:
            await self.sessions.save(session)
        except StoreWriteFailure:
            # The booking is already stored; it stays the record of truth
            logger.error(f"Session {session.id}: booking {booking.id} stored but session update failed")

        logger.info(f"Session {session.id}: confirmed booking {booking.id} PNR {booking.pnr}")
        return booking

    # -------------------------
    # Fare
    # -------------------------

    def fare_for(self, session: BookingSession) -> Optional[FareBreakdown]:
        """Fare for the passengers entered so far; None before the first one"""
        if not session.passengers:
            return None
        return self.fare_calculator.calculate(session.train.price, len(session.passengers)).rounded()

    # -------------------------
    # Internal Utilities
    # -------------------------

    def _validate_trip(self, travel_date: date, selected_class: str) -> None:
        if travel_date < self.today():
            raise ValidationError("Travel date cannot be in the past", field="travel_date")
        if selected_class not in KNOWN_CLASSES:
            raise ValidationError(f"Unknown class {selected_class}", field="selected_class")

    def _regenerate_layout(self, session: BookingSession) -> None:
        grid = generate_for_train(
            session.train,
            session.selected_class,
            availability_rate=self.availability_rate,
            rng=self.rng,
        )
        session.layout_rows = len(grid)
        session.seats = [seat for row in grid for seat in row]
        session.selected_seat_ids = []
        session.passengers = []
        session.prefill = None

    def _collector(self, session: BookingSession) -> PassengerCollector:
        return PassengerCollector(
            session.selected_seat_numbers(),
            passengers=session.passengers,
            prefill=session.prefill,
        )

    def _apply(self, session: BookingSession, collector: PassengerCollector) -> None:
        session.passengers = collector.passengers
        session.prefill = collector.prefill

    def _check_owner(self, session: BookingSession, user: Optional[Dict[str, Any]]) -> None:
        if session.user_id is None:
            return
        if not user or user.get("uid") != session.user_id:
            raise AuthorizationError("This booking session belongs to another user")

    def _require_state(self, session: BookingSession, *states: SessionState) -> None:
        if session.state not in states:
            allowed = ", ".join(s.value for s in states)
            raise InvalidTransition(
                f"Not allowed while the booking is in {session.state.value} (requires {allowed})"
            )

    def _transition(self, session: BookingSession, to_state: SessionState) -> None:
        """Enforce the transition table"""
        if to_state not in TRANSITIONS[session.state]:
            logger.warning(f"Session {session.id}: blocked transition {session.state.value} -> {to_state.value}")
            raise InvalidTransition(f"Cannot move from {session.state.value} to {to_state.value}")
        logger.info(f"Session {session.id}: {session.state.value} -> {to_state.value}")
        session.state = to_state

