"""
Booking management: listing, details and cancellation of confirmed bookings
"""
import logging
from datetime import date
from typing import Any, Callable, Dict

from app.core.errors import AuthorizationError, InvalidTransition
from app.core.firebase import utcnow
from app.schemas.booking import Booking, BookingListResponse, BookingResponse, BookingStatus
from app.services.booking.store import BookingStore

logger = logging.getLogger(__name__)


class BookingManager:

    def __init__(self, bookings: BookingStore, today: Callable[[], date] = date.today):
        self.bookings = bookings
        self.today = today

    def to_response(self, booking: Booking) -> BookingResponse:
        return BookingResponse(
            **booking.model_dump(),
            display_status=booking.effective_status(self.today()),
        )

    async def list_for_user(self, user: Dict[str, Any]) -> BookingListResponse:
        """
        Split a user's bookings into upcoming and past.

        Upcoming: not cancelled and travel date today or later, soonest first.
        Past: everything else, most recent first.
        """
        bookings = await self.bookings.list_for_user(user["uid"])
        today = self.today()

        upcoming = []
        past = []
        for booking in bookings:
            if booking.effective_status(today) == BookingStatus.UPCOMING:
                upcoming.append(self.to_response(booking))
            else:
                past.append(self.to_response(booking))

        past.sort(key=lambda b: b.travel_date, reverse=True)
        return BookingListResponse(upcoming=upcoming, past=past)

    async def get(self, booking_id: str, user: Dict[str, Any]) -> Booking:
        booking = await self.bookings.get(booking_id)
        if booking.user_id != user["uid"]:
            logger.warning(f"User {user['uid']} denied access to booking {booking_id}")
            raise AuthorizationError("You do not have access to this booking")
        return booking

    async def cancel(self, booking_id: str, user: Dict[str, Any]) -> Booking:
        """Cancel an upcoming booking; cancelling twice changes nothing"""
        booking = await self.get(booking_id, user)

        if booking.status == BookingStatus.CANCELLED:
            return booking
        if booking.effective_status(self.today()) == BookingStatus.COMPLETED:
            raise InvalidTransition("Completed journeys cannot be cancelled")

        cancelled_at = utcnow()
        await self.bookings.mark_cancelled(booking_id, cancelled_at)
        logger.info(f"Booking {booking_id} cancelled (PNR {booking.pnr})")
        return booking.model_copy(update={
            "status": BookingStatus.CANCELLED,
            "cancelled_at": cancelled_at,
        })
