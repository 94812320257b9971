"""
Firestore-backed stores for bookings and booking sessions.
Sync Firestore calls are wrapped in asyncio.to_thread so they do not block FastAPI.
"""
import asyncio
import logging
from datetime import datetime
from typing import List

from google.cloud.firestore_v1 import FieldFilter

from app.core.errors import NotFound, StoreWriteFailure
from app.core.firebase import Collections, utcnow
from app.schemas.booking import Booking, BookingSession, BookingStatus

logger = logging.getLogger(__name__)


class BookingStore:
    """Confirmed bookings, keyed by a store-assigned document id"""

    def __init__(self, db):
        self.db = db

    async def create(self, booking: Booking) -> str:
        """Write a booking and return the id Firestore assigned to it"""
        def _work():
            doc_ref = self.db.collection(Collections.BOOKINGS).document()
            doc_ref.set(booking.to_document())
            return doc_ref.id

        try:
            booking_id = await asyncio.to_thread(_work)
        except Exception as e:
            logger.error(f"Error writing booking for user {booking.user_id}: {e}")
            raise StoreWriteFailure("We couldn't save your booking. Please try again.")

        logger.info(f"✅ Booking {booking_id} stored (PNR {booking.pnr})")
        return booking_id

    async def get(self, booking_id: str) -> Booking:
        def _work():
            doc = self.db.collection(Collections.BOOKINGS).document(booking_id).get()
            if not doc.exists:
                return None
            return Booking(id=doc.id, **doc.to_dict())

        booking = await asyncio.to_thread(_work)
        if booking is None:
            raise NotFound(f"Booking {booking_id} not found")
        return booking

    async def list_for_user(self, user_id: str, descending: bool = False) -> List[Booking]:
        """All bookings owned by a user, ordered by travel date"""
        def _work():
            docs = (
                self.db.collection(Collections.BOOKINGS)
                .where(filter=FieldFilter("user_id", "==", user_id))
                .order_by("travel_date", direction="DESCENDING" if descending else "ASCENDING")
                .stream()
            )
            return [Booking(id=doc.id, **doc.to_dict()) for doc in docs]

        return await asyncio.to_thread(_work)

    async def mark_cancelled(self, booking_id: str, cancelled_at: datetime) -> None:
        def _work():
            self.db.collection(Collections.BOOKINGS).document(booking_id).update({
                "status": BookingStatus.CANCELLED.value,
                "cancelled_at": cancelled_at,
            })

        try:
            await asyncio.to_thread(_work)
        except Exception as e:
            logger.error(f"Error cancelling booking {booking_id}: {e}")
            raise StoreWriteFailure("We couldn't cancel your booking. Please try again.")


class BookingSessionStore:
    """In-progress booking sessions"""

    def __init__(self, db):
        self.db = db

    async def get(self, session_id: str) -> BookingSession:
        def _work():
            doc = self.db.collection(Collections.BOOKING_SESSIONS).document(session_id).get()
            if not doc.exists:
                return None
            return BookingSession(id=doc.id, **doc.to_dict())

        session = await asyncio.to_thread(_work)
        if session is None:
            raise NotFound(f"Booking session {session_id} not found")
        return session

    async def save(self, session: BookingSession) -> None:
        session.updated_at = utcnow()

        def _work():
            self.db.collection(Collections.BOOKING_SESSIONS).document(session.id).set(session.to_document())

        try:
            await asyncio.to_thread(_work)
        except Exception as e:
            logger.error(f"Error saving booking session {session.id}: {e}")
            raise StoreWriteFailure("We couldn't save your progress. Please try again.")
