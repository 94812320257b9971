"""
Saved passenger templates stored per user
"""
import asyncio
import logging
import uuid
from typing import List

from google.cloud.firestore_v1 import FieldFilter

from app.core.errors import AuthorizationError, NotFound, StoreWriteFailure
from app.core.firebase import Collections, utcnow
from app.schemas.passenger import PassengerDetails, SavedPassenger

logger = logging.getLogger(__name__)


class SavedPassengerStore:

    def __init__(self, db):
        self.db = db

    async def list_for_user(self, user_id: str) -> List[SavedPassenger]:
        def _work():
            docs = (
                self.db.collection(Collections.SAVED_PASSENGERS)
                .where(filter=FieldFilter("user_id", "==", user_id))
                .order_by("created_at")
                .stream()
            )
            return [SavedPassenger(id=doc.id, **doc.to_dict()) for doc in docs]

        return await asyncio.to_thread(_work)

    async def get(self, passenger_id: str, user_id: str) -> SavedPassenger:
        """Saved passenger owned by user_id"""
        def _work():
            doc = self.db.collection(Collections.SAVED_PASSENGERS).document(passenger_id).get()
            return SavedPassenger(id=doc.id, **doc.to_dict()) if doc.exists else None

        saved = await asyncio.to_thread(_work)
        if saved is None:
            raise NotFound(f"Saved passenger {passenger_id} not found")
        if saved.user_id != user_id:
            raise AuthorizationError("You are not allowed to use this saved passenger")
        return saved

    async def create(self, user_id: str, details: PassengerDetails) -> SavedPassenger:
        now = utcnow()
        saved = SavedPassenger(
            id=uuid.uuid4().hex,
            user_id=user_id,
            created_at=now,
            updated_at=now,
            **details.model_dump(exclude={"is_senior"}),
        )
        await self._write(saved)
        logger.info(f"Saved passenger {saved.id} created for user {user_id}")
        return saved

    async def update(self, passenger_id: str, user_id: str, details: PassengerDetails) -> SavedPassenger:
        existing = await self.get(passenger_id, user_id)
        updated = existing.model_copy(update={
            **details.model_dump(exclude={"is_senior"}),
            "updated_at": utcnow(),
        })
        await self._write(updated)
        return updated

    async def delete(self, passenger_id: str, user_id: str) -> None:
        await self.get(passenger_id, user_id)

        def _work():
            self.db.collection(Collections.SAVED_PASSENGERS).document(passenger_id).delete()

        try:
            await asyncio.to_thread(_work)
        except Exception as e:
            logger.error(f"Error deleting saved passenger {passenger_id}: {e}")
            raise StoreWriteFailure("We couldn't remove this passenger. Please try again.")

    async def _write(self, saved: SavedPassenger) -> None:
        def _work():
            self.db.collection(Collections.SAVED_PASSENGERS).document(saved.id).set(
                saved.model_dump(exclude={"id", "is_senior"})
            )

        try:
            await asyncio.to_thread(_work)
        except Exception as e:
            logger.error(f"Error saving passenger {saved.id}: {e}")
            raise StoreWriteFailure("We couldn't save this passenger. Please try again.")
