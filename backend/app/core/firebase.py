"""
Firebase integration for Rail Connect
Firestore database and Firebase Authentication
"""
import copy
import json
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import firebase_admin
from firebase_admin import auth, credentials, firestore

from app.core.config import Settings

logger = logging.getLogger(__name__)


# ==================== In-memory Firestore (development / tests) ====================

_OPERATORS = {
    "==": lambda a, b: a == b,
    "!=": lambda a, b: a != b,
    "<": lambda a, b: a is not None and a < b,
    "<=": lambda a, b: a is not None and a <= b,
    ">": lambda a, b: a is not None and a > b,
    ">=": lambda a, b: a is not None and a >= b,
    "in": lambda a, b: a in b,
    "not-in": lambda a, b: a not in b,
    "array_contains": lambda a, b: isinstance(a, list) and b in a,
}


class MockQuery:
    """Mock Firestore query supporting where/order_by/limit/stream"""

    def __init__(self, path: str, data_store: dict, filters=None, orders=None, limit_count=None):
        self.path = path
        self._data = data_store
        self._filters = list(filters or [])
        self._orders = list(orders or [])
        self._limit = limit_count

    def _derive(self, **changes) -> "MockQuery":
        params = {
            "filters": self._filters,
            "orders": self._orders,
            "limit_count": self._limit,
        }
        params.update(changes)
        return MockQuery(self.path, self._data, **params)

    def where(self, field_path: Optional[str] = None, op_string: Optional[str] = None,
              value: Any = None, *, filter=None) -> "MockQuery":
        """Mock where query; accepts positional args or a FieldFilter"""
        if filter is not None:
            field_path, op_string, value = filter.field_path, filter.op_string, filter.value
        if op_string not in _OPERATORS:
            raise ValueError(f"Unsupported operator: {op_string}")
        return self._derive(filters=self._filters + [(field_path, op_string, value)])

    def order_by(self, field_path: str, direction: str = "ASCENDING") -> "MockQuery":
        return self._derive(orders=self._orders + [(field_path, direction)])

    def limit(self, count: int) -> "MockQuery":
        return self._derive(limit_count=count)

    def stream(self):
        docs = self._data.get(self.path, {})
        snapshots = []
        for doc_id, doc_data in docs.items():
            if all(_OPERATORS[op](doc_data.get(field), value) for field, op, value in self._filters):
                snapshots.append(MockDocumentSnapshot(f"{self.path}/{doc_id}", doc_data, doc_id))

        # Stable sorts applied from the last ordering key to the first
        for field, direction in reversed(self._orders):
            snapshots.sort(
                key=lambda s: (s.to_dict().get(field) is None, s.to_dict().get(field)),
                reverse=direction == "DESCENDING",
            )

        if self._limit is not None:
            snapshots = snapshots[:self._limit]
        return snapshots

    def get(self):
        return self.stream()


class MockCollection(MockQuery):
    """Mock Firestore collection"""

    def __init__(self, path: str, data_store: dict):
        super().__init__(path, data_store)
        self.id = path.split("/")[-1]
        self._data.setdefault(path, {})

    def document(self, doc_id: Optional[str] = None) -> "MockDocument":
        """Return a mock document; auto-generates an id when none is given"""
        return MockDocument(f"{self.path}/{doc_id or uuid.uuid4().hex}", self._data)

    def add(self, data: dict):
        doc = self.document()
        doc.set(data)
        return (datetime.now(tz=timezone.utc), doc)


class MockDocument:
    """Mock Firestore document reference"""

    def __init__(self, path: str, data_store: dict):
        self.path = path
        self._data = data_store
        self.collection_path, _, self.id = path.rpartition("/")

    def get(self, transaction=None) -> "MockDocumentSnapshot":
        data = self._data.get(self.collection_path, {}).get(self.id)
        return MockDocumentSnapshot(self.path, data, self.id)

    def set(self, data: dict, merge: bool = False) -> None:
        docs = self._data.setdefault(self.collection_path, {})
        if merge and self.id in docs:
            docs[self.id].update(copy.deepcopy(data))
        else:
            docs[self.id] = copy.deepcopy(data)

    def update(self, data: dict) -> None:
        docs = self._data.setdefault(self.collection_path, {})
        if self.id not in docs:
            # Matches the real client, which refuses to update a missing document
            raise KeyError(f"No document to update: {self.path}")
        docs[self.id].update(copy.deepcopy(data))

    def delete(self) -> None:
        self._data.get(self.collection_path, {}).pop(self.id, None)

    def collection(self, name: str) -> MockCollection:
        return MockCollection(f"{self.path}/{name}", self._data)


class MockDocumentSnapshot:
    """Mock document snapshot"""

    def __init__(self, path: str, data: Optional[dict], doc_id: Optional[str] = None):
        self.id = doc_id or path.split("/")[-1]
        self._data = data

    @property
    def exists(self) -> bool:
        return self._data is not None

    def to_dict(self) -> Optional[dict]:
        return copy.deepcopy(self._data) if self._data is not None else None


class MockFirestoreClient:
    """Mock Firestore client for development without Firebase credentials"""

    def __init__(self):
        self._data: Dict[str, Dict[str, dict]] = {}
        logger.info("🔧 Using Mock Firestore Client for development")

    def collection(self, name: str) -> MockCollection:
        return MockCollection(name, self._data)

    def document(self, path: str) -> MockDocument:
        return MockDocument(path, self._data)


class MockUserRecord:
    def __init__(self, uid: str, email: str, display_name: Optional[str] = None):
        self.uid = uid
        self.email = email
        self.display_name = display_name
        self.email_verified = False


class MockAuth:
    """Mock Firebase Auth for development: the bearer token is the uid"""

    def __init__(self):
        self._users: Dict[str, MockUserRecord] = {}

    def verify_id_token(self, token: str) -> Dict[str, Any]:
        if not token:
            raise ValueError("Invalid ID token")
        user = self._users.get(token)
        return {
            "uid": token,
            "email": user.email if user else f"{token}@example.com",
            "email_verified": True,
            "name": (user.display_name if user else None) or token,
        }

    def create_user(self, email: str, password: str, display_name: Optional[str] = None,
                    email_verified: bool = False) -> MockUserRecord:
        if any(u.email == email for u in self._users.values()):
            raise auth.EmailAlreadyExistsError("Email already exists", None, None)
        record = MockUserRecord(uuid.uuid4().hex, email, display_name)
        self._users[record.uid] = record
        return record

    def update_user(self, uid: str, **kwargs) -> None:
        user = self._users.get(uid)
        if user and "display_name" in kwargs:
            user.display_name = kwargs["display_name"]


# ==================== Firebase Client ====================

class FirebaseClient:
    """
    Firebase Admin SDK client.

    Built once per application from Settings and handed to services;
    there is no module-level instance.

    Supports three modes:
    1. Mock mode (USE_MOCK_FIREBASE=True) - for development without credentials
    2. GOOGLE_APPLICATION_CREDENTIALS pointing to a JSON file (production recommended)
    3. FIREBASE_CREDENTIALS_JSON with an inline JSON string (alternative)
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self.mock_mode = settings.USE_MOCK_FIREBASE
        if self.mock_mode:
            logger.warning("🔧 Running in MOCK mode - using in-memory database (no real Firebase)")
            self._db = MockFirestoreClient()
            self._auth_client = MockAuth()
            return
        self._initialize_firebase()

    def _initialize_firebase(self) -> None:
        try:
            if self.settings.GOOGLE_APPLICATION_CREDENTIALS:
                logger.info(
                    f"Loading Firebase credentials from GOOGLE_APPLICATION_CREDENTIALS: "
                    f"{self.settings.GOOGLE_APPLICATION_CREDENTIALS}"
                )
                cred = credentials.Certificate(self.settings.GOOGLE_APPLICATION_CREDENTIALS)
            elif self.settings.FIREBASE_CREDENTIALS_JSON:
                logger.info("Loading Firebase credentials from FIREBASE_CREDENTIALS_JSON environment variable")
                cred = credentials.Certificate(json.loads(self.settings.FIREBASE_CREDENTIALS_JSON))
            else:
                raise ValueError(
                    "Firebase credentials not found. Please set either:\n"
                    "  - USE_MOCK_FIREBASE=True (for development), or\n"
                    "  - GOOGLE_APPLICATION_CREDENTIALS=/path/to/firebase-key.json, or\n"
                    "  - FIREBASE_CREDENTIALS_JSON='{...}' (inline JSON string)"
                )

            try:
                app = firebase_admin.get_app()
            except ValueError:
                app = firebase_admin.initialize_app(cred)

            self._db = firestore.client(app)
            self._auth_client = auth
            logger.info("✅ Firebase initialized successfully")

        except Exception as e:
            logger.error(f"❌ Failed to initialize Firebase: {e}")
            raise

    @property
    def db(self):
        """Firestore client instance"""
        return self._db

    @property
    def auth_client(self):
        """Firebase Auth client"""
        return self._auth_client

    # ==================== Authentication ====================

    def verify_id_token(self, token: str) -> Dict[str, Any]:
        """
        Verify Firebase ID token and return decoded claims.

        Raises:
            ValueError: If token is invalid or expired
        """
        try:
            return self._auth_client.verify_id_token(token)
        except auth.ExpiredIdTokenError:
            raise ValueError("Token has expired")
        except auth.InvalidIdTokenError:
            raise ValueError("Invalid ID token")
        except ValueError:
            raise
        except Exception as e:
            logger.error(f"Token verification error: {e}")
            raise ValueError(f"Token verification failed: {str(e)}")

    def get_user(self, uid: str) -> Optional[Dict[str, Any]]:
        """User profile document from Firestore, or None"""
        try:
            user_doc = self._db.collection(Collections.USERS).document(uid).get()
            if user_doc.exists:
                return user_doc.to_dict()
            return None
        except Exception as e:
            logger.error(f"Error fetching user {uid}: {e}")
            return None

    def create_user(self, email: str, password: str, display_name: Optional[str] = None) -> Dict[str, Any]:
        """
        Create a Firebase Auth user and its Firestore profile.

        Raises:
            ValueError: If user creation fails
        """
        try:
            user_record = self._auth_client.create_user(
                email=email,
                password=password,
                display_name=display_name,
                email_verified=False,
            )

            now = utcnow()
            user_data = {
                "uid": user_record.uid,
                "email": email,
                "display_name": display_name or "",
                "email_verified": False,
                "created_at": now,
                "updated_at": now,
            }
            self._db.collection(Collections.USERS).document(user_record.uid).set(user_data)

            logger.info(f"✅ User created successfully: {user_record.uid}")
            return user_data

        except auth.EmailAlreadyExistsError:
            raise ValueError("Email already exists")
        except Exception as e:
            logger.error(f"Error creating user: {e}")
            raise ValueError(f"User creation failed: {str(e)}")

    def update_user(self, uid: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """Merge fields into the user profile and return the stored profile"""
        data = dict(data)
        data["updated_at"] = utcnow()
        if "display_name" in data:
            self._auth_client.update_user(uid, display_name=data["display_name"])
        self._db.collection(Collections.USERS).document(uid).set(data, merge=True)
        return self.get_user(uid) or data


# ==================== Collection References ====================

class Collections:
    """Firestore collection names"""
    USERS = "users"
    BOOKINGS = "bookings"
    BOOKING_SESSIONS = "booking_sessions"
    SAVED_PASSENGERS = "saved_passengers"
    CHAT_MESSAGES = "chat_messages"


def utcnow() -> datetime:
    """Return timezone-aware UTC datetime"""
    return datetime.now(tz=timezone.utc)

