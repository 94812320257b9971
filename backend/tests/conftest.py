"""Shared fixtures: in-memory Firestore, a booking flow with a fixed clock, and an API client."""

import random
from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.core.firebase import MockFirestoreClient
from app.main import create_app
from app.services.booking import (
    BookingFlow,
    BookingManager,
    BookingSessionStore,
    BookingStore,
    FareCalculator,
)
from app.services.catalog import TrainCatalog
from app.services.profile import SavedPassengerStore

TODAY = date(2026, 3, 10)


@pytest.fixture
def db() -> MockFirestoreClient:
    return MockFirestoreClient()


@pytest.fixture
def booking_store(db) -> BookingStore:
    return BookingStore(db)


@pytest.fixture
def session_store(db) -> BookingSessionStore:
    return BookingSessionStore(db)


@pytest.fixture
def saved_passenger_store(db) -> SavedPassengerStore:
    return SavedPassengerStore(db)


@pytest.fixture
def flow(booking_store, session_store, saved_passenger_store) -> BookingFlow:
    """Every seat available, so tests can pick any seat number."""
    return BookingFlow(
        catalog=TrainCatalog(),
        sessions=session_store,
        bookings=booking_store,
        saved_passengers=saved_passenger_store,
        fare_calculator=FareCalculator(),
        availability_rate=1.0,
        rng=random.Random(42),
        today=lambda: TODAY,
    )


@pytest.fixture
def manager(booking_store) -> BookingManager:
    return BookingManager(booking_store, today=lambda: TODAY)


@pytest.fixture
def user() -> dict:
    return {"uid": "user-1", "email": "asha@example.com"}


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        USE_MOCK_FIREBASE=True,
        GEMINI_API_KEY="test-key",
        SEAT_AVAILABILITY_RATE=1.0,
    )


@pytest.fixture
def client(settings):
    app = create_app(settings, rng=random.Random(7))
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers() -> dict:
    """Mock auth accepts the uid itself as the bearer token."""
    return {"Authorization": "Bearer user-1"}


@pytest.fixture
def travel_date() -> str:
    return (date.today() + timedelta(days=7)).isoformat()
