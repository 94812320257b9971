"""
FastAPI dependencies

Services are assembled per request from the objects create_app() puts on
app.state, so tests can swap any of them through dependency_overrides.
"""
from fastapi import Depends, Request

from app.core.config import Settings
from app.core.firebase import FirebaseClient
from app.services.analytics import TravelAnalytics
from app.services.assistant import AssistantService, PromptClient
from app.services.booking import (
    BookingFlow,
    BookingManager,
    BookingSessionStore,
    BookingStore,
    FareCalculator,
)
from app.services.catalog import TrainCatalog
from app.services.profile import SavedPassengerStore


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_firebase(request: Request) -> FirebaseClient:
    return request.app.state.firebase


def get_db(firebase: FirebaseClient = Depends(get_firebase)):
    return firebase.db


def get_catalog(request: Request) -> TrainCatalog:
    return request.app.state.catalog


def get_fare_calculator(settings: Settings = Depends(get_app_settings)) -> FareCalculator:
    return FareCalculator(
        fixed_base=settings.CONVENIENCE_FEE_BASE,
        per_passenger_rate=settings.CONVENIENCE_FEE_PER_PASSENGER,
    )


def get_booking_store(db=Depends(get_db)) -> BookingStore:
    return BookingStore(db)


def get_saved_passenger_store(db=Depends(get_db)) -> SavedPassengerStore:
    return SavedPassengerStore(db)


def get_booking_flow(
    request: Request,
    settings: Settings = Depends(get_app_settings),
    db=Depends(get_db),
    catalog: TrainCatalog = Depends(get_catalog),
    bookings: BookingStore = Depends(get_booking_store),
    saved_passengers: SavedPassengerStore = Depends(get_saved_passenger_store),
    fare_calculator: FareCalculator = Depends(get_fare_calculator),
) -> BookingFlow:
    return BookingFlow(
        catalog=catalog,
        sessions=BookingSessionStore(db),
        bookings=bookings,
        saved_passengers=saved_passengers,
        fare_calculator=fare_calculator,
        availability_rate=settings.SEAT_AVAILABILITY_RATE,
        quota=settings.BOOKING_QUOTA,
        rng=request.app.state.rng,
    )


def get_booking_manager(bookings: BookingStore = Depends(get_booking_store)) -> BookingManager:
    return BookingManager(bookings)


def get_travel_analytics(bookings: BookingStore = Depends(get_booking_store)) -> TravelAnalytics:
    return TravelAnalytics(bookings)


def get_assistant(
    request: Request,
    settings: Settings = Depends(get_app_settings),
    db=Depends(get_db),
    bookings: BookingStore = Depends(get_booking_store),
) -> AssistantService:
    client = PromptClient(
        settings.GEMINI_API_KEY,
        model=settings.GEMINI_MODEL,
        timeout=settings.PROMPT_TIMEOUT_SECONDS,
        transport=request.app.state.prompt_transport,
    )
    return AssistantService(client, bookings, db)
