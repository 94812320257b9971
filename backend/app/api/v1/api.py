from fastapi import APIRouter
from app.api.v1.trains import router as trains_router
from app.api.v1.booking_sessions import router as booking_sessions_router
from app.api.v1.bookings import router as bookings_router
from app.api.v1.analytics import router as analytics_router
from app.api.v1.profile import router as profile_router
from app.api.v1.assistant import router as assistant_router

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(trains_router)
api_router.include_router(booking_sessions_router)
api_router.include_router(bookings_router)
api_router.include_router(analytics_router)
api_router.include_router(profile_router)
api_router.include_router(assistant_router)
