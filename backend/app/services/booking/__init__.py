"""Booking services package"""
from app.services.booking.fare import Fare, FareCalculator
from app.services.booking.flow import BookingFlow, TRANSITIONS
from app.services.booking.manager import BookingManager
from app.services.booking.passengers import PassengerCollector
from app.services.booking.store import BookingSessionStore, BookingStore

__all__ = [
    'BookingFlow',
    'BookingManager',
    'BookingSessionStore',
    'BookingStore',
    'Fare',
    'FareCalculator',
    'PassengerCollector',
    'TRANSITIONS',
]
