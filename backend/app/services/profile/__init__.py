"""Profile services package"""
from app.services.profile.saved_passengers import SavedPassengerStore

__all__ = [
    'SavedPassengerStore',
]
