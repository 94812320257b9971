"""Seat layout package"""
from app.services.seating.layout import (
    CLASS_LAYOUTS,
    NO_LAYOUT_MESSAGE,
    CoachLayout,
    generate_for_train,
    generate_layout,
    layout_for,
)

__all__ = [
    'CLASS_LAYOUTS',
    'NO_LAYOUT_MESSAGE',
    'CoachLayout',
    'generate_for_train',
    'generate_layout',
    'layout_for',
]
