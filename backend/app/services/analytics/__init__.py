"""Travel analytics package"""
from app.services.analytics.travel import TravelAnalytics, summarize

__all__ = [
    'TravelAnalytics',
    'summarize',
]
