"""
Travel analytics response schemas
"""
from typing import List

from pydantic import BaseModel


class DestinationCount(BaseModel):
    station: str
    count: int


class MonthlyBookings(BaseModel):
    month: str
    bookings: int


class MonthlySpending(BaseModel):
    month: str
    amount: float


class AnalyticsResponse(BaseModel):
    year: int
    total_bookings: int
    total_spent: float
    top_destinations: List[DestinationCount]
    monthly_bookings: List[MonthlyBookings]
    monthly_spending: List[MonthlySpending]
