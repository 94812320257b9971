"""
Per-user travel analytics for the current calendar year
"""
import logging
from collections import Counter
from datetime import date
from typing import Callable, List

from app.schemas.analytics import (
    AnalyticsResponse,
    DestinationCount,
    MonthlyBookings,
    MonthlySpending,
)
from app.schemas.booking import Booking, BookingStatus
from app.services.booking.store import BookingStore

logger = logging.getLogger(__name__)

MONTHS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]
TOP_DESTINATIONS = 3


def summarize(bookings: List[Booking], year: int) -> AnalyticsResponse:
    """Aggregate non-cancelled bookings travelling in `year`"""
    counted = [
        b for b in bookings
        if b.travel_date.year == year and b.status != BookingStatus.CANCELLED
    ]

    monthly_counts = [0] * 12
    monthly_amounts = [0.0] * 12
    for booking in counted:
        month = booking.travel_date.month - 1
        monthly_counts[month] += 1
        monthly_amounts[month] += booking.fare.total_price

    destinations = Counter(b.destination for b in counted)

    return AnalyticsResponse(
        year=year,
        total_bookings=len(counted),
        total_spent=round(sum(b.fare.total_price for b in counted), 2),
        top_destinations=[
            DestinationCount(station=station, count=count)
            for station, count in destinations.most_common(TOP_DESTINATIONS)
        ],
        monthly_bookings=[
            MonthlyBookings(month=name, bookings=monthly_counts[i])
            for i, name in enumerate(MONTHS)
        ],
        monthly_spending=[
            MonthlySpending(month=name, amount=round(monthly_amounts[i], 2))
            for i, name in enumerate(MONTHS)
        ],
    )


class TravelAnalytics:

    def __init__(self, bookings: BookingStore, today: Callable[[], date] = date.today):
        self.bookings = bookings
        self.today = today

    async def for_user(self, user_id: str) -> AnalyticsResponse:
        bookings = await self.bookings.list_for_user(user_id, descending=True)
        report = summarize(bookings, self.today().year)
        logger.info(f"Analytics for {user_id}: {report.total_bookings} bookings in {report.year}")
        return report
