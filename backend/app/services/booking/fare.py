"""
Fare calculator

ticket_fare     = base_price * passengers
convenience_fee = fixed_base + per_passenger_rate * passengers
total_price     = ticket_fare + convenience_fee
"""
from dataclasses import dataclass

from app.core.errors import ValidationError
from app.schemas.booking import FareBreakdown

DEFAULT_FIXED_BASE = 20.0
DEFAULT_PER_PASSENGER_RATE = 11.80


@dataclass(frozen=True)
class Fare:
    """Unrounded fare amounts"""
    ticket_fare: float
    convenience_fee: float
    total_price: float

    def rounded(self) -> FareBreakdown:
        """
        Two-decimal amounts for storage and display.

        The total is summed from the rounded parts so that
        total == fare + fee holds on the stored values too.
        """
        ticket_fare = round(self.ticket_fare, 2)
        convenience_fee = round(self.convenience_fee, 2)
        return FareBreakdown(
            ticket_fare=ticket_fare,
            convenience_fee=convenience_fee,
            total_price=round(ticket_fare + convenience_fee, 2),
        )


class FareCalculator:
    """Flat-plus-per-passenger convenience fee policy"""

    def __init__(
        self,
        fixed_base: float = DEFAULT_FIXED_BASE,
        per_passenger_rate: float = DEFAULT_PER_PASSENGER_RATE,
    ):
        self.fixed_base = fixed_base
        self.per_passenger_rate = per_passenger_rate

    def calculate(self, base_price: float, passenger_count: int) -> Fare:
        if base_price < 0:
            raise ValidationError("Base price cannot be negative", field="base_price")
        if passenger_count < 1:
            raise ValidationError("At least one passenger is required", field="passenger_count")

        ticket_fare = base_price * passenger_count
        convenience_fee = self.fixed_base + self.per_passenger_rate * passenger_count
        return Fare(
            ticket_fare=ticket_fare,
            convenience_fee=convenience_fee,
            total_price=ticket_fare + convenience_fee,
        )
