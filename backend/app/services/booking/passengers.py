"""
Passenger collector

One passenger per selected seat. Seats are assigned by position:
passenger i sits in selected seat i, so removing a passenger moves
everyone after them up one seat.
Deselecting seats drops the trailing passengers.
"""
import logging
from typing import List, Optional, Union

import pydantic

from app.core.errors import CapacityExceeded, ValidationError
from app.schemas.passenger import Passenger, PassengerDetails, PassengerInput

logger = logging.getLogger(__name__)


class PassengerCollector:

    def __init__(
        self,
        seat_numbers: List[int],
        passengers: Optional[List[Passenger]] = None,
        prefill: Optional[PassengerDetails] = None,
    ):
        self.seat_numbers = list(seat_numbers)
        self.passengers: List[Passenger] = list(passengers or [])
        self.prefill = prefill
        self._reassign()

    @property
    def capacity(self) -> int:
        return len(self.seat_numbers)

    def add_passenger(self, details: Optional[Union[PassengerInput, PassengerDetails]] = None) -> Passenger:
        """
        Append a passenger, filling gaps from the staged template.

        Raises:
            CapacityExceeded: every selected seat already has a passenger
            ValidationError: merged fields fail the passenger constraints
        """
        if len(self.passengers) >= self.capacity:
            raise CapacityExceeded(
                f"You have selected {self.capacity} seat(s); "
                f"remove a passenger or select more seats to add another."
            )

        merged = {}
        if self.prefill is not None:
            merged.update(self.prefill.model_dump(exclude={"is_senior"}))
        if details is not None:
            merged.update(details.model_dump(exclude={"is_senior"}, exclude_none=True))

        try:
            validated = PassengerDetails.model_validate(merged)
        except pydantic.ValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(p) for p in first.get("loc", ())) or None
            raise ValidationError(first.get("msg", "Invalid passenger details"), field=field)

        passenger = Passenger(**validated.model_dump(exclude={"is_senior"}))
        self.passengers.append(passenger)
        self.prefill = None
        self._reassign()
        logger.info(f"Passenger added ({len(self.passengers)}/{self.capacity})")
        return passenger

    def remove_passenger(self, index: int) -> Passenger:
        if index < 0 or index >= len(self.passengers):
            raise ValidationError(f"No passenger at position {index}", field="index")
        removed = self.passengers.pop(index)
        self._reassign()
        return removed

    def prefill_from(self, saved_profile: PassengerDetails) -> None:
        """Stage a template for the next add; does not use up a seat"""
        self.prefill = PassengerDetails(**saved_profile.model_dump(exclude={"is_senior"}))

    def rebind(self, seat_numbers: List[int]) -> None:
        """Follow a change in the selected seats"""
        self.seat_numbers = list(seat_numbers)
        self._reassign()

    def is_complete(self) -> bool:
        return 0 < len(self.passengers) == self.capacity

    def require_complete(self) -> None:
        if not self.is_complete():
            raise CapacityExceeded(
                f"Please add details for exactly {self.capacity} passenger(s); "
                f"you have added {len(self.passengers)}."
            )

    def _reassign(self) -> None:
        # Passengers past the last selected seat have nowhere to sit
        if len(self.passengers) > self.capacity:
            dropped = len(self.passengers) - self.capacity
            del self.passengers[self.capacity:]
            logger.info(f"Dropped {dropped} passenger(s) after seats were deselected")
        for passenger, seat_number in zip(self.passengers, self.seat_numbers):
            passenger.seat_number = seat_number
