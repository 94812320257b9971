"""Tests for the passenger collector."""

import pytest

from app.core.errors import CapacityExceeded, ValidationError
from app.schemas.passenger import PassengerDetails, PassengerInput
from app.services.booking import PassengerCollector


def _details(name: str = "Asha Rao", age: int = 34) -> PassengerInput:
    return PassengerInput(name=name, age=age, gender="female")


def test_passengers_get_seats_by_position() -> None:
    collector = PassengerCollector([12, 7])

    collector.add_passenger(_details("Asha Rao"))
    collector.add_passenger(_details("Ravi Rao"))

    assert [p.seat_number for p in collector.passengers] == [12, 7]
    assert collector.is_complete()


def test_adding_beyond_seat_count_is_rejected() -> None:
    collector = PassengerCollector([5])
    collector.add_passenger(_details())

    with pytest.raises(CapacityExceeded):
        collector.add_passenger(_details("Second Person"))

    assert len(collector.passengers) == 1


def test_removing_shifts_later_passengers_up_a_seat() -> None:
    collector = PassengerCollector([1, 2, 3])
    for name in ("Anil Kumar", "Bina Das", "Chetan Roy"):
        collector.add_passenger(_details(name))

    removed = collector.remove_passenger(0)

    assert removed.name == "Anil Kumar"
    assert [(p.name, p.seat_number) for p in collector.passengers] == [("Bina Das", 1), ("Chetan Roy", 2)]


def test_remove_out_of_range_is_a_validation_error() -> None:
    collector = PassengerCollector([1])

    with pytest.raises(ValidationError):
        collector.remove_passenger(0)


@pytest.mark.parametrize(
    "fields, field_name",
    [
        ({"name": "A", "age": 30, "gender": "male"}, "name"),
        ({"name": "Asha Rao", "age": 0, "gender": "female"}, "age"),
        ({"name": "Asha Rao", "age": 121, "gender": "female"}, "age"),
    ],
)
def test_invalid_fields_are_rejected(fields: dict, field_name: str) -> None:
    collector = PassengerCollector([1])

    with pytest.raises(ValidationError) as excinfo:
        collector.add_passenger(PassengerInput(**fields))

    assert excinfo.value.field == field_name
    assert collector.passengers == []


def test_prefill_fills_missing_fields_and_is_consumed() -> None:
    collector = PassengerCollector([1, 2])
    collector.prefill_from(PassengerDetails(name="Meera Iyer", age=64, gender="female", preferred_berth="lower"))

    passenger = collector.add_passenger(PassengerInput(age=65))

    assert passenger.name == "Meera Iyer"
    assert passenger.age == 65
    assert passenger.preferred_berth == "lower"
    assert passenger.is_senior
    assert collector.prefill is None


def test_prefill_does_not_use_a_seat() -> None:
    collector = PassengerCollector([1])
    collector.prefill_from(PassengerDetails(name="Meera Iyer", age=40, gender="female"))

    assert collector.passengers == []
    assert not collector.is_complete()


def test_require_complete_reports_mismatch() -> None:
    collector = PassengerCollector([1, 2])
    collector.add_passenger(_details())

    with pytest.raises(CapacityExceeded):
        collector.require_complete()


def test_rebind_follows_new_seat_selection() -> None:
    collector = PassengerCollector([1, 2])
    collector.add_passenger(_details())

    collector.rebind([9])

    assert collector.passengers[0].seat_number == 9


def test_rebind_to_fewer_seats_drops_trailing_passengers() -> None:
    collector = PassengerCollector([1, 2])
    collector.add_passenger(_details())
    collector.add_passenger(_details())

    collector.rebind([2])

    assert len(collector.passengers) == 1
    assert collector.passengers[0].seat_number == 2
