"""Tests for coach layout generation."""

import random

import pytest

from app.schemas.train import BerthType, SeatStatus
from app.services.catalog import TrainCatalog
from app.services.seating import CLASS_LAYOUTS, generate_for_train, generate_layout
from app.services.seating.layout import DEFAULT_AVAILABILITY_RATE


@pytest.mark.parametrize(
    "class_code, rows, seats",
    [("1A", 12, 24), ("2A", 18, 54), ("3A", 18, 72), ("SL", 18, 72), ("2S", 18, 108)],
)
def test_grid_has_configured_rows_and_seats(class_code: str, rows: int, seats: int) -> None:
    grid = generate_layout(CLASS_LAYOUTS[class_code], rng=random.Random(1))

    assert len(grid) == rows
    assert sum(1 for row in grid for seat in row if seat.is_seat) == seats
    assert CLASS_LAYOUTS[class_code].seat_count == seats


def test_seat_numbers_strictly_increase_in_row_major_order() -> None:
    grid = generate_layout(CLASS_LAYOUTS["3A"], rng=random.Random(1))

    numbers = [seat.number for row in grid for seat in row if seat.is_seat]

    assert numbers == list(range(1, len(numbers) + 1))


def test_structural_cells_have_no_number_and_are_unavailable() -> None:
    grid = generate_layout(CLASS_LAYOUTS["2A"], rng=random.Random(1))

    structural = [seat for row in grid for seat in row if not seat.is_seat]

    assert structural
    assert all(seat.number is None for seat in structural)
    assert all(seat.status == SeatStatus.UNAVAILABLE for seat in structural)
    assert {seat.berth for seat in structural} == {BerthType.AISLE}


def test_first_class_cabins_have_doors() -> None:
    grid = generate_layout(CLASS_LAYOUTS["1A"], rng=random.Random(1))

    assert all(any(seat.berth == BerthType.DOOR for seat in row) for row in grid)


def test_side_berths_alternate_down_the_coach() -> None:
    grid = generate_layout(CLASS_LAYOUTS["SL"], rng=random.Random(1))

    assert grid[0][-1].berth == BerthType.SIDE_LOWER
    assert grid[1][-1].berth == BerthType.SIDE_UPPER


def test_availability_rate_bounds() -> None:
    all_open = generate_layout(CLASS_LAYOUTS["SL"], availability_rate=1.0, rng=random.Random(3))
    all_booked = generate_layout(CLASS_LAYOUTS["SL"], availability_rate=0.0, rng=random.Random(3))

    assert all(s.status == SeatStatus.AVAILABLE for row in all_open for s in row if s.is_seat)
    assert all(s.status == SeatStatus.BOOKED for row in all_booked for s in row if s.is_seat)


def test_same_seed_gives_same_grid() -> None:
    first = generate_layout(CLASS_LAYOUTS["3A"], rng=random.Random(11))
    second = generate_layout(CLASS_LAYOUTS["3A"], rng=random.Random(11))

    assert first == second


def test_class_without_layout_gives_empty_grid() -> None:
    tejas = TrainCatalog().get("T007")

    assert generate_for_train(tejas, "economy", rng=random.Random(1)) == []


def test_class_not_offered_by_train_gives_empty_grid() -> None:
    rajdhani = TrainCatalog().get("T001")

    assert generate_for_train(rajdhani, "SL", rng=random.Random(1)) == []


class FixedRandom(random.Random):
    def __init__(self, value: float):
        super().__init__(0)
        self.value = value

    def random(self) -> float:
        return self.value


def test_default_rate_opens_about_seventy_percent() -> None:
    rng = random.Random(2024)
    seats = [
        seat
        for _ in range(50)
        for row in generate_layout(CLASS_LAYOUTS["2S"], rng=rng)
        for seat in row
        if seat.is_seat
    ]

    share = sum(1 for s in seats if s.status == SeatStatus.AVAILABLE) / len(seats)

    assert DEFAULT_AVAILABILITY_RATE == 0.7
    assert share == pytest.approx(0.7, abs=0.03)


@pytest.mark.parametrize(
    "draw, expected",
    [(0.69, SeatStatus.AVAILABLE), (0.7, SeatStatus.BOOKED), (0.71, SeatStatus.BOOKED)],
)
def test_draw_below_rate_means_available(draw: float, expected: SeatStatus) -> None:
    grid = generate_layout(CLASS_LAYOUTS["1A"], rng=FixedRandom(draw))

    assert {s.status for row in grid for s in row if s.is_seat} == {expected}
