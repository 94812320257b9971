"""
Coach seat layout generator

Builds a per-class coach grid and marks each seat available or booked at
random. Availability here is a simulation; there is no inventory behind it.
"""
import logging
import random
from dataclasses import dataclass
from typing import Dict, List, Optional

from app.schemas.train import BerthType, Seat, SeatStatus, STRUCTURAL_BERTHS, Train

logger = logging.getLogger(__name__)

DEFAULT_AVAILABILITY_RATE = 0.7

NO_LAYOUT_MESSAGE = "Seat layout is not available for this class on the selected train."


@dataclass(frozen=True)
class CoachLayout:
    """Shape of one coach"""
    rows: int
    bays: int  # berth (or seat) columns on the main side of each row
    has_middle: bool
    has_side: bool
    prefix: str  # coach code, also used as the seat id prefix
    cabin_door: bool = False
    seating: bool = False

    def row_pattern(self, row_index: int) -> List[BerthType]:
        """Berth types for one grid row, left to right"""
        if self.seating:
            cells = [BerthType.SEAT] * self.bays
        else:
            stack = [BerthType.LOWER, BerthType.MIDDLE, BerthType.UPPER] if self.has_middle \
                else [BerthType.LOWER, BerthType.UPPER]
            cells = [stack[i % len(stack)] for i in range(self.bays)]

        if self.cabin_door:
            cells.append(BerthType.DOOR)

        if self.has_side:
            cells.append(BerthType.AISLE)
            if self.seating:
                cells.extend([BerthType.SEAT] * self.bays)
            else:
                # Side berths alternate down the coach
                cells.append(BerthType.SIDE_LOWER if row_index % 2 == 0 else BerthType.SIDE_UPPER)
        return cells

    @property
    def seat_count(self) -> int:
        return sum(
            1
            for r in range(self.rows)
            for berth in self.row_pattern(r)
            if berth not in STRUCTURAL_BERTHS
        )


CLASS_LAYOUTS: Dict[str, CoachLayout] = {
    # First AC: two-berth cabins, each with a door onto the corridor
    "1A": CoachLayout(rows=12, bays=2, has_middle=False, has_side=False, prefix="H1", cabin_door=True),
    "2A": CoachLayout(rows=18, bays=2, has_middle=False, has_side=True, prefix="A1"),
    "3A": CoachLayout(rows=18, bays=3, has_middle=True, has_side=True, prefix="B1"),
    "SL": CoachLayout(rows=18, bays=3, has_middle=True, has_side=True, prefix="S1"),
    "2S": CoachLayout(rows=18, bays=3, has_middle=False, has_side=True, prefix="D1", seating=True),
}


def layout_for(train: Train, class_code: str) -> Optional[CoachLayout]:
    """Coach layout for a class the train offers, or None"""
    if class_code not in train.available_classes:
        return None
    return CLASS_LAYOUTS.get(class_code)


def generate_layout(
    layout: CoachLayout,
    availability_rate: float = DEFAULT_AVAILABILITY_RATE,
    rng: Optional[random.Random] = None,
) -> List[List[Seat]]:
    """
    Generate a coach grid.

    Args:
        layout: Coach shape
        availability_rate: Probability that a seat is available
        rng: Random source; pass a seeded Random for reproducible grids

    Returns:
        Exactly layout.rows rows. Seat numbers run 1..N in row-major order;
        aisle/door/empty cells have no number and are unavailable.
    """
    rng = rng or random.Random()
    grid: List[List[Seat]] = []
    number = 0

    for r in range(layout.rows):
        row: List[Seat] = []
        for c, berth in enumerate(layout.row_pattern(r)):
            if berth in STRUCTURAL_BERTHS:
                row.append(Seat(
                    id=f"{layout.prefix}-R{r + 1}C{c + 1}",
                    row=r,
                    column=c,
                    number=None,
                    berth=berth,
                    status=SeatStatus.UNAVAILABLE,
                ))
                continue

            number += 1
            status = SeatStatus.AVAILABLE if rng.random() < availability_rate else SeatStatus.BOOKED
            row.append(Seat(
                id=f"{layout.prefix}-{number}",
                row=r,
                column=c,
                number=number,
                berth=berth,
                status=status,
            ))
        grid.append(row)

    logger.debug(f"Generated coach {layout.prefix}: {layout.rows} rows, {number} seats")
    return grid


def generate_for_train(
    train: Train,
    class_code: str,
    availability_rate: float = DEFAULT_AVAILABILITY_RATE,
    rng: Optional[random.Random] = None,
) -> List[List[Seat]]:
    """Coach grid for a train/class; empty when the class has no layout on this train"""
    layout = layout_for(train, class_code)
    if layout is None:
        logger.info(f"No seat layout for class {class_code} on train {train.id}")
        return []
    return generate_layout(layout, availability_rate=availability_rate, rng=rng)
