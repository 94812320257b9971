"""
Train catalog and seat layout schemas
"""
from datetime import date
from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

FareClass = Literal["economy", "business", "first", "1A", "2A", "3A", "SL", "2S"]


class Train(BaseModel):
    """Immutable reference data for one scheduled train"""
    model_config = ConfigDict(frozen=True)

    id: str
    train_name: str
    train_number: str
    origin: str
    destination: str
    departure_time: str = Field(..., pattern=r"^\d{2}:\d{2}$")
    arrival_time: str = Field(..., pattern=r"^\d{2}:\d{2}$")
    duration: str
    price: float = Field(..., gt=0, description="Base fare per seat")
    available_classes: List[FareClass]


class TrainListResponse(BaseModel):
    trains: List[Train]
    total: int


class AvailabilityDay(BaseModel):
    date: date
    status: str


class AvailabilityResponse(BaseModel):
    train_id: str
    selected_class: str
    days: List[AvailabilityDay]


class BerthType(str, Enum):
    LOWER = "lower"
    MIDDLE = "middle"
    UPPER = "upper"
    SIDE_LOWER = "side_lower"
    SIDE_UPPER = "side_upper"
    SEAT = "seat"
    AISLE = "aisle"
    DOOR = "door"
    EMPTY = "empty"


# Cells that occupy grid space but can never be booked
STRUCTURAL_BERTHS = frozenset({BerthType.AISLE, BerthType.DOOR, BerthType.EMPTY})


class SeatStatus(str, Enum):
    AVAILABLE = "available"
    BOOKED = "booked"
    SELECTED = "selected"
    UNAVAILABLE = "unavailable"


class Seat(BaseModel):
    """One cell of a coach grid"""
    id: str
    row: int = Field(..., ge=0)
    column: int = Field(..., ge=0)
    number: Optional[int] = Field(None, ge=1, description="Seat number; None for structural cells")
    berth: BerthType
    status: SeatStatus

    @property
    def is_seat(self) -> bool:
        return self.berth not in STRUCTURAL_BERTHS


class LayoutResponse(BaseModel):
    train_id: str
    selected_class: str
    travel_date: date
    rows: List[List[Seat]]
    available_count: int
    message: Optional[str] = None
