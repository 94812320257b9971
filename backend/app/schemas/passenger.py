"""
Passenger request/response schemas
"""
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, computed_field, field_validator

Gender = Literal["male", "female", "other"]
BerthPreference = Literal["lower", "middle", "upper", "side_lower", "side_upper", "no_preference"]

SENIOR_CITIZEN_AGE = 60


class PassengerDetails(BaseModel):
    """Passenger form fields"""
    name: str = Field(..., min_length=2, max_length=50)
    age: int = Field(..., ge=1, le=120)
    gender: Gender
    preferred_berth: BerthPreference = "no_preference"

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v

    @computed_field
    @property
    def is_senior(self) -> bool:
        return self.age >= SENIOR_CITIZEN_AGE


class PassengerInput(BaseModel):
    """
    Add-passenger request.

    Every field is optional so a staged saved-passenger template can fill
    the gaps; the merged result is validated as PassengerDetails.
    """
    name: Optional[str] = None
    age: Optional[int] = None
    gender: Optional[Gender] = None
    preferred_berth: Optional[BerthPreference] = None


class Passenger(PassengerDetails):
    """Passenger bound to a booking; seat follows list position"""
    seat_number: Optional[int] = None
    booking_status: str = "CNF"
    current_status: str = "CNF"


class SavedPassenger(PassengerDetails):
    """Passenger template stored on a user profile"""
    id: str
    user_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
