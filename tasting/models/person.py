"""Person and participation data model definitions."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from tasting.utils.validators import require_non_empty


class PersonRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str
    created_at: datetime
    updated_at: datetime


class PersonCreate(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)

    @field_validator("first_name", "last_name")
    @classmethod
    def _strip(cls, value: str) -> str:
        return require_non_empty(value)


class PersonPatch(BaseModel):
    """Partial update; only fields present in ``model_fields_set`` are applied."""

    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)

    @field_validator("first_name", "last_name")
    @classmethod
    def _strip(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            raise ValueError("Value must not be null")
        return require_non_empty(value)


class PersonYearRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    person_id: int
    year: int
    signature: str
    is_participating: bool
    favorite_chocolate_id: Optional[int] = None
    general_feedback: Optional[str] = None
    allergies: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class EnrichedPerson(PersonRead):
    """A person together with their participation record for one year, if any."""

    person_year: Optional[PersonYearRead] = None
    has_person_year: bool = False


class ParticipationUpdate(BaseModel):
    is_participating: bool


class StatusMessage(BaseModel):
    message: str


__all__ = [
    "EnrichedPerson",
    "ParticipationUpdate",
    "PersonCreate",
    "PersonPatch",
    "PersonRead",
    "PersonYearRead",
    "StatusMessage",
]
