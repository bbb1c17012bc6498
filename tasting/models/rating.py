"""Rating flow data model definitions."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from tasting.models.person import PersonRead, PersonYearRead
from tasting.models.praline import PralineRead


class RatingRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    person_year_id: int
    praline_id: int
    rating: int
    comment: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class RatingSubmission(BaseModel):
    praline_id: int = Field(..., gt=0)
    # Left untyped so booleans and numeric strings are not coerced; the rating
    # service checks integrality and range after the signature.
    rating: Any = None
    comment: Optional[str] = Field(None, max_length=500)


class RatingResult(BaseModel):
    rating: RatingRead
    action: Literal["created", "updated"]


class FeedbackUpdate(BaseModel):
    favorite_chocolate_id: Optional[int] = Field(None, gt=0)
    general_feedback: Optional[str] = Field(None, max_length=1000)
    allergies: Optional[str] = Field(None, max_length=500)


class Progress(BaseModel):
    total: int
    rated: int
    percentage: int


class SessionView(BaseModel):
    """Everything an anonymous respondent sees for their signature."""

    person_year: PersonYearRead
    person: PersonRead
    pralines: List[PralineRead]
    ratings: Dict[int, RatingRead]
    progress: Progress


__all__ = [
    "FeedbackUpdate",
    "Progress",
    "RatingRead",
    "RatingResult",
    "RatingSubmission",
    "SessionView",
]
