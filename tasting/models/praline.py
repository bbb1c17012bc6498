"""Praline catalog data model definitions."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from tasting.utils.validators import require_non_empty


class PralineRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    year: int
    name: str
    description: Optional[str] = None
    is_vegan: bool
    image_path: str
    created_at: datetime
    updated_at: datetime


class PralineCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    is_vegan: bool = False
    image_path: Optional[str] = Field(None, description="Opaque asset store reference")

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        return require_non_empty(value)


class PralinePatch(BaseModel):
    """Partial update; only fields present in ``model_fields_set`` are applied.

    ``description`` may be sent as ``null`` to clear it. ``name``, ``is_vegan``
    and ``image_path`` back non-null columns and reject ``null``.
    """

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    is_vegan: Optional[bool] = None
    image_path: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: Optional[str]) -> str:
        if value is None:
            raise ValueError("Value must not be null")
        return require_non_empty(value)

    @field_validator("is_vegan", "image_path")
    @classmethod
    def _not_null(cls, value):
        if value is None:
            raise ValueError("Value must not be null")
        return value


__all__ = ["PralineCreate", "PralinePatch", "PralineRead"]
