from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, Field


class User(BaseModel):
    """An authenticated operator, as asserted by the identity provider."""

    id: str
    name: str
    role: str
    attributes: Dict[str, Any] = Field(default_factory=dict)

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
