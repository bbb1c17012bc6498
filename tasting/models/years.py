from __future__ import annotations

from typing import List

from pydantic import BaseModel


class AvailableYears(BaseModel):
    years: List[int]
    current_year: int
    next_year: int
