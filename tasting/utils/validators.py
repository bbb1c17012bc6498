"""Input validation helpers shared by the domain services."""

from __future__ import annotations

import math
from numbers import Real
from typing import Any, Optional

from tasting.core.config import settings
from tasting.core.exceptions import InvalidRangeError, InvalidRatingError, InvalidSignatureError
from tasting.services.signatures import SIGNATURE_LENGTH, is_well_formed

MIN_RATING = 1
MAX_RATING = 5


def require_year(year: Any) -> int:
    """Accept integer years in ``(MIN_YEAR_EXCLUSIVE, MAX_YEAR]``."""

    lower, upper = settings.MIN_YEAR_EXCLUSIVE, settings.MAX_YEAR
    if isinstance(year, bool) or not isinstance(year, int) or not lower < year <= upper:
        raise InvalidRangeError(
            f"Invalid year. The year must be between {lower + 1} and {upper}.",
            details={"field": "year", "value": year, "min": lower + 1, "max": upper},
        )
    return year


def require_signature(signature: Optional[str]) -> str:
    if not is_well_formed(signature):
        raise InvalidSignatureError(
            "Invalid signature",
            details={"field": "signature", "length": SIGNATURE_LENGTH},
        )
    return signature


def require_rating(value: Any) -> int:
    """Accept integral values in ``[1, 5]``; ``4.0`` counts as ``4``, ``True`` does not."""

    if isinstance(value, bool) or not isinstance(value, Real) or not math.isfinite(value) or value != int(value):
        raise InvalidRatingError(
            "Rating must be a whole number",
            details={"field": "rating", "min": MIN_RATING, "max": MAX_RATING},
        )
    rating = int(value)
    if not MIN_RATING <= rating <= MAX_RATING:
        raise InvalidRatingError(
            f"Rating must be between {MIN_RATING} and {MAX_RATING}",
            details={"field": "rating", "min": MIN_RATING, "max": MAX_RATING},
        )
    return rating


def clean_optional_text(value: Optional[str]) -> Optional[str]:
    """Trim free text; blank or missing text is stored as absent."""

    if value is None:
        return None
    return value.strip() or None


def require_non_empty(value: str) -> str:
    if not value or not value.strip():
        raise ValueError("Value must not be empty")
    return value.strip()


__all__ = [
    "MAX_RATING",
    "MIN_RATING",
    "clean_optional_text",
    "require_non_empty",
    "require_rating",
    "require_signature",
    "require_year",
]
