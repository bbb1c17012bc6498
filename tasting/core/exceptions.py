"""Custom exception hierarchy for the tasting service."""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import status


class ApplicationError(Exception):
    """Base application error with HTTP semantics."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    code: str = "application_error"

    def __init__(
        self,
        message: str,
        *,
        details: Optional[Dict[str, Any]] = None,
        status_code: int | None = None,
        code: str | None = None,
    ) -> None:
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code
        if code is not None:
            self.code = code
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        base = f"[{self.code}] {self.message}"
        if self.details:
            return f"{base} :: {self.details}"
        return base


class InvalidRangeError(ApplicationError):
    code = "invalid_range"


class InvalidSignatureError(ApplicationError):
    code = "invalid_signature"


class InvalidRatingError(ApplicationError):
    code = "invalid_rating"


class NotFoundError(ApplicationError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"


class PralineYearMismatchError(ApplicationError):
    code = "praline_year_mismatch"


class FavoriteYearMismatchError(ApplicationError):
    code = "favorite_year_mismatch"


class ReferencedByRatingsError(ApplicationError):
    status_code = status.HTTP_409_CONFLICT
    code = "referenced_by_ratings"


class ReferencedAsFavoriteError(ApplicationError):
    status_code = status.HTTP_409_CONFLICT
    code = "referenced_as_favorite"


class ConflictUniqueError(ApplicationError):
    status_code = status.HTTP_409_CONFLICT
    code = "conflict_unique"


class StoreUnavailableError(ApplicationError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "store_unavailable"


class UnauthorizedError(ApplicationError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "unauthorized"


class ForbiddenError(ApplicationError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "forbidden"


__all__ = [
    "ApplicationError",
    "ConflictUniqueError",
    "FavoriteYearMismatchError",
    "ForbiddenError",
    "InvalidRangeError",
    "InvalidRatingError",
    "InvalidSignatureError",
    "NotFoundError",
    "PralineYearMismatchError",
    "ReferencedAsFavoriteError",
    "ReferencedByRatingsError",
    "StoreUnavailableError",
    "UnauthorizedError",
]
