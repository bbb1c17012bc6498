"""Wall-clock helpers; services take these as injectable defaults."""

from __future__ import annotations

from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def current_year() -> int:
    return utc_now().year


__all__ = ["current_year", "utc_now"]
