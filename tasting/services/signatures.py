"""Signature generation for person-year access codes."""

from __future__ import annotations

import secrets
import string
from random import Random
from typing import Optional

SIGNATURE_ALPHABET = string.ascii_lowercase + string.digits
SIGNATURE_LENGTH = 6

_system_random = secrets.SystemRandom()


def generate_signature(rng: Optional[Random] = None, length: int = SIGNATURE_LENGTH) -> str:
    """Draw a signature uniformly from ``[a-z0-9]``.

    The entropy source is explicit so callers can pass a seeded ``Random`` in
    tests. Nothing about the person or year is embedded; uniqueness per year is
    left to the store constraint and the caller's retry loop.
    """

    source = rng or _system_random
    return "".join(source.choice(SIGNATURE_ALPHABET) for _ in range(length))


def is_well_formed(signature: Optional[str]) -> bool:
    return bool(signature) and len(signature) == SIGNATURE_LENGTH


__all__ = ["SIGNATURE_ALPHABET", "SIGNATURE_LENGTH", "generate_signature", "is_well_formed"]
