"""Participation toggling and person-year creation."""

from __future__ import annotations

import logging
from datetime import datetime
from random import Random
from typing import Callable, Optional, Union

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tasting.core.config import settings
from tasting.core.database import unit_of_work, violated_constraint
from tasting.core.exceptions import ConflictUniqueError, NotFoundError
from tasting.models.entities import Person, PersonYear
from tasting.models.person import StatusMessage
from tasting.services.signatures import generate_signature
from tasting.utils.clock import utc_now
from tasting.utils.validators import require_year

logger = logging.getLogger(__name__)

ALREADY_NOT_PARTICIPATING = "Person is already not participating"


async def create_person_year(
    session: AsyncSession,
    *,
    person_id: int,
    year: int,
    now: datetime,
    is_participating: bool = True,
    rng: Optional[Random] = None,
    max_attempts: Optional[int] = None,
) -> PersonYear:
    """Insert a person-year with a fresh signature, regenerating on collision.

    Each attempt runs in its own savepoint so a rejected signature leaves the
    surrounding transaction intact. A violation of ``person_year_unique`` is
    re-raised for the caller to resolve.
    """

    attempts = max_attempts or settings.SIGNATURE_MAX_ATTEMPTS
    for attempt in range(1, attempts + 1):
        person_year = PersonYear(
            person_id=person_id,
            year=year,
            signature=generate_signature(rng),
            is_participating=is_participating,
            created_at=now,
            updated_at=now,
        )
        try:
            async with session.begin_nested():
                session.add(person_year)
                await session.flush()
        except IntegrityError as exc:
            if violated_constraint(exc) != "signature_year_unique":
                raise
            logger.warning("Signature collision for year %s (attempt %s/%s)", year, attempt, attempts)
            continue
        return person_year

    raise ConflictUniqueError(
        "Could not allocate a unique signature",
        details={"constraint": "signature_year_unique", "year": year, "attempts": attempts},
    )


class ParticipationService:
    """Enables or disables a person's participation for a year."""

    def __init__(
        self,
        session: AsyncSession,
        *,
        rng: Optional[Random] = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.session = session
        self.rng = rng
        self.clock = clock

    async def set_participation(
        self, person_id: int, year: int, is_participating: bool
    ) -> Union[PersonYear, StatusMessage]:
        require_year(year)

        async with unit_of_work(self.session):
            person = await self.session.get(Person, person_id)
            if person is None:
                raise NotFoundError("Person not found", details={"field": "person_id", "value": person_id})

            now = self.clock()
            person_year = await self._find(person_id, year)

            if person_year is None:
                if not is_participating:
                    return StatusMessage(message=ALREADY_NOT_PARTICIPATING)
                try:
                    created = await create_person_year(
                        self.session, person_id=person_id, year=year, now=now, rng=self.rng
                    )
                except IntegrityError as exc:
                    if violated_constraint(exc) != "person_year_unique":
                        raise
                    # A concurrent request created the row first; continue with theirs.
                    person_year = await self._find(person_id, year)
                    if person_year is None:
                        raise
                else:
                    logger.info("Created participation for person %s in %s", person_id, year)
                    return created

            person_year.is_participating = is_participating
            person_year.updated_at = now
            await self.session.flush()
            logger.info(
                "Participation for person %s in %s set to %s", person_id, year, is_participating
            )
            return person_year

    async def _find(self, person_id: int, year: int) -> Optional[PersonYear]:
        result = await self.session.execute(
            select(PersonYear).where(PersonYear.person_id == person_id, PersonYear.year == year)
        )
        return result.scalar_one_or_none()


__all__ = ["ALREADY_NOT_PARTICIPATING", "ParticipationService", "create_person_year"]
