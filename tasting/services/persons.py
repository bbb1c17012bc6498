"""Admin operations on persons: CRUD, enrollment and year-scoped listings."""

from __future__ import annotations

import logging
from datetime import datetime
from random import Random
from typing import Callable, List, Optional

from sqlalchemy import and_, delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from tasting.core.database import unit_of_work
from tasting.core.exceptions import ConflictUniqueError, NotFoundError, ReferencedByRatingsError
from tasting.models.entities import Person, PersonYear, Rating
from tasting.models.person import EnrichedPerson, PersonCreate, PersonPatch, PersonRead, PersonYearRead
from tasting.services.participation import create_person_year
from tasting.utils.clock import utc_now
from tasting.utils.validators import require_year

logger = logging.getLogger(__name__)


class PersonService:
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

    async def list_persons(self) -> List[Person]:
        async with unit_of_work(self.session):
            result = await self.session.scalars(
                select(Person).order_by(Person.last_name, Person.first_name, Person.id)
            )
            return list(result.all())

    async def create_person(self, payload: PersonCreate) -> Person:
        async with unit_of_work(self.session):
            now = self.clock()
            person = Person(
                first_name=payload.first_name,
                last_name=payload.last_name,
                created_at=now,
                updated_at=now,
            )
            self.session.add(person)
            await self.session.flush()
            logger.info("Created person %s", person.id)
            return person

    async def update_person(self, person_id: int, patch: PersonPatch) -> Person:
        async with unit_of_work(self.session):
            person = await self._get(person_id)
            for field, value in patch.model_dump(exclude_unset=True).items():
                setattr(person, field, value)
            person.updated_at = self.clock()
            await self.session.flush()
            return person

    async def delete_person(self, person_id: int) -> Person:
        """Delete a person and their participation records.

        Refused while any of the person's participations owns ratings, so no
        rating is ever orphaned.
        """

        async with unit_of_work(self.session):
            person = await self._get(person_id)

            rating_count = await self.session.scalar(
                select(func.count(Rating.id))
                .join(PersonYear, Rating.person_year_id == PersonYear.id)
                .where(PersonYear.person_id == person_id)
            )
            if rating_count:
                raise ReferencedByRatingsError(
                    "Person cannot be deleted because ratings were already submitted",
                    details={"field": "person_id", "value": person_id, "ratings": rating_count},
                )

            await self.session.execute(delete(PersonYear).where(PersonYear.person_id == person_id))
            await self.session.delete(person)
            await self.session.flush()
            logger.info("Deleted person %s", person_id)
            return person

    async def enroll_person(self, year: int, payload: PersonCreate) -> EnrichedPerson:
        """Create a person and their participating person-year atomically."""

        require_year(year)

        async with unit_of_work(self.session):
            duplicates = await self.session.scalar(
                select(func.count(PersonYear.id))
                .join(Person, Person.id == PersonYear.person_id)
                .where(
                    Person.first_name == payload.first_name,
                    Person.last_name == payload.last_name,
                    PersonYear.year == year,
                )
            )
            if duplicates:
                raise ConflictUniqueError(
                    "A person with this name already exists for this year",
                    details={"fields": ["first_name", "last_name", "year"], "year": year},
                )

            now = self.clock()
            person = Person(
                first_name=payload.first_name,
                last_name=payload.last_name,
                created_at=now,
                updated_at=now,
            )
            self.session.add(person)
            await self.session.flush()

            person_year = await create_person_year(
                self.session, person_id=person.id, year=year, now=now, rng=self.rng
            )
            logger.info("Enrolled person %s for %s", person.id, year)
            return _enrich(person, person_year)

    async def persons_for_year(self, year: int) -> List[EnrichedPerson]:
        """All persons, each with their person-year for ``year`` when one exists."""

        require_year(year)

        async with unit_of_work(self.session):
            result = await self.session.execute(
                select(Person, PersonYear)
                .outerjoin(PersonYear, and_(PersonYear.person_id == Person.id, PersonYear.year == year))
                .order_by(Person.last_name, Person.first_name, Person.id)
            )
            return [_enrich(person, person_year) for person, person_year in result.all()]

    async def _get(self, person_id: int) -> Person:
        person = await self.session.get(Person, person_id)
        if person is None:
            raise NotFoundError("Person not found", details={"field": "person_id", "value": person_id})
        return person


def _enrich(person: Person, person_year: Optional[PersonYear]) -> EnrichedPerson:
    return EnrichedPerson(
        **PersonRead.model_validate(person).model_dump(),
        person_year=PersonYearRead.model_validate(person_year) if person_year is not None else None,
        has_person_year=person_year is not None,
    )


__all__ = ["PersonService"]
