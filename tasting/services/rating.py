"""Anonymous rating flow: session resolution, rating upsert and feedback."""

from __future__ import annotations

import logging
import math
from datetime import datetime
from typing import Any, Callable, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tasting.core.database import unit_of_work, violated_constraint
from tasting.core.exceptions import FavoriteYearMismatchError, NotFoundError, PralineYearMismatchError
from tasting.models.entities import Person, PersonYear, Praline, Rating
from tasting.models.person import PersonRead, PersonYearRead
from tasting.models.praline import PralineRead
from tasting.models.rating import Progress, RatingRead, RatingResult, SessionView
from tasting.utils.clock import utc_now
from tasting.utils.validators import clean_optional_text, require_rating, require_signature

logger = logging.getLogger(__name__)


def progress_percentage(rated: int, total: int) -> int:
    """Whole-number share of rated pralines, halves rounded up."""

    if total <= 0:
        return 0
    return math.floor(100 * rated / total + 0.5)


class RatingService:
    """Everything reachable through a person-year signature."""

    def __init__(self, session: AsyncSession, *, clock: Callable[[], datetime] = utc_now) -> None:
        self.session = session
        self.clock = clock

    async def resolve_session(self, signature: Optional[str]) -> SessionView:
        """Assemble the respondent's view. Never writes."""

        require_signature(signature)

        async with unit_of_work(self.session):
            person_year = await self._person_year_by_signature(signature)
            person = await self.session.get(Person, person_year.person_id)
            if person is None:
                raise NotFoundError("Signature not found", details={"field": "signature"})

            pralines = (
                await self.session.scalars(
                    select(Praline).where(Praline.year == person_year.year).order_by(Praline.name, Praline.id)
                )
            ).all()
            ratings = (
                await self.session.scalars(select(Rating).where(Rating.person_year_id == person_year.id))
            ).all()

            ratings_by_praline = {rating.praline_id: RatingRead.model_validate(rating) for rating in ratings}
            return SessionView(
                person_year=PersonYearRead.model_validate(person_year),
                person=PersonRead.model_validate(person),
                pralines=[PralineRead.model_validate(praline) for praline in pralines],
                ratings=ratings_by_praline,
                progress=Progress(
                    total=len(pralines),
                    rated=len(ratings),
                    percentage=progress_percentage(len(ratings), len(pralines)),
                ),
            )

    async def submit_rating(
        self,
        signature: Optional[str],
        praline_id: int,
        rating: Any,
        comment: Optional[str] = None,
    ) -> RatingResult:
        """Create or amend the single rating of a person-year for a praline."""

        require_signature(signature)
        value = require_rating(rating)
        comment = clean_optional_text(comment)

        async with unit_of_work(self.session):
            person_year = await self._person_year_by_signature(signature)
            praline = await self.session.get(Praline, praline_id)
            if praline is None or praline.year != person_year.year:
                raise PralineYearMismatchError(
                    "Praline not found or not part of this year's catalog",
                    details={"field": "praline_id", "value": praline_id, "year": person_year.year},
                )

            now = self.clock()
            existing = await self._find_rating(person_year.id, praline_id)
            if existing is None:
                created = Rating(
                    person_year_id=person_year.id,
                    praline_id=praline_id,
                    rating=value,
                    comment=comment,
                    created_at=now,
                    updated_at=now,
                )
                try:
                    async with self.session.begin_nested():
                        self.session.add(created)
                        await self.session.flush()
                except IntegrityError as exc:
                    if violated_constraint(exc) != "person_year_praline_unique":
                        raise
                    # Lost the insert race; the winner's row is amended instead.
                    existing = await self._find_rating(person_year.id, praline_id)
                    if existing is None:
                        raise
                else:
                    logger.info("Rating created for praline %s", praline_id)
                    return RatingResult(rating=RatingRead.model_validate(created), action="created")

            existing.rating = value
            existing.comment = comment
            existing.updated_at = now
            await self.session.flush()
            logger.info("Rating updated for praline %s", praline_id)
            return RatingResult(rating=RatingRead.model_validate(existing), action="updated")

    async def update_feedback(
        self,
        signature: Optional[str],
        favorite_chocolate_id: Optional[int] = None,
        general_feedback: Optional[str] = None,
        allergies: Optional[str] = None,
    ) -> PersonYear:
        """Replace favorite, general feedback and allergies of a person-year."""

        require_signature(signature)

        async with unit_of_work(self.session):
            person_year = await self._person_year_by_signature(signature)

            if favorite_chocolate_id is not None:
                praline = await self.session.get(Praline, favorite_chocolate_id)
                if praline is None or praline.year != person_year.year:
                    raise FavoriteYearMismatchError(
                        "Favorite praline not found or not part of this year's catalog",
                        details={
                            "field": "favorite_chocolate_id",
                            "value": favorite_chocolate_id,
                            "year": person_year.year,
                        },
                    )

            person_year.favorite_chocolate_id = favorite_chocolate_id
            person_year.general_feedback = clean_optional_text(general_feedback)
            person_year.allergies = clean_optional_text(allergies)
            person_year.updated_at = self.clock()
            await self.session.flush()
            return person_year

    async def _person_year_by_signature(self, signature: str) -> PersonYear:
        # Signatures are unique per year only; the latest year wins.
        person_year = await self.session.scalar(
            select(PersonYear).where(PersonYear.signature == signature).order_by(PersonYear.year.desc()).limit(1)
        )
        if person_year is None:
            raise NotFoundError("Signature not found", details={"field": "signature"})
        return person_year

    async def _find_rating(self, person_year_id: int, praline_id: int) -> Optional[Rating]:
        return await self.session.scalar(
            select(Rating).where(Rating.person_year_id == person_year_id, Rating.praline_id == praline_id)
        )


__all__ = ["RatingService", "progress_percentage"]
