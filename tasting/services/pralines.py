"""Praline catalog administration and the deletion guard."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, List

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from tasting.core.database import unit_of_work
from tasting.core.exceptions import NotFoundError, ReferencedAsFavoriteError, ReferencedByRatingsError
from tasting.models.entities import PersonYear, Praline, Rating
from tasting.models.praline import PralineCreate, PralinePatch
from tasting.utils.clock import utc_now
from tasting.utils.validators import clean_optional_text, require_year

logger = logging.getLogger(__name__)


class PralineService:
    def __init__(self, session: AsyncSession, *, clock: Callable[[], datetime] = utc_now) -> None:
        self.session = session
        self.clock = clock

    async def create_praline(self, year: int, payload: PralineCreate) -> Praline:
        require_year(year)

        async with unit_of_work(self.session):
            now = self.clock()
            praline = Praline(
                year=year,
                name=payload.name,
                description=clean_optional_text(payload.description),
                is_vegan=payload.is_vegan,
                image_path=payload.image_path or "",
                created_at=now,
                updated_at=now,
            )
            self.session.add(praline)
            await self.session.flush()
            logger.info("Created praline %s for %s", praline.id, year)
            return praline

    async def pralines_for_year(self, year: int) -> List[Praline]:
        require_year(year)

        async with unit_of_work(self.session):
            result = await self.session.scalars(
                select(Praline).where(Praline.year == year).order_by(Praline.name, Praline.id)
            )
            return list(result.all())

    async def update_praline(self, praline_id: int, patch: PralinePatch) -> Praline:
        async with unit_of_work(self.session):
            praline = await self._get(praline_id)
            changes = patch.model_dump(exclude_unset=True)
            if "description" in changes:
                changes["description"] = clean_optional_text(changes["description"])
            for field, value in changes.items():
                setattr(praline, field, value)
            praline.updated_at = self.clock()
            await self.session.flush()
            return praline

    async def delete_praline(self, praline_id: int) -> Praline:
        """Delete a praline nobody has rated or picked as favorite."""

        async with unit_of_work(self.session):
            rating_count = await self.session.scalar(
                select(func.count(Rating.id)).where(Rating.praline_id == praline_id)
            )
            if rating_count:
                raise ReferencedByRatingsError(
                    "Praline cannot be deleted because ratings were already submitted",
                    details={"field": "praline_id", "value": praline_id, "ratings": rating_count},
                )

            favorite_count = await self.session.scalar(
                select(func.count(PersonYear.id)).where(PersonYear.favorite_chocolate_id == praline_id)
            )
            if favorite_count:
                raise ReferencedAsFavoriteError(
                    "Praline cannot be deleted because it is marked as a favorite",
                    details={"field": "praline_id", "value": praline_id, "favorites": favorite_count},
                )

            praline = await self._get(praline_id)
            await self.session.delete(praline)
            await self.session.flush()
            logger.info("Deleted praline %s", praline_id)
            return praline

    async def _get(self, praline_id: int) -> Praline:
        praline = await self.session.get(Praline, praline_id)
        if praline is None:
            raise NotFoundError("Praline not found", details={"field": "praline_id", "value": praline_id})
        return praline


__all__ = ["PralineService"]
