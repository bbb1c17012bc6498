"""Derived catalog of years that have, or can receive, data."""

from __future__ import annotations

from typing import Callable, List

from sqlalchemy import select, union
from sqlalchemy.ext.asyncio import AsyncSession

from tasting.core.database import unit_of_work
from tasting.models.entities import PersonYear, Praline
from tasting.models.years import AvailableYears
from tasting.utils.clock import current_year


class YearCatalogService:
    def __init__(self, session: AsyncSession, *, this_year: Callable[[], int] = current_year) -> None:
        self.session = session
        self.this_year = this_year

    async def available_years(self) -> AvailableYears:
        """Known years plus one empty successor year for new enrollment.

        ``current_year`` and ``next_year`` follow the wall clock and are
        informational only.
        """

        async with unit_of_work(self.session):
            result = await self.session.execute(
                union(select(PersonYear.year), select(Praline.year))
            )
            years: List[int] = sorted({row[0] for row in result.all()})

        now_year = self.this_year()
        if years:
            years.append(years[-1] + 1)
        else:
            years.append(now_year + 1)

        return AvailableYears(years=years, current_year=now_year, next_year=now_year + 1)


__all__ = ["YearCatalogService"]
