"""Year catalog endpoints."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tasting.api.dependencies import get_current_admin, get_session
from tasting.models import AvailableYears, User
from tasting.services.years import YearCatalogService

router = APIRouter(tags=["years"])


@router.get("/years/available", response_model=AvailableYears)
async def available_years(session: AsyncSession = Depends(get_session)) -> AvailableYears:
    return await YearCatalogService(session).available_years()


@router.get("/admin/years/available", response_model=List[int])
async def admin_available_years(
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_admin),
) -> List[int]:
    catalog = await YearCatalogService(session).available_years()
    return catalog.years
