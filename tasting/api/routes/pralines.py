"""Praline catalog endpoints for admins."""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from tasting.api.dependencies import checked_year, get_current_admin, get_session
from tasting.models import PralineCreate, PralinePatch, PralineRead, User
from tasting.services.pralines import PralineService
from tasting.utils.audit import audit_log

router = APIRouter(prefix="/admin", tags=["pralines"])


@router.get("/years/{year}/pralines", response_model=List[PralineRead])
async def pralines_for_year(
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_admin),
    year: int = Depends(checked_year),
) -> List[PralineRead]:
    pralines = await PralineService(session).pralines_for_year(year)
    return [PralineRead.model_validate(praline) for praline in pralines]


@router.post("/years/{year}/pralines", response_model=PralineRead, status_code=status.HTTP_201_CREATED)
@audit_log
async def create_praline(
    payload: PralineCreate,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_admin),
    year: int = Depends(checked_year),
) -> PralineRead:
    praline = await PralineService(session).create_praline(year, payload)
    return PralineRead.model_validate(praline)


@router.patch("/pralines/{praline_id}", response_model=PralineRead)
@audit_log
async def update_praline(
    praline_id: int,
    payload: PralinePatch,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_admin),
) -> PralineRead:
    praline = await PralineService(session).update_praline(praline_id, payload)
    return PralineRead.model_validate(praline)


@router.delete("/pralines/{praline_id}", response_model=PralineRead)
@audit_log
async def delete_praline(
    praline_id: int,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_admin),
) -> PralineRead:
    """Delete a praline unless it is rated or someone's favorite."""

    praline = await PralineService(session).delete_praline(praline_id)
    return PralineRead.model_validate(praline)
