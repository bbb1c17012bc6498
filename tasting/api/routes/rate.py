"""Public rating endpoints addressed by a person-year signature."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tasting.api.dependencies import checked_signature, get_session
from tasting.models import FeedbackUpdate, PersonYearRead, RatingResult, RatingSubmission, SessionView
from tasting.services.rating import RatingService

router = APIRouter(prefix="/rate", tags=["rating"])


@router.get("/{signature}", response_model=SessionView)
async def get_session_view(
    session: AsyncSession = Depends(get_session),
    signature: str = Depends(checked_signature),
) -> SessionView:
    """Catalog, existing ratings and progress for a respondent."""

    return await RatingService(session).resolve_session(signature)


@router.patch("/{signature}", response_model=PersonYearRead)
async def update_feedback(
    payload: FeedbackUpdate,
    session: AsyncSession = Depends(get_session),
    signature: str = Depends(checked_signature),
) -> PersonYearRead:
    person_year = await RatingService(session).update_feedback(
        signature,
        favorite_chocolate_id=payload.favorite_chocolate_id,
        general_feedback=payload.general_feedback,
        allergies=payload.allergies,
    )
    return PersonYearRead.model_validate(person_year)


@router.post("/{signature}/ratings", response_model=RatingResult)
async def submit_rating(
    payload: RatingSubmission,
    session: AsyncSession = Depends(get_session),
    signature: str = Depends(checked_signature),
) -> RatingResult:
    return await RatingService(session).submit_rating(
        signature,
        payload.praline_id,
        payload.rating,
        payload.comment,
    )
