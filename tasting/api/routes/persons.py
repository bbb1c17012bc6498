"""Person, enrollment and participation endpoints for admins."""

from typing import List, Union

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from tasting.api.dependencies import checked_year, get_current_admin, get_session
from tasting.models import (
    EnrichedPerson,
    ParticipationUpdate,
    PersonCreate,
    PersonPatch,
    PersonRead,
    PersonYearRead,
    StatusMessage,
    User,
)
from tasting.services.participation import ParticipationService
from tasting.services.persons import PersonService
from tasting.utils.audit import audit_log

router = APIRouter(prefix="/admin", tags=["persons"])


@router.get("/persons", response_model=List[PersonRead])
async def list_persons(
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_admin),
) -> List[PersonRead]:
    persons = await PersonService(session).list_persons()
    return [PersonRead.model_validate(person) for person in persons]


@router.post("/persons", response_model=PersonRead, status_code=status.HTTP_201_CREATED)
@audit_log
async def create_person(
    payload: PersonCreate,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_admin),
) -> PersonRead:
    person = await PersonService(session).create_person(payload)
    return PersonRead.model_validate(person)


@router.patch("/persons/{person_id}", response_model=PersonRead)
@audit_log
async def update_person(
    person_id: int,
    payload: PersonPatch,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_admin),
) -> PersonRead:
    person = await PersonService(session).update_person(person_id, payload)
    return PersonRead.model_validate(person)


@router.delete("/persons/{person_id}", response_model=PersonRead)
@audit_log
async def delete_person(
    person_id: int,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_admin),
) -> PersonRead:
    person = await PersonService(session).delete_person(person_id)
    return PersonRead.model_validate(person)


@router.get("/years/{year}/persons", response_model=List[EnrichedPerson])
async def persons_for_year(
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_admin),
    year: int = Depends(checked_year),
) -> List[EnrichedPerson]:
    """All persons with their participation record for ``year`` (or ``null``)."""

    return await PersonService(session).persons_for_year(year)


@router.post("/years/{year}/persons", response_model=EnrichedPerson, status_code=status.HTTP_201_CREATED)
@audit_log
async def enroll_person(
    payload: PersonCreate,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_admin),
    year: int = Depends(checked_year),
) -> EnrichedPerson:
    """Create a person already participating in ``year``."""

    return await PersonService(session).enroll_person(year, payload)


@router.patch(
    "/years/{year}/persons/{person_id}/participation",
    response_model=Union[PersonYearRead, StatusMessage],
)
@audit_log
async def set_participation(
    person_id: int,
    payload: ParticipationUpdate,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_admin),
    year: int = Depends(checked_year),
) -> Union[PersonYearRead, StatusMessage]:
    result = await ParticipationService(session).set_participation(person_id, year, payload.is_participating)
    if isinstance(result, StatusMessage):
        return result
    return PersonYearRead.model_validate(result)
