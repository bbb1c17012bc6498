import pytest
from pydantic import ValidationError

from tasting.core.exceptions import ConflictUniqueError, InvalidRangeError, NotFoundError, ReferencedByRatingsError
from tasting.models.entities import Person, PersonYear
from tasting.models.person import PersonCreate, PersonPatch
from tasting.models.praline import PralineCreate
from tasting.services.participation import ParticipationService
from tasting.services.persons import PersonService
from tasting.services.pralines import PralineService
from tasting.services.rating import RatingService


def _payload(first="Anna", last="Müller"):
    return PersonCreate(first_name=first, last_name=last)


def test_person_names_are_trimmed_and_required():
    assert _payload(" Anna ", " Müller ").first_name == "Anna"
    with pytest.raises(ValidationError):
        _payload("   ", "Müller")
    with pytest.raises(ValidationError):
        PersonPatch(last_name=None)


@pytest.mark.asyncio
async def test_enroll_creates_person_and_participation(session, rng, count_rows):
    enriched = await PersonService(session, rng=rng).enroll_person(2024, _payload())

    assert enriched.has_person_year is True
    assert enriched.person_year.year == 2024
    assert enriched.person_year.is_participating is True
    assert len(enriched.person_year.signature) == 6
    assert await count_rows(Person) == 1
    assert await count_rows(PersonYear) == 1


@pytest.mark.asyncio
async def test_enroll_rejects_duplicate_name_in_same_year(session, rng, count_rows):
    service = PersonService(session, rng=rng)
    await service.enroll_person(2024, _payload())

    with pytest.raises(ConflictUniqueError):
        await service.enroll_person(2024, _payload())
    await service.enroll_person(2025, _payload())

    assert await count_rows(Person) == 2
    assert await count_rows(PersonYear) == 2


@pytest.mark.asyncio
async def test_enroll_checks_the_year_first(session, rng, count_rows):
    with pytest.raises(InvalidRangeError):
        await PersonService(session, rng=rng).enroll_person(2051, _payload())
    assert await count_rows(Person) == 0


@pytest.mark.asyncio
async def test_persons_for_year_lists_everybody(session, rng):
    service = PersonService(session, rng=rng)
    weber = await service.create_person(_payload("Lisa", "Weber"))
    mueller = await service.create_person(_payload("Anna", "Müller"))
    becker = await service.create_person(_payload("Felix", "Becker"))
    participation = ParticipationService(session, rng=rng)
    await participation.set_participation(mueller.id, 2024, True)
    await participation.set_participation(becker.id, 2024, False)
    await participation.set_participation(weber.id, 2025, True)

    listed = await service.persons_for_year(2024)

    assert [person.last_name for person in listed] == ["Becker", "Müller", "Weber"]
    assert [person.has_person_year for person in listed] == [False, True, False]
    assert listed[1].person_year.year == 2024
    assert listed[2].person_year is None


@pytest.mark.asyncio
async def test_update_person_applies_only_supplied_fields(session, clock):
    service = PersonService(session, clock=clock)
    person = await service.create_person(_payload())
    created_update = person.updated_at

    updated = await service.update_person(person.id, PersonPatch(last_name="Meier"))

    assert updated.first_name == "Anna"
    assert updated.last_name == "Meier"
    assert updated.updated_at > created_update


@pytest.mark.asyncio
async def test_update_unknown_person(session):
    with pytest.raises(NotFoundError):
        await PersonService(session).update_person(999, PersonPatch(first_name="Max"))


@pytest.mark.asyncio
async def test_delete_person_removes_participations(session, rng, count_rows):
    service = PersonService(session, rng=rng)
    enriched = await service.enroll_person(2024, _payload())
    await ParticipationService(session, rng=rng).set_participation(enriched.id, 2025, True)

    await service.delete_person(enriched.id)

    assert await count_rows(Person) == 0
    assert await count_rows(PersonYear) == 0


@pytest.mark.asyncio
async def test_person_with_ratings_cannot_be_deleted(session, rng, count_rows):
    service = PersonService(session, rng=rng)
    enriched = await service.enroll_person(2024, _payload())
    praline = await PralineService(session).create_praline(2024, PralineCreate(name="Trüffel"))
    await RatingService(session).submit_rating(enriched.person_year.signature, praline.id, 3)

    with pytest.raises(ReferencedByRatingsError):
        await service.delete_person(enriched.id)

    assert await count_rows(Person) == 1
    assert await count_rows(PersonYear) == 1


@pytest.mark.asyncio
async def test_delete_unknown_person(session):
    with pytest.raises(NotFoundError):
        await PersonService(session).delete_person(999)
