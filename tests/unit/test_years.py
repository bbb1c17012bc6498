import pytest

from tasting.models.person import PersonCreate
from tasting.models.praline import PralineCreate
from tasting.services.participation import ParticipationService
from tasting.services.persons import PersonService
from tasting.services.pralines import PralineService
from tasting.services.years import YearCatalogService


def _this_year():
    return 2026


@pytest.mark.asyncio
async def test_empty_store_offers_next_year(session):
    available = await YearCatalogService(session, this_year=_this_year).available_years()

    assert available.years == [2027]
    assert available.current_year == 2026
    assert available.next_year == 2027


@pytest.mark.asyncio
async def test_known_year_gets_one_successor(session):
    await PralineService(session).create_praline(2024, PralineCreate(name="Trüffel"))

    available = await YearCatalogService(session, this_year=_this_year).available_years()

    assert available.years == [2024, 2025]


@pytest.mark.asyncio
async def test_years_come_from_pralines_and_participations(session, rng):
    person = await PersonService(session).create_person(PersonCreate(first_name="Anna", last_name="Müller"))
    await ParticipationService(session, rng=rng).set_participation(person.id, 2022, True)
    await PralineService(session).create_praline(2024, PralineCreate(name="Trüffel"))
    await PralineService(session).create_praline(2024, PralineCreate(name="Makronen"))

    available = await YearCatalogService(session, this_year=_this_year).available_years()

    assert available.years == [2022, 2024, 2025]
