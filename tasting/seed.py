"""Demo data set for local development.

Everything goes through the domain services, so signatures, timestamps and
the cross-year checks behave exactly as they do for real requests.
"""

from __future__ import annotations

import logging
from random import Random
from typing import Any, Dict, List, Optional

from sqlalchemy import delete

from tasting.core.database import DatabaseManager, unit_of_work
from tasting.models.entities import Person, PersonYear, Praline, Rating
from tasting.models.person import PersonCreate
from tasting.models.praline import PralineCreate
from tasting.services.participation import ParticipationService
from tasting.services.persons import PersonService
from tasting.services.pralines import PralineService
from tasting.services.rating import RatingService

logger = logging.getLogger(__name__)

YEARS = [2024, 2025]

PERSONS = [
    ("Anna", "Müller"),
    ("Max", "Schmidt"),
    ("Lisa", "Weber"),
    ("Tom", "Fischer"),
    ("Sarah", "Wagner"),
    ("Felix", "Becker"),
    ("Emma", "Schulz"),
    ("Lukas", "Hoffmann"),
    ("Mia", "Koch"),
    ("Noah", "Richter"),
    ("Sophie", "Bauer"),
    ("Leon", "Klein"),
    ("Hannah", "Wolf"),
    ("Ben", "Neumann"),
    ("Lena", "Schwarz"),
]

PRALINES = [
    ("Schokoladen-Trüffel", "Cremige Schokoladentrüffel mit Kakaopulver", False),
    ("Kokos-Makronen", "Luftige Kokosmakronen mit Schokoladenfüllung", True),
    ("Nuss-Pralinen", "Haselnusspralinen mit Nougatkern", False),
    ("Erdbeer-Trüffel", "Fruchtige Erdbeertrüffel mit weißer Schokolade", False),
    ("Mandel-Marzipan", "Mandelmarzipan in dunkler Schokolade", True),
    ("Karamell-Bonbons", "Sahnige Karamellbonbons mit Meersalz", False),
]

# Participants per year as slices of PERSONS; the two years overlap.
PARTICIPANTS = {2024: slice(0, 10), 2025: slice(5, 15)}

# How many pralines each participant rated, in participant order.
RATING_COUNTS = {
    2024: [6, 5, 4, 3, 2, 1, 1, 0, 3, 4],
    2025: [5, 6, 3, 4, 2, 1, 0, 2, 3, 1],
}

COMMENTS = {(0, 0): "Sehr lecker!", (1, 2): "Könnte süßer sein", (3, 1): "Perfekt!", (5, 0): "Erste Bewertung!"}

# (year, participant index, favorite praline index, feedback, allergies)
FEEDBACK = [
    (2024, 0, 0, None, None),
    (2024, 1, 2, "Alle Pralinen waren sehr lecker! Besonders die Schokoladen-Trüffel haben mir gefallen.", "Nüsse"),
    (2025, 0, 1, "Dieses Jahr waren die Pralinen noch besser! Sehr kreative Kombinationen.", "Gluten"),
    (2025, 3, 3, "Wunderbare Vielfalt! Besonders die fruchtigen Sorten haben überzeugt.", ""),
]


async def clear(manager: DatabaseManager) -> None:
    async with manager.session() as session:
        async with unit_of_work(session):
            # Children first because of the foreign keys.
            for entity in (Rating, PersonYear, Praline, Person):
                await session.execute(delete(entity))
    logger.info("Cleared all tables")


async def seed(manager: DatabaseManager, rng: Optional[Random] = None) -> Dict[str, Any]:
    rng = rng or Random(2024)
    await clear(manager)

    async with manager.session() as session:
        persons = PersonService(session, rng=rng)
        participation = ParticipationService(session, rng=rng)
        catalog = PralineService(session)
        rating = RatingService(session)

        people = [
            await persons.create_person(PersonCreate(first_name=first, last_name=last))
            for first, last in PERSONS
        ]
        logger.info("Created %s persons", len(people))

        signatures: Dict[int, List[str]] = {}
        pralines: Dict[int, List[int]] = {}
        rating_total = 0
        for year in YEARS:
            signatures[year] = []
            for person in people[PARTICIPANTS[year]]:
                person_year = await participation.set_participation(person.id, year, True)
                signatures[year].append(person_year.signature)

            pralines[year] = []
            for name, description, is_vegan in PRALINES:
                praline = await catalog.create_praline(
                    year, PralineCreate(name=name, description=description, is_vegan=is_vegan)
                )
                pralines[year].append(praline.id)

            for index, count in enumerate(RATING_COUNTS[year]):
                for praline_index in range(count):
                    await rating.submit_rating(
                        signatures[year][index],
                        pralines[year][praline_index],
                        rng.randint(1, 5),
                        COMMENTS.get((index, praline_index)),
                    )
                    rating_total += 1
            logger.info("Seeded year %s", year)

        for year, index, favorite, feedback, allergies in FEEDBACK:
            await rating.update_feedback(
                signatures[year][index],
                favorite_chocolate_id=pralines[year][favorite],
                general_feedback=feedback,
                allergies=allergies,
            )

    summary = {
        "years": YEARS,
        "persons": len(PERSONS),
        "person_years": sum(len(values) for values in signatures.values()),
        "pralines": sum(len(values) for values in pralines.values()),
        "ratings": rating_total,
    }
    logger.info("Seeding complete: %s", summary)
    return summary


__all__ = ["clear", "seed"]
