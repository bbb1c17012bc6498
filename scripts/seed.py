#!/usr/bin/env python
"""
Replace the configured database's contents with the demo data set.

Usage:
    python scripts/seed.py
"""

from __future__ import annotations

import asyncio
import logging

from tasting.core.database import database_manager
from tasting.seed import seed

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("tasting.seed_script")


async def main() -> None:
    await database_manager.initialize()
    try:
        await database_manager.create_all()
        summary = await seed(database_manager)
    finally:
        await database_manager.close()
    logger.info("Years: %s", ", ".join(str(year) for year in summary["years"]))
    logger.info(
        "Persons: %s, participations: %s, pralines: %s, ratings: %s",
        summary["persons"],
        summary["person_years"],
        summary["pralines"],
        summary["ratings"],
    )


if __name__ == "__main__":
    asyncio.run(main())
