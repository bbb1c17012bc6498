"""Command line entry for the tasting service."""

from __future__ import annotations

import argparse
import asyncio
import logging
from datetime import timedelta
from typing import Optional, Sequence

import uvicorn

from tasting.core.database import database_manager
from tasting.core.observability import configure_logging
from tasting.core.security import create_access_token

logger = logging.getLogger("tasting.cli")


def run_server(host: str = "0.0.0.0", port: int = 8080) -> None:
    uvicorn.run("tasting.api.main:app", host=host, port=port)


async def _init_db() -> None:
    await database_manager.initialize()
    try:
        await database_manager.create_all()
    finally:
        await database_manager.close()


async def _seed() -> None:
    from tasting.seed import seed

    await database_manager.initialize()
    try:
        await database_manager.create_all()
        summary = await seed(database_manager)
    finally:
        await database_manager.close()
    logger.info("Seed summary: %s", summary)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tasting", description="Praline tasting service")
    subcommands = parser.add_subparsers(dest="command", required=True)

    serve = subcommands.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="0.0.0.0")
    serve.add_argument("--port", type=int, default=8080)

    subcommands.add_parser("init-db", help="Create all tables")
    subcommands.add_parser("seed", help="Replace all data with the demo data set")

    token = subcommands.add_parser("issue-token", help="Print an admin bearer token")
    token.add_argument("--subject", required=True)
    token.add_argument("--minutes", type=int, default=None)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    configure_logging()

    if args.command == "serve":
        run_server(args.host, args.port)
    elif args.command == "init-db":
        asyncio.run(_init_db())
    elif args.command == "seed":
        asyncio.run(_seed())
    elif args.command == "issue-token":
        expires = timedelta(minutes=args.minutes) if args.minutes else None
        print(create_access_token(args.subject, expires_delta=expires, claims={"role": "admin"}))


if __name__ == "__main__":
    main()
