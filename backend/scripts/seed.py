from __future__ import annotations

import argparse
import asyncio

from devevents.core.config import get_settings
from devevents.core.logging import get_logger, setup_logging
from devevents.db.base import Base
from devevents.db.connection import ConnectionManager
from devevents.seed import seed_events

logger = get_logger(__name__)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed the DevEvents catalogue")
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create missing tables first (local SQLite databases; use alembic elsewhere)",
    )
    return parser.parse_args()


async def run(create_tables: bool) -> int:
    manager = ConnectionManager(get_settings())
    try:
        engine = await manager.acquire()
        if create_tables:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)

        async with manager.session_factory() as session:
            created = await seed_events(session)
        return len(created)
    finally:
        await manager.release()


def main() -> None:
    args = parse_args()
    setup_logging()
    created = asyncio.run(run(args.create_tables))
    print(f"Seeded {created} events")


if __name__ == "__main__":
    main()
