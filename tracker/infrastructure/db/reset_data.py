from __future__ import annotations

import asyncio
import logging

from tracker.infrastructure.db.postgres import PostgresDatabase, load_config_from_env

logger = logging.getLogger(__name__)

_TRUNCATE_SQL = """
TRUNCATE TABLE
    time_entries,
    tasks,
    team_members,
    teams,
    diaries
RESTART IDENTITY CASCADE;
"""


async def reset_domain_data() -> None:
    """
    Empties the domain tables.

    schema_migrations stays, so migrations remain applied. app_users stays
    too: accounts belong to the sign-up flow, not to this service.
    """
    db = PostgresDatabase(load_config_from_env())
    await db.connect()

    try:
        logger.info("Resetting domain data")
        await db.execute(_TRUNCATE_SQL)
        logger.info("Reset done")
    finally:
        await db.close()


if __name__ == "__main__":
    from tracker.logging_setup import setup_logging

    setup_logging()
    asyncio.run(reset_domain_data())
