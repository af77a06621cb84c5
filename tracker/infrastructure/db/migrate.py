from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Set

from .postgres import PostgresDatabase, load_config_from_env

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).parent / "migrations"


async def _ensure_migrations_table(db: PostgresDatabase) -> None:
    """
    Bookkeeping table of applied migration versions (001, 002, ...).
    """
    sql = """
    CREATE TABLE IF NOT EXISTS schema_migrations (
        version    TEXT PRIMARY KEY,
        applied_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    );
    """
    await db.execute(sql)


async def _get_applied_versions(db: PostgresDatabase) -> Set[str]:
    rows = await db.fetch("SELECT version FROM schema_migrations;")
    return {row["version"] for row in rows}


async def _apply_migration(db: PostgresDatabase, version: str, sql: str) -> None:
    """
    Applies one migration and records its version in the same transaction.
    """
    async def _run(conn) -> None:
        async with conn.transaction():
            await conn.execute(sql)
            await conn.execute(
                "INSERT INTO schema_migrations (version) VALUES ($1);",
                version,
            )

    await db.with_connection(_run)


def migration_version(path: Path) -> str:
    # 001_init.sql -> "001"
    return path.stem.split("_", 1)[0]


async def apply_pending(db: PostgresDatabase) -> list[str]:
    """
    Applies every *.sql in MIGRATIONS_DIR that is not recorded yet, in name
    order. Returns the applied versions.
    """
    if not MIGRATIONS_DIR.exists():
        raise RuntimeError(f"Migrations directory does not exist: {MIGRATIONS_DIR}")

    await _ensure_migrations_table(db)
    applied_versions = await _get_applied_versions(db)

    applied: list[str] = []
    for path in sorted(MIGRATIONS_DIR.glob("*.sql")):
        version = migration_version(path)
        if version in applied_versions:
            continue

        logger.info("Applying migration %s from %s", version, path.name)
        await _apply_migration(db, version, path.read_text(encoding="utf-8"))
        applied.append(version)

    if applied:
        logger.info("Migrations completed: %s", ", ".join(applied))
    else:
        logger.info("Schema is up to date.")
    return applied


async def run_migrations() -> None:
    db = PostgresDatabase(load_config_from_env())
    await db.connect()
    try:
        await apply_pending(db)
    finally:
        await db.close()


if __name__ == "__main__":
    from tracker.logging_setup import setup_logging

    setup_logging()
    asyncio.run(run_migrations())
