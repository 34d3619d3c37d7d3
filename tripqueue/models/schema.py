# tripqueue/models/schema.py
"""
Database schema definition for the SQLite queue store.
"""

import logging

import aiosqlite

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1

QUEUE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS queue (
    id TEXT PRIMARY KEY,
    destination TEXT NOT NULL,
    duration_days INTEGER NOT NULL CHECK(duration_days >= 1),
    status TEXT NOT NULL CHECK(status IN ('pending', 'in-progress', 'failed')),
    created_at TEXT NOT NULL,
    locked_at TEXT,
    error TEXT
)
"""


async def _get_schema_version(db: aiosqlite.Connection) -> int:
    """Get current schema version (0 if no version table exists)."""
    try:
        cursor = await db.execute("SELECT version FROM schema_version LIMIT 1")
        row = await cursor.fetchone()
        return row[0] if row else 0
    except aiosqlite.OperationalError:
        return 0


async def _set_schema_version(db: aiosqlite.Connection, version: int) -> None:
    await db.execute("CREATE TABLE IF NOT EXISTS schema_version (version INTEGER)")
    await db.execute("DELETE FROM schema_version")
    await db.execute("INSERT INTO schema_version (version) VALUES (?)", (version,))


async def init_db(db_path: str) -> None:
    """
    Create tables and enable WAL mode.

    Args:
        db_path: Path to SQLite database file
    """
    async with aiosqlite.connect(db_path) as db:
        await db.execute("PRAGMA journal_mode=WAL")
        await db.execute(QUEUE_TABLE_SQL)

        version = await _get_schema_version(db)
        if version < SCHEMA_VERSION:
            await _set_schema_version(db, SCHEMA_VERSION)
            logger.info(f"Initialized queue schema v{SCHEMA_VERSION} at {db_path}")

        await db.commit()
