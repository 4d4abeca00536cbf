"""SQLite connection management and schema setup."""

from __future__ import annotations

import logging
from pathlib import Path

import aiosqlite

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1

MEMORY = ":memory:"

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER NOT NULL
);

CREATE TABLE IF NOT EXISTS clients (
    id TEXT PRIMARY KEY,
    domain TEXT NOT NULL,
    name TEXT NOT NULL DEFAULT '',
    site_url TEXT,
    owner_id TEXT,
    active INTEGER NOT NULL DEFAULT 1,
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS scan_jobs (
    id TEXT PRIMARY KEY,
    client_id TEXT NOT NULL,
    url TEXT NOT NULL DEFAULT '',
    status TEXT NOT NULL DEFAULT 'pending',
    depth TEXT NOT NULL DEFAULT 'standard',
    pages_scanned INTEGER NOT NULL DEFAULT 0,
    started_at TEXT,
    completed_at TEXT,
    results TEXT,
    created_at TEXT NOT NULL,
    FOREIGN KEY (client_id) REFERENCES clients(id)
);

CREATE TABLE IF NOT EXISTS site_audits (
    id TEXT PRIMARY KEY,
    client_id TEXT NOT NULL,
    audit_type TEXT NOT NULL,
    url TEXT NOT NULL DEFAULT '',
    severity TEXT NOT NULL,
    category TEXT NOT NULL,
    title TEXT NOT NULL,
    description TEXT NOT NULL DEFAULT '',
    recommendation TEXT NOT NULL DEFAULT '',
    evidence TEXT,
    is_fixed INTEGER NOT NULL DEFAULT 0,
    created_at TEXT NOT NULL,
    FOREIGN KEY (client_id) REFERENCES clients(id)
);

CREATE TABLE IF NOT EXISTS agent_runs (
    id TEXT PRIMARY KEY,
    agent_type TEXT NOT NULL,
    client_id TEXT NOT NULL,
    status TEXT NOT NULL,
    started_at TEXT,
    completed_at TEXT,
    duration_ms INTEGER NOT NULL DEFAULT 0,
    triggered_by TEXT NOT NULL DEFAULT 'manual',
    results TEXT,
    created_at TEXT NOT NULL,
    FOREIGN KEY (client_id) REFERENCES clients(id)
);

CREATE INDEX IF NOT EXISTS idx_clients_domain
    ON clients(domain);
CREATE INDEX IF NOT EXISTS idx_scan_jobs_client
    ON scan_jobs(client_id);
CREATE INDEX IF NOT EXISTS idx_site_audits_client
    ON site_audits(client_id);
"""


async def get_db(db_path: str | Path) -> aiosqlite.Connection:
    """Open (or create) the database and make sure the schema exists."""
    if str(db_path) != MEMORY:
        db_path = Path(db_path)
        db_path.parent.mkdir(parents=True, exist_ok=True)

    db = await aiosqlite.connect(str(db_path))
    db.row_factory = aiosqlite.Row
    try:
        await db.execute("PRAGMA journal_mode=WAL")
        await db.execute("PRAGMA foreign_keys=ON")
        await _migrate(db)
    except aiosqlite.Error:
        await db.close()
        raise
    return db


async def _migrate(db: aiosqlite.Connection) -> None:
    cursor = await db.execute(
        "SELECT name FROM sqlite_master WHERE type='table' AND name='schema_version'"
    )
    if await cursor.fetchone() is not None:
        cursor = await db.execute("SELECT version FROM schema_version")
        row = await cursor.fetchone()
        current = row[0] if row else 0
        if current > SCHEMA_VERSION:
            logger.warning(
                "Database schema version %d is newer than supported version %d",
                current,
                SCHEMA_VERSION,
            )
        return

    await db.executescript(SCHEMA_SQL)
    await db.execute(
        "INSERT INTO schema_version (version) VALUES (?)",
        (SCHEMA_VERSION,),
    )
    await db.commit()
    logger.info("Database initialized at schema version %d", SCHEMA_VERSION)
