"""SQLite-backed AuditStore."""

from __future__ import annotations

import json
import uuid
from pathlib import Path
from typing import Any, Optional

import aiosqlite

from seo_scanner.storage.base import StoreError, utcnow
from seo_scanner.storage.db import get_db

COLUMNS = {
    "clients": ("id", "domain", "name", "site_url", "owner_id", "active", "created_at"),
    "scan_jobs": (
        "id", "client_id", "url", "status", "depth", "pages_scanned",
        "started_at", "completed_at", "results", "created_at",
    ),
    "site_audits": (
        "id", "client_id", "audit_type", "url", "severity", "category", "title",
        "description", "recommendation", "evidence", "is_fixed", "created_at",
    ),
    "agent_runs": (
        "id", "agent_type", "client_id", "status", "started_at", "completed_at",
        "duration_ms", "triggered_by", "results", "created_at",
    ),
}

_JSON_COLUMNS = {"results", "evidence"}
_BOOL_COLUMNS = {"active", "is_fixed"}


def _encode(table: str, row: dict) -> dict:
    unknown = set(row) - set(COLUMNS[table])
    if unknown:
        raise StoreError(f"Unknown {table} columns: {', '.join(sorted(unknown))}")
    encoded = {}
    for key, value in row.items():
        if key in _JSON_COLUMNS and value is not None:
            value = json.dumps(value, default=str)
        elif key in _BOOL_COLUMNS:
            value = int(bool(value))
        encoded[key] = value
    return encoded


def _decode(row: aiosqlite.Row) -> dict:
    record = dict(row)
    for key in _JSON_COLUMNS & record.keys():
        if record[key] is not None:
            record[key] = json.loads(record[key])
    for key in _BOOL_COLUMNS & record.keys():
        record[key] = bool(record[key])
    return record


class SqliteAuditStore:
    """AuditStore over one aiosqlite connection."""

    def __init__(self, db: aiosqlite.Connection) -> None:
        self._db = db

    async def close(self) -> None:
        await self._db.close()

    async def _execute(self, sql: str, params: tuple = ()) -> aiosqlite.Cursor:
        try:
            cursor = await self._db.execute(sql, params)
            await self._db.commit()
        except aiosqlite.Error as e:
            raise StoreError(str(e)) from e
        return cursor

    async def _fetchall(self, sql: str, params: tuple = ()) -> list[dict]:
        try:
            cursor = await self._db.execute(sql, params)
            return [_decode(row) async for row in cursor]
        except aiosqlite.Error as e:
            raise StoreError(str(e)) from e

    async def _fetchone(self, sql: str, params: tuple = ()) -> Optional[dict]:
        rows = await self._fetchall(sql, params)
        return rows[0] if rows else None

    @staticmethod
    def _insert_sql(table: str, row: dict) -> tuple[str, dict]:
        record = _encode(table, {"id": str(uuid.uuid4()), "created_at": utcnow(), **row})
        columns = ", ".join(record)
        placeholders = ", ".join("?" for _ in record)
        return f"INSERT INTO {table} ({columns}) VALUES ({placeholders})", record

    async def _insert(self, table: str, row: dict) -> str:
        sql, record = self._insert_sql(table, row)
        await self._execute(sql, tuple(record.values()))
        return record["id"]

    # --- clients ---

    async def get_client(self, client_id: str) -> Optional[dict]:
        return await self._fetchone("SELECT * FROM clients WHERE id = ?", (client_id,))

    async def find_client_by_domain(self, domain: str) -> Optional[dict]:
        return await self._fetchone(
            "SELECT * FROM clients WHERE domain = ? ORDER BY created_at LIMIT 1",
            (domain,),
        )

    async def add_client(self, domain: str, **fields: Any) -> dict:
        client_id = await self._insert("clients", {"domain": domain, **fields})
        return await self.get_client(client_id)

    async def list_active_clients(self) -> list[dict]:
        return await self._fetchall("SELECT * FROM clients WHERE active = 1 ORDER BY created_at")

    # --- scan jobs ---

    async def create_scan_job(self, row: dict) -> str:
        return await self._insert("scan_jobs", row)

    async def update_scan_job(self, job_id: str, fields: dict) -> None:
        encoded = _encode("scan_jobs", fields)
        assignments = ", ".join(f"{key} = ?" for key in encoded)
        cursor = await self._execute(
            f"UPDATE scan_jobs SET {assignments} WHERE id = ?",
            (*encoded.values(), job_id),
        )
        if cursor.rowcount == 0:
            raise StoreError(f"Scan job {job_id} not found")

    async def latest_scan_job(self, client_id: str) -> Optional[dict]:
        return await self._fetchone(
            "SELECT * FROM scan_jobs WHERE client_id = ? AND status = 'completed' "
            "ORDER BY completed_at DESC LIMIT 1",
            (client_id,),
        )

    # --- audit issues ---

    async def insert_audit_issues(self, rows: list[dict]) -> int:
        return await self._write_audit_rows(None, rows)

    async def replace_audit_issues(self, client_id: str, rows: list[dict]) -> int:
        return await self._write_audit_rows(client_id, rows)

    async def _write_audit_rows(self, replace_for: Optional[str], rows: list[dict]) -> int:
        # One transaction: old rows survive if any insert fails
        try:
            if replace_for is not None:
                await self._db.execute("DELETE FROM site_audits WHERE client_id = ?", (replace_for,))
            for row in rows:
                sql, record = self._insert_sql("site_audits", row)
                await self._db.execute(sql, tuple(record.values()))
            await self._db.commit()
        except aiosqlite.Error as e:
            await self._db.rollback()
            raise StoreError(str(e)) from e
        except StoreError:
            await self._db.rollback()
            raise
        return len(rows)

    async def list_audit_issues(self, client_id: str) -> list[dict]:
        return await self._fetchall(
            "SELECT * FROM site_audits WHERE client_id = ? ORDER BY created_at",
            (client_id,),
        )

    # --- agent runs ---

    async def insert_agent_run(self, row: dict) -> str:
        return await self._insert("agent_runs", row)

    async def list_agent_runs(self, client_id: Optional[str] = None) -> list[dict]:
        if client_id is None:
            return await self._fetchall("SELECT * FROM agent_runs ORDER BY created_at")
        return await self._fetchall(
            "SELECT * FROM agent_runs WHERE client_id = ? ORDER BY created_at",
            (client_id,),
        )


async def open_store(db_path: str | Path) -> SqliteAuditStore:
    try:
        db = await get_db(db_path)
    except (aiosqlite.Error, OSError) as e:
        raise StoreError(f"Could not open store at {db_path}: {e}") from e
    return SqliteAuditStore(db)
