"""Store protocol, row builders and the scan persistence policy."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Optional, Protocol

from seo_scanner.config import AGENT_TYPE, AUDIT_TYPE
from seo_scanner.models import ScanResult

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Raised by store implementations when a read or write fails."""


class AuditStore(Protocol):
    async def get_client(self, client_id: str) -> Optional[dict]: ...

    async def find_client_by_domain(self, domain: str) -> Optional[dict]: ...

    async def add_client(self, domain: str, **fields: Any) -> dict: ...

    async def list_active_clients(self) -> list[dict]: ...

    async def create_scan_job(self, row: dict) -> str: ...

    async def update_scan_job(self, job_id: str, fields: dict) -> None: ...

    async def latest_scan_job(self, client_id: str) -> Optional[dict]: ...

    async def insert_audit_issues(self, rows: list[dict]) -> int: ...

    async def replace_audit_issues(self, client_id: str, rows: list[dict]) -> int:
        """Swap a client's audit rows for ``rows`` in one step."""
        ...

    async def list_audit_issues(self, client_id: str) -> list[dict]: ...

    async def insert_agent_run(self, row: dict) -> str: ...


def utcnow() -> str:
    return datetime.now(timezone.utc).isoformat()


def audit_rows(client_id: str, target_url: str, result: ScanResult, audit_type: str = AUDIT_TYPE) -> list[dict]:
    return [
        {
            "client_id": client_id,
            "audit_type": audit_type,
            "url": issue.url or target_url,
            "severity": issue.severity,
            "category": issue.category,
            "title": issue.title,
            "description": issue.description,
            "recommendation": issue.recommendation,
            "evidence": dict(issue.evidence),
            "is_fixed": False,
        }
        for issue in result.issues
    ]


def scan_summary(result: ScanResult) -> dict:
    return {
        "score": result.score,
        "domain": result.domain,
        "scannedAt": result.scanned_at.isoformat(),
        "stats": result.stats.model_dump(by_alias=True),
        "meta": result.meta.model_dump(by_alias=True),
        "issueCount": len(result.issues),
    }


def agent_run_row(
    client_id: str,
    status: str,
    started_at: str,
    duration_ms: int,
    triggered_by: str,
    results: dict,
) -> dict:
    return {
        "agent_type": AGENT_TYPE,
        "client_id": client_id,
        "status": status,
        "started_at": started_at,
        "completed_at": utcnow(),
        "duration_ms": duration_ms,
        "triggered_by": triggered_by,
        "results": results,
    }


async def record_scan(
    store: AuditStore,
    scan_job_id: str,
    client_id: str,
    target_url: str,
    result: ScanResult,
    started_at: str,
    duration_ms: int,
    triggered_by: str = "manual",
    audit_type: str = AUDIT_TYPE,
    replace: bool = False,
) -> None:
    """Persist a finished scan. Storage failures are logged, never raised:
    the scan already succeeded and its result is returned regardless.

    With ``replace`` the client's previous audit rows are swapped out
    atomically, so a failed write leaves the old rows in place.
    """
    rows = audit_rows(client_id, target_url, result, audit_type=audit_type)
    try:
        if replace:
            await store.replace_audit_issues(client_id, rows)
        elif rows:
            await store.insert_audit_issues(rows)
    except StoreError:
        logger.exception("Failed to write %d audit rows for client %s", len(rows), client_id)

    try:
        await store.update_scan_job(scan_job_id, {
            "status": "completed",
            "completed_at": utcnow(),
            "pages_scanned": 1,
            "results": scan_summary(result),
        })
    except StoreError:
        logger.exception("Failed to update scan job %s", scan_job_id)

    try:
        await store.insert_agent_run(agent_run_row(
            client_id,
            status="completed",
            started_at=started_at,
            duration_ms=duration_ms,
            triggered_by=triggered_by,
            results={
                "score": result.score,
                "stats": result.stats.model_dump(by_alias=True),
                "issuesFound": len(result.issues),
                "scanJobId": scan_job_id,
            },
        ))
    except StoreError:
        logger.exception("Failed to record agent run for client %s", client_id)
