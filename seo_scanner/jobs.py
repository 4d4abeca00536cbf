"""Scan triggers: one client, every active client, or a list of domains."""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import NamedTuple, Optional

from seo_scanner.fetcher import normalize_url
from seo_scanner.models import BatchSummary, ClientScanSummary, ScanResult
from seo_scanner.scanner import normalize_domain, scan_domain
from seo_scanner.storage import (
    AuditStore,
    StoreError,
    agent_run_row,
    record_scan,
    utcnow,
)

logger = logging.getLogger(__name__)


class ClientScan(NamedTuple):
    result: ScanResult
    scan_job_id: str


def target_url_for(client: dict) -> str:
    return client.get("site_url") or f"https://{client['domain']}"


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


async def scan_client(store: AuditStore, client: dict, triggered_by: str = "manual") -> ClientScan:
    """Scan one client's site and persist the outcome.

    A StoreError creating the initial scan job propagates; later storage
    failures are logged by record_scan.
    """
    target_url = target_url_for(client)
    started_at = utcnow()
    start = time.perf_counter()

    scan_job_id = await store.create_scan_job({
        "client_id": client["id"],
        "url": target_url,
        "status": "running",
        "started_at": started_at,
        "depth": "standard",
        "pages_scanned": 0,
    })

    result = await scan_domain(target_url)
    await record_scan(
        store,
        scan_job_id,
        client["id"],
        target_url,
        result,
        started_at=started_at,
        duration_ms=_elapsed_ms(start),
        triggered_by=triggered_by,
    )
    return ClientScan(result, scan_job_id)


async def run_batch(store: AuditStore, triggered_by: str = "cron") -> BatchSummary:
    """Scan every active client one after another and summarise."""
    clients = await store.list_active_clients()
    logger.info("Batch scan of %d active clients", len(clients))

    summaries: list[ClientScanSummary] = []
    # Sequential on purpose: never hit many target servers at once
    for client in clients:
        summaries.append(await _scan_for_batch(store, client, triggered_by))

    successful = [s for s in summaries if s.status == "success"]
    average = round(sum(s.score for s in successful) / len(successful)) if successful else 0
    summary = BatchSummary(
        scanned_at=datetime.now(timezone.utc),
        total_clients=len(clients),
        successful=len(successful),
        failed=len(summaries) - len(successful),
        average_score=average,
        total_duration_ms=sum(s.duration_ms for s in summaries),
        results=summaries,
    )
    logger.info(
        "Batch finished: %d ok, %d failed, average score %d",
        summary.successful, summary.failed, summary.average_score,
    )
    return summary


async def _scan_for_batch(store: AuditStore, client: dict, triggered_by: str) -> ClientScanSummary:
    client_id = str(client["id"])
    domain = str(client.get("domain", ""))
    started_at = utcnow()
    start = time.perf_counter()

    try:
        result, scan_job_id = await scan_client(store, client, triggered_by=triggered_by)
    except Exception as e:
        logger.exception("Scan failed for client %s (%s)", client_id, domain)
        try:
            await store.insert_agent_run(agent_run_row(
                client_id,
                status="failed",
                started_at=started_at,
                duration_ms=_elapsed_ms(start),
                triggered_by=triggered_by,
                results={"error": str(e)},
            ))
        except StoreError:
            logger.exception("Failed to record failed agent run for client %s", client_id)
        return ClientScanSummary(
            client_id=client_id,
            domain=domain,
            status="error",
            error=str(e),
            duration_ms=_elapsed_ms(start),
        )

    return ClientScanSummary(
        client_id=client_id,
        domain=domain,
        score=result.score,
        issues_found=len(result.issues),
        scan_job_id=scan_job_id,
        status="success",
        duration_ms=_elapsed_ms(start),
    )


async def backfill_domains(
    store: AuditStore,
    domains: Iterable[str],
    triggered_by: str = "manual",
) -> list[tuple[str, Optional[ScanResult]]]:
    """Scan raw domains and replace each one's stored audit rows.

    Unknown domains get a client record. Domains are scanned sequentially.
    A domain that is blank, or whose client and scan job cannot be set up
    in the store, is reported with a None result and the loop moves on.
    """
    outcomes: list[tuple[str, Optional[ScanResult]]] = []
    for raw in domains:
        domain = normalize_domain(raw)
        if not domain:
            logger.warning("Skipping empty domain entry %r", raw)
            outcomes.append((raw, None))
            continue

        target_url = normalize_url(raw)
        started_at = utcnow()
        start = time.perf_counter()

        try:
            client = await store.find_client_by_domain(domain) or await store.add_client(domain=domain)
            scan_job_id = await store.create_scan_job({
                "client_id": client["id"],
                "url": target_url,
                "depth": "standard",
                "status": "running",
                "started_at": started_at,
                "pages_scanned": 0,
            })
        except StoreError:
            logger.exception("Could not prepare a scan job for %s", domain)
            outcomes.append((domain, None))
            continue

        result = await scan_domain(raw)
        await record_scan(
            store,
            scan_job_id,
            client["id"],
            target_url,
            result,
            started_at=started_at,
            duration_ms=_elapsed_ms(start),
            triggered_by=triggered_by,
            audit_type="full",
            replace=True,
        )
        outcomes.append((domain, result))
    return outcomes
