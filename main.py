import logging
import secrets
from contextlib import asynccontextmanager
from typing import NamedTuple, Optional

from fastapi import Depends, FastAPI, Header, HTTPException, Query, Request

from seo_scanner.config import CRON_SECRET, DB_PATH, LOG_LEVEL, SEVERITY_ORDER
from seo_scanner.jobs import run_batch, scan_client
from seo_scanner.models import (
    AuditResultsData,
    AuditResultsResponse,
    AuditScanData,
    AuditScanRequest,
    AuditScanResponse,
    CronResponse,
    ScanRequest,
    ScanResult,
)
from seo_scanner.scanner import scan_domain
from seo_scanner.storage import AuditStore, StoreError, open_store

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # A store installed before startup is kept as is
    opened = None
    if app.state.store is None:
        opened = app.state.store = await open_store(DB_PATH)
        logger.info("Audit store opened at %s", DB_PATH)
    yield
    if opened is not None:
        await opened.close()
        app.state.store = None


app = FastAPI(title="SEO Monitor Scanner", version="1.0.0", lifespan=lifespan)
app.state.store = None
app.state.cron_secret = CRON_SECRET


class CurrentUser(NamedTuple):
    user_id: str
    is_admin: bool


def get_store(request: Request) -> AuditStore:
    return request.app.state.store


def get_current_user(
    x_user_id: Optional[str] = Header(default=None),
    x_user_role: Optional[str] = Header(default=None),
) -> CurrentUser:
    # Identity comes from the upstream auth proxy
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return CurrentUser(user_id=x_user_id, is_admin=(x_user_role or "").lower() == "admin")


async def _get_owned_client(store: AuditStore, client_id: str, user: CurrentUser) -> dict:
    client = await store.get_client(client_id)
    if client is None:
        raise HTTPException(status_code=404, detail="Client not found")
    if not user.is_admin and client.get("owner_id") != user.user_id:
        raise HTTPException(status_code=403, detail="Forbidden")
    return client


@app.get("/api/health")
async def health():
    return {"status": "ok"}


@app.post("/api/scan", response_model=ScanResult)
async def run_scan(req: ScanRequest):
    try:
        return await scan_domain(req.url)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.post("/api/audit/scan", response_model=AuditScanResponse)
async def run_client_scan(
    req: AuditScanRequest,
    user: CurrentUser = Depends(get_current_user),
    store: AuditStore = Depends(get_store),
):
    client = await _get_owned_client(store, req.client_id, user)
    try:
        result, scan_job_id = await scan_client(store, client, triggered_by="manual")
    except StoreError as e:
        logger.exception("Could not start scan for client %s", req.client_id)
        raise HTTPException(status_code=500, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Client has no usable URL: {e}")

    return AuditScanResponse(
        success=True,
        data=AuditScanData(
            scan_job_id=scan_job_id,
            domain=result.domain,
            score=result.score,
            scanned_at=result.scanned_at,
            stats=result.stats,
            meta=result.meta,
            issues=list(result.issues),
        ),
    )


@app.get("/api/audit/results", response_model=AuditResultsResponse)
async def audit_results(
    client_id: str = Query(alias="clientId", min_length=1),
    user: CurrentUser = Depends(get_current_user),
    store: AuditStore = Depends(get_store),
):
    await _get_owned_client(store, client_id, user)
    try:
        rows = await store.list_audit_issues(client_id)
        latest = await store.latest_scan_job(client_id)
    except StoreError as e:
        raise HTTPException(status_code=500, detail=str(e))

    rank = {severity: i for i, severity in enumerate(SEVERITY_ORDER)}
    rows = sorted(rows, key=lambda r: r.get("created_at") or "", reverse=True)
    rows.sort(key=lambda r: rank.get(r.get("severity"), len(rank)))

    counts = dict.fromkeys(SEVERITY_ORDER, 0)
    for row in rows:
        if row.get("severity") in counts:
            counts[row["severity"]] += 1

    results = (latest or {}).get("results") or {}
    return AuditResultsResponse(
        success=True,
        data=AuditResultsData(
            client_id=client_id,
            score=results.get("score"),
            last_scanned_at=(latest or {}).get("completed_at"),
            counts=counts,
            issues=rows,
        ),
    )


@app.post("/api/cron/daily", response_model=CronResponse)
async def cron_daily(
    request: Request,
    x_cron_secret: Optional[str] = Header(default=None),
    store: AuditStore = Depends(get_store),
):
    expected = request.app.state.cron_secret
    if not expected or not x_cron_secret or not secrets.compare_digest(x_cron_secret, expected):
        raise HTTPException(status_code=401, detail="Invalid cron secret")

    try:
        summary = await run_batch(store, triggered_by="cron")
    except StoreError as e:
        logger.exception("Daily batch could not list clients")
        raise HTTPException(status_code=500, detail=str(e))
    return CronResponse(success=True, data=summary)
