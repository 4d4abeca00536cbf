"""Shared test fixtures."""

from __future__ import annotations

import asyncio
import uuid

import pytest
import requests
from requests.structures import CaseInsensitiveDict

from seo_scanner.fetcher import FetchResult
from seo_scanner.storage import StoreError, utcnow

BASE = "https://example.com"

TITLE = "Acme Plumbing | Emergency Repairs and Installations 24/7"
DESCRIPTION = ("Fast, friendly plumbing repairs and installations across Springfield. " * 3)[:155]
BODY_TEXT = " ".join(["pipes"] * 400)

HEALTHY_ROBOTS = "User-agent: *\nAllow: /\nDisallow: /wp-admin\nSitemap: https://example.com/sitemap.xml\n"
HEALTHY_SITEMAP = (
    '<?xml version="1.0" encoding="UTF-8"?>\n'
    '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">'
    "<url><loc>https://example.com/</loc></url>"
    "<url><loc>https://example.com/services</loc></url>"
    "</urlset>"
)


def run_async(coro):
    """Helper to run async functions in sync tests."""
    return asyncio.run(coro)


def build_page(
    title: str | None = TITLE,
    description: str | None = DESCRIPTION,
    viewport: bool = True,
    og: tuple[str, ...] = ("og:title", "og:description", "og:image"),
    canonical: bool = True,
    h1_count: int = 1,
    jsonld: bool = True,
    body_text: str = BODY_TEXT,
    images: str = '<img src="/logo.png" alt="Acme logo"><img src="/van.jpg" alt="Service van">',
    links: str | None = None,
) -> str:
    head = []
    if title is not None:
        head.append(f"<title>{title}</title>")
    if description is not None:
        head.append(f'<meta name="description" content="{description}">')
    if viewport:
        head.append('<meta name="viewport" content="width=device-width, initial-scale=1">')
    for prop in og:
        head.append(f'<meta property="{prop}" content="Acme">')
    if canonical:
        head.append('<link rel="canonical" href="https://example.com/">')
    if jsonld:
        head.append('<script type="application/ld+json">{"@context": "https://schema.org", "@type": "Organization"}</script>')

    if links is None:
        links = (
            '<a href="/">Home</a>'
            '<a href="/services">Services</a>'
            '<a href="/about">About</a>'
            '<a href="https://example.com/contact">Contact</a>'
            '<a href="https://www.example.com/blog">Blog</a>'
            '<a href="https://www.google.com/maps">Map</a>'
        )
    h1s = "".join("<h1>Acme Plumbing</h1>" for _ in range(h1_count))
    return (
        "<!DOCTYPE html><html lang=\"en\"><head>"
        + "".join(head)
        + "</head><body>"
        + f"<nav>{links}</nav>{h1s}<p>{body_text}</p>{images}"
        + "</body></html>"
    )


def make_page(html: str, url: str = BASE, status: int = 200, elapsed_ms: int = 120) -> FetchResult:
    return FetchResult(url=url, status_code=status, html=html, elapsed_ms=elapsed_ms)


def make_response(
    url: str,
    status: int = 200,
    text: str = "",
    headers: dict | None = None,
    redirected: bool = False,
) -> requests.Response:
    resp = requests.Response()
    resp.status_code = status
    resp._content = text.encode("utf-8")
    resp.encoding = "utf-8"
    resp.headers = CaseInsensitiveDict(headers or {})
    resp.url = url
    if redirected:
        resp.history = [requests.Response()]
    return resp


class FakeWeb:
    """Stands in for requests.request, routed by (method, url)."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], object] = {}
        self.calls: list[tuple[str, str, bool]] = []

    def add(self, url: str, method: str = "GET", **response) -> FakeWeb:
        self.routes[(method, url)] = response
        return self

    def fail(self, url: str, method: str = "GET", exc: Exception | None = None) -> FakeWeb:
        self.routes[(method, url)] = exc or requests.ConnectionError(f"connection refused: {url}")
        return self

    def __call__(self, method, url, headers=None, timeout=None, allow_redirects=True, **kwargs):
        self.calls.append((method, url, allow_redirects))
        route = self.routes.get((method, url))
        if route is None:
            raise requests.ConnectionError(f"no route to {url}")
        if isinstance(route, Exception):
            raise route
        return make_response(url, **route)

    def requested(self, method: str, url: str) -> bool:
        return any(m == method and u == url for m, u, _ in self.calls)


@pytest.fixture
def web(monkeypatch) -> FakeWeb:
    fake = FakeWeb()
    monkeypatch.setattr("seo_scanner.fetcher.requests.request", fake)
    return fake


def serve_healthy_site(web: FakeWeb, html: str | None = None, base: str = BASE) -> FakeWeb:
    host = base.split("://", 1)[1]
    web.add(base, text=html if html is not None else build_page())
    web.add(base, method="HEAD")
    web.add(f"http://{host}", status=301, headers={"Location": f"{base}/"})
    web.add(f"{base}/robots.txt", text=HEALTHY_ROBOTS)
    web.add(f"{base}/sitemap.xml", text=HEALTHY_SITEMAP)
    web.add(f"{base}/favicon.ico", method="HEAD")
    web.add(f"{base}/llms.txt", text="# Acme Plumbing\n")
    return web


@pytest.fixture
def healthy_site(web: FakeWeb) -> FakeWeb:
    return serve_healthy_site(web)


class MemoryAuditStore:
    """Dict-backed AuditStore double for tests that don't need SQLite."""

    def __init__(self) -> None:
        self.tables: dict[str, list[dict]] = {
            "clients": [],
            "scan_jobs": [],
            "site_audits": [],
            "agent_runs": [],
        }

    def _insert(self, table: str, row: dict) -> str:
        record = {"id": str(uuid.uuid4()), "created_at": utcnow(), **row}
        self.tables[table].append(record)
        return record["id"]

    async def get_client(self, client_id):
        return next((c for c in self.tables["clients"] if c["id"] == client_id), None)

    async def find_client_by_domain(self, domain):
        return next((c for c in self.tables["clients"] if c["domain"] == domain), None)

    async def add_client(self, domain, **fields):
        fields.setdefault("active", True)
        return await self.get_client(self._insert("clients", {"domain": domain, **fields}))

    async def list_active_clients(self):
        return [c for c in self.tables["clients"] if c["active"]]

    async def create_scan_job(self, row):
        return self._insert("scan_jobs", row)

    async def update_scan_job(self, job_id, fields):
        for job in self.tables["scan_jobs"]:
            if job["id"] == job_id:
                job.update(fields)
                return
        raise StoreError(f"Scan job {job_id} not found")

    async def latest_scan_job(self, client_id):
        completed = [
            j for j in self.tables["scan_jobs"]
            if j["client_id"] == client_id and j["status"] == "completed"
        ]
        return max(completed, key=lambda j: j["completed_at"], default=None)

    async def insert_audit_issues(self, rows):
        for row in rows:
            self._insert("site_audits", row)
        return len(rows)

    async def replace_audit_issues(self, client_id, rows):
        self.tables["site_audits"] = [r for r in self.tables["site_audits"] if r["client_id"] != client_id]
        return await self.insert_audit_issues(rows)

    async def list_audit_issues(self, client_id):
        return [r for r in self.tables["site_audits"] if r["client_id"] == client_id]

    async def insert_agent_run(self, row):
        return self._insert("agent_runs", row)
