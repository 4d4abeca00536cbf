"""Single-page technical SEO scan: fetch, run the check battery, score."""

from __future__ import annotations

import asyncio
import logging
import re
import time
from datetime import datetime, timezone
from typing import Callable, Optional

from seo_scanner.analyzers import (
    HTML_CHECKS,
    check_favicon,
    check_http_redirect,
    check_http_status,
    check_llms_txt,
    check_response_time,
    check_robots_txt,
    check_sitemap,
    check_ssl,
)
from seo_scanner.config import TOTAL_CHECKS
from seo_scanner.fetcher import FetchError, FetchResult, fetch_page, normalize_url
from seo_scanner.models import AuditIssue, ScanMeta, ScanResult
from seo_scanner.scoring import compute_stats

logger = logging.getLogger(__name__)

_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)

Check = Callable[..., list[AuditIssue]]


def normalize_domain(value: str) -> str:
    domain = _SCHEME_RE.sub("", value.strip())
    if domain.lower().startswith("www."):
        domain = domain[4:]
    return domain.rstrip("/")


def build_result(
    domain: str,
    issues: list[AuditIssue],
    meta: ScanMeta,
    total_checks: int = TOTAL_CHECKS,
) -> ScanResult:
    stats, score = compute_stats(issues, total_checks)
    return ScanResult(
        domain=domain,
        scanned_at=datetime.now(timezone.utc),
        score=score,
        issues=tuple(issues),
        stats=stats,
        meta=meta,
    )


def unreachable_result(domain: str, base_url: str, error: str, elapsed_ms: int = 0) -> ScanResult:
    issue = AuditIssue(
        severity="critical",
        category="performance",
        title="Site unreachable",
        description=(
            f"Could not connect to {base_url}. The site may be down, blocking automated "
            "requests, or the domain may not exist."
        ),
        recommendation="Verify the domain is correct and the site is online. Check server logs for connection issues.",
        url=base_url,
        evidence={"error": error},
    )
    stats, _ = compute_stats([issue], total_checks=1)
    return ScanResult(
        domain=domain,
        scanned_at=datetime.now(timezone.utc),
        score=0,
        issues=(issue,),
        stats=stats,
        meta=ScanMeta(response_time_ms=elapsed_ms),
    )


def _fetch_homepage(base_url: str) -> tuple[Optional[FetchResult], str, int]:
    """Fetch over the given scheme, falling back to plain HTTP once."""
    start = time.perf_counter()
    try:
        return fetch_page(base_url), "", 0
    except FetchError as e:
        error = e.reason
        logger.debug("Homepage fetch failed for %s: %s", base_url, error)

    if base_url.lower().startswith("https://"):
        http_url = "http://" + base_url[len("https://"):]
        try:
            page = fetch_page(http_url)
            # Count the failed HTTPS attempt too
            page.elapsed_ms = int((time.perf_counter() - start) * 1000)
            return page, "", 0
        except FetchError as e:
            logger.debug("HTTP fallback failed for %s: %s", http_url, e.reason)

    return None, error, int((time.perf_counter() - start) * 1000)


async def _run_concurrently(*calls: tuple) -> list[Optional[list[AuditIssue]]]:
    """Run blocking checks in threads; a crashed check yields None, not an abort."""
    results = await asyncio.gather(
        *(asyncio.to_thread(fn, *args) for fn, *args in calls),
        return_exceptions=True,
    )
    collected: list[Optional[list[AuditIssue]]] = []
    for (fn, *_), result in zip(calls, results):
        if isinstance(result, Exception):
            logger.error("Check %s failed", fn.__name__, exc_info=result)
            collected.append(None)
        elif isinstance(result, BaseException):
            raise result
        else:
            collected.append(result)
    return collected


def _run_check(check: Check, page: FetchResult) -> list[AuditIssue]:
    try:
        return check(page)
    except Exception:
        logger.exception("Check %s failed", check.__name__)
        return []


async def scan_domain(domain_or_url: str) -> ScanResult:
    if not isinstance(domain_or_url, str) or not domain_or_url.strip():
        raise ValueError("scan_domain() needs a non-empty domain or URL string")

    base_url = normalize_url(domain_or_url)
    domain = normalize_domain(domain_or_url)
    logger.info("Scanning %s", base_url)

    page, error, elapsed_ms = await asyncio.to_thread(_fetch_homepage, base_url)
    if page is None:
        logger.warning("Site unreachable: %s (%s)", base_url, error)
        return unreachable_result(domain, base_url, error, elapsed_ms)

    issues: list[AuditIssue] = []

    ssl_issues, redirect_issues = await _run_concurrently(
        (check_ssl, base_url),
        (check_http_redirect, base_url),
    )
    discovery = await _run_concurrently(
        (check_robots_txt, page.base_url),
        (check_sitemap, page.base_url),
        (check_favicon, page.base_url),
        (check_llms_txt, page.base_url),
    )
    for found in (ssl_issues, redirect_issues, *discovery):
        issues.extend(found or [])

    issues.extend(check_response_time(page.elapsed_ms, page.url))
    for check in HTML_CHECKS:
        issues.extend(_run_check(check, page))
    issues.extend(check_http_status(page.status_code, page.url))

    meta = ScanMeta(
        response_time_ms=page.elapsed_ms,
        http_status=page.status_code,
        redirects=page.redirected,
        ssl=ssl_issues is not None and not ssl_issues,
    )
    result = build_result(domain, issues, meta)
    logger.info(
        "Scan of %s finished: score=%d issues=%d",
        domain, result.score, len(result.issues),
    )
    return result
