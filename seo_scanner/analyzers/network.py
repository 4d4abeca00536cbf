from seo_scanner.config import (
    REDIRECT_STATUSES,
    RESPONSE_TIME_CRITICAL_MS,
    RESPONSE_TIME_OK_MS,
    RESPONSE_TIME_SLOW_MS,
)
from seo_scanner.fetcher import FetchError, fetch_with_timeout
from seo_scanner.models import AuditIssue


def check_ssl(base_url: str) -> list[AuditIssue]:
    https_url = "https://" + base_url.split("://", 1)[-1]
    try:
        resp = fetch_with_timeout(https_url, method="HEAD")
    except FetchError as e:
        return [AuditIssue(
            severity="critical",
            category="security",
            title="HTTPS not available",
            description="The site does not respond over HTTPS. This is a major security and ranking factor.",
            recommendation="Enable HTTPS with a valid SSL certificate. Google penalizes non-HTTPS sites in rankings.",
            url=https_url,
            evidence={"error": e.reason},
        )]

    if resp.status_code < 400:
        return []
    return [AuditIssue(
        severity="critical",
        category="security",
        title="SSL certificate issue",
        description=(
            f"HTTPS request returned status {resp.status_code}. "
            "The SSL certificate may be invalid or expired."
        ),
        recommendation="Install a valid SSL certificate. Use a free provider like Let's Encrypt or Cloudflare.",
        url=https_url,
        evidence={"status": resp.status_code},
    )]


def check_http_redirect(base_url: str) -> list[AuditIssue]:
    http_url = "http://" + base_url.split("://", 1)[-1]
    try:
        resp = fetch_with_timeout(http_url, allow_redirects=False)
    except FetchError:
        # Port 80 closed is acceptable when HTTPS works
        return []

    location = resp.headers.get("location", "")
    if resp.status_code in REDIRECT_STATUSES and location.startswith("https"):
        return []
    return [AuditIssue(
        severity="high",
        category="security",
        title="HTTP does not redirect to HTTPS",
        description=(
            "Requests to the HTTP version of the site do not redirect to HTTPS. "
            "This can cause duplicate content and security warnings."
        ),
        recommendation="Set up a 301 redirect from HTTP to HTTPS in your server configuration or .htaccess file.",
        url=http_url,
        evidence={"status": resp.status_code, "location": location},
    )]


def check_response_time(response_time_ms: int, url: str) -> list[AuditIssue]:
    seconds = f"{response_time_ms / 1000:.1f}s"
    evidence = {"responseTimeMs": response_time_ms}

    if response_time_ms >= RESPONSE_TIME_CRITICAL_MS:
        return [AuditIssue(
            severity="critical",
            category="performance",
            title="Extremely slow page load",
            description=(
                f"The homepage took {seconds} to respond. "
                "Google recommends under 2.5s for good user experience."
            ),
            recommendation="Investigate server performance, enable caching, optimize images, and consider a CDN.",
            url=url,
            evidence=evidence,
        )]
    if response_time_ms > RESPONSE_TIME_SLOW_MS:
        return [AuditIssue(
            severity="high",
            category="performance",
            title="Slow page response",
            description=(
                f"The homepage took {seconds} to respond. "
                "Target under 2.5s for Core Web Vitals compliance."
            ),
            recommendation=(
                "Optimize server response time. Enable compression, caching headers, "
                "and consider a faster hosting provider."
            ),
            url=url,
            evidence=evidence,
        )]
    if response_time_ms > RESPONSE_TIME_OK_MS:
        return [AuditIssue(
            severity="medium",
            category="performance",
            title="Page response could be faster",
            description=(
                f"The homepage took {seconds} to respond. "
                "Faster is better for both users and rankings."
            ),
            recommendation="Review server-side caching and asset compression to bring response time under 1.5 seconds.",
            url=url,
            evidence=evidence,
        )]
    return []


def check_http_status(http_status: int, url: str) -> list[AuditIssue]:
    if http_status >= 400:
        return [AuditIssue(
            severity="critical",
            category="performance",
            title="Homepage returns HTTP error",
            description=(
                f"The homepage returned HTTP status {http_status}. "
                "This means the page is not accessible to users or search engines."
            ),
            recommendation="Fix the server error causing the non-200 status code.",
            url=url,
            evidence={"httpStatus": http_status},
        )]
    if 300 <= http_status < 400:
        return [AuditIssue(
            severity="low",
            category="seo",
            title="Homepage returns redirect",
            description=(
                f"The homepage URL returns a {http_status} redirect. "
                "While redirects are normal, the canonical homepage should return 200."
            ),
            recommendation="Ensure your primary domain URL returns a 200 status, not a redirect chain.",
            url=url,
            evidence={"httpStatus": http_status},
        )]
    return []
