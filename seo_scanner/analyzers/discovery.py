"""Checks for the well-known discovery files at the site root."""

from __future__ import annotations

from dataclasses import dataclass, field

from bs4 import BeautifulSoup

from seo_scanner.config import AI_CRAWLERS
from seo_scanner.fetcher import FetchError, fetch_text, fetch_with_timeout
from seo_scanner.models import AuditIssue


@dataclass
class RobotsGroup:
    agents: list[str] = field(default_factory=list)
    disallow: list[str] = field(default_factory=list)
    has_rules: bool = False

    @property
    def applies_to_all(self) -> bool:
        # Rules before any User-agent line are treated as global
        return not self.agents or "*" in self.agents

    @property
    def blocks_root(self) -> bool:
        return "/" in self.disallow


def parse_robots(text: str) -> list[RobotsGroup]:
    """Split robots.txt into user-agent groups with their Disallow values."""
    groups: list[RobotsGroup] = []
    current: RobotsGroup | None = None

    for raw in text.lstrip("\ufeff").splitlines():
        line = raw.split("#", 1)[0].strip()
        if not line or ":" not in line:
            continue
        key, value = (part.strip() for part in line.split(":", 1))
        # Drop stray BOMs or other non-ASCII bytes glued to the directive name
        key = "".join(ch for ch in key if ch.isascii()).lower()

        if key == "user-agent":
            if current is None or current.has_rules:
                current = RobotsGroup()
                groups.append(current)
            current.agents.append(value.lower())
        elif key in ("disallow", "allow"):
            if current is None:
                current = RobotsGroup()
                groups.append(current)
            current.has_rules = True
            if key == "disallow":
                current.disallow.append(value)

    return groups


def check_robots_txt(base_url: str) -> list[AuditIssue]:
    robots_url = f"{base_url}/robots.txt"
    result = fetch_text(robots_url)

    if result is None or result.status != 200:
        return [AuditIssue(
            severity="medium",
            category="seo",
            title="Missing robots.txt",
            description="No robots.txt file found. While not required, a robots.txt helps manage crawler behavior.",
            recommendation=(
                "Create a robots.txt file at the root of your site. At minimum include: "
                "User-agent: *, Allow: /, and a Sitemap: line pointing to your sitemap."
            ),
            url=robots_url,
            evidence={"status": result.status if result else "unreachable"},
        )]

    issues: list[AuditIssue] = []
    groups = parse_robots(result.text)

    if any(g.applies_to_all and g.blocks_root for g in groups):
        issues.append(AuditIssue(
            severity="critical",
            category="seo",
            title="robots.txt blocks all crawlers",
            description='The robots.txt contains "Disallow: /" which blocks all search engines from crawling the site.',
            recommendation='Change "Disallow: /" to "Allow: /" unless you intentionally want to block indexing.',
            url=robots_url,
        ))

    blocked = {agent for g in groups if g.blocks_root for agent in g.agents}
    blocked_ai = [crawler for crawler in AI_CRAWLERS if crawler in blocked]
    if blocked_ai:
        issues.append(AuditIssue(
            severity="info",
            category="seo",
            title="AI crawlers blocked in robots.txt",
            description=(
                f"The following AI crawlers are blocked: {', '.join(blocked_ai)}. "
                "This prevents AI models from using your content for training and answers."
            ),
            recommendation=(
                "If you want AI visibility (AI Engine Optimization), consider allowing these crawlers. "
                "If you prefer to block them, this is intentional."
            ),
            url=robots_url,
            evidence={"blockedAi": blocked_ai},
        ))

    return issues


def check_sitemap(base_url: str) -> list[AuditIssue]:
    sitemap_url = f"{base_url}/sitemap.xml"
    result = fetch_text(sitemap_url)

    if result is None or result.status != 200:
        return [AuditIssue(
            severity="high",
            category="seo",
            title="Missing sitemap.xml",
            description=(
                "No sitemap.xml found at the standard location. "
                "Sitemaps help search engines discover and index pages efficiently."
            ),
            recommendation=(
                "Generate and upload an XML sitemap to /sitemap.xml. "
                "Most CMS platforms have plugins that auto-generate sitemaps."
            ),
            url=sitemap_url,
            evidence={"status": result.status if result else "unreachable"},
        )]

    text = result.text
    if "<urlset" not in text and "<sitemapindex" not in text:
        return [AuditIssue(
            severity="medium",
            category="seo",
            title="Invalid sitemap format",
            description=(
                "The sitemap.xml exists but does not appear to be valid XML. "
                "Search engines may not be able to parse it."
            ),
            recommendation="Verify the sitemap is valid XML using a sitemap validator tool and fix any formatting errors.",
            url=sitemap_url,
        )]

    url_count = len(BeautifulSoup(text, "lxml-xml").find_all("loc"))
    if url_count == 0:
        return [AuditIssue(
            severity="medium",
            category="seo",
            title="Sitemap contains no URLs",
            description="The sitemap.xml file is valid XML but contains no <loc> entries.",
            recommendation="Populate the sitemap with all indexable page URLs on your site.",
            url=sitemap_url,
            evidence={"urlCount": url_count},
        )]
    return []


def check_favicon(base_url: str) -> list[AuditIssue]:
    favicon_url = f"{base_url}/favicon.ico"
    try:
        status = fetch_with_timeout(favicon_url, method="HEAD").status_code
    except FetchError:
        status = None

    if status == 200:
        return []
    return [AuditIssue(
        severity="low",
        category="seo",
        title="Missing favicon",
        description="No favicon.ico found. Favicons appear in browser tabs, bookmarks, and search results.",
        recommendation="Add a favicon.ico file at the root of your site. Include multiple sizes (16x16, 32x32, 180x180).",
        url=favicon_url,
        evidence={"status": status if status is not None else "unreachable"},
    )]


def check_llms_txt(base_url: str) -> list[AuditIssue]:
    llms_url = f"{base_url}/llms.txt"
    result = fetch_text(llms_url)

    if result is not None and result.status == 200:
        return []
    return [AuditIssue(
        severity="info",
        category="seo",
        title="Missing llms.txt",
        description=(
            "No llms.txt file found. This emerging standard helps AI models "
            "understand your site purpose and offerings."
        ),
        recommendation=(
            "Create an llms.txt file describing your site, services, and AI access policy "
            "for better AI Engine Optimization (AEO)."
        ),
        url=llms_url,
    )]
