from urllib.parse import urljoin, urlparse

from seo_scanner.fetcher import FetchResult
from seo_scanner.models import AuditIssue

_LOCAL_PREFIXES = ("#", "mailto:", "tel:")


def _bare_host(host: str) -> str:
    host = host.lower()
    return host[4:] if host.startswith("www.") else host


def is_internal_link(href: str, page_url: str) -> bool:
    if href.lower().startswith(_LOCAL_PREFIXES):
        return True
    try:
        link_host = urlparse(urljoin(page_url, href)).hostname
        page_host = urlparse(page_url).hostname or ""
    except ValueError:
        # Unparseable hrefs are counted as internal
        return True
    if not link_host:
        return True
    return _bare_host(link_host) == _bare_host(page_host)


def check_links(page: FetchResult) -> list[AuditIssue]:
    hrefs = [a.get("href", "").strip() for a in page.soup.find_all("a", href=True)]
    hrefs = [h for h in hrefs if h]

    internal = sum(1 for href in hrefs if is_internal_link(href, page.url))
    external = len(hrefs) - internal

    issues: list[AuditIssue] = []
    if internal == 0 and hrefs:
        issues.append(AuditIssue(
            severity="medium",
            category="links",
            title="No internal links found",
            description=(
                "The page has no internal links. Internal linking helps distribute "
                "page authority and improve crawlability."
            ),
            recommendation=(
                "Add internal links to other relevant pages on your site. "
                "Aim for at least 3-5 internal links per page."
            ),
            url=page.url,
            evidence={"internal": internal, "external": external, "totalLinks": len(hrefs)},
        ))
    if external == 0 and internal > 0:
        issues.append(AuditIssue(
            severity="info",
            category="links",
            title="No external links found",
            description=(
                "The page contains no outbound links to external sites. "
                "Linking to authoritative sources can improve topical relevance."
            ),
            recommendation="Consider linking to authoritative external sources to support your content claims.",
            url=page.url,
            evidence={"internal": internal, "external": external},
        ))
    return issues
