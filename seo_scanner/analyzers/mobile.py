import re

from seo_scanner.fetcher import FetchResult
from seo_scanner.models import AuditIssue

_VIEWPORT_RE = re.compile(r"^\s*viewport\s*$", re.I)


def check_viewport(page: FetchResult) -> list[AuditIssue]:
    if page.soup.find("meta", attrs={"name": _VIEWPORT_RE}):
        return []
    return [AuditIssue(
        severity="high",
        category="mobile",
        title="Missing viewport meta tag",
        description="The page does not set a viewport meta tag. This causes poor rendering on mobile devices.",
        recommendation='Add <meta name="viewport" content="width=device-width, initial-scale=1"> to the <head>.',
        url=page.url,
    )]
