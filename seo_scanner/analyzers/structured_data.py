import re

from seo_scanner.fetcher import FetchResult
from seo_scanner.models import AuditIssue

_JSONLD_RE = re.compile(r"^\s*application/ld\+json\s*$", re.I)


def check_structured_data(page: FetchResult) -> list[AuditIssue]:
    soup = page.soup
    has_jsonld = soup.find("script", attrs={"type": _JSONLD_RE}) is not None
    has_microdata = soup.find(attrs={"itemscope": True}) is not None
    if has_jsonld or has_microdata:
        return []

    return [AuditIssue(
        severity="medium",
        category="schema",
        title="No structured data found",
        description=(
            "The page has no JSON-LD or Microdata structured data. Structured data helps "
            "search engines understand content and can enable rich results."
        ),
        recommendation=(
            "Add JSON-LD structured data (Organization, WebPage, BreadcrumbList, FAQPage, etc.) "
            "relevant to your content."
        ),
        url=page.url,
    )]
