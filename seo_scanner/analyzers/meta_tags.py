import re

from seo_scanner.config import (
    DESCRIPTION_MAX_LENGTH,
    DESCRIPTION_MIN_LENGTH,
    TITLE_MAX_LENGTH,
    TITLE_MIN_LENGTH,
)
from seo_scanner.fetcher import FetchResult
from seo_scanner.models import AuditIssue

OG_REQUIRED = ("og:title", "og:description", "og:image")

_DESCRIPTION_RE = re.compile(r"^\s*description\s*$", re.I)
_OG_RE = re.compile(r"^\s*og:", re.I)
_CANONICAL_RE = re.compile(r"^canonical$", re.I)


def check_title(page: FetchResult) -> list[AuditIssue]:
    title_tag = page.soup.find("title")
    title = title_tag.get_text(strip=True) if title_tag else ""

    if not title:
        return [AuditIssue(
            severity="critical",
            category="seo",
            title="Missing page title",
            description="The page does not have a <title> tag. This is required for search engine indexing.",
            recommendation="Add a unique, descriptive <title> tag between 50-60 characters.",
            url=page.url,
        )]

    length = len(title)
    if length < TITLE_MIN_LENGTH:
        return [AuditIssue(
            severity="medium",
            category="seo",
            title="Page title too short",
            description=f"The page title is only {length} characters. Short titles miss keyword opportunities.",
            recommendation="Expand the title to 50-60 characters with relevant keywords.",
            url=page.url,
            evidence={"title": title, "length": length},
        )]
    if length > TITLE_MAX_LENGTH:
        return [AuditIssue(
            severity="low",
            category="seo",
            title="Page title too long",
            description=(
                f"The page title is {length} characters. "
                "Google truncates titles longer than ~60 characters."
            ),
            recommendation="Shorten the title to 50-60 characters to prevent truncation in search results.",
            url=page.url,
            evidence={"title": title, "length": length},
        )]
    return []


def check_meta_description(page: FetchResult) -> list[AuditIssue]:
    desc_tag = page.soup.find("meta", attrs={"name": _DESCRIPTION_RE})
    desc = desc_tag.get("content", "").strip() if desc_tag else ""

    if not desc:
        return [AuditIssue(
            severity="high",
            category="seo",
            title="Missing meta description",
            description=(
                "The page does not have a meta description. Search engines display this "
                "in results and it affects click-through rates."
            ),
            recommendation=(
                "Add a compelling meta description between 150-160 characters "
                "that summarizes the page content."
            ),
            url=page.url,
        )]

    length = len(desc)
    if length < DESCRIPTION_MIN_LENGTH:
        return [AuditIssue(
            severity="medium",
            category="seo",
            title="Meta description too short",
            description=(
                f"The meta description is only {length} characters. "
                "Short descriptions miss the chance to persuade searchers to click."
            ),
            recommendation="Expand the meta description to 150-160 characters.",
            url=page.url,
            evidence={"description": desc, "length": length},
        )]
    if length > DESCRIPTION_MAX_LENGTH:
        return [AuditIssue(
            severity="low",
            category="seo",
            title="Meta description too long",
            description=(
                f"The meta description is {length} characters. "
                "Google truncates descriptions longer than ~160 characters."
            ),
            recommendation="Shorten to 150-160 characters for full display in search results.",
            url=page.url,
            evidence={"length": length},
        )]
    return []


def check_open_graph(page: FetchResult) -> list[AuditIssue]:
    og_tags = page.soup.find_all("meta", attrs={"property": _OG_RE})
    found_og = {tag["property"].strip().lower() for tag in og_tags}
    missing = [prop for prop in OG_REQUIRED if prop not in found_og]
    if not missing:
        return []

    return [AuditIssue(
        severity="medium" if "og:title" in missing else "low",
        category="seo",
        title="Missing Open Graph tags",
        description=(
            f"The page is missing these Open Graph tags: {', '.join(missing)}. "
            "Social media previews will not display correctly."
        ),
        recommendation="Add all Open Graph tags (og:title, og:description, og:image) for proper social media sharing.",
        url=page.url,
        evidence={"missing": missing},
    )]


def check_canonical(page: FetchResult) -> list[AuditIssue]:
    if page.soup.find("link", attrs={"rel": _CANONICAL_RE}):
        return []
    return [AuditIssue(
        severity="medium",
        category="seo",
        title="Missing canonical URL",
        description=(
            "No canonical link tag found. This can lead to duplicate content issues "
            "if the page is accessible via multiple URLs."
        ),
        recommendation='Add <link rel="canonical" href="..."> pointing to the preferred version of this URL.',
        url=page.url,
    )]
