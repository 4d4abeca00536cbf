from bs4 import BeautifulSoup
from bs4.element import PreformattedString

from seo_scanner.config import LOW_CONTENT_WORDS, THIN_CONTENT_WORDS
from seo_scanner.fetcher import FetchResult
from seo_scanner.models import AuditIssue

_HIDDEN_PARENTS = {"script", "style"}


def visible_text(soup: BeautifulSoup) -> str:
    """Page text with script/style bodies, comments and doctypes left out."""
    parts = []
    for string in soup.find_all(string=True):
        if isinstance(string, PreformattedString):
            continue
        if string.parent is not None and string.parent.name in _HIDDEN_PARENTS:
            continue
        parts.append(str(string))
    return " ".join(parts)


def word_count(text: str) -> int:
    return len(text.split())


def check_content_length(page: FetchResult) -> list[AuditIssue]:
    words = word_count(visible_text(page.soup))

    if words < THIN_CONTENT_WORDS:
        return [AuditIssue(
            severity="high",
            category="seo",
            title="Very thin content",
            description=f"The page contains only ~{words} words of visible text. Thin content pages rank poorly.",
            recommendation=(
                "Add at least 300 words of unique, valuable content. "
                "For competitive keywords, aim for 1,000+ words."
            ),
            url=page.url,
            evidence={"wordCount": words},
        )]
    if words < LOW_CONTENT_WORDS:
        return [AuditIssue(
            severity="medium",
            category="seo",
            title="Low content volume",
            description=f"The page contains ~{words} words. Pages with more comprehensive content tend to rank higher.",
            recommendation=(
                "Expand the content to at least 300 words. Consider adding FAQ sections, "
                "detailed descriptions, or supporting information."
            ),
            url=page.url,
            evidence={"wordCount": words},
        )]
    return []
