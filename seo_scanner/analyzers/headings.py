from seo_scanner.fetcher import FetchResult
from seo_scanner.models import AuditIssue


def check_h1(page: FetchResult) -> list[AuditIssue]:
    h1_count = len(page.soup.find_all("h1"))

    if h1_count == 0:
        return [AuditIssue(
            severity="high",
            category="seo",
            title="Missing H1 heading",
            description="The page has no H1 heading. The H1 is a primary ranking signal for search engines.",
            recommendation=(
                "Add exactly one H1 tag that clearly describes the page content "
                "and includes the target keyword."
            ),
            url=page.url,
        )]
    if h1_count > 1:
        return [AuditIssue(
            severity="medium",
            category="seo",
            title="Multiple H1 headings found",
            description=f"The page has {h1_count} H1 tags. Best practice is to use exactly one H1 per page.",
            recommendation="Keep one H1 for the main heading and change the others to H2 or lower.",
            url=page.url,
            evidence={"h1Count": h1_count},
        )]
    return []
