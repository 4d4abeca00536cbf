from seo_scanner.config import MISSING_ALT_HIGH_THRESHOLD
from seo_scanner.fetcher import FetchResult
from seo_scanner.models import AuditIssue


def check_image_alts(page: FetchResult) -> list[AuditIssue]:
    images = page.soup.find_all("img")
    if not images:
        return []

    total = len(images)
    missing_alt = 0
    empty_alt = 0
    for img in images:
        alt = img.get("alt")
        if alt is None:
            missing_alt += 1
        elif alt.strip() == "":
            empty_alt += 1

    if not missing_alt:
        return []
    return [AuditIssue(
        severity="high" if missing_alt > MISSING_ALT_HIGH_THRESHOLD else "medium",
        category="accessibility",
        title="Images missing alt attributes",
        description=(
            f"{missing_alt} out of {total} images are missing alt attributes. "
            "Alt text is required for accessibility and helps with image SEO."
        ),
        recommendation="Add descriptive alt attributes to all images. Use keywords naturally when relevant.",
        url=page.url,
        evidence={"totalImages": total, "missingAlt": missing_alt, "emptyAlt": empty_alt},
    )]
