from collections.abc import Iterable

from seo_scanner.config import SEVERITY_WEIGHTS, TOTAL_CHECKS
from seo_scanner.models import AuditIssue, ScanStats


def compute_stats(issues: Iterable[AuditIssue], total_checks: int = TOTAL_CHECKS) -> tuple[ScanStats, int]:
    counts = dict.fromkeys(SEVERITY_WEIGHTS, 0)
    deduction = 0
    for issue in issues:
        counts[issue.severity] += 1
        deduction += SEVERITY_WEIGHTS[issue.severity]

    # info findings never count as a failed check
    failed = counts["critical"] + counts["high"] + counts["medium"] + counts["low"]
    stats = ScanStats(
        **counts,
        total_checks=total_checks,
        passed_checks=max(0, total_checks - failed),
    )
    score = max(0, min(100, 100 - deduction))
    return stats, score
