from __future__ import annotations

import math
from dataclasses import dataclass

from seo_audit.engine.models import CategoryScore, Issue, Severity

SEVERITY_WEIGHT = {Severity.GOOD: 100, Severity.WARNING: 50, Severity.ERROR: 0}


@dataclass(frozen=True)
class ScoreSummary:
    score: int
    passed: int
    warnings: int
    errors: int
    categories: tuple[CategoryScore, ...]


def weighted_score(issues: list[Issue]) -> int:
    """Good counts fully, warning half, error not at all. No issues scores 0."""
    if not issues:
        return 0
    total = sum(SEVERITY_WEIGHT[issue.severity] for issue in issues)
    # round half up
    return int(math.floor(total / len(issues) + 0.5))


def compute_scores(issues: list[Issue]) -> ScoreSummary:
    grouped: dict[str, list[Issue]] = {}
    for issue in issues:
        grouped.setdefault(issue.category.value, []).append(issue)

    categories = tuple(
        CategoryScore(
            name=name,
            score=weighted_score(group),
            issue_count=sum(1 for issue in group if issue.severity is not Severity.GOOD),
        )
        for name, group in grouped.items()
    )

    return ScoreSummary(
        score=weighted_score(issues),
        passed=sum(1 for issue in issues if issue.severity is Severity.GOOD),
        warnings=sum(1 for issue in issues if issue.severity is Severity.WARNING),
        errors=sum(1 for issue in issues if issue.severity is Severity.ERROR),
        categories=categories,
    )
