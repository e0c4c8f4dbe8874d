from __future__ import annotations

from typing import Any

from seo_audit.engine.models import AuditResult, CategoryScore, Issue


def issue_to_dict(issue: Issue) -> dict[str, Any]:
    data: dict[str, Any] = {
        "title": issue.title,
        "description": issue.description,
        "severity": issue.severity.value,
        "category": issue.category.value,
    }
    if issue.impact is not None:
        data["impact"] = issue.impact.value
    if issue.recommendation:
        data["recommendation"] = issue.recommendation
    if issue.elements:
        data["elements"] = list(issue.elements)
    if issue.resource_links:
        data["resourceLinks"] = [{"title": link.title, "url": link.url} for link in issue.resource_links]
    return data


def category_score_to_dict(category: CategoryScore) -> dict[str, Any]:
    return {"name": category.name, "score": category.score, "issueCount": category.issue_count}


def audit_result_to_dict(result: AuditResult) -> dict[str, Any]:
    """Wire form of *result*: camelCase keys, plain JSON values."""
    return {
        "url": result.url,
        "score": result.score,
        "passedChecks": result.passed_checks,
        "warningChecks": result.warning_checks,
        "errorChecks": result.error_checks,
        "categoryScores": [category_score_to_dict(category) for category in result.category_scores],
        "issues": [issue_to_dict(issue) for issue in result.issues],
        "timestamp": result.timestamp,
        "scanDuration": result.scan_duration,
        "pageTitle": result.page_title,
    }
