from __future__ import annotations

import json
from dataclasses import replace

from seo_audit.engine.analyzer import audit
from seo_audit.engine.report import audit_result_to_dict, issue_to_dict
from seo_audit.engine.models import Category, Impact, Issue, ResourceLink, Severity


def test_issue_omits_empty_optional_fields():
    issue = Issue(title="Fast page load", description="800 ms", severity=Severity.GOOD, category=Category.PERFORMANCE)
    assert issue_to_dict(issue) == {
        "title": "Fast page load",
        "description": "800 ms",
        "severity": "good",
        "category": "Performance",
    }


def test_issue_with_all_fields():
    issue = Issue(
        title="Missing page title",
        description="No title",
        severity=Severity.ERROR,
        category=Category.META_TAGS,
        impact=Impact.HIGH,
        recommendation="Add one",
        elements=("a", "b"),
        resource_links=(ResourceLink("Docs", "https://example.com/docs"),),
    )
    data = issue_to_dict(issue)
    assert data["impact"] == "high"
    assert data["elements"] == ["a", "b"]
    assert data["resourceLinks"] == [{"title": "Docs", "url": "https://example.com/docs"}]


def test_audit_result_is_json_serializable(good_page):
    page = replace(good_page, meta_tags=replace(good_page.meta_tags, title=None))
    payload = audit_result_to_dict(audit(page))

    assert set(payload) == {
        "url", "score", "passedChecks", "warningChecks", "errorChecks",
        "categoryScores", "issues", "timestamp", "scanDuration", "pageTitle",
    }
    assert payload["errorChecks"] == 1
    assert payload["pageTitle"] == ""
    json.dumps(payload)
