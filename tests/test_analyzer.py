from __future__ import annotations

import asyncio
import math
from dataclasses import replace

import httpx
import pytest

from seo_audit.engine.analyzer import audit, run_audit, run_checks
from seo_audit.engine.checks import CHECKS, Check
from seo_audit.engine.models import (
    Category,
    Impact,
    Issue,
    SecurityInfo,
    Severity,
    WebsiteData,
)


def _explode(data: WebsiteData) -> list[Issue]:
    raise KeyError("unexpected shape")


def _ok(data: WebsiteData) -> list[Issue]:
    return [Issue(title="ok", description="", severity=Severity.GOOD, category=Category.CONTENT)]


def test_good_page_scores_100(good_page):
    result = audit(good_page)
    assert result.score == 100
    assert result.warning_checks == 0
    assert result.error_checks == 0
    assert all(category.score == 100 for category in result.category_scores)
    assert result.page_title == "Solar Panels Guide for Homeowners"


def test_counts_and_score_match_issues(good_page):
    page = replace(
        good_page,
        meta_tags=replace(good_page.meta_tags, title=None, viewport=None),
        security=SecurityInfo(has_ssl=False),
        has_sitemap=False,
    )
    result = audit(page)
    total = result.passed_checks + result.warning_checks + result.error_checks
    assert total == len(result.issues)
    expected = math.floor((result.passed_checks * 100 + result.warning_checks * 50) / total + 0.5)
    assert result.score == expected
    assert 0 <= result.score <= 100


def test_missing_title_scenario(good_page):
    page = replace(good_page, meta_tags=replace(good_page.meta_tags, title=None))
    result = audit(page)
    matches = [
        issue for issue in result.issues
        if issue.category is Category.META_TAGS and issue.title == "Missing page title"
    ]
    assert len(matches) == 1
    assert matches[0].severity is Severity.ERROR
    assert matches[0].impact is Impact.HIGH


def test_failing_check_is_skipped(good_page, caplog):
    checks = (Check("ok", _ok), Check("broken", _explode), Check("ok_again", _ok))
    with caplog.at_level("ERROR"):
        issues = run_checks(good_page, checks)
    assert [issue.title for issue in issues] == ["ok", "ok"]
    assert "broken" in caplog.text


def test_failing_check_does_not_count(good_page):
    result = audit(good_page, checks=(Check("broken", _explode),) + CHECKS)
    assert result.score == 100
    assert result.passed_checks == len(result.issues)


def test_empty_catalog_scores_zero(good_page):
    result = audit(good_page, checks=())
    assert result.score == 0
    assert result.issues == ()
    assert result.category_scores == ()


def test_parallel_run_keeps_catalog_order(good_page):
    page = replace(good_page, meta_tags=replace(good_page.meta_tags, description=None))
    sequential = run_checks(page, max_workers=0)
    parallel = run_checks(page, max_workers=8)
    assert parallel == sequential


def test_audit_is_repeatable(good_page):
    page = replace(good_page, word_count=50, has_robots_txt=False)
    first = audit(page)
    second = audit(page, max_workers=4)
    assert first.issues == second.issues
    assert first.score == second.score
    assert first.category_scores == second.category_scores


def test_snapshot_cannot_be_mutated(good_page):
    with pytest.raises(AttributeError):
        good_page.url = "https://other.example.com/"
    with pytest.raises(TypeError):
        good_page.security.security_headers["x-frame-options"] = None


_HTML = """\
<!DOCTYPE html>
<html lang="en">
<head>
  <title>Solar Panels Guide for Homeowners</title>
  <meta name="viewport" content="width=device-width, initial-scale=1">
</head>
<body>
  <h1>Solar panel basics</h1>
  <p>Solar panels turn sunlight into power for your home.</p>
  <a href="/costs">Costs</a>
  <a href="/missing">Missing</a>
</body>
</html>
"""


def _site(request: httpx.Request) -> httpx.Response:
    path = request.url.path
    if path == "/old":
        return httpx.Response(301, headers={"location": "https://solar.example.com/guide"})
    if path == "/guide":
        return httpx.Response(200, text=_HTML, headers={"content-type": "text/html", "x-frame-options": "DENY"})
    if path == "/robots.txt":
        return httpx.Response(200, text="User-agent: *\nSitemap: https://solar.example.com/sitemap.xml\n")
    if path == "/costs":
        return httpx.Response(200)
    return httpx.Response(404)


def test_run_audit_end_to_end():
    async def _run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(_site)) as client:
            return await run_audit("https://solar.example.com/old", client=client)

    result = asyncio.run(_run())
    titles = [issue.title for issue in result.issues]

    assert result.url == "https://solar.example.com/guide"
    assert result.page_title == "Solar Panels Guide for Homeowners"
    assert "Redirect chain detected" in titles
    assert "Sitemap found" in titles
    assert "robots.txt found" in titles
    broken = next(issue for issue in result.issues if issue.title == "Broken links found")
    assert broken.elements == ("https://solar.example.com/missing (Missing)",)


def test_run_audit_survives_malformed_hrefs():
    html = (
        '<html lang="en"><head><title>Solar</title>'
        '<link rel="canonical" href="http://[broken"></head>'
        '<body><a href="http://[broken">x</a><img src="http://[cdn/a.jpg" alt="a">'
        '<a href="/costs">Costs</a></body></html>'
    )
    heads: list[str] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        if request.method == "HEAD":
            heads.append(str(request.url))
        if request.url.path == "/":
            return httpx.Response(200, text=html)
        return httpx.Response(200 if request.url.path == "/costs" else 404)

    async def _run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(_handler)) as client:
            return await run_audit("https://site.example.com/", client=client)

    result = asyncio.run(_run())
    assert result.url == "https://site.example.com/"
    assert heads == ["https://site.example.com/costs"]
    assert "No broken links found" in [issue.title for issue in result.issues]


def test_run_audit_propagates_fetch_errors():
    def _down(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    async def _run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(_down)) as client:
            await run_audit("https://solar.example.com/", client=client)

    with pytest.raises(httpx.HTTPError):
        asyncio.run(_run())
