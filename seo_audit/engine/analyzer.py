from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Optional, Sequence

import httpx

from seo_audit.config import settings
from seo_audit.engine.checks import CHECKS, Check
from seo_audit.engine.extractor import collect_links, extract_website_data
from seo_audit.engine.models import AuditResult, Issue, WebsiteData
from seo_audit.engine.scoring import compute_scores
from seo_audit.fetcher import check_links, fetch_page, probe_site_files

logger = logging.getLogger(__name__)


def _safe_run(check: Check, data: WebsiteData) -> list[Issue]:
    try:
        return list(check.run(data))
    except Exception:
        logger.exception("check %r failed on %s; skipping it", check.name, data.url)
        return []


def run_checks(
    data: WebsiteData,
    checks: Sequence[Check] = CHECKS,
    max_workers: int = 0,
) -> list[Issue]:
    """Run every check against *data* and merge the issues in catalog order.

    A check that raises is logged and contributes nothing; the others still
    run. With ``max_workers`` > 0 the checks run on a thread pool, but the
    merged list is still ordered by catalog position.
    """
    if max_workers > 0 and len(checks) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            results = list(pool.map(lambda check: _safe_run(check, data), checks))
    else:
        results = [_safe_run(check, data) for check in checks]

    issues: list[Issue] = []
    for chunk in results:
        issues.extend(chunk)
    return issues


def audit(
    data: WebsiteData,
    checks: Sequence[Check] = CHECKS,
    max_workers: Optional[int] = None,
    started_at: Optional[float] = None,
) -> AuditResult:
    """Score *data* against the catalog and return the finished result.

    ``started_at`` is a :func:`time.monotonic` reading; pass the one taken
    before fetching so ``scan_duration`` covers the whole audit.
    """
    if started_at is None:
        started_at = time.monotonic()
    if max_workers is None:
        max_workers = settings.check_workers

    issues = run_checks(data, checks, max_workers=max_workers)
    summary = compute_scores(issues)
    duration_ms = int((time.monotonic() - started_at) * 1000)

    logger.info(
        "audited %s: score=%d passed=%d warnings=%d errors=%d",
        data.url,
        summary.score,
        summary.passed,
        summary.warnings,
        summary.errors,
    )

    return AuditResult(
        url=data.url,
        score=summary.score,
        passed_checks=summary.passed,
        warning_checks=summary.warnings,
        error_checks=summary.errors,
        category_scores=summary.categories,
        issues=tuple(issues),
        timestamp=datetime.now(timezone.utc).isoformat(timespec="seconds"),
        scan_duration=duration_ms,
        page_title=data.title,
    )


async def run_audit(url: str, client: Optional[httpx.AsyncClient] = None) -> AuditResult:
    """Fetch *url*, build its snapshot and audit it.

    Page fetch errors propagate as :class:`httpx.HTTPError`. Link checks that
    fail or miss the deadline only leave their links without a status.
    """
    started_at = time.monotonic()
    owns_client = client is None
    if client is None:
        client = httpx.AsyncClient(
            headers={"User-Agent": settings.user_agent},
            timeout=settings.request_timeout,
            follow_redirects=True,
        )
    try:
        page = await fetch_page(url, client)
        site_files = await probe_site_files(page.final_url, client)
        link_results = await check_links(
            collect_links(page.html, page.final_url),
            client,
            limit=settings.max_link_checks,
            concurrency=settings.link_concurrency,
            timeout=settings.link_timeout,
            deadline=settings.link_deadline,
        )
    finally:
        if owns_client:
            await client.aclose()

    data = extract_website_data(page, link_results=link_results, site_files=site_files)
    return audit(data, started_at=started_at)
