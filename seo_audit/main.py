from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

import httpx
from rich import print
from rich.logging import RichHandler
from rich.table import Table

from seo_audit.config import settings
from seo_audit.engine.analyzer import run_audit
from seo_audit.engine.report import audit_result_to_dict
from seo_audit.fetcher import validate_url

logger = logging.getLogger("seo_audit")


def _score_colour(score: int) -> str:
    if score >= 80:
        return "green"
    if score >= 50:
        return "yellow"
    return "red"


async def audit_one(url: str, out_path: str) -> dict:
    result = await run_audit(url)
    payload = audit_result_to_dict(result)

    Path(out_path).parent.mkdir(parents=True, exist_ok=True)
    with open(out_path, "w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2)

    colour = _score_colour(result.score)
    print(f"[bold]{result.page_title or result.url}[/bold]")
    print(f"Overall score: [{colour}]{result.score}[/{colour}]")
    print(
        f"Passed: {result.passed_checks}  Warnings: {result.warning_checks}  "
        f"Errors: {result.error_checks}  ({result.scan_duration} ms)"
    )

    table = Table("Category", "Score", "Issues")
    for category in result.category_scores:
        c = _score_colour(category.score)
        table.add_row(category.name, f"[{c}]{category.score}[/{c}]", str(category.issue_count))
    print(table)
    print(f"Saved: {out_path}")
    return payload


def cli(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="seo-audit", description="Run an SEO audit on one page.")
    parser.add_argument("url")
    parser.add_argument("--out", default="outputs/audit.json", help="where to write the JSON result")
    parser.add_argument("--workers", type=int, default=None, help="threads for the check catalog")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=settings.log_level,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
    )
    if args.workers is not None:
        settings.check_workers = args.workers

    try:
        url = validate_url(args.url)
    except ValueError as exc:
        print(f"[red]{exc}[/red]")
        return 2

    try:
        asyncio.run(audit_one(url, args.out))
    except httpx.HTTPError as exc:
        logger.error("could not fetch %s: %s", url, exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(cli())
