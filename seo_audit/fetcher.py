from __future__ import annotations

import asyncio
import ipaddress
import logging
import re
import time
import xml.etree.ElementTree as ElementTree
from dataclasses import dataclass, field
from typing import Mapping, NamedTuple, Optional, Sequence
from urllib.parse import urlsplit, urlunsplit

import httpx

from seo_audit.engine.models import LinkInfo

logger = logging.getLogger(__name__)

SCHEME_PATTERN = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*://")


@dataclass(frozen=True)
class FetchedPage:
    url: str
    final_url: str
    status_code: int
    html: str
    headers: Mapping[str, str] = field(default_factory=dict)
    redirect_chain: tuple[str, ...] = ()
    load_time_ms: float = 0.0


class LinkCheck(NamedTuple):
    status: Optional[int] = None
    error: Optional[str] = None


class SiteFiles(NamedTuple):
    has_robots_txt: bool = False
    has_sitemap: bool = False
    # robots.txt has a bare "Disallow: /"
    robots_disallows_all: bool = False
    # None when the sitemap could not be downloaded
    sitemap_is_xml: Optional[bool] = None


def _valid_host(hostname: str) -> bool:
    if hostname == "localhost" or "." in hostname:
        return True
    try:
        ipaddress.ip_address(hostname)
    except ValueError:
        return False
    return True


def validate_url(raw_url: str) -> str:
    """Normalize *raw_url* to an absolute http(s) URL or raise ``ValueError``.

    A missing scheme defaults to https. The fragment is dropped and an empty
    path becomes ``/``.
    """
    value = (raw_url or "").strip()
    if not value:
        raise ValueError("URL is required")
    if not SCHEME_PATTERN.match(value):
        value = f"https://{value}"
    try:
        parts = urlsplit(value)
        hostname = parts.hostname or ""
        parts.port  # raises on a non-numeric port
    except ValueError as exc:
        raise ValueError("Invalid URL format") from exc
    if parts.scheme not in {"http", "https"}:
        raise ValueError("URL must start with http:// or https://")
    if not hostname:
        raise ValueError("Invalid URL format")
    if not _valid_host(hostname):
        raise ValueError("Invalid URL host")
    return urlunsplit((parts.scheme, parts.netloc, parts.path or "/", parts.query, ""))


def _origin(url: str) -> str:
    parts = urlsplit(url)
    return f"{parts.scheme}://{parts.netloc}"


async def fetch_page(url: str, client: httpx.AsyncClient) -> FetchedPage:
    """GET *url* following redirects.

    Raises:
        httpx.HTTPError: on transport failures and 4xx/5xx responses.
    """
    started = time.perf_counter()
    response = await client.get(url, follow_redirects=True)
    load_time_ms = (time.perf_counter() - started) * 1000
    response.raise_for_status()

    return FetchedPage(
        url=url,
        final_url=str(response.url),
        status_code=response.status_code,
        html=response.text,
        headers={key.lower(): value for key, value in response.headers.items()},
        redirect_chain=tuple(str(hop.url) for hop in response.history),
        load_time_ms=load_time_ms,
    )


def _parse_robots(text: str) -> tuple[bool, list[str]]:
    """Return whether *text* disallows the whole site, and its sitemap URLs."""
    disallows_all = False
    sitemaps: list[str] = []
    for line in text.splitlines():
        directive, _, value = line.split("#", 1)[0].partition(":")
        directive = directive.strip().lower()
        value = value.strip()
        if directive == "disallow" and value == "/":
            disallows_all = True
        elif directive == "sitemap" and value:
            sitemaps.append(value)
    return disallows_all, sitemaps


def _is_xml(body: bytes) -> bool:
    try:
        ElementTree.fromstring(body)
    except ElementTree.ParseError:
        return False
    return True


async def probe_site_files(url: str, client: httpx.AsyncClient) -> SiteFiles:
    """Look up robots.txt and the sitemap for the site serving *url*.

    A sitemap counts as present when robots.txt declares one or when it
    answers 200. The first declared sitemap (``/sitemap.xml`` otherwise) is
    downloaded to see whether it parses as XML. Unreachable files count as
    absent.
    """
    origin = _origin(url)
    robots_present = False
    robots_text = ""

    try:
        response = await client.get(f"{origin}/robots.txt")
        if response.status_code == 200:
            robots_present = True
            robots_text = response.text or ""
    except httpx.HTTPError as exc:
        logger.warning("robots.txt lookup failed for %s: %s", origin, exc)

    disallows_all, declared = _parse_robots(robots_text)
    sitemap_url = next(
        (candidate for candidate in declared if candidate.startswith(("http://", "https://"))),
        f"{origin}/sitemap.xml",
    )

    sitemap_present = bool(declared)
    sitemap_is_xml: Optional[bool] = None
    try:
        response = await client.get(sitemap_url, follow_redirects=True)
        if response.status_code == 200:
            sitemap_present = True
            sitemap_is_xml = _is_xml(response.content)
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        logger.warning("sitemap lookup failed for %s: %s", sitemap_url, exc)

    return SiteFiles(
        has_robots_txt=robots_present,
        has_sitemap=sitemap_present,
        robots_disallows_all=disallows_all,
        sitemap_is_xml=sitemap_is_xml,
    )


async def check_links(
    links: Sequence[LinkInfo],
    client: httpx.AsyncClient,
    *,
    limit: int = 10,
    concurrency: int = 5,
    timeout: float = 5.0,
    deadline: Optional[float] = None,
) -> dict[str, LinkCheck]:
    """HEAD-check the first *limit* distinct http(s) links.

    At most *concurrency* requests run at once. When *deadline* seconds pass,
    the checks still in flight are cancelled and left out of the result.
    """
    hrefs = list(
        dict.fromkeys(link.href for link in links if link.href.startswith(("http://", "https://")))
    )[:limit]
    if not hrefs:
        return {}

    semaphore = asyncio.Semaphore(max(1, concurrency))

    async def _check(href: str) -> tuple[str, LinkCheck]:
        async with semaphore:
            try:
                response = await client.head(href, timeout=timeout, follow_redirects=True)
                return href, LinkCheck(status=response.status_code)
            except (httpx.HTTPError, httpx.InvalidURL) as exc:
                logger.debug("link check failed for %s: %s", href, exc)
                return href, LinkCheck(error=str(exc) or type(exc).__name__)

    tasks = [asyncio.create_task(_check(href)) for href in hrefs]
    done, pending = await asyncio.wait(tasks, timeout=deadline)
    for task in pending:
        task.cancel()
    if pending:
        await asyncio.gather(*pending, return_exceptions=True)
        logger.warning("link check deadline hit; %d links left unresolved", len(pending))

    return dict(task.result() for task in tasks if task in done)
