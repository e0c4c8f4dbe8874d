from __future__ import annotations

import json
import logging
import re
from dataclasses import replace
from typing import Iterable, Mapping, Optional
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup

from seo_audit.engine.keywords import extract_keywords
from seo_audit.engine.models import (
    Headings,
    HreflangTag,
    ImageInfo,
    LinkInfo,
    MetaTags,
    PerformanceMetrics,
    SecurityInfo,
    StructuredDataEntry,
    WebsiteData,
)
from seo_audit.fetcher import FetchedPage, LinkCheck, SiteFiles

logger = logging.getLogger(__name__)

SECURITY_HEADERS = (
    "strict-transport-security",
    "content-security-policy",
    "x-content-type-options",
    "x-frame-options",
    "referrer-policy",
    "permissions-policy",
)

IMAGE_EXTENSIONS = {"jpg", "jpeg", "png", "gif", "webp", "avif", "svg"}

SKIPPED_HREF_PREFIXES = ("#", "mailto:", "tel:", "javascript:")

# meta name / property -> MetaTags field
META_NAMES = {
    "description": "description",
    "keywords": "keywords",
    "viewport": "viewport",
    "robots": "robots",
    "author": "author",
    "theme-color": "theme_color",
    "twitter:card": "twitter_card",
    "twitter:title": "twitter_title",
    "twitter:description": "twitter_description",
    "twitter:image": "twitter_image",
    "twitter:site": "twitter_site",
    "twitter:creator": "twitter_creator",
}
META_PROPERTIES = {
    "og:title": "og_title",
    "og:description": "og_description",
    "og:image": "og_image",
    "og:type": "og_type",
    "og:url": "og_url",
    "og:site_name": "og_site_name",
}


def _squash(text: str) -> str:
    return " ".join(text.split())


def _rel_values(tag) -> list[str]:
    rel = tag.get("rel") or []
    if isinstance(rel, list):
        return [str(value).lower() for value in rel]
    return str(rel).lower().split()


def _image_extension(url: str) -> Optional[str]:
    if not url:
        return None
    clean = url.split("?", 1)[0].split("#", 1)[0].lower()
    if "." not in clean:
        return None
    ext = clean.rsplit(".", 1)[-1]
    if ext in IMAGE_EXTENSIONS:
        return ext
    return None


def _absolute(page_url: str, href: str) -> Optional[str]:
    """*href* resolved against *page_url*, or None when it is not a parseable URL."""
    try:
        return urljoin(page_url, href.strip())
    except ValueError:
        return None


def _resolve_all(page_url: str, hrefs: Iterable[str]) -> list[str]:
    resolved = (_absolute(page_url, href) for href in hrefs)
    return [url for url in resolved if url is not None]


def _is_internal(url: str, page_url: str) -> bool:
    return urlparse(url).netloc.lower() == urlparse(page_url).netloc.lower()


def _extract_meta_tags(soup: BeautifulSoup, page_url: str) -> MetaTags:
    values: dict[str, str] = {}

    if soup.title:
        title = _squash(soup.title.get_text(" ", strip=True))
        if title:
            values["title"] = title

    for tag in soup.find_all("meta"):
        content = _squash(str(tag.get("content") or ""))
        if not content:
            continue
        name = str(tag.get("name") or "").strip().lower()
        prop = str(tag.get("property") or "").strip().lower()
        target = META_NAMES.get(name) or META_PROPERTIES.get(prop) or META_NAMES.get(prop)
        if target and target not in values:
            values[target] = content

    for tag in soup.find_all("link", href=True):
        if "canonical" in _rel_values(tag):
            href = str(tag.get("href")).strip()
            # an unparseable canonical is kept as written so the check reports it
            values["canonical"] = _absolute(page_url, href) or href
            break

    html_tag = soup.find("html")
    if html_tag is not None:
        lang = str(html_tag.get("lang") or "").strip()
        if lang:
            values["language"] = lang

    return MetaTags(**values)


def _extract_headings(soup: BeautifulSoup) -> Headings:
    return Headings(**{
        f"h{level}": tuple(
            _squash(tag.get_text(" ", strip=True)) for tag in soup.find_all(f"h{level}")
        )
        for level in range(1, 7)
    })


def _extract_images(soup: BeautifulSoup, page_url: str) -> list[ImageInfo]:
    images: list[ImageInfo] = []
    for img in soup.find_all("img"):
        src = str(img.get("src") or img.get("data-src") or "").strip()
        alt = img.get("alt")
        classes = img.get("class") or []
        lazy = (
            str(img.get("loading") or "").lower() == "lazy"
            or bool(img.get("data-src"))
            or "lazy" in classes
        )
        images.append(ImageInfo(
            src=(_absolute(page_url, src) or src) if src and not src.startswith("data:") else src,
            alt=str(alt) if alt is not None else "",
            has_alt=alt is not None,
            width=str(img.get("width")) if img.get("width") else None,
            height=str(img.get("height")) if img.get("height") else None,
            lazy_loaded=lazy,
            format=_image_extension(src),
        ))
    return images


def collect_links(html: str, page_url: str) -> tuple[LinkInfo, ...]:
    """Anchors of *html* as :class:`LinkInfo`, without any status yet."""
    soup = BeautifulSoup(html or "", "lxml")
    links: list[LinkInfo] = []
    for anchor in soup.find_all("a", href=True):
        href = str(anchor.get("href") or "").strip()
        if not href or href.lower().startswith(SKIPPED_HREF_PREFIXES):
            continue
        absolute = _absolute(page_url, href)
        if absolute is None:
            logger.debug("skipping malformed link %r on %s", href, page_url)
            continue
        text = _squash(anchor.get_text(" ", strip=True))
        if not text:
            text = str(anchor.get("aria-label") or "").strip()
        if not text:
            img = anchor.find("img", alt=True)
            text = str(img.get("alt")).strip() if img is not None else ""
        links.append(LinkInfo(
            href=absolute,
            text=text,
            is_internal=_is_internal(absolute, page_url),
            has_text=bool(text),
            nofollow="nofollow" in _rel_values(anchor),
            target=anchor.get("target"),
        ))
    return tuple(links)


def _structured_data_type(value) -> str:
    if isinstance(value, list):
        return ", ".join(str(item) for item in value) or "Unknown"
    return str(value) if value else "Unknown"


def _extract_json_ld(soup: BeautifulSoup) -> list[StructuredDataEntry]:
    entries: list[StructuredDataEntry] = []
    for script in soup.find_all("script", attrs={"type": re.compile(r"^application/ld\+json$", re.I)}):
        raw = script.string or script.get_text() or ""
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            entries.append(StructuredDataEntry(
                type="JSON-LD", valid=False, errors=(f"invalid JSON: {exc.msg}",)
            ))
            continue

        items = payload if isinstance(payload, list) else [payload]
        for item in items:
            if not isinstance(item, dict):
                entries.append(StructuredDataEntry(
                    type="JSON-LD", valid=False, errors=("expected a JSON object",)
                ))
                continue
            if "@graph" in item and isinstance(item["@graph"], list):
                types = [_structured_data_type(node.get("@type")) for node in item["@graph"] if isinstance(node, dict)]
                entries.append(StructuredDataEntry(type=", ".join(types) or "Graph"))
                continue
            if "@type" not in item:
                entries.append(StructuredDataEntry(
                    type="Unknown", valid=False, errors=("missing @type",)
                ))
                continue
            entries.append(StructuredDataEntry(type=_structured_data_type(item["@type"])))
    return entries


def _extract_structured_data(soup: BeautifulSoup) -> list[StructuredDataEntry]:
    entries = _extract_json_ld(soup)
    for tag in soup.find_all(attrs={"itemtype": True}):
        itemtype = str(tag.get("itemtype") or "").strip()
        entries.append(StructuredDataEntry(
            type=itemtype.rstrip("/").rsplit("/", 1)[-1] or "Unknown",
            valid=bool(itemtype),
            errors=() if itemtype else ("empty itemtype",),
            format="microdata",
        ))
    for tag in soup.find_all(attrs={"typeof": True}):
        entries.append(StructuredDataEntry(
            type=str(tag.get("typeof") or "Unknown"),
            format="rdfa",
        ))
    return entries


def _resource_urls(soup: BeautifulSoup, page_url: str) -> list[str]:
    urls: list[str] = []
    for tag in soup.find_all(["script", "img", "iframe", "source", "video", "audio"]):
        src = str(tag.get("src") or "").strip()
        if src:
            urls.append(_absolute(page_url, src) or src)
    for tag in soup.find_all("link", href=True):
        if {"stylesheet", "icon", "preload"} & set(_rel_values(tag)):
            href = str(tag.get("href")).strip()
            urls.append(_absolute(page_url, href) or href)
    return urls


def _extract_security(
    soup: BeautifulSoup,
    page_url: str,
    headers: Mapping[str, str],
) -> SecurityInfo:
    lowered = {key.lower(): value for key, value in headers.items()}
    has_ssl = urlparse(page_url).scheme == "https"
    mixed = has_ssl and any(url.lower().startswith("http://") for url in _resource_urls(soup, page_url))
    return SecurityInfo(
        has_ssl=has_ssl,
        has_mixed_content=mixed,
        security_headers={name: lowered.get(name) for name in SECURITY_HEADERS},
    )


def _visible_text(html: str) -> str:
    soup = BeautifulSoup(html or "", "lxml")
    for tag in soup(["script", "style", "noscript", "template"]):
        tag.decompose()
    container = soup.body or soup
    return " ".join(container.stripped_strings)


def extract_website_data(
    page: FetchedPage,
    link_results: Optional[Mapping[str, LinkCheck]] = None,
    site_files: Optional[SiteFiles] = None,
) -> WebsiteData:
    """Build the immutable snapshot every check reads.

    ``link_results`` maps absolute hrefs to their check outcome; links that
    are not in it keep no status and never count as broken. Without
    ``site_files`` the site counts as having neither robots.txt nor a sitemap.
    """
    html = page.html or ""
    page_url = page.final_url or page.url
    soup = BeautifulSoup(html, "lxml")
    link_results = link_results or {}
    site_files = site_files or SiteFiles()

    links = tuple(
        replace(link, status=link_results[link.href].status, error=link_results[link.href].error)
        if link.href in link_results
        else link
        for link in collect_links(html, page_url)
    )

    text = _visible_text(html)
    paragraph_text = " ".join(
        _squash(p.get_text(" ", strip=True)) for p in soup.find_all("p")
    ).strip()

    css_files = _resolve_all(
        page_url,
        (str(tag.get("href")) for tag in soup.find_all("link", href=True) if "stylesheet" in _rel_values(tag)),
    )
    js_files = _resolve_all(page_url, (str(tag.get("src")) for tag in soup.find_all("script", src=True)))
    hreflang_tags = []
    for tag in soup.find_all("link", href=True, hreflang=True):
        href = _absolute(page_url, str(tag.get("href")))
        if href is not None and "alternate" in _rel_values(tag):
            hreflang_tags.append(HreflangTag(hreflang=str(tag.get("hreflang")).strip(), href=href))

    # the requested URL heads the chain so a canonical pointing at it still matches
    redirect_chain = page.redirect_chain
    if redirect_chain and redirect_chain[0] != page.url:
        redirect_chain = (page.url, *redirect_chain)

    return WebsiteData(
        url=page_url,
        status_code=page.status_code,
        redirect_chain=redirect_chain,
        meta_tags=_extract_meta_tags(soup, page_url),
        headings=_extract_headings(soup),
        images=tuple(_extract_images(soup, page_url)),
        links=links,
        structured_data=tuple(_extract_structured_data(soup)),
        security=_extract_security(soup, page_url, page.headers),
        performance=PerformanceMetrics(load_time=round(page.load_time_ms, 1)),
        content_length=len(html),
        word_count=len(text.split()),
        text_to_html_ratio=round(len(text) / len(html) * 100, 2) if html else 0.0,
        keywords=extract_keywords(text),
        has_sitemap=site_files.has_sitemap,
        has_robots_txt=site_files.has_robots_txt,
        robots_disallows_all=site_files.robots_disallows_all,
        sitemap_is_xml=site_files.sitemap_is_xml,
        css_files=tuple(css_files),
        js_files=tuple(js_files),
        hreflang_tags=tuple(hreflang_tags),
        paragraph_text=paragraph_text,
    )
