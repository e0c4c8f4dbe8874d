"""The check catalog.

Each check reads one :class:`WebsiteData` snapshot and returns its own list of
issues. A check always reports exactly one primary issue for the dimension it
classifies (a passing dimension is reported as ``good``) and may add a few
secondary issues for finer sub-conditions. Checks never look at each other's
output, so the catalog can run in any order.
"""

from __future__ import annotations

import re
from typing import Callable, NamedTuple, Optional
from urllib.parse import parse_qsl, urldefrag, urlparse

from seo_audit.engine.models import (
    Category,
    Impact,
    Issue,
    ResourceLink,
    Severity,
    WebsiteData,
)

TITLE_MIN_LENGTH = 10
TITLE_MAX_LENGTH = 60
DESCRIPTION_MIN_LENGTH = 50
DESCRIPTION_MAX_LENGTH = 160

THIN_CONTENT_WORDS = 300
RICH_CONTENT_WORDS = 1000
KEYWORD_STUFFING_DENSITY = 5.0
KEYWORD_MIN_DENSITY = 0.5
KEYWORD_MAX_GOOD_DENSITY = 3.0
LOW_TEXT_RATIO = 10.0
GOOD_TEXT_RATIO = 25.0
READABILITY_MIN_WORDS = 100
READABILITY_MIN_SCORE = 60.0

MAX_EXTERNAL_LINKS = 50
MIN_INTERNAL_LINKS = 3
INTERNAL_LINKS_CONTENT_LENGTH = 1000

LAZY_LOADING_MIN_IMAGES = 3

SLOW_LOAD_MS = 3000
MODERATE_LOAD_MS = 1500
MAX_CSS_FILES = 10
MAX_JS_FILES = 15
MAX_HTML_BYTES = 100_000

MAX_MISSING_SECURITY_HEADERS = 3

MAX_PATH_LENGTH = 100
MAX_QUERY_PARAMS = 2

SYLLABLE_PATTERN = re.compile(r"[aeiouy]+")
SENTENCE_PATTERN = re.compile(r"[.!?]+")


class Check(NamedTuple):
    name: str
    run: Callable[[WebsiteData], list[Issue]]


def _issue(
    title: str,
    description: str,
    severity: Severity,
    category: Category,
    impact: Optional[Impact] = None,
    recommendation: Optional[str] = None,
    elements: Optional[list[str]] = None,
    resource_links: Optional[list[ResourceLink]] = None,
) -> Issue:
    return Issue(
        title=title,
        description=description,
        severity=severity,
        category=category,
        impact=impact,
        recommendation=recommendation,
        elements=tuple(elements or ()),
        resource_links=tuple(resource_links or ()),
    )


def _keyword_presence(
    data: WebsiteData,
    text: str,
    where: str,
    category: Category,
) -> Optional[Issue]:
    keyword = data.primary_keyword
    if keyword is None or not text:
        return None
    if keyword.word in text.lower():
        return _issue(
            f"Primary keyword found in {where}",
            f'The most frequent keyword "{keyword.word}" appears in the {where}.',
            Severity.GOOD,
            category,
        )
    return _issue(
        f"Primary keyword missing from {where}",
        f'The most frequent keyword "{keyword.word}" does not appear in the {where}.',
        Severity.WARNING,
        category,
        impact=Impact.MEDIUM,
        recommendation=f"Work the page's main topic into the {where} where it reads naturally.",
    )


def _normalize_url(url: str) -> str:
    try:
        url = urldefrag(url.strip())[0]
        parsed = urlparse(url)
    except ValueError:
        return url.strip()
    path = parsed.path.rstrip("/") or "/"
    query = f"?{parsed.query}" if parsed.query else ""
    return f"{parsed.scheme.lower()}://{parsed.netloc.lower()}{path}{query}"


def _count_syllables(word: str) -> int:
    word = word.lower()
    if len(word) <= 3:
        return 1
    word = re.sub(r"e$", "", word)
    groups = SYLLABLE_PATTERN.findall(word)
    return len(groups) if groups else 1


def flesch_reading_ease(text: str) -> Optional[float]:
    """Flesch reading ease of *text*, or ``None`` when it has no sentences."""
    sentences = [part for part in SENTENCE_PATTERN.split(text) if part.strip()]
    words = text.split()
    if not sentences or not words:
        return None
    syllables = sum(_count_syllables(word) for word in words)
    return 206.835 - 1.015 * (len(words) / len(sentences)) - 84.6 * (syllables / len(words))


# ---------------------------------------------------------------------------
# Meta tags
# ---------------------------------------------------------------------------

def check_title(data: WebsiteData) -> list[Issue]:
    issues: list[Issue] = []
    title = (data.meta_tags.title or "").strip()
    length = len(title)

    if not title:
        issues.append(_issue(
            "Missing page title",
            "The page has no <title> tag, so search engines have to guess what it is about.",
            Severity.ERROR,
            Category.META_TAGS,
            impact=Impact.HIGH,
            recommendation="Add a unique, descriptive title of 10-60 characters.",
            resource_links=[ResourceLink(
                "Influencing title links in Google Search",
                "https://developers.google.com/search/docs/appearance/title-link",
            )],
        ))
        return issues

    if length < TITLE_MIN_LENGTH:
        issues.append(_issue(
            "Page title too short",
            f"The title is {length} characters long; short titles rarely describe the page well.",
            Severity.WARNING,
            Category.META_TAGS,
            impact=Impact.MEDIUM,
            recommendation="Expand the title to 10-60 characters.",
            elements=[title],
        ))
    elif length > TITLE_MAX_LENGTH:
        issues.append(_issue(
            "Page title too long",
            f"The title is {length} characters long and will likely be truncated in search results.",
            Severity.WARNING,
            Category.META_TAGS,
            impact=Impact.MEDIUM,
            recommendation="Shorten the title to 60 characters or fewer.",
            elements=[title],
        ))
    else:
        issues.append(_issue(
            "Page title length is optimal",
            f"The title is {length} characters long.",
            Severity.GOOD,
            Category.META_TAGS,
            elements=[title],
        ))

    keyword_issue = _keyword_presence(data, title, "title", Category.META_TAGS)
    if keyword_issue:
        issues.append(keyword_issue)
    return issues


def check_meta_description(data: WebsiteData) -> list[Issue]:
    issues: list[Issue] = []
    description = (data.meta_tags.description or "").strip()
    length = len(description)

    if not description:
        issues.append(_issue(
            "Missing meta description",
            "The page has no meta description; search engines will pick a snippet on their own.",
            Severity.ERROR,
            Category.META_TAGS,
            impact=Impact.HIGH,
            recommendation="Add a meta description of 50-160 characters summarising the page.",
        ))
        return issues

    if length < DESCRIPTION_MIN_LENGTH:
        issues.append(_issue(
            "Meta description too short",
            f"The meta description is {length} characters long.",
            Severity.WARNING,
            Category.META_TAGS,
            impact=Impact.MEDIUM,
            recommendation="Expand the meta description to 50-160 characters.",
        ))
    elif length > DESCRIPTION_MAX_LENGTH:
        issues.append(_issue(
            "Meta description too long",
            f"The meta description is {length} characters long and will likely be truncated.",
            Severity.WARNING,
            Category.META_TAGS,
            impact=Impact.MEDIUM,
            recommendation="Shorten the meta description to 160 characters or fewer.",
        ))
    else:
        issues.append(_issue(
            "Meta description length is optimal",
            f"The meta description is {length} characters long.",
            Severity.GOOD,
            Category.META_TAGS,
        ))

    keyword_issue = _keyword_presence(data, description, "meta description", Category.META_TAGS)
    if keyword_issue:
        issues.append(keyword_issue)
    return issues


# ---------------------------------------------------------------------------
# Page structure
# ---------------------------------------------------------------------------

def check_headings(data: WebsiteData) -> list[Issue]:
    issues: list[Issue] = []
    headings = data.headings
    h1_count = len(headings.h1)

    if h1_count == 0:
        issues.append(_issue(
            "Missing H1 heading",
            "The page has no H1 heading.",
            Severity.ERROR,
            Category.HEADINGS,
            impact=Impact.HIGH,
            recommendation="Add exactly one H1 that states the main topic of the page.",
        ))
    elif h1_count > 1:
        issues.append(_issue(
            "Multiple H1 headings",
            f"The page has {h1_count} H1 headings.",
            Severity.WARNING,
            Category.HEADINGS,
            impact=Impact.MEDIUM,
            recommendation="Keep a single H1 and demote the others to H2.",
            elements=list(headings.h1),
        ))
    else:
        issues.append(_issue(
            "Single H1 heading",
            "The page has exactly one H1 heading.",
            Severity.GOOD,
            Category.HEADINGS,
            elements=list(headings.h1),
        ))

    skipped = [
        f"H{level} used without H{level - 1}"
        for level in (3, 4)
        if headings.get(level) and not headings.get(level - 1)
    ]
    if skipped:
        issues.append(_issue(
            "Heading hierarchy skips levels",
            "Headings jump over a level, which makes the outline harder to follow.",
            Severity.WARNING,
            Category.HEADINGS,
            impact=Impact.LOW,
            recommendation="Nest headings in order: H1, then H2, then H3.",
            elements=skipped,
        ))

    if headings.h1:
        keyword_issue = _keyword_presence(data, " ".join(headings.h1), "H1 heading", Category.HEADINGS)
        if keyword_issue:
            issues.append(keyword_issue)
    return issues


def check_images(data: WebsiteData) -> list[Issue]:
    issues: list[Issue] = []
    images = data.images

    missing_alt = [image.src for image in images if not image.has_alt]
    if missing_alt:
        issues.append(_issue(
            "Images missing alt text",
            f"{len(missing_alt)} of {len(images)} images have no alt attribute.",
            Severity.ERROR,
            Category.IMAGES,
            impact=Impact.HIGH,
            recommendation="Describe every meaningful image with an alt attribute.",
            elements=missing_alt,
        ))
    else:
        description = (
            f"All {len(images)} images have an alt attribute." if images else "The page has no images."
        )
        issues.append(_issue(
            "All images have alt text",
            description,
            Severity.GOOD,
            Category.IMAGES,
        ))

    empty_alt = [image.src for image in images if image.has_alt and not image.alt.strip()]
    if empty_alt:
        issues.append(_issue(
            "Images with empty alt text",
            f"{len(empty_alt)} images have an empty alt attribute.",
            Severity.WARNING,
            Category.IMAGES,
            impact=Impact.LOW,
            recommendation="Empty alt is only right for decorative images; describe the rest.",
            elements=empty_alt,
        ))

    if images:
        no_dimensions = [image.src for image in images if not image.has_width_height]
        if len(no_dimensions) / len(images) > 0.5:
            issues.append(_issue(
                "Images missing width and height",
                f"{len(no_dimensions)} of {len(images)} images have no explicit dimensions.",
                Severity.WARNING,
                Category.PERFORMANCE,
                impact=Impact.MEDIUM,
                recommendation="Set width and height on images to avoid layout shifts.",
                elements=no_dimensions,
            ))

    if len(images) > LAZY_LOADING_MIN_IMAGES and not any(image.lazy_loaded for image in images):
        issues.append(_issue(
            "Images are not lazy-loaded",
            f"None of the {len(images)} images use lazy loading.",
            Severity.WARNING,
            Category.PERFORMANCE,
            impact=Impact.MEDIUM,
            recommendation='Add loading="lazy" to images below the fold.',
        ))
    return issues


def check_links(data: WebsiteData) -> list[Issue]:
    issues: list[Issue] = []

    broken = data.broken_links
    if broken:
        issues.append(_issue(
            "Broken links found",
            f"{len(broken)} links returned an error status or could not be reached.",
            Severity.ERROR,
            Category.LINKS,
            impact=Impact.HIGH,
            recommendation="Fix or remove the broken links.",
            elements=[f"{link.href} ({link.text or 'no text'})" for link in broken],
        ))
    else:
        issues.append(_issue(
            "No broken links found",
            "None of the checked links returned an error.",
            Severity.GOOD,
            Category.LINKS,
        ))

    without_text = [link.href for link in data.links if not link.has_text]
    if without_text:
        issues.append(_issue(
            "Links without anchor text",
            f"{len(without_text)} links have no anchor text.",
            Severity.WARNING,
            Category.LINKS,
            impact=Impact.MEDIUM,
            recommendation="Give every link descriptive text or an aria-label.",
            elements=without_text,
        ))

    external = [link for link in data.links if not link.is_internal]
    if len(external) > MAX_EXTERNAL_LINKS:
        issues.append(_issue(
            "Too many external links",
            f"The page links out {len(external)} times.",
            Severity.WARNING,
            Category.LINKS,
            impact=Impact.LOW,
            recommendation="Keep outbound links to the ones that help the reader.",
        ))

    followed = [link.href for link in external if not link.nofollow]
    if followed:
        issues.append(_issue(
            "External links without nofollow",
            f"{len(followed)} external links pass ranking signals to other sites.",
            Severity.WARNING,
            Category.LINKS,
            impact=Impact.LOW,
            recommendation='Add rel="nofollow" to external links you do not vouch for.',
            elements=followed,
        ))

    internal_count = sum(1 for link in data.links if link.is_internal)
    if internal_count >= MIN_INTERNAL_LINKS:
        issues.append(_issue(
            "Good internal linking",
            f"The page has {internal_count} internal links.",
            Severity.GOOD,
            Category.LINKS,
        ))
    elif data.content_length > INTERNAL_LINKS_CONTENT_LENGTH:
        issues.append(_issue(
            "Few internal links",
            f"The page has only {internal_count} internal links.",
            Severity.WARNING,
            Category.LINKS,
            impact=Impact.MEDIUM,
            recommendation="Link to related pages on the same site.",
        ))
    return issues


# ---------------------------------------------------------------------------
# Content
# ---------------------------------------------------------------------------

def check_content(data: WebsiteData) -> list[Issue]:
    issues: list[Issue] = []
    words = data.word_count

    if words < THIN_CONTENT_WORDS:
        issues.append(_issue(
            "Thin content",
            f"The page has {words} words.",
            Severity.WARNING,
            Category.CONTENT,
            impact=Impact.HIGH,
            recommendation="Aim for at least 300 words of useful content.",
        ))
    elif words >= RICH_CONTENT_WORDS:
        issues.append(_issue(
            "Comprehensive content",
            f"The page has {words} words.",
            Severity.GOOD,
            Category.CONTENT,
        ))
    else:
        issues.append(_issue(
            "Adequate content length",
            f"The page has {words} words.",
            Severity.GOOD,
            Category.CONTENT,
        ))

    keyword = data.primary_keyword
    if keyword is not None:
        if keyword.density > KEYWORD_STUFFING_DENSITY:
            issues.append(_issue(
                "Possible keyword stuffing",
                f'"{keyword.word}" makes up {keyword.density:.1f}% of the text.',
                Severity.WARNING,
                Category.CONTENT,
                impact=Impact.MEDIUM,
                recommendation="Use synonyms and write for readers rather than repeating the keyword.",
            ))
        elif keyword.density < KEYWORD_MIN_DENSITY and words > THIN_CONTENT_WORDS:
            issues.append(_issue(
                "Low keyword density",
                f'The most frequent keyword "{keyword.word}" makes up only {keyword.density:.1f}% of the text.',
                Severity.WARNING,
                Category.CONTENT,
                impact=Impact.LOW,
                recommendation="Make the main topic of the page clearer in the copy.",
            ))
        elif KEYWORD_MIN_DENSITY <= keyword.density <= KEYWORD_MAX_GOOD_DENSITY:
            issues.append(_issue(
                "Balanced keyword density",
                f'"{keyword.word}" makes up {keyword.density:.1f}% of the text.',
                Severity.GOOD,
                Category.CONTENT,
            ))

    ratio = data.text_to_html_ratio
    if ratio < LOW_TEXT_RATIO:
        issues.append(_issue(
            "Low text to HTML ratio",
            f"Visible text is {ratio:.1f}% of the HTML.",
            Severity.WARNING,
            Category.CONTENT,
            impact=Impact.LOW,
            recommendation="Trim markup and inline code, or add more visible content.",
        ))
    elif ratio >= GOOD_TEXT_RATIO:
        issues.append(_issue(
            "Good text to HTML ratio",
            f"Visible text is {ratio:.1f}% of the HTML.",
            Severity.GOOD,
            Category.CONTENT,
        ))

    if len(data.paragraph_text.split()) >= READABILITY_MIN_WORDS:
        score = flesch_reading_ease(data.paragraph_text)
        if score is not None and score < READABILITY_MIN_SCORE:
            issues.append(_issue(
                "Content may be difficult to read",
                f"Flesch reading ease is {score:.1f}.",
                Severity.WARNING,
                Category.CONTENT,
                impact=Impact.LOW,
                recommendation="Use shorter sentences and simpler words.",
            ))
        elif score is not None:
            issues.append(_issue(
                "Content is easy to read",
                f"Flesch reading ease is {score:.1f}.",
                Severity.GOOD,
                Category.CONTENT,
            ))
    return issues


# ---------------------------------------------------------------------------
# Technical
# ---------------------------------------------------------------------------

def check_mobile(data: WebsiteData) -> list[Issue]:
    viewport = (data.meta_tags.viewport or "").strip()
    if not viewport:
        return [_issue(
            "Missing viewport meta tag",
            "Without a viewport tag mobile browsers render the page at desktop width.",
            Severity.ERROR,
            Category.MOBILE,
            impact=Impact.HIGH,
            recommendation='Add <meta name="viewport" content="width=device-width, initial-scale=1">.',
        )]
    return [_issue(
        "Viewport meta tag present",
        f"Viewport: {viewport}",
        Severity.GOOD,
        Category.MOBILE,
    )]


def check_performance(data: WebsiteData) -> list[Issue]:
    issues: list[Issue] = []
    load_time = data.performance.load_time

    if load_time > SLOW_LOAD_MS:
        issues.append(_issue(
            "Slow page load",
            f"The page took {load_time:.0f} ms to load.",
            Severity.ERROR,
            Category.PERFORMANCE,
            impact=Impact.HIGH,
            recommendation="Reduce server response time and page weight.",
        ))
    elif load_time > MODERATE_LOAD_MS:
        issues.append(_issue(
            "Page load could be faster",
            f"The page took {load_time:.0f} ms to load.",
            Severity.WARNING,
            Category.PERFORMANCE,
            impact=Impact.MEDIUM,
            recommendation="Enable caching and compression and defer non-critical resources.",
        ))
    else:
        issues.append(_issue(
            "Fast page load",
            f"The page took {load_time:.0f} ms to load.",
            Severity.GOOD,
            Category.PERFORMANCE,
        ))

    if len(data.css_files) > MAX_CSS_FILES:
        issues.append(_issue(
            "Too many CSS files",
            f"The page loads {len(data.css_files)} stylesheets.",
            Severity.WARNING,
            Category.PERFORMANCE,
            impact=Impact.MEDIUM,
            recommendation="Bundle stylesheets to cut down on requests.",
            elements=list(data.css_files),
        ))
    if len(data.js_files) > MAX_JS_FILES:
        issues.append(_issue(
            "Too many JavaScript files",
            f"The page loads {len(data.js_files)} scripts.",
            Severity.WARNING,
            Category.PERFORMANCE,
            impact=Impact.MEDIUM,
            recommendation="Bundle scripts and drop the ones the page does not need.",
            elements=list(data.js_files),
        ))
    if data.content_length > MAX_HTML_BYTES:
        issues.append(_issue(
            "Large HTML document",
            f"The HTML is {round(data.content_length / 1024)} KB.",
            Severity.WARNING,
            Category.PERFORMANCE,
            impact=Impact.LOW,
            recommendation="Move inline scripts and styles to external files.",
        ))
    return issues


def check_security(data: WebsiteData) -> list[Issue]:
    issues: list[Issue] = []
    security = data.security

    if security.has_ssl:
        issues.append(_issue(
            "HTTPS enabled",
            "The page is served over HTTPS.",
            Severity.GOOD,
            Category.SECURITY,
        ))
    else:
        issues.append(_issue(
            "Website is not using HTTPS",
            "The page is served over plain HTTP.",
            Severity.ERROR,
            Category.SECURITY,
            impact=Impact.HIGH,
            recommendation="Serve the site over HTTPS and redirect HTTP to it.",
        ))

    if security.has_ssl and security.has_mixed_content:
        issues.append(_issue(
            "Mixed content",
            "The HTTPS page loads resources over plain HTTP.",
            Severity.WARNING,
            Category.SECURITY,
            impact=Impact.MEDIUM,
            recommendation="Load every resource over HTTPS.",
        ))

    missing = security.missing_headers
    if len(missing) > MAX_MISSING_SECURITY_HEADERS:
        issues.append(_issue(
            "Missing security headers",
            f"{len(missing)} recommended security headers are not set.",
            Severity.WARNING,
            Category.SECURITY,
            impact=Impact.MEDIUM,
            recommendation="Configure the server to send the missing headers.",
            elements=missing,
        ))
    return issues


def check_structured_data(data: WebsiteData) -> list[Issue]:
    entries = data.structured_data
    if not entries:
        return [_issue(
            "No structured data",
            "No JSON-LD, microdata or RDFa markup was found.",
            Severity.WARNING,
            Category.STRUCTURED_DATA,
            impact=Impact.MEDIUM,
            recommendation="Describe the page with schema.org markup, preferably JSON-LD.",
            resource_links=[ResourceLink(
                "Introduction to structured data markup",
                "https://developers.google.com/search/docs/appearance/structured-data/intro-structured-data",
            )],
        )]

    invalid = [entry.type for entry in entries if not entry.valid]
    if invalid:
        return [_issue(
            "Invalid structured data",
            f"{len(invalid)} of {len(entries)} structured data blocks could not be read.",
            Severity.WARNING,
            Category.STRUCTURED_DATA,
            impact=Impact.MEDIUM,
            recommendation="Validate the markup and fix the reported errors.",
            elements=invalid,
        )]
    return [_issue(
        "Structured data present",
        f"{len(entries)} structured data blocks were found.",
        Severity.GOOD,
        Category.STRUCTURED_DATA,
        elements=[entry.type for entry in entries],
    )]


def _social_issue(
    label: str,
    tags: dict[str, Optional[str]],
    required: tuple[str, ...],
    recommendation: str,
) -> Issue:
    if not any(tags.values()):
        return _issue(
            f"Missing {label} tags",
            f"The page has no {label} tags.",
            Severity.WARNING,
            Category.SOCIAL_MEDIA,
            impact=Impact.LOW,
            recommendation=recommendation,
        )
    missing = [name for name in required if not tags.get(name)]
    if missing:
        return _issue(
            f"Incomplete {label} tags",
            f"Some {label} tags are missing.",
            Severity.WARNING,
            Category.SOCIAL_MEDIA,
            impact=Impact.LOW,
            recommendation=recommendation,
            elements=missing,
        )
    return _issue(
        f"{label} tags complete",
        f"All required {label} tags are present.",
        Severity.GOOD,
        Category.SOCIAL_MEDIA,
    )


def check_social(data: WebsiteData) -> list[Issue]:
    return [
        _social_issue(
            "Open Graph",
            data.meta_tags.open_graph(),
            ("title", "description", "image"),
            "Add og:title, og:description and og:image.",
        ),
        _social_issue(
            "Twitter Card",
            data.meta_tags.twitter(),
            ("card", "title", "description", "image"),
            "Add twitter:card, twitter:title, twitter:description and twitter:image.",
        ),
    ]


def check_url_structure(data: WebsiteData) -> list[Issue]:
    issues: list[Issue] = []
    parsed = urlparse(data.url)

    if len(parsed.path) > MAX_PATH_LENGTH:
        issues.append(_issue(
            "URL path too long",
            f"The URL path is {len(parsed.path)} characters long.",
            Severity.WARNING,
            Category.URL_STRUCTURE,
            impact=Impact.LOW,
            recommendation="Use short, descriptive paths.",
            elements=[parsed.path],
        ))

    params = parse_qsl(parsed.query, keep_blank_values=True)
    if len(params) > MAX_QUERY_PARAMS:
        issues.append(_issue(
            "Too many URL parameters",
            f"The URL has {len(params)} query parameters.",
            Severity.WARNING,
            Category.URL_STRUCTURE,
            impact=Impact.LOW,
            recommendation="Move filters into the path or drop the ones search engines do not need.",
            elements=[name for name, _ in params],
        ))

    canonical = (data.meta_tags.canonical or "").strip()
    if not canonical:
        issues.append(_issue(
            "Missing canonical URL",
            "The page does not declare a canonical URL.",
            Severity.WARNING,
            Category.URL_STRUCTURE,
            impact=Impact.MEDIUM,
            recommendation='Add <link rel="canonical"> pointing at the preferred URL.',
        ))
        return issues

    target = _normalize_url(canonical)
    known = {_normalize_url(data.url)} | {_normalize_url(url) for url in data.redirect_chain}
    if target in known:
        issues.append(_issue(
            "Canonical URL is set",
            "The canonical URL points at this page.",
            Severity.GOOD,
            Category.URL_STRUCTURE,
            elements=[canonical],
        ))
    else:
        issues.append(_issue(
            "Canonical URL points to a different page",
            "The canonical URL does not match the audited URL.",
            Severity.WARNING,
            Category.URL_STRUCTURE,
            impact=Impact.MEDIUM,
            recommendation="Make sure the canonical points at the page you want indexed.",
            elements=[canonical],
        ))
    return issues


def check_technical(data: WebsiteData) -> list[Issue]:
    issues: list[Issue] = []

    robots = (data.meta_tags.robots or "").strip().lower()
    directives = {directive.strip() for directive in robots.split(",")}
    if not robots:
        issues.append(_issue(
            "Missing robots meta tag",
            "The page does not state its indexing preferences.",
            Severity.WARNING,
            Category.TECHNICAL_SEO,
            impact=Impact.LOW,
            recommendation='Add <meta name="robots" content="index, follow">.',
        ))
    elif "noindex" in directives or "none" in directives:
        issues.append(_issue(
            "Page blocked from indexing",
            f'The robots meta tag is "{robots}".',
            Severity.ERROR,
            Category.TECHNICAL_SEO,
            impact=Impact.HIGH,
            recommendation="Remove noindex if the page should appear in search results.",
        ))
    else:
        issues.append(_issue(
            "Page is indexable",
            f'The robots meta tag is "{robots}".',
            Severity.GOOD,
            Category.TECHNICAL_SEO,
        ))

    if data.has_sitemap:
        issues.append(_issue(
            "Sitemap found", "The site publishes a sitemap.", Severity.GOOD, Category.TECHNICAL_SEO
        ))
    else:
        issues.append(_issue(
            "Missing sitemap",
            "No sitemap.xml was found.",
            Severity.WARNING,
            Category.TECHNICAL_SEO,
            impact=Impact.MEDIUM,
            recommendation="Publish a sitemap.xml and reference it from robots.txt.",
        ))
    if data.sitemap_is_xml is False:
        issues.append(_issue(
            "Sitemap is not valid XML",
            "The sitemap was downloaded but could not be parsed as XML.",
            Severity.WARNING,
            Category.TECHNICAL_SEO,
            impact=Impact.MEDIUM,
            recommendation="Serve the sitemap as well-formed XML following the sitemaps.org schema.",
        ))

    if data.has_robots_txt:
        issues.append(_issue(
            "robots.txt found", "The site has a robots.txt file.", Severity.GOOD, Category.TECHNICAL_SEO
        ))
    else:
        issues.append(_issue(
            "Missing robots.txt",
            "No robots.txt was found.",
            Severity.WARNING,
            Category.TECHNICAL_SEO,
            impact=Impact.LOW,
            recommendation="Add a robots.txt file at the site root.",
        ))
    if data.robots_disallows_all:
        issues.append(_issue(
            "robots.txt blocks the whole site",
            'robots.txt contains "Disallow: /".',
            Severity.WARNING,
            Category.TECHNICAL_SEO,
            impact=Impact.HIGH,
            recommendation="Limit Disallow rules to the paths crawlers should skip.",
        ))

    if data.redirect_chain:
        issues.append(_issue(
            "Redirect chain detected",
            f"The URL went through {len(data.redirect_chain)} redirects.",
            Severity.WARNING,
            Category.TECHNICAL_SEO,
            impact=Impact.MEDIUM,
            recommendation="Link directly to the final URL.",
            elements=list(data.redirect_chain),
        ))

    language = (data.meta_tags.language or "").strip()
    if language:
        issues.append(_issue(
            "Language declared",
            f'The page declares lang="{language}".',
            Severity.GOOD,
            Category.TECHNICAL_SEO,
        ))
    else:
        issues.append(_issue(
            "Missing language attribute",
            "The <html> element has no lang attribute.",
            Severity.WARNING,
            Category.TECHNICAL_SEO,
            impact=Impact.LOW,
            recommendation='Add lang to the <html> element, e.g. <html lang="en">.',
        ))

    if data.hreflang_tags:
        codes = [tag.hreflang for tag in data.hreflang_tags]
        if "x-default" in (code.lower() for code in codes):
            issues.append(_issue(
                "hreflang alternates configured",
                f"{len(codes)} hreflang alternates including x-default.",
                Severity.GOOD,
                Category.TECHNICAL_SEO,
                elements=codes,
            ))
        else:
            issues.append(_issue(
                "Missing x-default hreflang tag",
                "hreflang alternates are declared without an x-default fallback.",
                Severity.WARNING,
                Category.TECHNICAL_SEO,
                impact=Impact.LOW,
                recommendation='Add <link rel="alternate" hreflang="x-default">.',
                elements=codes,
            ))
    return issues


CHECKS: tuple[Check, ...] = (
    Check("title", check_title),
    Check("meta_description", check_meta_description),
    Check("headings", check_headings),
    Check("images", check_images),
    Check("links", check_links),
    Check("content", check_content),
    Check("mobile", check_mobile),
    Check("performance", check_performance),
    Check("security", check_security),
    Check("structured_data", check_structured_data),
    Check("social", check_social),
    Check("url_structure", check_url_structure),
    Check("technical", check_technical),
)
