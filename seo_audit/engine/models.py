"""Records shared by the extractor, the check catalog and the aggregator.

Everything here is a frozen dataclass. Sequences are stored as tuples and
mappings as read-only proxies, so a :class:`WebsiteData` snapshot can be handed
to every check without any of them being able to change what the others see.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional


class Severity(str, Enum):
    GOOD = "good"
    WARNING = "warning"
    ERROR = "error"


class Impact(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Category(str, Enum):
    META_TAGS = "Meta Tags"
    HEADINGS = "Headings"
    IMAGES = "Images"
    LINKS = "Links"
    CONTENT = "Content"
    MOBILE = "Mobile"
    PERFORMANCE = "Performance"
    SECURITY = "Security"
    STRUCTURED_DATA = "Structured Data"
    SOCIAL_MEDIA = "Social Media"
    URL_STRUCTURE = "URL Structure"
    TECHNICAL_SEO = "Technical SEO"


def _freeze(instance, *names: str) -> None:
    # frozen dataclasses only allow assignment through object.__setattr__
    for name in names:
        value = getattr(instance, name)
        if isinstance(value, Mapping):
            object.__setattr__(instance, name, MappingProxyType(dict(value)))
        elif not isinstance(value, tuple):
            object.__setattr__(instance, name, tuple(value))


# ---------------------------------------------------------------------------
# Page snapshot
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MetaTags:
    title: Optional[str] = None
    description: Optional[str] = None
    keywords: Optional[str] = None
    viewport: Optional[str] = None
    robots: Optional[str] = None
    canonical: Optional[str] = None
    og_title: Optional[str] = None
    og_description: Optional[str] = None
    og_image: Optional[str] = None
    og_type: Optional[str] = None
    og_url: Optional[str] = None
    og_site_name: Optional[str] = None
    twitter_card: Optional[str] = None
    twitter_title: Optional[str] = None
    twitter_description: Optional[str] = None
    twitter_image: Optional[str] = None
    twitter_site: Optional[str] = None
    twitter_creator: Optional[str] = None
    author: Optional[str] = None
    language: Optional[str] = None
    theme_color: Optional[str] = None

    def open_graph(self) -> dict[str, Optional[str]]:
        return {f.name[3:]: getattr(self, f.name) for f in fields(self) if f.name.startswith("og_")}

    def twitter(self) -> dict[str, Optional[str]]:
        return {f.name[8:]: getattr(self, f.name) for f in fields(self) if f.name.startswith("twitter_")}


@dataclass(frozen=True)
class Headings:
    h1: tuple[str, ...] = ()
    h2: tuple[str, ...] = ()
    h3: tuple[str, ...] = ()
    h4: tuple[str, ...] = ()
    h5: tuple[str, ...] = ()
    h6: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        _freeze(self, "h1", "h2", "h3", "h4", "h5", "h6")

    def get(self, level: int) -> tuple[str, ...]:
        if not 1 <= level <= 6:
            raise ValueError(f"heading level must be 1..6, got {level}")
        return getattr(self, f"h{level}")


@dataclass(frozen=True)
class ImageInfo:
    src: str
    alt: str = ""
    has_alt: bool = False
    width: Optional[str] = None
    height: Optional[str] = None
    lazy_loaded: bool = False
    format: Optional[str] = None

    @property
    def has_width_height(self) -> bool:
        return bool(self.width) and bool(self.height)


@dataclass(frozen=True)
class LinkInfo:
    href: str
    text: str = ""
    is_internal: bool = False
    has_text: bool = False
    nofollow: bool = False
    target: Optional[str] = None
    status: Optional[int] = None
    error: Optional[str] = None

    @property
    def is_broken(self) -> bool:
        return self.error is not None or (self.status is not None and self.status >= 400)


@dataclass(frozen=True)
class StructuredDataEntry:
    type: str
    valid: bool = True
    errors: tuple[str, ...] = ()
    format: str = "json-ld"

    def __post_init__(self) -> None:
        _freeze(self, "errors")


@dataclass(frozen=True)
class SecurityInfo:
    has_ssl: bool = False
    has_mixed_content: bool = False
    security_headers: Mapping[str, Optional[str]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        _freeze(self, "security_headers")

    @property
    def missing_headers(self) -> list[str]:
        return [name for name, value in self.security_headers.items() if not value]


@dataclass(frozen=True)
class PerformanceMetrics:
    load_time: float = 0.0
    first_contentful_paint: Optional[float] = None
    largest_contentful_paint: Optional[float] = None
    cumulative_layout_shift: Optional[float] = None
    total_blocking_time: Optional[float] = None
    speed_index: Optional[float] = None


@dataclass(frozen=True)
class Keyword:
    word: str
    count: int
    density: float


@dataclass(frozen=True)
class HreflangTag:
    hreflang: str
    href: str


@dataclass(frozen=True)
class WebsiteData:
    url: str
    status_code: int = 200
    redirect_chain: tuple[str, ...] = ()
    meta_tags: MetaTags = field(default_factory=MetaTags)
    headings: Headings = field(default_factory=Headings)
    images: tuple[ImageInfo, ...] = ()
    links: tuple[LinkInfo, ...] = ()
    structured_data: tuple[StructuredDataEntry, ...] = ()
    security: SecurityInfo = field(default_factory=SecurityInfo)
    performance: PerformanceMetrics = field(default_factory=PerformanceMetrics)
    content_length: int = 0
    word_count: int = 0
    text_to_html_ratio: float = 0.0
    keywords: tuple[Keyword, ...] = ()
    has_sitemap: bool = False
    has_robots_txt: bool = False
    robots_disallows_all: bool = False
    sitemap_is_xml: Optional[bool] = None
    css_files: tuple[str, ...] = ()
    js_files: tuple[str, ...] = ()
    hreflang_tags: tuple[HreflangTag, ...] = ()
    paragraph_text: str = ""

    def __post_init__(self) -> None:
        _freeze(
            self,
            "redirect_chain",
            "images",
            "links",
            "structured_data",
            "keywords",
            "css_files",
            "js_files",
            "hreflang_tags",
        )

    @property
    def title(self) -> str:
        return self.meta_tags.title or ""

    @property
    def broken_links(self) -> tuple[LinkInfo, ...]:
        return tuple(link for link in self.links if link.is_broken)

    @property
    def primary_keyword(self) -> Optional[Keyword]:
        return self.keywords[0] if self.keywords else None


# ---------------------------------------------------------------------------
# Audit output
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ResourceLink:
    title: str
    url: str


@dataclass(frozen=True)
class Issue:
    title: str
    description: str
    severity: Severity
    category: Category
    impact: Optional[Impact] = None
    recommendation: Optional[str] = None
    elements: tuple[str, ...] = ()
    resource_links: tuple[ResourceLink, ...] = ()

    def __post_init__(self) -> None:
        _freeze(self, "elements", "resource_links")


@dataclass(frozen=True)
class CategoryScore:
    name: str
    score: int
    issue_count: int


@dataclass(frozen=True)
class AuditResult:
    url: str
    score: int
    passed_checks: int
    warning_checks: int
    error_checks: int
    category_scores: tuple[CategoryScore, ...]
    issues: tuple[Issue, ...]
    timestamp: str
    scan_duration: int
    page_title: str

    def __post_init__(self) -> None:
        _freeze(self, "category_scores", "issues")
