from __future__ import annotations

import pytest

from seo_audit.engine.models import (
    Headings,
    ImageInfo,
    Keyword,
    LinkInfo,
    MetaTags,
    PerformanceMetrics,
    SecurityInfo,
    StructuredDataEntry,
    WebsiteData,
)
from seo_audit.engine.extractor import SECURITY_HEADERS

PAGE_URL = "https://solar.example.com/guide"


@pytest.fixture
def good_page() -> WebsiteData:
    """A page that passes every check in the catalog."""
    return WebsiteData(
        url=PAGE_URL,
        status_code=200,
        meta_tags=MetaTags(
            title="Solar Panels Guide for Homeowners",
            description=(
                "Learn how solar panels work, what they cost and how to pick "
                "the right installer for your home."
            ),
            viewport="width=device-width, initial-scale=1",
            robots="index, follow",
            canonical=PAGE_URL,
            og_title="Solar Panels Guide",
            og_description="How solar panels work",
            og_image="https://solar.example.com/cover.jpg",
            twitter_card="summary_large_image",
            twitter_title="Solar Panels Guide",
            twitter_description="How solar panels work",
            twitter_image="https://solar.example.com/cover.jpg",
            language="en",
        ),
        headings=Headings(h1=("Solar panel basics",), h2=("Costs", "Installers")),
        images=(
            ImageInfo(src="https://solar.example.com/a.jpg", alt="Roof panels", has_alt=True,
                      width="800", height="600", lazy_loaded=True, format="jpg"),
            ImageInfo(src="https://solar.example.com/b.webp", alt="Inverter", has_alt=True,
                      width="400", height="300", format="webp"),
        ),
        links=(
            LinkInfo(href="https://solar.example.com/", text="Home", is_internal=True, has_text=True, status=200),
            LinkInfo(href="https://solar.example.com/costs", text="Costs", is_internal=True, has_text=True, status=200),
            LinkInfo(href="https://solar.example.com/faq", text="FAQ", is_internal=True, has_text=True),
            LinkInfo(href="https://energy.gov/solar", text="Energy.gov", has_text=True, nofollow=True, status=200),
        ),
        structured_data=(StructuredDataEntry(type="Article"),),
        security=SecurityInfo(
            has_ssl=True,
            security_headers={name: "set" for name in SECURITY_HEADERS},
        ),
        performance=PerformanceMetrics(load_time=800.0),
        content_length=40_000,
        word_count=1200,
        text_to_html_ratio=30.0,
        keywords=(Keyword("solar", 24, 2.0), Keyword("panels", 18, 1.5)),
        has_sitemap=True,
        has_robots_txt=True,
        css_files=("https://solar.example.com/site.css",),
        js_files=("https://solar.example.com/app.js",),
    )
