"""kompas.com search scraper.

Kompas search results are assembled client-side by an embedded search
widget, so both listing and article pages go through a headless browser.
"""

from newsscraper.engines.content_normalizer import ExtractionRule
from newsscraper.engines.rendering import RenderingStrategy
from newsscraper.engines.source_extractor import (
    ListingSelectors,
    SiteExtractor,
    SourceProfile,
)


# Kompas inlines "Baca juga:" link blocks between body paragraphs
RELATED_LINK_MARKERS = ("Baca juga:", "Baca juga :")

KOMPAS_PROFILE = SourceProfile(
    name="kompas",
    search_url="https://search.kompas.com/search",
    query_param="q",
    start_param="start_date",
    end_param="end_date",
    date_format="%Y-%m-%d",
    extra_params=(("site_id", "all"),),
    listing=ListingSelectors(
        container="div.gsc-webResult",
        title="a.gs-title",
        link="a.gs-title",
        summary="div.gs-bidi-start-align",
    ),
    content_rules=(
        ExtractionRule(
            "div.read__content",
            paragraphs="p",
            exclude_markers=RELATED_LINK_MARKERS,
        ),
    ),
    listing_ready_selector="div.gsc-webResult",
    content_ready_selector="div.read__content",
    politeness_delay=0.3,
    excluded_subdomains=("video", "foto"),
)


class KompasScraper(SiteExtractor):
    """Scraper for kompas.com search results rendered in a browser."""

    def __init__(self, renderer: RenderingStrategy):
        super().__init__(KOMPAS_PROFILE, renderer)
