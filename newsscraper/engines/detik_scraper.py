"""detik.com search scraper (server-rendered listing and articles)."""

from newsscraper.engines.content_normalizer import ExtractionRule
from newsscraper.engines.rendering import RenderingStrategy
from newsscraper.engines.source_extractor import (
    ListingSelectors,
    SiteExtractor,
    SourceProfile,
)


DETIK_PROFILE = SourceProfile(
    name="detik",
    search_url="https://www.detik.com/search/searchall",
    query_param="query",
    start_param="fromdatex",
    end_param="todatex",
    date_format="%d/%m/%Y",
    extra_params=(("result_type", "relevansi"),),
    listing=ListingSelectors(
        container="article",
        title="h3",
        link="a[href]",
        summary="p",
        date=".date",
    ),
    content_rules=(
        ExtractionRule("div.detail__body-text", exclude_selectors=("script", "style")),
        ExtractionRule("div.detail__body", exclude_selectors=("script", "style")),
    ),
    politeness_delay=0.3,
)


class DetikScraper(SiteExtractor):
    """Scraper for detik.com search results.

    Both the listing and the article pages are fetched statically. The
    article body is read from `div.detail__body-text`, falling back to
    the wider `div.detail__body` container.
    """

    def __init__(self, renderer: RenderingStrategy):
        super().__init__(DETIK_PROFILE, renderer)
