"""liputan6.com search scraper (server-rendered listing and articles)."""

from newsscraper.engines.content_normalizer import ExtractionRule
from newsscraper.engines.rendering import RenderingStrategy
from newsscraper.engines.source_extractor import (
    ListingSelectors,
    SiteExtractor,
    SourceProfile,
)


LIPUTAN6_PROFILE = SourceProfile(
    name="liputan6",
    search_url="https://www.liputan6.com/search",
    query_param="q",
    start_param="from_date",
    end_param="to_date",
    date_format="%d/%m/%Y",
    extra_params=(("order", "latest"), ("type", "all")),
    listing=ListingSelectors(
        container="article.articles--iridescent-list--item",
        title="h4.articles--iridescent-list--text-item__title",
        link="a[href]",
        summary="p.articles--iridescent-list--text-item__summary",
        date="time",
    ),
    content_rules=(
        ExtractionRule(
            "div.article-content-body__item-content",
            paragraphs="p",
            exclude_markers=("Baca Juga",),
        ),
        ExtractionRule("div.article-content-body__item-content"),
    ),
    politeness_delay=0.3,
)


class Liputan6Scraper(SiteExtractor):
    """Scraper for liputan6.com search results."""

    def __init__(self, renderer: RenderingStrategy):
        super().__init__(LIPUTAN6_PROFILE, renderer)
