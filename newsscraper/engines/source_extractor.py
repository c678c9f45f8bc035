"""Extractor protocol and the shared two-phase listing/content algorithm."""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Protocol, runtime_checkable
from urllib.parse import urlencode, urljoin

import tldextract
from bs4 import BeautifulSoup

from newsscraper.engines.article import Article, normalize_text, parse_date
from newsscraper.engines.content_normalizer import ContentNormalizer, ExtractionRule
from newsscraper.engines.context import ExtractionContext
from newsscraper.engines.errors import (
    ArticleExcluded,
    ContentFetchWarning,
    ExtractionCancelled,
    FetchError,
    ParseError,
)
from newsscraper.engines.rendering import RenderingStrategy


logger = logging.getLogger(__name__)

# Offline extractor: uses the bundled public suffix snapshot, no HTTP fetch
_domain_extractor = tldextract.TLDExtract(cache_dir=None, suffix_list_urls=())


@runtime_checkable
class ArticleExtractor(Protocol):
    """Protocol every source-specific extractor implements.

    Attributes:
        source_name: Registry identifier of the source (e.g., "detik")
    """

    @property
    def source_name(self) -> str:
        """Return the source identifier."""
        ...

    def search(
        self,
        context: ExtractionContext,
        query: str,
        start: date,
        end: date,
    ) -> list[Article]:
        """Return articles matching `query` published between start and end.

        Raises:
            FetchError: If the listing page cannot be fetched
            ParseError: If the listing markup is unrecognizable
            ExtractionCancelled: If the context expires during the listing fetch
        """
        ...


@dataclass(frozen=True)
class ListingSelectors:
    """CSS selectors describing one source's search-result markup.

    Title, link, summary and date selectors are evaluated inside each
    container. The link selector's element must carry an href.
    """
    container: str
    title: str
    link: str
    summary: str | None = None
    date: str | None = None


@dataclass(frozen=True)
class SourceProfile:
    """Immutable per-source configuration.

    Attributes:
        name: Registry identifier
        search_url: Listing endpoint without query string
        query_param: Parameter carrying the search text
        start_param: Parameter carrying the range start
        end_param: Parameter carrying the range end
        date_format: strftime format for the range parameters
        listing: Listing-page selectors
        content_rules: Selector-fallback chain for article pages
        extra_params: Fixed parameters appended to every search
        listing_ready_selector: Element the browser waits for on listings
        content_ready_selector: Element the browser waits for on articles
        politeness_delay: Seconds paused between consecutive content fetches
        excluded_subdomains: Article hosts under these subdomains are
                             media pages without text and are never fetched
    """
    name: str
    search_url: str
    query_param: str
    start_param: str
    end_param: str
    date_format: str
    listing: ListingSelectors
    content_rules: tuple[ExtractionRule, ...]
    extra_params: tuple[tuple[str, str], ...] = ()
    listing_ready_selector: str | None = None
    content_ready_selector: str | None = None
    politeness_delay: float = 0.0
    excluded_subdomains: tuple[str, ...] = ()


class SiteExtractor:
    """Two-phase extractor driven by a SourceProfile.

    The listing page is fetched and parsed into skeletal articles, then
    each article's own page is fetched and normalized to fill `content`.
    Only listing-phase failures escape `search`; content-phase failures
    leave the article in place with empty content and log one warning.
    """

    def __init__(
        self,
        profile: SourceProfile,
        listing_renderer: RenderingStrategy,
        content_renderer: RenderingStrategy | None = None,
    ):
        self.profile = profile
        self.listing_renderer = listing_renderer
        self.content_renderer = content_renderer or listing_renderer
        self.normalizer = ContentNormalizer(profile.content_rules)

    @property
    def source_name(self) -> str:
        return self.profile.name

    def build_search_url(self, query: str, start: date, end: date) -> str:
        """Encode query and range in this source's parameter convention."""
        params = [
            (self.profile.query_param, query),
            *self.profile.extra_params,
            (self.profile.start_param, start.strftime(self.profile.date_format)),
            (self.profile.end_param, end.strftime(self.profile.date_format)),
        ]
        return f"{self.profile.search_url}?{urlencode(params)}"

    def search(
        self,
        context: ExtractionContext,
        query: str,
        start: date,
        end: date,
    ) -> list[Article]:
        context.check()
        url = self.build_search_url(query, start, end)
        logger.debug(f"{self.source_name}: fetching listing {url}")

        markup = self.listing_renderer.fetch(
            url, context, self.profile.listing_ready_selector
        )
        articles = self.parse_listing(markup)

        if not articles:
            logger.info(f"{self.source_name}: no articles found for '{query}' ({start}..{end})")
            return []

        logger.info(f"{self.source_name}: {len(articles)} candidates for '{query}' ({start}..{end})")
        self._fill_content(articles, context)
        return articles

    def parse_listing(self, markup: str) -> list[Article]:
        """Parse listing markup into articles with title, url and summary.

        Entries missing a title or URL are dropped silently.

        Raises:
            ParseError: If the markup has no document body
        """
        if not markup or not markup.strip():
            raise ParseError(f"{self.source_name}: empty listing response")

        soup = BeautifulSoup(markup, "lxml")
        if soup.body is None:
            raise ParseError(f"{self.source_name}: listing has no document body")

        articles: list[Article] = []
        for element in soup.select(self.profile.listing.container):
            try:
                articles.append(self._parse_entry(element))
            except ArticleExcluded:
                continue
        return articles

    def _parse_entry(self, element: Any) -> Article:
        selectors = self.profile.listing

        title_elem = element.select_one(selectors.title)
        title = normalize_text(title_elem.get_text(" ")) if title_elem else ""

        link_elem = element.select_one(selectors.link)
        link = (link_elem.get("href") or "").strip() if link_elem else ""

        if not title or not link:
            raise ArticleExcluded(f"listing entry missing title or url in {self.source_name}")

        summary = ""
        if selectors.summary:
            summary_elem = element.select_one(selectors.summary)
            if summary_elem:
                summary = normalize_text(summary_elem.get_text(" "))

        published = None
        if selectors.date:
            date_elem = element.select_one(selectors.date)
            if date_elem:
                published = parse_date(
                    date_elem.get("datetime") or date_elem.get_text(" ")
                )

        return Article(
            title=title,
            url=urljoin(self.profile.search_url, link),
            summary=summary,
            date=published,
            source=self.source_name,
        )

    def _fill_content(self, articles: list[Article], context: ExtractionContext) -> None:
        for index, article in enumerate(articles):
            try:
                if index > 0:
                    context.sleep(self.profile.politeness_delay)
                article.content = self.fetch_content(article.url, context)
            except ContentFetchWarning as w:
                logger.warning(f"{self.source_name}: skipping content for {w.url}: {w.reason}")
            except ExtractionCancelled:
                filled = sum(1 for a in articles if a.content)
                logger.warning(
                    f"{self.source_name}: cancelled during content phase, "
                    f"{filled} of {len(articles)} articles have content"
                )
                return

    def is_excluded_media(self, url: str) -> bool:
        """Whether `url` points at a media-only page (video, photo)."""
        if not self.profile.excluded_subdomains:
            return False
        labels = _domain_extractor(url).subdomain.lower().split(".")
        return any(label in self.profile.excluded_subdomains for label in labels)

    def fetch_content(self, url: str, context: ExtractionContext) -> str:
        """Fetch an article page and return its normalized body text.

        Raises:
            ContentFetchWarning: If the page is excluded, unreachable or
                yields no text under any rule
            ExtractionCancelled: If the context is cancelled
        """
        if self.is_excluded_media(url):
            raise ContentFetchWarning(url, "link is a video/photo page, not a text article")

        try:
            markup = self.content_renderer.fetch(
                url, context, self.profile.content_ready_selector
            )
        except FetchError as e:
            raise ContentFetchWarning(url, str(e)) from e

        content = self.normalizer.normalize(markup)
        if not content:
            raise ContentFetchWarning(url, "no content matched any selector")
        return content
