"""Registry mapping source identifiers to extractor instances."""

import logging
from collections.abc import Iterable, Mapping
from types import MappingProxyType

from newsscraper.config.settings import Settings
from newsscraper.engines.detik_scraper import DetikScraper
from newsscraper.engines.errors import UnknownSourceError
from newsscraper.engines.kompas_scraper import KompasScraper
from newsscraper.engines.liputan6_scraper import Liputan6Scraper
from newsscraper.engines.rendering import (
    BrowserRendering,
    RenderingStrategy,
    StaticRendering,
)
from newsscraper.engines.source_extractor import ArticleExtractor


logger = logging.getLogger(__name__)


class SourceRegistry:
    """Read-only mapping from source identifier to ArticleExtractor.

    Built once at start-up; lookups perform no I/O and the mapping is
    never mutated afterwards, so concurrent reads are safe.

    Example:
        >>> registry = SourceRegistry({"detik": DetikScraper(StaticRendering())})
        >>> registry.resolve("detik").source_name
        'detik'
    """

    def __init__(
        self,
        extractors: Mapping[str, ArticleExtractor],
        renderers: Iterable[RenderingStrategy] = (),
    ):
        self._extractors = MappingProxyType(dict(extractors))
        self._renderers = tuple(renderers)

    @property
    def names(self) -> list[str]:
        return sorted(self._extractors)

    def __contains__(self, name: object) -> bool:
        return name in self._extractors

    def resolve(self, name: str) -> ArticleExtractor:
        """Return the extractor registered under `name`.

        Raises:
            UnknownSourceError: If no extractor is registered for `name`
        """
        try:
            return self._extractors[name]
        except KeyError:
            raise UnknownSourceError(name, self.names) from None

    def close(self) -> None:
        """Release rendering resources shared by the registered extractors."""
        for renderer in self._renderers:
            try:
                renderer.close()
            except Exception as e:
                logger.warning(f"Failed to close renderer {type(renderer).__name__}: {e}")


def build_registry(settings: Settings) -> SourceRegistry:
    """Build the registry of all supported sources from settings.

    The static HTTP client and the browser are shared by every source
    that uses them. The browser only starts when a rendered source is
    actually queried.
    """
    static = StaticRendering(
        timeout=settings.request_timeout_seconds,
        user_agent=settings.user_agent,
    )
    browser = BrowserRendering(
        timeout=settings.browser_timeout_seconds,
        user_agent=settings.user_agent,
        headless=settings.headless,
        executables=tuple(settings.browser_executables),
    )

    extractors: dict[str, ArticleExtractor] = {
        "detik": DetikScraper(static),
        "kompas": KompasScraper(browser),
        "liputan6": Liputan6Scraper(static),
    }
    return SourceRegistry(extractors, renderers=(static, browser))
