"""Extraction orchestrator.

This module validates a search query, resolves the source extractor and
drives it window by window through the retry policy, aggregating the
articles of every window that succeeds.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from newsscraper.agent.retry import RetryPolicy
from newsscraper.agent.windows import WindowMode, iter_windows
from newsscraper.config.settings import Settings
from newsscraper.engines.article import Article, ExtractionWindow, SearchQuery
from newsscraper.engines.context import ExtractionContext
from newsscraper.engines.errors import ExtractionCancelled
from newsscraper.engines.registry import SourceRegistry


logger = logging.getLogger(__name__)


WINDOW_OK = "ok"
WINDOW_FAILED = "failed"
WINDOW_CANCELLED = "cancelled"


@dataclass
class WindowReport:
    """Outcome of one window.

    Attributes:
        window: The date sub-range processed
        status: "ok", "failed" or "cancelled"
        article_count: Articles contributed to the aggregate
        attempts: Extraction attempts made
        error: Last error message for failed or cancelled windows
    """
    window: ExtractionWindow
    status: str
    article_count: int = 0
    attempts: int = 0
    error: str | None = None


@dataclass
class ExtractionResult:
    """Aggregate result of an orchestrated extraction.

    An empty article list with every window "ok" means nothing matched;
    it is not a failure.
    """
    query: SearchQuery
    articles: list[Article] = field(default_factory=list)
    windows: list[WindowReport] = field(default_factory=list)

    @property
    def failed_windows(self) -> list[WindowReport]:
        return [w for w in self.windows if w.status == WINDOW_FAILED]

    @property
    def cancelled_windows(self) -> list[WindowReport]:
        return [w for w in self.windows if w.status == WINDOW_CANCELLED]

    @property
    def missing_content_count(self) -> int:
        return sum(1 for a in self.articles if not a.content)


WindowCallback = Callable[[ExtractionWindow, list[Article]], None]


class ExtractionOrchestrator:
    """Drive an extractor across the windows of a query's date range.

    Windows are processed sequentially, oldest first. Each window gets
    its own time budget derived from the caller's context and is retried
    independently; a window that exhausts its retries is logged and
    skipped without discarding earlier results.

    Attributes:
        registry: Source registry used to resolve extractors
        retry_policy: Retry policy wrapping each window's extraction
        mode: Windowing mode
        window_timeout: Seconds allowed per window, None for unbounded
        window_pause: Seconds paused between consecutive windows
    """

    def __init__(
        self,
        registry: SourceRegistry,
        retry_policy: RetryPolicy | None = None,
        mode: WindowMode = WindowMode.SINGLE,
        window_timeout: float | None = None,
        window_pause: float = 0.0,
    ):
        self.registry = registry
        self.retry_policy = retry_policy or RetryPolicy()
        self.mode = mode
        self.window_timeout = window_timeout
        self.window_pause = window_pause

    @classmethod
    def from_settings(
        cls,
        registry: SourceRegistry,
        settings: Settings,
        mode: WindowMode = WindowMode.SINGLE,
    ) -> "ExtractionOrchestrator":
        return cls(
            registry,
            retry_policy=RetryPolicy(
                attempts=settings.retry_attempts,
                delay=settings.retry_delay_seconds,
            ),
            mode=mode,
            window_timeout=settings.window_timeout,
            window_pause=settings.window_pause_seconds if mode is WindowMode.DAILY else 0.0,
        )

    def execute(self, context: ExtractionContext, query: SearchQuery) -> list[Article]:
        """Return every article found for `query`.

        Raises:
            InvalidRangeError: If the query's range ends before it starts
            UnknownSourceError: If the query's source is not registered
        """
        return self.run(context, query).articles

    def run(
        self,
        context: ExtractionContext,
        query: SearchQuery,
        on_window: WindowCallback | None = None,
    ) -> ExtractionResult:
        """Run the extraction and return articles with per-window reports.

        Args:
            context: Caller's cancellation signal for the whole operation
            query: Source, search text and date range
            on_window: Called with each successful window's articles,
                       e.g. to persist results day by day

        Raises:
            InvalidRangeError: If the query's range ends before it starts
            UnknownSourceError: If the query's source is not registered
        """
        query.validate()
        extractor = self.registry.resolve(query.source)

        result = ExtractionResult(query=query)
        logger.info(
            f"Starting extraction: source={query.source}, query='{query.text}', "
            f"range={query.start}..{query.end}, mode={self.mode.value}"
        )

        for index, window in enumerate(iter_windows(query.start, query.end, self.mode)):
            if index > 0 and self.window_pause:
                try:
                    context.sleep(self.window_pause)
                except ExtractionCancelled:
                    pass

            if context.cancelled:
                logger.warning(f"{query.source}: operation cancelled before window {window}")
                result.windows.append(
                    WindowReport(window, WINDOW_CANCELLED, error="operation cancelled")
                )
                break

            report, articles = self._run_window(context, query, extractor, window)
            result.windows.append(report)
            if report.status != WINDOW_OK:
                continue

            result.articles.extend(articles)
            if on_window is not None and articles:
                on_window(window, articles)

        logger.info(
            f"Extraction finished: {len(result.articles)} articles from "
            f"{len(result.windows)} window(s), {len(result.failed_windows)} failed, "
            f"{len(result.cancelled_windows)} cancelled"
        )
        return result

    def _run_window(
        self,
        context: ExtractionContext,
        query: SearchQuery,
        extractor,
        window: ExtractionWindow,
    ) -> tuple[WindowReport, list[Article]]:
        window_context = context.child(self.window_timeout)
        label = f"{query.source} [{window}]"

        outcome = self.retry_policy.run(
            lambda: extractor.search(window_context, query.text, window.start, window.end),
            window_context,
            label=label,
        )

        if outcome.cancelled:
            logger.error(f"{label}: window cancelled, skipping")
            return WindowReport(
                window, WINDOW_CANCELLED, attempts=outcome.attempts, error=str(outcome.error)
            ), []

        if not outcome.succeeded:
            logger.error(f"{label}: window failed after {outcome.attempts} attempt(s), skipping")
            return WindowReport(
                window, WINDOW_FAILED, attempts=outcome.attempts, error=str(outcome.error)
            ), []

        if outcome.articles:
            logger.info(f"{label}: {len(outcome.articles)} articles")
        else:
            logger.info(f"{label}: no articles found")

        return WindowReport(
            window, WINDOW_OK, article_count=len(outcome.articles), attempts=outcome.attempts
        ), outcome.articles
