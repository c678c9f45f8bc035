"""Runner module for the news scraper.

This module wires settings, the source registry, the orchestrator and
the CSV store together and executes one scrape request.
"""

import json
import logging
import sys
from datetime import datetime

from newsscraper.agent.request import (
    RequestValidationError,
    build_response,
    parse_request,
)
from newsscraper.agent.windows import WindowMode
from newsscraper.agent.workflow import ExtractionOrchestrator, WINDOW_OK
from newsscraper.config.settings import ConfigurationError, Settings, load_settings
from newsscraper.engines.article import Article, ExtractionWindow
from newsscraper.engines.context import ExtractionContext
from newsscraper.engines.csv_writer import ArticleStore, CsvArticleStore
from newsscraper.engines.errors import InvalidRangeError, UnknownSourceError
from newsscraper.engines.observability import (
    create_run_metrics,
    log_stage_counts,
    write_run_log,
)
from newsscraper.engines.registry import SourceRegistry, build_registry


# Exit codes
EXIT_SUCCESS = 0
EXIT_CONFIG_ERROR = 1
EXIT_REQUEST_ERROR = 2
EXIT_EXTRACTION_ERROR = 3


def _setup_logging(verbose: bool = False) -> None:
    """Configure logging for the application.

    Args:
        verbose: If True, set log level to DEBUG. Otherwise INFO.
    """
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def run(
    source: str,
    query: str,
    start_date: str,
    end_date: str,
    daily: bool = False,
    output: str | None = None,
    verbose: bool = False,
    print_json: bool = False,
    settings: Settings | None = None,
    registry: SourceRegistry | None = None,
    store: ArticleStore | None = None,
) -> int:
    """Run one scrape request end to end.

    In daily mode articles are saved after each successful day; otherwise
    the whole batch is saved once extraction finishes.

    Args:
        source: Source identifier (e.g., "detik")
        query: Search text
        start_date: First day, YYYY-MM-DD
        end_date: Last day, YYYY-MM-DD
        daily: Split the range into one window per day
        output: CSV path overriding settings.output_path
        verbose: Enable debug logging
        print_json: Print the response body as JSON on stdout
        settings: Pre-built settings; loaded from the environment if None
        registry: Pre-built registry, left open for the caller; built
                  from settings and closed on return if None
        store: Persistence collaborator; a CsvArticleStore if None

    Returns:
        Exit code:
        - 0: Success, including zero articles found
        - 1: Configuration error
        - 2: Invalid request
        - 3: Extraction or persistence failure
    """
    _setup_logging(verbose)
    logger = logging.getLogger(__name__)
    run_timestamp = datetime.now()

    if settings is None:
        try:
            settings = load_settings(validate=True)
        except ConfigurationError as e:
            logger.error(f"Configuration error: {e}")
            return EXIT_CONFIG_ERROR

    owns_registry = registry is None
    if owns_registry:
        registry = build_registry(settings)
    try:
        return _run_request(
            logger, settings, registry, store, run_timestamp,
            {"source": source, "query": query, "start_date": start_date, "end_date": end_date},
            daily, output, print_json,
        )
    finally:
        # Caller-supplied registries keep their renderers open
        if owns_registry:
            registry.close()


def _run_request(
    logger: logging.Logger,
    settings: Settings,
    registry: SourceRegistry,
    store: ArticleStore | None,
    run_timestamp: datetime,
    payload: dict[str, str],
    daily: bool,
    output: str | None,
    print_json: bool,
) -> int:
    try:
        search = parse_request(payload, registry)
    except RequestValidationError as e:
        logger.error(f"Invalid request: {e}")
        return EXIT_REQUEST_ERROR

    mode = WindowMode.DAILY if daily else WindowMode.SINGLE
    orchestrator = ExtractionOrchestrator.from_settings(registry, settings, mode)
    store = store or CsvArticleStore(output or settings.output_path)

    saved = 0
    duplicates = 0
    persist_errors: list[str] = []

    def persist_window(window: ExtractionWindow, articles: list[Article]) -> None:
        nonlocal saved, duplicates
        try:
            result = store.save(articles)
        except OSError as e:
            message = f"Failed to save articles for {window}: {e}"
            logger.error(message)
            persist_errors.append(message)
            return
        saved += result.inserted
        duplicates += result.duplicates

    try:
        result = orchestrator.run(
            ExtractionContext.background(),
            search,
            on_window=persist_window if daily else None,
        )
    except (InvalidRangeError, UnknownSourceError) as e:
        logger.error(f"Invalid request: {e}")
        return EXIT_REQUEST_ERROR

    log_stage_counts("extracted", len(result.articles))

    if not any(w.status == WINDOW_OK for w in result.windows):
        logger.error("Scraping failed: no window completed successfully")
        return EXIT_EXTRACTION_ERROR

    if not daily and result.articles:
        try:
            save_result = store.save(result.articles)
        except OSError as e:
            logger.error(f"Failed to save articles: {e}")
            return EXIT_EXTRACTION_ERROR
        saved = save_result.inserted
        duplicates = save_result.duplicates

    log_stage_counts("saved", saved)

    metrics = create_run_metrics(result, run_timestamp)
    metrics.saved_count = saved
    metrics.duplicate_count = duplicates
    metrics.errors.extend(persist_errors)
    try:
        write_run_log(metrics, settings.run_log_dir)
    except OSError as e:
        logger.error(f"Failed to write run log: {e}")

    if print_json:
        response = build_response(result.articles, saved if result.articles else None)
        print(json.dumps(response, ensure_ascii=False, indent=2))

    if not result.articles:
        logger.info(f"No articles found for query: {search.text}")
    else:
        logger.info(f"{len(result.articles)} articles found, {saved} saved")

    return EXIT_SUCCESS
