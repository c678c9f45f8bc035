"""Observability and run metrics for extraction runs.

This module provides data structures and functions for tracking run
metrics, logging stage counts, and writing JSON run logs.
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from newsscraper.agent.workflow import ExtractionResult


logger = logging.getLogger(__name__)


@dataclass
class RunMetrics:
    """Metrics collected during an extraction run.

    Attributes:
        source: Source identifier queried
        query: Search text
        window_count: Number of windows processed
        article_count_by_window: Articles found per window, keyed by window label
        failed_windows: Labels of windows that exhausted their retries
        cancelled_windows: Labels of windows cut short by cancellation
        article_count: Total articles aggregated
        missing_content_count: Articles kept with empty content
        saved_count: Articles written by the persistence collaborator
        duplicate_count: Articles skipped as already stored
        errors: Error messages encountered during the run
        run_timestamp: Timestamp when the run started
    """
    source: str = ""
    query: str = ""
    window_count: int = 0
    article_count_by_window: dict[str, int] = field(default_factory=dict)
    failed_windows: list[str] = field(default_factory=list)
    cancelled_windows: list[str] = field(default_factory=list)
    article_count: int = 0
    missing_content_count: int = 0
    saved_count: int = 0
    duplicate_count: int = 0
    errors: list[str] = field(default_factory=list)
    run_timestamp: datetime = field(default_factory=datetime.now)


def create_run_metrics(
    result: "ExtractionResult",
    run_timestamp: datetime | None = None,
) -> RunMetrics:
    """Build RunMetrics from an ExtractionResult.

    Window reports supply the per-window counts and failure lists;
    persistence counts are filled in later by the caller.

    Args:
        result: ExtractionResult returned by the orchestrator
        run_timestamp: When the run started (defaults to now)

    Returns:
        RunMetrics instance for the run
    """
    metrics = RunMetrics(
        source=result.query.source,
        query=result.query.text,
        window_count=len(result.windows),
        article_count=len(result.articles),
        missing_content_count=result.missing_content_count,
        run_timestamp=run_timestamp or datetime.now(),
    )
    for report in result.windows:
        metrics.article_count_by_window[str(report.window)] = report.article_count
    for report in result.failed_windows:
        label = str(report.window)
        metrics.failed_windows.append(label)
        metrics.errors.append(f"window {label} failed: {report.error}")
    metrics.cancelled_windows.extend(str(report.window) for report in result.cancelled_windows)
    return metrics


def write_run_log(metrics: RunMetrics, output_dir: str = "output") -> str:
    """Write run metrics to a JSON log file.

    Creates run_log_YYYYMMDD_HHMMSS.json in `output_dir`.

    Returns:
        The filepath of the written JSON file

    Raises:
        OSError: If the output directory cannot be created or file cannot be written
    """
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    timestamp = metrics.run_timestamp.strftime('%Y%m%d_%H%M%S')
    filepath = output_path / f"run_log_{timestamp}.json"

    with open(filepath, 'w', encoding='utf-8') as f:
        json.dump(_metrics_to_dict(metrics), f, indent=2, ensure_ascii=False)

    logger.info(f"Run log written to {filepath}")
    return str(filepath)


def _metrics_to_dict(metrics: RunMetrics) -> dict[str, Any]:
    """Convert RunMetrics to a JSON-serializable dictionary."""
    return {
        "source": metrics.source,
        "query": metrics.query,
        "window_count": metrics.window_count,
        "article_count_by_window": metrics.article_count_by_window,
        "failed_windows": metrics.failed_windows,
        "cancelled_windows": metrics.cancelled_windows,
        "article_count": metrics.article_count,
        "missing_content_count": metrics.missing_content_count,
        "saved_count": metrics.saved_count,
        "duplicate_count": metrics.duplicate_count,
        "errors": metrics.errors,
        "run_timestamp": metrics.run_timestamp.isoformat(),
    }


def log_stage_counts(stage: str, count: int) -> None:
    """Log the article count for a run stage.

    Example:
        >>> log_stage_counts("extracted", 45)
        # Logs: "Stage 'extracted': 45 articles"
    """
    logger.info(f"Stage '{stage}': {count} articles")
