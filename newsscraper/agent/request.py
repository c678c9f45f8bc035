"""Validation of scrape requests and mapping of outcomes to responses.

A request is a mapping with the keys source, query, start_date and
end_date (YYYY-MM-DD). Checks run in a fixed order so callers always get
the same error for the same bad input: unknown source, then dates, then
query.
"""

from collections.abc import Mapping
from dataclasses import asdict
from datetime import date, datetime
from typing import Any

from newsscraper.engines.article import Article, SearchQuery
from newsscraper.engines.errors import InvalidRangeError, UnknownSourceError
from newsscraper.engines.registry import SourceRegistry


REQUEST_DATE_FORMAT = "%Y-%m-%d"

STATUS_OK = 200
STATUS_BAD_REQUEST = 400
STATUS_SERVER_ERROR = 500


class RequestValidationError(Exception):
    """Raised when a scrape request is malformed.

    Attributes:
        status: HTTP-style status code for the failure (always 400-class)
    """

    def __init__(self, message: str, status: int = STATUS_BAD_REQUEST):
        self.status = status
        super().__init__(message)


def _parse_request_date(value: Any, field_name: str) -> date:
    if not isinstance(value, str):
        raise RequestValidationError(f"Invalid {field_name} format. Use YYYY-MM-DD")
    try:
        return datetime.strptime(value.strip(), REQUEST_DATE_FORMAT).date()
    except ValueError:
        raise RequestValidationError(f"Invalid {field_name} format. Use YYYY-MM-DD") from None


def parse_request(payload: Mapping[str, Any], registry: SourceRegistry) -> SearchQuery:
    """Validate a request payload and build the SearchQuery it describes.

    The date range itself is not checked here; the orchestrator rejects
    reversed ranges before any network access.

    Raises:
        RequestValidationError: On unknown source, unparseable dates or
            empty query, checked in that order
    """
    source = payload.get("source")
    if not isinstance(source, str) or source not in registry:
        raise RequestValidationError(
            f"Invalid source. Must be one of: {', '.join(registry.names)}"
        )

    start = _parse_request_date(payload.get("start_date"), "start_date")
    end = _parse_request_date(payload.get("end_date"), "end_date")

    query = payload.get("query")
    if not isinstance(query, str) or not query.strip():
        raise RequestValidationError("Query is required")

    return SearchQuery(source=source, text=query.strip(), start=start, end=end)


def status_for_error(error: Exception) -> int:
    """Map an exception raised while serving a request to a status code."""
    if isinstance(error, RequestValidationError):
        return error.status
    if isinstance(error, (InvalidRangeError, UnknownSourceError)):
        return STATUS_BAD_REQUEST
    return STATUS_SERVER_ERROR


def _article_to_dict(article: Article) -> dict[str, Any]:
    data = asdict(article)
    data["date"] = article.date.isoformat() if article.date is not None else None
    return data


def build_response(articles: list[Article], saved: int | None = None) -> dict[str, Any]:
    """Build the JSON-serializable response body for a successful request.

    Example:
        >>> build_response([])["message"]
        'Scraping successful, 0 articles found.'
    """
    if not articles:
        message = "Scraping successful, 0 articles found."
    elif saved is None:
        message = f"Scraping successful, {len(articles)} articles found."
    else:
        message = f"Scraping successful, {saved} articles saved."

    return {
        "message": message,
        "count": len(articles),
        "saved": saved or 0,
        "articles": [_article_to_dict(a) for a in articles],
    }
