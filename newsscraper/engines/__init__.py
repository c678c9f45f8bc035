"""Engines module - extraction components."""

from newsscraper.engines.article import Article, ExtractionWindow, SearchQuery
from newsscraper.engines.context import ExtractionContext
from newsscraper.engines.errors import (
    ArticleExcluded,
    ContentFetchWarning,
    ExtractionCancelled,
    FetchError,
    InvalidRangeError,
    ParseError,
    ScraperError,
    UnknownSourceError,
)

__all__ = [
    # Data model
    "Article",
    "ExtractionWindow",
    "SearchQuery",
    "ExtractionContext",
    # Exceptions
    "ArticleExcluded",
    "ContentFetchWarning",
    "ExtractionCancelled",
    "FetchError",
    "InvalidRangeError",
    "ParseError",
    "ScraperError",
    "UnknownSourceError",
]
