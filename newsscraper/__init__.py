"""News scraper - multi-source news article extraction."""

__version__ = "0.1.0"
