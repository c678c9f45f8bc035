"""CSV persistence for extracted articles.

Articles are appended to a single UTF-8 CSV file. The article URL acts as
the unique key: rows whose URL is already stored, or repeated within the
same batch, are skipped and counted rather than failing the batch.
"""

import csv
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Protocol, runtime_checkable

from newsscraper.engines.article import Article


logger = logging.getLogger(__name__)


# CSV column headers in output order
CSV_COLUMNS = [
    'source',
    'title',
    'url',
    'summary',
    'content',
    'date',
    'collected_at',
]


@dataclass
class SaveResult:
    """Result of saving a batch of articles.

    Attributes:
        inserted: Number of rows written
        duplicates: Number of articles skipped because their URL was known
    """
    inserted: int = 0
    duplicates: int = 0


@runtime_checkable
class ArticleStore(Protocol):
    """Protocol for persistence collaborators.

    Saving is best-effort for the whole batch: a duplicate article never
    prevents the rest from being stored.
    """

    def save(self, articles: list[Article]) -> SaveResult:
        ...


def format_article_for_csv(article: Article, collected_at: datetime) -> dict[str, str]:
    """Format an Article's fields for CSV output.

    Example:
        >>> row = format_article_for_csv(
        ...     Article(title="Judul", url="https://example.com/a", source="detik"),
        ...     datetime(2024, 1, 16, 10, 30),
        ... )
        >>> row['date'], row['collected_at']
        ('', '2024-01-16T10:30:00')
    """
    return {
        'source': article.source,
        'title': article.title,
        'url': article.url,
        'summary': article.summary,
        'content': article.content,
        'date': article.date.isoformat() if article.date is not None else '',
        'collected_at': collected_at.isoformat(),
    }


class CsvArticleStore:
    """Append articles to a CSV file, skipping URLs already stored.

    The header is written when the file is created. Known URLs are read
    from the existing file once and then tracked in memory.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._known_urls: set[str] | None = None

    def _load_known_urls(self) -> set[str]:
        if self._known_urls is None:
            self._known_urls = set()
            if self.path.exists():
                with open(self.path, newline='', encoding='utf-8') as csvfile:
                    for row in csv.DictReader(csvfile):
                        if row.get('url'):
                            self._known_urls.add(row['url'])
        return self._known_urls

    def save(self, articles: list[Article]) -> SaveResult:
        """Append `articles`, skipping duplicates.

        Raises:
            OSError: If the file cannot be created or written
        """
        result = SaveResult()
        if not articles:
            return result

        known = self._load_known_urls()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        write_header = not self.path.exists() or self.path.stat().st_size == 0
        collected_at = datetime.now()

        with open(self.path, 'a', newline='', encoding='utf-8') as csvfile:
            writer = csv.DictWriter(csvfile, fieldnames=CSV_COLUMNS)
            if write_header:
                writer.writeheader()

            for article in articles:
                if article.url in known:
                    result.duplicates += 1
                    continue
                writer.writerow(format_article_for_csv(article, collected_at))
                known.add(article.url)
                result.inserted += 1

        if result.duplicates:
            logger.info(f"Skipped {result.duplicates} duplicate articles")
        logger.info(f"Saved {result.inserted} articles to {self.path}")
        return result
