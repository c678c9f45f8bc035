"""Article data models and text/date normalization utilities."""

import logging
import re
import unicodedata
from dataclasses import dataclass
from datetime import date, datetime

from dateutil import parser as date_parser
from dateutil import tz
from dateutil.parser import ParserError

from newsscraper.engines.errors import InvalidRangeError


logger = logging.getLogger(__name__)


@dataclass
class Article:
    """A news article gathered from a source.

    Built in two stages: the listing phase fills title, url and summary,
    then the content phase fills content on the same instance. Content
    stays empty when the article page could not be read.

    Attributes:
        title: Headline as shown on the listing page
        url: Absolute article URL
        summary: Listing teaser, may be empty
        content: Article body text, newline-joined paragraphs, may be empty
        date: Publication timestamp when the listing exposes one
        source: Registry identifier of the source it came from
    """
    title: str
    url: str
    summary: str = ""
    content: str = ""
    date: datetime | None = None
    source: str = ""


@dataclass(frozen=True)
class ExtractionWindow:
    """A closed date sub-range processed as one retryable unit."""
    start: date
    end: date

    def __str__(self) -> str:
        if self.start == self.end:
            return self.start.isoformat()
        return f"{self.start.isoformat()}..{self.end.isoformat()}"


@dataclass(frozen=True)
class SearchQuery:
    """A search request against a single source.

    Attributes:
        source: Registry identifier of the source to query
        text: Free-text search terms
        start: First day of the range (inclusive)
        end: Last day of the range (inclusive)
    """
    source: str
    text: str
    start: date
    end: date

    def validate(self) -> None:
        """Raise InvalidRangeError if the range ends before it starts."""
        if self.end < self.start:
            raise InvalidRangeError(self.start, self.end)

    @property
    def window(self) -> ExtractionWindow:
        return ExtractionWindow(self.start, self.end)


def normalize_text(text: str | None) -> str:
    """Normalize text by trimming and collapsing whitespace.

    Unicode is normalized to NFC form. None becomes an empty string.

    Example:
        >>> normalize_text("  Hello   World  ")
        'Hello World'
    """
    if text is None:
        return ""

    normalized = unicodedata.normalize('NFC', text)
    normalized = re.sub(r'\s+', ' ', normalized)
    return normalized.strip()


class IndonesianParserInfo(date_parser.parserinfo):
    """dateutil vocabulary accepting both English and Indonesian names."""

    JUMP = date_parser.parserinfo.JUMP + ["pukul"]

    WEEKDAYS = [
        ("Mon", "Monday", "Senin"),
        ("Tue", "Tuesday", "Selasa"),
        ("Wed", "Wednesday", "Rabu"),
        ("Thu", "Thursday", "Kamis"),
        ("Fri", "Friday", "Jumat"),
        ("Sat", "Saturday", "Sabtu"),
        ("Sun", "Sunday", "Minggu"),
    ]

    MONTHS = [
        ("Jan", "January", "Januari"),
        ("Feb", "February", "Peb", "Februari", "Pebruari"),
        ("Mar", "March", "Maret"),
        ("Apr", "April"),
        ("May", "Mei"),
        ("Jun", "June", "Juni"),
        ("Jul", "July", "Juli"),
        ("Aug", "August", "Agu", "Agt", "Agustus"),
        ("Sep", "Sept", "September"),
        ("Oct", "October", "Okt", "Oktober"),
        ("Nov", "November", "Nop", "Nopember"),
        ("Dec", "December", "Des", "Desember"),
    ]


# Indonesian time zones printed after listing timestamps
INDONESIAN_TZINFOS = {
    "WIB": tz.tzoffset("WIB", 7 * 3600),
    "WITA": tz.tzoffset("WITA", 8 * 3600),
    "WIT": tz.tzoffset("WIT", 9 * 3600),
}

_PARSER_INFO = IndonesianParserInfo()

# "2 jam yang lalu", "5 menit lalu", "3 hours ago"
_RELATIVE_DATE = re.compile(r'\b(lalu|ago)\b', re.IGNORECASE)


def parse_date(date_str: str | None) -> datetime | None:
    """Parse a listing date string into a datetime object.

    Uses python-dateutil with Indonesian month and weekday names. Non-ISO
    strings are read day-first since the supported sources print dates
    as DD/MM/YYYY. WIB, WITA and WIT suffixes yield aware datetimes.
    Relative stamps ("2 jam yang lalu") and anything with unknown words
    return None instead of a guessed date.

    Example:
        >>> parse_date("2024-01-15T10:30:00Z")
        datetime.datetime(2024, 1, 15, 10, 30, tzinfo=tzutc())
        >>> parse_date("Jumat, 01 Mei 2015").date()
        datetime.date(2015, 5, 1)
        >>> parse_date("2 jam yang lalu") is None
        True
    """
    if date_str is None or not isinstance(date_str, str):
        return None

    date_str = date_str.strip()
    if not date_str:
        return None

    if _RELATIVE_DATE.search(date_str):
        logger.debug(f"Ignoring relative date '{date_str}'")
        return None

    # ISO strings are year-first and must not be read day-first
    dayfirst = re.match(r'\d{4}-', date_str) is None

    try:
        return date_parser.parse(
            date_str,
            parserinfo=_PARSER_INFO,
            dayfirst=dayfirst,
            tzinfos=INDONESIAN_TZINFOS,
        )
    except (ParserError, ValueError, OverflowError) as e:
        logger.debug(f"Failed to parse date '{date_str}': {e}")
        return None
