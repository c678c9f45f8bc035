"""Exception taxonomy for article extraction.

Only listing-phase failures (FetchError, ParseError) are fatal to a single
extractor call and eligible for retry. Content-phase problems are absorbed
per candidate; pre-flight problems (InvalidRangeError, UnknownSourceError)
fail the whole operation before any I/O happens.
"""


class ScraperError(Exception):
    """Base class for all extraction errors."""

    pass


class InvalidRangeError(ScraperError):
    """Raised when a date range ends before it starts."""

    def __init__(self, start, end):
        self.start = start
        self.end = end
        super().__init__(
            f"invalid date range: 'to' date {end} is before 'from' date {start}"
        )


class UnknownSourceError(ScraperError):
    """Raised when a source identifier is not registered."""

    def __init__(self, name: str, known: list[str] | None = None):
        self.name = name
        self.known = sorted(known or [])
        message = f"unknown source '{name}'"
        if self.known:
            message += f"; must be one of: {', '.join(self.known)}"
        super().__init__(message)


class FetchError(ScraperError):
    """Raised when a page cannot be fetched.

    Attributes:
        url: URL that was being fetched
        status: HTTP status code for non-success responses, if any
        cause: Underlying transport exception, if any
    """

    def __init__(
        self,
        url: str,
        status: int | None = None,
        cause: BaseException | None = None,
    ):
        self.url = url
        self.status = status
        self.cause = cause
        if status is not None:
            detail = f"status {status}"
        elif cause is not None:
            detail = str(cause)
        else:
            detail = "unknown error"
        super().__init__(f"failed to fetch {url}: {detail}")


class ParseError(ScraperError):
    """Raised when listing markup does not match any known structure."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"failed to parse listing: {reason}")


class ContentFetchWarning(ScraperError):
    """A single candidate's content could not be retrieved.

    Raised inside the content phase and caught there; it never escapes
    an extractor call.
    """

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"content unavailable for {url}: {reason}")


class ArticleExcluded(ScraperError):
    """A listing entry lacks a title or URL and is dropped silently."""

    pass


class ExtractionCancelled(ScraperError):
    """Raised when the caller's deadline passes or the context is cancelled."""

    pass
