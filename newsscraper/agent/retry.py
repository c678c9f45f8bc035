"""Bounded retry around a single extraction call."""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    stop_any,
    wait_fixed,
)

from newsscraper.engines.article import Article
from newsscraper.engines.context import ExtractionContext
from newsscraper.engines.errors import ExtractionCancelled, FetchError, ParseError


logger = logging.getLogger(__name__)

# Listing-phase failures; everything else is either absorbed or fatal
RETRYABLE_ERRORS = (FetchError, ParseError)


@dataclass
class RetryOutcome:
    """Result of running one extraction call under a RetryPolicy.

    Attributes:
        articles: Articles returned by the successful attempt, else empty
        attempts: Number of attempts made
        error: Last error when every attempt failed or the call was cancelled
        cancelled: True if the context was cancelled before success
    """
    articles: list[Article]
    attempts: int
    error: Exception | None = None
    cancelled: bool = False

    @property
    def succeeded(self) -> bool:
        return self.error is None and not self.cancelled


class RetryPolicy:
    """Retry an extraction call a fixed number of times with a fixed delay.

    Only FetchError and ParseError are retried. Cancellation stops the
    loop at once. Exhaustion is reported through the returned outcome,
    never raised.

    Attributes:
        attempts: Maximum number of attempts, including the first
        delay: Seconds waited between attempts
    """

    def __init__(
        self,
        attempts: int = 2,
        delay: float = 3.0,
        sleep: Callable[[float], None] | None = None,
    ):
        if attempts < 1:
            raise ValueError("attempts must be at least 1")
        self.attempts = attempts
        self.delay = delay
        self._sleep = sleep

    def run(
        self,
        func: Callable[[], list[Article]],
        context: ExtractionContext,
        label: str = "extraction",
    ) -> RetryOutcome:
        """Call `func` until it succeeds, attempts run out or `context` ends.

        Args:
            func: Zero-argument callable performing one extraction attempt
            context: Cancellation signal for this unit of work
            label: Description used in log messages

        Returns:
            RetryOutcome describing the successful result or the failure
        """
        def log_retry(retry_state: RetryCallState) -> None:
            error = retry_state.outcome.exception()
            logger.warning(
                f"{label}: attempt {retry_state.attempt_number} failed ({error}), "
                f"retrying in {self.delay:g}s"
            )

        retryer = Retrying(
            stop=stop_any(
                stop_after_attempt(self.attempts),
                lambda retry_state: context.cancelled,
            ),
            wait=wait_fixed(self.delay),
            retry=retry_if_exception_type(RETRYABLE_ERRORS),
            sleep=self._sleep or context.sleep,
            before_sleep=log_retry,
            reraise=True,
        )

        attempts = 0
        try:
            for attempt in retryer:
                with attempt:
                    attempts = attempt.retry_state.attempt_number
                    context.check()
                    articles = func()
        except ExtractionCancelled as e:
            return RetryOutcome([], attempts, error=e, cancelled=True)
        except RETRYABLE_ERRORS as e:
            if context.cancelled:
                return RetryOutcome([], attempts, error=e, cancelled=True)
            return RetryOutcome([], attempts, error=e)

        return RetryOutcome(articles, attempts)
