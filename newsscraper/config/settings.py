"""Configuration settings for the news scraper."""

from dataclasses import dataclass, field
from pathlib import Path
import os

from dotenv import load_dotenv


DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; NewsScraper/1.0)"

DEFAULT_BROWSER_EXECUTABLES: list[str] = [
    "brave",
    "brave-browser",
    "chromium-browser",
    "chromium",
]


class ConfigurationError(Exception):
    """Raised when configuration validation fails."""

    pass


@dataclass
class Settings:
    """Configuration settings for the news scraper.

    Built once at start-up and passed explicitly to the registry and the
    orchestrator.

    Attributes:
        request_timeout_seconds: Timeout for a single static HTTP request
        browser_timeout_seconds: Navigation/readiness timeout for rendered pages
        retry_attempts: Attempts per window before it is skipped
        retry_delay_seconds: Pause between attempts of the same window
        window_timeout_seconds: Time budget for one window, 0 for unbounded
        window_pause_seconds: Pause between consecutive daily windows
        user_agent: User-Agent header sent by both rendering strategies
        headless: Run the browser without a window
        browser_executables: Browser binaries searched on PATH, in order
        output_path: CSV file articles are appended to
        run_log_dir: Directory for JSON run logs
    """

    request_timeout_seconds: float = 15.0
    browser_timeout_seconds: float = 30.0
    retry_attempts: int = 2
    retry_delay_seconds: float = 3.0
    window_timeout_seconds: float = 120.0
    window_pause_seconds: float = 5.0
    user_agent: str = DEFAULT_USER_AGENT
    headless: bool = True
    browser_executables: list[str] = field(
        default_factory=lambda: DEFAULT_BROWSER_EXECUTABLES.copy()
    )
    output_path: str = "output/articles.csv"
    run_log_dir: str = "output"

    def validate(self) -> None:
        """Validate configuration values.

        Raises:
            ConfigurationError: If any configuration value is invalid.
        """
        errors: list[str] = []

        if self.request_timeout_seconds <= 0.0:
            errors.append("request_timeout_seconds must be positive")

        if self.browser_timeout_seconds <= 0.0:
            errors.append("browser_timeout_seconds must be positive")

        if self.retry_attempts < 1:
            errors.append("retry_attempts must be at least 1")

        if self.retry_delay_seconds < 0.0:
            errors.append("retry_delay_seconds must be non-negative")

        if self.window_timeout_seconds < 0.0:
            errors.append("window_timeout_seconds must be non-negative")

        if self.window_pause_seconds < 0.0:
            errors.append("window_pause_seconds must be non-negative")

        if not self.user_agent.strip():
            errors.append("user_agent must not be empty")

        if not self.output_path.strip():
            errors.append("output_path must not be empty")

        if errors:
            raise ConfigurationError("; ".join(errors))

    @property
    def window_timeout(self) -> float | None:
        """Per-window time budget, or None when unbounded."""
        return self.window_timeout_seconds or None


def _parse_float(value: str | None, default: float) -> float:
    """Parse a string to float, returning default if None or invalid."""
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _parse_int(value: str | None, default: int) -> int:
    """Parse a string to int, returning default if None or invalid."""
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _parse_bool(value: str | None, default: bool) -> bool:
    """Parse a string to bool, returning default if None or unrecognized."""
    if value is None:
        return default
    lowered = value.strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    return default


def _parse_list(value: str | None, default: list[str]) -> list[str]:
    """Parse a comma-separated string, returning default if None or empty."""
    if value is None:
        return default.copy()
    items = [item.strip() for item in value.split(",") if item.strip()]
    return items or default.copy()


def load_settings(env_path: str | Path | None = None, validate: bool = True) -> Settings:
    """Load settings from environment variables and .env file.

    Args:
        env_path: Optional path to .env file. If None, searches for .env
                  in current directory and parent directories.
        validate: If True, validate settings after loading.

    Returns:
        Settings instance with loaded configuration.

    Raises:
        ConfigurationError: If validate=True and configuration is invalid.
    """
    if env_path:
        load_dotenv(env_path)
    else:
        load_dotenv()

    settings = Settings(
        request_timeout_seconds=_parse_float(
            os.getenv("REQUEST_TIMEOUT_SECONDS"), 15.0
        ),
        browser_timeout_seconds=_parse_float(
            os.getenv("BROWSER_TIMEOUT_SECONDS"), 30.0
        ),
        retry_attempts=_parse_int(
            os.getenv("RETRY_ATTEMPTS"), 2
        ),
        retry_delay_seconds=_parse_float(
            os.getenv("RETRY_DELAY_SECONDS"), 3.0
        ),
        window_timeout_seconds=_parse_float(
            os.getenv("WINDOW_TIMEOUT_SECONDS"), 120.0
        ),
        window_pause_seconds=_parse_float(
            os.getenv("WINDOW_PAUSE_SECONDS"), 5.0
        ),
        user_agent=os.getenv("SCRAPER_USER_AGENT", DEFAULT_USER_AGENT),
        headless=_parse_bool(os.getenv("BROWSER_HEADLESS"), True),
        browser_executables=_parse_list(
            os.getenv("BROWSER_EXECUTABLES"), DEFAULT_BROWSER_EXECUTABLES
        ),
        output_path=os.getenv("OUTPUT_PATH", "output/articles.csv"),
        run_log_dir=os.getenv("RUN_LOG_DIR", "output"),
    )

    if validate:
        settings.validate()

    return settings
