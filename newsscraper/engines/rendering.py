"""Rendering strategies: direct HTTP fetch or headless-browser render."""

import logging
import shutil
import socket
import threading
from typing import Protocol, runtime_checkable

import requests
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

from newsscraper.config.settings import DEFAULT_BROWSER_EXECUTABLES, DEFAULT_USER_AGENT
from newsscraper.engines.context import ExtractionContext
from newsscraper.engines.errors import FetchError


logger = logging.getLogger(__name__)

STREAM_CHUNK_SIZE = 16 * 1024
CANCEL_POLL_SECONDS = 0.05


@runtime_checkable
class RenderingStrategy(Protocol):
    """Protocol for turning a URL into final page markup."""

    def fetch(
        self,
        url: str,
        context: ExtractionContext,
        ready_selector: str | None = None,
    ) -> str:
        """Return the page markup for `url`.

        Raises:
            FetchError: On transport failure, timeout or non-2xx status
            ExtractionCancelled: If the context is cancelled before or
                during the fetch
        """
        ...

    def close(self) -> None:
        ...


def find_first_executable(*executables: str) -> str | None:
    """Return the path of the first executable found on PATH, or None."""
    for executable in executables:
        path = shutil.which(executable)
        if path:
            return path
    return None


class StaticRendering:
    """Fetch server-rendered markup with a plain HTTP GET.

    The underlying requests.Session is reused across calls for
    connection pooling. `ready_selector` is ignored.

    The body is streamed so the context is observed while it downloads:
    the deadline is checked between chunks, and a cancelled context shuts
    the connection down even while a read is blocked.
    """

    def __init__(
        self,
        timeout: float = 15.0,
        user_agent: str = DEFAULT_USER_AGENT,
        session: requests.Session | None = None,
    ):
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "User-Agent": user_agent,
            "Accept": "text/html,application/xhtml+xml",
        })

    def fetch(
        self,
        url: str,
        context: ExtractionContext,
        ready_selector: str | None = None,
    ) -> str:
        timeout = context.timeout_for(self.timeout)
        try:
            response = self.session.get(url, timeout=timeout, stream=True)
        except requests.RequestException as e:
            context.check()
            raise FetchError(url, cause=e) from e

        done = threading.Event()
        watcher = threading.Thread(
            target=_shutdown_on_cancel,
            args=(response, context, done),
            daemon=True,
        )
        watcher.start()
        try:
            if not 200 <= response.status_code < 300:
                raise FetchError(url, status=response.status_code)

            body = bytearray()
            for chunk in response.iter_content(chunk_size=STREAM_CHUNK_SIZE):
                context.check()
                body.extend(chunk)
            # A shut-down socket can end the stream early without an error
            context.check()
        except requests.RequestException as e:
            context.check()
            raise FetchError(url, cause=e) from e
        finally:
            done.set()
            response.close()

        return _decode_body(bytes(body), response.encoding)

    def close(self) -> None:
        self.session.close()


def _decode_body(body: bytes, encoding: str | None) -> str:
    try:
        return body.decode(encoding or "utf-8", errors="replace")
    except LookupError:
        return body.decode("utf-8", errors="replace")


def _shutdown_on_cancel(
    response: requests.Response,
    context: ExtractionContext,
    done: threading.Event,
) -> None:
    """Shut the response's socket down once `context` is cancelled."""
    while not done.wait(CANCEL_POLL_SECONDS):
        if context.cancelled:
            connection = getattr(response.raw, "connection", None)
            sock = getattr(connection, "sock", None)
            if sock is None:
                return
            try:
                sock.shutdown(socket.SHUT_RDWR)
            except OSError as e:
                logger.debug(f"Socket already closed on cancellation: {e}")
            return


class BrowserRendering:
    """Render pages in headless Chromium through Playwright.

    The browser is launched lazily on first use and kept for the
    lifetime of the strategy. A locally installed Chromium-family browser
    is preferred; Playwright's bundled build is used otherwise.

    Attributes:
        timeout: Default navigation and readiness timeout in seconds
        executables: Executable names searched on PATH
    """

    def __init__(
        self,
        timeout: float = 30.0,
        user_agent: str = DEFAULT_USER_AGENT,
        headless: bool = True,
        executables: tuple[str, ...] = tuple(DEFAULT_BROWSER_EXECUTABLES),
    ):
        self.timeout = timeout
        self.user_agent = user_agent
        self.headless = headless
        self.executables = tuple(executables)
        self._playwright = None
        self._browser = None

    def _ensure_browser(self):
        if self._browser is None:
            executable_path = find_first_executable(*self.executables)
            if executable_path:
                logger.info(f"Using browser executable {executable_path}")
            self._playwright = sync_playwright().start()
            self._browser = self._playwright.chromium.launch(
                headless=self.headless,
                executable_path=executable_path,
            )
        return self._browser

    def fetch(
        self,
        url: str,
        context: ExtractionContext,
        ready_selector: str | None = None,
    ) -> str:
        timeout_ms = context.timeout_for(self.timeout) * 1000
        try:
            browser = self._ensure_browser()
            page = browser.new_page(user_agent=self.user_agent)
        except PlaywrightError as e:
            raise FetchError(url, cause=e) from e

        try:
            page.goto(url, timeout=timeout_ms, wait_until="domcontentloaded")
            if ready_selector:
                context.check()
                page.wait_for_selector(
                    ready_selector,
                    state="visible",
                    timeout=context.timeout_for(self.timeout) * 1000,
                )
            return page.content()
        except PlaywrightError as e:
            context.check()
            raise FetchError(url, cause=e) from e
        finally:
            _close_page(page, url)

    def close(self) -> None:
        if self._browser is not None:
            self._browser.close()
            self._browser = None
        if self._playwright is not None:
            self._playwright.stop()
            self._playwright = None


def _close_page(page, url: str) -> None:
    """Close a browser page; a dead browser must not mask the fetch outcome."""
    try:
        page.close()
    except PlaywrightError as e:
        logger.warning(f"Failed to close page for {url}: {e}")
