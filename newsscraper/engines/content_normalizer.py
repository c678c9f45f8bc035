"""Selector-fallback extraction of article body text."""

import copy
import logging
from dataclasses import dataclass

from bs4 import BeautifulSoup, Tag

from newsscraper.engines.article import normalize_text


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExtractionRule:
    """One structural rule in a selector-fallback chain.

    Attributes:
        selector: CSS selector locating the body container(s)
        paragraphs: Optional CSS selector for paragraph blocks inside the
                    container. When set, each block's text is taken
                    separately; otherwise the container's text is used.
        exclude_markers: Paragraph blocks containing any of these markers
                         (case-insensitive) are dropped, e.g. "Baca juga"
        exclude_selectors: Elements removed from the container before any
                           text is taken, e.g. scripts or ad slots
    """
    selector: str
    paragraphs: str | None = None
    exclude_markers: tuple[str, ...] = ()
    exclude_selectors: tuple[str, ...] = ()

    def extract(self, soup: BeautifulSoup | Tag) -> str:
        """Return the newline-joined text this rule yields, possibly empty."""
        blocks: list[str] = []
        for container in soup.select(self.selector):
            # Work on a copy so exclusions never leak into later rules
            container = copy.copy(container)
            for excluded_selector in self.exclude_selectors:
                for element in container.select(excluded_selector):
                    element.decompose()

            if self.paragraphs:
                for paragraph in container.select(self.paragraphs):
                    text = normalize_text(paragraph.get_text(" "))
                    if text and not self._is_excluded(text):
                        blocks.append(text)
            else:
                blocks.extend(
                    line for line in _stripped_lines(container.get_text())
                    if not self._is_excluded(line)
                )

        return "\n".join(blocks).strip()

    def _is_excluded(self, text: str) -> bool:
        lowered = text.lower()
        return any(marker.lower() in lowered for marker in self.exclude_markers)


def _stripped_lines(text: str) -> list[str]:
    return [line.strip() for line in text.splitlines() if line.strip()]


class ContentNormalizer:
    """Apply an ordered chain of ExtractionRules to article markup.

    The first rule producing non-empty text wins. An empty result means
    no rule matched anything useful.

    Example:
        >>> normalizer = ContentNormalizer([
        ...     ExtractionRule("div.body-text"),
        ...     ExtractionRule("div.body"),
        ... ])
        >>> normalizer.normalize('<div class="body"> Hello </div>')
        'Hello'
    """

    def __init__(self, rules: list[ExtractionRule] | tuple[ExtractionRule, ...]):
        if not rules:
            raise ValueError("ContentNormalizer needs at least one rule")
        self.rules = tuple(rules)

    def normalize(self, markup: str | BeautifulSoup) -> str:
        """Return normalized body text for `markup`, or "" if no rule matched."""
        if isinstance(markup, BeautifulSoup):
            soup = markup
        else:
            soup = BeautifulSoup(markup or "", "lxml")

        for index, rule in enumerate(self.rules):
            text = rule.extract(soup)
            if text:
                if index > 0:
                    logger.debug(f"Content matched fallback rule '{rule.selector}'")
                return text

        return ""
