"""Property-based tests for the content normalizer.

Tests the selector-fallback chain: rule order, exclusion markers and
whitespace handling.
"""

import pytest
from hypothesis import given, settings, strategies as st

from newsscraper.engines.content_normalizer import ContentNormalizer, ExtractionRule


# Plain words without markup-significant characters
word_strategy = st.text(
    alphabet=st.characters(whitelist_categories=('L', 'N'), max_codepoint=0x24F),
    min_size=1,
    max_size=12,
)

paragraph_strategy = st.lists(word_strategy, min_size=1, max_size=8).map(" ".join)


class TestSelectorFallback:
    """Tests for rule ordering in the fallback chain."""

    def test_primary_rule_wins_when_non_empty(self):
        """The first rule yielding text SHALL win."""
        markup = """
        <div class="detail__body-text">Primary body</div>
        <div class="detail__body">Secondary body</div>
        """
        normalizer = ContentNormalizer([
            ExtractionRule("div.detail__body-text"),
            ExtractionRule("div.detail__body"),
        ])

        assert normalizer.normalize(markup) == "Primary body"

    def test_falls_back_when_primary_is_empty(self):
        """An empty primary match SHALL fall through to the secondary rule."""
        markup = """
        <div class="detail__body-text">   </div>
        <div class="detail__body">
            Secondary body text
        </div>
        """
        normalizer = ContentNormalizer([
            ExtractionRule("div.detail__body-text"),
            ExtractionRule("div.detail__body"),
        ])

        assert normalizer.normalize(markup) == "Secondary body text"

    def test_falls_back_when_primary_is_missing(self):
        """A primary selector matching nothing SHALL fall through."""
        markup = '<div class="detail__body"><p>Only body</p></div>'
        normalizer = ContentNormalizer([
            ExtractionRule("div.detail__body-text"),
            ExtractionRule("div.detail__body"),
        ])

        assert normalizer.normalize(markup) == "Only body"

    def test_all_rules_empty_returns_empty_string(self):
        """When every rule yields nothing, normalized content SHALL be empty."""
        normalizer = ContentNormalizer([
            ExtractionRule("div.a"),
            ExtractionRule("div.b"),
        ])

        assert normalizer.normalize("<html><body><p>Unrelated</p></body></html>") == ""

    def test_empty_markup_returns_empty_string(self):
        normalizer = ContentNormalizer([ExtractionRule("div.a")])

        assert normalizer.normalize("") == ""

    def test_requires_at_least_one_rule(self):
        with pytest.raises(ValueError):
            ContentNormalizer([])

    @given(primary=paragraph_strategy, secondary=paragraph_strategy)
    @settings(max_examples=100)
    def test_secondary_text_returned_trimmed(self, primary: str, secondary: str):
        """For any secondary text, an empty primary SHALL yield the secondary trimmed."""
        markup = (
            f'<div class="primary"></div>'
            f'<div class="secondary">\n   {secondary}   \n</div>'
        )
        normalizer = ContentNormalizer([
            ExtractionRule("div.primary"),
            ExtractionRule("div.secondary"),
        ])

        assert normalizer.normalize(markup) == secondary.strip()


class TestParagraphExtraction:
    """Tests for paragraph-mode rules and exclusion markers."""

    @given(paragraphs=st.lists(paragraph_strategy, min_size=1, max_size=6))
    @settings(max_examples=100)
    def test_paragraphs_joined_in_document_order(self, paragraphs: list[str]):
        """Paragraph blocks SHALL be newline-joined in document order."""
        body = "".join(f"<p>  {p}  </p>" for p in paragraphs)
        markup = f'<div class="read__content">{body}</div>'
        normalizer = ContentNormalizer([
            ExtractionRule("div.read__content", paragraphs="p"),
        ])

        assert normalizer.normalize(markup) == "\n".join(p.strip() for p in paragraphs)

    def test_marked_paragraphs_dropped(self):
        """Paragraphs containing an exclusion marker SHALL be dropped."""
        markup = """
        <div class="read__content">
            <p>First paragraph.</p>
            <p><strong>Baca juga:</strong> <a href="/x">Another story</a></p>
            <p>Second paragraph.</p>
        </div>
        """
        normalizer = ContentNormalizer([
            ExtractionRule("div.read__content", paragraphs="p", exclude_markers=("Baca juga:",)),
        ])

        assert normalizer.normalize(markup) == "First paragraph.\nSecond paragraph."

    def test_marker_matching_is_case_insensitive(self):
        markup = '<div class="c"><p>Keep</p><p>BACA JUGA: link</p></div>'
        normalizer = ContentNormalizer([
            ExtractionRule("div.c", paragraphs="p", exclude_markers=("baca juga",)),
        ])

        assert normalizer.normalize(markup) == "Keep"

    def test_only_marked_paragraphs_counts_as_empty(self):
        """A rule whose every paragraph is excluded SHALL fall through."""
        markup = """
        <div class="read__content"><p>Baca juga: something</p></div>
        <div class="fallback">Fallback text</div>
        """
        normalizer = ContentNormalizer([
            ExtractionRule("div.read__content", paragraphs="p", exclude_markers=("Baca juga",)),
            ExtractionRule("div.fallback"),
        ])

        assert normalizer.normalize(markup) == "Fallback text"

    def test_excluded_selectors_removed(self):
        """Elements matching exclude_selectors SHALL not contribute text."""
        markup = """
        <div class="detail__body-text">
            Body line
            <script>var tracking = 1;</script>
        </div>
        """
        normalizer = ContentNormalizer([
            ExtractionRule("div.detail__body-text", exclude_selectors=("script",)),
        ])

        assert normalizer.normalize(markup) == "Body line"

    def test_exclusions_do_not_leak_into_later_rules(self):
        """Removing elements for one rule SHALL not alter the markup seen by the next."""
        markup = '<div class="outer"><div class="ad"></div><p class="x">Kept text</p></div>'
        normalizer = ContentNormalizer([
            ExtractionRule("div.outer", exclude_selectors=("p",)),
            ExtractionRule("p.x"),
        ])

        assert normalizer.normalize(markup) == "Kept text"

    def test_blank_lines_collapsed_in_block_mode(self):
        markup = '<div class="b">\n\n  Line one  \n\n\n  Line two \n</div>'
        normalizer = ContentNormalizer([ExtractionRule("div.b")])

        assert normalizer.normalize(markup) == "Line one\nLine two"
