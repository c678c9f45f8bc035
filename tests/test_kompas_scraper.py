"""Unit tests for kompas.com scraper parsing."""

from datetime import date
from unittest.mock import MagicMock

from newsscraper.engines.context import ExtractionContext
from newsscraper.engines.kompas_scraper import KOMPAS_PROFILE, KompasScraper


# Markup as rendered by the embedded search widget
SAMPLE_LISTING = """<html>
<body>
  <div class="gsc-results">
    <div class="gsc-webResult gsc-result">
      <a class="gs-title" href="https://nasional.kompas.com/read/2015/01/01/banjir-jakarta">Banjir <b>Jakarta</b> Meluas</a>
      <div class="gs-bidi-start-align gs-snippet">Banjir melanda sejumlah wilayah.</div>
    </div>
    <div class="gsc-webResult gsc-result">
      <a class="gs-title" href="https://video.kompas.com/watch/123/banjir">Video Banjir</a>
      <div class="gs-bidi-start-align gs-snippet">Rekaman banjir.</div>
    </div>
    <div class="gsc-webResult gsc-result">
      <a class="gs-title" href="https://foto.kompas.com/photo/read/2015/01/01/banjir">Foto Banjir</a>
    </div>
    <div class="gsc-webResult gsc-result">
      <a class="gs-title">Tanpa Tautan</a>
    </div>
  </div>
</body>
</html>
"""

SAMPLE_ARTICLE = """<html>
<body>
  <div class="read__content">
    <div class="clearfix">
      <p><strong>JAKARTA, KOMPAS.com</strong> - Banjir meluas ke lima kecamatan.</p>
      <p><strong>Baca juga:</strong> <a href="/x">Posko pengungsian dibuka</a></p>
      <p>Warga diminta waspada.</p>
      <p><strong>Baca juga :</strong> <a href="/y">Ketinggian air naik</a></p>
    </div>
  </div>
</body>
</html>
"""


def make_renderer() -> MagicMock:
    renderer = MagicMock()

    def fetch(url, context, ready_selector=None):
        if url.startswith(KOMPAS_PROFILE.search_url):
            return SAMPLE_LISTING
        return SAMPLE_ARTICLE

    renderer.fetch.side_effect = fetch
    return renderer


class TestKompasScraper:
    """Unit tests for kompas listing, media exclusion and content parsing."""

    def test_parse_listing(self):
        scraper = KompasScraper(make_renderer())

        articles = scraper.parse_listing(SAMPLE_LISTING)

        assert len(articles) == 3
        assert articles[0].title == "Banjir Jakarta Meluas"
        assert articles[0].url == "https://nasional.kompas.com/read/2015/01/01/banjir-jakarta"
        assert articles[0].summary == "Banjir melanda sejumlah wilayah."

    def test_search_url_uses_kompas_parameters(self):
        scraper = KompasScraper(make_renderer())

        url = scraper.build_search_url("banjir", date(2015, 1, 1), date(2015, 1, 2))

        assert url.startswith("https://search.kompas.com/search?")
        assert "q=banjir" in url
        assert "site_id=all" in url
        assert "start_date=2015-01-01" in url
        assert "end_date=2015-01-02" in url

    def test_rendered_fetches_wait_for_ready_selectors(self):
        renderer = make_renderer()
        scraper = KompasScraper(renderer)

        scraper.search(ExtractionContext(), "banjir", date(2015, 1, 1), date(2015, 1, 1))

        ready_selectors = [call.args[2] for call in renderer.fetch.call_args_list]
        assert ready_selectors[0] == "div.gsc-webResult"
        assert all(selector == "div.read__content" for selector in ready_selectors[1:])

    def test_media_pages_kept_without_content(self):
        renderer = make_renderer()
        scraper = KompasScraper(renderer)

        articles = scraper.search(ExtractionContext(), "banjir", date(2015, 1, 1), date(2015, 1, 1))

        assert len(articles) == 3
        assert articles[0].content
        assert articles[1].content == ""
        assert articles[2].content == ""
        fetched = [call.args[0] for call in renderer.fetch.call_args_list]
        assert "https://video.kompas.com/watch/123/banjir" not in fetched
        assert "https://foto.kompas.com/photo/read/2015/01/01/banjir" not in fetched

    def test_related_link_paragraphs_removed(self):
        scraper = KompasScraper(make_renderer())

        content = scraper.fetch_content(
            "https://nasional.kompas.com/read/2015/01/01/banjir-jakarta", ExtractionContext()
        )

        assert content == (
            "JAKARTA, KOMPAS.com - Banjir meluas ke lima kecamatan.\n"
            "Warga diminta waspada."
        )

    def test_profile_has_politeness_delay(self):
        assert KOMPAS_PROFILE.politeness_delay == 0.3
