"""Property-based tests for request validation and responses."""

from datetime import date, datetime
from unittest.mock import MagicMock

import pytest
from hypothesis import given, settings, strategies as st

from newsscraper.agent.request import (
    STATUS_BAD_REQUEST,
    STATUS_SERVER_ERROR,
    RequestValidationError,
    build_response,
    parse_request,
    status_for_error,
)
from newsscraper.engines.article import Article
from newsscraper.engines.errors import FetchError, InvalidRangeError, UnknownSourceError
from newsscraper.engines.registry import SourceRegistry


REGISTRY = SourceRegistry({"detik": MagicMock(), "kompas": MagicMock(), "liputan6": MagicMock()})

VALID = {
    "source": "detik",
    "query": "ekonomi",
    "start_date": "2015-01-01",
    "end_date": "2015-01-30",
}


def with_fields(**overrides):
    payload = dict(VALID)
    payload.update(overrides)
    return payload


class TestParseRequest:
    """Tests for request validation order and results."""

    def test_valid_request(self):
        query = parse_request(with_fields(query="  ekonomi  "), REGISTRY)

        assert query.source == "detik"
        assert query.text == "ekonomi"
        assert query.start == date(2015, 1, 1)
        assert query.end == date(2015, 1, 30)

    def test_unknown_source_lists_known_sources(self):
        with pytest.raises(RequestValidationError, match="detik, kompas, liputan6") as exc_info:
            parse_request(with_fields(source="tempo"), REGISTRY)

        assert exc_info.value.status == STATUS_BAD_REQUEST

    def test_source_checked_before_dates_and_query(self):
        payload = with_fields(source="tempo", start_date="bad", query="")

        with pytest.raises(RequestValidationError, match="Invalid source"):
            parse_request(payload, REGISTRY)

    def test_dates_checked_before_query(self):
        with pytest.raises(RequestValidationError, match="start_date"):
            parse_request(with_fields(start_date="01/01/2015", query=""), REGISTRY)

    def test_bad_end_date(self):
        with pytest.raises(RequestValidationError, match="end_date"):
            parse_request(with_fields(end_date="2015-02-30"), REGISTRY)

    @pytest.mark.parametrize("query", ["", "   ", None])
    def test_empty_query_rejected(self, query):
        with pytest.raises(RequestValidationError, match="Query is required"):
            parse_request(with_fields(query=query), REGISTRY)

    def test_reversed_range_left_to_orchestrator(self):
        query = parse_request(with_fields(start_date="2015-01-02", end_date="2015-01-01"), REGISTRY)

        with pytest.raises(InvalidRangeError):
            query.validate()

    @given(start=st.dates(), end=st.dates())
    @settings(max_examples=100)
    def test_any_calendar_dates_accepted(self, start: date, end: date):
        payload = with_fields(
            start_date=start.isoformat(),
            end_date=end.isoformat(),
        )

        query = parse_request(payload, REGISTRY)

        assert (query.start, query.end) == (start, end)


class TestStatusForError:
    """Tests for error to status mapping."""

    def test_client_errors(self):
        assert status_for_error(RequestValidationError("bad")) == STATUS_BAD_REQUEST
        assert status_for_error(InvalidRangeError(date(2015, 1, 2), date(2015, 1, 1))) == STATUS_BAD_REQUEST
        assert status_for_error(UnknownSourceError("tempo")) == STATUS_BAD_REQUEST

    def test_other_errors_are_server_errors(self):
        assert status_for_error(FetchError("https://www.detik.com", status=500)) == STATUS_SERVER_ERROR
        assert status_for_error(OSError("disk full")) == STATUS_SERVER_ERROR


class TestBuildResponse:
    """Tests for response bodies."""

    def test_empty_result_is_success(self):
        response = build_response([])

        assert response["message"] == "Scraping successful, 0 articles found."
        assert response["count"] == 0
        assert response["articles"] == []

    def test_saved_count_in_message(self):
        articles = [
            Article(title="A", url="https://www.detik.com/a", date=datetime(2015, 1, 1, 10, 0)),
            Article(title="B", url="https://www.detik.com/b"),
        ]

        response = build_response(articles, saved=1)

        assert response["message"] == "Scraping successful, 1 articles saved."
        assert response["count"] == 2
        assert response["saved"] == 1
        assert response["articles"][0]["date"] == "2015-01-01T10:00:00"
        assert response["articles"][1]["date"] is None

    def test_found_count_without_persistence(self):
        response = build_response([Article(title="A", url="https://www.detik.com/a")])

        assert response["message"] == "Scraping successful, 1 articles found."
        assert response["saved"] == 0
