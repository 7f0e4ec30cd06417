from __future__ import annotations

import httpx
import pytest

from insight_dashboard.config import ApiConfig
from insight_dashboard.errors import RecordsApiError
from insight_dashboard.io.api import InsightApiClient, InsightFilters


def _client(handler) -> InsightApiClient:
    return InsightApiClient("http://testserver/api", transport=httpx.MockTransport(handler))


def test_filters_drop_blank_values() -> None:
    filters = InsightFilters(topic="oil", sector=" ", end_year="2027")

    assert filters.to_params() == {"end_year": "2027", "topic": "oil"}
    assert filters.active_count == 2
    assert InsightFilters().to_params() == {}


def test_fetch_records_sends_filters_and_parses_rows() -> None:
    seen: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        return httpx.Response(
            200, json={"data": [{"sector": "Energy", "intensity": 6}, {"topic": "oil"}]}
        )

    with _client(handler) as client:
        records = client.fetch_records(InsightFilters(country="India", pestle=""))

    assert seen == {"path": "/api/data", "params": {"country": "India"}}
    assert len(records) == 2
    assert records.records[0].intensity == 6.0


def test_fetch_filter_options_and_stats() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/filters":
            payload = {"filters": {"topic": ["gas", "oil"], "end_year": [2027]}}
            return httpx.Response(200, json=payload)
        return httpx.Response(200, json={"stats": {"total_records": 2}})

    with _client(handler) as client:
        options = client.fetch_filter_options()
        stats = client.fetch_stats()

    assert options == {"topic": ["gas", "oil"], "end_year": ["2027"]}
    assert stats == {"total_records": 2}


def test_http_errors_raise_records_api_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"error": "boom"})

    with _client(handler) as client, pytest.raises(RecordsApiError, match="500"):
        client.fetch_records()


def test_transport_failures_raise_records_api_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with _client(handler) as client, pytest.raises(RecordsApiError):
        client.fetch_stats()


def test_invalid_payloads_raise_records_api_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/data":
            return httpx.Response(200, json={"data": {"not": "a list"}})
        return httpx.Response(200, text="not json")

    with _client(handler) as client:
        with pytest.raises(RecordsApiError):
            client.fetch_records()
        with pytest.raises(RecordsApiError):
            client.fetch_filter_options()


def test_from_config_uses_base_url() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert str(request.url) == "http://backend:5000/api/stats"
        return httpx.Response(200, json={"stats": {}})

    config = ApiConfig(base_url="http://backend:5000/api/")
    with InsightApiClient.from_config(config, transport=httpx.MockTransport(handler)) as client:
        assert client.fetch_stats() == {}
