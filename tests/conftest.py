"""Shared fixtures: chart API payloads and mocked provider transports."""

import json
from datetime import datetime, timezone

import httpx
import pytest

from perfchart.agents import SeriesFetcher


def month_ts(year, month, day=1, hour=0):
    """Epoch seconds for a UTC moment."""
    return int(datetime(year, month, day, hour, tzinfo=timezone.utc).timestamp())


def build_payload(timestamps, closes, gmtoffset=None, timezone_name=None):
    """Build a chart API payload with one result."""
    meta = {"symbol": "TEST", "dataGranularity": "1mo"}
    if gmtoffset is not None:
        meta["gmtoffset"] = gmtoffset
    if timezone_name is not None:
        meta["exchangeTimezoneName"] = timezone_name
    return {
        "chart": {
            "result": [{
                "meta": meta,
                "timestamp": timestamps,
                "indicators": {"quote": [{"close": closes}]},
            }],
            "error": None,
        }
    }


def ticker_from_request(request: httpx.Request) -> str:
    return request.url.path.rsplit("/", 1)[-1]


@pytest.fixture
def make_fetcher():
    """Return a factory building a SeriesFetcher over a mocked transport."""
    def factory(handler):
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return SeriesFetcher(client, base_url="https://chart.test")
    return factory


@pytest.fixture
def provider_handler():
    """
    Mock provider: serves the given payloads by ticker, 404 for the rest.

    Every request is recorded on the returned handler's `requests` list.
    """
    def factory(payloads):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            ticker = ticker_from_request(request)
            if ticker not in payloads:
                return httpx.Response(404, json={
                    "chart": {"result": None,
                              "error": {"code": "Not Found", "description": "No data found"}}
                })
            return httpx.Response(200, content=json.dumps(payloads[ticker]))

        handler.requests = requests
        return handler
    return factory
