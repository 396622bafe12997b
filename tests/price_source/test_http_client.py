"""Tests for the HTTP client, rate limiter and banner normalization."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
import requests

from src.common.config import PriceSourceSettings
from src.price_source.banners import normalize_store_banner
from src.price_source.http_client import HTTPClient
from src.price_source.rate_limiter import RateLimiter


def _response(status: int = 200, payload=None) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status
    resp.json.return_value = payload
    if status >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status}", response=resp)
    return resp


@pytest.fixture
def client() -> HTTPClient:
    client = HTTPClient(PriceSourceSettings(rate_limit_rpm=0))
    client._session = MagicMock()
    return client


class TestHTTPClient:
    def test_returns_json(self, client):
        client._session.get.return_value = _response(payload={"productos": []})
        assert client.get_json("https://example.test/productos", params={"limit": 1}) == {
            "productos": [],
        }
        kwargs = client._session.get.call_args.kwargs
        assert kwargs["params"] == {"limit": 1}
        assert kwargs["timeout"] == 10.0

    @patch("src.price_source.http_client.time.sleep")
    def test_no_retry_on_404(self, sleep, client):
        client._session.get.return_value = _response(404)
        with pytest.raises(requests.HTTPError):
            client.get_json("https://example.test/producto")
        assert client._session.get.call_count == 1
        sleep.assert_not_called()

    @patch("src.price_source.http_client.time.sleep")
    def test_retries_then_raises(self, sleep, client):
        client._session.get.return_value = _response(503)
        with pytest.raises(requests.HTTPError):
            client.get_json("https://example.test/producto")
        assert client._session.get.call_count == 3
        assert [c.args[0] for c in sleep.call_args_list] == [1.0, 2.0]

    @patch("src.price_source.http_client.time.sleep")
    def test_retries_429(self, sleep, client):
        client._session.get.side_effect = [_response(429), _response(payload={"ok": True})]
        assert client.get_json("https://example.test/productos") == {"ok": True}

    @patch("src.price_source.http_client.time.sleep")
    def test_recovers_after_connection_error(self, sleep, client):
        client._session.get.side_effect = [
            requests.ConnectionError("reset"),
            _response(payload={"ok": True}),
        ]
        assert client.get_json("https://example.test/productos") == {"ok": True}
        assert client._session.get.call_count == 2

    @patch("src.price_source.http_client.time.sleep")
    def test_invalid_json_not_retried(self, sleep, client):
        resp = _response()
        resp.json.side_effect = requests.JSONDecodeError("Expecting value", "<html>", 0)
        client._session.get.return_value = resp
        with pytest.raises(ValueError):
            client.get_json("https://example.test/productos")
        assert client._session.get.call_count == 1
        sleep.assert_not_called()

    def test_headers(self):
        client = HTTPClient(PriceSourceSettings(user_agent="test-agent"))
        assert client._session.headers["User-Agent"] == "test-agent"
        assert client._session.headers["Accept"] == "application/json"
        client.close()

    def test_context_manager_closes(self, client):
        with client as c:
            assert c is client
        client._session.close.assert_called_once()


class TestRateLimiter:
    @patch("src.price_source.rate_limiter.time")
    def test_spaces_requests(self, mock_time):
        mock_time.monotonic.return_value = 100.0
        limiter = RateLimiter(requests_per_minute=60)
        limiter.wait()
        mock_time.sleep.assert_not_called()
        limiter.wait()
        mock_time.sleep.assert_called_once_with(1.0)

    @patch("src.price_source.rate_limiter.time")
    def test_disabled(self, mock_time):
        limiter = RateLimiter(requests_per_minute=0)
        limiter.wait()
        limiter.wait()
        mock_time.sleep.assert_not_called()


class TestNormalizeStoreBanner:
    @pytest.mark.parametrize("banner,expected", [
        ("CARREFOUR HIPER", "Carrefour"),
        ("Carrefour Express", "Carrefour"),
        ("  dia   % market ", "Dia"),
        ("COTO CICSA", "Coto"),
        ("WALMART", "Changomas"),
        ("supermercados toledo", "Supermercados Toledo"),
    ])
    def test_normalizes(self, banner, expected):
        assert normalize_store_banner(banner) == expected

    def test_empty(self):
        assert normalize_store_banner("") == ""
