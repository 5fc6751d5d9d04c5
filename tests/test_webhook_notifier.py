from datetime import datetime, timezone
import json

import httpx
import pytest

from app.notifiers.webhook import WebhookNotifier, build_envelope, validate_webhook_url


@pytest.mark.parametrize(
    "url, expected",
    [
        ("https://x.com/hook", True),
        ("http://localhost:5678/webhook/abc", True),
        ("ftp://x", False),
        ("not a url", False),
        ("", False),
        ("javascript:alert(1)", False),
    ],
)
def test_validate_webhook_url(url, expected):
    assert validate_webhook_url(url) is expected


def test_envelope_shape(snapshot):
    captured = datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)

    envelope = build_envelope(snapshot, captured_at=captured)

    assert envelope == {
        "timestamp": "2024-05-01T12:30:00.000Z",
        "source": "weather-automation-app",
        "event_type": "weather_data",
        "data": {
            "city": "London",
            "temperature": 15,
            "condition": "Partly Cloudy",
            "air_quality": "Moderate",
            "air_quality_index": 2,
            "report_time": "2024-05-01T12:30:00.000Z",
        },
        "metadata": {"app_name": "Weather Automation System", "version": "1.0.0"},
    }


@pytest.mark.anyio
async def test_send_returns_true_on_2xx(mock_http, snapshot):
    calls = mock_http(lambda request: httpx.Response(200, text="ok"))

    assert await WebhookNotifier().send("https://hooks.example.com/abc", snapshot) is True

    assert len(calls) == 1
    request = calls[0]
    assert request.method == "POST"
    assert request.headers["content-type"] == "application/json"
    body = json.loads(request.content)
    assert body["data"]["city"] == "London"
    assert body["timestamp"] == body["data"]["report_time"]


@pytest.mark.anyio
async def test_send_returns_false_on_non_2xx_without_retry(mock_http, snapshot):
    calls = mock_http(lambda request: httpx.Response(503, text="unavailable"))

    assert await WebhookNotifier().send("https://hooks.example.com/abc", snapshot) is False
    assert len(calls) == 1


@pytest.mark.anyio
async def test_send_returns_false_on_network_error(mock_http, snapshot):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    calls = mock_http(handler)

    assert await WebhookNotifier().send("https://hooks.example.com/abc", snapshot) is False
    assert len(calls) == 1
