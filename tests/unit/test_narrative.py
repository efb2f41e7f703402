"""Tests for the narrative prompt and HTTP client."""

import json

import httpx
import pytest

from app.models.forecast import ForecastResult, TrendDirection
from app.services.forecast import ForecastService, HttpNarrativeClient, fallback_summary
from app.services.forecast.narrative import build_prompt


@pytest.fixture
def run():
    run = ForecastService.create_run("narrative", 2026, state="SP", scenario_name="polls")
    run.party_results = [
        ForecastResult("A", 41.2, 38.0, 44.5, TrendDirection.RISING, 0.8, 0.9, 39.0, 2.1),
        ForecastResult("B", 30.0, 27.1, 33.0, TrendDirection.FALLING, 0.6, 0.8, 32.0, 1.5),
    ]
    return run


@pytest.fixture(autouse=True)
def no_retry_sleep(monkeypatch):
    monkeypatch.setattr(HttpNarrativeClient._post.retry, "sleep", lambda seconds: None)


def client_for(handler) -> HttpNarrativeClient:
    transport = httpx.MockTransport(handler)
    return HttpNarrativeClient(model="test-model", client=httpx.Client(base_url="http://llm", transport=transport))


class TestPrompt:
    def test_contents(self, run):
        prompt = build_prompt(run)
        assert "Electoral forecast for 2026" in prompt
        assert "Region: SP" in prompt
        assert "Scenario: polls" in prompt
        assert "1. A: 41.2% (CI 38.0%-44.5%), trend rising" in prompt

    def test_fallback_summary(self, run):
        assert fallback_summary(run) == 'Forecast for 2026 for scenario "polls". Top parties: A (41.2%), B (30.0%).'


class TestHttpNarrativeClient:
    def test_summarize(self, run):
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"choices": [{"message": {"content": "A leads."}}]})

        assert client_for(handler).summarize(run) == "A leads."
        assert seen["path"] == "/chat/completions"
        assert seen["body"]["model"] == "test-model"
        assert seen["body"]["messages"][1]["content"] == build_prompt(run)

    def test_retries_server_errors(self, run):
        calls = []

        def handler(request):
            calls.append(request)
            if len(calls) < 3:
                return httpx.Response(503)
            return httpx.Response(200, json={"choices": [{"message": {"content": "ok"}}]})

        assert client_for(handler).summarize(run) == "ok"
        assert len(calls) == 3

    def test_client_error_not_retried(self, run):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(401)

        with pytest.raises(httpx.HTTPStatusError):
            client_for(handler).summarize(run)
        assert len(calls) == 1

    def test_empty_choices(self, run):
        client = client_for(lambda request: httpx.Response(200, json={"choices": []}))
        assert client.summarize(run) == ""
