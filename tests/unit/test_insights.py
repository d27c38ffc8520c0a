"""
Tests for insight parsing, generation and fallback.
"""

import json
from datetime import timedelta

import pytest
import requests

from tempest.analysis import LaycanWindow, VoyageAnalyzer
from tempest.analysis.insights import (
    FALLBACK_INSIGHT,
    GeminiInsightGenerator,
    Insight,
    StaticInsightGenerator,
    build_insight_request,
    build_prompt,
    generate_insights,
    parse_insights,
)
from tempest.exceptions import InsightParseError, InsightUnavailable
from tempest.resilience import CircuitBreaker


@pytest.fixture
def analysis(equator_route, test_vessel, calm_observation, departure):
    window = LaycanWindow(start=departure, end=departure + timedelta(days=1))
    return VoyageAnalyzer().analyze(
        equator_route, test_vessel, [calm_observation], laycan=window, departure_time=departure
    )


class StubResponse:
    def __init__(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return self.payload


class StubSession:
    def __init__(self, payload=None, status_code=200):
        self.payload = payload
        self.status_code = status_code
        self.calls = []

    def post(self, url, params=None, json=None, headers=None, timeout=None):
        self.calls.append({'url': url, 'params': params, 'json': json, 'timeout': timeout})
        return StubResponse(self.payload, self.status_code)


def gemini_payload(text):
    return {'candidates': [{'content': {'parts': [{'text': text}]}}]}


def make_gemini(session, api_key="test-key"):
    return GeminiInsightGenerator(
        api_key=api_key,
        model="test-model",
        session=session,
        breaker=CircuitBreaker(name="test_gemini", failure_threshold=100),
    )


class TestParseInsights:

    def test_headline_points(self):
        insights = parse_insights('[{"headline": "On time", "points": ["a", "b"]}]')
        assert insights == [Insight(headline="On time", points=("a", "b"))]

    def test_main_point_sub_points(self):
        insights = parse_insights([{"mainPoint": "Fuel", "subPoints": ["slow down"]}])
        assert insights[0].headline == "Fuel"
        assert insights[0].points == ("slow down",)

    def test_points_optional(self):
        assert parse_insights([{"headline": "Solo"}])[0].points == ()

    def test_order_preserved(self):
        insights = parse_insights([{"headline": "one"}, {"headline": "two"}, {"headline": "three"}])
        assert [i.headline for i in insights] == ["one", "two", "three"]

    @pytest.mark.parametrize("payload", [
        "not json",
        "{}",
        "[]",
        '["text"]',
        '[{"points": ["no headline"]}]',
        '[{"headline": "x", "points": "not a list"}]',
        '[{"headline": "x", "points": [1, 2]}]',
    ])
    def test_rejects_bad_shapes(self, payload):
        with pytest.raises(InsightParseError):
            parse_insights(payload)


class TestInsightRequest:

    def test_summarises_analysis(self, analysis):
        request = build_insight_request(analysis)
        assert request.route_name == "Equator Test"
        assert request.laycan_status == "COMPLIANT"
        assert request.laycan_risk_hours == 0
        assert request.eta == analysis.eta
        assert request.total_fuel_tons == pytest.approx(analysis.totals.total_fuel_tons)

    def test_to_dict_is_json_serialisable(self, analysis):
        data = build_insight_request(analysis).to_dict()
        json.dumps(data)
        assert data['laycan_start'] == "2025-03-01T00:00:00+00:00"

    def test_prompt(self, analysis):
        prompt = build_prompt(build_insight_request(analysis))
        assert "Route: Equator Test" in prompt
        assert "Laycan Window: 2025-03-01 to 2025-03-02" in prompt
        assert "Laycan Status: COMPLIANT (0 hours)" in prompt
        assert "'headline'" in prompt

    def test_prompt_without_window(self, equator_route, test_vessel, calm_observation, departure):
        analysis = VoyageAnalyzer().analyze(equator_route, test_vessel, [calm_observation], departure_time=departure)
        prompt = build_prompt(build_insight_request(analysis))
        assert "Laycan Window: not specified" in prompt


class TestGeminiInsightGenerator:

    def test_generates_from_response(self, analysis):
        text = json.dumps([{"headline": "Arrive early", "points": ["Berth is free"]}])
        session = StubSession(payload=gemini_payload(text))
        insights = make_gemini(session).generate(build_insight_request(analysis))

        assert insights == [Insight(headline="Arrive early", points=("Berth is free",))]
        call = session.calls[0]
        assert call['url'].endswith("/models/test-model:generateContent")
        assert call['params'] == {'key': "test-key"}
        assert call['json']['generationConfig']['responseMimeType'] == "application/json"

    def test_no_key(self, analysis):
        session = StubSession()
        with pytest.raises(InsightUnavailable):
            make_gemini(session, api_key=None).generate(build_insight_request(analysis))
        assert session.calls == []

    def test_missing_text(self, analysis):
        session = StubSession(payload={'candidates': []})
        with pytest.raises(InsightParseError):
            make_gemini(session).generate(build_insight_request(analysis))

    def test_http_error_propagates(self, analysis):
        session = StubSession(payload={}, status_code=503)
        with pytest.raises(requests.HTTPError):
            make_gemini(session).generate(build_insight_request(analysis))


class TestGenerateInsights:

    def test_passes_through(self, analysis, fake_insights_factory):
        generator = fake_insights_factory()
        insights = generate_insights(generator, analysis)
        assert insights[0].headline == "Laycan on track"
        assert generator.last_request.route_name == "Equator Test"

    def test_generator_error_falls_back(self, analysis, fake_insights_factory):
        generator = fake_insights_factory(error=RuntimeError("quota exceeded"))
        assert generate_insights(generator, analysis) == [FALLBACK_INSIGHT]

    def test_empty_output_falls_back(self, analysis, fake_insights_factory):
        assert generate_insights(fake_insights_factory(insights=[]), analysis) == [FALLBACK_INSIGHT]

    def test_unparseable_gemini_falls_back(self, analysis):
        session = StubSession(payload=gemini_payload("I cannot help with that"))
        assert generate_insights(make_gemini(session), analysis) == [FALLBACK_INSIGHT]

    def test_static_generator(self, analysis):
        insights = generate_insights(StaticInsightGenerator(), analysis)
        assert insights == [FALLBACK_INSIGHT]
        assert insights[0].headline == "AI recommendations are temporarily unavailable."
