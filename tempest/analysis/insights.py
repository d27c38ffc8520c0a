"""
Insight formatting and generation.

The engine hands a compact InsightRequest to an InsightGenerator and expects
an ordered list of Insight records back. Whatever goes wrong on the
generator side, callers of generate_insights always receive a usable list:
failures are replaced by FALLBACK_INSIGHT.
"""

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple, Union

import requests

from tempest.exceptions import InsightParseError, InsightUnavailable
from tempest.resilience import CircuitBreaker, register_circuit_breaker

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Insight:
    """A headline with its supporting points."""
    headline: str
    points: Tuple[str, ...] = ()

    def to_dict(self) -> Dict:
        return {'headline': self.headline, 'points': list(self.points)}


FALLBACK_INSIGHT = Insight(
    headline="AI recommendations are temporarily unavailable.",
    points=(
        "Please ensure your Gemini API key is configured correctly.",
        "Consider monitoring weather conditions and optimizing speed manually.",
    ),
)


@dataclass
class InsightRequest:
    """Voyage summary handed to an insight generator."""
    route_name: str
    route_distance_nm: float
    total_duration_hours: float
    total_fuel_tons: float
    estimated_cost_usd: float
    average_sog_kts: float
    eta: datetime
    laycan_status: str
    laycan_risk_hours: int
    average_wind_speed_kts: float
    average_wave_height_m: float
    laycan_start: Optional[datetime] = None
    laycan_end: Optional[datetime] = None

    def to_dict(self) -> Dict:
        data = asdict(self)
        for key in ('eta', 'laycan_start', 'laycan_end'):
            data[key] = data[key].isoformat() if data[key] else None
        return data


def build_insight_request(analysis) -> InsightRequest:
    """Summarise a VoyageAnalysis for the insight generator."""
    window = analysis.laycan.window
    return InsightRequest(
        route_name=analysis.route.name,
        route_distance_nm=analysis.route_distance_nm,
        total_duration_hours=analysis.totals.total_duration_hours,
        total_fuel_tons=analysis.totals.total_fuel_tons,
        estimated_cost_usd=analysis.totals.estimated_cost_usd,
        average_sog_kts=analysis.totals.average_sog_kts,
        eta=analysis.eta,
        laycan_status=analysis.laycan.status.value,
        laycan_risk_hours=analysis.laycan.risk_hours,
        average_wind_speed_kts=analysis.weather_impact.average_wind_speed_kts,
        average_wave_height_m=analysis.weather_impact.average_wave_height_m,
        laycan_start=window.start if window else None,
        laycan_end=window.end if window else None,
    )


def _insight_from_record(record: Any) -> Insight:
    if not isinstance(record, dict):
        raise InsightParseError(f"Insight record must be an object, got {type(record).__name__}")

    headline = record.get('headline', record.get('mainPoint'))
    points = record.get('points', record.get('subPoints', []))

    if not isinstance(headline, str) or not headline.strip():
        raise InsightParseError("Insight record has no headline")
    if not isinstance(points, list) or not all(isinstance(p, str) for p in points):
        raise InsightParseError(f"Insight points must be a list of strings: {headline!r}")

    return Insight(headline=headline.strip(), points=tuple(points))


def parse_insights(payload: Union[str, List]) -> List[Insight]:
    """
    Parse generator output into Insight records.

    Accepts a JSON string or already-decoded list. Records may use either
    headline/points or mainPoint/subPoints keys.

    Raises:
        InsightParseError: On invalid JSON or an unexpected shape
    """
    if isinstance(payload, str):
        try:
            payload = json.loads(payload)
        except json.JSONDecodeError as e:
            raise InsightParseError(f"Insight response is not valid JSON: {e}") from e

    if not isinstance(payload, list) or not payload:
        raise InsightParseError("Insight response must be a non-empty JSON array")

    return [_insight_from_record(record) for record in payload]


class InsightGenerator(ABC):
    """Produces insights for a voyage summary."""

    name = "base"

    @abstractmethod
    def generate(self, request: InsightRequest) -> List[Insight]:
        """
        Raises:
            Any exception on failure; generate_insights absorbs it.
        """
        pass


class StaticInsightGenerator(InsightGenerator):
    """Always returns the fallback insight. Used when no AI backend is configured."""

    name = "static"

    def generate(self, request: InsightRequest) -> List[Insight]:
        return [FALLBACK_INSIGHT]


gemini_breaker = register_circuit_breaker(
    CircuitBreaker(name="gemini_api", failure_threshold=3, recovery_timeout=120)
)


PROMPT_TEMPLATE = """As a maritime routing specialist, analyze the voyage data below and provide actionable, crisp insights for a vessel operator. The output must be a single JSON array of objects, each with a 'headline' string and a 'points' array of strings.

Voyage Details:
Route: {route_name}
Distance: {route_distance_nm:.0f} nautical miles
ETA: {eta}
Laycan Window: {laycan_window}
Laycan Status: {laycan_status} ({laycan_risk_hours} hours)
Average Weather: Wind {average_wind_speed_kts:.0f} knots, Waves {average_wave_height_m:.1f} meters
Total Fuel: {total_fuel_tons:.2f} tons
Estimated Cost: ${estimated_cost_usd:,.0f}

Cover laycan compliance and ETA, speed optimization with its fuel and cost impact, weather impact on the route, and voyage cost efficiency.
"""


def build_prompt(request: InsightRequest) -> str:
    if request.laycan_start or request.laycan_end:
        start = request.laycan_start.date().isoformat() if request.laycan_start else "open"
        end = request.laycan_end.date().isoformat() if request.laycan_end else "open"
        laycan_window = f"{start} to {end}"
    else:
        laycan_window = "not specified"

    return PROMPT_TEMPLATE.format(
        route_name=request.route_name,
        route_distance_nm=request.route_distance_nm,
        eta=request.eta.isoformat(),
        laycan_window=laycan_window,
        laycan_status=request.laycan_status,
        laycan_risk_hours=request.laycan_risk_hours,
        average_wind_speed_kts=request.average_wind_speed_kts,
        average_wave_height_m=request.average_wave_height_m,
        total_fuel_tons=request.total_fuel_tons,
        estimated_cost_usd=request.estimated_cost_usd,
    )


class GeminiInsightGenerator(InsightGenerator):
    """Insights from the Gemini generateContent endpoint."""

    name = "gemini"

    def __init__(
        self,
        api_key: Optional[str],
        api_url: str = "https://generativelanguage.googleapis.com/v1beta",
        model: str = "gemini-1.5-flash-latest",
        timeout_s: float = 15.0,
        session: Optional[requests.Session] = None,
        breaker: CircuitBreaker = gemini_breaker,
    ):
        self.api_key = api_key
        self.api_url = api_url.rstrip('/')
        self.model = model
        self.timeout_s = timeout_s
        self.session = session or requests.Session()
        self._post = breaker(self._http_post)

    def _http_post(self, prompt: str) -> Dict:
        response = self.session.post(
            f"{self.api_url}/models/{self.model}:generateContent",
            params={'key': self.api_key},
            json={
                'contents': [{'parts': [{'text': prompt}]}],
                'generationConfig': {
                    'responseMimeType': 'application/json',
                    'temperature': 0.7,
                    'maxOutputTokens': 500,
                },
            },
            headers={'Content-Type': 'application/json'},
            timeout=self.timeout_s,
        )
        response.raise_for_status()
        return response.json()

    def generate(self, request: InsightRequest) -> List[Insight]:
        if not self.api_key:
            raise InsightUnavailable("GEMINI_API_KEY not configured")

        data = self._post(build_prompt(request))
        try:
            text = data['candidates'][0]['content']['parts'][0]['text']
        except (KeyError, IndexError, TypeError) as e:
            raise InsightParseError(f"Gemini response has no text part: {e}") from e
        if not text:
            raise InsightParseError("Gemini response was empty")
        return parse_insights(text)


def generate_insights(generator: InsightGenerator, analysis) -> List[Insight]:
    """
    Insights for an analysis. Never raises.

    Returns:
        Generator output, or [FALLBACK_INSIGHT] on any failure
    """
    try:
        request = build_insight_request(analysis)
        insights = generator.generate(request)
        if not insights:
            raise InsightParseError("Generator returned no insights")
        return list(insights)
    except Exception as e:
        logger.warning(f"Insight generation via {generator.name} failed, using fallback: {e}")
        return [FALLBACK_INSIGHT]
