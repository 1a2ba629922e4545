"""
Language model backed analysis.

Talks to an OpenAI-compatible chat completions endpoint (DeepSeek by default)
and parses the JSON replies into the same models the heuristics produce.
"""

from typing import Dict, Any, List, Optional, Sequence, Union
import json
import logging
import re
import requests

from .config import AIServiceConfig
from .engine.base import AnalysisPlugin
from .exceptions import ExternalServiceError, ServiceNotConfiguredError, ResponseParseError
from .models import (
    EnergyDataPoint, AIAnalysis, AIRecommendation, MeterReading, PanelInspection
)

logger = logging.getLogger("ecosync.llm")

DATA_URL_PREFIX = re.compile(r"^data:image/\w+;base64,")
CODE_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)

ANALYST_SYSTEM_PROMPT = (
    "You are an expert energy analyst specializing in solar power optimization and "
    "household energy management. Always respond with valid JSON only."
)
ADVISOR_SYSTEM_PROMPT = (
    "You are an expert AI energy advisor providing actionable recommendations for "
    "household energy optimization. Always respond with valid JSON only."
)
METER_SYSTEM_PROMPT = (
    "You are an expert at reading energy meters and solar panel displays. "
    "Extract numerical readings accurately."
)
PANEL_SYSTEM_PROMPT = (
    "You are a solar panel inspection expert. Analyze panel condition, identify "
    "issues, and provide recommendations."
)
EXPLAINER_SYSTEM_PROMPT = (
    "You are a friendly energy advisor explaining technical concepts in simple, "
    "accessible language."
)
FORECASTER_SYSTEM_PROMPT = (
    "You are an expert in energy forecasting and time series prediction. "
    "Always respond with valid JSON only."
)


def extract_json(content: str) -> Dict[str, Any]:
    """Parse the JSON object in a model reply.

    Accepts a bare object, an object inside a markdown code fence, or an
    object surrounded by prose.
    """
    if not content or not content.strip():
        raise ResponseParseError("Empty response from model")

    text = content.strip()
    fenced = CODE_FENCE.match(text)
    if fenced:
        text = fenced.group(1)

    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        start, end = text.find("{"), text.rfind("}")
        if start == -1 or end <= start:
            raise ResponseParseError(f"No JSON object in response: {content[:80]!r}")
        try:
            data = json.loads(text[start:end + 1])
        except json.JSONDecodeError as e:
            raise ResponseParseError(f"Invalid JSON in response: {e}") from e

    if not isinstance(data, dict):
        raise ResponseParseError(f"Expected a JSON object, got {type(data).__name__}")
    return data


def strip_data_url(image: str) -> str:
    """Remove a data URL prefix from a base64 image."""
    return DATA_URL_PREFIX.sub("", image)


def _series_json(series: Sequence[EnergyDataPoint]) -> str:
    return json.dumps([point.to_dict() for point in series], indent=2)


def build_analysis_prompt(series: Sequence[EnergyDataPoint]) -> str:
    history = [point for point in series if not point.predicted][-24:]
    return f"""You are an expert energy analyst. Analyze this household energy data and provide insights.

Energy Data (last 24 hours):
{_series_json(history)}

Provide analysis in this exact JSON format:
{{
  "peakUsageHours": ["HH:MM", "HH:MM"],
  "solarWindows": ["HH:MM", "HH:MM"],
  "consumptionRate": number,
  "trends": ["trend1", "trend2", "trend3"],
  "insights": [
    {{
      "category": "string",
      "finding": "string",
      "impact": "string"
    }}
  ]
}}

Focus on:
1. Peak usage hours (when consumption is highest)
2. Optimal solar windows (high solar, low usage)
3. Average consumption rate
4. Usage trends and patterns
5. Key insights about energy waste or optimization opportunities"""


def build_recommendation_prompt(
    analysis: AIAnalysis,
    prepaid_balance: float,
    current_usage: float,
    currency: str = "RWF"
) -> str:
    return f"""You are an AI energy advisor. Generate personalized recommendations based on this analysis.

Analysis:
- Peak Usage Hours: {', '.join(analysis.peak_usage_hours)}
- Solar Windows: {', '.join(analysis.solar_windows)}
- Consumption Rate: {analysis.consumption_rate} kWh/h
- Current Usage: {current_usage} kWh/h
- Prepaid Balance: {prepaid_balance} {currency}

Provide 3-4 recommendations in this exact JSON format:
{{
  "recommendations": [
    {{
      "id": "unique-id",
      "title": "Clear action title",
      "description": "Detailed description with specific times and actions",
      "confidence": 85,
      "reasoning": ["reason1", "reason2", "reason3", "reason4"],
      "priority": "high|medium|low",
      "actionTime": "HH:MM (optional)"
    }}
  ]
}}

Prioritize:
1. Solar optimization opportunities
2. Prepaid balance warnings (if balance is low)
3. Cost-saving actions
4. Sustainability improvements"""


def build_anomaly_prompt(series: Sequence[EnergyDataPoint], description: str) -> str:
    return f"""Explain this energy usage anomaly to a household user in simple terms.

Recent Energy Data:
{_series_json(list(series)[-12:])}

Anomaly: {description}

Provide a clear, concise explanation (2-3 sentences) of:
1. What likely caused this
2. Whether it's concerning
3. What action (if any) to take"""


def build_forecast_prompt(history: Sequence[EnergyDataPoint], hours_ahead: int) -> str:
    return f"""You are a time series forecasting expert. Predict future energy usage.

Historical Data (last 24 hours):
{_series_json(list(history)[-24:])}

Predict the next {hours_ahead} hours of energy usage and solar generation.

Respond in JSON format:
{{
  "predictions": [
    {{"time": "HH:MM", "usage": number, "solar": number, "predicted": true}}
  ]
}}

Consider:
- Time of day patterns
- Solar generation curves (peaks at noon, zero at night)
- Typical household behavior
- Weather patterns (assume clear for solar)"""


class ChatCompletionClient:
    """Minimal client for an OpenAI-compatible chat completions API."""

    def __init__(self, config: AIServiceConfig, session: Optional[requests.Session] = None):
        self.config = config
        self.session = session or requests.Session()

    def complete(
        self,
        messages: List[Dict[str, Any]],
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        json_mode: bool = False
    ) -> str:
        """Send one chat request and return the reply text."""
        if not self.config.is_configured:
            raise ServiceNotConfiguredError(f"{self.config.provider} API key not configured")

        body: Dict[str, Any] = {
            "model": model or self.config.chat_model,
            "messages": messages
        }
        if temperature is not None:
            body["temperature"] = temperature
        if max_tokens is not None:
            body["max_tokens"] = max_tokens
        if json_mode:
            body["response_format"] = {"type": "json_object"}

        url = f"{self.config.base_url.rstrip('/')}/chat/completions"
        logger.debug(f"POST {url} model={body['model']}")

        try:
            response = self.session.post(
                url,
                json=body,
                headers={
                    "Authorization": f"Bearer {self.config.api_key}",
                    "Content-Type": "application/json"
                },
                timeout=self.config.timeout_seconds
            )
            response.raise_for_status()
            payload = response.json()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise ExternalServiceError(f"{self.config.provider} API returned HTTP {status}") from e
        except ValueError as e:
            raise ResponseParseError(f"{self.config.provider} API returned invalid JSON") from e
        except requests.RequestException as e:
            raise ExternalServiceError(f"{self.config.provider} API request failed: {e}") from e

        try:
            content = payload["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            content = None

        if not content:
            raise ExternalServiceError(f"No response from {self.config.provider}")
        return content


class LLMAnalysisPlugin(AnalysisPlugin):
    """Analysis plugin that delegates to a language model."""

    def __init__(self, config: AIServiceConfig, client: Optional[ChatCompletionClient] = None):
        super().__init__(f"llm_{config.provider}")
        self.config = config
        self.client = client or ChatCompletionClient(config)

    def is_available(self) -> bool:
        return self.config.enabled and self.config.is_configured

    def _ask_json(self, system: str, user: Union[str, List[Dict[str, Any]]], **options) -> Dict[str, Any]:
        content = self.client.complete(
            [{"role": "system", "content": system}, {"role": "user", "content": user}],
            json_mode=True,
            **options
        )
        return extract_json(content)

    def analyze(self, series: Sequence[EnergyDataPoint]) -> AIAnalysis:
        """Ask the model for an analysis of the historical part of a series."""
        data = self._ask_json(
            ANALYST_SYSTEM_PROMPT,
            build_analysis_prompt(series),
            temperature=0.7,
            max_tokens=1500
        )
        try:
            analysis = AIAnalysis.from_dict(data)
        except (TypeError, ValueError) as e:
            raise ResponseParseError(f"Malformed analysis: {e}") from e

        analysis.peak_usage_hours = analysis.peak_usage_hours[:3]
        analysis.solar_windows = analysis.solar_windows[:3]
        return analysis

    def recommend(
        self,
        analysis: AIAnalysis,
        prepaid_balance: float,
        current_usage: float
    ) -> List[AIRecommendation]:
        """Ask the model for recommendations."""
        data = self._ask_json(
            ADVISOR_SYSTEM_PROMPT,
            build_recommendation_prompt(analysis, prepaid_balance, current_usage),
            temperature=0.8,
            max_tokens=2000
        )
        try:
            return [AIRecommendation.from_dict(item) for item in data.get("recommendations", [])]
        except (TypeError, ValueError) as e:
            raise ResponseParseError(f"Malformed recommendations: {e}") from e

    def _image_message(self, text: str, image_b64: str) -> List[Dict[str, Any]]:
        return [
            {"type": "text", "text": text},
            {
                "type": "image_url",
                "image_url": {"url": f"data:image/jpeg;base64,{strip_data_url(image_b64)}"}
            }
        ]

    def analyze_meter_image(self, image_b64: str) -> MeterReading:
        """Read the value shown on a meter or inverter display."""
        data = self._ask_json(
            METER_SYSTEM_PROMPT,
            self._image_message(
                "Analyze this energy meter or solar display image. Extract the reading, "
                "unit, and provide analysis. Respond in JSON format: {\"reading\": number, "
                "\"unit\": \"kWh|kW|RWF\", \"confidence\": 0-100, \"analysis\": "
                "\"detailed description\"}",
                image_b64
            ),
            model=self.config.vision_model,
            temperature=0.3,
            max_tokens=500
        )
        try:
            return MeterReading.from_dict(data)
        except (TypeError, ValueError) as e:
            raise ResponseParseError(f"Malformed meter reading: {e}") from e

    def analyze_solar_panel_image(self, image_b64: str) -> PanelInspection:
        """Assess panel condition from a photo."""
        data = self._ask_json(
            PANEL_SYSTEM_PROMPT,
            self._image_message(
                "Analyze this solar panel image. Check for dirt, damage, shading, or other "
                "issues. Respond in JSON: {\"condition\": \"excellent|good|fair|poor\", "
                "\"issues\": [\"issue1\", \"issue2\"], \"recommendations\": [\"rec1\", "
                "\"rec2\"], \"estimatedEfficiency\": 0-100}",
                image_b64
            ),
            model=self.config.vision_model,
            temperature=0.5,
            max_tokens=800
        )
        try:
            return PanelInspection.from_dict(data)
        except (TypeError, ValueError) as e:
            raise ResponseParseError(f"Malformed panel inspection: {e}") from e

    def explain_anomaly(self, series: Sequence[EnergyDataPoint], description: str) -> str:
        """Plain-language explanation of an unusual reading."""
        content = self.client.complete(
            [
                {"role": "system", "content": EXPLAINER_SYSTEM_PROMPT},
                {"role": "user", "content": build_anomaly_prompt(series, description)}
            ],
            temperature=0.7,
            max_tokens=200
        )
        return content.strip()

    def predict_future_usage(
        self,
        history: Sequence[EnergyDataPoint],
        hours_ahead: int = 6
    ) -> List[EnergyDataPoint]:
        """Ask the model to extend a series."""
        data = self._ask_json(
            FORECASTER_SYSTEM_PROMPT,
            build_forecast_prompt(history, hours_ahead),
            temperature=0.6,
            max_tokens=1000
        )
        try:
            predictions = [
                EnergyDataPoint.from_dict({**item, "predicted": True})
                for item in data.get("predictions", [])
            ]
        except (KeyError, TypeError, ValueError) as e:
            raise ResponseParseError(f"Malformed predictions: {e}") from e

        return [
            p for p in predictions if p.usage >= 0 and p.solar >= 0
        ][:hours_ahead]

    def test_connection(self) -> Dict[str, Any]:
        """Check the API key with a tiny request."""
        report = {
            "configured": self.config.is_configured,
            "api_key_prefix": self.config.masked_key,
            "base_url": self.config.base_url,
            "model": self.config.chat_model
        }
        if not self.config.is_configured:
            return {**report, "success": False, "error": "API key not configured"}

        try:
            reply = self.client.complete(
                [{"role": "user", "content": 'Say "API key is working" if you can read this.'}],
                max_tokens=20
            )
        except ExternalServiceError as e:
            logger.warning(f"Connection test failed: {e}")
            return {**report, "success": False, "error": str(e)}

        return {**report, "success": True, "response": reply}
