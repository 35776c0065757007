"""Plain-language explanations of a calculation from a chat-completion API.

The numeric result always exists before this module is involved. Any failure
of the remote call (no API key, network error, timeout, HTTP error, malformed
answer) raises ``ExplanationUnavailable``; ``explain_result`` turns that into a
notice so front ends can keep showing the numbers.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests
from requests.adapters import HTTPAdapter, Retry

from .calculators import CalculationResult
from .config import EnvCredentialProvider, ExplanationSettings
from .errors import ExplanationUnavailable

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an expert wireless communication systems engineer. Provide detailed, "
    "technical explanations that are educationally valuable."
)

_INTRO = {
    "wireless": "As a wireless communication systems expert, please analyze these "
                "signal-chain calculation results:",
    "ofdm": "As an OFDM systems expert, please analyze these OFDM calculation results:",
    "link_budget": "As an RF link budget expert, please analyze these link budget calculations:",
    "cellular": "As a cellular network design expert, please analyze these cellular "
                "system calculations:",
}

_ASK = {
    "wireless": [
        "Technical analysis of each stage of the chain",
        "Performance implications of the chosen rates",
        "Recommendations for optimization",
    ],
    "ofdm": [
        "Resource allocation and capacity analysis",
        "Spectral efficiency assessment",
        "Comparison with practical LTE/5G numerology",
    ],
    "link_budget": [
        "Assessment of both link directions",
        "Margin adequacy and reliability",
        "Ways to improve the weaker direction",
    ],
    "cellular": [
        "Coverage and capacity planning analysis",
        "Traffic engineering and grade of service",
        "Impact of the cluster size on frequency reuse",
    ],
}

_CLOSING = (
    "Keep it suitable for engineering students: a short header followed by at most "
    "two plain-text paragraphs."
)


def _fmt(value: Any) -> str:
    if value is None:
        return "not computed"
    if isinstance(value, bool):
        return "yes" if value else "no"
    if isinstance(value, float):
        return f"{value:.6g}"
    return str(value)


def _input_lines(result: CalculationResult) -> List[str]:
    record = result.to_record()
    lines = []
    for rule in result.definition.fields:
        value = record[rule.attr]
        if isinstance(value, (int, float)) and not isinstance(value, bool) and rule.scale != 1.0:
            value = value / rule.scale
        unit = f" {rule.unit}" if rule.unit else ""
        lines.append(f"- {rule.label}: {_fmt(value)}{unit}")
    return lines


def _output_lines(result: CalculationResult) -> List[str]:
    record = result.to_record()
    lines = []
    for attr, (label, unit, scale) in result.definition.outputs.items():
        value = record[attr]
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            value = value * scale
        unit = f" {unit}" if unit else ""
        lines.append(f"- {label}: {_fmt(value)}{unit}")
    return lines


def build_prompt(result: CalculationResult) -> str:
    """User message listing inputs and outputs in display units."""
    parts = [_INTRO[result.calculator], "", "Input parameters:"]
    parts += _input_lines(result)
    parts += ["", "Calculated outputs:"]
    parts += _output_lines(result)
    parts += ["", "Please provide:"]
    parts += [f"{i}. {item}" for i, item in enumerate(_ASK[result.calculator], start=1)]
    parts += ["", _CLOSING]
    return "\n".join(parts)


class ExplanationClient:
    """Thin client for an OpenRouter-style chat-completion endpoint."""

    def __init__(self, settings: Optional[ExplanationSettings] = None, credentials=None, session=None):
        self.settings = settings or ExplanationSettings()
        self.credentials = credentials or EnvCredentialProvider()
        self.session = session or self._create_session()

    @staticmethod
    def _create_session() -> requests.Session:
        session = requests.Session()
        retry_strategy = Retry(
            total=2,
            backoff_factor=0.5,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["POST"],
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("https://", adapter)
        session.mount("http://", adapter)
        return session

    def _headers(self, api_key: str) -> Dict[str, str]:
        headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
            "X-Title": self.settings.app_title,
        }
        if self.settings.referer:
            headers["HTTP-Referer"] = self.settings.referer
        return headers

    def complete(self, prompt: str) -> str:
        api_key = self.credentials.get_api_key()
        if not api_key:
            raise ExplanationUnavailable("No API key configured for the explanation service")
        body = {
            "model": self.settings.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            "max_tokens": self.settings.max_tokens,
            "temperature": self.settings.temperature,
        }
        try:
            response = self.session.post(
                self.settings.api_url,
                json=body,
                headers=self._headers(api_key),
                timeout=self.settings.timeout_s,
            )
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.RequestException as e:
            raise ExplanationUnavailable(f"Explanation request failed: {e}") from e
        except ValueError as e:
            raise ExplanationUnavailable("Explanation service returned invalid JSON") from e

        try:
            return data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise ExplanationUnavailable("No response received from the explanation service") from e

    def explain(self, result: CalculationResult) -> str:
        return self.complete(build_prompt(result))


@dataclass(frozen=True)
class Explanation:
    text: Optional[str]
    notice: Optional[str] = None

    @property
    def available(self) -> bool:
        return self.text is not None


def explain_result(client: ExplanationClient, result: CalculationResult) -> Explanation:
    """Explanation text, or a notice when the service is unavailable."""
    try:
        return Explanation(client.explain(result))
    except ExplanationUnavailable as e:
        logger.warning("Explanation unavailable: %s", e)
        return Explanation(None, f"Explanation unavailable ({e}); the calculated results are still valid.")
