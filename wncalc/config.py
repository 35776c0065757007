"""Calculator configuration: defaults, text/env loading and credentials.

This module provides:
- Frozen dataclasses for the formula-variant selection, the unknown-modulation
  policy and the explanation service endpoint.
- A tolerant regex-based parser for small ``key: value`` configuration files.
- ``settings_from_env`` for ``WNCALC_*`` environment overrides.
- Credential providers so the explanation API key is injected, not embedded.

Recognised keys (text file / environment variable):
- link_budget_model / WNCALC_LINK_BUDGET_MODEL: "bidirectional" or "eirp"
- ofdm_model / WNCALC_OFDM_MODEL: "resource_block" or "cyclic_prefix"
- unknown_modulation / WNCALC_UNKNOWN_MODULATION: "error" or "qpsk"
- reference_frequency / WNCALC_REFERENCE_FREQUENCY: e.g. "2.4 GHz"
- target_gos / WNCALC_TARGET_GOS: blocking target, "2 %" or "0.02"
- api_url, model, max_tokens, temperature, timeout (explanation service)
"""

import os
import re
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Mapping, Optional

LINK_BUDGET_MODELS = ("bidirectional", "eirp")
OFDM_MODELS = ("resource_block", "cyclic_prefix")
UNKNOWN_MODULATION_POLICIES = ("error", "qpsk")


@dataclass(frozen=True)
class ExplanationSettings:
    api_url: str = "https://openrouter.ai/api/v1/chat/completions"
    model: str = "deepseek/deepseek-chat:free"
    max_tokens: int = 1500
    temperature: float = 0.7
    timeout_s: float = 30.0
    app_title: str = "Wireless Communication Calculator"
    referer: Optional[str] = None


@dataclass(frozen=True)
class CalculatorSettings:
    link_budget_model: str = "bidirectional"
    ofdm_model: str = "resource_block"
    unknown_modulation: str = "error"
    reference_frequency_hz: float = 2.4e9
    target_grade_of_service: float = 0.02
    explanation: ExplanationSettings = field(default_factory=ExplanationSettings)

    def __post_init__(self):
        if self.link_budget_model not in LINK_BUDGET_MODELS:
            raise ValueError(f"Unknown link budget model: {self.link_budget_model}")
        if self.ofdm_model not in OFDM_MODELS:
            raise ValueError(f"Unknown OFDM model: {self.ofdm_model}")
        if self.unknown_modulation not in UNKNOWN_MODULATION_POLICIES:
            raise ValueError(f"Unknown modulation policy: {self.unknown_modulation}")
        if self.reference_frequency_hz <= 0:
            raise ValueError("reference frequency must be positive")
        if not 0.0 < self.target_grade_of_service < 1.0:
            raise ValueError("target grade of service must be in (0, 1)")


def _parse_frequency_hz(value: str) -> Optional[float]:
    m = re.search(r"([0-9]+(?:\.[0-9]+)?)\s*(Hz|kHz|MHz|GHz)?", value, re.IGNORECASE)
    if not m:
        return None
    num = float(m.group(1))
    unit = (m.group(2) or "hz").lower()
    scale = {"hz": 1.0, "khz": 1e3, "mhz": 1e6, "ghz": 1e9}[unit]
    return num * scale


def _parse_fraction(value: str) -> Optional[float]:
    m = re.search(r"([0-9]+(?:\.[0-9]+)?)\s*(%)?", value)
    if not m:
        return None
    num = float(m.group(1))
    return num / 100.0 if m.group(2) else num


def _apply(settings: CalculatorSettings, key: str, value: str) -> CalculatorSettings:
    key = key.strip().lower().replace("-", "_")
    value = value.strip().strip("\"'")
    exp = settings.explanation
    if key == "link_budget_model":
        return replace(settings, link_budget_model=value.lower())
    if key == "ofdm_model":
        return replace(settings, ofdm_model=value.lower())
    if key == "unknown_modulation":
        return replace(settings, unknown_modulation=value.lower())
    if key in ("reference_frequency", "reference_frequency_hz"):
        hz = _parse_frequency_hz(value)
        return replace(settings, reference_frequency_hz=hz) if hz else settings
    if key in ("target_gos", "target_grade_of_service"):
        gos = _parse_fraction(value)
        return replace(settings, target_grade_of_service=gos) if gos is not None else settings
    if key == "api_url":
        return replace(settings, explanation=replace(exp, api_url=value))
    if key == "model":
        return replace(settings, explanation=replace(exp, model=value))
    if key == "max_tokens":
        return replace(settings, explanation=replace(exp, max_tokens=int(value)))
    if key == "temperature":
        return replace(settings, explanation=replace(exp, temperature=float(value)))
    if key in ("timeout", "timeout_s"):
        return replace(settings, explanation=replace(exp, timeout_s=float(value)))
    if key == "referer":
        return replace(settings, explanation=replace(exp, referer=value))
    return settings


def parse_settings_text(text: str, defaults: Optional[CalculatorSettings] = None) -> CalculatorSettings:
    """Parse ``key: value`` or ``key = value`` lines; unknown keys are ignored.

    Lines starting with ``#`` are comments. Missing keys keep their defaults.
    """
    settings = defaults if defaults is not None else CalculatorSettings()
    for line in text.splitlines():
        s = line.strip()
        if not s or s.startswith("#"):
            continue
        m = re.match(r"([A-Za-z_\-]+)\s*[:=]\s*(.+)$", s)
        if not m:
            continue
        settings = _apply(settings, m.group(1), m.group(2))
    return settings


def load_settings_from_text_file(path: str | Path, defaults: Optional[CalculatorSettings] = None) -> CalculatorSettings:
    txt = Path(path).read_text(encoding="utf-8", errors="ignore")
    return parse_settings_text(txt, defaults)


def settings_from_env(
    environ: Optional[Mapping[str, str]] = None, defaults: Optional[CalculatorSettings] = None
) -> CalculatorSettings:
    """Apply ``WNCALC_<KEY>`` environment variables on top of ``defaults``."""
    env = os.environ if environ is None else environ
    settings = defaults if defaults is not None else CalculatorSettings()
    for name, value in env.items():
        if name.startswith("WNCALC_") and value:
            settings = _apply(settings, name[len("WNCALC_"):], value)
    return settings


class EnvCredentialProvider:
    """Reads the explanation API key from an environment variable at call time."""

    def __init__(self, variable: str = "OPENROUTER_API_KEY", environ: Optional[Mapping[str, str]] = None):
        self.variable = variable
        self._environ = environ

    def get_api_key(self) -> Optional[str]:
        env = os.environ if self._environ is None else self._environ
        key = env.get(self.variable, "").strip()
        return key or None


class StaticCredentialProvider:
    def __init__(self, api_key: Optional[str]):
        self._api_key = api_key

    def get_api_key(self) -> Optional[str]:
        return self._api_key or None
