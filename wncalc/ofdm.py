"""OFDM capacity calculators.

Two formula sets are provided and selected by name in ``calculators``:

Resource-block model (``resource_block``):
- N_RB   = B_total / B_RB
- N_sc   = B_RB / Δf                       subcarriers per RB
- N_RE   = N_symb · N_sc                   resource elements per RB
- R_RE   = N_RE · (bits_per_symbol / T_symb)
- R_RB   = N_RB · R_RE
- C_max  = R_RB · parallel RBs
- η      = C_max / B_total                 bits/s/Hz

Symbol / cyclic-prefix model (``cyclic_prefix``):
- T_u    = 1 / symbol rate,  T_total = T_u (1 + CP ratio) + T_guard
- R      = N_sc · bits_per_symbol · coding rate / T_total
- B_occ  = N_sc / T_u,  η = R / B_occ

Inputs arrive in kHz / ms / μs and are converted to Hz / s by the field rules.
"""

from dataclasses import dataclass
from typing import Mapping, Optional

from .config import CalculatorSettings
from .errors import CrossFieldError, InputError
from .modulation import Modulation, modulation_parameters, parse_modulation
from .validation import FieldRule, RawValue, ValidationResult, parse_fields

_MODULATION_CHOICES = tuple(m.value for m in Modulation)


@dataclass(frozen=True)
class OFDMInput:
    modulation: Modulation
    total_bandwidth_hz: float
    bandwidth_per_rb_hz: float
    slot_duration_s: float
    symbol_duration_s: float
    symbols_per_slot: int
    subcarrier_spacing_hz: float
    parallel_resource_blocks: int


@dataclass(frozen=True)
class OFDMOutput:
    subcarriers_per_block: float
    resource_elements_per_block: float
    total_resource_elements: float
    resource_element_rate: float
    ofdm_symbol_rate: float
    per_block_rate: float
    resource_block_count: float
    max_capacity: float
    spectral_efficiency: float


@dataclass(frozen=True)
class OFDMSymbolInput:
    modulation: Modulation
    subcarriers: int
    cyclic_prefix_ratio: float
    symbol_rate_sps: float
    guard_interval_s: float


@dataclass(frozen=True)
class OFDMSymbolOutput:
    bits_per_symbol: int
    coding_rate: float
    useful_symbol_time_s: float
    total_symbol_time_s: float
    cyclic_prefix_overhead_pct: float
    occupied_bandwidth_hz: float
    data_rate: float
    spectral_efficiency: float


RESOURCE_BLOCK_FIELDS = (
    FieldRule("modulation", "Modulation scheme", default="QPSK", choices=_MODULATION_CHOICES),
    FieldRule("total_bandwidth_khz", "Total bandwidth", "kHz", target="total_bandwidth_hz", min_value=0.0, scale=1e3, default="1000"),
    FieldRule("bandwidth_per_rb_khz", "Bandwidth per RB", "kHz", target="bandwidth_per_rb_hz", min_value=0.0, scale=1e3, default="180"),
    FieldRule(
        "slot_duration_ms", "Slot duration", "ms", target="slot_duration_s",
        min_value=0.0, warn_above=1000, warn_below=0.001, scale=1e-3, default="0.5",
    ),
    FieldRule(
        "symbol_duration_ms", "Symbol duration", "ms", target="symbol_duration_s",
        min_value=0.0, warn_above=100, warn_below=0.001, scale=1e-3, default="0.0667",
    ),
    FieldRule("symbols_per_slot", "OFDM symbols per slot", integer=True, min_value=0.0, max_value=1000, default="7"),
    FieldRule(
        "subcarrier_spacing_khz", "Subcarrier spacing", "kHz", target="subcarrier_spacing_hz",
        min_value=0.0, warn_above=1000, warn_below=0.1, scale=1e3, default="15",
    ),
    FieldRule("parallel_resource_blocks", "Parallel resource blocks", integer=True, min_value=0.0, warn_above=1000, default="1"),
)

CYCLIC_PREFIX_FIELDS = (
    FieldRule("modulation", "Modulation scheme", default="QPSK", choices=_MODULATION_CHOICES),
    FieldRule("subcarriers", "Number of subcarriers", integer=True, min_value=0.0, warn_above=4096, default="64"),
    FieldRule("cyclic_prefix_ratio", "Cyclic prefix ratio", min_value=0.0, min_inclusive=True, max_value=1.0, max_inclusive=False, warn_above=0.25, default="0.25"),
    FieldRule("symbol_rate_ksps", "Symbol rate", "ksymbols/s", target="symbol_rate_sps", min_value=0.0, scale=1e3, default="250"),
    FieldRule("guard_interval_us", "Guard interval", "us", target="guard_interval_s", min_value=0.0, min_inclusive=True, scale=1e-6, default="0"),
)

OUTPUTS = {
    "resource_block_count": ("Number of RBs", "", 1.0),
    "subcarriers_per_block": ("Subcarriers per RB", "", 1.0),
    "resource_elements_per_block": ("REs per RB", "", 1.0),
    "total_resource_elements": ("Total REs", "", 1.0),
    "resource_element_rate": ("Data rate for REs", "Mbps", 1e-6),
    "ofdm_symbol_rate": ("Rate for OFDM symbols", "Mbps", 1e-6),
    "per_block_rate": ("Rate for RBs", "Mbps", 1e-6),
    "max_capacity": ("Maximum capacity", "Mbps", 1e-6),
    "spectral_efficiency": ("Spectral efficiency", "bps/Hz", 1.0),
}

SYMBOL_OUTPUTS = {
    "bits_per_symbol": ("Bits per symbol", "bits", 1.0),
    "coding_rate": ("Coding rate", "", 1.0),
    "useful_symbol_time_s": ("Useful symbol time", "us", 1e6),
    "total_symbol_time_s": ("Total symbol time", "us", 1e6),
    "cyclic_prefix_overhead_pct": ("Cyclic prefix overhead", "%", 1.0),
    "occupied_bandwidth_hz": ("Occupied bandwidth", "MHz", 1e-6),
    "data_rate": ("Data rate", "Mbps", 1e-6),
    "spectral_efficiency": ("Spectral efficiency", "bps/Hz", 1.0),
}


def _resolve_modulation(result: ValidationResult, settings: CalculatorSettings) -> None:
    text = result.values.get("modulation")
    if text is None:
        return
    fallback = Modulation.QPSK if settings.unknown_modulation == "qpsk" else None
    try:
        mod = parse_modulation(text)
    except InputError as e:
        if fallback is None:
            result.error(e)
            return
        result.warn(f"Unknown modulation '{text}', using {fallback.value} parameters", "modulation")
        mod = fallback
    result.values["modulation"] = mod


def _check_resource_block_fit(result: ValidationResult) -> None:
    v = result.values
    if v["bandwidth_per_rb_hz"] > v["total_bandwidth_hz"]:
        result.error(CrossFieldError(
            "Bandwidth per RB cannot exceed total bandwidth",
            ("bandwidth_per_rb_khz", "total_bandwidth_khz"),
        ))
    if v["symbol_duration_s"] > v["slot_duration_s"]:
        result.error(CrossFieldError(
            "Symbol duration cannot exceed slot duration",
            ("symbol_duration_ms", "slot_duration_ms"),
        ))


def _check_guard_interval(result: ValidationResult) -> None:
    v = result.values
    if v["guard_interval_s"] > 1.0 / v["symbol_rate_sps"]:
        result.warn("Guard interval is longer than the useful symbol time", "guard_interval_us")


def validate_ofdm(raw: Mapping[str, RawValue], settings: Optional[CalculatorSettings] = None) -> ValidationResult:
    settings = settings or CalculatorSettings()
    result = parse_fields(raw, RESOURCE_BLOCK_FIELDS)
    _resolve_modulation(result, settings)
    if result.ok:
        _check_resource_block_fit(result)
    if result.ok:
        result.record = OFDMInput(**result.values)
    return result


def validate_ofdm_symbol(raw: Mapping[str, RawValue], settings: Optional[CalculatorSettings] = None) -> ValidationResult:
    settings = settings or CalculatorSettings()
    result = parse_fields(raw, CYCLIC_PREFIX_FIELDS)
    _resolve_modulation(result, settings)
    if result.ok:
        _check_guard_interval(result)
        result.record = OFDMSymbolInput(**result.values)
    return result


def evaluate_ofdm(inp: OFDMInput) -> OFDMOutput:
    bits_per_symbol = modulation_parameters(inp.modulation).bits_per_symbol
    n_rb = inp.total_bandwidth_hz / inp.bandwidth_per_rb_hz
    n_sc = inp.bandwidth_per_rb_hz / inp.subcarrier_spacing_hz
    n_re = inp.symbols_per_slot * n_sc
    total_re = n_re * n_rb
    re_rate = n_re * (bits_per_symbol / inp.symbol_duration_s)
    rb_rate = n_rb * re_rate
    capacity = rb_rate * inp.parallel_resource_blocks
    return OFDMOutput(
        subcarriers_per_block=n_sc,
        resource_elements_per_block=n_re,
        total_resource_elements=total_re,
        resource_element_rate=re_rate,
        ofdm_symbol_rate=re_rate * n_sc,
        per_block_rate=rb_rate,
        resource_block_count=n_rb,
        max_capacity=capacity,
        spectral_efficiency=capacity / inp.total_bandwidth_hz,
    )


def evaluate_ofdm_symbol(inp: OFDMSymbolInput) -> OFDMSymbolOutput:
    params = modulation_parameters(inp.modulation)
    t_useful = 1.0 / inp.symbol_rate_sps
    t_total = t_useful * (1.0 + inp.cyclic_prefix_ratio) + inp.guard_interval_s
    rate = inp.subcarriers * params.bits_per_symbol * params.coding_rate / t_total
    bandwidth = inp.subcarriers / t_useful
    return OFDMSymbolOutput(
        bits_per_symbol=params.bits_per_symbol,
        coding_rate=params.coding_rate,
        useful_symbol_time_s=t_useful,
        total_symbol_time_s=t_total,
        cyclic_prefix_overhead_pct=100.0 * (t_total - t_useful) / t_total,
        occupied_bandwidth_hz=bandwidth,
        data_rate=rate,
        spectral_efficiency=rate / bandwidth,
    )
