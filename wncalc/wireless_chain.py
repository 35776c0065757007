"""Baseband signal-chain rate calculator.

Models the transmit chain sampler -> quantizer -> source encoder -> channel
encoder -> interleaver -> burst formatter. Every stage consumes the rate
produced by the previous one:

- sampling_rate       = 2 · min(cutoff, bandwidth)          (Nyquist)
- quantizer_rate      = bits_per_sample · sampling_rate
- source_encoder_rate = Rs · quantizer_rate                  (compression)
- channel_encoder_rate = source_encoder_rate / Rc            (FEC redundancy)
- interleaver_rate    = channel_encoder_rate                 (reordering only)
- burst_format_rate   = overhead_bits / T_segment + interleaver_rate

Rates are in bits/s, sampling rate in samples/s.
"""

from dataclasses import dataclass
from typing import Mapping, Optional

from .config import CalculatorSettings
from .validation import FieldRule, RawValue, ValidationResult, validate


@dataclass(frozen=True)
class WirelessChainInput:
    bandwidth_hz: float
    cutoff_frequency_hz: float
    bits_per_sample: int
    compression_rate: float
    coding_rate: float
    overhead_bits: int
    segment_duration_s: float


@dataclass(frozen=True)
class WirelessChainOutput:
    effective_frequency_hz: float
    sampling_rate: float
    quantizer_rate: float
    source_encoder_rate: float
    channel_encoder_rate: float
    interleaver_rate: float
    burst_format_rate: float


FIELDS = (
    FieldRule("bandwidth", "Bandwidth", "Hz", target="bandwidth_hz", min_value=0.0, max_value=5e9, default="4000"),
    FieldRule("cutoff_frequency", "Cutoff frequency", "Hz", target="cutoff_frequency_hz", min_value=0.0, max_value=5e9, default="3000"),
    FieldRule("bits_per_sample", "Bits per sample", "bits", integer=True, min_value=0.0, warn_above=16, default="8"),
    FieldRule("compression_rate", "Compression rate (Rs)", min_value=0.0, max_value=1.0, default="0.5"),
    FieldRule("coding_rate", "Channel coding rate (Rc)", min_value=0.0, max_value=1.0, default="0.5"),
    FieldRule("overhead_bits", "Overhead bits", "bits", integer=True, min_value=0.0, min_inclusive=True, max_value=1000, default="10"),
    FieldRule(
        "segment_duration_ms", "Segment duration", "ms", target="segment_duration_s",
        min_value=0.0, max_value=10000, warn_below=0.1, scale=1e-3, default="1",
    ),
)

# attribute -> (label, display unit, display scale)
OUTPUTS = {
    "effective_frequency_hz": ("Effective frequency", "Hz", 1.0),
    "sampling_rate": ("Sampling rate", "samples/s", 1.0),
    "quantizer_rate": ("Quantizer rate", "kbps", 1e-3),
    "source_encoder_rate": ("Source encoder rate", "kbps", 1e-3),
    "channel_encoder_rate": ("Channel encoder rate", "kbps", 1e-3),
    "interleaver_rate": ("Interleaver rate", "kbps", 1e-3),
    "burst_format_rate": ("Burst formatting rate", "kbps", 1e-3),
}


def _check_rate_combination(result: ValidationResult) -> None:
    v = result.values
    if v["compression_rate"] < 0.1 and v["coding_rate"] < 0.5:
        result.warn(
            "Very low compression and coding rates together may give an impractical system",
            "compression_rate",
        )


def validate_wireless_chain(
    raw: Mapping[str, RawValue], settings: Optional[CalculatorSettings] = None
) -> ValidationResult:
    result = validate(raw, FIELDS, (_check_rate_combination,))
    if result.ok:
        result.record = WirelessChainInput(**result.values)
    return result


def evaluate_wireless_chain(inp: WirelessChainInput) -> WirelessChainOutput:
    """Propagate the rate through every stage of the chain."""
    effective = min(inp.cutoff_frequency_hz, inp.bandwidth_hz)
    sampling = 2.0 * effective
    quantizer = inp.bits_per_sample * sampling
    source = inp.compression_rate * quantizer
    channel = source / inp.coding_rate
    interleaver = channel
    burst = inp.overhead_bits / inp.segment_duration_s + interleaver
    return WirelessChainOutput(
        effective_frequency_hz=effective,
        sampling_rate=sampling,
        quantizer_rate=quantizer,
        source_encoder_rate=source,
        channel_encoder_rate=channel,
        interleaver_rate=interleaver,
        burst_format_rate=burst,
    )
