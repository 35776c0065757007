"""Cellular coverage and capacity estimator.

Closed-form classroom model:
- cell area          = π R²                                  (km²)
- offered traffic    = subscribers · traffic per user        (Erlang)
- channels per cell  = floor(available channels / reuse factor)
- capacity per cell  = 0.9 · channels per cell               (Erlang)
- subscriber capacity = floor(capacity per cell / traffic per user)
- area efficiency    = subscriber capacity / cell area

The fixed 90 % utilisation stands in for blocking loss; it is not an Erlang-B
inversion. The Erlang-B blocking of the offered traffic and the channel count
needed for a target grade of service are reported alongside for comparison.
The channel count is left out (None) above GOS_TRAFFIC_LIMIT_ERLANG.
"""

import math
from dataclasses import dataclass
from typing import Mapping, Optional

from .config import CalculatorSettings
from .erlang import erlang_b_blocking, min_channels_for_gos
from .validation import FieldRule, RawValue, ValidationResult, validate

UTILIZATION_EFFICIENCY = 0.9
MAX_CHANNELS = 1_000_000
GOS_TRAFFIC_LIMIT_ERLANG = 100_000.0


@dataclass(frozen=True)
class CellularInput:
    subscribers_per_cell: int
    traffic_per_user_erlang: float
    cell_radius_km: float
    frequency_reuse_factor: int
    available_channels: int


@dataclass(frozen=True)
class CellularOutput:
    cell_area_km2: float
    total_traffic_erlang: float
    channels_per_cell: int
    capacity_per_cell_erlang: float
    subscriber_capacity: int
    area_efficiency: float
    spectral_reuse: int
    blocking_probability: float
    channels_for_target_gos: Optional[int]


FIELDS = (
    FieldRule("subscribers_per_cell", "Subscribers per cell", integer=True, min_value=0.0, default="1000"),
    FieldRule(
        "traffic_per_user", "Traffic per user", "Erlang", target="traffic_per_user_erlang",
        min_value=0.0, max_value=1.0, default="0.03",
    ),
    FieldRule("cell_radius_km", "Cell radius", "km", min_value=0.0, warn_above=35, default="1.5"),
    FieldRule("frequency_reuse_factor", "Frequency reuse factor", integer=True, min_value=1.0, min_inclusive=True, default="7"),
    FieldRule(
        "available_channels", "Available channels", integer=True,
        min_value=1.0, min_inclusive=True, max_value=float(MAX_CHANNELS), default="420",
    ),
)

OUTPUTS = {
    "cell_area_km2": ("Coverage area", "km²", 1.0),
    "total_traffic_erlang": ("Offered traffic", "Erlang", 1.0),
    "channels_per_cell": ("Channels per cell", "", 1.0),
    "capacity_per_cell_erlang": ("Cell capacity", "Erlang", 1.0),
    "subscriber_capacity": ("Subscriber capacity", "users", 1.0),
    "area_efficiency": ("Area efficiency", "users/km²", 1.0),
    "spectral_reuse": ("Spectral reuse", "", 1.0),
    "blocking_probability": ("Erlang-B blocking", "%", 100.0),
    "channels_for_target_gos": ("Channels for target GoS", "", 1.0),
}


def is_hexagonal_cluster_size(n: int) -> bool:
    """True if n = i² + ij + j² for non-negative integers i, j.

    Walks the smaller index j and solves the quadratic for i.
    """
    if n < 1:
        return False
    for j in range(math.isqrt(n // 3) + 1):
        disc = 4 * n - 3 * j * j
        root = math.isqrt(disc)
        if root * root == disc and (root - j) % 2 == 0 and root >= j:
            return True
    return False


def _check_channel_plan(result: ValidationResult) -> None:
    v = result.values
    reuse = v["frequency_reuse_factor"]
    if not is_hexagonal_cluster_size(reuse):
        result.warn(f"Reuse factor {reuse} is not a valid hexagonal cluster size (1, 3, 4, 7, 9, 12, ...)", "frequency_reuse_factor")
    offered = v["subscribers_per_cell"] * v["traffic_per_user_erlang"]
    if offered > GOS_TRAFFIC_LIMIT_ERLANG:
        result.warn(
            f"Channels for the target grade of service are not computed above {GOS_TRAFFIC_LIMIT_ERLANG:.0f} Erlang",
            "subscribers_per_cell",
        )
    channels = v["available_channels"] // reuse
    if channels == 0:
        result.warn("Fewer channels than the reuse factor - no channels per cell", "available_channels")
        return
    if offered > channels * UTILIZATION_EFFICIENCY:
        result.warn(
            f"Offered traffic ({offered:.1f} Erlang) exceeds cell capacity ({channels * UTILIZATION_EFFICIENCY:.1f} Erlang)",
            "subscribers_per_cell",
        )


def validate_cellular(raw: Mapping[str, RawValue], settings: Optional[CalculatorSettings] = None) -> ValidationResult:
    result = validate(raw, FIELDS, (_check_channel_plan,))
    if result.ok:
        result.record = CellularInput(**result.values)
    return result


def channels_for_target_gos(traffic_erlang: float, gos: float) -> Optional[int]:
    """Erlang-B channel count for ``gos``, or None above the traffic limit."""
    if traffic_erlang > GOS_TRAFFIC_LIMIT_ERLANG:
        return None
    # A + 40 sqrt(A) channels drive the recursion to float underflow
    limit = int(traffic_erlang + 40.0 * math.sqrt(traffic_erlang)) + 1000
    return min_channels_for_gos(traffic_erlang, gos, max_channels=limit)


def evaluate_cellular(inp: CellularInput, target_gos: float = 0.02) -> CellularOutput:
    area = math.pi * inp.cell_radius_km ** 2
    traffic = inp.subscribers_per_cell * inp.traffic_per_user_erlang
    channels = math.floor(inp.available_channels / inp.frequency_reuse_factor)
    capacity = channels * UTILIZATION_EFFICIENCY
    subscribers = math.floor(capacity / inp.traffic_per_user_erlang)
    return CellularOutput(
        cell_area_km2=area,
        total_traffic_erlang=traffic,
        channels_per_cell=channels,
        capacity_per_cell_erlang=capacity,
        subscriber_capacity=subscribers,
        area_efficiency=subscribers / area,
        spectral_reuse=inp.frequency_reuse_factor,
        blocking_probability=erlang_b_blocking(traffic, channels),
        channels_for_target_gos=channels_for_target_gos(traffic, target_gos),
    )
