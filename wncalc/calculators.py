"""Calculator registry and the validate -> evaluate pipeline.

Every calculator is registered with one or more named formula variants:

- wireless:    "chain"
- ofdm:        "resource_block" | "cyclic_prefix"
- link_budget: "bidirectional" | "eirp"
- cellular:    "erlang"

``run_calculation`` validates the raw mapping, raises the first input error
(carrying all of them) and otherwise evaluates the record and packages it into
a ``CalculationResult``.
"""

import logging
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from .cellular import FIELDS as CELLULAR_FIELDS
from .cellular import OUTPUTS as CELLULAR_OUTPUTS
from .cellular import evaluate_cellular, validate_cellular
from .config import CalculatorSettings
from .link_budget import FIELDS as LINK_BUDGET_FIELDS
from .link_budget import OUTPUTS as LINK_BUDGET_OUTPUTS
from .link_budget import (
    SINGLE_LINK_FIELDS,
    SINGLE_LINK_OUTPUTS,
    evaluate_link_budget,
    evaluate_single_link,
    validate_link_budget,
    validate_single_link,
)
from .ofdm import OUTPUTS as OFDM_OUTPUTS
from .ofdm import (
    CYCLIC_PREFIX_FIELDS,
    RESOURCE_BLOCK_FIELDS,
    SYMBOL_OUTPUTS,
    evaluate_ofdm,
    evaluate_ofdm_symbol,
    validate_ofdm,
    validate_ofdm_symbol,
)
from .validation import FieldRule, FieldWarning, RawValue, ValidationResult
from .wireless_chain import FIELDS as WIRELESS_FIELDS
from .wireless_chain import OUTPUTS as WIRELESS_OUTPUTS
from .wireless_chain import evaluate_wireless_chain, validate_wireless_chain

logger = logging.getLogger(__name__)

CALCULATORS = ("wireless", "ofdm", "link_budget", "cellular")

# attribute -> (label, display unit, display scale)
OutputSpec = Dict[str, Tuple[str, str, float]]


@dataclass(frozen=True)
class CalculatorVariant:
    calculator: str
    variant: str
    title: str
    fields: Tuple[FieldRule, ...]
    validate: Callable[[Mapping[str, RawValue], Optional[CalculatorSettings]], ValidationResult]
    evaluate: Callable[[Any, CalculatorSettings], Any]
    outputs: OutputSpec


_REGISTRY: Dict[Tuple[str, str], CalculatorVariant] = {}


def register(variant: CalculatorVariant) -> CalculatorVariant:
    _REGISTRY[(variant.calculator, variant.variant)] = variant
    return variant


register(CalculatorVariant(
    "wireless", "chain", "Wireless communication system",
    WIRELESS_FIELDS, validate_wireless_chain,
    lambda inp, s: evaluate_wireless_chain(inp), WIRELESS_OUTPUTS,
))
register(CalculatorVariant(
    "ofdm", "resource_block", "OFDM resource-block capacity",
    RESOURCE_BLOCK_FIELDS, validate_ofdm,
    lambda inp, s: evaluate_ofdm(inp), OFDM_OUTPUTS,
))
register(CalculatorVariant(
    "ofdm", "cyclic_prefix", "OFDM symbol rate with cyclic prefix",
    CYCLIC_PREFIX_FIELDS, validate_ofdm_symbol,
    lambda inp, s: evaluate_ofdm_symbol(inp), SYMBOL_OUTPUTS,
))
register(CalculatorVariant(
    "link_budget", "bidirectional", "Bidirectional AP/client link budget",
    LINK_BUDGET_FIELDS, validate_link_budget,
    lambda inp, s: evaluate_link_budget(inp), LINK_BUDGET_OUTPUTS,
))
register(CalculatorVariant(
    "link_budget", "eirp", "Single link EIRP budget",
    SINGLE_LINK_FIELDS, validate_single_link,
    lambda inp, s: evaluate_single_link(inp, s.reference_frequency_hz), SINGLE_LINK_OUTPUTS,
))
register(CalculatorVariant(
    "cellular", "erlang", "Cellular coverage and capacity",
    CELLULAR_FIELDS, validate_cellular,
    lambda inp, s: evaluate_cellular(inp, s.target_grade_of_service), CELLULAR_OUTPUTS,
))


def available_variants(calculator: str) -> List[str]:
    if calculator not in CALCULATORS:
        raise ValueError(f"Unknown calculator: {calculator}")
    return [v for (c, v) in _REGISTRY if c == calculator]


def default_variant(calculator: str, settings: Optional[CalculatorSettings] = None) -> str:
    settings = settings or CalculatorSettings()
    if calculator == "ofdm":
        return settings.ofdm_model
    if calculator == "link_budget":
        return settings.link_budget_model
    return available_variants(calculator)[0]


def select_variant(
    calculator: str, variant: Optional[str] = None, settings: Optional[CalculatorSettings] = None
) -> CalculatorVariant:
    """Look up a registered variant; the configured default when ``variant`` is None."""
    name = variant or default_variant(calculator, settings)
    try:
        return _REGISTRY[(calculator, name)]
    except KeyError:
        raise ValueError(
            f"Unknown variant '{name}' for {calculator} (choose from {', '.join(available_variants(calculator))})"
        ) from None


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


@dataclass(frozen=True)
class CalculationResult:
    calculator: str
    variant: str
    inputs: Any
    outputs: Any
    warnings: Tuple[FieldWarning, ...] = ()

    @property
    def definition(self) -> CalculatorVariant:
        return _REGISTRY[(self.calculator, self.variant)]

    def to_record(self) -> Dict[str, Any]:
        """Flat mapping of every input and output attribute (SI units)."""
        record = {k: _plain(v) for k, v in asdict(self.inputs).items()}
        record.update({k: _plain(v) for k, v in asdict(self.outputs).items()})
        return record


def run_calculation(
    calculator: str,
    raw: Mapping[str, RawValue],
    variant: Optional[str] = None,
    settings: Optional[CalculatorSettings] = None,
) -> CalculationResult:
    """Validate ``raw`` and evaluate it with the selected formula variant.

    Raises:
        InputError: first validation error, with all of them in ``.errors``.
        ValueError: unknown calculator or variant.
    """
    settings = settings or CalculatorSettings()
    spec = select_variant(calculator, variant, settings)
    result = spec.validate(raw, settings)
    result.raise_for_errors()
    outputs = spec.evaluate(result.record, settings)
    logger.debug("%s/%s: %s -> %s", calculator, spec.variant, result.record, outputs)
    return CalculationResult(calculator, spec.variant, result.record, outputs, tuple(result.warnings))
