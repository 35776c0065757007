"""Input parsing and plausibility checks shared by every calculator.

Each calculator declares its fields as ``FieldRule`` entries. ``validate``:
- parses the raw text of every field (missing / non-numeric / non-integer),
- applies hard bounds (errors) and soft bounds (warnings),
- converts the value to SI units with the rule's ``scale``,
- runs cross-field checks once every field is individually valid.

All hard errors are collected before anything is raised so that the caller can
show the complete list in one pass. Soft warnings are logged and returned but
never change control flow.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from .errors import InputError, InvalidNumberError, MissingInputError, RangeError

logger = logging.getLogger(__name__)

# Plain decimal literal; rejects locale separators ("1,5"), "nan", "inf" and "1_000".
_DECIMAL_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")

RawValue = Union[str, int, float, None]


@dataclass(frozen=True)
class FieldRule:
    """Parsing and bounds for one raw input field.

    Bounds are expressed in the unit the user types (``unit``); ``scale``
    converts the accepted value into the record attribute ``attr``.
    A rule with ``choices`` is a text field resolved by the calculator itself.
    """

    name: str
    label: str
    unit: str = ""
    target: Optional[str] = None
    integer: bool = False
    min_value: Optional[float] = None
    min_inclusive: bool = False
    max_value: Optional[float] = None
    max_inclusive: bool = True
    warn_above: Optional[float] = None
    warn_below: Optional[float] = None
    scale: float = 1.0
    default: str = ""
    choices: Tuple[str, ...] = ()

    @property
    def attr(self) -> str:
        return self.target or self.name

    @property
    def display_label(self) -> str:
        return f"{self.label} ({self.unit})" if self.unit else self.label


@dataclass(frozen=True)
class FieldWarning:
    field: Optional[str]
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass
class ValidationResult:
    """Outcome of validating one raw input mapping.

    ``values`` holds SI-converted values keyed by record attribute. ``record``
    is filled in by the calculator once validation succeeded.
    """

    values: Dict[str, Any] = field(default_factory=dict)
    errors: List[InputError] = field(default_factory=list)
    warnings: List[FieldWarning] = field(default_factory=list)
    record: Any = None

    @property
    def ok(self) -> bool:
        return not self.errors

    def error(self, err: InputError) -> None:
        self.errors.append(err)

    def warn(self, message: str, field_name: Optional[str] = None) -> None:
        logger.warning("%s", message)
        self.warnings.append(FieldWarning(field_name, message))

    def raise_for_errors(self) -> None:
        """Raise the first collected error, carrying every error in ``.errors``."""
        if not self.errors:
            return
        first = self.errors[0]
        first.errors = tuple(self.errors)
        raise first


CrossCheck = Callable[[ValidationResult], None]


def parse_number(raw: RawValue, rule: FieldRule) -> Union[int, float]:
    """Parse one raw value according to ``rule`` (no bounds applied)."""
    if raw is None:
        raise MissingInputError(rule.name, rule.label)
    if isinstance(raw, bool):
        raise InvalidNumberError(rule.name, raw, rule.label)
    if isinstance(raw, (int, float)):
        value = float(raw)
    else:
        text = str(raw).strip()
        if text == "":
            raise MissingInputError(rule.name, rule.label)
        if not _DECIMAL_RE.match(text):
            raise InvalidNumberError(rule.name, text, rule.label)
        value = float(text)
    if not math.isfinite(value):
        raise InvalidNumberError(rule.name, raw, rule.label, reason="not finite")
    if rule.integer:
        if not value.is_integer():
            raise InvalidNumberError(rule.name, raw, rule.label, reason="not a whole number")
        return int(value)
    return value


def check_bounds(value: float, rule: FieldRule, result: ValidationResult) -> bool:
    """Apply hard bounds (recording a RangeError) and soft bounds (warnings).

    Returns True if the value passed the hard bounds.
    """
    lo, hi = rule.min_value, rule.max_value
    if lo is not None:
        below = value < lo if rule.min_inclusive else value <= lo
        if below:
            bound = f">= {lo:g}" if rule.min_inclusive else f"> {lo:g}"
            result.error(RangeError(rule.name, bound, value, rule.label))
            return False
    if hi is not None:
        above = value > hi if rule.max_inclusive else value >= hi
        if above:
            bound = f"<= {hi:g}" if rule.max_inclusive else f"< {hi:g}"
            result.error(RangeError(rule.name, bound, value, rule.label))
            return False
    unit = f" {rule.unit}" if rule.unit else ""
    if rule.warn_above is not None and value > rule.warn_above:
        result.warn(f"{rule.label} is unusually high (> {rule.warn_above:g}{unit})", rule.name)
    elif rule.warn_below is not None and value < rule.warn_below:
        result.warn(f"{rule.label} is unusually low (< {rule.warn_below:g}{unit})", rule.name)
    return True


def parse_fields(raw: Mapping[str, RawValue], rules: Iterable[FieldRule]) -> ValidationResult:
    """Parse and bound-check every field, collecting all errors."""
    result = ValidationResult()
    rules = list(rules)
    known = {r.name for r in rules}
    for key in raw:
        if key not in known:
            result.warn(f"Ignoring unexpected input field '{key}'", key)

    for rule in rules:
        value = raw.get(rule.name)
        if rule.choices:
            text = "" if value is None else str(value).strip()
            if not text:
                result.error(MissingInputError(rule.name, rule.label))
            else:
                result.values[rule.attr] = text
            continue
        try:
            number = parse_number(value, rule)
        except InputError as e:
            result.error(e)
            continue
        if check_bounds(number, rule, result):
            result.values[rule.attr] = number * rule.scale if rule.scale != 1.0 else number
    return result


def validate(
    raw: Mapping[str, RawValue],
    rules: Iterable[FieldRule],
    cross_checks: Iterable[CrossCheck] = (),
) -> ValidationResult:
    """Per-field checks, then cross-field checks if every field passed."""
    result = parse_fields(raw, rules)
    if result.ok:
        for check in cross_checks:
            check(result)
    return result


def rule_by_name(rules: Iterable[FieldRule], name: str) -> FieldRule:
    for r in rules:
        if r.name == name or r.attr == name:
            return r
    raise KeyError(name)


def default_inputs(rules: Iterable[FieldRule]) -> Dict[str, str]:
    """Raw mapping pre-filled with each rule's default text."""
    return {r.name: r.default for r in rules}
