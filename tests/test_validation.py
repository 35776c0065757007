import pytest

from wncalc.errors import InputError, InvalidNumberError, MissingInputError, RangeError
from wncalc.validation import FieldRule, default_inputs, parse_number, rule_by_name, validate

RULES = (
    FieldRule("rate", "Rate", min_value=0.0, max_value=1.0, default="0.5"),
    FieldRule("bits", "Bits", "bits", integer=True, min_value=0.0, warn_above=16, default="8"),
    FieldRule("duration_ms", "Duration", "ms", target="duration_s", min_value=0.0, scale=1e-3, default="2"),
)


def test_parse_number_accepts_plain_decimals():
    rule = RULES[0]
    assert parse_number("0.25", rule) == 0.25
    assert parse_number(" .5 ", rule) == 0.5
    assert parse_number("1e-3", rule) == 0.001
    assert parse_number(3, rule) == 3.0


@pytest.mark.parametrize("text", ["1,5", "abc", "nan", "inf", "1_000", "0x10"])
def test_parse_number_rejects_non_decimal_text(text):
    with pytest.raises(InvalidNumberError):
        parse_number(text, RULES[0])


def test_parse_number_missing_and_integer_rules():
    with pytest.raises(MissingInputError):
        parse_number("", RULES[0])
    with pytest.raises(MissingInputError):
        parse_number(None, RULES[0])
    assert parse_number("8.0", RULES[1]) == 8
    assert isinstance(parse_number("1e1", RULES[1]), int)
    with pytest.raises(InvalidNumberError):
        parse_number("8.5", RULES[1])


def test_validate_converts_units_once():
    result = validate({"rate": "0.5", "bits": "8", "duration_ms": "2"}, RULES)
    assert result.ok
    assert abs(result.values["duration_s"] - 0.002) < 1e-15
    assert result.values["bits"] == 8
    assert "duration_ms" not in result.values


def test_bounds_are_exclusive_or_inclusive_as_declared():
    assert validate({"rate": "1", "bits": "8", "duration_ms": "2"}, RULES).ok
    result = validate({"rate": "1", "bits": "0", "duration_ms": "2"}, RULES)
    assert [e.field for e in result.errors] == ["bits"]
    assert result.errors[0].bound == "> 0"


def test_zero_on_exclusive_minimum_is_a_range_error():
    result = validate({"rate": "0", "bits": "8", "duration_ms": "2"}, RULES)
    assert not result.ok
    err = result.errors[0]
    assert isinstance(err, RangeError)
    assert err.field == "rate"
    assert err.bound == "> 0"


def test_all_errors_are_collected_before_raising():
    result = validate({"rate": "1.5", "bits": "x", "duration_ms": ""}, RULES)
    assert len(result.errors) == 3
    with pytest.raises(RangeError) as exc:
        result.raise_for_errors()
    assert len(exc.value.errors) == 3
    assert "Rate" in exc.value.summary() and "Duration" in exc.value.summary()
    assert isinstance(exc.value, InputError) and isinstance(exc.value, ValueError)


def test_soft_bounds_warn_without_failing(caplog):
    result = validate({"rate": "0.5", "bits": "24", "duration_ms": "2"}, RULES)
    assert result.ok
    assert [w.field for w in result.warnings] == ["bits"]
    assert "unusually high" in caplog.text


def test_unexpected_field_is_reported_as_warning():
    result = validate({"rate": "0.5", "bits": "8", "duration_ms": "2", "colour": "red"}, RULES)
    assert result.ok
    assert any(w.field == "colour" for w in result.warnings)


def test_defaults_and_lookup():
    assert default_inputs(RULES) == {"rate": "0.5", "bits": "8", "duration_ms": "2"}
    assert rule_by_name(RULES, "duration_s").name == "duration_ms"
    with pytest.raises(KeyError):
        rule_by_name(RULES, "missing")
