import pytest

import wncalc as wn
from wncalc.ofdm import CYCLIC_PREFIX_FIELDS, RESOURCE_BLOCK_FIELDS


def _raw(**overrides):
    raw = wn.default_inputs(RESOURCE_BLOCK_FIELDS)
    raw.update(overrides)
    return raw


def _run(**overrides):
    return wn.run_calculation("ofdm", _raw(**overrides), variant="resource_block")


def test_resource_block_counts():
    out = _run().outputs
    assert abs(out.resource_block_count - 1000.0 / 180.0) < 1e-9
    assert abs(out.resource_block_count - 5.56) < 0.01
    assert abs(out.subcarriers_per_block - 12.0) < 1e-9
    assert abs(out.resource_elements_per_block - 84.0) < 1e-9
    assert abs(out.total_resource_elements - 84.0 * 1000.0 / 180.0) < 1e-6


def test_rates_follow_bits_per_symbol():
    out = _run(modulation="QPSK").outputs
    # 84 REs · 2 bits / 66.7 μs
    assert abs(out.resource_element_rate - 84 * 2 / 0.0667e-3) < 1e-3
    assert abs(out.per_block_rate - out.resource_element_rate * out.resource_block_count) < 1e-3
    assert abs(out.spectral_efficiency - out.max_capacity / 1e6) < 1e-12

    q64 = _run(modulation="64-QAM").outputs
    assert abs(q64.max_capacity - 3.0 * out.max_capacity) < 1e-3


def test_capacity_is_linear_in_parallel_blocks():
    one = _run(parallel_resource_blocks="1").outputs
    four = _run(parallel_resource_blocks="4").outputs
    assert abs(four.max_capacity - 4.0 * one.max_capacity) < 1e-3


def test_cross_field_consistency_errors():
    with pytest.raises(wn.CrossFieldError) as exc:
        _run(bandwidth_per_rb_khz="2000")
    assert "bandwidth_per_rb_khz" in exc.value.fields

    result = wn.validate_ofdm(_raw(symbol_duration_ms="1", slot_duration_ms="0.5"))
    assert not result.ok
    assert isinstance(result.errors[0], wn.CrossFieldError)


def test_modulation_aliases():
    assert _run(modulation="16qam").inputs.modulation is wn.Modulation.QAM16
    assert _run(modulation="bpsk").inputs.modulation is wn.Modulation.BPSK


def test_unknown_modulation_is_rejected_by_default():
    with pytest.raises(wn.RangeError) as exc:
        _run(modulation="256-QAM")
    assert exc.value.field == "modulation"


def test_unknown_modulation_falls_back_to_qpsk_when_configured():
    settings = wn.CalculatorSettings(unknown_modulation="qpsk")
    result = wn.run_calculation("ofdm", _raw(modulation="256-QAM"), settings=settings)
    assert result.inputs.modulation is wn.Modulation.QPSK
    assert any(w.field == "modulation" for w in result.warnings)


def test_symbols_per_slot_must_be_whole():
    with pytest.raises(wn.InvalidNumberError):
        _run(symbols_per_slot="7.5")


def test_cyclic_prefix_variant():
    raw = wn.default_inputs(CYCLIC_PREFIX_FIELDS)
    out = wn.run_calculation("ofdm", raw, variant="cyclic_prefix").outputs
    # 64 subcarriers, QPSK rate 1/2, 250 ksym/s, CP 1/4
    assert out.bits_per_symbol == 2
    assert abs(out.useful_symbol_time_s - 4e-6) < 1e-12
    assert abs(out.total_symbol_time_s - 5e-6) < 1e-12
    assert abs(out.cyclic_prefix_overhead_pct - 20.0) < 1e-9
    assert abs(out.occupied_bandwidth_hz - 16e6) < 1e-3
    assert abs(out.data_rate - 12.8e6) < 1e-3
    assert abs(out.spectral_efficiency - 0.8) < 1e-12


def test_cyclic_prefix_ratio_bounds():
    raw = wn.default_inputs(CYCLIC_PREFIX_FIELDS)
    raw["cyclic_prefix_ratio"] = "1"
    with pytest.raises(wn.RangeError):
        wn.run_calculation("ofdm", raw, variant="cyclic_prefix")
    raw["cyclic_prefix_ratio"] = "0"
    out = wn.run_calculation("ofdm", raw, variant="cyclic_prefix").outputs
    assert out.cyclic_prefix_overhead_pct == 0.0


def test_configured_ofdm_model_selects_variant():
    settings = wn.CalculatorSettings(ofdm_model="cyclic_prefix")
    result = wn.run_calculation("ofdm", wn.default_inputs(CYCLIC_PREFIX_FIELDS), settings=settings)
    assert result.variant == "cyclic_prefix"
