import pytest

import wncalc as wn
from wncalc.link_budget import FIELDS, SINGLE_LINK_FIELDS


def _raw(**overrides):
    raw = {
        "ap_tx_power_dbm": "23",
        "ap_antenna_gain_dbi": "8",
        "ap_rx_sensitivity_dbm": "-82",
        "client_tx_power_dbm": "15",
        "client_antenna_gain_dbi": "2",
        "client_rx_sensitivity_dbm": "-90",
        "cable_loss_per_side_db": "1",
        "distance_km": "1",
        "frequency_ghz": "2.4",
    }
    raw.update(overrides)
    return raw


def test_eirp_received_power_and_margin_helpers():
    assert abs(wn.compute_eirp_dbm(20.0, 6.0, 1.0) - 25.0) < 1e-9
    assert abs(wn.received_power_dbm(25.0, 100.0, 2.0, 1.0) - (-74.0)) < 1e-9
    assert abs(wn.link_margin_db(-74.0, -85.0) - 11.0) < 1e-9


def test_fspl_at_one_km_and_2_4_ghz():
    out = wn.run_calculation("link_budget", _raw(), variant="bidirectional").outputs
    assert abs(out.free_space_path_loss_db - 100.04) < 0.01


def test_bidirectional_budget_values():
    out = wn.run_calculation("link_budget", _raw()).outputs
    pl = out.free_space_path_loss_db
    assert abs(out.rx_power_at_client_dbm - (23 + 8 - 1 - pl - 1 + 2)) < 1e-9
    assert abs(out.rx_power_at_ap_dbm - (15 + 2 - 1 - pl - 1 + 8)) < 1e-9
    assert abs(out.margin_ap_to_client_db - (out.rx_power_at_client_dbm + 90)) < 1e-9
    assert abs(out.margin_client_to_ap_db - (out.rx_power_at_ap_dbm + 82)) < 1e-9
    assert out.link_reliable is True


def test_swapping_ap_and_client_swaps_the_margins():
    a = wn.run_calculation("link_budget", _raw()).outputs
    swapped = _raw(
        ap_tx_power_dbm="15", ap_antenna_gain_dbi="2", ap_rx_sensitivity_dbm="-90",
        client_tx_power_dbm="23", client_antenna_gain_dbi="8", client_rx_sensitivity_dbm="-82",
    )
    b = wn.run_calculation("link_budget", swapped).outputs
    assert abs(a.margin_ap_to_client_db - b.margin_client_to_ap_db) < 1e-9
    assert abs(a.margin_client_to_ap_db - b.margin_ap_to_client_db) < 1e-9


def test_link_is_unreliable_when_either_margin_is_negative():
    out = wn.run_calculation("link_budget", _raw(distance_km="50", client_tx_power_dbm="0")).outputs
    assert out.margin_client_to_ap_db < 0
    assert out.link_reliable is False


def test_sensitivity_must_be_within_receiver_range():
    with pytest.raises(wn.RangeError) as exc:
        wn.run_calculation("link_budget", _raw(ap_rx_sensitivity_dbm="0"))
    assert exc.value.field == "ap_rx_sensitivity_dbm"


def test_distance_and_frequency_must_be_positive():
    with pytest.raises(wn.RangeError) as exc:
        wn.run_calculation("link_budget", _raw(distance_km="0", frequency_ghz="-1"))
    assert {e.field for e in exc.value.errors} == {"distance_km", "frequency_ghz"}


def test_very_high_eirp_warns():
    result = wn.validate_link_budget(_raw(ap_tx_power_dbm="60", ap_antenna_gain_dbi="30"))
    assert result.ok
    assert any("EIRP" in w.message for w in result.warnings)


def test_defaults_evaluate():
    result = wn.run_calculation("link_budget", wn.default_inputs(FIELDS))
    assert result.outputs.link_reliable


def test_single_link_eirp_variant():
    raw = wn.default_inputs(SINGLE_LINK_FIELDS)
    out = wn.run_calculation("link_budget", raw, variant="eirp").outputs
    # 20 dBm + 6 dBi; 100 dB path loss; 2 dBi rx; 10 dB fading; -85 dBm sensitivity
    assert abs(out.eirp_dbm - 26.0) < 1e-9
    assert abs(out.received_power_dbm - (-82.0)) < 1e-9
    assert abs(out.link_margin_db - 3.0) < 1e-9
    assert abs(out.max_path_loss_db - 103.0) < 1e-9
    assert out.link_reliable is True
    range_m = out.estimated_range_km * 1e3
    assert abs(wn.fspl_db_textbook(range_m, 2.4e9) - 103.0) < 1e-9


def test_single_link_range_uses_configured_reference_frequency():
    raw = wn.default_inputs(SINGLE_LINK_FIELDS)
    near = wn.run_calculation("link_budget", raw, variant="eirp").outputs
    settings = wn.CalculatorSettings(reference_frequency_hz=5.8e9)
    far = wn.run_calculation("link_budget", raw, variant="eirp", settings=settings).outputs
    assert far.estimated_range_km < near.estimated_range_km
    assert abs(near.estimated_range_km / far.estimated_range_km - 5.8 / 2.4) < 1e-9
