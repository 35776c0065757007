import math

import pytest

import wncalc as wn
from wncalc.cellular import FIELDS as CELLULAR_FIELDS
from wncalc.wireless_chain import FIELDS


def test_sweep_runs_the_full_pipeline_per_point():
    df = wn.sweep("wireless", wn.default_inputs(FIELDS), "compression_rate", [0.25, 0.5, 1.0, 1.5])
    assert list(df["compression_rate"]) == [0.25, 0.5, 1.0, 1.5]
    rates = df["source_encoder_rate"].tolist()
    # kbps
    assert abs(rates[0] - 12.0) < 1e-9
    assert abs(rates[1] - 24.0) < 1e-9
    assert abs(rates[2] - 48.0) < 1e-9
    assert math.isnan(rates[3])
    assert df["error"].iloc[:3].tolist() == ["", "", ""]
    assert "Compression rate" in df["error"].iloc[3]


def test_sweep_integer_field():
    df = wn.sweep("cellular", wn.default_inputs(CELLULAR_FIELDS), "frequency_reuse_factor", [3, 4, 7])
    assert df["channels_per_cell"].tolist() == [140.0, 105.0, 60.0]


def test_sweep_rejects_text_fields():
    raw = wn.default_inputs(wn.select_variant("ofdm").fields)
    with pytest.raises(ValueError):
        wn.sweep("ofdm", raw, "modulation", [1, 2])


def test_save_sweep_plot(tmp_path):
    df = wn.sweep("wireless", wn.default_inputs(FIELDS), "bits_per_sample", range(4, 17, 4))
    out = wn.save_sweep_plot(df, "bits_per_sample", ["quantizer_rate", "burst_format_rate"], tmp_path / "plots" / "bits.png")
    assert out.exists()
    assert out.stat().st_size > 0
