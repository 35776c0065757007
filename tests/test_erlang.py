import time

import pytest

from wncalc.erlang import erlang_b_blocking, min_channels_for_gos


def test_small_erlang_b_values():
    assert erlang_b_blocking(1.0, 0) == 1.0
    assert abs(erlang_b_blocking(1.0, 1) - 0.5) < 1e-12
    assert abs(erlang_b_blocking(2.0, 2) - 0.4) < 1e-12


def test_blocking_decreases_with_channels():
    values = [erlang_b_blocking(10.0, n) for n in range(1, 30)]
    assert all(b2 < b1 for b1, b2 in zip(values, values[1:]))


def test_table_value():
    # Erlang-B table: 10 channels at 2 % blocking carry about 5.08 Erlang
    assert abs(erlang_b_blocking(5.08, 10) - 0.02) < 1e-3


def test_min_channels_for_gos():
    assert min_channels_for_gos(2.0, 0.5) == 2
    n = min_channels_for_gos(30.0, 0.02)
    assert erlang_b_blocking(30.0, n) <= 0.02
    assert erlang_b_blocking(30.0, n - 1) > 0.02


def test_invalid_arguments():
    with pytest.raises(ValueError):
        erlang_b_blocking(-1.0, 3)
    with pytest.raises(ValueError):
        min_channels_for_gos(5.0, 0.0)
    with pytest.raises(ValueError):
        min_channels_for_gos(1000.0, 0.01, max_channels=10)


def test_many_channels_return_quickly():
    start = time.perf_counter()
    assert erlang_b_blocking(5.0, 10 ** 12) == 0.0
    assert erlang_b_blocking(0.0, 10 ** 12) == 0.0
    assert time.perf_counter() - start < 1.0


def test_underflow_cutoff_keeps_small_values():
    # 1 Erlang on 100 channels is about 1e-158, well above the cutoff
    b = erlang_b_blocking(1.0, 100)
    assert 0.0 < b < 1e-150
