"""Erlang-B traffic helpers.

B(A, N) is the probability that a call offered to N trunks carrying A Erlangs
is blocked. It is computed with the stable recursion

    B(A, 0) = 1
    B(A, n) = A·B(A, n-1) / (n + A·B(A, n-1))

which avoids the factorials of the closed form. B decreases with n, so the
recursion stops early once it underflows.
"""

_UNDERFLOW = 1e-300


def erlang_b_blocking(traffic_erlang: float, channels: int) -> float:
    """Blocking probability for ``traffic_erlang`` offered to ``channels`` trunks."""
    if traffic_erlang < 0 or channels < 0:
        raise ValueError("traffic and channel count must be non-negative")
    b = 1.0
    for n in range(1, int(channels) + 1):
        b = traffic_erlang * b / (n + traffic_erlang * b)
        if b < _UNDERFLOW:
            return 0.0
    return b


def min_channels_for_gos(traffic_erlang: float, gos: float, max_channels: int = 100000) -> int:
    """Smallest N with B(A, N) <= gos.

    Raises ValueError when ``max_channels`` is not enough.
    """
    if not 0.0 < gos < 1.0:
        raise ValueError("grade of service must be in (0, 1)")
    if traffic_erlang < 0:
        raise ValueError("traffic must be non-negative")
    b = 1.0
    n = 0
    while b > gos:
        n += 1
        if n > max_channels:
            raise ValueError("grade of service not reachable within max_channels")
        b = traffic_erlang * b / (n + traffic_erlang * b)
    return n
