"""FSPL utilities.

Free-space path loss in the classroom form, with 20 log10(4π/c) folded into a
single constant so link budgets match hand calculations:

    FSPL [dB] = 20 log10(d_m) + 20 log10(f_Hz) - 147.56
"""

import math

FSPL_CONSTANT_DB = 147.56


def fspl_db_textbook(distance_m: float, frequency_hz: float) -> float:
    """FSPL [dB] = 20 log10(d_m) + 20 log10(f_Hz) - 147.56.

    Args:
        distance_m: distance in meters (> 0)
        frequency_hz: frequency in Hz (> 0)
    """
    if distance_m <= 0 or frequency_hz <= 0:
        raise ValueError("distance and frequency must be positive")
    return 20.0 * math.log10(distance_m) + 20.0 * math.log10(frequency_hz) - FSPL_CONSTANT_DB


def invert_fspl_textbook_distance_m(fspl_db_value: float, frequency_hz: float) -> float:
    """Distance at which ``fspl_db_textbook`` equals ``fspl_db_value``."""
    if frequency_hz <= 0:
        raise ValueError("frequency must be positive")
    return 10.0 ** ((fspl_db_value + FSPL_CONSTANT_DB - 20.0 * math.log10(frequency_hz)) / 20.0)
