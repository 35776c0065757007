"""Modulation schemes and their OFDM lookup parameters.

The table maps each scheme to a nominal coding rate, bits carried per symbol,
and the reference data rate (Mbps) quoted for a 20 MHz 802.11a/g channel.

Notes:
- The set of schemes is closed. Unknown names raise ``RangeError``; the OFDM
  validator decides whether to fall back to QPSK.
- Parsing tolerates case and the usual spellings ("16QAM", "qam16", "16-qam").
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from .errors import RangeError


class Modulation(str, Enum):
    BPSK = "BPSK"
    QPSK = "QPSK"
    QAM16 = "16-QAM"
    QAM64 = "64-QAM"


@dataclass(frozen=True)
class ModulationEntry:
    modulation: Modulation
    coding_rate: float
    bits_per_symbol: int
    reference_data_rate_mbps: float


def default_modulation_table() -> Dict[Modulation, ModulationEntry]:
    return {
        Modulation.BPSK: ModulationEntry(Modulation.BPSK, 0.5, 1, 6.0),
        Modulation.QPSK: ModulationEntry(Modulation.QPSK, 0.5, 2, 12.0),
        Modulation.QAM16: ModulationEntry(Modulation.QAM16, 0.75, 4, 36.0),
        Modulation.QAM64: ModulationEntry(Modulation.QAM64, 0.75, 6, 54.0),
    }


_ALIASES = {
    "BPSK": Modulation.BPSK,
    "QPSK": Modulation.QPSK,
    "16QAM": Modulation.QAM16,
    "QAM16": Modulation.QAM16,
    "64QAM": Modulation.QAM64,
    "QAM64": Modulation.QAM64,
}


def parse_modulation(name: str, field: str = "modulation") -> Modulation:
    """Resolve a scheme name; unknown names raise ``RangeError``."""
    if isinstance(name, Modulation):
        return name
    key = str(name).strip().upper().replace("-", "").replace(" ", "")
    mod = _ALIASES.get(key)
    if mod is not None:
        return mod
    allowed = ", ".join(m.value for m in Modulation)
    raise RangeError(field, f"one of {allowed}", name, "Modulation scheme")


def modulation_parameters(
    mod: Modulation, table: Optional[Dict[Modulation, ModulationEntry]] = None
) -> ModulationEntry:
    if table is None:
        table = default_modulation_table()
    return table[mod]
