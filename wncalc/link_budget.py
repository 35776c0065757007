"""RF link budget calculators.

Functions:
- compute_eirp_dbm: EIRP from Tx power, antenna gain, and losses.
- received_power_dbm: power at the receiver input after path loss.
- link_margin_db: received power above receiver sensitivity.
- evaluate_link_budget: bidirectional AP <-> client budget with FSPL.
- evaluate_single_link: one-way EIRP budget with a fading margin and an
  estimated range.

Free-space path loss uses the textbook constant (see ``fspl``):
FSPL = 20 log10(d_m) + 20 log10(f_Hz) - 147.56.
"""

from dataclasses import dataclass
from typing import Mapping, Optional

from .config import CalculatorSettings
from .fspl import fspl_db_textbook, invert_fspl_textbook_distance_m
from .validation import FieldRule, RawValue, ValidationResult, validate

AP_EIRP_CEILING_DBM = 80.0
CLIENT_EIRP_CEILING_DBM = 60.0
POOR_MARGIN_DB = -20.0


def compute_eirp_dbm(p_tx_dbm: float, g_tx_dbi: float, l_tx_losses_db: float = 0.0) -> float:
    """Compute EIRP in dBm.

    EIRP [dBm] = P_tx + G_tx − L_tx_losses.
    """
    return p_tx_dbm + g_tx_dbi - l_tx_losses_db


def received_power_dbm(eirp_dbm: float, path_loss_db: float, g_rx_dbi: float, l_rx_losses_db: float = 0.0) -> float:
    """P_rx [dBm] = EIRP − PL + G_rx − L_rx_losses."""
    return eirp_dbm - path_loss_db + g_rx_dbi - l_rx_losses_db


def link_margin_db(p_rx_dbm: float, sensitivity_dbm: float) -> float:
    """Margin in dB. Non-negative means the receiver can decode."""
    return p_rx_dbm - sensitivity_dbm


@dataclass(frozen=True)
class LinkBudgetInput:
    ap_tx_power_dbm: float
    ap_antenna_gain_dbi: float
    ap_rx_sensitivity_dbm: float
    client_tx_power_dbm: float
    client_antenna_gain_dbi: float
    client_rx_sensitivity_dbm: float
    cable_loss_per_side_db: float
    distance_m: float
    frequency_hz: float


@dataclass(frozen=True)
class LinkBudgetOutput:
    free_space_path_loss_db: float
    rx_power_at_client_dbm: float
    rx_power_at_ap_dbm: float
    margin_ap_to_client_db: float
    margin_client_to_ap_db: float
    link_reliable: bool


@dataclass(frozen=True)
class SingleLinkInput:
    tx_power_dbm: float
    tx_antenna_gain_dbi: float
    rx_antenna_gain_dbi: float
    rx_sensitivity_dbm: float
    path_loss_db: float
    fading_margin_db: float


@dataclass(frozen=True)
class SingleLinkOutput:
    eirp_dbm: float
    received_power_dbm: float
    link_margin_db: float
    max_path_loss_db: float
    estimated_range_km: float
    link_reliable: bool


def _power(name, label, **kw):
    return FieldRule(name, label, "dBm", min_value=-50.0, min_inclusive=True, max_value=100.0, **kw)


def _gain(name, label, **kw):
    return FieldRule(name, label, "dBi", min_value=-20.0, min_inclusive=True, max_value=50.0, **kw)


def _sensitivity(name, label, **kw):
    return FieldRule(name, label, "dBm", min_value=-130.0, min_inclusive=True, max_value=-10.0, **kw)


FIELDS = (
    _power("ap_tx_power_dbm", "AP transmit power", warn_above=50, warn_below=0, default="20"),
    _gain("ap_antenna_gain_dbi", "AP antenna gain", warn_above=30, default="6"),
    _sensitivity("ap_rx_sensitivity_dbm", "AP receive sensitivity", warn_above=-50, default="-85"),
    _power("client_tx_power_dbm", "Client transmit power", warn_above=30, default="15"),
    _gain("client_antenna_gain_dbi", "Client antenna gain", warn_above=15, default="2"),
    _sensitivity("client_rx_sensitivity_dbm", "Client receive sensitivity", default="-80"),
    FieldRule("cable_loss_per_side_db", "Cable loss each side", "dB", min_value=0.0, min_inclusive=True, warn_above=20, default="1"),
    FieldRule("distance_km", "Distance", "km", target="distance_m", min_value=0.0, warn_above=1000, warn_below=0.001, scale=1e3, default="0.1"),
    FieldRule("frequency_ghz", "Frequency", "GHz", target="frequency_hz", min_value=0.0, warn_above=100, warn_below=0.1, scale=1e9, default="2.4"),
)

SINGLE_LINK_FIELDS = (
    _power("tx_power_dbm", "Transmit power", warn_above=50, default="20"),
    _gain("tx_antenna_gain_dbi", "Transmit antenna gain", warn_above=30, default="6"),
    _gain("rx_antenna_gain_dbi", "Receive antenna gain", warn_above=30, default="2"),
    _sensitivity("rx_sensitivity_dbm", "Receiver sensitivity", default="-85"),
    FieldRule("path_loss_db", "Path loss", "dB", min_value=0.0, warn_above=200, default="100"),
    FieldRule("fading_margin_db", "Fading margin", "dB", min_value=0.0, min_inclusive=True, warn_above=30, default="10"),
)

OUTPUTS = {
    "free_space_path_loss_db": ("Free space path loss", "dB", 1.0),
    "rx_power_at_client_dbm": ("Client received power", "dBm", 1.0),
    "rx_power_at_ap_dbm": ("AP received power", "dBm", 1.0),
    "margin_ap_to_client_db": ("Link margin AP to client", "dB", 1.0),
    "margin_client_to_ap_db": ("Link margin client to AP", "dB", 1.0),
    "link_reliable": ("Link reliable", "", 1.0),
}

SINGLE_LINK_OUTPUTS = {
    "eirp_dbm": ("EIRP", "dBm", 1.0),
    "received_power_dbm": ("Received power", "dBm", 1.0),
    "link_margin_db": ("Link margin", "dB", 1.0),
    "max_path_loss_db": ("Maximum path loss", "dB", 1.0),
    "estimated_range_km": ("Estimated range", "km", 1.0),
    "link_reliable": ("Link reliable", "", 1.0),
}


def _check_eirp_and_margins(result: ValidationResult) -> None:
    v = result.values
    ap_eirp = compute_eirp_dbm(v["ap_tx_power_dbm"], v["ap_antenna_gain_dbi"])
    client_eirp = compute_eirp_dbm(v["client_tx_power_dbm"], v["client_antenna_gain_dbi"])
    if ap_eirp > AP_EIRP_CEILING_DBM:
        result.warn(f"Total AP EIRP ({ap_eirp:.1f} dBm) is very high - check regulatory limits", "ap_tx_power_dbm")
    if client_eirp > CLIENT_EIRP_CEILING_DBM:
        result.warn(f"Total client EIRP ({client_eirp:.1f} dBm) is very high for mobile devices", "client_tx_power_dbm")

    pl = fspl_db_textbook(v["distance_m"], v["frequency_hz"])
    cable = 2.0 * v["cable_loss_per_side_db"]
    est_ap = ap_eirp - cable - pl + v["client_antenna_gain_dbi"] - v["client_rx_sensitivity_dbm"]
    est_client = client_eirp - cable - pl + v["ap_antenna_gain_dbi"] - v["ap_rx_sensitivity_dbm"]
    if est_ap < POOR_MARGIN_DB or est_client < POOR_MARGIN_DB:
        result.warn("Estimated link margins are very poor - link may not be reliable")


def validate_link_budget(raw: Mapping[str, RawValue], settings: Optional[CalculatorSettings] = None) -> ValidationResult:
    result = validate(raw, FIELDS, (_check_eirp_and_margins,))
    if result.ok:
        result.record = LinkBudgetInput(**result.values)
    return result


def validate_single_link(raw: Mapping[str, RawValue], settings: Optional[CalculatorSettings] = None) -> ValidationResult:
    result = validate(raw, SINGLE_LINK_FIELDS)
    if result.ok:
        result.record = SingleLinkInput(**result.values)
    return result


def evaluate_link_budget(inp: LinkBudgetInput) -> LinkBudgetOutput:
    """Both directions share the path loss and the per-side cable loss."""
    pl = fspl_db_textbook(inp.distance_m, inp.frequency_hz)
    cable = inp.cable_loss_per_side_db

    ap_eirp = compute_eirp_dbm(inp.ap_tx_power_dbm, inp.ap_antenna_gain_dbi, cable)
    rx_client = received_power_dbm(ap_eirp, pl, inp.client_antenna_gain_dbi, cable)
    margin_down = link_margin_db(rx_client, inp.client_rx_sensitivity_dbm)

    client_eirp = compute_eirp_dbm(inp.client_tx_power_dbm, inp.client_antenna_gain_dbi, cable)
    rx_ap = received_power_dbm(client_eirp, pl, inp.ap_antenna_gain_dbi, cable)
    margin_up = link_margin_db(rx_ap, inp.ap_rx_sensitivity_dbm)

    return LinkBudgetOutput(
        free_space_path_loss_db=pl,
        rx_power_at_client_dbm=rx_client,
        rx_power_at_ap_dbm=rx_ap,
        margin_ap_to_client_db=margin_down,
        margin_client_to_ap_db=margin_up,
        link_reliable=margin_down >= 0 and margin_up >= 0,
    )


def evaluate_single_link(inp: SingleLinkInput, reference_frequency_hz: float = 2.4e9) -> SingleLinkOutput:
    """EIRP model; the range is FSPL inverted at ``reference_frequency_hz``."""
    eirp = compute_eirp_dbm(inp.tx_power_dbm, inp.tx_antenna_gain_dbi)
    p_rx = received_power_dbm(eirp, inp.path_loss_db, inp.rx_antenna_gain_dbi) - inp.fading_margin_db
    margin = link_margin_db(p_rx, inp.rx_sensitivity_dbm)
    max_pl = eirp + inp.rx_antenna_gain_dbi - inp.rx_sensitivity_dbm - inp.fading_margin_db
    range_m = invert_fspl_textbook_distance_m(max_pl, reference_frequency_hz)
    return SingleLinkOutput(
        eirp_dbm=eirp,
        received_power_dbm=p_rx,
        link_margin_db=margin,
        max_path_loss_db=max_pl,
        estimated_range_km=range_m / 1e3,
        link_reliable=margin >= 0,
    )
