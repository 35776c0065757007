"""Parameter sweeps over one raw input field.

Each point runs the full validate -> evaluate pipeline, so out-of-range values
are reported per point instead of aborting the sweep. Output columns hold the
values in display units (see each calculator's output table).
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Mapping, Sequence

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt

from .calculators import run_calculation, select_variant
from .config import CalculatorSettings
from .errors import InputError
from .validation import RawValue, rule_by_name

logger = logging.getLogger(__name__)


def sweep(
    calculator: str,
    base_raw: Mapping[str, RawValue],
    field: str,
    values: Iterable[float],
    variant: str | None = None,
    settings: CalculatorSettings | None = None,
) -> pd.DataFrame:
    """Evaluate ``calculator`` for each value of raw ``field``.

    Returns a DataFrame with the swept field, one column per output attribute
    and an ``error`` column (empty when the point evaluated).
    """
    settings = settings or CalculatorSettings()
    spec = select_variant(calculator, variant, settings)
    rule = rule_by_name(spec.fields, field)
    if rule.choices:
        raise ValueError(f"Cannot sweep text field '{field}'")

    rows = []
    for v in values:
        v = float(v)
        raw = dict(base_raw)
        raw[rule.name] = int(v) if rule.integer and v.is_integer() else v
        row = {rule.name: v}
        try:
            result = run_calculation(calculator, raw, spec.variant, settings)
        except InputError as e:
            logger.info("sweep point %s=%g rejected: %s", rule.name, v, e.summary())
            row.update({attr: np.nan for attr in spec.outputs})
            row["error"] = e.summary()
        else:
            record = result.to_record()
            for attr, (_label, _unit, scale) in spec.outputs.items():
                value = record[attr]
                row[attr] = np.nan if value is None else float(value) * scale
            row["error"] = ""
        rows.append(row)
    return pd.DataFrame(rows)


def sweep_figure(df: pd.DataFrame, x: str, y_columns: Sequence[str], title: str | None = None):
    """Line plot of ``y_columns`` against ``x``; returns the matplotlib Figure."""
    fig, ax = plt.subplots(figsize=(7, 4), dpi=140)
    for col in y_columns:
        ax.plot(df[x].to_numpy(), df[col].to_numpy(), marker="o", label=col)
    ax.set_xlabel(x)
    if len(y_columns) == 1:
        ax.set_ylabel(y_columns[0])
    ax.grid(True, alpha=0.3)
    ax.legend(loc="best")
    if title:
        ax.set_title(title)
    fig.tight_layout()
    return fig


def save_sweep_plot(
    df: pd.DataFrame, x: str, y_columns: Sequence[str], outfile: str | Path, title: str | None = None
) -> Path:
    fig = sweep_figure(df, x, y_columns, title)
    outp = Path(outfile)
    outp.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(outp)
    plt.close(fig)
    return outp
