"""Tabular views of a calculation for printing or CSV export.

Outputs are shown in display units (kbps for the signal chain, Mbps for OFDM
rates, % for blocking) using each calculator's output table.
"""

import csv
from pathlib import Path
from typing import Any, List

from .calculators import CalculationResult


def _cell(value: Any) -> str:
	if value is None:
		return "n/a"
	if isinstance(value, bool):
		return "yes" if value else "no"
	if isinstance(value, int):
		return str(value)
	if isinstance(value, float):
		return f"{value:.4f}".rstrip("0").rstrip(".") if abs(value) < 1e6 else f"{value:.6g}"
	return str(value)


def outputs_to_table(result: CalculationResult) -> List[List[str]]:
	"""Rows of [quantity, value, unit] for every output."""
	record = result.to_record()
	table = [["quantity", "value", "unit"]]
	for attr, (label, unit, scale) in result.definition.outputs.items():
		value = record[attr]
		if isinstance(value, float) or (isinstance(value, int) and not isinstance(value, bool) and scale != 1.0):
			value = value * scale
		table.append([label, _cell(value), unit])
	return table


def inputs_to_table(result: CalculationResult) -> List[List[str]]:
	"""Rows of [field, value, unit] with values in the unit the user typed."""
	record = result.to_record()
	table = [["field", "value", "unit"]]
	for rule in result.definition.fields:
		value = record[rule.attr]
		if isinstance(value, (int, float)) and not isinstance(value, bool) and rule.scale != 1.0:
			value = value / rule.scale
		table.append([rule.name, _cell(value), rule.unit])
	return table


def record_to_table(result: CalculationResult) -> List[List[str]]:
	"""Two-column table of the flat SI record (attribute, value)."""
	table = [["attribute", "value"]]
	for key, value in result.to_record().items():
		table.append([key, _cell(value)])
	return table


def print_table(table: List[List[str]]) -> None:
	"""Pretty-print a simple table to the console."""
	widths = [max(len(row[i]) for row in table) for i in range(len(table[0]))]
	for i, row in enumerate(table):
		line = "  ".join(cell.ljust(widths[j]) for j, cell in enumerate(row))
		print(line)
		if i == 0:
			print("  ".join("-" * w for w in widths))


def save_table_csv(table: List[List[str]], path: str | Path) -> Path:
	p = Path(path)
	p.parent.mkdir(parents=True, exist_ok=True)
	with p.open("w", newline="", encoding="utf-8") as f:
		writer = csv.writer(f)
		writer.writerows(table)
	return p
