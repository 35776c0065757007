"""Command line front end.

Usage:
    wncalc wireless --defaults
    wncalc ofdm --variant cyclic_prefix --defaults --set subcarriers=128
    wncalc link_budget --set distance_km=1 --set frequency_ghz=2.4 ... --csv out/link.csv
    wncalc cellular --list-fields

Exit status is 2 when the inputs fail validation; every error is printed.
"""

import argparse
import logging
import os
import sys
from pathlib import Path

from .calculators import CALCULATORS, available_variants, run_calculation, select_variant
from .config import CalculatorSettings, load_settings_from_text_file, settings_from_env
from .errors import InputError
from .explain import ExplanationClient, explain_result
from .report import inputs_to_table, outputs_to_table, print_table, save_table_csv
from .validation import default_inputs

logger = logging.getLogger(__name__)


def _parse_assignment(text: str):
    if "=" not in text:
        raise argparse.ArgumentTypeError(f"expected FIELD=VALUE, got {text!r}")
    key, value = text.split("=", 1)
    return key.strip(), value.strip()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="wncalc", description="Wireless communication calculators")
    parser.add_argument("calculator", choices=CALCULATORS)
    parser.add_argument("--variant", type=str, default=None, help="formula variant (default from settings)")
    parser.add_argument(
        "--set", dest="assignments", action="append", type=_parse_assignment, default=[],
        metavar="FIELD=VALUE", help="raw input value; may be repeated",
    )
    parser.add_argument("--defaults", action="store_true", help="start from the built-in example inputs")
    parser.add_argument("--list-fields", action="store_true", help="list input fields and exit")
    parser.add_argument("--config", type=Path, default=None, help="settings file with key: value lines")
    parser.add_argument("--csv", type=Path, default=None, help="save the output table as CSV")
    parser.add_argument("--explain", action="store_true", help="request a plain-language explanation")
    parser.add_argument("--log-level", type=str, default=os.environ.get("LOG_LEVEL", "WARNING"))
    return parser


def _load_settings(config: Path | None) -> CalculatorSettings:
    settings = CalculatorSettings()
    if config is not None:
        settings = load_settings_from_text_file(config, settings)
    return settings_from_env(defaults=settings)


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        settings = _load_settings(args.config)
        spec = select_variant(args.calculator, args.variant, settings)
    except (OSError, ValueError) as e:
        parser.error(str(e))

    if args.list_fields:
        print(f"{spec.title} [{args.calculator}/{spec.variant}]"
              f" (variants: {', '.join(available_variants(args.calculator))})")
        for rule in spec.fields:
            extra = f" one of {', '.join(rule.choices)}" if rule.choices else ""
            print(f"  {rule.name:<28} {rule.display_label}{extra} [default {rule.default}]")
        return 0

    raw = default_inputs(spec.fields) if args.defaults else {}
    raw.update(dict(args.assignments))

    try:
        result = run_calculation(args.calculator, raw, spec.variant, settings)
    except InputError as e:
        for err in e.errors:
            print(f"error: {err}", file=sys.stderr)
        return 2

    print(f"{spec.title} [{spec.variant}]")
    print()
    print_table(inputs_to_table(result))
    print()
    table = outputs_to_table(result)
    print_table(table)
    for w in result.warnings:
        print(f"warning: {w}")

    if args.csv is not None:
        out = save_table_csv(table, args.csv)
        print(f"Saved {len(table) - 1} rows to {out}")

    if args.explain:
        explanation = explain_result(ExplanationClient(settings.explanation), result)
        print()
        print(explanation.text if explanation.available else explanation.notice)
    return 0


if __name__ == "__main__":
    sys.exit(main())
