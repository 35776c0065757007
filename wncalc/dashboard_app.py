"""Streamlit dashboard for the wireless calculators.

Renders one tab per calculator with:
- a variant selector where two formula sets exist
- text inputs pre-filled with example values
- the results table, warnings and validation errors
- an optional plain-language explanation (needs OPENROUTER_API_KEY)
- a one-parameter sweep chart

Usage:
    streamlit run wncalc/dashboard_app.py
"""

import logging
import os

import numpy as np
import pandas as pd
import streamlit as st

from wncalc.calculators import CALCULATORS, available_variants, run_calculation, select_variant
from wncalc.config import settings_from_env
from wncalc.errors import InputError
from wncalc.explain import ExplanationClient, explain_result
from wncalc.report import outputs_to_table
from wncalc.sweep import sweep, sweep_figure

_TAB_TITLES = {
    "wireless": "Wireless system",
    "ofdm": "OFDM",
    "link_budget": "Link budget",
    "cellular": "Cellular",
}


def _input_form(calculator: str, spec) -> dict:
    raw = {}
    cols = st.columns(2)
    for i, rule in enumerate(spec.fields):
        key = f"{calculator}:{spec.variant}:{rule.name}"
        col = cols[i % 2]
        if rule.choices:
            index = rule.choices.index(rule.default) if rule.default in rule.choices else 0
            raw[rule.name] = col.selectbox(rule.display_label, rule.choices, index=index, key=key)
        else:
            raw[rule.name] = col.text_input(rule.display_label, value=rule.default, key=key)
    return raw


def _render_sweep(calculator: str, spec, raw: dict, settings) -> None:
    numeric = [r for r in spec.fields if not r.choices]
    with st.expander("Parameter sweep"):
        c1, c2, c3, c4 = st.columns(4)
        field = c1.selectbox("Field", [r.name for r in numeric], key=f"{calculator}:sweep:field")
        start = c2.number_input("From", value=1.0, key=f"{calculator}:sweep:start")
        stop = c3.number_input("To", value=10.0, key=f"{calculator}:sweep:stop")
        steps = c4.number_input("Points", min_value=2, max_value=200, value=10, key=f"{calculator}:sweep:n")
        outputs = st.multiselect(
            "Outputs", list(spec.outputs), default=list(spec.outputs)[-1:], key=f"{calculator}:sweep:y"
        )
        if st.button("Run sweep", key=f"{calculator}:sweep:run") and outputs:
            df = sweep(calculator, raw, field, np.linspace(start, stop, int(steps)), spec.variant, settings)
            st.pyplot(sweep_figure(df, field, outputs))
            bad = df[df["error"] != ""]
            if not bad.empty:
                st.warning(f"{len(bad)} sweep point(s) rejected by validation")
            st.dataframe(df, use_container_width=True)


def render_calculator(calculator: str, settings) -> None:
    variants = available_variants(calculator)
    variant = None
    if len(variants) > 1:
        default = select_variant(calculator, None, settings).variant
        variant = st.radio("Formula set", variants, index=variants.index(default), horizontal=True, key=f"{calculator}:variant")
    spec = select_variant(calculator, variant, settings)
    st.subheader(spec.title)

    raw = _input_form(calculator, spec)
    explain = st.checkbox("Explain the result", key=f"{calculator}:explain")
    if st.button("Calculate", type="primary", key=f"{calculator}:run"):
        try:
            result = run_calculation(calculator, raw, spec.variant, settings)
        except InputError as e:
            for err in e.errors:
                st.error(str(err))
        else:
            table = outputs_to_table(result)
            st.dataframe(pd.DataFrame(table[1:], columns=table[0]), use_container_width=True, hide_index=True)
            for w in result.warnings:
                st.warning(str(w))
            if explain:
                with st.spinner("Requesting explanation..."):
                    explanation = explain_result(ExplanationClient(settings.explanation), result)
                if explanation.available:
                    st.info(explanation.text)
                else:
                    st.warning(explanation.notice)

    _render_sweep(calculator, spec, raw, settings)


def main():
    logging.basicConfig(level=os.environ.get("LOG_LEVEL", "WARNING").upper())
    st.set_page_config(page_title="Wireless Communication Calculator", layout="wide")
    st.title("Wireless Communication Calculator")

    settings = settings_from_env()
    tabs = st.tabs([_TAB_TITLES[c] for c in CALCULATORS])
    for tab, calculator in zip(tabs, CALCULATORS):
        with tab:
            render_calculator(calculator, settings)


if __name__ == "__main__":
    main()
