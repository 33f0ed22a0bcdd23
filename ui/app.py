"""Streamlit probability lookup UI, with a live dice roller.

Run with: PYTHONPATH=. streamlit run ui/app.py
"""

from __future__ import annotations

from random import Random
from typing import Any

import streamlit as st

from l5r.dice import xky_detailed
from l5r.exceptions import ConfigurationError, RollExpressionError, TableLookupError
from l5r.output import DEFAULT_OUTPUT
from l5r.parser import RollExpression, parse_roll_expression
from l5r.records import DiceRoll
from l5r.renderers import TextRenderer, difficulty_label
from l5r.tables import ProbabilityResult, load_tables, query_probability

EXAMPLES = (
    "5k3 tn:25",
    "5k3 u tn:20",
    "7k4 m e tn:30",
    "8k5+10 tn:35 r:2",
    "12k4 tn:30",
)


def run_query(text: str, document: dict[str, Any]) -> tuple[RollExpression, ProbabilityResult]:
    """Parse an expression and look up its odds.

    Raises RollExpressionError when the expression has no TN, since there
    is nothing to compute a success rate against.
    """
    expr = parse_roll_expression(text)
    if expr.tn is None:
        raise RollExpressionError("a target number (tn:N) is required, e.g. 5k3 tn:25")
    result = query_probability(
        document,
        expr.roll,
        expr.keep,
        expr.explosion_mode,
        expr.emphasis,
        expr.tn,
        modifier=expr.modifier,
        raises=expr.raises,
    )
    return expr, result


def run_roll(text: str, rng: Random) -> DiceRoll:
    """Parse an expression and roll it for real.  A TN is optional."""
    return xky_detailed(parse_roll_expression(text), rng)


def main() -> None:
    st.title("Roll & Keep Probabilities")

    path = st.sidebar.text_input("Tables file", DEFAULT_OUTPUT)
    try:
        document = load_tables(path)
    except (OSError, ValueError, TableLookupError) as e:
        st.error(f"Could not load {path}: {e}")
        st.info("Generate tables with: PYTHONPATH=. python tools/generate_probabilities.py")
        return

    st.sidebar.caption(
        f"Version {document['version']}, generated {document['generated_at']}"
    )
    st.sidebar.write("Examples:")
    for example in EXAMPLES:
        st.sidebar.code(example)

    text = st.text_input("Roll expression", "5k3 tn:25")
    if not text:
        return

    if st.button("Roll"):
        try:
            roll = run_roll(text, Random())
        except RollExpressionError as e:
            st.error(str(e))
            return
        st.metric("Total", roll.total)
        st.code("\n".join(TextRenderer().render_roll(roll)))
        st.divider()

    try:
        expr, result = run_query(text, document)
    except (RollExpressionError, ConfigurationError, TableLookupError) as e:
        st.error(str(e))
        return

    rate = result.success_rate
    stats = result.table.statistics

    col_a, col_b = st.columns(2)
    with col_a:
        st.metric("Success Rate", f"{rate * 100:.1f}%")
        st.caption(difficulty_label(rate))
    with col_b:
        st.metric("Average", f"{stats.mean:.1f}")
        st.caption(f"stddev {stats.stddev:.1f}")

    st.divider()
    st.code("\n".join(TextRenderer().render_query(expr, result)))

    st.subheader("P(total >= TN)")
    points = sorted((int(tn), p) for tn, p in result.table.cumulative_probability.items())
    st.line_chart(
        {"TN": [tn for tn, _ in points], "probability": [p for _, p in points]},
        x="TN",
        y="probability",
    )


if __name__ == "__main__":
    main()
