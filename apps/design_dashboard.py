"""
Test Design Dashboard - minimum detectable lift explorer.

Streamlit app with pages: Grid, Single Design.
"""

import sys
from pathlib import Path

# Add project root
ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT))

import streamlit as st

from src.lift_planner.config import (
    DEFAULT_AUDIENCE_SIZES,
    DEFAULT_BASELINE_RATES,
    DEFAULT_POWER,
    DEFAULT_SIGNIFICANCE_LEVEL,
    DEFAULT_TEST_PROPORTIONS,
)
from src.lift_planner.grid import evaluate, evaluate_design
from src.lift_planner.report import lift_table, to_frame
from src.lift_planner.schema import Alternative, DesignParameters, RowStatus

st.set_page_config(page_title="Test Design Studio", page_icon="📐", layout="wide")


def _parse_list(text, cast):
    return [cast(v.strip()) for v in text.split(",") if v.strip()]


def main():
    st.title("📐 Test Design Studio")
    st.caption("Minimum detectable lift for two-proportion tests")

    with st.sidebar:
        alpha = st.number_input("Significance level (α)", 0.01, 0.5, DEFAULT_SIGNIFICANCE_LEVEL, 0.01)
        power = st.number_input("Power", 0.5, 0.99, DEFAULT_POWER, 0.05)
        alternative = st.selectbox("Alternative", [a.value for a in Alternative])

    tab1, tab2 = st.tabs(["Grid", "Single Design"])

    with tab1:
        st.header("Design Grid")
        sizes_text = st.text_input("Audience sizes", ", ".join(str(v) for v in DEFAULT_AUDIENCE_SIZES))
        props_text = st.text_input("Test proportions", ", ".join(str(v) for v in DEFAULT_TEST_PROPORTIONS))
        rates_text = st.text_input("Baseline rates", ", ".join(str(v) for v in DEFAULT_BASELINE_RATES))
        try:
            results = evaluate(
                _parse_list(sizes_text, int),
                _parse_list(props_text, float),
                _parse_list(rates_text, float),
                significance_level=alpha,
                power=power,
                alternative=alternative,
            )
        except ValueError as e:
            st.error(str(e))
            return

        frame = to_frame(results)
        for baseline in frame["baseline_rate"].unique():
            st.subheader(f"Baseline {baseline:.0%}")
            st.dataframe(lift_table(frame, baseline).style.format("{:.1%}", na_rep="n/a"), use_container_width=True)

        failed = frame[frame["status"] == RowStatus.FAILED.value]
        if not failed.empty:
            st.warning(f"{len(failed)} designs could not be evaluated")
            st.dataframe(failed[["audience_size", "test_proportion", "baseline_rate", "error_type", "error"]])

    with tab2:
        st.header("Single Design")
        audience = st.number_input("Audience size", 100, 10_000_000, 10000, 1000)
        split = st.slider("Test proportion", 0.05, 0.95, 0.5, 0.05)
        baseline = st.number_input("Baseline rate", 0.001, 0.999, 0.12, 0.01)
        row = evaluate_design(DesignParameters(
            audience_size=int(audience),
            test_proportion=split,
            baseline_rate=baseline,
            significance_level=alpha,
            power=power,
            alternative=Alternative(alternative),
        ))
        if row.status == RowStatus.FAILED:
            st.error(f"{row.error_type}: {row.error}")
        else:
            c1, c2, c3 = st.columns(3)
            c1.metric("Test / Control N", f"{row.test_n:,.0f} / {row.control_n:,.0f}")
            c2.metric("Required rate", f"{row.test_rate:.2%}")
            c3.metric("Lift needed", f"{row.lift_needed:.1%}")
            st.caption(f"Cohen's h = {row.effect_size:.4f}")
            if row.status == RowStatus.DEGRADED:
                st.warning(row.error)


if __name__ == "__main__":
    main()
