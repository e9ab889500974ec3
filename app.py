"""
Adoption Threshold: Interactive Analysis of Green Technology Adoption under Compliance Risk

- Investment threshold with no, partial or full technological uncertainty
- Optimal actual/declared emissions and violation levels
- Sensitivity sweeps over any model parameter
"""

import sys
import os

# Add the current directory to path for Streamlit Cloud deployment
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

import streamlit as st
import pandas as pd

from adoption_threshold import (
    ExpectedDecision,
    JointDecision,
    Scenario,
    ThresholdModelError,
    ThresholdSearch,
    UncertaintyMode,
    parametrization,
    run_sweep,
)
from adoption_threshold.analysis import plot_threshold_sweep, plot_violation_levels

st.set_page_config(page_title="Adoption Threshold", layout="wide")

st.title("Green Technology Adoption under Compliance Risk")
st.markdown("""
A risk-averse firm pays a tax **τ** on declared emissions and a fine if an audit (probability **π**)
detects under-reporting. It compares its expected disutility

$D = (1-\\pi)(C+T+I)^{\\rho+1} + \\pi(C+T+I+F)^{\\rho+1}$

with the old technology against the new one, and invests when the fixed cost **I** is below the threshold.
""")

# =============================================================================
# Sidebar Configuration
# =============================================================================
st.sidebar.header("Configuration")

preset = st.sidebar.radio("Parametrization (Table 1)", [1, 2, 3])
defaults = parametrization(preset)

mode = st.sidebar.selectbox(
    "Technological uncertainty",
    [m.value for m in UncertaintyMode],
    help="none: efficiency known; partial: learned after investing; full: decide before learning",
)

st.sidebar.subheader("Model Parameters")
pi = st.sidebar.slider("π (Monitoring probability)", 0.05, 1.0, float(defaults.monitoring_probability), 0.05)
tau = st.sidebar.number_input("τ (Tax rate)", value=float(defaults.tax_rate), min_value=1.0, step=1.0)
rho = st.sidebar.slider("ρ (Risk aversion)", 0.0, 10.0, float(defaults.risk_aversion), 1.0)
ff = st.sidebar.number_input("ff (Fixed part of the fine)", value=float(defaults.fixed_fine_component),
                             min_value=0.0, step=5.0)
multiplier = st.sidebar.number_input("Fine multiplier", value=float(defaults.fine_multiplier),
                                     min_value=0.1, step=1.0)
alpha = st.sidebar.slider("α (Likelihood of the least efficient new technology)", 0.0, 1.0, 0.5, 0.05)

with st.sidebar.expander("Advanced Settings"):
    i_max = st.number_input("Maximum investment cost scanned", value=3200, step=100)
    old_cap = st.number_input("Old technology cap", value=100.0, step=5.0)
    new_cap = st.number_input("New technology cap (no uncertainty)", value=50.0, step=5.0)
    high_cap = st.number_input("High-cost new technology cap", value=75.0, step=5.0)
    low_cap = st.number_input("Low-cost new technology cap", value=25.0, step=5.0)


def build_scenario() -> Scenario:
    return Scenario(
        parameters=parametrization(
            preset,
            monitoring_probability=pi,
            tax_rate=tau,
            risk_aversion=rho,
            fixed_fine_component=ff,
            fine_multiplier=multiplier,
            efficiency_likelihood=alpha,
        ),
        mode=mode,
        i_max=int(i_max),
        old_cap=old_cap,
        new_cap=new_cap,
        high_cap=high_cap,
        low_cap=low_cap,
    )


tab1, tab2 = st.tabs(["Investment Threshold", "Sensitivity Analysis"])

with tab1:
    st.subheader("Investment Threshold")
    if st.button("Compute Threshold", type="primary"):
        with st.spinner("Scanning investment costs..."):
            try:
                result = ThresholdSearch(build_scenario()).run()
            except (ThresholdModelError, ValueError) as e:
                st.error(f"{type(e).__name__}: {e}")
                result = None

        if result is not None:
            lower, upper = result.interval
            old = result.old_tech_decision
            new = result.new_tech_decision

            col1, col2, col3 = st.columns(3)
            col1.metric("Indifference interval", f"[{lower}, {upper})")
            col2.metric("Old technology violation", f"{old.violation:.4f}")
            col3.metric("New technology violation", f"{new.violation:.4f}")

            rows = [{"Technology": "old", "Emissions": old.optimal_emissions,
                     "Declared": old.declared_emissions, "Violation": old.violation,
                     "Disutility": old.total_disutility}]
            if isinstance(new, (ExpectedDecision, JointDecision)):
                for d in (new.high_cost, new.low_cost):
                    rows.append({"Technology": d.technology, "Emissions": d.optimal_emissions,
                                 "Declared": d.declared_emissions, "Violation": d.violation,
                                 "Disutility": d.total_disutility})
            else:
                rows.append({"Technology": new.technology, "Emissions": new.optimal_emissions,
                             "Declared": new.declared_emissions, "Violation": new.violation,
                             "Disutility": new.total_disutility})
            st.dataframe(pd.DataFrame(rows).style.format(
                {"Emissions": "{:.4f}", "Declared": "{:.4f}", "Violation": "{:.4f}", "Disutility": "{:.4g}"}
            ), use_container_width=True)

            if isinstance(new, JointDecision):
                st.info(f"Compliance branch: {new.branch.value}, {type(new.cap_variant).__name__}")

with tab2:
    st.subheader("Sensitivity Analysis")
    parameter = st.selectbox("Parameter", ["risk_aversion", "monitoring_probability", "tax_rate",
                                           "fixed_fine_component", "efficiency_likelihood"])
    col1, col2, col3 = st.columns(3)
    start = col1.number_input("From", value=1.0)
    stop = col2.number_input("To", value=5.0)
    n_values = col3.number_input("Values", value=5, min_value=2, step=1)

    if st.button("Run Sweep", type="primary"):
        values = pd.Series(range(int(n_values))) * (stop - start) / (int(n_values) - 1) + start
        with st.spinner(f"Running {int(n_values)} threshold searches..."):
            try:
                df = run_sweep(build_scenario(), parameter, values.tolist())
            except ValueError as e:
                st.error(str(e))
                df = None

        if df is not None:
            st.dataframe(df, use_container_width=True)
            valid = df.dropna(subset=["threshold_lower"])
            if not valid.empty:
                col1, col2 = st.columns(2)
                with col1:
                    st.pyplot(plot_threshold_sweep(valid, show=False))
                with col2:
                    st.pyplot(plot_violation_levels(valid, show=False))
