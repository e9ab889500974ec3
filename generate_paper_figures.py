"""
Generate the sensitivity figures of the study: investment thresholds and
violation levels against risk aversion, with and without technological
uncertainty.
"""
import os

import matplotlib.pyplot as plt

from adoption_threshold import Scenario, UncertaintyMode, parametrization, run_sweep

RHO_VALUES = list(range(1, 11))
N_JOBS = 4


def figure_threshold_certain():
    """Figure 1: Threshold vs risk aversion (no uncertainty, Parametrizations 1-3)"""
    print("Generating Figure 1: Thresholds without technological uncertainty...")

    fig, ax = plt.subplots(figsize=(6, 4))
    for number, color in [(1, '#2E86AB'), (2, '#A23B72'), (3, '#F18F01')]:
        base = Scenario(parametrization(number), UncertaintyMode.NONE, i_max=2500)
        df = run_sweep(base, "risk_aversion", RHO_VALUES, n_jobs=N_JOBS)
        ax.plot(df.index, df["threshold_lower"], 'o-', color=color, label=f'Parametrization {number}')
        df.to_csv(f'paper/figure1_parametrization{number}.csv')

    ax.set_xlabel('Risk aversion (ρ)')
    ax.set_ylabel('Investment threshold (Ii*)')
    ax.set_title('Investment Threshold without Technological Uncertainty')
    ax.legend()
    ax.grid(True, alpha=0.3)
    plt.tight_layout()
    plt.savefig('paper/figure1_threshold_certain.png', dpi=300, bbox_inches='tight')
    print("  Saved: paper/figure1_threshold_certain.png")


def figure_threshold_partial():
    """Figure 2: Threshold vs risk aversion under partial uncertainty"""
    print("Generating Figure 2: Thresholds under partial uncertainty...")

    fig, ax = plt.subplots(figsize=(6, 4))
    for alpha, color in [(0.0, '#2E86AB'), (0.25, '#A23B72'), (0.5, '#F18F01'), (0.75, '#C73E1D')]:
        base = Scenario(parametrization(1, efficiency_likelihood=alpha), UncertaintyMode.PARTIAL, i_max=3200)
        df = run_sweep(base, "risk_aversion", RHO_VALUES, n_jobs=N_JOBS)
        ax.plot(df.index, df["threshold_lower"], 'o-', color=color, label=f'α = {alpha}')

    ax.set_xlabel('Risk aversion (ρ)')
    ax.set_ylabel('Investment threshold (Ii*)')
    ax.set_title('Investment Threshold under Partial Uncertainty')
    ax.legend()
    ax.grid(True, alpha=0.3)
    plt.tight_layout()
    plt.savefig('paper/figure2_threshold_partial.png', dpi=300, bbox_inches='tight')
    print("  Saved: paper/figure2_threshold_partial.png")


def figure_violations():
    """Figure 3: Violation levels at the threshold (partial uncertainty, α = 0.5)"""
    print("Generating Figure 3: Violation levels...")

    base = Scenario(parametrization(1), UncertaintyMode.PARTIAL, i_max=2200)
    df = run_sweep(base, "risk_aversion", RHO_VALUES, n_jobs=N_JOBS)

    fig, ax = plt.subplots(figsize=(6, 4))
    ax.plot(df.index, df["old_violation"], 'o-', color='#2E86AB', label='Old technology')
    ax.plot(df.index, df["high_cost_violation"], 's--', color='#A23B72', label='Least efficient new technology')
    ax.plot(df.index, df["low_cost_violation"], '^--', color='#F18F01', label='Most efficient new technology')
    ax.set_xlabel('Risk aversion (ρ)')
    ax.set_ylabel('Violation level (e* - r*)')
    ax.set_title('Violation Levels at the Investment Threshold')
    ax.legend()
    ax.grid(True, alpha=0.3)
    plt.tight_layout()
    plt.savefig('paper/figure3_violations.png', dpi=300, bbox_inches='tight')
    print("  Saved: paper/figure3_violations.png")


def main():
    # Set publication-quality style
    plt.style.use('seaborn-v0_8-paper')
    plt.rcParams['font.size'] = 10
    plt.rcParams['axes.labelsize'] = 11
    plt.rcParams['axes.titlesize'] = 12
    plt.rcParams['legend.fontsize'] = 9

    os.makedirs('paper', exist_ok=True)
    figure_threshold_certain()
    figure_threshold_partial()
    figure_violations()
    print("\nAll figures generated successfully!")


# Sweeps run in worker processes, which re-import this module
if __name__ == "__main__":
    main()
