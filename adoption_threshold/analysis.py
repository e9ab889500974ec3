import matplotlib.pyplot as plt
import pandas as pd


def plot_threshold_sweep(df: pd.DataFrame, title: str = "Investment Threshold", show: bool = True):
    """
    Plots the indifference interval [lower, upper) against the swept parameter
    (a DataFrame from sweep.run_sweep).
    """
    parameter = df.index.name or "parameter"

    fig, ax = plt.subplots(figsize=(10, 6))
    ax.plot(df.index, df["threshold_lower"], 'o-', linewidth=2, markersize=8, label="Lower bound")
    ax.fill_between(df.index, df["threshold_lower"], df["threshold_upper"], alpha=0.3)
    ax.set_xlabel(parameter)
    ax.set_ylabel('Investment cost (Ii)')
    ax.set_title(title)
    ax.grid(True, alpha=0.3)
    if show:
        plt.show()
    return fig


def plot_violation_levels(df: pd.DataFrame, title: str = "Violation Levels at the Threshold", show: bool = True):
    """
    Plots old and new technology violation levels against the swept parameter,
    plus the per-realization levels under partial uncertainty.
    """
    parameter = df.index.name or "parameter"
    series = [
        ("old_violation", "Old technology"),
        ("new_violation", "New technology (expected)"),
        ("high_cost_violation", "Least efficient new technology"),
        ("low_cost_violation", "Most efficient new technology"),
    ]

    fig, ax = plt.subplots(figsize=(10, 6))
    for column, label in series:
        if column in df.columns:
            ax.plot(df.index, df[column], label=label, linewidth=2)
    ax.set_xlabel(parameter)
    ax.set_ylabel('Violation level (e* - r*)')
    ax.set_title(title)
    ax.legend()
    ax.grid(True, alpha=0.3)
    if show:
        plt.show()
    return fig
