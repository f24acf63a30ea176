"""
Optimization Plots
==================
"""

from typing import Optional

import matplotlib.pyplot as plt
from loguru import logger

from ..tuning.mbo import MBOResult


def plot_optimization_history(
    optim_result: MBOResult,
    save_path: Optional[str] = None,
    measure_name: str = "Objective Value",
) -> plt.Figure:
    """
    Plot the evaluated y values with the best-so-far curve and their distribution.

    Design evaluations are marked separately from the sequential iterations.
    The figure is saved when ``save_path`` is given and returned either way.
    """

    op_path = optim_result.op_path
    evals = list(range(1, len(op_path) + 1))
    values = op_path["y"].to_numpy(dtype=float)
    is_design = (op_path["dob"] == 0).to_numpy()

    fig, (ax1, ax2) = plt.subplots(2, 1, figsize=(12, 10))

    ax1.plot(evals, values, "b-", alpha=0.6, label="Evaluations")
    ax1.scatter(
        [e for e, d in zip(evals, is_design) if d], values[is_design],
        color="gray", marker="s", label="Initial design",
    )
    ax1.plot(evals, optim_result.best_so_far(), "r-", linewidth=2, label="Best so far")
    ax1.set_xlabel("Evaluation")
    ax1.set_ylabel(measure_name)
    ax1.set_title("Optimization History")
    ax1.legend()
    ax1.grid(True, alpha=0.3)

    ax2.hist(values, bins=min(30, max(len(values), 1)), alpha=0.7, edgecolor="black")
    ax2.axvline(optim_result.y, color="red", linestyle="--", label=f"Best: {optim_result.y:.4f}")
    ax2.set_xlabel(measure_name)
    ax2.set_ylabel("Frequency")
    ax2.set_title("Distribution of Evaluated Values")
    ax2.legend()
    ax2.grid(True, alpha=0.3)

    fig.tight_layout()

    if save_path:
        fig.savefig(save_path, dpi=300, bbox_inches="tight")
        logger.info(f"📊 Plot saved: {save_path}")

    return fig
