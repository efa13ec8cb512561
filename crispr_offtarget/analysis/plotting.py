"""
Plotting functions for off-target predictions.

Requires optional dependencies: matplotlib, seaborn
"""

from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from ..core.models import PredictionResult
from ..io.output import sites_to_dataframe


def _check_plotting_deps():
    """Check that plotting dependencies are available."""
    try:
        import matplotlib.pyplot as plt
        import seaborn as sns

        return plt, sns
    except ImportError:
        raise ImportError(
            "Plotting requires matplotlib and seaborn. "
            "Install with: pip install crispr-offtarget[visualization]"
        )


def plot_overall_risk(
    result: PredictionResult,
    figsize: Tuple[float, float] = (3, 4),
    bar_color: str = "#6366f1",
    ax: Optional[Any] = None,
) -> Any:
    """
    Single bar showing the overall off-target probability on a 0-100 scale.

    Args:
        result: Prediction to plot
        figsize: Figure size as (width, height)
        bar_color: Bar color (hex or named color)
        ax: Optional matplotlib Axes to plot on

    Returns:
        matplotlib Figure object
    """
    plt, sns = _check_plotting_deps()

    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.get_figure()

    ax.bar(["Risk"], [result.overall_risk], color=bar_color)
    ax.set_ylim(0, 100)
    ax.set_ylabel("Off-Target Probability (%)")
    ax.set_title(f"{result.overall_risk:.2f}% ({result.risk_category})")
    sns.despine(ax=ax)

    fig.tight_layout()
    return fig


def plot_score_distribution(
    result: PredictionResult,
    figsize: Tuple[float, float] = (8, 5),
    point_color: str = "#6366f1",
    ax: Optional[Any] = None,
) -> Any:
    """
    Scatter plot of off-target score against mismatch count.

    Args:
        result: Prediction to plot
        figsize: Figure size as (width, height)
        point_color: Color for site points
        ax: Optional matplotlib Axes to plot on

    Returns:
        matplotlib Figure object
    """
    plt, sns = _check_plotting_deps()

    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.get_figure()

    df = sites_to_dataframe(result)
    sns.scatterplot(data=df, x='mismatches', y='score', color=point_color, s=60, ax=ax)

    ax.set_xticks(range(1, 5))
    ax.set_xlim(0.5, 4.5)
    ax.set_xlabel("Number of Mismatches")
    ax.set_ylabel("Off-Target Score")
    ax.set_title("Off-Target Score Distribution")
    ax.grid(True, linestyle='--', alpha=0.5)

    fig.tight_layout()
    return fig


def save_result_plots(
    result: PredictionResult,
    output_dir: Path,
    prefix: str = "",
    dpi: int = 150,
) -> Dict[str, Path]:
    """
    Save the risk bar and score distribution charts as PNG files.

    Returns:
        Dict mapping chart name to path
    """
    plt, _ = _check_plotting_deps()

    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    paths = {}
    for name, plot_fn in (('risk_plot', plot_overall_risk),
                          ('score_plot', plot_score_distribution)):
        fig = plot_fn(result)
        path = output_dir / f"{prefix}{name}.png"
        fig.savefig(path, dpi=dpi)
        plt.close(fig)
        paths[name] = path

    return paths
