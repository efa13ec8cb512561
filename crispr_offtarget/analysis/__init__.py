"""
Visualization module for crispr_offtarget.

Charts need the optional plotting dependencies:

    pip install crispr-offtarget[visualization]

Example usage:

    from crispr_offtarget import predict
    from crispr_offtarget.analysis import plot_score_distribution

    result = predict("GCTTCGAGCTGATCGTACGG", "open")
    fig = plot_score_distribution(result)
    fig.savefig('scores.png')
"""

from .plotting import (
    plot_overall_risk,
    plot_score_distribution,
    save_result_plots,
)

__all__ = [
    'plot_overall_risk',
    'plot_score_distribution',
    'save_result_plots',
]
