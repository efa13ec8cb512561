"""
Output generation for off-target predictions.
"""

from pathlib import Path
from typing import Dict, List, Optional, Sequence
from dataclasses import dataclass, field
import json
import logging

import numpy as np
import pandas as pd

from ..core.models import PredictionResult
from .guide_key import GuideSpec

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ('tsv', 'json', 'markdown')

DISCLAIMER = (
    "This report was generated by a deterministic toy model using GC content "
    "and a simple chromatin accessibility score, not a trained model. "
    "Do not use these results for experimental or clinical decision-making."
)

FEATURE_LABELS = {
    'gcContent': 'GC Content',
    'atContent': 'AT Content',
    'accessibility': 'Accessibility',
    'sequenceComplexity': 'Sequence Complexity',
}


@dataclass
class GuideReport:
    """Outcome of scoring one guide in a batch."""
    guide: GuideSpec
    result: Optional[PredictionResult] = None
    error: Optional[str] = None
    output_files: Dict[str, Path] = field(default_factory=dict)

    @property
    def succeeded(self) -> bool:
        return self.result is not None


def sites_to_dataframe(result: PredictionResult) -> pd.DataFrame:
    """One row per reported off-target site, in rank order."""
    rows = []
    for rank, site in enumerate(result.off_target_sites, start=1):
        rows.append({
            'rank': rank,
            'site_id': site.id,
            'chromosome': site.chromosome,
            'position': site.position,
            'location': site.location,
            'mismatches': site.mismatches,
            'severity': site.mismatch_severity,
            'score': site.score,
            'chromatin_state': site.chromatin_state,
            'accessibility_pct': site.accessibility,
        })
    return pd.DataFrame(rows)


def write_sites_tsv(result: PredictionResult, output_path: Path) -> Path:
    """
    Write the ranked off-target sites to a TSV file.

    Args:
        result: Prediction to write
        output_path: Path for output TSV

    Returns:
        Path to written file
    """
    df = sites_to_dataframe(result)
    df.to_csv(output_path, sep='\t', index=False)

    logger.info(f"Wrote {len(df)} off-target sites to {output_path}")

    return output_path


def write_result_json(result: PredictionResult, output_path: Path) -> Path:
    """Write the full prediction as JSON."""
    with open(output_path, 'w') as f:
        json.dump(result.to_dict(), f, indent=2)

    logger.info(f"Wrote prediction JSON to {output_path}")

    return output_path


def format_result_summary(result: PredictionResult) -> str:
    """Human-readable summary of a prediction for the terminal."""
    lines = [
        "=" * 60,
        "=== Off-Target Prediction (simulated) ===",
        "=" * 60,
        "",
        f"Guide sequence: {result.sequence} ({len(result.sequence)} nt)",
        f"Chromatin state: {result.chromatin_state}",
        f"Overall risk: {result.overall_risk:.2f}% ({result.risk_category})",
        "",
        "Features:",
    ]
    for key, value in result.features.to_dict().items():
        lines.append(f"  - {FEATURE_LABELS[key]}: {value:.2f}%")

    lines.append("")
    lines.append(f"Predicted off-target sites (top {len(result.off_target_sites)}):")
    for rank, site in enumerate(result.off_target_sites, start=1):
        lines.append(
            f"  {rank:>2}. {site.location:<16} mismatches={site.mismatches} "
            f"score={site.score:.3f} accessibility={site.accessibility:.1f}%"
        )
    lines.append("")
    return "\n".join(lines)


def write_summary_report(result: PredictionResult, output_path: Path) -> Path:
    """
    Generate a report for one prediction in markdown format.

    Args:
        result: Prediction to report
        output_path: Path for output markdown file

    Returns:
        Path to written file
    """
    with open(output_path, 'w') as f:
        f.write("# Off-Target Risk Report\n\n")

        f.write("## Input\n\n")
        f.write(f"- **Guide sequence:** `{result.sequence}` ({len(result.sequence)} nt)\n")
        f.write(f"- **Chromatin state:** {result.chromatin_state}\n\n")

        f.write("## Overall Risk\n\n")
        f.write(f"- **Off-target probability:** {result.overall_risk:.2f}% "
                f"({result.risk_category})\n\n")

        f.write("## Sequence & Chromatin Features\n\n")
        for key, value in result.features.to_dict().items():
            f.write(f"- **{FEATURE_LABELS[key]}:** {value:.2f}%\n")
        f.write("\n")

        f.write(f"## Predicted Off-Target Sites (Top {len(result.off_target_sites)})\n\n")
        f.write("| Rank | Location | Mismatches | Score | Accessibility |\n")
        f.write("|------|----------|------------|-------|---------------|\n")
        for rank, site in enumerate(result.off_target_sites, start=1):
            f.write(f"| {rank} | {site.location} | {site.mismatches} | "
                    f"{site.score:.3f} | {site.accessibility:.1f}% |\n")
        f.write("\n")

        f.write("## About This Report\n\n")
        f.write(f"{DISCLAIMER}\n")

    logger.info(f"Wrote summary report to {output_path}")

    return output_path


def write_prediction_outputs(
    result: PredictionResult,
    output_dir: Path,
    prefix: str = "",
    formats: Sequence[str] = OUTPUT_FORMATS,
) -> Dict[str, Path]:
    """
    Write all requested report files for one prediction.

    Args:
        result: Prediction to write
        output_dir: Directory for output files
        prefix: Optional prefix for output filenames
        formats: Any of 'tsv', 'json', 'markdown'

    Returns:
        Dict mapping format to path
    """
    unknown = set(formats) - set(OUTPUT_FORMATS)
    if unknown:
        raise ValueError(f"Unknown output format(s): {', '.join(sorted(unknown))}")

    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    paths = {}
    if 'tsv' in formats:
        paths['tsv'] = write_sites_tsv(result, output_dir / f"{prefix}off_target_sites.tsv")
    if 'json' in formats:
        paths['json'] = write_result_json(result, output_dir / f"{prefix}prediction.json")
    if 'markdown' in formats:
        paths['markdown'] = write_summary_report(result, output_dir / f"{prefix}report.md")

    return paths


def reports_to_dataframe(reports: List[GuideReport]) -> pd.DataFrame:
    """One row per guide with overall risk, features and top site."""
    rows = []
    for r in reports:
        row = {
            'guide_id': r.guide.guide_id,
            'sequence': r.guide.sequence,
            'chromatin_state': r.guide.chromatin_state,
        }
        if r.result is not None:
            features = r.result.features
            top = r.result.top_site
            row.update({
                'overall_risk_pct': round(r.result.overall_risk, 2),
                'risk_category': r.result.risk_category,
                'gc_content_pct': round(features.gc_content, 2),
                'accessibility_pct': round(features.accessibility, 2),
                'sequence_complexity': round(features.sequence_complexity, 2),
                'n_sites': len(r.result.off_target_sites),
                'top_site': top.location,
                'top_site_mismatches': top.mismatches,
                'top_site_score': round(top.score, 4),
                'error': '',
            })
        else:
            row['error'] = r.error or 'unknown error'

        row.update(r.guide.metadata)
        rows.append(row)

    return pd.DataFrame(rows)


def write_batch_summary_tsv(reports: List[GuideReport], output_path: Path) -> Path:
    """
    Write one summary row per guide to a TSV file.

    Args:
        reports: List of GuideReport objects
        output_path: Path for output TSV

    Returns:
        Path to written file
    """
    df = reports_to_dataframe(reports)
    df.to_csv(output_path, sep='\t', index=False)

    logger.info(f"Wrote batch summary for {len(df)} guides to {output_path}")

    return output_path


def write_batch_report(reports: List[GuideReport], output_path: Path) -> Path:
    """
    Generate a batch summary report in markdown format.

    Args:
        reports: List of GuideReport objects
        output_path: Path for output markdown file

    Returns:
        Path to written file
    """
    scored = [r for r in reports if r.succeeded]
    failed = [r for r in reports if not r.succeeded]

    with open(output_path, 'w') as f:
        f.write("# Off-Target Batch Summary\n\n")

        f.write("## Overview\n\n")
        f.write(f"- **Guides submitted:** {len(reports)}\n")
        f.write(f"- **Guides scored:** {len(scored)}\n")
        f.write(f"- **Guides rejected:** {len(failed)}\n\n")

        if scored:
            risks = np.array([r.result.overall_risk for r in scored])
            f.write("## Overall Risk\n\n")
            f.write(f"- **Mean:** {risks.mean():.2f}%\n")
            f.write(f"- **Median:** {np.median(risks):.2f}%\n")
            f.write(f"- **Max:** {risks.max():.2f}%\n")
            f.write(f"- **Min:** {risks.min():.2f}%\n\n")

            f.write("## Guides by Risk (lowest first)\n\n")
            f.write("| Guide | Chromatin | Risk % | Category | Top Site | Top Score |\n")
            f.write("|-------|-----------|--------|----------|----------|-----------|\n")
            for r in sorted(scored, key=lambda r: r.result.overall_risk):
                top = r.result.top_site
                f.write(f"| {r.guide.guide_id} | {r.guide.chromatin_state} | "
                        f"{r.result.overall_risk:.2f} | {r.result.risk_category} | "
                        f"{top.location} | {top.score:.3f} |\n")
            f.write("\n")

        if failed:
            f.write("## Rejected Guides\n\n")
            for r in failed:
                f.write(f"- {r.guide.guide_id}: {r.error}\n")
            f.write("\n")

        f.write(f"{DISCLAIMER}\n")

    logger.info(f"Wrote batch report to {output_path}")

    return output_path
