"""
Batch prediction pipeline for crispr_offtarget.
"""

from pathlib import Path
from typing import Dict, List, Sequence
from concurrent.futures import ProcessPoolExecutor, as_completed
import logging

from .config import PredictorConfig
from .core.models import PredictionResult
from .core.prediction import predict_off_targets
from .io.guide_key import GuideSpec
from .io.output import (
    OUTPUT_FORMATS, GuideReport, write_batch_report, write_batch_summary_tsv,
    write_prediction_outputs,
)
from .utils.sequence import InvalidSequenceError, check_guide_sequence

logger = logging.getLogger(__name__)


def score_guide(sequence: str, chromatin_state: str) -> PredictionResult:
    """Validate and score one guide. Runs in worker processes."""
    return predict_off_targets(check_guide_sequence(sequence), chromatin_state)


class PredictionPipeline:
    """Scores a set of guides and writes per-guide and batch reports."""

    def __init__(self, config: PredictorConfig):
        self.config = config

    def run(self, guides: List[GuideSpec] = None) -> List[GuideReport]:
        """
        Run predictions for all guides.

        Args:
            guides: Guides to score (uses config.guides if None)

        Returns:
            List of GuideReport objects, in input order
        """
        if guides is None:
            guides = self.config.guides

        self.config.output_dir.mkdir(parents=True, exist_ok=True)

        if self.config.threads > 1 and len(guides) > 1:
            reports = self._score_parallel(guides)
        else:
            reports = self._score_serial(guides)

        guide_dir = self.config.output_dir / "guides"
        for report in reports:
            if report.succeeded:
                self._write_guide_outputs(report, guide_dir)

        summary_file = self.config.output_dir / "batch_summary.tsv"
        write_batch_summary_tsv(reports, summary_file)

        report_file = self.config.output_dir / "batch_report.md"
        write_batch_report(reports, report_file)

        n_failed = sum(1 for r in reports if not r.succeeded)
        if n_failed:
            logger.warning(f"{n_failed}/{len(reports)} guides could not be scored")
        logger.info(f"Pipeline complete. Results in {self.config.output_dir}")

        return reports

    def _score_serial(self, guides: List[GuideSpec]) -> List[GuideReport]:
        reports = []
        for i, guide in enumerate(guides):
            logger.info(f"Scoring guide {i+1}/{len(guides)}: {guide.guide_id}")
            try:
                result = score_guide(guide.sequence, guide.chromatin_state)
                reports.append(GuideReport(guide=guide, result=result))
            except InvalidSequenceError as e:
                logger.error(f"Error scoring {guide.guide_id}: {e}")
                reports.append(GuideReport(guide=guide, error=str(e)))
        return reports

    def _score_parallel(self, guides: List[GuideSpec]) -> List[GuideReport]:
        logger.info(f"Scoring {len(guides)} guides with {self.config.threads} workers")
        reports: Dict[int, GuideReport] = {}

        with ProcessPoolExecutor(max_workers=self.config.threads) as executor:
            futures = {
                executor.submit(score_guide, guide.sequence, guide.chromatin_state): i
                for i, guide in enumerate(guides)
            }
            for future in as_completed(futures):
                i = futures[future]
                guide = guides[i]
                try:
                    reports[i] = GuideReport(guide=guide, result=future.result())
                except InvalidSequenceError as e:
                    logger.error(f"Error scoring {guide.guide_id}: {e}")
                    reports[i] = GuideReport(guide=guide, error=str(e))

        return [reports[i] for i in range(len(guides))]

    def _write_guide_outputs(self, report: GuideReport, guide_dir: Path):
        prefix = f"{report.guide.guide_id}_"
        report.output_files = write_prediction_outputs(
            report.result, guide_dir, prefix=prefix, formats=self.config.formats,
        )
        if self.config.plots:
            from .analysis.plotting import save_result_plots
            report.output_files.update(
                save_result_plots(report.result, guide_dir, prefix=prefix)
            )


def run_predictions(
    guides: List[GuideSpec],
    output_dir: Path,
    formats: Sequence[str] = OUTPUT_FORMATS,
    threads: int = 1,
    plots: bool = False,
) -> List[GuideReport]:
    """
    Convenience function to score guides and write reports.

    Args:
        guides: Guides to score
        output_dir: Output directory
        formats: Report formats for per-guide outputs
        threads: Number of worker processes
        plots: Also save charts (requires the visualization extra)

    Returns:
        List of GuideReport objects
    """
    config = PredictorConfig(
        guides=guides,
        output_dir=Path(output_dir),
        formats=list(formats),
        threads=threads,
        plots=plots,
    )
    return PredictionPipeline(config).run()
