"""
crispr_offtarget - simulated CRISPR-Cas off-target risk reports.

Deterministic toy model: the same guide and chromatin state always give the
same report. Not a trained model; do not use for experimental decisions.
"""

__version__ = "0.1.0"

from .config import PredictorConfig
from .core.models import (
    ChromatinState,
    OffTargetSite,
    PredictionResult,
    SequenceFeatures,
)
from .core.prediction import predict, predict_off_targets
from .utils.sequence import InvalidSequenceError

__all__ = [
    "predict",
    "predict_off_targets",
    "ChromatinState",
    "OffTargetSite",
    "PredictionResult",
    "SequenceFeatures",
    "InvalidSequenceError",
    "PredictorConfig",
    "__version__",
]
