"""
Core prediction modules for crispr_offtarget.
"""

from .models import (
    CHROMATIN_ACCESSIBILITY,
    DEFAULT_ACCESSIBILITY,
    ChromatinState,
    OffTargetSite,
    PredictionResult,
    SequenceFeatures,
    accessibility_for,
    mismatch_severity,
    risk_category,
)
from .prediction import (
    MAX_REPORTED_SITES,
    predict,
    predict_off_targets,
    rank_sites,
)
from .seeding import (
    DeterministicRNG,
    derive_seed,
    make_key,
)

__all__ = [
    # Seeding
    'derive_seed',
    'make_key',
    'DeterministicRNG',
    # Models
    'ChromatinState',
    'CHROMATIN_ACCESSIBILITY',
    'DEFAULT_ACCESSIBILITY',
    'accessibility_for',
    'risk_category',
    'mismatch_severity',
    'SequenceFeatures',
    'OffTargetSite',
    'PredictionResult',
    # Prediction
    'MAX_REPORTED_SITES',
    'predict_off_targets',
    'predict',
    'rank_sites',
]
