"""
Utility modules for crispr_offtarget.
"""

from .sequence import (
    MAX_GUIDE_LENGTH,
    MIN_GUIDE_LENGTH,
    InvalidSequenceError,
    check_guide_sequence,
    count_gc,
    gc_content,
    normalize_guide_sequence,
    validate_guide_sequence,
)

__all__ = [
    'MIN_GUIDE_LENGTH',
    'MAX_GUIDE_LENGTH',
    'InvalidSequenceError',
    'normalize_guide_sequence',
    'validate_guide_sequence',
    'check_guide_sequence',
    'count_gc',
    'gc_content',
]
