"""
Guide sequence utilities.

Validation helpers used by callers of the prediction engine, plus GC content.
"""

import re

MIN_GUIDE_LENGTH = 20
MAX_GUIDE_LENGTH = 23

NUCLEOTIDE_PATTERN = re.compile(r'^[ACGT]+$')


class InvalidSequenceError(ValueError):
    """Raised when a guide sequence cannot be scored."""


def normalize_guide_sequence(seq: str) -> str:
    """Strip surrounding whitespace and uppercase a guide sequence."""
    return seq.strip().upper()


def validate_guide_sequence(seq: str) -> str:
    """Check a normalized guide sequence.

    Returns an empty string if the sequence is valid, otherwise the first
    problem found (empty, then length, then alphabet).
    """
    if not seq:
        return 'Please enter a guide RNA sequence.'
    if len(seq) < MIN_GUIDE_LENGTH or len(seq) > MAX_GUIDE_LENGTH:
        return (
            f'Sequence length must be between {MIN_GUIDE_LENGTH} and '
            f'{MAX_GUIDE_LENGTH} nucleotides.'
        )
    if not NUCLEOTIDE_PATTERN.match(seq):
        return 'Sequence must contain only A, C, G, T.'
    return ''


def check_guide_sequence(seq: str) -> str:
    """Normalize and validate a guide sequence.

    Returns:
        The normalized sequence

    Raises:
        InvalidSequenceError: If the sequence fails validation
    """
    normalized = normalize_guide_sequence(seq)
    error = validate_guide_sequence(normalized)
    if error:
        raise InvalidSequenceError(error)
    return normalized


def count_gc(seq: str) -> int:
    """Count G and C bases (case-insensitive)."""
    return sum(1 for base in seq.upper() if base in 'GC')


def gc_content(seq: str) -> float:
    """GC fraction of a sequence (0.0 to 1.0) over its full length."""
    if not seq:
        raise InvalidSequenceError("Cannot compute GC content of an empty sequence")
    return count_gc(seq) / len(seq)
