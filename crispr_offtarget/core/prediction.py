"""
Deterministic off-target prediction engine.

Produces a simulated risk report from a guide sequence and a chromatin state.
The scores come from a toy model (GC content plus chromatin accessibility,
jittered by a seeded generator); they are not a biological prediction.

All random draws in a call come from one DeterministicRNG, in this order:
one draw for the overall risk, four per generated site (mismatches,
chromosome, position, score jitter), and a final draw for sequence
complexity. Reordering any draw changes every value after it.
"""

import logging
import math
import re
from typing import List

from .models import (
    ChromatinLabel,
    OffTargetSite,
    PredictionResult,
    SequenceFeatures,
    accessibility_for,
    chromatin_label,
)
from .seeding import DeterministicRNG, derive_seed, make_key
from ..utils.sequence import InvalidSequenceError, gc_content

logger = logging.getLogger(__name__)

MAX_REPORTED_SITES = 10
MAX_OFF_TARGET_PROBABILITY = 0.95
SITES_PER_UNIT_PROBABILITY = 15
NUM_CHROMOSOMES = 22
GENOME_SPAN = 100_000_000

_ENGINE_ALPHABET = re.compile(r'^[ACGTacgt]+$')


def _check_engine_input(sequence: str):
    """Reject inputs the engine cannot score."""
    if not sequence:
        raise InvalidSequenceError("Guide sequence is empty")
    if not _ENGINE_ALPHABET.match(sequence):
        raise InvalidSequenceError(
            f"Guide sequence contains characters other than A, C, G, T: {sequence}"
        )


def _generate_sites(
    rng: DeterministicRNG,
    num_sites: int,
    accessibility: float,
    label: str,
) -> List[OffTargetSite]:
    """Draw num_sites synthetic sites, four generator values per site."""
    sites = []
    for i in range(num_sites):
        mismatches = math.floor(rng.next() * 4) + 1
        chromosome = f"chr{math.floor(rng.next() * NUM_CHROMOSOMES) + 1}"
        position = math.floor(rng.next() * GENOME_SPAN)
        score = (1 - mismatches * 0.2) * accessibility * (0.7 + rng.next() * 0.3)

        sites.append(OffTargetSite(
            id=i + 1,
            chromosome=chromosome,
            position=position,
            mismatches=mismatches,
            score=score,
            chromatin_state=label,
            accessibility=accessibility * 100,
        ))
    return sites


def rank_sites(sites: List[OffTargetSite], limit: int = MAX_REPORTED_SITES) -> List[OffTargetSite]:
    """Sort sites by descending score and keep the top `limit`.

    The sort is stable, so tied scores stay in generation order.
    """
    return sorted(sites, key=lambda s: s.score, reverse=True)[:limit]


def predict_off_targets(sequence: str, chromatin_state: ChromatinLabel) -> PredictionResult:
    """
    Predict off-target risk for a guide sequence.

    Args:
        sequence: Guide sequence over A/C/G/T (callers validate length and
            normalize case; the seed is derived from the sequence as given)
        chromatin_state: ChromatinState or label; unknown labels use the
            default accessibility

    Returns:
        PredictionResult, identical for identical inputs

    Raises:
        InvalidSequenceError: If the sequence is empty or has foreign characters

    Example:
        >>> result = predict_off_targets("GCTTCGAGCTGATCGTACGG", "open")
        >>> round(result.overall_risk, 2)
        90.09
    """
    _check_engine_input(sequence)
    label = chromatin_label(chromatin_state)

    gc = gc_content(sequence)
    at = 1 - gc
    accessibility = accessibility_for(label)

    seed = derive_seed(make_key(sequence, label))
    rng = DeterministicRNG(seed)
    logger.debug(f"Seed for {sequence}|{label}: {seed}")

    base_risk = 0.3 + 0.1 * gc
    chromatin_adjustment = accessibility * 0.5
    off_target_prob = min(
        MAX_OFF_TARGET_PROBABILITY,
        base_risk + chromatin_adjustment + rng.next() * 0.1,
    )

    num_sites = math.floor(off_target_prob * SITES_PER_UNIT_PROBABILITY) + 1
    sites = _generate_sites(rng, num_sites, accessibility, label)
    ranked = rank_sites(sites)

    # Must come after every per-site draw
    sequence_complexity = 60 + rng.next() * 40

    logger.debug(f"Generated {num_sites} sites, reporting {len(ranked)}")

    return PredictionResult(
        sequence=sequence,
        chromatin_state=label,
        seed=seed,
        overall_risk=off_target_prob * 100,
        features=SequenceFeatures(
            gc_content=gc * 100,
            at_content=at * 100,
            accessibility=accessibility * 100,
            sequence_complexity=sequence_complexity,
        ),
        off_target_sites=tuple(ranked),
    )


# Short alias
predict = predict_off_targets
