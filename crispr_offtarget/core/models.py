"""
Data models for off-target predictions.

All result objects are frozen dataclasses built fresh for every prediction.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Tuple, Union


class ChromatinState(Enum):
    """Chromatin states offered to users, in order of decreasing accessibility."""
    OPEN = "open"
    EUCHROMATIN = "euchromatin"
    CLOSED = "closed"
    HETEROCHROMATIN = "heterochromatin"

    @property
    def description(self) -> str:
        return CHROMATIN_DESCRIPTIONS[self.value]


CHROMATIN_ACCESSIBILITY = MappingProxyType({
    ChromatinState.OPEN.value: 0.9,
    ChromatinState.EUCHROMATIN.value: 0.7,
    ChromatinState.CLOSED.value: 0.3,
    ChromatinState.HETEROCHROMATIN.value: 0.1,
})

# Any label missing from the table is scored with this value
DEFAULT_ACCESSIBILITY = 0.5

CHROMATIN_DESCRIPTIONS = MappingProxyType({
    ChromatinState.OPEN.value: "Open Chromatin (High Accessibility)",
    ChromatinState.EUCHROMATIN.value: "Euchromatin (Active Genes)",
    ChromatinState.CLOSED.value: "Closed Chromatin",
    ChromatinState.HETEROCHROMATIN.value: "Heterochromatin (Silenced)",
})

ChromatinLabel = Union[ChromatinState, str]


def chromatin_label(state: ChromatinLabel) -> str:
    """Return the plain string label for a ChromatinState or string."""
    if isinstance(state, ChromatinState):
        return state.value
    return state


def accessibility_for(state: ChromatinLabel) -> float:
    """
    Look up the accessibility (0-1) of a chromatin state.

    Lookup is exact and case-sensitive. Unrecognized labels are not an error;
    they fall back to DEFAULT_ACCESSIBILITY.
    """
    return CHROMATIN_ACCESSIBILITY.get(chromatin_label(state), DEFAULT_ACCESSIBILITY)


def risk_category(risk_pct: float) -> str:
    """Categorize an overall risk percentage as 'low', 'moderate' or 'high'."""
    if risk_pct < 30:
        return "low"
    if risk_pct < 60:
        return "moderate"
    return "high"


def mismatch_severity(mismatches: int) -> str:
    """Severity of an off-target site by mismatch count (fewer is worse)."""
    if mismatches <= 1:
        return "high"
    if mismatches <= 2:
        return "moderate"
    return "low"


@dataclass(frozen=True)
class SequenceFeatures:
    """
    Derived sequence and chromatin features, all percentage-scaled.

    Attributes:
        gc_content: Percentage of G/C bases
        at_content: Percentage of A/T bases (100 - gc_content)
        accessibility: Chromatin accessibility as a percentage
        sequence_complexity: Simulated complexity score (60-100)
    """
    gc_content: float
    at_content: float
    accessibility: float
    sequence_complexity: float

    def to_dict(self) -> Dict[str, float]:
        return {
            'gcContent': self.gc_content,
            'atContent': self.at_content,
            'accessibility': self.accessibility,
            'sequenceComplexity': self.sequence_complexity,
        }


@dataclass(frozen=True)
class OffTargetSite:
    """
    A synthetic off-target site.

    Attributes:
        id: 1-based generation index (before ranking and truncation)
        chromosome: Chromosome label, chr1-chr22
        position: 0-based genomic offset
        mismatches: Mismatches against the guide (1-4)
        score: Off-target score, practically within [0, 1]
        chromatin_state: Chromatin state label the prediction was made for
        accessibility: Chromatin accessibility as a percentage
    """
    id: int
    chromosome: str
    position: int
    mismatches: int
    score: float
    chromatin_state: str
    accessibility: float

    @property
    def location(self) -> str:
        return f"{self.chromosome}:{self.position}"

    @property
    def mismatch_severity(self) -> str:
        return mismatch_severity(self.mismatches)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'chromosome': self.chromosome,
            'position': self.position,
            'mismatches': self.mismatches,
            'score': self.score,
            'chromatinState': self.chromatin_state,
            'accessibility': self.accessibility,
        }

    def __repr__(self) -> str:
        return f"OffTargetSite(id={self.id}, {self.location}, mm={self.mismatches}, score={self.score:.3f})"


@dataclass(frozen=True)
class PredictionResult:
    """
    Complete prediction for one guide in one chromatin state.

    Attributes:
        sequence: Guide sequence the prediction was made for
        chromatin_state: Chromatin state label
        seed: Seed derived from the inputs
        overall_risk: Overall off-target probability as a percentage
        features: Derived sequence features
        off_target_sites: Up to 10 sites, sorted by descending score
    """
    sequence: str
    chromatin_state: str
    seed: int
    overall_risk: float
    features: SequenceFeatures
    off_target_sites: Tuple[OffTargetSite, ...] = field(default_factory=tuple)

    @property
    def risk_category(self) -> str:
        return risk_category(self.overall_risk)

    @property
    def top_site(self) -> OffTargetSite:
        return self.off_target_sites[0]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            'sequence': self.sequence,
            'chromatinState': self.chromatin_state,
            'seed': self.seed,
            'overallRisk': self.overall_risk,
            'riskCategory': self.risk_category,
            'features': self.features.to_dict(),
            'offTargetSites': [site.to_dict() for site in self.off_target_sites],
        }
