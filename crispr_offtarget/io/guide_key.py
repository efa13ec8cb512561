"""
Guide key parsing for batch predictions.
"""

from pathlib import Path
from typing import Any, Dict, List
from dataclasses import dataclass, field
import pandas as pd
import logging
import re

from ..core.models import CHROMATIN_ACCESSIBILITY, ChromatinState
from ..utils.sequence import normalize_guide_sequence, validate_guide_sequence

logger = logging.getLogger(__name__)

UNSAFE_ID_PATTERN = re.compile(r"[\\/]")


@dataclass
class GuideSpec:
    """A guide to score.

    Attributes:
        guide_id: Unique guide identifier
        sequence: Guide sequence (normalized to uppercase on load)
        chromatin_state: Chromatin state label for this guide
        metadata: Additional columns from the guide key
    """
    guide_id: str
    sequence: str
    chromatin_state: str = ChromatinState.OPEN.value
    metadata: Dict[str, Any] = field(default_factory=dict)

    def validate(self) -> List[str]:
        """Validate the guide. Returns list of errors."""
        errors = []
        error = validate_guide_sequence(self.sequence)
        if error:
            errors.append(error)
        return errors


def load_guide_key(
    path: Path,
    default_chromatin: str = ChromatinState.OPEN.value,
    validate: bool = True,
) -> List[GuideSpec]:
    """
    Load guides from a guide key TSV file.

    Required columns:
    - guide_id: Unique guide identifier
    - sequence: Guide sequence (20-23 nt)

    Optional columns:
    - chromatin_state: Chromatin state label; blank uses default_chromatin

    Additional columns are stored as metadata.

    Args:
        path: Path to guide key TSV
        default_chromatin: Chromatin state for rows without one
        validate: If True, log sequences that fail validation

    Returns:
        List of GuideSpec objects

    Raises:
        ValueError: If required columns are missing or guide IDs repeat
    """
    df = pd.read_csv(path, sep='\t', dtype=str, keep_default_na=False)

    for column in ('guide_id', 'sequence'):
        if column not in df.columns:
            raise ValueError(f"Guide key must have '{column}' column")

    guide_ids = df['guide_id'].str.strip()

    blank = guide_ids == ''
    if blank.any():
        raise ValueError(f"Guide key has {int(blank.sum())} row(s) with an empty guide_id")

    # IDs become output filename prefixes
    unsafe = sorted(g for g in guide_ids if UNSAFE_ID_PATTERN.search(g))
    if unsafe:
        raise ValueError(f"guide_id values must not contain path separators: {', '.join(unsafe)}")

    duplicated = guide_ids[guide_ids.duplicated()].unique().tolist()
    if duplicated:
        raise ValueError(f"Duplicate guide_id values in guide key: {', '.join(duplicated)}")

    standard_cols = {'guide_id', 'sequence', 'chromatin_state'}

    guides = []
    errors = []

    for _, row in df.iterrows():
        guide_id = str(row['guide_id']).strip()
        sequence = normalize_guide_sequence(str(row['sequence']))
        chromatin = str(row.get('chromatin_state', '')).strip() or default_chromatin

        metadata = {
            k: v for k, v in row.items()
            if k not in standard_cols and v != ''
        }

        guide = GuideSpec(
            guide_id=guide_id,
            sequence=sequence,
            chromatin_state=chromatin,
            metadata=metadata,
        )

        if validate:
            for err in guide.validate():
                errors.append(f"{guide_id}: {err}")
            if chromatin not in CHROMATIN_ACCESSIBILITY:
                logger.warning(f"{guide_id}: unrecognized chromatin state '{chromatin}', using default accessibility")

        guides.append(guide)

    if errors:
        logger.warning(f"Guide key validation found {len(errors)} errors:")
        for err in errors[:10]:
            logger.warning(f"  {err}")
        if len(errors) > 10:
            logger.warning(f"  ... and {len(errors) - 10} more")

    logger.info(f"Loaded {len(guides)} guides from {path}")

    return guides


def create_guide_key_template(output_path: Path):
    """Create a template guide key file.

    Args:
        output_path: Path to write template file
    """
    template = """guide_id\tsequence\tchromatin_state\ttarget_gene
guide_1\tGCTTCGAGCTGATCGTACGG\topen\tEMX1
guide_2\tGAGTCCGAGCAGAAGAAGAA\teuchromatin\tEMX1
guide_3\tGCTGAAGCACTGCACGCCGT\tclosed\tBFP
guide_4\tACGTACGTACGTACGTACGTACG\theterochromatin\tcontrol
"""
    with open(output_path, 'w') as f:
        f.write(template)

    logger.info(f"Created guide key template: {output_path}")
