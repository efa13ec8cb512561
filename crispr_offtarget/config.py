"""
Configuration loading for crispr_offtarget.

A run is described either on the command line or in a YAML file that names
a single guide (`sequence`) or a guide key TSV (`guide_key`).
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List
import logging
import re
import yaml

from .core.models import CHROMATIN_ACCESSIBILITY, ChromatinState
from .io.guide_key import GuideSpec, load_guide_key
from .io.output import OUTPUT_FORMATS
from .utils.sequence import check_guide_sequence

logger = logging.getLogger(__name__)


# Regex to detect if string is pure DNA sequence
DNA_PATTERN = re.compile(r'^[ACGTacgt]+$')


def is_dna_sequence(s: str) -> bool:
    """Check if string is a pure DNA sequence (not a file path)."""
    return bool(s) and bool(DNA_PATTERN.match(s)) and len(s) < 1000


def parse_sequence_input(value: str) -> str:
    """
    Parse sequence input - can be either a DNA string or a FASTA file path.

    Args:
        value: Either a DNA sequence string or path to a FASTA file

    Returns:
        The DNA sequence (uppercase)

    Examples:
        >>> parse_sequence_input("gcttcgagctgatcgtacgg")
        'GCTTCGAGCTGATCGTACGG'
    """
    value = value.strip()

    # Blank input is left for guide validation to reject
    if not value:
        return value

    if is_dna_sequence(value):
        return value.upper()

    path = Path(value)
    if not path.exists():
        raise ValueError(f"Not a DNA sequence and no such file: {value}")
    if not path.is_file():
        raise ValueError(f"Not a DNA sequence or FASTA file: {value}")

    sequence = load_fasta(path)
    if not sequence:
        raise ValueError(f"No sequence found in FASTA file: {value}")
    return sequence


def _read_fasta_sequence(path: str) -> str:
    """Read first sequence from a FASTA file."""
    sequence = []
    with open(path) as f:
        for line in f:
            line = line.strip()
            if line.startswith('>'):
                if sequence:
                    break  # Only read first sequence
                continue
            sequence.append(line.upper())
    return ''.join(sequence)


def load_fasta(path: Path) -> str:
    """Load sequence from FASTA file."""
    return _read_fasta_sequence(str(path))


def _setting(data: dict, key: str, default):
    """Look up a config value, treating a blank YAML entry as unset."""
    value = data.get(key)
    return default if value is None else value


def _int_setting(data: dict, key: str, default: int) -> int:
    value = _setting(data, key, default)
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"'{key}' must be an integer, got {value!r}")


@dataclass
class PredictorConfig:
    """Full run configuration."""
    guides: List[GuideSpec]
    output_dir: Path

    # Default chromatin state for guides that don't name one
    chromatin_state: str = ChromatinState.OPEN.value

    # Report options
    formats: List[str] = field(default_factory=lambda: list(OUTPUT_FORMATS))
    plots: bool = False

    # Processing options
    threads: int = 1

    def __post_init__(self):
        unknown = [f for f in self.formats if f not in OUTPUT_FORMATS]
        if unknown:
            raise ValueError(
                f"Unknown output format(s) {unknown}; choose from {list(OUTPUT_FORMATS)}"
            )
        if self.threads < 1:
            raise ValueError(f"threads must be at least 1, got {self.threads}")

    @classmethod
    def from_yaml(cls, path: Path) -> 'PredictorConfig':
        """Load configuration from YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"Config file must contain a YAML mapping, got {type(data).__name__}")

        chromatin = str(_setting(data, 'chromatin_state', ChromatinState.OPEN.value))
        if chromatin not in CHROMATIN_ACCESSIBILITY:
            logger.warning(f"Unrecognized chromatin state '{chromatin}', using default accessibility")

        if data.get('sequence') and data.get('guide_key'):
            raise ValueError("Config must set either 'sequence' or 'guide_key', not both")

        if data.get('sequence'):
            sequence = check_guide_sequence(parse_sequence_input(str(data['sequence'])))
            guides = [GuideSpec(
                guide_id=str(_setting(data, 'guide_id', 'guide')),
                sequence=sequence,
                chromatin_state=chromatin,
            )]
        elif data.get('guide_key'):
            guide_key = Path(data['guide_key'])
            if not guide_key.is_absolute():
                guide_key = Path(path).parent / guide_key
            guides = load_guide_key(guide_key, default_chromatin=chromatin)
        else:
            raise ValueError("Config must set 'sequence' or 'guide_key'")

        formats = _setting(data, 'formats', list(OUTPUT_FORMATS))
        if isinstance(formats, str):
            formats = [formats]
        elif not isinstance(formats, list):
            raise ValueError(f"'formats' must be a format name or a list, got {formats!r}")

        return cls(
            guides=guides,
            output_dir=Path(_setting(data, 'output_dir', './results')),
            chromatin_state=chromatin,
            formats=list(formats),
            plots=bool(_setting(data, 'plots', False)),
            threads=_int_setting(data, 'threads', 1),
        )


CONFIG_TEMPLATE = '''# Off-target predictor configuration
# Edit this file and run: offtarget run --config {output}

# Either a single guide (DNA sequence or FASTA file path)...
sequence: GCTTCGAGCTGATCGTACGG
guide_id: guide_1

# ...or a guide key TSV (guide_id, sequence, optional chromatin_state)
# guide_key: guides.tsv

# Chromatin state: open, euchromatin, closed or heterochromatin
# (used for guides that do not set their own)
chromatin_state: open

# Output directory
output_dir: ./results

# Report formats: tsv, json, markdown
formats:
  - tsv
  - json
  - markdown

# Charts (requires the visualization extra)
plots: false

# Processing options
threads: 1
'''
