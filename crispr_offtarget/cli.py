"""
Command-line interface for crispr_offtarget.
"""

import json
import logging
import sys
from pathlib import Path

import click

from . import __version__
from .config import CONFIG_TEMPLATE, parse_sequence_input
from .core.models import CHROMATIN_ACCESSIBILITY, DEFAULT_ACCESSIBILITY, ChromatinState
from .io.output import OUTPUT_FORMATS

CHROMATIN_CHOICES = [state.value for state in ChromatinState]


def _setup_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )


@click.group()
@click.version_option(version=__version__)
def cli():
    """Simulated CRISPR-Cas off-target predictor (demo only)."""
    pass


@cli.command()
@click.argument('sequence', type=str)
@click.option('--chromatin', '-c', type=click.Choice(CHROMATIN_CHOICES), default='open',
              help='Chromatin state at the target (default: open)')
@click.option('--output', '-o', type=click.Path(),
              help='Output directory for report files')
@click.option('--format', '-f', 'formats', type=click.Choice(list(OUTPUT_FORMATS)),
              multiple=True, help='Report format(s) to write (default: all)')
@click.option('--prefix', type=str, default='',
              help='Prefix for output filenames')
@click.option('--json', 'as_json', is_flag=True,
              help='Print the prediction as JSON instead of a summary')
@click.option('--plots', is_flag=True,
              help='Also save charts (requires the visualization extra)')
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
def predict(sequence, chromatin, output, formats, prefix, as_json, plots, verbose):
    """
    Predict off-target risk for one guide sequence.

    SEQUENCE is a 20-23 nt guide (A/C/G/T) or a FASTA file path.

    \b
    Example:
      offtarget predict GCTTCGAGCTGATCGTACGG -c open -o results/
    """
    from .core.prediction import predict_off_targets
    from .io.output import format_result_summary, write_prediction_outputs
    from .utils.sequence import InvalidSequenceError, check_guide_sequence

    if verbose:
        _setup_logging(verbose)

    try:
        guide = check_guide_sequence(parse_sequence_input(sequence))
    except InvalidSequenceError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except ValueError as e:
        click.echo(f"Error loading sequence: {e}", err=True)
        sys.exit(1)

    result = predict_off_targets(guide, chromatin)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        click.echo(format_result_summary(result))

    if output:
        output_path = Path(output)
        paths = write_prediction_outputs(
            result, output_path, prefix=prefix, formats=formats or OUTPUT_FORMATS,
        )
        if plots:
            from .analysis.plotting import save_result_plots
            try:
                paths.update(save_result_plots(result, output_path, prefix=prefix))
            except ImportError as e:
                click.echo(f"Error: {e}", err=True)
                sys.exit(1)
        for path in paths.values():
            click.echo(f"Wrote {path}", err=as_json)
    elif plots:
        click.echo("Error: --plots requires --output", err=True)
        sys.exit(1)


@cli.command()
@click.option('--guide-key', '-s', type=click.Path(exists=True), required=True,
              help='Guide key TSV (guide_id, sequence, optional chromatin_state)')
@click.option('--output', '-o', type=click.Path(), required=True,
              help='Output directory')
@click.option('--chromatin', '-c', type=click.Choice(CHROMATIN_CHOICES), default='open',
              help='Chromatin state for guides without one (default: open)')
@click.option('--format', '-f', 'formats', type=click.Choice(list(OUTPUT_FORMATS)),
              multiple=True, help='Per-guide report format(s) (default: all)')
@click.option('--threads', '-t', type=int, default=1,
              help='Number of worker processes (default: 1)')
@click.option('--plots', is_flag=True,
              help='Also save charts (requires the visualization extra)')
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
def batch(guide_key, output, chromatin, formats, threads, plots, verbose):
    """
    Predict off-target risk for every guide in a guide key.

    \b
    Example:
      offtarget batch --guide-key guides.tsv -o results/ -t 4
    """
    from .config import PredictorConfig
    from .io.guide_key import load_guide_key

    _setup_logging(verbose)

    try:
        guides = load_guide_key(Path(guide_key), default_chromatin=chromatin)
        config = PredictorConfig(
            guides=guides,
            output_dir=Path(output),
            chromatin_state=chromatin,
            formats=list(formats) or list(OUTPUT_FORMATS),
            plots=plots,
            threads=threads,
        )
    except ValueError as e:
        click.echo(f"Error loading guide key: {e}", err=True)
        sys.exit(1)

    _run_pipeline(config)


@cli.command()
@click.option('--config', '-C', 'config_path', type=click.Path(exists=True), required=True,
              help='YAML configuration file')
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
def run(config_path, verbose):
    """
    Run predictions described by a YAML configuration file.

    \b
    Example:
      offtarget init -o offtarget_config.yaml
      offtarget run --config offtarget_config.yaml
    """
    from .config import PredictorConfig

    _setup_logging(verbose)

    try:
        config = PredictorConfig.from_yaml(Path(config_path))
    except ValueError as e:
        click.echo(f"Error loading config: {e}", err=True)
        sys.exit(1)

    _run_pipeline(config)


def _run_pipeline(config):
    from .pipeline import PredictionPipeline

    click.echo(f"\nScoring {len(config.guides)} guide(s)...")
    try:
        reports = PredictionPipeline(config).run()
    except ImportError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    n_ok = sum(1 for r in reports if r.succeeded)
    click.echo("\nPrediction complete!")
    click.echo(f"Scored {n_ok}/{len(reports)} guides")
    click.echo(f"Results written to: {config.output_dir / 'batch_summary.tsv'}")


@cli.command()
@click.option('--output', '-o', type=click.Path(), default='offtarget_config.yaml',
              help='Output config file path')
@click.option('--guide-key', '-s', type=click.Path(),
              help='Also write a template guide key TSV to this path')
def init(output, guide_key):
    """Generate a template configuration file."""
    with open(output, 'w') as f:
        f.write(CONFIG_TEMPLATE.format(output=output))

    click.echo(f"Generated configuration template: {output}")

    if guide_key:
        from .io.guide_key import create_guide_key_template
        create_guide_key_template(Path(guide_key))
        click.echo(f"Generated guide key template: {guide_key}")

    click.echo("\nEdit the config and run:")
    click.echo(f"  offtarget run --config {output}")


@cli.command()
def states():
    """List chromatin states and their accessibility scores."""
    for state in ChromatinState:
        accessibility = CHROMATIN_ACCESSIBILITY[state.value]
        click.echo(f"{state.value:<16} {accessibility * 100:5.1f}%  {state.description}")
    click.echo(f"{'(other)':<16} {DEFAULT_ACCESSIBILITY * 100:5.1f}%  Unrecognized labels")


if __name__ == '__main__':
    cli()
