"""Tests for the offtarget command-line interface."""

import json

import pytest
from click.testing import CliRunner
from crispr_offtarget import __version__
from crispr_offtarget.cli import cli


GUIDE_SEQUENCE = "GCTTCGAGCTGATCGTACGG"


@pytest.fixture
def runner():
    return CliRunner()


class TestPredictCommand:
    """Test `offtarget predict`."""

    def test_summary_output(self, runner):
        result = runner.invoke(cli, ['predict', GUIDE_SEQUENCE])
        assert result.exit_code == 0
        assert "Overall risk: 90.09% (high)" in result.output

    def test_lowercase_input_is_normalized(self, runner):
        result = runner.invoke(cli, ['predict', GUIDE_SEQUENCE.lower(), '--json'])
        assert result.exit_code == 0
        assert json.loads(result.output)['seed'] == 2171676951

    def test_json_output(self, runner):
        result = runner.invoke(cli, ['predict', GUIDE_SEQUENCE, '-c', 'closed', '--json'])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data['chromatinState'] == "closed"
        assert data['features']['accessibility'] == 30
        assert len(data['offTargetSites']) == 9

    def test_writes_reports(self, runner, tmp_path):
        result = runner.invoke(cli, ['predict', GUIDE_SEQUENCE, '-o', str(tmp_path),
                                     '-f', 'json', '--prefix', 'emx1_'])
        assert result.exit_code == 0
        assert (tmp_path / "emx1_prediction.json").exists()
        assert not (tmp_path / "emx1_report.md").exists()

    def test_invalid_length(self, runner):
        result = runner.invoke(cli, ['predict', 'ACGTACGT'])
        assert result.exit_code == 1
        assert "between 20 and 23" in result.output

    def test_not_a_sequence(self, runner):
        result = runner.invoke(cli, ['predict', 'GCTTCGAGCTGAUCGTACGG'])
        assert result.exit_code == 1
        assert "Error loading sequence" in result.output

    def test_empty_sequence(self, runner):
        result = runner.invoke(cli, ['predict', ''])
        assert result.exit_code == 1
        assert "Please enter a guide RNA sequence." in result.output

    def test_directory_argument(self, runner, tmp_path):
        result = runner.invoke(cli, ['predict', str(tmp_path)])
        assert result.exit_code == 1
        assert "Error loading sequence" in result.output

    def test_unknown_chromatin_rejected(self, runner):
        result = runner.invoke(cli, ['predict', GUIDE_SEQUENCE, '-c', 'unknown_label'])
        assert result.exit_code != 0

    def test_plots_require_output(self, runner):
        result = runner.invoke(cli, ['predict', GUIDE_SEQUENCE, '--plots'])
        assert result.exit_code == 1
        assert "--plots requires --output" in result.output


class TestBatchCommands:
    """Test `offtarget batch`, `run` and `init`."""

    def test_batch(self, runner, tmp_path):
        guide_key = tmp_path / "guides.tsv"
        guide_key.write_text(
            "guide_id\tsequence\tchromatin_state\n"
            f"g1\t{GUIDE_SEQUENCE}\topen\n"
            "g2\tGAGTCCGAGCAGAAGAAGAA\t\n"
        )
        out = tmp_path / "out"
        result = runner.invoke(cli, ['batch', '-s', str(guide_key), '-o', str(out), '-c', 'closed'])

        assert result.exit_code == 0
        assert "Scored 2/2 guides" in result.output
        assert (out / "batch_summary.tsv").exists()
        assert (out / "guides" / "g2_report.md").exists()

    def test_batch_bad_guide_key(self, runner, tmp_path):
        guide_key = tmp_path / "guides.tsv"
        guide_key.write_text("id\tseq\ng1\tACGT\n")
        result = runner.invoke(cli, ['batch', '-s', str(guide_key), '-o', str(tmp_path / "out")])
        assert result.exit_code == 1
        assert "Error loading guide key" in result.output

    def test_init_then_run(self, runner, tmp_path):
        config = tmp_path / "config.yaml"
        result = runner.invoke(cli, ['init', '-o', str(config)])
        assert result.exit_code == 0
        assert config.exists()

        text = config.read_text().replace("./results", str(tmp_path / "results"))
        config.write_text(text)

        result = runner.invoke(cli, ['run', '--config', str(config)])
        assert result.exit_code == 0
        assert (tmp_path / "results" / "guides" / "guide_1_prediction.json").exists()

    def test_init_guide_key_template(self, runner, tmp_path):
        guide_key = tmp_path / "guides.tsv"
        result = runner.invoke(cli, ['init', '-o', str(tmp_path / "c.yaml"), '-s', str(guide_key)])
        assert result.exit_code == 0
        assert guide_key.read_text().startswith("guide_id\tsequence")

    def test_run_bad_config(self, runner, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text("threads: 2\n")
        result = runner.invoke(cli, ['run', '--config', str(config)])
        assert result.exit_code == 1
        assert "Error loading config" in result.output

    def test_run_config_with_blank_formats(self, runner, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text(
            f"sequence: {GUIDE_SEQUENCE}\nformats:\noutput_dir: {tmp_path / 'out'}\n"
        )
        result = runner.invoke(cli, ['run', '--config', str(config)])
        assert result.exit_code == 0, result.output
        assert "Scored 1/1 guides" in result.output

    def test_run_config_not_a_mapping(self, runner, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text("just a string\n")
        result = runner.invoke(cli, ['run', '--config', str(config)])
        assert result.exit_code == 1
        assert "Error loading config" in result.output


class TestInfoCommands:
    """Test `offtarget states` and --version."""

    def test_states(self, runner):
        result = runner.invoke(cli, ['states'])
        assert result.exit_code == 0
        assert "heterochromatin" in result.output
        assert "50.0%" in result.output

    def test_version(self, runner):
        result = runner.invoke(cli, ['--version'])
        assert result.exit_code == 0
        assert __version__ in result.output


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
