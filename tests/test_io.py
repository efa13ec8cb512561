"""Tests for crispr_offtarget.io modules and the batch pipeline."""

import json

import pandas as pd
import pytest
from crispr_offtarget.core.prediction import predict_off_targets
from crispr_offtarget.io.guide_key import (
    GuideSpec,
    create_guide_key_template,
    load_guide_key,
)
from crispr_offtarget.io.output import (
    GuideReport,
    format_result_summary,
    reports_to_dataframe,
    sites_to_dataframe,
    write_batch_report,
    write_prediction_outputs,
    write_result_json,
    write_sites_tsv,
    write_summary_report,
)
from crispr_offtarget.pipeline import run_predictions


GUIDE_SEQUENCE = "GCTTCGAGCTGATCGTACGG"


@pytest.fixture
def result():
    return predict_off_targets(GUIDE_SEQUENCE, "open")


class TestSiteTable:
    """Test tabular site output."""

    def test_sites_to_dataframe(self, result):
        df = sites_to_dataframe(result)
        assert len(df) == 10
        assert df['rank'].tolist() == list(range(1, 11))
        assert df.loc[0, 'location'] == "chr20:4329629"
        assert df.loc[0, 'severity'] == "high"

    def test_write_sites_tsv(self, result, tmp_path):
        path = write_sites_tsv(result, tmp_path / "sites.tsv")
        df = pd.read_csv(path, sep='\t')
        assert df['site_id'].tolist() == [12, 9, 1, 14, 7, 5, 4, 2, 6, 8]
        assert df.loc[0, 'score'] == pytest.approx(0.7199844987262005)


class TestReports:
    """Test JSON and markdown reports."""

    def test_write_result_json(self, result, tmp_path):
        path = write_result_json(result, tmp_path / "prediction.json")
        with open(path) as f:
            data = json.load(f)
        assert data == result.to_dict()
        assert data['riskCategory'] == "high"

    def test_summary_report_contents(self, result, tmp_path):
        path = write_summary_report(result, tmp_path / "report.md")
        text = path.read_text()
        assert "**Off-target probability:** 90.09% (high)" in text
        assert "**GC Content:** 60.00%" in text
        assert "| 1 | chr20:4329629 | 1 | 0.720 | 90.0% |" in text
        assert "not a trained model" in text

    def test_format_result_summary(self, result):
        text = format_result_summary(result)
        assert "Overall risk: 90.09% (high)" in text
        assert "Sequence Complexity: 69.69%" in text
        assert "chr20:4329629" in text

    def test_write_prediction_outputs(self, result, tmp_path):
        paths = write_prediction_outputs(result, tmp_path / "out", prefix="g1_")
        assert set(paths) == {'tsv', 'json', 'markdown'}
        assert paths['tsv'].name == "g1_off_target_sites.tsv"
        assert all(p.exists() for p in paths.values())

    def test_write_prediction_outputs_subset(self, result, tmp_path):
        paths = write_prediction_outputs(result, tmp_path, formats=['json'])
        assert list(paths) == ['json']

    def test_unknown_format_raises(self, result, tmp_path):
        with pytest.raises(ValueError, match="Unknown output format"):
            write_prediction_outputs(result, tmp_path, formats=['pdf'])


class TestGuideKey:
    """Test guide key loading."""

    def _write(self, tmp_path, text):
        path = tmp_path / "guides.tsv"
        path.write_text(text)
        return path

    def test_load_with_metadata(self, tmp_path):
        path = self._write(
            tmp_path,
            "guide_id\tsequence\tchromatin_state\ttarget_gene\n"
            f"g1\t{GUIDE_SEQUENCE.lower()}\tclosed\tEMX1\n"
            "g2\tGAGTCCGAGCAGAAGAAGAA\t\t\n",
        )
        guides = load_guide_key(path, default_chromatin="euchromatin")

        assert guides[0] == GuideSpec("g1", GUIDE_SEQUENCE, "closed", {'target_gene': 'EMX1'})
        assert guides[1].chromatin_state == "euchromatin"
        assert guides[1].metadata == {}

    def test_missing_sequence_column(self, tmp_path):
        path = self._write(tmp_path, "guide_id\tguide\ng1\tACGT\n")
        with pytest.raises(ValueError, match="'sequence' column"):
            load_guide_key(path)

    def test_duplicate_ids(self, tmp_path):
        path = self._write(
            tmp_path,
            f"guide_id\tsequence\ng1\t{GUIDE_SEQUENCE}\ng1\t{GUIDE_SEQUENCE}\n",
        )
        with pytest.raises(ValueError, match="Duplicate guide_id"):
            load_guide_key(path)

    def test_duplicate_ids_after_stripping(self, tmp_path):
        path = self._write(
            tmp_path,
            f"guide_id\tsequence\ng1\t{GUIDE_SEQUENCE}\n g1 \t{GUIDE_SEQUENCE}\n",
        )
        with pytest.raises(ValueError, match="Duplicate guide_id values in guide key: g1"):
            load_guide_key(path)

    def test_path_separator_in_id(self, tmp_path):
        path = self._write(
            tmp_path,
            f"guide_id\tsequence\nsub/g1\t{GUIDE_SEQUENCE}\n",
        )
        with pytest.raises(ValueError, match="path separators: sub/g1"):
            load_guide_key(path)

    def test_blank_id(self, tmp_path):
        path = self._write(tmp_path, f"guide_id\tsequence\n \t{GUIDE_SEQUENCE}\n")
        with pytest.raises(ValueError, match="empty guide_id"):
            load_guide_key(path)

    def test_invalid_guides_are_loaded(self, tmp_path):
        """Test validation problems are logged, not raised."""
        path = self._write(tmp_path, "guide_id\tsequence\nshort\tACGT\n")
        guides = load_guide_key(path)
        assert guides[0].validate() == ["Sequence length must be between 20 and 23 nucleotides."]

    def test_template_loads(self, tmp_path):
        path = tmp_path / "template.tsv"
        create_guide_key_template(path)
        guides = load_guide_key(path)
        assert len(guides) == 4
        assert all(not g.validate() for g in guides)


class TestBatch:
    """Test batch scoring and reports."""

    @pytest.fixture
    def guides(self):
        return [
            GuideSpec("g1", GUIDE_SEQUENCE, "open", {'target_gene': 'EMX1'}),
            GuideSpec("g2", "GAGTCCGAGCAGAAGAAGAA", "heterochromatin"),
            GuideSpec("bad", "ACGT", "open"),
        ]

    def test_run_predictions_serial(self, guides, tmp_path):
        reports = run_predictions(guides, tmp_path)

        assert [r.succeeded for r in reports] == [True, True, False]
        assert reports[0].result == predict_off_targets(GUIDE_SEQUENCE, "open")
        assert "between 20 and 23" in reports[2].error

        assert (tmp_path / "batch_summary.tsv").exists()
        assert (tmp_path / "batch_report.md").exists()
        assert (tmp_path / "guides" / "g1_prediction.json").exists()
        assert not (tmp_path / "guides" / "bad_prediction.json").exists()

    def test_run_predictions_parallel_matches_serial(self, guides, tmp_path):
        serial = run_predictions(guides, tmp_path / "serial", formats=['json'])
        parallel = run_predictions(guides, tmp_path / "parallel", formats=['json'], threads=2)

        assert [r.guide.guide_id for r in parallel] == ["g1", "g2", "bad"]
        assert [r.result for r in parallel] == [r.result for r in serial]

    def test_batch_summary_table(self, guides, tmp_path):
        reports = run_predictions(guides, tmp_path, formats=['tsv'])
        df = pd.read_csv(tmp_path / "batch_summary.tsv", sep='\t')

        assert df['guide_id'].tolist() == ["g1", "g2", "bad"]
        assert df.loc[0, 'overall_risk_pct'] == 90.09
        assert df.loc[0, 'top_site'] == "chr20:4329629"
        assert df.loc[0, 'target_gene'] == "EMX1"
        assert 'between 20 and 23' in df.loc[2, 'error']
        assert len(reports_to_dataframe(reports)) == 3

    def test_batch_report(self, tmp_path):
        reports = [
            GuideReport(guide=GuideSpec("g1", GUIDE_SEQUENCE, "open"),
                        result=predict_off_targets(GUIDE_SEQUENCE, "open")),
            GuideReport(guide=GuideSpec("bad", "ACGT", "open"), error="too short"),
        ]
        text = write_batch_report(reports, tmp_path / "batch.md").read_text()

        assert "**Guides scored:** 1" in text
        assert "**Mean:** 90.09%" in text
        assert "- bad: too short" in text


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
