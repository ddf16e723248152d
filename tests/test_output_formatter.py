"""Tests for output formatting module."""

import csv
import json
import tempfile
from pathlib import Path

import pytest

from prositometry.models import GeneReport, TranscriptReport
from prositometry.output_formatter import OutputFormatter


class TestOutputFormatter:
    """Test cases for output formatting."""

    @pytest.fixture
    def formatter(self):
        """Create an OutputFormatter instance."""
        return OutputFormatter()

    @pytest.fixture
    def temp_dir(self):
        """Create a temporary directory."""
        with tempfile.TemporaryDirectory() as tmpdir:
            yield Path(tmpdir)

    @pytest.fixture
    def reports(self):
        """Create a gene report with one transcript with and one without p-values."""
        with_stats = TranscriptReport(
            identifier="ENST00000269305",
            cdna_length=2512,
            peptide_length=393,
            has_p_value=True,
            fold_change=0.37,
            p_value=0.012,
            corrected_p_value=0.03,
            motif_string="PS00001: pos:12<br/>PS00016: pos:3;30",
            difference_string="PS00001",
            has_difference=True,
        )
        without_stats = TranscriptReport(
            identifier="ENST00000413465",
            cdna_length=1200,
            peptide_length=0,
            has_p_value=False,
            fold_change=None,
            p_value=None,
            corrected_p_value=None,
            motif_string="",
            difference_string="none",
            has_difference=False,
        )
        return [GeneReport(
            symbol="TP53",
            fold_change=1.21,
            p_value=0.0004,
            corrected_p_value=0.002,
            transcript_count=2,
            transcripts=(with_stats, without_stats),
        )]

    def test_report_rows(self, formatter, reports):
        """Test flattening to one row per transcript."""
        rows = formatter.report_rows(reports)

        assert len(rows) == 2
        assert list(rows[0]) == OutputFormatter.COLUMNS
        assert rows[0]["Gene Symbol"] == "TP53"
        assert rows[0]["Transcript Count"] == 2
        assert rows[0]["Transcript P"] == "0.012"
        assert rows[0]["Transcript Fold Change"] == "0.37"
        assert rows[0]["Transcript Corrected P"] == "0.03"
        assert rows[0]["Motifs"] == "PS00001: pos:12 | PS00016: pos:3;30"
        assert rows[0]["Difference"] == "PS00001"

        assert rows[1]["Transcript Fold Change"] == ''
        assert rows[1]["Transcript P"] == ''
        assert rows[1]["Motifs"] == ""
        assert rows[1]["Difference"] == "none"

    def test_format_tsv(self, formatter, reports, temp_dir):
        """Test TSV output."""
        output_file = temp_dir / "report.tsv"
        formatter.format_reports(reports, output_file, format='tsv')

        with open(output_file, encoding='utf-8') as f:
            rows = list(csv.DictReader(f, delimiter='\t'))

        assert len(rows) == 2
        assert rows[0]["Transcript"] == "ENST00000269305"
        assert rows[0]["Peptide Length"] == "393"
        assert rows[1]["Transcript Corrected P"] == ""

    def test_format_csv(self, formatter, reports, temp_dir):
        """Test CSV output."""
        output_file = temp_dir / "report.csv"
        formatter.format_reports(reports, output_file, format='csv')

        with open(output_file, encoding='utf-8') as f:
            rows = list(csv.DictReader(f))

        assert rows[0]["Gene Symbol"] == "TP53"
        assert rows[0]["Motifs"] == "PS00001: pos:12 | PS00016: pos:3;30"

    def test_excel_compatible(self, formatter, reports, temp_dir):
        """Test UTF-8 BOM for Excel."""
        output_file = temp_dir / "report.tsv"
        formatter.format_reports(reports, output_file, excel_compatible=True)

        assert output_file.read_bytes().startswith(b'\xef\xbb\xbf')

    def test_format_json(self, formatter, reports, temp_dir):
        """Test JSON output."""
        output_file = temp_dir / "report.json"
        formatter.format_reports(reports, output_file, format='json')

        with open(output_file) as f:
            data = json.load(f)

        assert data['metadata']['total_genes'] == 1
        gene = data['genes'][0]
        assert gene['symbol'] == "TP53"
        assert gene['transcripts'][0]['motifs'] == "PS00001: pos:12<br/>PS00016: pos:3;30"
        assert gene['transcripts'][1]['p_value'] is None
        assert gene['transcripts'][1]['has_difference'] is False

    def test_unsupported_format(self, formatter, reports, temp_dir):
        with pytest.raises(ValueError):
            formatter.format_reports(reports, temp_dir / "report.xlsx", format='xlsx')

    def test_statistics(self, formatter, reports, temp_dir):
        """Test formatter statistics."""
        formatter.format_reports(reports, temp_dir / "report.tsv")

        stats = formatter.get_statistics()

        assert stats['genes'] == 1
        assert stats['transcripts'] == 2
        assert stats['with_difference'] == 1
        assert 'duration' in stats

    def test_empty_reports(self, formatter, temp_dir):
        output_file = temp_dir / "report.tsv"
        formatter.format_reports([], output_file)

        lines = output_file.read_text().splitlines()
        assert lines == ['\t'.join(OutputFormatter.COLUMNS)]
