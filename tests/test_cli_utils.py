"""Tests for command-line output helpers."""

import pytest

from prositometry import cli_utils
from prositometry.cli_utils import echo, fail, print_summary, set_quiet_mode
from prositometry.pipeline import PipelineResult


@pytest.fixture(autouse=True)
def reset_quiet_mode():
    yield
    set_quiet_mode(False)


class TestQuietMode:
    """Test cases for quiet mode handling."""

    def test_echo(self, capsys):
        echo("hello")
        assert capsys.readouterr().out == "hello\n"

    def test_quiet_suppresses_stdout_only(self, capsys):
        set_quiet_mode(True)
        echo("hidden")
        echo("shown", err=True)

        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == "shown\n"

    def test_fail_reports_in_quiet_mode(self, capsys):
        set_quiet_mode(True)
        with pytest.raises(SystemExit) as exc_info:
            fail("Invalid motif catalog: bad pattern")

        assert exc_info.value.code == 1
        assert capsys.readouterr().err == "ERROR: Invalid motif catalog: bad pattern\n"


class TestPrintSummary:
    """Test cases for the run summary."""

    def test_summary_counts(self, capsys, make_transcript):
        result = PipelineResult(
            transcripts=[make_transcript("ENST01"), make_transcript("ENST02")],
            skipped=["ENST03.1"],
        )

        print_summary(result)

        lines = capsys.readouterr().out.splitlines()
        assert cli_utils.SEPARATOR in lines
        assert "Transcripts analysed: 2" in lines
        assert "Transcripts skipped: 1" in lines
        assert "Genes assembled: 0" in lines
        assert "Gene reports: 0 (0 with isoform-specific motifs)" in lines

    def test_quiet_summary(self, capsys):
        set_quiet_mode(True)
        print_summary(PipelineResult())
        assert capsys.readouterr().out == ""
