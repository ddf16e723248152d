"""Output helpers for the prositometry command line."""

import sys

import click

from .pipeline import PipelineResult

# Global flag for quiet mode
_quiet_mode = False

SEPARATOR = "=" * 60


def set_quiet_mode(quiet: bool) -> None:
    """Set the global quiet mode flag."""
    global _quiet_mode
    _quiet_mode = quiet


def echo(message: str = "", err: bool = False, **kwargs) -> None:
    """Echo wrapper that respects quiet mode."""
    if _quiet_mode and not err:
        return
    click.echo(message, err=err, **kwargs)


def secho(message: str = "", err: bool = False, **kwargs) -> None:
    """Styled echo wrapper that respects quiet mode."""
    if _quiet_mode and not err:
        return
    click.secho(message, err=err, **kwargs)


def fail(message: str, exit_code: int = 1) -> None:
    """Report an error on stderr, even in quiet mode, and exit."""
    click.echo(f"ERROR: {message}", err=True)
    sys.exit(exit_code)


def print_summary(result: PipelineResult) -> None:
    """Print transcript and gene counts of a pipeline run."""
    with_difference = sum(1 for r in result.reports if r.has_difference)
    secho("\n" + SEPARATOR, bold=True)
    echo(f"Transcripts analysed: {len(result.transcripts)}")
    echo(f"Transcripts skipped: {len(result.skipped)}")
    echo(f"Genes assembled: {len(result.genes)}")
    echo(f"Gene reports: {len(result.reports)} ({with_difference} with isoform-specific motifs)")
