"""Command-line interface for prositometry."""

import sys
from pathlib import Path

import click
import requests

from .cli_utils import echo, fail, print_summary, set_quiet_mode
from .config import Config, get_default_config_path, create_example_config
from .downloader import ReferenceDownloader
from .error_handler import ErrorHandler, InvalidMotifPatternError
from .fasta_reader import read_fasta
from .hbadeals import load_hbadeals
from .logging_config import get_logger, setup_logging
from .output_formatter import OutputFormatter
from .pipeline import AnnotationPipeline
from .prosite import MotifCatalog

logger = get_logger('cli')


def _load_config(config_file) -> Config:
    config_path = Path(config_file) if config_file else get_default_config_path()
    cfg = Config.from_file(config_path)
    cfg.merge_env_vars()
    return cfg


@click.group(invoke_without_command=True)
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--quiet', '-q', is_flag=True, help='Suppress all output except errors')
@click.option('--log-dir', type=click.Path(), help='Also write logs to this directory')
@click.option('--config', 'config_file', type=click.Path(exists=True), help='Configuration file path')
@click.option('--generate-config', is_flag=True, help='Generate example configuration file')
@click.pass_context
def cli(ctx, verbose, quiet, log_dir, config_file, generate_config):
    """prositometry: PROSITE motif differences between the isoforms of differentially spliced genes.

    Examples:
        prositometry download -d data
        prositometry analyze hbadeals.tsv -d data -o report.tsv
    """
    if quiet and verbose:
        click.echo("Error: Cannot use both --quiet and --verbose", err=True)
        sys.exit(1)

    set_quiet_mode(quiet)
    setup_logging(log_level="DEBUG" if verbose else "INFO", log_dir=log_dir, quiet=quiet)

    if generate_config:
        config_path = create_example_config()
        echo(f"Generated example configuration file: {config_path}")
        sys.exit(0)

    ctx.obj = _load_config(config_file)

    if ctx.invoked_subcommand is None:
        echo(ctx.get_help())


@cli.command()
@click.option('--data', '-d', 'data_dir', type=click.Path(), help='Directory to download data (default: data)')
@click.option('--overwrite', '-w', is_flag=True, help='Overwrite previously downloaded files')
@click.pass_obj
def download(cfg: Config, data_dir, overwrite):
    """Download the Ensembl cDNA FASTA and PROSITE database."""
    cfg.merge_cli_args(data_dir=data_dir, overwrite=overwrite)

    downloader = ReferenceDownloader(
        data_dir=cfg.input.data_dir,
        overwrite=cfg.download.overwrite,
        urls={
            cfg.input.fasta_file: cfg.download.ensembl_cdna_url,
            cfg.input.prosite_file: cfg.download.prosite_url,
        },
        timeout=cfg.download.timeout_seconds,
        retry_attempts=cfg.download.retry_attempts,
    )
    try:
        paths = downloader.download()
    except requests.RequestException as e:
        fail(f"Download failed: {e}")

    for path in paths:
        echo(f"Available: {path}")


@cli.command()
@click.argument('hbadeals_file', type=click.Path(exists=True))
@click.option('--data', '-d', 'data_dir', type=click.Path(), help='Directory with downloaded reference files')
@click.option('--fasta', help='cDNA FASTA file name inside the data directory')
@click.option('--prosite', help='PROSITE file name inside the data directory')
@click.option('--output', '-o', 'output_file', type=click.Path(), help='Write reports to this file')
@click.option('--output-format', type=click.Choice(['tsv', 'csv', 'json']), help='Output file format')
@click.option('--workers', type=int, help='Worker threads for transcript analysis')
@click.option('--strict-alphabet', is_flag=True, help='Skip transcripts with non-ACGT characters')
@click.option('--fail-fast', is_flag=True, help='Abort on the first malformed transcript')
@click.option('--errors-report', type=click.Path(), help='Write a JSON report of skipped records')
@click.option('--excel-compatible', is_flag=True, help='Write a UTF-8 BOM in TSV/CSV output')
@click.pass_obj
def analyze(cfg: Config, hbadeals_file, data_dir, fasta, prosite, output_file, output_format,
            workers, strict_alphabet, fail_fast, errors_report, excel_compatible):
    """Annotate transcripts and build per-gene motif reports.

    HBADEALS_FILE is the tab-separated HBA-DEALS result file.
    """
    cfg.merge_cli_args(
        data_dir=data_dir,
        fasta=fasta,
        prosite=prosite,
        hbadeals=hbadeals_file,
        workers=workers,
        strict_alphabet=strict_alphabet,
        fail_fast=fail_fast,
        output_format=output_format,
        excel_compatible=excel_compatible,
    )

    try:
        catalog = MotifCatalog.from_prosite_file(cfg.input.prosite_path)
        statistics = load_hbadeals(cfg.input.hbadeals_file)
        records = list(read_fasta(cfg.input.fasta_path))
    except InvalidMotifPatternError as e:
        fail(f"Invalid motif catalog: {e}")
    except (OSError, ValueError) as e:
        fail(f"Failed to read input: {e}")

    echo(f"Loaded {len(catalog)} motifs, {len(records)} transcripts, "
         f"{len(statistics.genes)} gene-level results")

    error_handler = ErrorHandler(get_logger('pipeline'))
    pipeline = AnnotationPipeline(
        catalog,
        max_workers=cfg.analysis.max_workers,
        strict_alphabet=cfg.analysis.strict_alphabet,
        fail_fast=cfg.analysis.fail_fast,
        motif_separator=cfg.output.motif_separator,
        error_handler=error_handler,
    )

    try:
        result = pipeline.run(records, statistics)
    except ValueError as e:
        fail(str(e))

    if error_handler.error_history:
        logger.info(f"Diagnostics: {error_handler.get_error_summary()['by_type']}")
    if errors_report:
        error_handler.export_error_report(errors_report)

    formatter = OutputFormatter()
    if output_file:
        try:
            formatter.format_reports(
                result.reports,
                output_file,
                format=cfg.output.format,
                excel_compatible=cfg.output.excel_compatible,
                report_separator=cfg.output.motif_separator,
            )
        except OSError as e:
            fail(f"Failed to write output file: {e}")
        echo(f"Results written to: {output_file}")

    print_summary(result)


if __name__ == '__main__':
    cli()
