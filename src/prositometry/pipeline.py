"""End-to-end transcript annotation pipeline.

Each (header, sequence) record is analysed independently: header parsing,
ORF finding and motif scanning. Records that fail are skipped and reported
through the ErrorHandler. Successful transcripts are then grouped by gene
and joined with the statistical results into gene reports.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from .error_handler import ErrorHandler, ErrorType
from .gene_assembler import Gene, GeneAssembler
from .hbadeals import HbaDealsResults
from .header_parser import parse_header
from .logging_config import LogTimer, ProgressLogger, get_logger
from .models import MOTIF_SEPARATOR, GeneReport, Transcript, TranscriptBuilder
from .motif_scanner import MotifScanner
from .orf_finder import find_longest_orf, invalid_characters
from .parallel_processor import ParallelProcessor
from .prosite import MotifCatalog
from .report_builder import build_reports

logger = get_logger('pipeline')

Record = Tuple[str, str]


def analyze_transcript(header: str, sequence: str, scanner: MotifScanner, strict: bool = False) -> Transcript:
    """
    Run the structural analysis of one transcript.

    Raises:
        MalformedHeaderError: If the header cannot be parsed
        SequenceAlphabetError: If ``strict`` and the sequence has non-ACGT characters
    """
    parsed = parse_header(header)
    orf = find_longest_orf(sequence, strict=strict)
    builder = TranscriptBuilder(parsed, sequence, orf)
    if orf.has_orf:
        builder.add_motifs(scanner.scan(orf.peptide))
    return builder.build()


def _record_id(record: Record) -> str:
    fields = record[0].lstrip(">").split()
    return fields[0] if fields else "<empty header>"


@dataclass
class PipelineResult:
    """Outcome of a pipeline run."""
    transcripts: List[Transcript] = field(default_factory=list)
    genes: List[Gene] = field(default_factory=list)
    reports: List[GeneReport] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)


class AnnotationPipeline:
    """Annotates transcripts and assembles gene reports."""

    def __init__(self,
                 catalog: MotifCatalog,
                 max_workers: int = 4,
                 strict_alphabet: bool = False,
                 fail_fast: bool = False,
                 motif_separator: str = MOTIF_SEPARATOR,
                 error_handler: Optional[ErrorHandler] = None):
        """
        Initialize the pipeline.

        Args:
            catalog: Motif catalog, already validated
            max_workers: Worker threads for the per-transcript phase
            strict_alphabet: Skip transcripts with non-ACGT characters
                instead of analysing them with unknown codons
            fail_fast: Raise the first per-transcript error instead of skipping
            motif_separator: Marker between motif entries in reports
            error_handler: Collector for diagnostics
        """
        self.scanner = MotifScanner(catalog)
        self.max_workers = max_workers
        self.strict_alphabet = strict_alphabet
        self.fail_fast = fail_fast
        self.motif_separator = motif_separator
        self.error_handler = error_handler or ErrorHandler(logger)

    def _analyze(self, record: Record) -> Transcript:
        header, sequence = record
        return analyze_transcript(header, sequence, self.scanner, strict=self.strict_alphabet)

    def analyze_records(self, records: Iterable[Record]) -> Tuple[List[Transcript], List[str]]:
        """
        Analyse records in parallel, keeping input order.

        Returns:
            Tuple of (transcripts, ids of skipped records)
        """
        records = list(records)
        progress = ProgressLogger(logger, len(records), "Analysing transcripts")
        processor = ParallelProcessor(max_workers=self.max_workers, progress_callback=progress.update)

        with LogTimer("Transcript analysis", logger):
            results, stats = processor.process_batch(records, self._analyze)
        progress.complete(failed=stats.failed)

        transcripts = []
        skipped = []
        for result in results:
            record_id = _record_id(result.item)
            if not result.success:
                if self.fail_fast:
                    raise result.error
                self.error_handler.handle_error(result.error, operation="transcript_analysis", item_id=record_id)
                skipped.append(record_id)
                continue

            transcript = result.result
            bad = invalid_characters(transcript.cdna)
            if bad:
                self.error_handler.record_warning(
                    ErrorType.SEQUENCE_ALPHABET,
                    f"Non-ACGT characters ({', '.join(bad)}) treated as unknown codons",
                    operation="transcript_analysis",
                    item_id=record_id,
                )
            transcripts.append(transcript)

        logger.info(f"Analysed {len(transcripts)} transcripts, skipped {len(skipped)}")
        return transcripts, skipped

    def assemble(self, transcripts: Iterable[Transcript]) -> List[Gene]:
        assembler = GeneAssembler(self.error_handler)
        assembler.add_all(transcripts)
        return assembler.assemble()

    def run(self, records: Iterable[Record], statistics: Optional[HbaDealsResults] = None) -> PipelineResult:
        """
        Run the whole pipeline.

        Args:
            records: (header, sequence) pairs
            statistics: HBA-DEALS results; without them no reports are built

        Returns:
            PipelineResult with transcripts, genes, reports and skipped ids
        """
        transcripts, skipped = self.analyze_records(records)
        genes = self.assemble(transcripts)

        reports: List[GeneReport] = []
        if statistics is not None:
            reports = build_reports(statistics.genes, genes, statistics.transcripts, self.motif_separator)

        return PipelineResult(transcripts=transcripts, genes=genes, reports=reports, skipped=skipped)
