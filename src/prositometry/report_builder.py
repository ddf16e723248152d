"""Assembly of render-ready gene reports from genes and statistical results."""

import logging
from typing import Iterable, List, Mapping, Optional

from .gene_assembler import Gene, genes_by_symbol
from .models import MOTIF_SEPARATOR, GeneReport, Statistics, TranscriptReport

logger = logging.getLogger(__name__)


def build_transcript_report(gene: Gene,
                            transcript_id: str,
                            statistics: Optional[Statistics] = None,
                            separator: str = MOTIF_SEPARATOR) -> TranscriptReport:
    """Project one transcript of a gene, with optional isoform-level statistics."""
    transcript = gene.transcripts[transcript_id]
    return TranscriptReport(
        identifier=transcript.transcript_id,
        cdna_length=transcript.cdna_length,
        peptide_length=transcript.peptide_length,
        has_p_value=statistics is not None,
        fold_change=statistics.fold_change if statistics else None,
        p_value=statistics.p_value if statistics else None,
        corrected_p_value=statistics.corrected_p_value if statistics else None,
        motif_string=transcript.motif_string(separator),
        difference_string=gene.difference_string(transcript_id),
        has_difference=gene.has_difference(transcript_id),
    )


def build_gene_report(statistics: Statistics,
                      gene: Gene,
                      transcript_statistics: Optional[Mapping[str, Statistics]] = None,
                      separator: str = MOTIF_SEPARATOR) -> GeneReport:
    """
    Combine the gene-level result for a symbol with its assembled gene.

    Args:
        statistics: Gene-level fold change and p-values
        gene: Assembled gene with the transcripts to report
        transcript_statistics: Optional isoform-level results keyed by
            version-stripped transcript id; transcripts without an entry
            are reported without p-values
        separator: Marker placed between motif entries

    Returns:
        GeneReport with transcripts in first-seen order
    """
    transcript_statistics = transcript_statistics or {}
    transcripts = tuple(
        build_transcript_report(gene, transcript_id, transcript_statistics.get(transcript_id), separator)
        for transcript_id in gene.transcripts
    )
    return GeneReport(
        symbol=statistics.identifier,
        fold_change=statistics.fold_change,
        p_value=statistics.p_value,
        corrected_p_value=statistics.corrected_p_value,
        transcript_count=len(gene),
        transcripts=transcripts,
    )


def build_reports(gene_statistics: Iterable[Statistics],
                  genes: Iterable[Gene],
                  transcript_statistics: Optional[Mapping[str, Statistics]] = None,
                  separator: str = MOTIF_SEPARATOR) -> List[GeneReport]:
    """Join gene-level results with genes by symbol, in statistics order.

    Symbols without an assembled gene are logged and left out.
    """
    by_symbol = genes_by_symbol(genes)
    reports = []
    missing = 0
    for statistics in gene_statistics:
        gene = by_symbol.get(statistics.identifier)
        if gene is None:
            missing += 1
            logger.debug(f"No transcripts for gene symbol {statistics.identifier}")
            continue
        reports.append(build_gene_report(statistics, gene, transcript_statistics, separator))

    if missing:
        logger.warning(f"{missing} gene symbol(s) in the statistics had no matching transcripts")
    logger.info(f"Built {len(reports)} gene reports")
    return reports
