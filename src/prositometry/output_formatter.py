"""Flat file export of gene reports."""

import csv
import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Sequence, Union

from .models import GeneReport


class OutputFormatter:
    """Writes gene reports as TSV/CSV (one row per transcript) or JSON."""

    COLUMNS = [
        "Gene Symbol",
        "Gene Fold Change",
        "Gene P",
        "Gene Corrected P",
        "Transcript Count",
        "Transcript",
        "cDNA Length",
        "Peptide Length",
        "Transcript Fold Change",
        "Transcript P",
        "Transcript Corrected P",
        "Motifs",
        "Difference",
    ]

    FORMATS = ('tsv', 'csv', 'json')

    def __init__(self, motif_separator: str = " | "):
        """
        Initialize the formatter.

        Args:
            motif_separator: Replaces the report's motif separator in flat files
        """
        self.motif_separator = motif_separator
        self.start_time = datetime.now()
        self._genes = 0
        self._transcripts = 0
        self._with_difference = 0

    def report_rows(self, reports: Sequence[GeneReport], report_separator: str = "<br/>") -> List[Dict[str, Any]]:
        """Flatten reports to one row per transcript.

        Transcript statistics are rendered with 3 significant digits; they
        are blank for transcripts without a p-value.
        """
        rows = []
        for report in reports:
            for transcript in report.transcripts:
                rows.append({
                    "Gene Symbol": report.symbol,
                    "Gene Fold Change": report.fold_change,
                    "Gene P": report.p_value,
                    "Gene Corrected P": report.corrected_p_value,
                    "Transcript Count": report.transcript_count,
                    "Transcript": transcript.identifier,
                    "cDNA Length": transcript.cdna_length,
                    "Peptide Length": transcript.peptide_length,
                    "Transcript Fold Change": transcript.fold_change_display,
                    "Transcript P": transcript.p_value_display,
                    "Transcript Corrected P": transcript.corrected_p_value_display,
                    "Motifs": transcript.motif_string.replace(report_separator, self.motif_separator),
                    "Difference": transcript.difference_string,
                })
        return rows

    def format_reports(self,
                       reports: Sequence[GeneReport],
                       output_path: Union[str, Path],
                       format: str = 'tsv',
                       excel_compatible: bool = False,
                       report_separator: str = "<br/>") -> None:
        """
        Write reports to a file.

        Args:
            reports: Gene reports in output order
            output_path: Path to output file
            format: Output format ('tsv', 'csv', 'json')
            excel_compatible: Use UTF-8 BOM for Excel compatibility
            report_separator: Separator used inside the reports' motif strings
        """
        path = Path(output_path)

        if format == 'tsv':
            self._write_delimited(self.report_rows(reports, report_separator), path, '\t', excel_compatible)
        elif format == 'csv':
            self._write_delimited(self.report_rows(reports, report_separator), path, ',', excel_compatible)
        elif format == 'json':
            self._write_json(reports, path)
        else:
            raise ValueError(f"Unsupported format: {format}")

        self._genes += len(reports)
        self._transcripts += sum(len(r.transcripts) for r in reports)
        self._with_difference += sum(1 for r in reports for t in r.transcripts if t.has_difference)

    def _write_delimited(self, rows: List[Dict[str, Any]], path: Path, delimiter: str, excel_compatible: bool) -> None:
        """Write TSV/CSV file with optional UTF-8 BOM."""
        encoding = 'utf-8-sig' if excel_compatible else 'utf-8'

        with open(path, 'w', encoding=encoding, newline='') as f:
            writer = csv.DictWriter(f, fieldnames=self.COLUMNS, delimiter=delimiter)
            writer.writeheader()
            writer.writerows(rows)

    def _write_json(self, reports: Sequence[GeneReport], path: Path) -> None:
        """Write JSON file with one nested object per gene."""
        genes = []
        for report in reports:
            genes.append({
                'symbol': report.symbol,
                'fold_change': report.fold_change,
                'p_value': report.p_value,
                'corrected_p_value': report.corrected_p_value,
                'transcript_count': report.transcript_count,
                'transcripts': [
                    {
                        'identifier': t.identifier,
                        'cdna_length': t.cdna_length,
                        'peptide_length': t.peptide_length,
                        'has_p_value': t.has_p_value,
                        'fold_change': t.fold_change,
                        'p_value': t.p_value,
                        'corrected_p_value': t.corrected_p_value,
                        'motifs': t.motif_string,
                        'difference': t.difference_string,
                        'has_difference': t.has_difference,
                    }
                    for t in report.transcripts
                ],
            })

        output = {
            'metadata': {
                'generated': datetime.now().isoformat(),
                'total_genes': len(reports),
            },
            'genes': genes
        }

        with open(path, 'w', encoding='utf-8') as f:
            json.dump(output, f, indent=2, ensure_ascii=False)

    def get_statistics(self) -> Dict[str, Any]:
        """Get statistics of what has been written so far."""
        return {
            'genes': self._genes,
            'transcripts': self._transcripts,
            'with_difference': self._with_difference,
            'duration': str(datetime.now() - self.start_time),
        }
