#!/usr/bin/env python3
"""Demo script showing isoform-specific motif detection on a toy gene."""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from prositometry.error_handler import ErrorHandler
from prositometry.logging_config import setup_logging
from prositometry.models import Statistics
from prositometry.hbadeals import HbaDealsResults
from prositometry.pipeline import AnnotationPipeline
from prositometry.prosite import MotifCatalog

HEADER = (
    "{tid}.1 cdna chromosome:GRCh38:17:7661779:7687538:-1 gene:ENSG00000141510.17 "
    "gene_biotype:protein_coding transcript_biotype:protein_coding gene_symbol:TP53 "
    "description:tumor protein p53"
)


def main():
    """Main demo function."""
    print("=== prositometry Motif Difference Demo ===\n")

    setup_logging(log_level="WARNING")

    catalog = MotifCatalog.from_entries({
        "PS00001": "N-{P}-[ST]-{P}.",
        "PS00016": "R-G-D.",
    })

    records = [
        (HEADER.format(tid="ENST00000269305"), "ATGAACGGCAGCGCCCGCGGCGACTAA"),
        (HEADER.format(tid="ENST00000413465"), "ATGCGCGGCGACAAATAA"),
        (HEADER.format(tid="ENST00000000000").replace("gene_biotype:", "biotype:"), "ATGTAA"),
    ]
    statistics = HbaDealsResults(genes=[Statistics("TP53", 1.21, 0.0004, 0.002)])

    error_handler = ErrorHandler()
    pipeline = AnnotationPipeline(catalog, max_workers=2, error_handler=error_handler)
    result = pipeline.run(records, statistics)

    for report in result.reports:
        print(f"{report.symbol}: fold change {report.fold_change}, {report.transcript_count} transcripts")
        for transcript in report.transcripts:
            print(f"  {transcript.identifier} ({transcript.peptide_length} aa)")
            print(f"    motifs:     {transcript.motif_string.replace('<br/>', ', ')}")
            print(f"    difference: {transcript.difference_string}")

    print(f"\nSkipped records: {', '.join(result.skipped) or 'none'}")
    for error in error_handler.error_history:
        print(f"  [{error.error_type.value}] {error.message}")


if __name__ == "__main__":
    main()
