"""Shared fixtures for prositometry tests."""

import pytest

from prositometry.models import OrfResult, TranscriptBuilder, TranscriptHeader


def make_header(transcript_id, gene_id="ENSG00000141510", symbol="TP53"):
    return TranscriptHeader(
        transcript_id=transcript_id,
        transcript_version=1,
        seq_type="cdna",
        chromosomal_location="GRCh38:17:7661779:7687538:-1",
        gene_id=gene_id,
        gene_version=1,
        gene_biotype="protein_coding",
        transcript_biotype="protein_coding",
        gene_symbol=symbol,
    )


@pytest.fixture
def make_transcript():
    """Factory for transcripts with given motif hits."""
    def _make(transcript_id, motifs=None, gene_id="ENSG00000141510", symbol="TP53",
              cdna="ATGAAATAA", peptide="MK"):
        orf = OrfResult(has_orf=bool(peptide), peptide=peptide, source_length=len(cdna))
        builder = TranscriptBuilder(make_header(transcript_id, gene_id, symbol), cdna, orf)
        return builder.add_motifs(motifs or {}).build()
    return _make
