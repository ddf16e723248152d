"""Longest open reading frame detection on the forward strand.

An ORF opens at an ATG codon and runs to the codon before the first in-frame
stop codon, or to the last complete codon when no stop follows. The peptide
includes the initial methionine and never the stop codon, so ``ATGTAA``
yields the one-residue peptide ``M``.
"""

import logging
import re
from typing import Dict, List, Optional, Tuple

from Bio.Data import CodonTable

from .error_handler import SequenceAlphabetError
from .models import OrfResult

logger = logging.getLogger(__name__)

START_CODON = "ATG"
UNKNOWN_RESIDUE = "X"

_INVALID_NUCLEOTIDE = re.compile(r"[^ACGT]")


def _load_codon_table(table_id: int = 1) -> Tuple[Dict[str, str], frozenset]:
    table: CodonTable.CodonTable = CodonTable.unambiguous_dna_by_id[table_id]
    return dict(table.forward_table), frozenset(table.stop_codons)


FORWARD_TABLE, STOP_CODONS = _load_codon_table()


def validate_alphabet(sequence: str) -> None:
    """Raise SequenceAlphabetError if the sequence has characters outside ACGT."""
    match = _INVALID_NUCLEOTIDE.search(sequence)
    if match:
        raise SequenceAlphabetError(_INVALID_NUCLEOTIDE.findall(sequence), match.start())


def invalid_characters(sequence: str) -> List[str]:
    """Sorted distinct characters of ``sequence`` outside ACGT."""
    return sorted(set(_INVALID_NUCLEOTIDE.findall(sequence)))


def _scan_frame(sequence: str, frame: int) -> Optional[Tuple[int, str]]:
    """Return (start offset, peptide) of the longest ORF in one frame."""
    best: Optional[Tuple[int, str]] = None
    start = -1
    residues: List[str] = []

    last_codon = len(sequence) - 3
    for i in range(frame, last_codon + 1, 3):
        codon = sequence[i:i + 3]
        if start < 0:
            if codon == START_CODON:
                start = i
                residues = ["M"]
            continue

        if codon in STOP_CODONS:
            if best is None or len(residues) > len(best[1]):
                best = (start, "".join(residues))
            start = -1
            residues = []
        else:
            residues.append(FORWARD_TABLE.get(codon, UNKNOWN_RESIDUE))

    # ORF running off the end of the sequence
    if start >= 0 and (best is None or len(residues) > len(best[1])):
        best = (start, "".join(residues))

    return best


def find_longest_orf(sequence: str, strict: bool = False) -> OrfResult:
    """
    Find the longest ORF across the three forward reading frames.

    Ties go to the first ORF found, scanning frame 0, 1, then 2 and
    left to right within a frame.

    Args:
        sequence: Uppercase nucleotide sequence
        strict: Raise SequenceAlphabetError on characters outside ACGT
            instead of treating codons containing them as unknown residues

    Returns:
        OrfResult; ``has_orf`` is False when no start codon is present
    """
    if strict:
        validate_alphabet(sequence)

    best_frame: Optional[int] = None
    best: Optional[Tuple[int, str]] = None
    for frame in range(3):
        candidate = _scan_frame(sequence, frame)
        if candidate is None:
            continue
        if best is None or len(candidate[1]) > len(best[1]):
            best = candidate
            best_frame = frame

    if best is None:
        return OrfResult.empty(len(sequence))

    return OrfResult(
        has_orf=True,
        peptide=best[1],
        source_length=len(sequence),
        frame=best_frame,
        start=best[0],
    )
