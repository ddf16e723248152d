"""Scanning of translated peptides for PROSITE motifs."""

import logging
from typing import Dict, Tuple

from .models import MotifMatch
from .prosite import Motif, MotifCatalog

logger = logging.getLogger(__name__)


def find_motif_positions(motif: Motif, peptide: str) -> Tuple[int, ...]:
    """Return every 1-based start position of ``motif`` in ``peptide``.

    Matches may overlap; positions are ascending.
    """
    if not peptide:
        return ()
    return tuple(m.start() + 1 for m in motif.regex.finditer(peptide))


class MotifScanner:
    """Scans peptides against a loaded motif catalog.

    The scanner holds no state beyond the catalog, so it can be shared by
    worker threads and repeated scans of a peptide give identical results.
    """

    def __init__(self, catalog: MotifCatalog):
        self.catalog = catalog

    def scan(self, peptide: str) -> MotifMatch:
        """
        Find all motif hits in a peptide.

        Args:
            peptide: Amino-acid sequence (no stop symbol)

        Returns:
            Mapping of motif id to 1-based start positions, in catalog
            order; motifs without hits are absent
        """
        hits: Dict[str, Tuple[int, ...]] = {}
        if not peptide:
            return hits

        for motif in self.catalog:
            positions = find_motif_positions(motif, peptide)
            if positions:
                hits[motif.motif_id] = positions

        logger.debug(f"Scanned peptide of length {len(peptide)}: {len(hits)} motif(s) found")
        return hits

