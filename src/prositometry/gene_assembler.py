"""Grouping of transcripts into genes and isoform-specific motif differences."""

import logging
from collections import OrderedDict
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional

from .error_handler import ErrorHandler, ErrorType
from .models import Transcript

logger = logging.getLogger(__name__)


class Gene:
    """All transcripts of one gene, in the order they were first seen."""

    def __init__(self, gene_id: str, transcripts: Iterable[Transcript]):
        self.gene_id = gene_id
        self._transcripts: "OrderedDict[str, Transcript]" = OrderedDict()
        for transcript in transcripts:
            if transcript.gene_id != gene_id:
                raise ValueError(
                    f"Transcript {transcript.transcript_id} belongs to {transcript.gene_id}, not {gene_id}"
                )
            if transcript.transcript_id in self._transcripts:
                logger.warning(
                    f"Duplicate transcript {transcript.transcript_id} for gene {gene_id}; keeping first record"
                )
                continue
            self._transcripts[transcript.transcript_id] = transcript
        if not self._transcripts:
            raise ValueError(f"Gene {gene_id} has no transcripts")
        self._differences = self._compute_differences()

    def _compute_differences(self) -> Dict[str, FrozenSet[str]]:
        """Motifs of each transcript that no sibling transcript carries."""
        differences = {}
        for transcript_id, transcript in self._transcripts.items():
            siblings = set()
            for other_id, other in self._transcripts.items():
                if other_id != transcript_id:
                    siblings.update(other.motifs)
            if len(self._transcripts) == 1:
                differences[transcript_id] = frozenset()
            else:
                differences[transcript_id] = transcript.motif_ids - siblings
        return differences

    @property
    def gene_symbol(self) -> str:
        return next(iter(self._transcripts.values())).gene_symbol

    @property
    def transcripts(self) -> Mapping[str, Transcript]:
        return self._transcripts

    def __len__(self) -> int:
        return len(self._transcripts)

    def __iter__(self):
        return iter(self._transcripts.values())

    def difference(self, transcript_id: str) -> FrozenSet[str]:
        """Motif ids found in this transcript but in none of its siblings."""
        if transcript_id not in self._differences:
            raise KeyError(f"Transcript {transcript_id} not in gene {self.gene_id}")
        return self._differences[transcript_id]

    def has_difference(self, transcript_id: str) -> bool:
        return bool(self.difference(transcript_id))

    def difference_string(self, transcript_id: str) -> str:
        """Differing motif ids in the transcript's own motif order, or 'none'."""
        difference = self.difference(transcript_id)
        if not difference:
            return "none"
        ordered = [m for m in self._transcripts[transcript_id].motifs if m in difference]
        return ";".join(ordered)


class GeneAssembler:
    """Collects transcripts and groups them by gene id.

    Transcripts are kept in one flat list; each gene keeps the indexes of its
    transcripts in that list.
    """

    def __init__(self, error_handler: Optional[ErrorHandler] = None):
        self.error_handler = error_handler
        self._transcripts: List[Transcript] = []
        self._gene_index: "OrderedDict[str, List[int]]" = OrderedDict()
        self._seen: Dict[str, set] = {}

    def add(self, transcript: Transcript) -> bool:
        """Add a transcript. Returns False if it was a duplicate and skipped."""
        seen = self._seen.setdefault(transcript.gene_id, set())
        if transcript.transcript_id in seen:
            message = (
                f"Duplicate transcript {transcript.transcript_id} for gene {transcript.gene_id}; "
                f"keeping first record"
            )
            if self.error_handler:
                self.error_handler.record_warning(
                    ErrorType.DUPLICATE_TRANSCRIPT, message, operation="gene_assembly",
                    item_id=transcript.transcript_id
                )
            else:
                logger.warning(message)
            return False

        seen.add(transcript.transcript_id)
        self._transcripts.append(transcript)
        self._gene_index.setdefault(transcript.gene_id, []).append(len(self._transcripts) - 1)
        return True

    def add_all(self, transcripts: Iterable[Transcript]) -> int:
        return sum(1 for t in transcripts if self.add(t))

    @property
    def transcript_count(self) -> int:
        return len(self._transcripts)

    @property
    def gene_count(self) -> int:
        return len(self._gene_index)

    def assemble(self) -> List[Gene]:
        """Build genes in first-seen order."""
        genes = [
            Gene(gene_id, (self._transcripts[i] for i in indexes))
            for gene_id, indexes in self._gene_index.items()
        ]
        logger.info(f"Assembled {len(genes)} genes from {len(self._transcripts)} transcripts")
        return genes


def genes_by_symbol(genes: Iterable[Gene]) -> Dict[str, Gene]:
    """Index genes by symbol. The first gene wins when a symbol repeats."""
    index: Dict[str, Gene] = {}
    for gene in genes:
        if gene.gene_symbol in index:
            logger.warning(
                f"Gene symbol {gene.gene_symbol} used by {index[gene.gene_symbol].gene_id} "
                f"and {gene.gene_id}; keeping {index[gene.gene_symbol].gene_id}"
            )
            continue
        index[gene.gene_symbol] = gene
    return index
