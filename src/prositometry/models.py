"""Data models for the transcript annotation pipeline."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Tuple

MotifMatch = Dict[str, Tuple[int, ...]]

MOTIF_SEPARATOR = "<br/>"


@dataclass(frozen=True)
class TranscriptHeader:
    """Metadata parsed from one Ensembl cDNA FASTA header."""

    transcript_id: str
    transcript_version: int
    seq_type: str
    chromosomal_location: str
    gene_id: str
    gene_version: int
    gene_biotype: str
    transcript_biotype: str
    gene_symbol: str
    description: str = "n/a"

    @property
    def full_transcript_id(self) -> str:
        """Get transcript id with version (if any)."""
        if self.transcript_version < 0:
            return self.transcript_id
        return f"{self.transcript_id}.{self.transcript_version}"

    @property
    def full_gene_id(self) -> str:
        if self.gene_version < 0:
            return self.gene_id
        return f"{self.gene_id}.{self.gene_version}"


@dataclass(frozen=True)
class OrfResult:
    """Longest open reading frame of a nucleotide sequence."""

    has_orf: bool
    peptide: str
    source_length: int
    frame: Optional[int] = None
    start: Optional[int] = None  # 0-based offset of the start codon

    def __post_init__(self):
        if not self.has_orf and self.peptide:
            raise ValueError("An OrfResult without ORF cannot carry a peptide")

    @property
    def peptide_length(self) -> int:
        return len(self.peptide)

    @classmethod
    def empty(cls, source_length: int) -> 'OrfResult':
        return cls(has_orf=False, peptide="", source_length=source_length)


def format_motif_string(motifs: Mapping[str, Iterable[int]], separator: str = MOTIF_SEPARATOR) -> str:
    """Render motif hits as ``PS00001: pos:12;40`` entries joined by ``separator``."""
    entries = []
    for motif_id, positions in motifs.items():
        entries.append(f"{motif_id}: pos:{';'.join(str(p) for p in positions)}")
    return separator.join(entries)


@dataclass(frozen=True)
class Transcript:
    """A fully analysed transcript: header, cDNA, ORF and motif hits."""

    header: TranscriptHeader
    cdna: str
    orf: OrfResult
    motifs: Mapping[str, Tuple[int, ...]] = field(default_factory=lambda: MappingProxyType({}))

    @property
    def transcript_id(self) -> str:
        return self.header.transcript_id

    @property
    def gene_id(self) -> str:
        return self.header.gene_id

    @property
    def gene_symbol(self) -> str:
        return self.header.gene_symbol

    @property
    def cdna_length(self) -> int:
        return len(self.cdna)

    @property
    def peptide_length(self) -> int:
        return self.orf.peptide_length if self.orf.has_orf else 0

    @property
    def peptide(self) -> str:
        return self.orf.peptide

    @property
    def motif_ids(self) -> frozenset:
        return frozenset(self.motifs)

    def motif_string(self, separator: str = MOTIF_SEPARATOR) -> str:
        return format_motif_string(self.motifs, separator)

    def __str__(self) -> str:
        lines = [f"{self.gene_symbol}: {self.transcript_id}"]
        for motif_id, positions in self.motifs.items():
            lines.append(f"\t{motif_id} pos:{';'.join(str(p) for p in positions)}")
        return "\n".join(lines)


class TranscriptBuilder:
    """Collects motif hits for a transcript before it is frozen."""

    def __init__(self, header: TranscriptHeader, cdna: str, orf: OrfResult):
        self.header = header
        self.cdna = cdna
        self.orf = orf
        self._motifs: Dict[str, Tuple[int, ...]] = {}

    def add_motif(self, motif_id: str, positions: Iterable[int]) -> 'TranscriptBuilder':
        """Add the hit positions of one motif. Motifs can only be added once."""
        positions = tuple(positions)
        if not positions:
            raise ValueError(f"Motif {motif_id} added without any position")
        if motif_id in self._motifs:
            raise ValueError(f"Motif {motif_id} already recorded for {self.header.transcript_id}")
        self._motifs[motif_id] = positions
        return self

    def add_motifs(self, motifs: Mapping[str, Iterable[int]]) -> 'TranscriptBuilder':
        for motif_id, positions in motifs.items():
            self.add_motif(motif_id, positions)
        return self

    def build(self) -> Transcript:
        return Transcript(
            header=self.header,
            cdna=self.cdna,
            orf=self.orf,
            motifs=MappingProxyType(dict(self._motifs)),
        )


@dataclass(frozen=True)
class Statistics:
    """Differential expression/splicing result for one gene or transcript."""

    identifier: str
    fold_change: float
    p_value: float
    corrected_p_value: float


@dataclass(frozen=True)
class TranscriptReport:
    """Render-ready row for one transcript."""

    identifier: str
    cdna_length: int
    peptide_length: int
    has_p_value: bool
    fold_change: Optional[float]
    p_value: Optional[float]
    corrected_p_value: Optional[float]
    motif_string: str
    difference_string: str
    has_difference: bool

    @property
    def fold_change_display(self) -> str:
        return _display(self.fold_change)

    @property
    def p_value_display(self) -> str:
        return _display(self.p_value)

    @property
    def corrected_p_value_display(self) -> str:
        return _display(self.corrected_p_value)


@dataclass(frozen=True)
class GeneReport:
    """Render-ready summary of one gene and its transcripts."""

    symbol: str
    fold_change: float
    p_value: float
    corrected_p_value: float
    transcript_count: int
    transcripts: Tuple[TranscriptReport, ...]

    @property
    def has_difference(self) -> bool:
        return any(t.has_difference for t in self.transcripts)


def _display(value: Optional[float]) -> str:
    if value is None:
        return ""
    return f"{value:.3g}"
