"""PROSITE pattern compilation and motif catalog loading.

Supported pattern syntax (https://prosite.expasy.org/scanprosite/scanprosite_doc.html):

- ``x``: any residue
- ``[ALT]``: any of the listed residues; ``>`` inside brackets also
  accepts the C-terminus, as in ``[G>]``
- ``{AM}``: any residue except the listed ones
- ``e(n)`` and ``e(n,m)``: element repeated n times, or n to m times
- ``<`` at the start and ``>`` at the end anchor to the N- and C-terminus
- elements are separated by ``-``; a final ``.`` is optional
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union

from Bio.ExPASy import Prosite

from .error_handler import InvalidMotifPatternError

logger = logging.getLogger(__name__)

RESIDUES = "ABCDEFGHIKLMNPQRSTUVWYZ"

_ELEMENT = re.compile(
    r"^(?P<nterm><)?"
    r"(?P<core>x|[A-Z]|\[[A-Z>]+\]|\{[A-Z]+\})"
    r"(?:\((?P<low>\d+)(?:,(?P<high>\d+))?\))?"
    r"(?P<cterm>>)?$"
)


def _element_to_regex(core: str, pattern: str) -> str:
    if core == "x":
        return "."
    if core.startswith("["):
        residues = core[1:-1]
        cterm = residues.endswith(">")
        if cterm:
            residues = residues[:-1]
        if ">" in residues:
            raise InvalidMotifPatternError(pattern, f"misplaced '>' in {core}")
        _check_residues(residues, pattern)
        if cterm:
            return rf"(?:[{residues}]|\Z)" if residues else r"\Z"
        return f"[{residues}]"
    if core.startswith("{"):
        residues = core[1:-1]
        _check_residues(residues, pattern)
        return f"[^{residues}]"
    _check_residues(core, pattern)
    return core


def _check_residues(residues: str, pattern: str) -> None:
    unknown = [r for r in residues if r not in RESIDUES]
    if unknown:
        raise InvalidMotifPatternError(pattern, f"unknown residue(s) {''.join(unknown)}")


def prosite_to_regex(pattern: str) -> str:
    """
    Translate a PROSITE pattern into an equivalent Python regular expression.

    Raises:
        InvalidMotifPatternError: If the pattern does not follow the grammar
    """
    text = "".join(pattern.split())
    if text.endswith("."):
        text = text[:-1]
    if not text:
        raise InvalidMotifPatternError(pattern, "empty pattern")

    elements = text.split("-")
    parts: List[str] = []
    for index, element in enumerate(elements):
        match = _ELEMENT.match(element)
        if not match:
            raise InvalidMotifPatternError(pattern, f"cannot parse element '{element}'")

        if match.group("nterm"):
            if index != 0:
                raise InvalidMotifPatternError(pattern, "'<' only allowed on the first element")
            parts.append("^")

        regex = _element_to_regex(match.group("core"), pattern)

        low, high = match.group("low"), match.group("high")
        if low is not None:
            if high is not None:
                if int(low) > int(high):
                    raise InvalidMotifPatternError(pattern, f"bad repeat range in '{element}'")
                regex = f"(?:{regex}){{{int(low)},{int(high)}}}"
            else:
                regex = f"(?:{regex}){{{int(low)}}}"
        parts.append(regex)

        if match.group("cterm"):
            if index != len(elements) - 1:
                raise InvalidMotifPatternError(pattern, "'>' only allowed on the last element")
            parts.append(r"\Z")

    return "".join(parts)


def compile_prosite_pattern(pattern: str) -> "re.Pattern":
    """Compile a PROSITE pattern for overlapping scans.

    The expression is wrapped in a lookahead so ``finditer`` reports every
    start position, including overlapping ones.
    """
    regex = prosite_to_regex(pattern)
    try:
        return re.compile(f"(?=({regex}))")
    except re.error as e:
        raise InvalidMotifPatternError(pattern, str(e))


@dataclass(frozen=True)
class Motif:
    """A named PROSITE pattern."""

    motif_id: str
    pattern: str
    name: str = ""
    regex: "re.Pattern" = field(default=None, compare=False, repr=False)


class MotifCatalog:
    """Ordered collection of compiled motifs, validated when loaded."""

    def __init__(self, motifs: Iterable[Motif] = ()):
        self._motifs: Dict[str, Motif] = {}
        for motif in motifs:
            if motif.motif_id in self._motifs:
                logger.warning(f"Duplicate motif id {motif.motif_id}; keeping first definition")
                continue
            if motif.regex is None:
                motif = self.make_motif(motif.motif_id, motif.pattern, motif.name)
            self._motifs[motif.motif_id] = motif

    @staticmethod
    def make_motif(motif_id: str, pattern: str, name: str = "") -> Motif:
        try:
            regex = compile_prosite_pattern(pattern)
        except InvalidMotifPatternError as e:
            raise InvalidMotifPatternError(pattern, e.reason, motif_id=motif_id)
        return Motif(motif_id=motif_id, pattern=pattern, name=name, regex=regex)

    @classmethod
    def from_entries(cls, entries: Union[Mapping[str, str], Iterable[Tuple[str, str]]]) -> 'MotifCatalog':
        """Build a catalog from ``{motif_id: pattern}`` or (id, pattern) pairs."""
        if isinstance(entries, Mapping):
            entries = entries.items()
        return cls(cls.make_motif(motif_id, pattern) for motif_id, pattern in entries)

    @classmethod
    def from_prosite_file(cls, path: Union[str, Path]) -> 'MotifCatalog':
        """
        Load all PATTERN entries from a ``prosite.dat`` file.

        Raises:
            FileNotFoundError: If the file does not exist
            InvalidMotifPatternError: If any pattern cannot be compiled
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"PROSITE file not found: {path}")

        motifs = []
        skipped = 0
        with open(path, "r") as handle:
            for record in Prosite.parse(handle):
                if record.type != "PATTERN" or not record.pattern:
                    skipped += 1
                    continue
                motifs.append(cls.make_motif(record.accession, record.pattern, record.name))

        logger.info(f"Loaded {len(motifs)} PROSITE patterns from {path} ({skipped} non-pattern entries skipped)")
        return cls(motifs)

    def get(self, motif_id: str) -> Optional[Motif]:
        return self._motifs.get(motif_id)

    def __iter__(self) -> Iterator[Motif]:
        return iter(self._motifs.values())

    def __len__(self) -> int:
        return len(self._motifs)

    def __contains__(self, motif_id: str) -> bool:
        return motif_id in self._motifs
