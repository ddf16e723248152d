"""Parsing of Ensembl cDNA FASTA headers.

Headers have the following layout; everything before ``description:`` is
split on whitespace::

    ENST00000390372.3 cdna chromosome:GRCh38:7:142482548:142483019:1
    gene:ENSG00000211725.3 gene_biotype:TR_V_gene transcript_biotype:TR_V_gene
    gene_symbol:TRBV5-5 description:T cell receptor beta variable 5-5
"""

import logging
from typing import Tuple

from .error_handler import MalformedHeaderError
from .models import TranscriptHeader

logger = logging.getLogger(__name__)

TRANSCRIPT_PREFIX = "ENST"
DESCRIPTION_MARKER = "description:"
LOCATION_MARKERS = ("chromosome:", "scaffold:")
GENE_MARKER = "gene:"
GENE_BIOTYPE_MARKER = "gene_biotype:"
TRANSCRIPT_BIOTYPE_MARKER = "transcript_biotype:"
GENE_SYMBOL_MARKER = "gene_symbol:"

UNVERSIONED = -1

# Positional fields in order, with what each one must start with
FIELD_NAMES = (
    TRANSCRIPT_PREFIX,
    "sequence type",
    " or ".join(LOCATION_MARKERS),
    GENE_MARKER,
    GENE_BIOTYPE_MARKER,
    TRANSCRIPT_BIOTYPE_MARKER,
    GENE_SYMBOL_MARKER,
)


def split_versioned_id(identifier: str, field_index: int) -> Tuple[str, int]:
    """Split ``ENSG00000211725.3`` into ``('ENSG00000211725', 3)``.

    Identifiers without a version get ``UNVERSIONED`` (-1).
    """
    base, sep, version = identifier.partition(".")
    if not sep:
        logger.debug(f"Identifier without version: {identifier}")
        return identifier, UNVERSIONED
    if not (version.isascii() and version.isdigit()):
        raise MalformedHeaderError(field_index, "integer version after '.'", identifier)
    return base, int(version)


def _field(fields, index: int) -> str:
    if index >= len(fields):
        raise MalformedHeaderError(index, FIELD_NAMES[index], "<missing>")
    return fields[index]


def _strip_marker(fields, index: int, marker: str) -> str:
    value = _field(fields, index)
    if not value.startswith(marker):
        raise MalformedHeaderError(index, marker, value)
    return value[len(marker):]


def parse_header(header: str) -> TranscriptHeader:
    """
    Parse one Ensembl cDNA header line.

    Args:
        header: Header line, with or without the leading '>'

    Returns:
        TranscriptHeader with the parsed fields

    Raises:
        MalformedHeaderError: If any positional field is missing or does not
            start with its expected marker
    """
    header = header.strip()
    if header.startswith(">"):
        header = header[1:]

    description = "n/a"
    i = header.find(DESCRIPTION_MARKER)
    if i >= 0:
        description = header[i + len(DESCRIPTION_MARKER):].strip()
        header = header[:i]

    fields = header.split()

    transcript = _field(fields, 0)
    if not transcript.startswith(TRANSCRIPT_PREFIX):
        raise MalformedHeaderError(0, TRANSCRIPT_PREFIX, transcript)
    transcript_id, transcript_version = split_versioned_id(transcript, 0)

    seq_type = _field(fields, 1)

    location = _field(fields, 2)
    for marker in LOCATION_MARKERS:
        if location.startswith(marker):
            location = location[len(marker):]
            break
    else:
        raise MalformedHeaderError(2, FIELD_NAMES[2], location)

    gene_id, gene_version = split_versioned_id(_strip_marker(fields, 3, GENE_MARKER), 3)
    gene_biotype = _strip_marker(fields, 4, GENE_BIOTYPE_MARKER)
    transcript_biotype = _strip_marker(fields, 5, TRANSCRIPT_BIOTYPE_MARKER)
    gene_symbol = _strip_marker(fields, 6, GENE_SYMBOL_MARKER)

    return TranscriptHeader(
        transcript_id=transcript_id,
        transcript_version=transcript_version,
        seq_type=seq_type,
        chromosomal_location=location,
        gene_id=gene_id,
        gene_version=gene_version,
        gene_biotype=gene_biotype,
        transcript_biotype=transcript_biotype,
        gene_symbol=gene_symbol,
        description=description,
    )
