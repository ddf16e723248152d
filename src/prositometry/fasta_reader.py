"""Reading of Ensembl cDNA FASTA files."""

import gzip
import logging
from pathlib import Path
from typing import Iterator, Tuple, Union

from Bio import SeqIO

logger = logging.getLogger(__name__)


def read_fasta(path: Union[str, Path]) -> Iterator[Tuple[str, str]]:
    """
    Yield (header, sequence) pairs from a FASTA file, plain or gzipped.

    The header is the full description line without the leading '>'; the
    sequence is uppercased.

    Raises:
        FileNotFoundError: If the file does not exist
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"FASTA file not found: {path}")

    opener = gzip.open if path.suffix == ".gz" else open
    count = 0
    with opener(path, "rt") as handle:
        for record in SeqIO.parse(handle, "fasta"):
            count += 1
            yield record.description, str(record.seq).upper()

    logger.info(f"Read {count} sequences from {path}")
