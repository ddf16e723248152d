"""Loading of HBA-DEALS differential expression/splicing results.

HBA-DEALS writes one tab-separated row per gene and isoform::

    Gene    Isoform          Explvl   P
    TP53    Expression       1.21     0.0004
    TP53    ENST00000269305  0.37     0.012

Rows with ``Isoform == "Expression"`` carry the gene-level expression
result; the others carry isoform-level splicing results.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Union

import numpy as np
import pandas as pd

from .models import Statistics

logger = logging.getLogger(__name__)

GENE_COLUMN = "Gene"
ISOFORM_COLUMN = "Isoform"
FOLD_CHANGE_COLUMN = "Explvl"
P_COLUMN = "P"
CORRECTED_P_COLUMN = "Corrected.P"
EXPRESSION_ROW = "Expression"

REQUIRED_COLUMNS = [GENE_COLUMN, ISOFORM_COLUMN, FOLD_CHANGE_COLUMN, P_COLUMN]


@dataclass
class HbaDealsResults:
    """Gene-level results in file order, isoform-level results by transcript id."""

    genes: List[Statistics] = field(default_factory=list)
    transcripts: Dict[str, Statistics] = field(default_factory=dict)


def benjamini_hochberg(p_values) -> np.ndarray:
    """Benjamini-Hochberg adjusted p-values, in input order."""
    p = np.asarray(p_values, dtype=float)
    n = p.size
    if n == 0:
        return p
    order = np.argsort(p)[::-1]
    ranked = p[order] * n / np.arange(n, 0, -1)
    adjusted = np.minimum(np.minimum.accumulate(ranked), 1.0)
    result = np.empty(n)
    result[order] = adjusted
    return result


def _strip_version(identifier: str) -> str:
    return identifier.partition(".")[0]


def _to_statistics(frame: pd.DataFrame, id_column: str, strip_version: bool = False) -> List[Statistics]:
    records = []
    for identifier, fold_change, p_value, corrected in zip(
            frame[id_column], frame[FOLD_CHANGE_COLUMN], frame[P_COLUMN], frame[CORRECTED_P_COLUMN]):
        identifier = str(identifier)
        records.append(Statistics(
            identifier=_strip_version(identifier) if strip_version else identifier,
            fold_change=float(fold_change),
            p_value=float(p_value),
            corrected_p_value=float(corrected),
        ))
    return records


def parse_hbadeals(frame: pd.DataFrame) -> HbaDealsResults:
    """
    Split an HBA-DEALS table into gene-level and isoform-level results.

    When the table has no ``Corrected.P`` column, Benjamini-Hochberg
    correction is applied separately to the gene and isoform rows.

    Raises:
        ValueError: If required columns are missing
    """
    missing = [c for c in REQUIRED_COLUMNS if c not in frame.columns]
    if missing:
        raise ValueError(f"HBA-DEALS table missing required column(s): {', '.join(missing)}")

    frame = frame.copy()
    frame[FOLD_CHANGE_COLUMN] = pd.to_numeric(frame[FOLD_CHANGE_COLUMN], errors="coerce")
    frame[P_COLUMN] = pd.to_numeric(frame[P_COLUMN], errors="coerce")

    invalid = frame[FOLD_CHANGE_COLUMN].isna() | frame[P_COLUMN].isna()
    if invalid.any():
        logger.warning(f"Skipping {int(invalid.sum())} HBA-DEALS row(s) without numeric Explvl/P")
        frame = frame[~invalid]

    is_gene = frame[ISOFORM_COLUMN].astype(str) == EXPRESSION_ROW
    gene_rows = frame[is_gene].copy()
    isoform_rows = frame[~is_gene].copy()

    if CORRECTED_P_COLUMN not in frame.columns:
        gene_rows[CORRECTED_P_COLUMN] = benjamini_hochberg(gene_rows[P_COLUMN].to_numpy())
        isoform_rows[CORRECTED_P_COLUMN] = benjamini_hochberg(isoform_rows[P_COLUMN].to_numpy())

    results = HbaDealsResults()
    seen = set()
    for record in _to_statistics(gene_rows, GENE_COLUMN):
        if record.identifier in seen:
            logger.warning(f"Duplicate gene-level result for {record.identifier}; keeping first")
            continue
        seen.add(record.identifier)
        results.genes.append(record)

    for record in _to_statistics(isoform_rows, ISOFORM_COLUMN, strip_version=True):
        results.transcripts.setdefault(record.identifier, record)

    logger.info(
        f"Loaded HBA-DEALS results: {len(results.genes)} genes, {len(results.transcripts)} isoforms"
    )
    return results


def load_hbadeals(path: Union[str, Path]) -> HbaDealsResults:
    """Read an HBA-DEALS output file (tab-separated)."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"HBA-DEALS file not found: {path}")
    frame = pd.read_csv(path, sep="\t", dtype={GENE_COLUMN: str, ISOFORM_COLUMN: str})
    return parse_hbadeals(frame)
