"""prositometry.

PROSITE motif annotation of Ensembl transcripts and per-gene reports of
isoform-specific motif differences for differentially spliced genes.
"""

__version__ = "1.0.0"
