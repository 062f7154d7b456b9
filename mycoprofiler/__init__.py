"""
MycoProfiler: KEGG and GO enrichment for Mycobacterium avium and
Mycobacterium abscessus protein/gene tables.
"""

__version__ = "1.0.0"

from .table_utils import load_sample_table, write_result
from .enrichment import (
    Species,
    UnrecognizedSpeciesError,
    SpeciesNotSupportedError,
    map_to_uniprot,
    map_to_entrez,
    kegg_enrichment,
    go_enrichment,
    EnrichmentResult,
    analyze,
)

__all__ = [
    "__version__",
    "load_sample_table",
    "write_result",
    "Species",
    "UnrecognizedSpeciesError",
    "SpeciesNotSupportedError",
    "map_to_uniprot",
    "map_to_entrez",
    "kegg_enrichment",
    "go_enrichment",
    "EnrichmentResult",
    "analyze",
]
