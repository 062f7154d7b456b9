"""
Enrichment Analysis Framework for MycoProfiler

This package provides KEGG and GO enrichment for mycobacteria with:
- Species Support (M. avium / M. abscessus)
- Gene ID Mapping (Symbol/Entrez/UniProt)
- KEGG and GO annotation sources
- clusterProfiler-style ORA
"""

from .species import (
    Species,
    SpeciesInfo,
    SUPPORTED_SPECIES,
    UnrecognizedSpeciesError,
    SpeciesNotSupportedError,
    parse_species,
)
from .id_mapper import GeneIdMapper, MappingReport, UniProtClient, map_to_uniprot, map_to_entrez
from .ora import run_ora, EnrichmentResult
from .sources import KEGGSource, GOAnnotationSource
from .profiler import kegg_enrichment, go_enrichment
from .pipeline import EnrichmentPipeline, analyze

__all__ = [
    "Species",
    "SpeciesInfo",
    "SUPPORTED_SPECIES",
    "UnrecognizedSpeciesError",
    "SpeciesNotSupportedError",
    "parse_species",
    "GeneIdMapper",
    "MappingReport",
    "UniProtClient",
    "map_to_uniprot",
    "map_to_entrez",
    "run_ora",
    "EnrichmentResult",
    "KEGGSource",
    "GOAnnotationSource",
    "kegg_enrichment",
    "go_enrichment",
    "EnrichmentPipeline",
    "analyze",
]
