"""
KEGG and GO enrichment for the supported mycobacteria.

Both functions fetch the organism's annotation, then run ORA with the
clusterProfiler defaults (BH adjustment, gene set size 10-500, q-value
cutoff 0.2).
"""

import logging
from typing import List, Optional, Union

from .ora import EnrichmentResult, run_ora
from .sources import GOAnnotationSource, KEGGSource, normalize_ontology
from .species import (
    Species,
    SpeciesNotSupportedError,
    UnrecognizedSpeciesError,
    SUPPORTED_SPECIES,
    parse_species,
)

logger = logging.getLogger("MycoProfiler.Enrichment.Profiler")

MIN_GS_SIZE = 10
MAX_GS_SIZE = 500
QVALUE_CUTOFF = 0.2


def kegg_enrichment(
    identifiers: List[str],
    species: Union[str, Species],
    p_value_cutoff: float = 0.05,
    source: Optional[KEGGSource] = None
) -> EnrichmentResult:
    """
    KEGG pathway enrichment of UniProt accessions.

    Args:
        identifiers: UniProt accessions
        species: 'avium' (KEGG 'mav') or 'abscessus' (KEGG 'mab')
        p_value_cutoff: Significance threshold
        source: KEGG client (default: a new KEGGSource)

    Returns:
        EnrichmentResult
    """
    species = parse_species(species, 'kegg_enrichment')

    if species is Species.AVIUM or species is Species.ABSCESSUS:
        organism = SUPPORTED_SPECIES[species].kegg_organism
    else:
        raise UnrecognizedSpeciesError(species, 'kegg_enrichment')

    source = source or KEGGSource()
    logger.info(f"KEGG enrichment for {len(identifiers)} UniProt IDs (organism '{organism}')")

    gene_sets = source.pathway_gene_sets(organism, key_type='uniprot')
    names = source.pathway_names(organism)

    return run_ora(
        [str(i) for i in identifiers],
        gene_sets,
        term_names=names,
        p_cutoff=p_value_cutoff,
        p_adjust_method='BH',
        q_cutoff=QVALUE_CUTOFF,
        min_gs_size=MIN_GS_SIZE,
        max_gs_size=MAX_GS_SIZE,
        organism=organism,
        key_type='uniprot',
        ontology='KEGG'
    )


def go_enrichment(
    identifiers: List[str],
    species: Union[str, Species],
    ontology: str,
    p_value_cutoff: float = 0.05,
    source: Optional[GOAnnotationSource] = None
) -> EnrichmentResult:
    """
    GO enrichment of Entrez IDs with readable (gene symbol) output.

    Args:
        identifiers: Entrez gene IDs
        species: Only 'abscessus' is supported
        ontology: 'BP', 'MF', 'CC' or 'ALL'
        p_value_cutoff: Significance threshold
        source: GO annotation client (default: a new GOAnnotationSource)

    Returns:
        EnrichmentResult

    Raises:
        SpeciesNotSupportedError: For M. avium
    """
    species = parse_species(species, 'go_enrichment')

    if species is Species.AVIUM:
        raise SpeciesNotSupportedError(species, 'go_enrichment')
    elif species is not Species.ABSCESSUS:
        raise UnrecognizedSpeciesError(species, 'go_enrichment')

    ontology = normalize_ontology(ontology)
    info = SUPPORTED_SPECIES[species]
    source = source or GOAnnotationSource()
    logger.info(f"GO {ontology} enrichment for {len(identifiers)} Entrez IDs (taxon {info.taxon_id})")

    gene_sets, names, namespaces, symbols = source.go_gene_sets(info.taxon_id, ontology)

    return run_ora(
        [str(i) for i in identifiers],
        gene_sets,
        term_names=names,
        p_cutoff=p_value_cutoff,
        p_adjust_method='BH',
        q_cutoff=QVALUE_CUTOFF,
        min_gs_size=MIN_GS_SIZE,
        max_gs_size=MAX_GS_SIZE,
        term_ontology=namespaces if ontology == 'ALL' else None,
        gene_labels=symbols,
        organism=info.scientific_name,
        key_type='ENTREZID',
        ontology=ontology
    )
