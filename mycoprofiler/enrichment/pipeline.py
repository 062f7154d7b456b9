"""
Enrichment Analysis Pipeline for MycoProfiler

Main orchestrator that ties together all enrichment framework components.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

from ..table_utils import load_sample_table, write_result
from .id_mapper import GeneIdMapper
from .profiler import go_enrichment, kegg_enrichment
from .sources import GOAnnotationSource, KEGGSource, normalize_ontology
from .species import Species, parse_species

logger = logging.getLogger("MycoProfiler.Enrichment.Pipeline")

KEGG_SUFFIX = "_KEGG.csv"
GO_SUFFIX = "_GO.csv"


class EnrichmentPipeline:
    """
    Complete enrichment analysis pipeline.

    Orchestrates:
    1. Sample table loading
    2. KEGG: UniProt mapping, enrichment, CSV output
    3. GO: Entrez mapping, enrichment, CSV output (M. abscessus only)
    """

    def __init__(
        self,
        id_mapper: Optional[GeneIdMapper] = None,
        kegg_source: Optional[KEGGSource] = None,
        go_source: Optional[GOAnnotationSource] = None
    ):
        self.id_mapper = id_mapper or GeneIdMapper()
        self._kegg_source = kegg_source
        self._go_source = go_source

    @property
    def kegg_source(self) -> KEGGSource:
        if self._kegg_source is None:
            self._kegg_source = KEGGSource()
        return self._kegg_source

    @property
    def go_source(self) -> GOAnnotationSource:
        if self._go_source is None:
            self._go_source = GOAnnotationSource()
        return self._go_source

    def run(
        self,
        input_path: Union[str, Path],
        output_prefix: str,
        species: Union[str, Species],
        do_kegg: bool = True,
        do_go: bool = False,
        go_ontology: str = 'MF',
        p_value_cutoff: float = 0.05
    ) -> List[Path]:
        """
        Run the analysis and write result tables.

        Args:
            input_path: CSV with protein (first column) and gene (second column)
            output_prefix: Prefix for output files
            species: 'avium' or 'abscessus'
            do_kegg: Run KEGG enrichment
            do_go: Run GO enrichment (skipped with a warning for M. avium)
            go_ontology: GO ontology for GO enrichment
            p_value_cutoff: Significance threshold

        Returns:
            Paths of the written files
        """
        species = parse_species(species, 'analyze')
        if do_go and species is Species.ABSCESSUS:
            go_ontology = normalize_ontology(go_ontology)
        written = []

        logger.info(f"Step 1/3: Loading sample table from {input_path}")
        table = load_sample_table(input_path)

        if do_kegg:
            logger.info("Step 2/3: KEGG enrichment")
            uniprot_ids = self.id_mapper.map_to_uniprot(table, species)
            kegg_result = kegg_enrichment(
                uniprot_ids, species,
                p_value_cutoff=p_value_cutoff,
                source=self.kegg_source
            )
            kegg_path = Path(f"{output_prefix}{KEGG_SUFFIX}")
            write_result(kegg_result, kegg_path)
            written.append(kegg_path)

        if do_go:
            if species is Species.AVIUM:
                logger.warning("Avium GO enrichment not supported, skipping.")
            else:
                logger.info(f"Step 3/3: GO {go_ontology} enrichment")
                entrez_ids = self.id_mapper.map_to_entrez(table, species)
                go_result = go_enrichment(
                    entrez_ids, species, go_ontology,
                    p_value_cutoff=p_value_cutoff,
                    source=self.go_source
                )
                go_path = Path(f"{output_prefix}{GO_SUFFIX}")
                write_result(go_result, go_path)
                written.append(go_path)

        logger.info(f"Analysis complete: {len(written)} file(s) written")
        return written


# Convenience function
def analyze(
    input_path: Union[str, Path],
    output_prefix: str,
    species: Union[str, Species],
    do_kegg: bool = True,
    do_go: bool = False,
    go_ontology: str = 'MF',
    p_value_cutoff: float = 0.05
) -> List[Path]:
    """
    Analyze a protein/gene table with KEGG and/or GO enrichment.

    Writes {output_prefix}_KEGG.csv and/or {output_prefix}_GO.csv.

    Returns:
        Paths of the written files
    """
    pipeline = EnrichmentPipeline()
    return pipeline.run(
        input_path,
        output_prefix,
        species,
        do_kegg=do_kegg,
        do_go=do_go,
        go_ontology=go_ontology,
        p_value_cutoff=p_value_cutoff
    )
