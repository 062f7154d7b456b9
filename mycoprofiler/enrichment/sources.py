"""
Annotation Source Clients for MycoProfiler Enrichment Framework

Builds term -> gene sets for an organism:
- KEGG pathways from the KEGG REST API (link / conv / list)
- GO terms from mygene.info gene annotations, propagated up the GO DAG
"""

import logging
from collections import defaultdict
from pathlib import Path
from typing import Dict, List, Optional, Set, Tuple

import mygene
import requests
from goatools.obo_parser import GODag

from ..config import Settings, get_settings

logger = logging.getLogger("MycoProfiler.Enrichment.Sources")

GO_NAMESPACES = {
    'biological_process': 'BP',
    'molecular_function': 'MF',
    'cellular_component': 'CC',
}

GO_ONTOLOGIES = ('BP', 'MF', 'CC', 'ALL')


class KEGGSource:
    """Client for the KEGG REST API (https://www.kegg.jp/kegg/rest/keggapi.html)."""

    KEY_TYPES = ('kegg', 'uniprot')

    def __init__(self, settings: Optional[Settings] = None, session: Optional[requests.Session] = None):
        self.settings = settings or get_settings()
        self.session = session or requests.Session()
        self.session.headers.update({'User-Agent': self.settings.user_agent})

    def _get_pairs(self, operation: str, organism: str) -> List[Tuple[str, str]]:
        """Fetch a two-column tab-separated KEGG listing."""
        url = f"{self.settings.kegg_url}/{operation}/{organism}"
        logger.debug(f"KEGG request: {url}")

        response = self.session.get(url, timeout=self.settings.http_timeout)
        response.raise_for_status()

        pairs = []
        for line in response.text.splitlines():
            parts = line.rstrip('\n').split('\t')
            if len(parts) < 2:
                continue
            pairs.append((parts[0].strip(), parts[1].strip()))
        return pairs

    @staticmethod
    def _strip_prefix(identifier: str) -> str:
        """'path:mab00010' -> 'mab00010', 'mab:MAB_0001' -> 'MAB_0001'"""
        return identifier.split(':', 1)[1] if ':' in identifier else identifier

    def pathway_names(self, organism: str) -> Dict[str, str]:
        """
        Get pathway descriptions for an organism.

        The organism suffix KEGG appends (' - Mycobacteroides abscessus ...')
        is removed.
        """
        names = {}
        for pathway_id, description in self._get_pairs('list/pathway', organism):
            if ' - ' in description:
                description = description.rsplit(' - ', 1)[0]
            names[self._strip_prefix(pathway_id)] = description
        return names

    def pathway_gene_sets(self, organism: str, key_type: str = 'uniprot') -> Dict[str, Set[str]]:
        """
        Get pathway -> gene set for an organism.

        Args:
            organism: KEGG organism code (e.g. 'mab')
            key_type: 'kegg' for KEGG gene IDs, 'uniprot' for UniProt accessions

        Returns:
            Dictionary mapping pathway ID to the set of gene identifiers
        """
        if key_type not in self.KEY_TYPES:
            raise ValueError(f"Unsupported KEGG key type: '{key_type}'. Supported: {list(self.KEY_TYPES)}")

        gene_sets: Dict[str, Set[str]] = defaultdict(set)
        links = self._get_pairs('link/pathway', organism)

        if key_type == 'kegg':
            for gene, pathway in links:
                gene_sets[self._strip_prefix(pathway)].add(self._strip_prefix(gene))
        else:
            to_uniprot: Dict[str, Set[str]] = defaultdict(set)
            for gene, uniprot in self._get_pairs('conv/uniprot', organism):
                to_uniprot[gene].add(self._strip_prefix(uniprot))

            for gene, pathway in links:
                gene_sets[self._strip_prefix(pathway)].update(to_uniprot.get(gene, ()))

        gene_sets = {pid: genes for pid, genes in gene_sets.items() if genes}
        logger.info(f"Loaded {len(gene_sets)} KEGG pathways for '{organism}' ({key_type} IDs)")
        return gene_sets


class GOAnnotationSource:
    """
    GO annotation for an organism.

    Direct gene -> GO annotations come from mygene.info; each annotation is
    extended to all ancestors in the GO DAG through is_a and relationship
    links (part_of, regulates), so every gene counts towards the general
    terms above its specific ones.
    """

    def __init__(
        self,
        mygene_client=None,
        settings: Optional[Settings] = None,
        session: Optional[requests.Session] = None
    ):
        self.settings = settings or get_settings()
        self._mg = mygene_client
        self.session = session or requests.Session()
        self._dag: Optional[GODag] = None

    @property
    def mg(self):
        if self._mg is None:
            self._mg = mygene.MyGeneInfo()
        return self._mg

    def download_ontology(self, force_download: bool = False) -> Path:
        """
        Download the GO OBO file into the cache directory if not present.

        Returns:
            Path to the OBO file
        """
        cache_dir = Path(self.settings.cache_dir)
        cache_dir.mkdir(parents=True, exist_ok=True)
        obo_path = cache_dir / "go-basic.obo"

        if obo_path.exists() and not force_download:
            logger.info(f"Using cached GO ontology: {obo_path}")
            return obo_path

        logger.info(f"Downloading GO ontology from {self.settings.go_obo_url}")
        response = self.session.get(self.settings.go_obo_url, timeout=self.settings.http_timeout)
        response.raise_for_status()

        with open(obo_path, 'w', encoding='utf-8') as f:
            f.write(response.text)

        logger.info(f"GO ontology downloaded to: {obo_path}")
        return obo_path

    @property
    def dag(self) -> GODag:
        if self._dag is None:
            self._dag = GODag(str(self.download_ontology()), optional_attrs={'relationship'}, prt=None)
        return self._dag

    def gene_annotations(self, taxon_id: int) -> Tuple[Dict[str, Set[str]], Dict[str, str]]:
        """
        Fetch direct GO annotations for every annotated gene of a taxon.

        Returns:
            Tuple of (entrez_id -> set of GO IDs, entrez_id -> gene symbol)
        """
        logger.info(f"Fetching GO annotations for taxon {taxon_id} from mygene.info")
        hits = self.mg.query(
            '_exists_:go',
            species=taxon_id,
            fields='entrezgene,symbol,go',
            fetch_all=True
        )

        gene2go: Dict[str, Set[str]] = defaultdict(set)
        symbols: Dict[str, str] = {}

        for hit in hits:
            entrez = hit.get('entrezgene') or hit.get('_id')
            if entrez is None:
                continue
            entrez = str(entrez)
            if hit.get('symbol'):
                symbols[entrez] = str(hit['symbol'])

            for annotations in (hit.get('go') or {}).values():
                if isinstance(annotations, dict):
                    annotations = [annotations]
                for annotation in annotations:
                    go_id = annotation.get('id')
                    if go_id:
                        gene2go[entrez].add(go_id)

        logger.info(f"Found GO annotations for {len(gene2go)} genes")
        return dict(gene2go), symbols

    def go_gene_sets(
        self,
        taxon_id: int,
        ontology: str = 'MF'
    ) -> Tuple[Dict[str, Set[str]], Dict[str, str], Dict[str, str], Dict[str, str]]:
        """
        Build GO term -> gene sets with ancestor propagation.

        Args:
            taxon_id: NCBI taxon ID
            ontology: 'BP', 'MF', 'CC' or 'ALL'

        Returns:
            Tuple of (term -> entrez IDs, term -> name, term -> ontology code,
            entrez ID -> symbol)
        """
        ontology = normalize_ontology(ontology)
        gene2go, symbols = self.gene_annotations(taxon_id)
        dag = self.dag

        gene_sets: Dict[str, Set[str]] = defaultdict(set)
        names: Dict[str, str] = {}
        namespaces: Dict[str, str] = {}
        missing = set()

        for entrez, go_ids in gene2go.items():
            for go_id in go_ids:
                if go_id not in dag:
                    missing.add(go_id)
                    continue
                term = dag[go_id]
                for record in [term] + [dag[parent] for parent in term.get_all_upper()]:
                    code = GO_NAMESPACES.get(record.namespace)
                    if code is None or (ontology != 'ALL' and code != ontology):
                        continue
                    gene_sets[record.item_id].add(entrez)
                    names[record.item_id] = record.name
                    namespaces[record.item_id] = code

        if missing:
            logger.debug(f"{len(missing)} GO IDs not in the ontology (obsolete), ignored")

        logger.info(f"Built {len(gene_sets)} GO {ontology} gene sets for taxon {taxon_id}")
        return dict(gene_sets), names, namespaces, symbols


def normalize_ontology(ontology: str) -> str:
    """Validate a GO ontology code ('BP', 'MF', 'CC', 'ALL'; any case)."""
    code = str(ontology).strip().upper()
    if code not in GO_ONTOLOGIES:
        raise ValueError(f"Unsupported GO ontology: '{ontology}'. Supported: {list(GO_ONTOLOGIES)}")
    return code
