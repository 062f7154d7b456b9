"""Shared pytest fixtures for MycoProfiler tests. No test touches the network."""
from typing import Dict, List
from unittest.mock import MagicMock

import pandas as pd
import pytest

from mycoprofiler.config import Settings
from mycoprofiler.enrichment.id_mapper import GeneIdMapper


class FakeResponse:
    """Minimal stand-in for requests.Response"""

    def __init__(self, text: str, status_code: int = 200, links: Dict = None):
        self.text = text
        self.status_code = status_code
        self.links = links or {}

    def raise_for_status(self):
        if self.status_code >= 400:
            import requests
            raise requests.HTTPError(f"{self.status_code} Error")


class FakeMyGene:
    """mygene.MyGeneInfo stand-in answering symbol queries from a table"""

    def __init__(self, symbol_to_entrez: Dict[str, List[str]]):
        self.symbol_to_entrez = symbol_to_entrez
        self.calls = []

    def querymany(self, queries, scopes=None, fields=None, species=None, returnall=False, verbose=True):
        self.calls.append({'queries': list(queries), 'scopes': scopes, 'species': species})
        out = []
        for query in queries:
            hits = self.symbol_to_entrez.get(query, [])
            if not hits:
                out.append({'query': query, 'notfound': True})
            for entrez in hits:
                out.append({'query': query, '_id': entrez, 'entrezgene': int(entrez)})
        return {'out': out, 'dup': [], 'missing': []}


class FakeUniProtClient:
    """UniProtClient stand-in"""

    def __init__(self, entrez_to_uniprot: Dict[str, List[str]]):
        self.entrez_to_uniprot = entrez_to_uniprot
        self.calls = []

    def map_entrez_ids(self, entrez_ids):
        entrez_ids = list(entrez_ids)
        self.calls.append(entrez_ids)
        records = [
            {'ENTREZ_GENE': gid, 'UNIPROTKB': acc}
            for gid in dict.fromkeys(entrez_ids)
            for acc in self.entrez_to_uniprot.get(gid, [])
        ]
        return pd.DataFrame(records, columns=['ENTREZ_GENE', 'UNIPROTKB'])


class FakeKEGGSource:
    """KEGGSource stand-in; pathways are selected by organism prefix"""

    def __init__(self, gene_sets, names=None):
        self.gene_sets = gene_sets
        self.names = names or {}
        self.calls = []

    def pathway_gene_sets(self, organism, key_type='uniprot'):
        self.calls.append(('pathway_gene_sets', organism, key_type))
        return {pid: genes for pid, genes in self.gene_sets.items() if pid.startswith(organism)}

    def pathway_names(self, organism):
        self.calls.append(('pathway_names', organism))
        return self.names


class FakeGOSource:
    """GOAnnotationSource stand-in"""

    def __init__(self, gene_sets, names, namespaces, symbols):
        self.result = (gene_sets, names, namespaces, symbols)
        self.calls = []

    def go_gene_sets(self, taxon_id, ontology='MF'):
        self.calls.append((taxon_id, ontology))
        return self.result


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings pointing at test hosts and a temporary cache"""
    return Settings(
        uniprot_url="https://uniprot.test",
        kegg_url="https://kegg.test",
        go_obo_url="https://go.test/go-basic.obo",
        cache_dir=tmp_path / "cache",
        http_timeout=5.0,
        uniprot_batch_size=2,
    )


@pytest.fixture
def sample_table() -> pd.DataFrame:
    return pd.DataFrame({
        'protein': ['A0QEX1', 'A0QEX2', 'A0QEX3'],
        'gene': ['dnaA', 'dnaN', 'recF'],
    })


@pytest.fixture
def sample_csv(tmp_path):
    """Three-row input file with arbitrary headers"""
    path = tmp_path / "input.csv"
    path.write_text("Accession,Symbol\nA0QEX1,dnaA\nA0QEX2,dnaN\nA0QEX3,recF\n")
    return path


@pytest.fixture
def fake_mygene() -> FakeMyGene:
    return FakeMyGene({'dnaA': ['1001'], 'dnaN': ['1002'], 'recF': []})


@pytest.fixture
def fake_uniprot() -> FakeUniProtClient:
    return FakeUniProtClient({'1001': ['B1MA01'], '1002': ['B1MA02', 'B1MA03']})


@pytest.fixture
def mapper(fake_mygene, fake_uniprot, settings) -> GeneIdMapper:
    return GeneIdMapper(mygene_client=fake_mygene, uniprot_client=fake_uniprot, settings=settings)


@pytest.fixture
def fake_kegg() -> FakeKEGGSource:
    members = ['A0QEX1', 'A0QEX2', 'B1MA01', 'B1MA02'] + [f"B1MZ{i:02d}" for i in range(10)]
    others = [f"B1MY{i:02d}" for i in range(12)]
    return FakeKEGGSource(
        {'mab00010': set(members), 'mav00010': set(members), 'mab00020': set(others)},
        {'mab00010': 'Glycolysis / Gluconeogenesis', 'mav00010': 'Glycolysis / Gluconeogenesis'}
    )


@pytest.fixture
def fake_go() -> FakeGOSource:
    members = ['1001', '1002'] + [str(2000 + i) for i in range(10)]
    return FakeGOSource(
        {'GO:0006260': set(members)},
        {'GO:0006260': 'DNA replication'},
        {'GO:0006260': 'BP'},
        {'1001': 'dnaA', '1002': 'dnaN'}
    )


@pytest.fixture
def mock_session():
    """requests.Session stand-in; set session.get.side_effect per test"""
    session = MagicMock()
    session.headers = {}
    return session
