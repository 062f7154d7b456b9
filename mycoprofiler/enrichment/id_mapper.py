"""
Gene ID Mapping Layer for MycoProfiler Enrichment Framework

Converts the sample table into the identifier namespace each enrichment
needs:
- Gene symbol -> Entrez ID via mygene.info, scoped to the organism taxon
- Entrez ID -> UniProt accession via the UniProt REST search endpoint
"""

import logging
from collections import OrderedDict
from dataclasses import dataclass, asdict
from typing import Dict, Iterable, List, Optional, Union

import mygene
import pandas as pd
import requests

from ..config import Settings, get_settings
from .species import (
    Species,
    SpeciesInfo,
    SpeciesNotSupportedError,
    UnrecognizedSpeciesError,
    SUPPORTED_SPECIES,
    parse_species,
)

logger = logging.getLogger("MycoProfiler.Enrichment.IdMapper")


@dataclass
class MappingReport:
    """Report on gene ID mapping results"""
    input_count: int
    mapped_count: int
    unmapped_count: int
    duplicated_count: int
    unmapped_ids: List[str]
    source_type: str
    target_type: str
    species: str

    def to_dict(self) -> Dict:
        return asdict(self)


class UniProtClient:
    """
    Entrez -> UniProt lookups against UniProt REST, limited to one taxon.

    Lookups are OR-batched cross-reference searches
    (``xref:geneid-<id>``), returning accession and GeneID columns as TSV.
    """

    def __init__(
        self,
        taxon_id: int,
        settings: Optional[Settings] = None,
        session: Optional[requests.Session] = None
    ):
        self.taxon_id = taxon_id
        self.settings = settings or get_settings()
        self.session = session or requests.Session()
        self.session.headers.update({'User-Agent': self.settings.user_agent})

    @property
    def search_url(self) -> str:
        return f"{self.settings.uniprot_url}/uniprotkb/search"

    def _build_query(self, entrez_ids: List[str]) -> str:
        xrefs = " OR ".join(f"xref:geneid-{gid}" for gid in entrez_ids)
        return f"({xrefs}) AND (organism_id:{self.taxon_id})"

    def _fetch_batch(self, entrez_ids: List[str]) -> List[List[str]]:
        """Run one search, following pagination links. Returns TSV rows."""
        url = self.search_url
        params = {
            'query': self._build_query(entrez_ids),
            'fields': 'accession,xref_geneid',
            'format': 'tsv',
            'size': 500,
        }
        rows = []

        while url:
            logger.debug(f"UniProt request: {url}")
            response = self.session.get(url, params=params, timeout=self.settings.http_timeout)
            response.raise_for_status()

            lines = [ln for ln in response.text.splitlines() if ln.strip()]
            # First line is the TSV header
            rows.extend(line.split('\t') for line in lines[1:])

            url = response.links.get('next', {}).get('url')
            params = None  # next link already carries the query

        return rows

    def map_entrez_ids(self, entrez_ids: Iterable[str]) -> pd.DataFrame:
        """
        Look up UniProt accessions for Entrez gene IDs.

        Args:
            entrez_ids: Entrez gene IDs

        Returns:
            DataFrame with columns ENTREZ_GENE, UNIPROTKB, ordered by the
            first occurrence of each Entrez ID. IDs without a UniProt
            entry are absent.
        """
        unique_ids = list(OrderedDict.fromkeys(str(gid).strip() for gid in entrez_ids if str(gid).strip()))
        if not unique_ids:
            return pd.DataFrame(columns=['ENTREZ_GENE', 'UNIPROTKB'])

        hits: Dict[str, List[str]] = {gid: [] for gid in unique_ids}
        batch_size = max(1, self.settings.uniprot_batch_size)

        for start in range(0, len(unique_ids), batch_size):
            batch = unique_ids[start:start + batch_size]
            for row in self._fetch_batch(batch):
                if len(row) < 2:
                    continue
                accession = row[0].strip()
                for gid in row[1].split(';'):
                    gid = gid.strip()
                    if gid in hits and accession not in hits[gid]:
                        hits[gid].append(accession)

        records = [
            {'ENTREZ_GENE': gid, 'UNIPROTKB': accession}
            for gid in unique_ids
            for accession in hits[gid]
        ]
        logger.info(
            f"UniProt lookup (taxon {self.taxon_id}): "
            f"{sum(1 for gid in unique_ids if hits[gid])}/{len(unique_ids)} Entrez IDs matched"
        )
        return pd.DataFrame(records, columns=['ENTREZ_GENE', 'UNIPROTKB'])


class GeneIdMapper:
    """
    Identifier mapper for the sample table.

    M. avium tables are expected to already carry UniProt accessions in the
    protein column; M. abscessus gene symbols are resolved remotely.
    Remote clients are created on first use so pass-through paths never
    touch the network.
    """

    def __init__(
        self,
        mygene_client=None,
        uniprot_client: Optional[UniProtClient] = None,
        settings: Optional[Settings] = None
    ):
        self.settings = settings or get_settings()
        self._mg = mygene_client
        self._uniprot = uniprot_client
        self.report: Optional[MappingReport] = None

    @property
    def mg(self):
        if self._mg is None:
            self._mg = mygene.MyGeneInfo()
        return self._mg

    def _uniprot_client(self, info: SpeciesInfo) -> UniProtClient:
        if self._uniprot is None:
            self._uniprot = UniProtClient(info.taxon_id, settings=self.settings)
        return self._uniprot

    def symbols_to_entrez(self, symbols: Iterable[str], info: SpeciesInfo) -> pd.DataFrame:
        """
        Map gene symbols to Entrez IDs.

        Unmapped symbols are dropped; a symbol with several hits yields
        several rows.

        Returns:
            DataFrame with columns SYMBOL, ENTREZID
        """
        symbols = [str(s).strip() for s in symbols if s is not None and str(s).strip()]
        unique_symbols = list(OrderedDict.fromkeys(symbols))
        if not unique_symbols:
            self._set_report(symbols, [], 'symbol', 'entrez', info)
            return pd.DataFrame(columns=['SYMBOL', 'ENTREZID'])

        logger.info(f"Mapping {len(unique_symbols)} gene symbols to Entrez IDs (taxon {info.taxon_id})")
        results = self.mg.querymany(
            unique_symbols,
            scopes='symbol',
            fields='entrezgene',
            species=info.taxon_id,
            returnall=True,
            verbose=False
        )

        hits: Dict[str, List[str]] = {s: [] for s in unique_symbols}
        for hit in results['out']:
            query = str(hit.get('query', ''))
            entrez = hit.get('entrezgene')
            if hit.get('notfound') or entrez is None or query not in hits:
                continue
            entrez = str(entrez)
            if entrez not in hits[query]:
                hits[query].append(entrez)

        records = [
            {'SYMBOL': symbol, 'ENTREZID': entrez}
            for symbol in symbols
            for entrez in hits[symbol]
        ]
        mapped = [s for s in symbols if hits[s]]
        self._set_report(symbols, mapped, 'symbol', 'entrez', info)

        if self.report.unmapped_count:
            pct = 100.0 * self.report.unmapped_count / self.report.input_count
            logger.warning(f"{pct:.2f}% of input gene IDs failed to map to Entrez IDs")

        return pd.DataFrame(records, columns=['SYMBOL', 'ENTREZID'])

    def entrez_to_uniprot(self, entrez_ids: List[str], info: SpeciesInfo) -> pd.DataFrame:
        """Map Entrez IDs to UniProt accessions. Columns ENTREZ_GENE, UNIPROTKB."""
        return self._uniprot_client(info).map_entrez_ids(entrez_ids)

    def map_to_uniprot(self, table: pd.DataFrame, species: Union[str, Species]) -> List[str]:
        """
        Get UniProt accessions suitable for KEGG enrichment.

        Args:
            table: Sample table with 'protein' and 'gene' columns
            species: 'avium' or 'abscessus'

        Returns:
            List of UniProt accessions
        """
        species = parse_species(species, 'map_to_uniprot')
        info = SUPPORTED_SPECIES[species]

        if species is Species.AVIUM:
            uniprot_ids = list(table['protein'])
            self._set_report(uniprot_ids, uniprot_ids, 'uniprot', 'uniprot', info)
            return uniprot_ids
        elif species is Species.ABSCESSUS:
            entrez = self.symbols_to_entrez(table['gene'], info)
            uniprot = self.entrez_to_uniprot(list(entrez['ENTREZID']), info)
            return list(uniprot['UNIPROTKB'])

        raise UnrecognizedSpeciesError(species, 'map_to_uniprot')

    def map_to_entrez(self, table: pd.DataFrame, species: Union[str, Species]) -> List[str]:
        """
        Get Entrez IDs suitable for GO enrichment.

        Args:
            table: Sample table with 'protein' and 'gene' columns
            species: 'avium' or 'abscessus'

        Returns:
            List of Entrez IDs

        Raises:
            SpeciesNotSupportedError: For M. avium
        """
        species = parse_species(species, 'map_to_entrez')
        info = SUPPORTED_SPECIES[species]

        if species is Species.AVIUM:
            raise SpeciesNotSupportedError(species, 'map_to_entrez')
        elif species is Species.ABSCESSUS:
            return list(self.symbols_to_entrez(table['gene'], info)['ENTREZID'])

        raise UnrecognizedSpeciesError(species, 'map_to_entrez')

    def _set_report(
        self,
        inputs: List[str],
        mapped: List[str],
        source_type: str,
        target_type: str,
        info: SpeciesInfo
    ) -> None:
        mapped_set = set(mapped)
        unmapped = [gid for gid in OrderedDict.fromkeys(inputs) if gid not in mapped_set]
        duplicates = {gid for gid in inputs if inputs.count(gid) > 1}

        self.report = MappingReport(
            input_count=len(inputs),
            mapped_count=len(mapped),
            unmapped_count=len(inputs) - len(mapped),
            duplicated_count=len(duplicates),
            unmapped_ids=unmapped[:10],  # Show first 10
            source_type=source_type,
            target_type=target_type,
            species=info.species.value
        )

    def get_mapping_report(self) -> Optional[MappingReport]:
        """Get the last mapping report"""
        return self.report


# Convenience functions
def map_to_uniprot(
    table: pd.DataFrame,
    species: Union[str, Species],
    mapper: Optional[GeneIdMapper] = None
) -> List[str]:
    """Quick UniProt mapping with a default mapper."""
    return (mapper or GeneIdMapper()).map_to_uniprot(table, species)


def map_to_entrez(
    table: pd.DataFrame,
    species: Union[str, Species],
    mapper: Optional[GeneIdMapper] = None
) -> List[str]:
    """Quick Entrez mapping with a default mapper."""
    return (mapper or GeneIdMapper()).map_to_entrez(table, species)
