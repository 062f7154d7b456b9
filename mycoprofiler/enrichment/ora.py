"""
Over-Representation Analysis (ORA) for MycoProfiler Enrichment Framework

Hypergeometric test per gene set with multiple testing correction. The
result table uses the clusterProfiler column layout so output files are
interchangeable with enrichKEGG / enrichGO results.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

import numpy as np
import pandas as pd
from scipy.stats import hypergeom
from statsmodels.stats.multitest import multipletests

logger = logging.getLogger("MycoProfiler.Enrichment.ORA")

RESULT_COLUMNS = [
    'ID', 'Description', 'GeneRatio', 'BgRatio',
    'pvalue', 'p.adjust', 'qvalue', 'geneID', 'Count',
]

# R p.adjust method names -> statsmodels multipletests methods
P_ADJUST_METHODS = {
    'BH': 'fdr_bh',
    'fdr': 'fdr_bh',
    'BY': 'fdr_by',
    'bonferroni': 'bonferroni',
    'holm': 'holm',
    'hochberg': 'simes-hochberg',
    'hommel': 'hommel',
    'none': None,
}


@dataclass
class EnrichmentResult:
    """Result of one KEGG or GO over-representation analysis"""

    result_table: pd.DataFrame  # every tested term, sorted by pvalue

    organism: str = ""
    key_type: str = ""
    ontology: str = ""
    pvalue_cutoff: float = 0.05
    qvalue_cutoff: float = 0.2
    p_adjust_method: str = 'BH'
    gene: List[str] = field(default_factory=list)
    universe_size: int = 0

    def significant(self) -> pd.DataFrame:
        """Rows passing the p-value, adjusted p-value and q-value cutoffs"""
        table = self.result_table
        mask = (
            (table['pvalue'] <= self.pvalue_cutoff)
            & (table['p.adjust'] <= self.pvalue_cutoff)
            & (table['qvalue'].isna() | (table['qvalue'] <= self.qvalue_cutoff))
        )
        return table[mask].reset_index(drop=True)

    def __len__(self) -> int:
        return len(self.result_table)


def hypergeometric_test(
    hit_in_pathway: int,
    pathway_size: int,
    hit_size: int,
    background_size: int
) -> float:
    """
    Perform hypergeometric test for enrichment.

    P(X >= hit_in_pathway) for a draw of hit_size genes from
    background_size genes, pathway_size of which are in the pathway.

    Returns:
        P-value
    """
    # P(X >= k) = 1 - P(X <= k-1)
    p_value = hypergeom.sf(hit_in_pathway - 1, background_size, pathway_size, hit_size)

    return float(p_value)


def p_adjust(p_values: List[float], method: str = 'BH') -> List[float]:
    """
    Adjust p-values for multiple testing.

    Args:
        p_values: List of p-values
        method: R-style method name ('BH', 'BY', 'bonferroni', 'holm', ...)

    Returns:
        List of adjusted p-values
    """
    if method not in P_ADJUST_METHODS:
        raise ValueError(
            f"Unsupported p-value adjustment method: '{method}'. "
            f"Supported: {list(P_ADJUST_METHODS)}"
        )
    if not p_values:
        return []

    sm_method = P_ADJUST_METHODS[method]
    if sm_method is None:
        return list(p_values)

    _, adjusted, _, _ = multipletests(p_values, method=sm_method)
    return list(adjusted)


def calculate_qvalue(p_values: List[float], lambda_: float = 0.05) -> List[float]:
    """
    Storey q-values with a single lambda.

    pi0 is estimated as the share of p-values >= lambda, rescaled by
    1 - lambda. Returns NaN for every entry when fewer than two p-values are
    given or pi0 is not positive.
    """
    n = len(p_values)
    if n <= 1:
        return [float('nan')] * n

    p = np.asarray(p_values, dtype=float)
    pi0 = min(1.0, float(np.mean(p >= lambda_)) / (1.0 - lambda_))
    if pi0 <= 0:
        return [float('nan')] * n

    order = np.argsort(p)
    ranked = pi0 * n * p[order] / np.arange(1, n + 1)
    ranked = np.minimum.accumulate(ranked[::-1])[::-1]

    q = np.empty(n)
    q[order] = np.minimum(ranked, 1.0)
    return q.tolist()


def _empty_table(with_ontology: bool) -> pd.DataFrame:
    columns = (['ONTOLOGY'] if with_ontology else []) + RESULT_COLUMNS
    return pd.DataFrame(columns=columns)


def run_ora(
    gene_list: Iterable[str],
    gene_sets: Dict[str, Iterable[str]],
    term_names: Optional[Dict[str, str]] = None,
    universe: Optional[Iterable[str]] = None,
    p_cutoff: float = 0.05,
    p_adjust_method: str = 'BH',
    q_cutoff: float = 0.2,
    min_gs_size: int = 10,
    max_gs_size: int = 500,
    term_ontology: Optional[Dict[str, str]] = None,
    gene_labels: Optional[Dict[str, str]] = None,
    organism: str = "",
    key_type: str = "",
    ontology: str = ""
) -> EnrichmentResult:
    """
    Run Over-Representation Analysis.

    Args:
        gene_list: Input genes (duplicates ignored)
        gene_sets: Dictionary of term ID -> gene identifiers
        term_names: Optional term ID -> description
        universe: Background genes (default: all genes in gene_sets)
        p_cutoff: P-value cutoff recorded on the result
        p_adjust_method: Multiple testing correction ('BH' by default)
        q_cutoff: Q-value cutoff recorded on the result
        min_gs_size: Smallest term size tested
        max_gs_size: Largest term size tested
        term_ontology: Optional term ID -> ontology code; adds ONTOLOGY column
        gene_labels: Optional gene ID -> display label used in geneID
        organism: Organism label recorded on the result
        key_type: Identifier type recorded on the result
        ontology: Ontology label recorded on the result

    Returns:
        EnrichmentResult whose table holds every tested term sorted by p-value
    """
    term_names = term_names or {}
    gene_labels = gene_labels or {}

    # Background is the set of annotated genes, restricted to the universe if given
    annotated = set()
    for genes in gene_sets.values():
        annotated.update(genes)
    if universe is not None:
        annotated &= set(universe)

    query = [g for g in dict.fromkeys(str(g) for g in gene_list) if g in annotated]
    query_set = set(query)
    background_size = len(annotated)

    def make_result(table: pd.DataFrame) -> EnrichmentResult:
        return EnrichmentResult(
            result_table=table,
            organism=organism,
            key_type=key_type,
            ontology=ontology,
            pvalue_cutoff=p_cutoff,
            qvalue_cutoff=q_cutoff,
            p_adjust_method=p_adjust_method,
            gene=query,
            universe_size=background_size
        )

    if not query:
        logger.warning("No gene can be mapped to the annotation; returning an empty result")
        return make_result(_empty_table(term_ontology is not None))

    n = len(query)
    logger.info(
        f"Running ORA: {n} annotated input genes, "
        f"{len(gene_sets)} gene sets, background={background_size}"
    )

    rows = []
    for term_id, term_genes in gene_sets.items():
        term_set = set(term_genes) & annotated
        term_size = len(term_set)

        if term_size < min_gs_size or term_size > max_gs_size:
            continue

        hits = [g for g in query if g in term_set]
        k = len(hits)
        if k == 0:
            continue

        row = {
            'ID': term_id,
            'Description': term_names.get(term_id, term_id),
            'GeneRatio': f"{k}/{n}",
            'BgRatio': f"{term_size}/{background_size}",
            'pvalue': hypergeometric_test(k, term_size, n, background_size),
            'geneID': "/".join(gene_labels.get(g, g) for g in hits),
            'Count': k,
        }
        if term_ontology is not None:
            row['ONTOLOGY'] = term_ontology.get(term_id, ontology)
        rows.append(row)

    if not rows:
        logger.info("ORA complete: no gene set within the size limits overlaps the input")
        return make_result(_empty_table(term_ontology is not None))

    table = pd.DataFrame(rows)
    table['p.adjust'] = p_adjust(list(table['pvalue']), method=p_adjust_method)
    table['qvalue'] = calculate_qvalue(list(table['pvalue']))

    columns = (['ONTOLOGY'] if term_ontology is not None else []) + RESULT_COLUMNS
    table = table[columns].sort_values('pvalue', kind='mergesort').reset_index(drop=True)

    result = make_result(table)
    logger.info(f"ORA complete: {len(result.significant())}/{len(table)} tested terms significant")

    return result
