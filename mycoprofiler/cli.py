#!/usr/bin/env python3
"""
MycoProfiler command line entry point.

Usage:
    mycoprofiler proteins.csv results/run1 --species abscessus --go --ontology BP

Output:
    results/run1_KEGG.csv, results/run1_GO.csv
"""

import argparse
import logging
import sys
from typing import List, Optional

from . import __version__
from .config import get_settings
from .enrichment.pipeline import analyze
from .enrichment.sources import GO_ONTOLOGIES
from .enrichment.species import Species


def setup_logging(level: str) -> None:
    """Configure stderr logging for command line runs."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s [%(levelname)s] %(message)s',
        handlers=[logging.StreamHandler(sys.stderr)]
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='mycoprofiler',
        description='KEGG/GO enrichment for M. avium and M. abscessus protein/gene tables'
    )
    parser.add_argument('input', help='CSV file: protein (first column), gene symbol (second column)')
    parser.add_argument('output_prefix', help='Prefix for output files (<prefix>_KEGG.csv, <prefix>_GO.csv)')
    parser.add_argument('--species', required=True, help=f"One of: {', '.join(s.value for s in Species)}")
    parser.add_argument('--no-kegg', dest='do_kegg', action='store_false', help='Skip KEGG enrichment')
    parser.add_argument('--go', dest='do_go', action='store_true', help='Run GO enrichment (M. abscessus only)')
    parser.add_argument('--ontology', default='MF', choices=GO_ONTOLOGIES, type=str.upper,
                        help='GO ontology (default: MF)')
    parser.add_argument('--pvalue-cutoff', type=float, default=0.05, help='Significance threshold (default: 0.05)')
    parser.add_argument('--log-level', default=None, help='Logging level (default: MYCOPROFILER_LOG_LEVEL or INFO)')
    parser.add_argument('--version', action='version', version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level or get_settings().log_level)

    try:
        written = analyze(
            args.input,
            args.output_prefix,
            args.species,
            do_kegg=args.do_kegg,
            do_go=args.do_go,
            go_ontology=args.ontology,
            p_value_cutoff=args.pvalue_cutoff
        )
    except Exception as e:
        logging.error(f"Analysis failed: {e}")
        logging.debug("Traceback:", exc_info=True)
        return 1

    for path in written:
        print(path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
