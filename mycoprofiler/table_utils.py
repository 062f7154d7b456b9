"""
Table Utilities for MycoProfiler
Handles loading the protein/gene sample table and writing enrichment tables.
"""

import csv
import logging
from pathlib import Path
from typing import Union

import pandas as pd

SAMPLE_COLUMNS = ["protein", "gene"]


def load_sample_table(file_path: Union[str, Path]) -> pd.DataFrame:
    """
    Load a protein/gene sample table from a CSV file.

    The file must have a header row and at least two columns. The first
    column is taken as the protein (UniProt accession) and the second as the
    gene symbol, whatever the header says. Extra columns are dropped.

    Args:
        file_path: Path to CSV file

    Returns:
        DataFrame with exactly two string columns: 'protein', 'gene'

    Raises:
        FileNotFoundError: If file doesn't exist
        ValueError: If the file has fewer than two columns
    """
    file_path = Path(file_path)

    if not file_path.exists():
        raise FileNotFoundError(f"Sample table not found: {file_path}")

    data = pd.read_csv(file_path, header=0, dtype=str, keep_default_na=False)

    if data.shape[1] < 2:
        raise ValueError(
            f"Sample table {file_path} needs at least 2 columns (protein, gene), "
            f"got {data.shape[1]}"
        )

    data = data.iloc[:, :2].copy()
    data.columns = SAMPLE_COLUMNS

    logging.info(f"Loaded {len(data)} rows from {file_path}")

    return data


def write_table(table: pd.DataFrame, file_path: Union[str, Path]) -> None:
    """
    Write a table as CSV: header row, every field quoted, no index column.

    Missing values are written as NA.
    """
    table.to_csv(file_path, index=False, quoting=csv.QUOTE_ALL, na_rep="NA")
    logging.info(f"Wrote {len(table)} rows to {file_path}")


def write_result(result, file_path: Union[str, Path]) -> None:
    """
    Write the result table of an enrichment result to disk.

    Args:
        result: EnrichmentResult (its result_table is written) or a DataFrame
        file_path: Output CSV path
    """
    table = result if isinstance(result, pd.DataFrame) else result.result_table
    write_table(table, file_path)
