"""
Unit tests for table_utils module.
"""

import pandas as pd
import pytest

from mycoprofiler.enrichment.ora import EnrichmentResult
from mycoprofiler.table_utils import load_sample_table, write_result, write_table


class TestSampleTableLoading:
    """Test sample table loading."""

    def test_columns_renamed_positionally(self, sample_csv):
        """Test original headers are replaced by protein/gene."""
        table = load_sample_table(sample_csv)

        assert list(table.columns) == ['protein', 'gene']
        assert len(table) == 3
        assert list(table['protein']) == ['A0QEX1', 'A0QEX2', 'A0QEX3']
        assert list(table['gene']) == ['dnaA', 'dnaN', 'recF']

    def test_extra_columns_dropped(self, tmp_path):
        """Test only the first two columns are kept."""
        path = tmp_path / "wide.csv"
        path.write_text("a,b,c\nP1,g1,x\nP2,g2,y\n")

        table = load_sample_table(path)

        assert list(table.columns) == ['protein', 'gene']
        assert list(table['gene']) == ['g1', 'g2']

    def test_values_are_strings(self, tmp_path):
        """Test numeric-looking identifiers are not converted."""
        path = tmp_path / "numeric.csv"
        path.write_text("protein,gene\n00123,456\n")

        table = load_sample_table(path)

        assert table.iloc[0]['protein'] == '00123'
        assert table.iloc[0]['gene'] == '456'

    def test_single_column_rejected(self, tmp_path):
        """Test a one-column file is rejected."""
        path = tmp_path / "single.csv"
        path.write_text("protein\nP1\nP2\n")

        with pytest.raises(ValueError):
            load_sample_table(path)

    def test_missing_file(self, tmp_path):
        """Test loading a file that doesn't exist."""
        with pytest.raises(FileNotFoundError):
            load_sample_table(tmp_path / "missing.csv")


class TestResultWriting:
    """Test result table writing."""

    def make_result(self):
        table = pd.DataFrame({
            'ID': ['mab00010', 'mab00020'],
            'Description': ['Glycolysis / Gluconeogenesis', 'Citrate cycle (TCA cycle)'],
            'GeneRatio': ['3/5', '1/5'],
            'BgRatio': ['12/400', '15/400'],
            'pvalue': [0.0001, 0.2],
            'p.adjust': [0.0002, 0.2],
            'qvalue': [float('nan'), float('nan')],
            'geneID': ['B1MA01/B1MA02/B1MA03', 'B1MA04'],
            'Count': [3, 1],
        })
        return EnrichmentResult(result_table=table, organism='mab', key_type='uniprot')

    def test_round_trip_shape(self, tmp_path):
        """Test written file has the same rows and columns as the result table."""
        result = self.make_result()
        path = tmp_path / "out_KEGG.csv"

        write_result(result, path)
        loaded = pd.read_csv(path)

        assert loaded.shape == result.result_table.shape
        assert list(loaded.columns) == list(result.result_table.columns)

    def test_all_fields_quoted(self, tmp_path):
        """Test header and values are quoted and no index is written."""
        path = tmp_path / "out.csv"

        write_result(self.make_result(), path)
        lines = path.read_text().splitlines()

        assert lines[0].startswith('"ID","Description"')
        assert lines[1].startswith('"mab00010"')
        assert '"3"' in lines[1]
        assert '"NA"' in lines[1]

    def test_accepts_dataframe(self, tmp_path):
        """Test a bare DataFrame is written as-is."""
        path = tmp_path / "plain.csv"
        write_table(pd.DataFrame({'x': [1, 2]}), path)
        write_result(pd.DataFrame({'x': [1, 2]}), tmp_path / "plain2.csv")

        assert path.read_text() == (tmp_path / "plain2.csv").read_text()

    def test_missing_directory(self, tmp_path):
        """Test I/O errors propagate."""
        with pytest.raises(OSError):
            write_result(self.make_result(), tmp_path / "no_such_dir" / "out.csv")
