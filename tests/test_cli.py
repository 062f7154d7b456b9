"""
Unit tests for the command line entry point.
"""

from pathlib import Path

import pytest

from mycoprofiler import cli


class TestCLI:
    """Test argument handling and exit codes."""

    def test_defaults_passed_to_analyze(self, monkeypatch, tmp_path, capsys):
        """Test default flags: KEGG on, GO off."""
        calls = []

        def fake_analyze(input_path, output_prefix, species, **kwargs):
            calls.append((input_path, output_prefix, species, kwargs))
            return [Path(f"{output_prefix}_KEGG.csv")]

        monkeypatch.setattr(cli, 'analyze', fake_analyze)

        code = cli.main(['in.csv', 'out', '--species', 'avium'])

        assert code == 0
        input_path, prefix, species, kwargs = calls[0]
        assert (input_path, prefix, species) == ('in.csv', 'out', 'avium')
        assert kwargs['do_kegg'] is True
        assert kwargs['do_go'] is False
        assert kwargs['go_ontology'] == 'MF'
        assert kwargs['p_value_cutoff'] == 0.05
        assert 'out_KEGG.csv' in capsys.readouterr().out

    def test_go_flags(self, monkeypatch):
        """Test GO options are forwarded."""
        calls = []
        monkeypatch.setattr(cli, 'analyze', lambda *args, **kwargs: calls.append(kwargs) or [])

        code = cli.main(['in.csv', 'out', '--species', 'abscessus', '--no-kegg', '--go',
                         '--ontology', 'bp', '--pvalue-cutoff', '0.01'])

        assert code == 0
        assert calls[0]['do_kegg'] is False
        assert calls[0]['do_go'] is True
        assert calls[0]['go_ontology'] == 'BP'
        assert calls[0]['p_value_cutoff'] == 0.01

    def test_unrecognized_species_exit_code(self, tmp_path, sample_csv):
        """Test an unrecognized species exits with 1 and writes nothing."""
        code = cli.main([str(sample_csv), str(tmp_path / "out"), '--species', 'bogus'])

        assert code == 1
        assert sorted(p.name for p in tmp_path.iterdir()) == ['input.csv']

    def test_invalid_ontology_usage_error(self):
        """Test argparse rejects unknown ontologies."""
        with pytest.raises(SystemExit) as exc_info:
            cli.main(['in.csv', 'out', '--species', 'abscessus', '--ontology', 'KEGG'])

        assert exc_info.value.code == 2
