"""
Tests for reading and writing network CSV files.
"""

import numpy as np
import pytest

from pyhazard.core.network import build_interaction_matrix
from pyhazard.io.network_csv import (
    FormatError,
    parse_csv_matrix,
    read_matrix_csv,
    read_network,
    write_matrix_csv,
)


class TestParseCSV:
    """Test CSV text parsing."""

    def test_parses_matrix(self):
        matrix = parse_csv_matrix("1,0,1\n0,1,0\n")
        assert matrix.shape == (2, 3)
        assert np.array_equal(matrix, [[1, 0, 1], [0, 1, 0]])

    def test_whitespace_and_decimals(self):
        matrix = parse_csv_matrix("  0.5 , 1.25\n2, 0\n\n")
        assert np.allclose(matrix, [[0.5, 1.25], [2.0, 0.0]])

    def test_single_value(self):
        assert parse_csv_matrix("3").shape == (1, 1)

    def test_empty(self):
        with pytest.raises(FormatError, match="Empty"):
            parse_csv_matrix("   \n")

    def test_ragged_rows(self):
        with pytest.raises(FormatError, match="different lengths"):
            parse_csv_matrix("1,0,1\n0,1\n")

    def test_non_numeric(self):
        with pytest.raises(FormatError, match="non-numeric value 'x' at row 2, column 1"):
            parse_csv_matrix("1,0\nx,1\n")

    def test_empty_cell(self):
        with pytest.raises(FormatError, match="non-numeric"):
            parse_csv_matrix("1,,0\n0,1,0\n")

    def test_negative(self):
        with pytest.raises(FormatError, match="negative"):
            parse_csv_matrix("1,-1\n0,1\n")

    def test_source_in_message(self):
        with pytest.raises(FormatError, match="in net.csv"):
            parse_csv_matrix("", source="net.csv")


class TestFiles:
    """Test file round trips."""

    def test_read_matrix(self, tmp_path):
        path = tmp_path / "B.csv"
        path.write_text("1,0\n0,1\n")
        assert np.array_equal(read_matrix_csv(path), np.eye(2))

    def test_missing_file(self, tmp_path):
        with pytest.raises(FormatError, match="Cannot read"):
            read_matrix_csv(tmp_path / "missing.csv")

    def test_write_then_read(self, tmp_path):
        matrix = np.array([[1.0, 0.0, 0.5], [0.0, 2.0, 0.0]])
        path = write_matrix_csv(matrix, tmp_path / "out" / "S.csv")
        assert path.read_text().splitlines()[0].count(",") == 2
        assert np.allclose(read_matrix_csv(path), matrix)

    def test_read_network(self, tmp_path):
        b = tmp_path / "B.csv"
        s = tmp_path / "S.csv"
        b.write_text("1,0\n0,1\n")
        s.write_text("0,1,1\n")

        network = read_network(b, s)

        assert network.n_plants == 2
        assert network.n_animals == 3
        assert build_interaction_matrix(network).n_species == 5

    def test_read_network_single_layer(self, tmp_path):
        s = tmp_path / "S.csv"
        s.write_text("1,1\n")
        network = read_network(s_path=s)
        assert network.B is None
        assert network.S.shape == (1, 2)
