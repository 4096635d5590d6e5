"""
I/O module for PyHazard.

Reading and writing network biadjacency matrices as CSV files.
"""

from pyhazard.io.network_csv import (
    FormatError,
    parse_csv_matrix,
    read_matrix_csv,
    read_network,
    write_matrix_csv,
)

__all__ = [
    "FormatError",
    "parse_csv_matrix",
    "read_matrix_csv",
    "read_network",
    "write_matrix_csv",
]
