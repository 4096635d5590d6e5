"""
CSV reader and writer for biadjacency matrices.

Format: no header row, comma separated, one row per plant, one column per
animal, every cell a non-negative number.

    1,0,1
    0,1,0
"""

from __future__ import annotations

import io
from pathlib import Path
from typing import Optional, Union

import numpy as np
import pandas as pd

from pyhazard.core.network import BipartiteNetwork
from pyhazard.logger import get_logger

logger = get_logger(__name__)

PathLike = Union[str, Path]


class FormatError(ValueError):
    """Raised when a network file cannot be parsed into a matrix."""


def parse_csv_matrix(text: str, source: Optional[str] = None) -> np.ndarray:
    """Parse CSV text into a 2D float matrix.

    Parameters
    ----------
    text : str
        CSV content
    source : str, optional
        Name used in error messages (typically the file path)

    Returns
    -------
    np.ndarray
        Matrix [n_rows, n_cols]

    Raises
    ------
    FormatError
        Empty input, ragged rows, non-numeric or negative cells
    """
    where = f" in {source}" if source else ""

    lines = [line for line in text.strip().splitlines() if line.strip()]
    if not lines:
        raise FormatError(f"Empty CSV file{where}")

    widths = [len(line.split(",")) for line in lines]
    if len(set(widths)) > 1:
        bad = next(i for i, w in enumerate(widths) if w != widths[0])
        raise FormatError(
            f"Invalid CSV format{where}: rows have different lengths "
            f"(row 1 has {widths[0]} values, row {bad + 1} has {widths[bad]})"
        )

    df = pd.read_csv(
        io.StringIO("\n".join(lines)),
        header=None,
        dtype=str,
        skipinitialspace=True,
        keep_default_na=False,
    )
    values = df.apply(lambda col: pd.to_numeric(col.str.strip(), errors="coerce"))

    if values.isna().any().any():
        row, col = np.argwhere(values.isna().to_numpy())[0]
        raise FormatError(
            f"Invalid CSV format{where}: contains non-numeric value "
            f"'{df.iat[row, col]}' at row {row + 1}, column {col + 1}"
        )

    matrix = values.to_numpy(dtype=float)
    if not np.all(np.isfinite(matrix)):
        raise FormatError(f"Invalid CSV format{where}: contains non-finite values")
    if np.any(matrix < 0):
        raise FormatError(f"Invalid CSV format{where}: contains negative weights")

    return matrix


def read_matrix_csv(path: PathLike) -> np.ndarray:
    """Read a biadjacency matrix from a CSV file."""
    path = Path(path)
    try:
        text = path.read_text()
    except OSError as e:
        raise FormatError(f"Cannot read {path}: {e}") from e
    matrix = parse_csv_matrix(text, source=str(path))
    logger.debug(f"Read {matrix.shape[0]}x{matrix.shape[1]} matrix from {path}")
    return matrix


def read_network(
    b_path: Optional[PathLike] = None,
    s_path: Optional[PathLike] = None,
) -> BipartiteNetwork:
    """Read pollination (B) and/or seed dispersal (S) layers from CSV files."""
    B = read_matrix_csv(b_path) if b_path is not None else None
    S = read_matrix_csv(s_path) if s_path is not None else None
    return BipartiteNetwork(B=B, S=S)


def write_matrix_csv(matrix: np.ndarray, path: PathLike) -> Path:
    """Write a matrix in the same headerless format."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    pd.DataFrame(np.asarray(matrix, dtype=float)).to_csv(path, header=False, index=False)
    return path
