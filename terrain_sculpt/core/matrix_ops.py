"""
Square-matrix transforms used by the brush pipeline.

Rotation is a pure index permutation, so four quarter turns reproduce the
input exactly. Upsampling keeps every input vertex and fills the new
vertices between them by bilinear interpolation.
"""

import numpy as np
from typing import Sequence, Union

MatrixLike = Union[np.ndarray, Sequence[Sequence[float]]]


def _as_matrix(matrix: MatrixLike) -> np.ndarray:
    array = np.asarray(matrix, dtype=np.float64)
    if array.ndim != 2:
        raise ValueError(f"Expected a 2D matrix, got {array.ndim} dimensions")
    return array


def rotate_90(matrix: MatrixLike) -> np.ndarray:
    """
    Rotate a matrix a quarter turn clockwise.

    An ``n x m`` input becomes ``m x n`` with
    ``result[j][n - 1 - i] == matrix[i][j]``.
    """
    array = _as_matrix(matrix)
    if array.size == 0:
        return np.zeros((0, 0), dtype=np.float64)
    return np.ascontiguousarray(array[::-1, :].T)


def rotate(matrix: MatrixLike, quarter_turns: int) -> np.ndarray:
    """Apply ``quarter_turns`` clockwise rotations (taken modulo 4)."""
    result = _as_matrix(matrix).copy()
    for _ in range(quarter_turns % 4):
        result = rotate_90(result)
    return result


def _axis_weights(n_in: int, n_out: int, numerator: int, denominator: int):
    # Integer multiples of the denominator land exactly on input vertices
    positions = np.arange(n_out, dtype=np.float64) * numerator / denominator
    lower = np.floor(positions).astype(np.intp)
    lower = np.clip(lower, 0, max(n_in - 2, 0))
    upper = np.minimum(lower + 1, n_in - 1)
    frac = positions - lower
    if n_in == 1:
        frac = np.zeros(n_out, dtype=np.float64)
    return lower, upper, frac


def _bilinear(array: np.ndarray, rows, cols) -> np.ndarray:
    r0, r1, fr = rows
    c0, c1, fc = cols

    fr = fr[:, None]
    fc = fc[None, :]

    top = array[np.ix_(r0, c0)] * (1.0 - fc) + array[np.ix_(r0, c1)] * fc
    bottom = array[np.ix_(r1, c0)] * (1.0 - fc) + array[np.ix_(r1, c1)] * fc
    return top * (1.0 - fr) + bottom * fr


def upsample_bilinear(matrix: MatrixLike, factor: int) -> np.ndarray:
    """
    Upsample a vertex matrix by an integer factor.

    An ``R x C`` input produces a ``((R-1)*k+1) x ((C-1)*k+1)`` output.
    Output vertices at ``[i*k][j*k]`` reproduce ``matrix[i][j]`` exactly;
    the rest are bilinear blends of the four surrounding input vertices.

    Args:
        matrix: Input vertex matrix
        factor: Integer upsampling factor, at least 1

    Returns:
        New upsampled matrix (a copy even when ``factor == 1``)
    """
    if int(factor) != factor or factor < 1:
        raise ValueError(f"Upsampling factor must be a positive integer, got {factor}")
    factor = int(factor)

    array = _as_matrix(matrix)
    if factor == 1 or array.size == 0:
        return array.copy()

    n_rows, n_cols = array.shape
    out_rows = (n_rows - 1) * factor + 1
    out_cols = (n_cols - 1) * factor + 1

    rows = _axis_weights(n_rows, out_rows, 1, factor)
    cols = _axis_weights(n_cols, out_cols, 1, factor)
    return _bilinear(array, rows, cols)


def resample_bilinear(matrix: MatrixLike, out_rows: int, out_cols: int) -> np.ndarray:
    """Resample a matrix to an arbitrary size, corners aligned."""
    if out_rows < 1 or out_cols < 1:
        raise ValueError("Output size must be at least 1x1")

    array = _as_matrix(matrix)
    if array.size == 0:
        raise ValueError("Cannot resample an empty matrix")

    n_rows, n_cols = array.shape
    rows = _axis_weights(n_rows, out_rows, n_rows - 1, max(out_rows - 1, 1))
    cols = _axis_weights(n_cols, out_cols, n_cols - 1, max(out_cols - 1, 1))
    return _bilinear(array, rows, cols)
