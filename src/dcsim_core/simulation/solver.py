# src/dcsim_core/simulation/solver.py
import logging
from dataclasses import dataclass

import numpy as np
import scipy.sparse as sp
import scipy.sparse.linalg as splinalg

from ..constants import PIVOT_TOLERANCE
from .exceptions import SingularMatrixError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MnaFactorization:
    """
    LU factors of the equilibrated matrix Dr @ A @ Dc, with the scaling vectors needed
    to map a right-hand side in and a solution back out.
    """
    lu: splinalg.SuperLU
    row_scale: np.ndarray
    col_scale: np.ndarray

    @property
    def size(self) -> int:
        return len(self.row_scale)


def _max_abs_along(matrix: sp.csc_matrix, axis: int) -> np.ndarray:
    return np.asarray(abs(matrix).max(axis=axis).todense(), dtype=float).ravel()


def factorize_mna_matrix(matrix: sp.spmatrix, pivot_tolerance: float = PIVOT_TOLERANCE) -> MnaFactorization:
    """
    Factorizes the MNA matrix using sparse LU decomposition with partial pivoting.

    Rows and then columns are scaled to unit max-norm first, so that conductances of
    very different magnitudes (an ideal short next to a leakage path) do not look like
    vanishing pivots.

    Args:
        matrix: The square MNA matrix (any SciPy sparse format).
        pivot_tolerance: A pivot |U_ii| of the equilibrated matrix at or below this
                         value marks the matrix as singular.

    Returns:
        The MnaFactorization object.

    Raises:
        SingularMatrixError: If the matrix is singular or contains non-finite entries.
        TypeError: If input is not a sparse matrix.
        ValueError: If the matrix is not square.
    """
    if not sp.issparse(matrix):
        raise TypeError("Input matrix must be a SciPy sparse matrix.")
    if matrix.shape[0] != matrix.shape[1]:
        raise ValueError("MNA matrix must be square.")

    size = matrix.shape[0]
    csc = matrix.tocsc(copy=True)
    csc.eliminate_zeros()
    if not np.all(np.isfinite(csc.data)):
        raise SingularMatrixError(details="MNA matrix contains NaN or infinite entries.", matrix_size=size)

    row_max = _max_abs_along(csc, axis=1)
    if np.any(row_max == 0.0):
        empty = np.flatnonzero(row_max == 0.0).tolist()
        raise SingularMatrixError(details=f"MNA matrix has empty row(s) {empty}.", matrix_size=size)
    row_scale = 1.0 / row_max
    scaled = sp.diags(row_scale) @ csc

    col_max = _max_abs_along(scaled, axis=0)
    if np.any(col_max == 0.0):
        empty = np.flatnonzero(col_max == 0.0).tolist()
        raise SingularMatrixError(details=f"MNA matrix has empty column(s) {empty}.", matrix_size=size)
    col_scale = 1.0 / col_max
    scaled = sp.csc_matrix(scaled @ sp.diags(col_scale))

    logger.debug(f"Factorizing MNA matrix ({size}x{size}, nnz={scaled.nnz})...")
    try:
        lu = splinalg.splu(scaled)
    except RuntimeError as e:
        logger.error(f"LU factorization failed, matrix appears singular: {e}")
        raise SingularMatrixError(details=str(e), matrix_size=size) from e

    pivots = np.abs(lu.U.diagonal())
    smallest = float(pivots.min()) if pivots.size else 0.0
    if smallest <= pivot_tolerance:
        logger.error(f"Near-zero LU pivot {smallest:.3e}; matrix is numerically singular.")
        raise SingularMatrixError(
            details=f"Smallest LU pivot {smallest:.3e} of the equilibrated matrix is below the tolerance {pivot_tolerance:.1e}.",
            matrix_size=size,
        )

    logger.debug("LU factorization successful.")
    return MnaFactorization(lu=lu, row_scale=row_scale, col_scale=col_scale)


def solve_mna_system(factorization: MnaFactorization, rhs: np.ndarray) -> np.ndarray:
    """
    Solves the MNA system using a pre-computed factorization.

    The factorization already vouches for a unique solution, so a NaN or Inf in the
    result comes from a non-finite right-hand side (an infinite source value). It is
    returned as is and left to the anomaly detector.
    """
    if not isinstance(factorization, MnaFactorization):
        raise TypeError("factorization must be an MnaFactorization from factorize_mna_matrix.")
    rhs = np.asarray(rhs, dtype=float)
    if rhs.shape != (factorization.size,):
        raise ValueError(f"Right-hand side has shape {rhs.shape}, expected ({factorization.size},).")

    logger.debug("Solving MNA system using LU factorization...")
    y = factorization.lu.solve(rhs * factorization.row_scale)
    x = y * factorization.col_scale

    if not np.all(np.isfinite(x)):
        logger.warning("NaN or Inf detected in MNA solution vector.")

    return x
