from __future__ import annotations

import warnings
from typing import Any

import numpy as np

from .coercion import coerce_matrix
from .errors import ShapeError, SingularMatrixError
from .runtime import runtime as _runtime
from .warnings import CacheMatrixConditionWarning


def _require_square(a: np.ndarray) -> int:
    rows, cols = a.shape
    if rows == 0 or cols == 0:
        raise ShapeError(f"Matrix must have at least one row and column, got shape ({rows}, {cols}).")
    if rows != cols:
        raise ShapeError(f"Matrix must be square to invert, got shape ({rows}, {cols}).")
    return rows


def reciprocal_condition(a: np.ndarray, inverse: np.ndarray) -> float:
    """1-norm reciprocal condition number, 1 / (||A||_1 * ||A^-1||_1)."""
    norm_a = float(np.linalg.norm(a, 1))
    norm_inv = float(np.linalg.norm(inverse, 1))
    if norm_a == 0.0 or not np.isfinite(norm_inv) or norm_inv == 0.0:
        return 0.0
    return 1.0 / (norm_a * norm_inv)


def _coerce_rhs(b: Any, n: int, dtype: np.dtype) -> np.ndarray:
    rhs = np.asarray(b)
    if rhs.ndim not in (1, 2) or rhs.shape[0] != n:
        raise ShapeError(
            f"Right-hand side must have {n} rows to match the matrix, got shape {rhs.shape}."
        )
    return rhs.astype(np.result_type(dtype, rhs.dtype, np.float64), copy=False)


def invert(a: Any, b: Any = None, *, tol: float | None = None, check_finite: bool = True) -> np.ndarray:
    """Invert a square matrix, or solve ``a @ x = b`` when ``b`` is given.

    Args:
        a: Square matrix-like input.
        b: Optional right-hand side (vector or matrix with ``len(a)`` rows).
        tol: Reciprocal condition number below which ``a`` is treated as
            singular. Defaults to the process setting (machine epsilon
            unless configured otherwise). ``0`` only rejects exactly
            singular input.
        check_finite: Reject input containing NaN or infinity.

    Returns:
        A new ndarray holding the inverse (or the solution ``x``).

    Raises:
        ShapeError: If ``a`` is not square or ``b`` does not conform.
        SingularMatrixError: If ``a`` is singular within ``tol``.
        ValueError: If ``check_finite`` is set and ``a`` has non-finite entries.
    """
    data = coerce_matrix(a)
    n = _require_square(data)

    if check_finite and not np.isfinite(data).all():
        raise ValueError("Matrix must not contain infs or NaNs.")

    try:
        inverse = np.linalg.inv(data)
    except np.linalg.LinAlgError as exc:
        raise SingularMatrixError(f"Matrix is exactly singular: {exc}") from exc

    rcond = reciprocal_condition(data, inverse)
    limit = _runtime.rcond_tolerance() if tol is None else float(tol)
    if rcond < limit or (limit == 0.0 and rcond == 0.0):
        raise SingularMatrixError(
            f"Matrix is computationally singular: reciprocal condition number = {rcond:g}"
        )

    warn_below = _runtime.warn_rcond()
    if rcond < warn_below:
        warnings.warn(
            f"Matrix is ill-conditioned (reciprocal condition number = {rcond:g}); "
            "the computed inverse may be inaccurate.",
            CacheMatrixConditionWarning,
            stacklevel=2,
        )

    if b is None:
        return inverse

    rhs = _coerce_rhs(b, n, data.dtype)
    try:
        return np.linalg.solve(data, rhs)
    except np.linalg.LinAlgError as exc:  # pragma: no cover - inv() already succeeded
        raise SingularMatrixError(str(exc)) from exc
