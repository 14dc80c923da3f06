"""Memoized matrix inversion: compute an inverse once, reuse it until the matrix changes."""
from __future__ import annotations

try:
    from ._version import version as __version__
except ImportError:
    __version__ = "unknown"

from contextlib import contextmanager
from typing import Any, Iterator

from ._internal import linalg as _linalg
from ._internal.errors import CacheMatrixError, ShapeError, SingularMatrixError
from ._internal.runtime import runtime as _runtime
from ._internal.solve_observability import observer as _observer
from ._internal.warnings import (
    CacheMatrixWarning,
    CacheMatrixCacheWarning,
    CacheMatrixConditionWarning,
)
from .cache_matrix import CacheMatrix, cache_solve, make_cache_matrix


def invert(a: Any, b: Any = None, *, tol: float | None = None, check_finite: bool = True) -> Any:
    """
    Compute the inverse of a square matrix (uncached).

    Args:
        a: The matrix to invert.
        b: Optional right-hand side; when given, solve ``a @ x = b`` instead.
        tol: Reciprocal condition number below which ``a`` counts as singular.
        check_finite: Reject NaN/infinite entries.

    Returns:
        The inverse matrix (or ``x``) as a NumPy array.

    Raises:
        ShapeError: If the matrix is not square.
        SingularMatrixError: If the matrix is singular within ``tol``.
    """
    return _linalg.invert(a, b, tol=tol, check_finite=check_finite)


def cache_stats() -> dict[str, Any]:
    """Process-wide hit/miss/error counters for :func:`cache_solve`."""
    return _observer.stats()


def last_solve_record() -> dict[str, Any] | None:
    """The most recent :func:`cache_solve` record as a plain dict, or None."""
    return _observer.last()


def reset_cache_stats() -> None:
    _observer.clear()


def get_rcond_tolerance() -> float:
    return _runtime.rcond_tolerance()


def set_rcond_tolerance(value: float) -> float:
    """Set the reciprocal condition number below which inversion fails."""
    return _runtime.set_rcond_tolerance(value)


def get_warn_rcond() -> float:
    return _runtime.warn_rcond()


def set_warn_rcond(value: float) -> float:
    """Set the reciprocal condition number below which inversion warns (0 disables)."""
    return _runtime.set_warn_rcond(value)


@contextmanager
def temporary_rcond_tolerance(value: float) -> Iterator[float]:
    with _runtime.temporary_rcond_tolerance(value) as tol:
        yield tol


__all__ = [
    "CacheMatrix",
    "make_cache_matrix",
    "cache_solve",
    "invert",
    "CacheMatrixError",
    "ShapeError",
    "SingularMatrixError",
    "CacheMatrixWarning",
    "CacheMatrixCacheWarning",
    "CacheMatrixConditionWarning",
    "cache_stats",
    "last_solve_record",
    "reset_cache_stats",
    "get_rcond_tolerance",
    "set_rcond_tolerance",
    "get_warn_rcond",
    "set_warn_rcond",
    "temporary_rcond_tolerance",
]
