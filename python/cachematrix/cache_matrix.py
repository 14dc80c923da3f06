from __future__ import annotations

import threading
import time
import warnings
from typing import Any, Callable

import numpy as np

from ._internal import linalg as _linalg
from ._internal.coercion import coerce_cached_value, coerce_matrix
from ._internal.formatting import CacheMatrixFormatMixin
from ._internal.solve_observability import ERROR, HIT, MISS, observer as _observer
from ._internal.warnings import CacheMatrixCacheWarning


def _default_matrix() -> list[list[float]]:
    # 1x1 identity: the smallest square matrix with a well-defined inverse.
    return [[1.0]]


class CacheMatrix(CacheMatrixFormatMixin):
    """A matrix that can cache its inverse.

    The matrix and the cached inverse are held as private read-only copies;
    accessors hand out fresh copies so callers cannot mutate the cache
    behind its back. Replacing the matrix with :meth:`set_matrix` is the
    only way to change it, and always drops the cached inverse.

    Use :func:`cache_solve` (or :meth:`solve`) to compute the inverse once
    and serve it from the cache afterwards.
    """

    def __init__(self, x: Any = None, *, dtype: Any = None) -> None:
        """
        Args:
            x: The matrix to invert. Defaults to the 1x1 matrix ``[[1.0]]``.
                Non-square input is accepted here and fails at solve time.
            dtype: Storage dtype (float32, float64, complex64, complex128).
                Inferred from ``x`` when omitted.
        """
        self._lock = threading.RLock()
        self._dtype = dtype
        self._matrix = coerce_matrix(_default_matrix() if x is None else x, dtype=dtype)
        self._inverse: np.ndarray | None = None
        self._epoch = 0

    def set_matrix(self, y: Any) -> None:
        """Replace the matrix and clear the cached inverse, even if ``y`` equals the old value."""
        matrix = coerce_matrix(y, dtype=self._dtype)
        with self._lock:
            self._matrix = matrix
            self._inverse = None
            self._epoch += 1

    def get_matrix(self) -> np.ndarray:
        with self._lock:
            return self._matrix.copy()

    def set_inverse(self, value: Any) -> None:
        """Overwrite the cached inverse without any validation.

        ``None`` clears the cache. Any other value is trusted as the inverse
        of the current matrix and will be returned by the next solve as-is.
        Arrays whose shape differs from the matrix's emit a warning; scalars
        such as ``float("nan")`` are stored silently.
        """
        cached = coerce_cached_value(value)
        with self._lock:
            if cached is not None and cached.ndim and cached.shape != self._matrix.shape:
                warnings.warn(
                    f"cached inverse shape {cached.shape} does not match matrix shape "
                    f"{self._matrix.shape}; storing it anyway",
                    CacheMatrixCacheWarning,
                    stacklevel=2,
                )
            self._inverse = cached

    def _store_inverse(self, value: Any) -> None:
        cached = coerce_cached_value(value)
        with self._lock:
            self._inverse = cached

    def get_inverse(self) -> np.ndarray | None:
        with self._lock:
            return None if self._inverse is None else self._inverse.copy()

    def clear_inverse(self) -> None:
        self.set_inverse(None)

    @property
    def is_cached(self) -> bool:
        with self._lock:
            return self._inverse is not None

    @property
    def epoch(self) -> int:
        """Number of times the matrix has been replaced since construction."""
        with self._lock:
            return self._epoch

    @property
    def shape(self) -> tuple[int, int]:
        with self._lock:
            rows, cols = self._matrix.shape
        return int(rows), int(cols)

    @property
    def dtype(self) -> np.dtype:
        with self._lock:
            return self._matrix.dtype

    def rows(self) -> int:
        return self.shape[0]

    def cols(self) -> int:
        return self.shape[1]

    def solve(self, *args: Any, **kwargs: Any) -> np.ndarray:
        """Shortcut for ``cache_solve(self, *args, **kwargs)``."""
        return cache_solve(self, *args, **kwargs)

    def __array__(self, dtype: Any = None, copy: Any = None) -> np.ndarray:
        if copy is False:
            raise ValueError(
                "CacheMatrix only exposes copies of its matrix; copy=False is not supported."
            )
        out = self.get_matrix()
        return out if dtype is None else out.astype(dtype, copy=False)


def make_cache_matrix(x: Any = None, **kwargs: Any) -> CacheMatrix:
    """Create a :class:`CacheMatrix` for ``x`` (see its constructor)."""
    return CacheMatrix(x, **kwargs)


def cache_solve(
    target: CacheMatrix,
    *args: Any,
    solver: Callable[..., Any] | None = None,
    **kwargs: Any,
) -> np.ndarray:
    """Return the inverse of ``target``'s matrix, computing it at most once.

    A cached inverse is returned immediately, with no recomputation or
    revalidation. Otherwise the matrix is passed to ``solver`` (default
    :func:`cachematrix.invert`) together with ``args``/``kwargs``, and the
    result is stored on ``target`` before being returned.

    Raises:
        Whatever ``solver`` raises (ShapeError, SingularMatrixError, ...).
        The cache is left unchanged on failure.
    """
    with target._lock:
        cached = target.get_inverse()
        if cached is not None:
            _observer.record(target, outcome=HIT)
            return cached

        invert = _linalg.invert if solver is None else solver
        data = target.get_matrix()
        start = time.perf_counter()
        try:
            result = invert(data, *args, **kwargs)
        except Exception as exc:
            _observer.record(target, outcome=ERROR, elapsed=time.perf_counter() - start, error=exc)
            raise
        _observer.record(target, outcome=MISS, elapsed=time.perf_counter() - start)

        target._store_inverse(result)
        return target.get_inverse()
