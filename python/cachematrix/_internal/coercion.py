from __future__ import annotations

from collections.abc import Sequence as _SequenceABC
from typing import Any

import numpy as np

from .dtypes import infer_dtype, normalize_dtype


def is_sequence_like(value: Any) -> bool:
    return isinstance(value, _SequenceABC) and not isinstance(value, (str, bytes, bytearray))


def _rows_from_accessors(candidate: Any) -> list[list[Any]] | None:
    rows_attr: Any = getattr(candidate, "rows", None)
    cols_attr: Any = getattr(candidate, "cols", None)
    get_attr: Any = getattr(candidate, "get", None)
    if not (callable(rows_attr) and callable(cols_attr) and callable(get_attr)):
        return None

    rows = int(rows_attr())
    cols = int(cols_attr())
    if rows < 0 or cols < 0:
        raise ValueError("Matrix dimensions must be non-negative.")
    return [[get_attr(i, j) for j in range(cols)] for i in range(rows)]


def _as_2d(array: np.ndarray) -> np.ndarray:
    if array.ndim == 0:
        return array.reshape(1, 1)
    if array.ndim == 1:
        return array.reshape(1, -1)
    if array.ndim != 2:
        raise ValueError(f"Matrix input must be at most 2-D, got {array.ndim}-D.")
    return array


def _frozen(array: np.ndarray) -> np.ndarray:
    out = np.array(array, copy=True)
    out.setflags(write=False)
    return out


def coerce_matrix(candidate: Any, *, dtype: Any = None) -> np.ndarray:
    """Return a private, read-only 2-D float/complex copy of ``candidate``.

    Shape is not checked beyond being 2-D; squareness and emptiness are the
    inversion routine's concern.
    """
    dtype_norm = normalize_dtype(dtype)

    source: Any = _rows_from_accessors(candidate)
    if source is None:
        source = candidate

    try:
        raw = np.asarray(source)
    except ValueError as exc:
        raise ValueError("Matrix data must be rectangular (all rows the same length).") from exc

    if raw.dtype.kind not in ("b", "i", "u", "f", "c"):
        if raw.dtype == object and is_sequence_like(source):
            raise ValueError("Matrix data must be rectangular and numeric.")
        raise TypeError(
            "Matrix data must be numeric: a NumPy array, a nested sequence, or a scalar."
        )

    target = dtype_norm if dtype_norm is not None else infer_dtype(raw)
    return _frozen(_as_2d(raw).astype(target, copy=False))


def coerce_cached_value(value: Any) -> np.ndarray | None:
    """Copy a caller-supplied inverse without validating it.

    ``None`` stays ``None`` (no cached inverse); anything else becomes a
    read-only array copy of whatever NumPy makes of it.
    """
    if value is None:
        return None
    return _frozen(np.asarray(value))
