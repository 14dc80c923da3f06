from __future__ import annotations

from typing import Any

import numpy as np


_FLOAT_TOKENS = {
    "float32": "float32",
    "f32": "float32",
    "single": "float32",
    "float": "float64",
    "float64": "float64",
    "f64": "float64",
    "double": "float64",
    "complex64": "complex64",
    "complex_float32": "complex64",
    "complex": "complex128",
    "complex128": "complex128",
    "complex_float64": "complex128",
}


def normalize_dtype(dtype: Any) -> str | None:
    """Normalize user-provided dtype tokens into internal strings.

    Returns one of {"float32", "float64", "complex64", "complex128"} or None.

    Accepted inputs include:
    - Case-insensitive strings: "float32", "F64", "double", "complex", ...
    - Python builtins: float, complex (int maps to float64; inverses of
      integer matrices are not integer in general)
    - NumPy dtypes/scalars: np.float32, np.dtype("complex128"), ...
    """

    if dtype is None:
        return None

    if dtype is int or dtype is float:
        return "float64"
    if dtype is complex:
        return "complex128"

    if isinstance(dtype, str):
        s = dtype.strip().lower()
        if s in _FLOAT_TOKENS:
            return _FLOAT_TOKENS[s]
        raise ValueError(f"Unsupported dtype token: {dtype!r}")

    try:
        np_dtype = np.dtype(dtype)
    except TypeError as exc:
        raise TypeError(f"Unsupported dtype: {dtype!r}") from exc

    if np_dtype == np.dtype("float32"):
        return "float32"
    if np_dtype.kind in ("f", "i", "u", "b"):
        return "float64"
    if np_dtype == np.dtype("complex64"):
        return "complex64"
    if np_dtype.kind == "c":
        return "complex128"
    raise ValueError(f"Unsupported dtype: {dtype!r}")


def infer_dtype(array: np.ndarray) -> str:
    """Pick the storage dtype for data whose dtype was not given explicitly."""
    if array.dtype.kind == "c":
        return "complex128"
    return "float64"
