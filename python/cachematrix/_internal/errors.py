"""Exception types raised by the inversion capability.

All of them derive from :class:`CacheMatrixError` and from the builtin/NumPy
error a caller would already be catching for the same failure.
"""
from __future__ import annotations

import numpy as np


class CacheMatrixError(Exception):
    """Base class for cachematrix errors."""


class ShapeError(CacheMatrixError, ValueError):
    """Input to an inversion is not a square 2-D matrix."""


class SingularMatrixError(CacheMatrixError, np.linalg.LinAlgError):
    """Input to an inversion has no inverse within the configured tolerance."""
