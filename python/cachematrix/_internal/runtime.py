from __future__ import annotations

import os
from contextlib import contextmanager
from typing import Callable, Iterator, TypeVar

import numpy as np


_T = TypeVar("_T")

RCOND_TOL_ENV = "CACHEMATRIX_RCOND_TOL"
WARN_RCOND_ENV = "CACHEMATRIX_WARN_RCOND"
EDGE_ITEMS_ENV = "CACHEMATRIX_PRINT_EDGE_ITEMS"

DEFAULT_RCOND_TOL = float(np.finfo(np.float64).eps)
DEFAULT_WARN_RCOND = 1e-12
DEFAULT_EDGE_ITEMS = 4


def _read_env(name: str, parse: Callable[[str], _T], default: _T) -> _T:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return parse(raw.strip())
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc


def _non_negative(value: float, *, what: str) -> float:
    value = float(value)
    if not value >= 0.0:
        raise ValueError(f"{what} must be a non-negative number, got {value!r}")
    return value


class Runtime:
    """Process-wide settings, resolved lazily from the environment.

    Values set through the setters take precedence over the environment
    until :meth:`reset` is called.
    """

    def __init__(self) -> None:
        self._rcond_tol: float | None = None
        self._warn_rcond: float | None = None
        self._edge_items: int | None = None

    def rcond_tolerance(self) -> float:
        if self._rcond_tol is None:
            self._rcond_tol = _non_negative(
                _read_env(RCOND_TOL_ENV, float, DEFAULT_RCOND_TOL), what=RCOND_TOL_ENV
            )
        return self._rcond_tol

    def set_rcond_tolerance(self, value: float) -> float:
        self._rcond_tol = _non_negative(value, what="rcond tolerance")
        return self._rcond_tol

    def warn_rcond(self) -> float:
        if self._warn_rcond is None:
            self._warn_rcond = _non_negative(
                _read_env(WARN_RCOND_ENV, float, DEFAULT_WARN_RCOND), what=WARN_RCOND_ENV
            )
        return self._warn_rcond

    def set_warn_rcond(self, value: float) -> float:
        self._warn_rcond = _non_negative(value, what="warning rcond threshold")
        return self._warn_rcond

    def edge_items(self) -> int:
        if self._edge_items is None:
            value = _read_env(EDGE_ITEMS_ENV, int, DEFAULT_EDGE_ITEMS)
            if value < 1:
                raise ValueError(f"{EDGE_ITEMS_ENV} must be a positive integer, got {value!r}")
            self._edge_items = value
        return self._edge_items

    def reset(self) -> None:
        self._rcond_tol = None
        self._warn_rcond = None
        self._edge_items = None

    @contextmanager
    def temporary_rcond_tolerance(self, value: float) -> Iterator[float]:
        """Temporarily override the singularity tolerance.

        Note: the setting is process-global; this helper does not provide
        thread isolation.
        """
        prev = self._rcond_tol
        try:
            yield self.set_rcond_tolerance(value)
        finally:
            self._rcond_tol = prev


runtime = Runtime()
