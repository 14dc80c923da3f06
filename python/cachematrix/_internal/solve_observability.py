from __future__ import annotations

import threading
import time
from dataclasses import asdict, dataclass
from typing import Any, Dict, Tuple


HIT = "hit"
MISS = "miss"
ERROR = "error"


@dataclass
class SolveRecord:
    outcome: str
    shape: Tuple[int, int] | None
    epoch: int
    elapsed: float
    error: str | None
    timestamp: float


def _shape(obj: Any) -> Tuple[int, int] | None:
    try:
        shape_attr = getattr(obj, "shape", None)
        if isinstance(shape_attr, tuple) and len(shape_attr) == 2:
            return int(shape_attr[0]), int(shape_attr[1])
    except Exception:
        pass
    return None


class SolveObservability:
    """Counters and the most recent record for cache_solve calls."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counts: Dict[str, int] = {HIT: 0, MISS: 0, ERROR: 0}
        self._compute_seconds = 0.0
        self._last: SolveRecord | None = None

    def record(
        self,
        target: Any,
        *,
        outcome: str,
        elapsed: float = 0.0,
        error: BaseException | None = None,
    ) -> SolveRecord:
        rec = SolveRecord(
            outcome=outcome,
            shape=_shape(target),
            epoch=int(getattr(target, "epoch", 0)),
            elapsed=float(elapsed),
            error=None if error is None else f"{type(error).__name__}: {error}",
            timestamp=time.time(),
        )
        with self._lock:
            self._counts[outcome] = self._counts.get(outcome, 0) + 1
            if outcome != HIT:
                self._compute_seconds += rec.elapsed
            self._last = rec
        return rec

    def last(self) -> Dict[str, Any] | None:
        with self._lock:
            return None if self._last is None else asdict(self._last)

    def stats(self) -> Dict[str, Any]:
        with self._lock:
            hits = self._counts[HIT]
            misses = self._counts[MISS]
            lookups = hits + misses
            return {
                "hits": hits,
                "misses": misses,
                "errors": self._counts[ERROR],
                "compute_seconds": self._compute_seconds,
                "hit_rate": (hits / lookups) if lookups else 0.0,
            }

    def clear(self) -> None:
        with self._lock:
            for key in self._counts:
                self._counts[key] = 0
            self._compute_seconds = 0.0
            self._last = None


observer = SolveObservability()
