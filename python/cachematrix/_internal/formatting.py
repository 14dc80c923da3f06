from __future__ import annotations

from typing import Any

import numpy as np

from .runtime import runtime as _runtime


def _edge_indices(length: int, edge_items: int) -> tuple[list[int], list[int], bool]:
    if length <= edge_items * 2:
        return list(range(length)), [], False
    head = list(range(edge_items))
    tail = list(range(length - edge_items, length))
    return head, tail, True


def _format_value(value: Any) -> str:
    if isinstance(value, np.generic):
        value = value.item()
    if isinstance(value, complex):
        return f"{value.real:g}{value.imag:+g}j"
    if isinstance(value, float):
        return f"{value:g}"
    return str(value)


def _format_row(
    data: np.ndarray,
    row_index: int,
    col_head: list[int],
    col_tail: list[int],
    truncated: bool,
) -> str:
    entries = [_format_value(data[row_index, col]) for col in col_head]
    if truncated:
        entries.append("...")
    entries.extend(_format_value(data[row_index, col]) for col in col_tail)
    return " ".join(entries)


def array_lines(data: np.ndarray) -> list[str]:
    rows, cols = data.shape
    if rows == 0 or cols == 0:
        return ["[]"]
    edge_items = _runtime.edge_items()
    row_head, row_tail, rows_truncated = _edge_indices(rows, edge_items)
    col_head, col_tail, cols_truncated = _edge_indices(cols, edge_items)

    lines = ["["]
    for row_index in row_head:
        lines.append(f" [{_format_row(data, row_index, col_head, col_tail, cols_truncated)}]")
    if rows_truncated:
        lines.append(" ...")
    for row_index in row_tail:
        lines.append(f" [{_format_row(data, row_index, col_head, col_tail, cols_truncated)}]")
    lines.append("]")
    return lines


def cache_matrix_str(obj: Any) -> str:
    rows, cols = obj.shape
    info = [f"shape=({rows}, {cols})", f"cached={obj.is_cached}"]
    if obj.epoch:
        info.append(f"epoch={obj.epoch}")
    header = f"{obj.__class__.__name__}({', '.join(info)})"
    return "\n".join([header] + array_lines(obj.get_matrix()))


class CacheMatrixFormatMixin:
    def __str__(self) -> str:
        return cache_matrix_str(self)

    def __repr__(self) -> str:
        shape = getattr(self, "shape", None)
        cached = getattr(self, "is_cached", False)
        return f"<{self.__class__.__name__} shape={shape} cached={cached}>"
