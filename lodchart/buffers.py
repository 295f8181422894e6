from __future__ import annotations

from typing import Any, TypeAlias

import numpy as np

from lodchart.errors import PointDataError


# Flat packed coordinates: (x0, y0, x1, y1, ...).
PointBuffer: TypeAlias = np.ndarray


def as_point_buffer(buffer: Any, point_count: int | None = None) -> tuple[PointBuffer, int]:
    """Return ``(flat_buffer, point_count)`` without copying float arrays.

    ``(n, 2)`` arrays are flattened to a view; integer or object input is
    converted to float64.
    """
    arr = np.asarray(buffer)
    if arr.dtype.kind != "f":
        try:
            arr = arr.astype(np.float64)
        except (TypeError, ValueError) as exc:
            raise PointDataError(f"point buffer is not numeric: {arr.dtype}") from exc
    if arr.ndim == 2 and arr.shape[1] == 2:
        arr = arr.reshape(-1)
    if arr.ndim != 1:
        raise PointDataError(f"point buffer must be flat or (n, 2), got shape {arr.shape}")

    if point_count is None:
        if arr.size % 2 != 0:
            raise PointDataError(f"point buffer length must be even, got {arr.size}")
        return arr, arr.size // 2

    count = int(point_count)
    if count < 0:
        raise PointDataError("point_count must be >= 0")
    if count * 2 > arr.size:
        raise PointDataError(f"point_count {count} exceeds buffer of {arr.size} values")
    return arr, count


def xy_view(buffer: PointBuffer, point_count: int) -> tuple[np.ndarray, np.ndarray]:
    end = 2 * point_count
    return buffer[0:end:2], buffer[1:end:2]


def pack_xy(x: np.ndarray, y: np.ndarray, *, dtype: Any = np.float64) -> PointBuffer:
    if x.shape != y.shape:
        raise PointDataError(f"x and y length mismatch: {x.size} != {y.size}")
    out = np.empty(x.size * 2, dtype=dtype)
    out[0::2] = x
    out[1::2] = y
    return freeze(out)


def take_points(buffer: PointBuffer, point_count: int, indices: np.ndarray) -> PointBuffer:
    x, y = xy_view(buffer, point_count)
    return pack_xy(x[indices], y[indices], dtype=buffer.dtype)


def freeze(buffer: PointBuffer) -> PointBuffer:
    buffer.flags.writeable = False
    return buffer
