from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

import numpy as np

from lodchart.buffers import PointBuffer, pack_xy
from lodchart.errors import PointDataError


try:
    import pandas as pd
except Exception:  # pragma: no cover - optional dependency
    pd = None  # type: ignore[assignment]


def normalize_points(points: Any = None, *, x: Any = None, y: Any = None) -> tuple[PointBuffer, int]:
    """Build a packed ``(x0, y0, x1, y1, ...)`` buffer from chart series input.

    ``points`` may be an ``(n, 2)`` array, a sequence of ``(x, y)`` pairs or
    ``{"x": ..., "y": ...}`` records, or a DataFrame with ``x``/``y`` columns
    (or exactly two numeric columns). Columns can be passed as ``y`` and
    ``x`` instead; ``x`` then defaults to the sample index.

    Pairs with a non-finite coordinate are dropped, so the returned count can
    be smaller than the input length.
    """
    if points is not None:
        if x is not None or y is not None:
            raise PointDataError("pass either points or x/y columns, not both")
        x_col, y_col = _split_points(points)
    elif y is None:
        raise PointDataError("y input is required")
    else:
        y_col = _float_column(y, "y")
        x_col = np.arange(y_col.size, dtype=np.float64) if x is None else _float_column(x, "x")

    if x_col.size != y_col.size:
        raise PointDataError(f"x and y length mismatch: {x_col.size} != {y_col.size}")
    if y_col.size == 0:
        raise PointDataError("empty series")

    finite = np.isfinite(x_col) & np.isfinite(y_col)
    count = int(np.count_nonzero(finite))
    if count == 0:
        raise PointDataError("series contains no finite points")
    if count < finite.size:
        x_col = x_col[finite]
        y_col = y_col[finite]
    return pack_xy(x_col, y_col), count


def _split_points(points: Any) -> tuple[np.ndarray, np.ndarray]:
    if pd is not None and isinstance(points, pd.DataFrame):
        return _frame_columns(points)
    if isinstance(points, np.ndarray):
        if points.ndim != 2 or points.shape[1] != 2:
            raise PointDataError(f"point array must have shape (n, 2), got {points.shape}")
        return _float_column(points[:, 0], "x"), _float_column(points[:, 1], "y")
    if not isinstance(points, Sequence) or isinstance(points, (str, bytes, bytearray)):
        raise PointDataError(f"unsupported point input type: {type(points)!r}")

    if points and all(isinstance(record, Mapping) for record in points):
        try:
            xs = [record["x"] for record in points]
            ys = [record["y"] for record in points]
        except KeyError as exc:
            raise PointDataError(f"point record is missing {exc.args[0]!r}") from exc
        return _float_column(xs, "x"), _float_column(ys, "y")

    pairs = np.asarray(points, dtype=object)
    if pairs.size == 0:
        return np.empty(0, dtype=np.float64), np.empty(0, dtype=np.float64)
    if pairs.ndim != 2 or pairs.shape[1] != 2:
        raise PointDataError("point sequence must hold (x, y) pairs or x/y records")
    return _float_column(pairs[:, 0], "x"), _float_column(pairs[:, 1], "y")


def _frame_columns(frame: Any) -> tuple[np.ndarray, np.ndarray]:
    if "x" in frame.columns and "y" in frame.columns:
        return _float_column(frame["x"], "x"), _float_column(frame["y"], "y")
    numeric = [name for name in frame.columns if pd.api.types.is_numeric_dtype(frame[name])]
    if len(numeric) != 2:
        raise PointDataError("DataFrame needs x/y columns or exactly two numeric columns")
    return _float_column(frame[numeric[0]], "x"), _float_column(frame[numeric[1]], "y")


def _float_column(values: Any, label: str) -> np.ndarray:
    arr = np.asarray(values)
    if arr.ndim != 1:
        raise PointDataError(f"{label} must be 1-D, got shape {arr.shape}")
    if arr.dtype.kind in "iufb":
        return arr.astype(np.float64, copy=False)
    if arr.dtype.kind == "M":
        # Timestamps are plotted as nanoseconds since the epoch.
        stamps = arr.astype("datetime64[ns]")
        out = stamps.view(np.int64).astype(np.float64)
        out[np.isnat(stamps)] = np.nan
        return out
    try:
        return np.fromiter(
            (np.nan if value is None else float(value) for value in arr.tolist()),
            dtype=np.float64,
            count=arr.size,
        )
    except (TypeError, ValueError) as exc:
        raise PointDataError(f"{label} contains non-numeric values") from exc
