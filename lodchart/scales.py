from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Sequence, TypeAlias

import numpy as np

from lodchart.buffers import PointBuffer, xy_view


@dataclass(frozen=True)
class DataRange:
    vmin: float
    vmax: float

    @property
    def span(self) -> float:
        return self.vmax - self.vmin

    @classmethod
    def coerce(cls, value: "DataRange | Sequence[float]") -> "DataRange":
        if isinstance(value, DataRange):
            return value
        if len(value) != 2:
            raise ValueError(f"range must have exactly two values, got {len(value)}")
        return cls(vmin=float(value[0]), vmax=float(value[1]))


RangeLike: TypeAlias = DataRange | Sequence[float]


def visible_ratio(visible: RangeLike, full: RangeLike) -> float:
    """Fraction of the full domain covered by the visible window, in ``[0, 1]``."""
    full_span = DataRange.coerce(full).span
    if full_span == 0 or not math.isfinite(full_span):
        return 1.0
    ratio = DataRange.coerce(visible).span / full_span
    if not math.isfinite(ratio):
        return 1.0
    return min(1.0, max(0.0, abs(ratio)))


def compute_bounds(
    buffer: PointBuffer,
    point_count: int,
    padding: float | tuple[float, float] | None = 0.05,
) -> tuple[DataRange, DataRange]:
    """Return padded ``(x_range, y_range)`` over the finite points of a buffer."""
    if point_count == 0:
        return DataRange(0.0, 1.0), DataRange(0.0, 1.0)

    x, y = xy_view(buffer, point_count)
    mask = np.isfinite(x) & np.isfinite(y)
    if not np.any(mask):
        return DataRange(0.0, 1.0), DataRange(0.0, 1.0)

    vx = x[mask]
    vy = y[mask]
    xmin = float(np.min(vx))
    xmax = float(np.max(vx))
    ymin = float(np.min(vy))
    ymax = float(np.max(vy))

    if padding is None:
        return DataRange(xmin, xmax), DataRange(ymin, ymax)
    if isinstance(padding, tuple):
        pad_x, pad_y = padding
    else:
        pad_x = pad_y = float(padding)

    x_span = (xmax - xmin) or 1.0
    y_span = (ymax - ymin) or 1.0
    return (
        DataRange(xmin - x_span * pad_x, xmax + x_span * pad_x),
        DataRange(ymin - y_span * pad_y, ymax + y_span * pad_y),
    )
