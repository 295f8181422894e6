"""Largest-Triangle-Three-Buckets decimation for ordered series.

The interior points are split into ``target - 2`` index buckets. Walking left
to right, each bucket contributes the point that spans the largest triangle
with the previously selected point and the centroid of the next bucket, so
local extrema survive while the output size stays exact.
"""

from __future__ import annotations

from typing import Any

import numpy as np

from lodchart.buffers import as_point_buffer, take_points, xy_view
from lodchart.decimate.result import DecimationResult


def lttb_indices(x: np.ndarray, y: np.ndarray, target_count: int) -> np.ndarray:
    """Return the sorted indices of the ``target_count`` points LTTB keeps."""
    if target_count < 2:
        raise ValueError("target_count must be >= 2")
    n = int(x.size)
    if n <= target_count:
        return np.arange(n, dtype=np.intp)
    if target_count == 2:
        return np.asarray([0, n - 1], dtype=np.intp)

    buckets = target_count - 2
    every = (n - 2) / buckets
    # Bucket i covers [edges[i], edges[i + 1]).
    edges = np.floor(np.arange(buckets + 1, dtype=np.float64) * every).astype(np.intp) + 1
    edges[-1] = n - 1

    # Centroid of the bucket after bucket i; the last bucket looks at the final point.
    next_starts = edges[1:]
    sizes = np.diff(np.append(next_starts, n))
    sizes = np.maximum(sizes, 1)
    avg_x = np.add.reduceat(x, next_starts) / sizes
    avg_y = np.add.reduceat(y, next_starts) / sizes

    xs = x.tolist()
    ys = y.tolist()
    cxs = avg_x.tolist()
    cys = avg_y.tolist()
    bounds = edges.tolist()

    out = np.empty(target_count, dtype=np.intp)
    out[0] = 0
    out[-1] = n - 1

    a = 0
    for i in range(buckets):
        start = bounds[i]
        end = bounds[i + 1]
        ax = xs[a]
        ay = ys[a]
        dx = cxs[i] - ax
        dy = cys[i] - ay

        selected = start
        max_area = -1.0
        for j in range(start, end):
            # Twice the triangle area; the factor does not change the argmax.
            area = abs(dy * (xs[j] - ax) - dx * (ys[j] - ay))
            if area > max_area:
                max_area = area
                selected = j

        out[i + 1] = selected
        a = selected
    return out


def lttb_decimate(buffer: Any, point_count: int | None, target_count: int) -> DecimationResult:
    if target_count < 2:
        raise ValueError("target_count must be >= 2")
    data, n = as_point_buffer(buffer, point_count)
    if n <= target_count:
        return DecimationResult(data=data, point_count=n)

    x, y = xy_view(data, n)
    indices = lttb_indices(x, y, target_count)
    return DecimationResult(data=take_points(data, n, indices), point_count=int(indices.size))
