from __future__ import annotations

from typing import Any

import numpy as np

from lodchart.buffers import as_point_buffer, take_points, xy_view
from lodchart.decimate.result import DecimationResult


def douglas_peucker_mask(x: np.ndarray, y: np.ndarray, epsilon: float) -> np.ndarray:
    """Boolean mask of the points kept for tolerance ``epsilon``.

    Uses an explicit span stack, so already-sorted or near-collinear input
    cannot exhaust the call stack. Average cost is O(n log n), worst case O(n^2).
    """
    if epsilon < 0:
        raise ValueError("epsilon must be >= 0")
    n = int(x.size)
    keep = np.zeros(n, dtype=bool)
    if n == 0:
        return keep
    keep[0] = True
    keep[-1] = True

    stack: list[tuple[int, int]] = [(0, n - 1)]
    while stack:
        start, end = stack.pop()
        if end - start < 2:
            continue

        x1 = x[start]
        y1 = y[start]
        dx = x[end] - x1
        dy = y[end] - y1
        len_sq = dx * dx + dy * dy

        px = x[start + 1 : end]
        py = y[start + 1 : end]
        if len_sq == 0:
            dist = np.hypot(px - x1, py - y1)
        else:
            t = np.clip(((px - x1) * dx + (py - y1) * dy) / len_sq, 0.0, 1.0)
            dist = np.hypot(px - (x1 + t * dx), py - (y1 + t * dy))

        offset = int(np.argmax(dist))
        if dist[offset] > epsilon:
            split = start + 1 + offset
            keep[split] = True
            stack.append((start, split))
            stack.append((split, end))
    return keep


def douglas_peucker_decimate(buffer: Any, point_count: int | None, epsilon: float) -> DecimationResult:
    if epsilon < 0:
        raise ValueError("epsilon must be >= 0")
    data, n = as_point_buffer(buffer, point_count)
    if n < 3:
        return DecimationResult(data=data, point_count=n)

    x, y = xy_view(data, n)
    keep = douglas_peucker_mask(x, y, epsilon)
    indices = np.flatnonzero(keep)
    return DecimationResult(data=take_points(data, n, indices), point_count=int(indices.size))
