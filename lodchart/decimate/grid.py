from __future__ import annotations

import math
from typing import Any

import numpy as np

from lodchart.buffers import as_point_buffer, take_points, xy_view
from lodchart.decimate.result import DecimationResult


# Cells per target point; oversampling tolerates uneven density.
GRID_OVERSAMPLE = 1.5


def grid_indices(x: np.ndarray, y: np.ndarray, target_count: int) -> np.ndarray:
    """Spatially balanced subset of exactly ``target_count`` points, in input order.

    Sparse cells keep every point; dense cells keep an evenly strided share.
    When the quotas leave the result short, the shortfall is taken evenly from
    the points dense cells dropped, so clusters gain weight in proportion to
    their overflow.
    """
    if target_count < 1:
        raise ValueError("target_count must be >= 1")
    n = int(x.size)
    if n <= target_count:
        return np.arange(n, dtype=np.intp)

    side = max(1, int(math.ceil(math.sqrt(target_count * GRID_OVERSAMPLE))))
    col = _cell_coordinate(x, side)
    row = _cell_coordinate(y, side)
    cell = row * side + col

    order = np.argsort(cell, kind="stable")
    sorted_cells = cell[order]
    starts = np.flatnonzero(np.concatenate(([True], sorted_cells[1:] != sorted_cells[:-1])))
    counts = np.diff(np.append(starts, n))
    quota = max(1, target_count // int(starts.size))

    keep_mask = np.repeat(counts <= quota, counts)
    for start, count in zip(starts[counts > quota].tolist(), counts[counts > quota].tolist(), strict=True):
        keep_mask[start + _even_stride(count, quota)] = True

    kept_count = int(np.count_nonzero(keep_mask))
    if kept_count < target_count:
        # Dropped points are still grouped by cell, so the stride spreads the top-up across cells.
        dropped = np.flatnonzero(~keep_mask)
        keep_mask[dropped[_even_stride(int(dropped.size), target_count - kept_count)]] = True

    kept = np.sort(order[keep_mask])
    if kept.size > target_count:
        kept = kept[_even_stride(int(kept.size), target_count)]
    return kept


def grid_decimate(buffer: Any, point_count: int | None, target_count: int) -> DecimationResult:
    if target_count < 1:
        raise ValueError("target_count must be >= 1")
    data, n = as_point_buffer(buffer, point_count)
    if n <= target_count:
        return DecimationResult(data=data, point_count=n)

    x, y = xy_view(data, n)
    indices = grid_indices(x, y, target_count)
    return DecimationResult(data=take_points(data, n, indices), point_count=int(indices.size))


def _cell_coordinate(values: np.ndarray, side: int) -> np.ndarray:
    finite = values[np.isfinite(values)]
    if finite.size == 0:
        return np.zeros(values.size, dtype=np.intp)
    lo = float(np.min(finite))
    span = float(np.max(finite)) - lo
    if span == 0 or not math.isfinite(span):
        span = 1.0
    with np.errstate(invalid="ignore"):
        scaled = np.nan_to_num((values - lo) / span * side, nan=0.0, posinf=side - 1, neginf=0.0)
    coord = scaled.astype(np.intp)
    np.clip(coord, 0, side - 1, out=coord)
    return coord


def _even_stride(count: int, keep: int) -> np.ndarray:
    return np.linspace(0, count - 1, keep).astype(np.intp)
