from __future__ import annotations

from enum import Enum
from typing import Any

from lodchart.decimate.douglas_peucker import douglas_peucker_decimate
from lodchart.decimate.grid import grid_decimate
from lodchart.decimate.lttb import lttb_decimate
from lodchart.decimate.result import DecimationResult


class DecimationStrategy(str, Enum):
    LTTB = "lttb"
    GRID = "grid"
    DOUGLAS_PEUCKER = "douglas_peucker"


def decimate(
    strategy: DecimationStrategy | str,
    buffer: Any,
    point_count: int | None,
    target: float,
) -> DecimationResult:
    """Run one decimation pass.

    ``target`` is a point count for LTTB and grid sampling, and the distance
    tolerance ``epsilon`` for Douglas-Peucker.
    """
    kind = DecimationStrategy(strategy)
    if kind is DecimationStrategy.LTTB:
        return lttb_decimate(buffer, point_count, int(target))
    if kind is DecimationStrategy.GRID:
        return grid_decimate(buffer, point_count, int(target))
    return douglas_peucker_decimate(buffer, point_count, float(target))
