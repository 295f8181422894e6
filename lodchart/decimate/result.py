from __future__ import annotations

from dataclasses import dataclass

from lodchart.buffers import PointBuffer


@dataclass(frozen=True)
class DecimationResult:
    data: PointBuffer
    point_count: int
