from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from lodchart.buffers import PointBuffer
from lodchart.decimate import DecimationStrategy
from lodchart.errors import PointDataError


@dataclass(frozen=True, eq=False)
class LODLevel:
    """One representation of a series; level 0 is the full-resolution input."""

    level: int
    data: PointBuffer
    point_count: int
    # Compression ratio (source / target) that produced this level; 1.0 for level 0.
    threshold: float

    def __post_init__(self) -> None:
        if self.level < 0:
            raise ValueError("level must be >= 0")
        if self.point_count < 0:
            raise ValueError("point_count must be >= 0")
        if self.point_count * 2 > self.data.size:
            raise PointDataError(f"point_count {self.point_count} exceeds buffer of {self.data.size} values")

    @property
    def nbytes(self) -> int:
        return int(self.data.nbytes)


@dataclass(frozen=True, eq=False)
class LevelTable:
    series_id: str
    levels: tuple[LODLevel, ...]
    strategy: DecimationStrategy = DecimationStrategy.LTTB

    def __post_init__(self) -> None:
        if not self.levels:
            raise ValueError("level table must contain level 0")
        previous: LODLevel | None = None
        for index, level in enumerate(self.levels):
            if level.level != index:
                raise ValueError(f"level index mismatch: slot {index} holds level {level.level}")
            if previous is not None and level.point_count > previous.point_count:
                raise ValueError(
                    f"level {index} has more points than level {index - 1}: "
                    f"{level.point_count} > {previous.point_count}"
                )
            previous = level

    def __len__(self) -> int:
        return len(self.levels)

    def __getitem__(self, index: int) -> LODLevel:
        return self.levels[index]

    def __iter__(self) -> Iterator[LODLevel]:
        return iter(self.levels)

    @property
    def finest(self) -> LODLevel:
        return self.levels[0]

    @property
    def coarsest(self) -> LODLevel:
        return self.levels[-1]

    def point_counts(self) -> tuple[int, ...]:
        return tuple(level.point_count for level in self.levels)

    @property
    def nbytes(self) -> int:
        return sum(level.nbytes for level in self.levels)
