"""Per-series level-of-detail cache.

``generate`` decimates a series once per load into a ladder of levels;
``select`` is the per-frame hot path that maps a viewport onto one of them.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any, Iterator

from lodchart.buffers import as_point_buffer
from lodchart.config import LODConfig
from lodchart.decimate import DecimationStrategy, decimate
from lodchart.errors import MissingLevelsError
from lodchart.levels import LevelTable, LODLevel
from lodchart.scales import RangeLike, visible_ratio


LOGGER = logging.getLogger(__name__)

_LADDER_STRATEGIES = frozenset({DecimationStrategy.LTTB, DecimationStrategy.GRID})


@dataclass(frozen=True)
class MemoryUsage:
    series_count: int
    total_bytes: int
    # per_level_counts[i] is the number of series that have a level i.
    per_level_counts: tuple[int, ...]


class LODManager:
    """Owns the level tables of one chart, keyed by series id.

    Level 0 aliases the buffer passed to ``generate``; callers must not mutate
    it afterwards. Decimated levels are read-only arrays.
    """

    def __init__(self, config: LODConfig | None = None) -> None:
        self._config = config or LODConfig()
        self._tables: dict[str, LevelTable] = {}

    @property
    def config(self) -> LODConfig:
        return self._config

    def generate(self, series_id: str, buffer: Any, point_count: int | None = None) -> LevelTable:
        """Build the LTTB ladder for an ordered series (line, time series)."""
        return self.generate_with(series_id, buffer, point_count, DecimationStrategy.LTTB)

    def generate_scatter(self, series_id: str, buffer: Any, point_count: int | None = None) -> LevelTable:
        """Build the grid-sampled ladder for unordered 2-D data (scatter, bubble)."""
        return self.generate_with(series_id, buffer, point_count, DecimationStrategy.GRID)

    def generate_with(
        self,
        series_id: str,
        buffer: Any,
        point_count: int | None,
        strategy: DecimationStrategy | str,
    ) -> LevelTable:
        kind = DecimationStrategy(strategy)
        if kind not in _LADDER_STRATEGIES:
            raise ValueError(f"strategy {kind.value!r} does not produce fixed-count levels")

        data, count = as_point_buffer(buffer, point_count)
        levels = [LODLevel(level=0, data=data, point_count=count, threshold=1.0)]

        if count >= self._config.min_points_for_lod:
            current = levels[0]
            for target in self._config.target_levels:
                if current.point_count <= target:
                    continue
                result = decimate(kind, current.data, current.point_count, target)
                current = LODLevel(
                    level=len(levels),
                    data=result.data,
                    point_count=result.point_count,
                    threshold=current.point_count / target,
                )
                levels.append(current)

        table = LevelTable(series_id=series_id, levels=tuple(levels), strategy=kind)
        if series_id in self._tables:
            LOGGER.debug("replacing LOD table for series %s", series_id)
        self._tables[series_id] = table
        LOGGER.debug(
            "generated %d LOD level(s) for series %s via %s: %s",
            len(table),
            series_id,
            kind.value,
            table.point_counts(),
        )
        return table

    def select(
        self,
        series_id: str,
        viewport_width_px: float,
        visible_range: RangeLike,
        full_range: RangeLike,
    ) -> LODLevel:
        """Finest level whose estimated visible point count fits the pixel budget.

        Falls back to the coarsest level when nothing fits.
        """
        table = self._tables.get(series_id)
        if table is None:
            raise MissingLevelsError(series_id)
        if viewport_width_px <= 0:
            raise ValueError("viewport_width_px must be > 0")
        if len(table) == 1:
            return table.finest

        ratio = visible_ratio(visible_range, full_range)
        budget = viewport_width_px * self._config.max_points_per_pixel
        for level in table:
            if level.point_count * ratio <= budget:
                return level
        return table.coarsest

    def get_levels(self, series_id: str) -> LevelTable | None:
        return self._tables.get(series_id)

    def has_levels(self, series_id: str) -> bool:
        return series_id in self._tables

    def remove(self, series_id: str) -> None:
        if self._tables.pop(series_id, None) is not None:
            LOGGER.debug("removed LOD table for series %s", series_id)

    def clear(self) -> None:
        self._tables.clear()

    def series_ids(self) -> list[str]:
        return list(self._tables)

    def memory_usage(self) -> MemoryUsage:
        total_bytes = 0
        per_level: list[int] = []
        for table in self._tables.values():
            for level in table:
                total_bytes += level.nbytes
                if level.level >= len(per_level):
                    per_level.extend([0] * (level.level + 1 - len(per_level)))
                per_level[level.level] += 1
        return MemoryUsage(
            series_count=len(self._tables),
            total_bytes=total_bytes,
            per_level_counts=tuple(per_level),
        )

    def __len__(self) -> int:
        return len(self._tables)

    def __contains__(self, series_id: object) -> bool:
        return series_id in self._tables

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._tables))
