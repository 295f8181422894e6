from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
import logging
from typing import Protocol

from lodchart.buffers import PointBuffer
from lodchart.levels import LevelTable, LODLevel
from lodchart.manager import LODManager
from lodchart.scales import RangeLike
from lodchart.viewport import XViewport


LOGGER = logging.getLogger(__name__)


class RenderPipeline(Protocol):
    def upload(self, series_id: str, level: LODLevel) -> None:
        ...


class SpatialQuery(Protocol):
    def rebuild(self, series_id: str, data: PointBuffer, point_count: int) -> None:
        ...


@dataclass(frozen=True)
class LevelChange:
    series_id: str
    previous: int | None
    current: int


class LevelTracker:
    """Chart-side record of which level is uploaded for each series.

    Kept outside ``LODManager`` so the manager stays unaware of GPU state.
    Each record remembers the table it came from: a series regenerated since
    the last upload is uploaded again even when it lands on the same level
    index, and records of removed series are dropped on the next ``sync``.
    """

    def __init__(
        self,
        manager: LODManager,
        pipeline: RenderPipeline,
        spatial_query: SpatialQuery | None = None,
    ) -> None:
        self._manager = manager
        self._pipeline = pipeline
        self._spatial_query = spatial_query
        self._current: dict[str, int] = {}
        self._sources: dict[str, LevelTable] = {}

    @property
    def manager(self) -> LODManager:
        return self._manager

    def current_level(self, series_id: str) -> int | None:
        return self._current.get(series_id)

    def current_levels(self) -> dict[str, int]:
        return dict(self._current)

    def sync(
        self,
        viewport_width_px: float,
        visible_range: RangeLike,
        full_ranges: Mapping[str, RangeLike] | RangeLike,
    ) -> list[LevelChange]:
        """Re-select every generated series and upload the ones whose level changed.

        ``full_ranges`` is either one range shared by all series or a mapping
        from series id to that series' full x-range.
        """
        live = self._manager.series_ids()
        for series_id in [sid for sid in self._current if sid not in live]:
            self.forget(series_id)

        changes: list[LevelChange] = []
        for series_id in live:
            full_range = full_ranges.get(series_id) if isinstance(full_ranges, Mapping) else full_ranges
            if full_range is None:
                continue
            level = self._manager.select(series_id, viewport_width_px, visible_range, full_range)
            table = self._manager.get_levels(series_id)
            previous = self._current.get(series_id)
            if previous == level.level and self._sources.get(series_id) is table:
                continue
            self._pipeline.upload(series_id, level)
            self._current[series_id] = level.level
            self._sources[series_id] = table
            LOGGER.debug("series %s switched LOD level %s -> %d", series_id, previous, level.level)
            changes.append(LevelChange(series_id=series_id, previous=previous, current=level.level))
        return changes

    def sync_viewport(
        self,
        viewport_width_px: float,
        viewport: XViewport,
        full_ranges: Mapping[str, RangeLike] | RangeLike | None = None,
    ) -> list[LevelChange]:
        """``sync`` against a viewport's visible domain.

        Without ``full_ranges`` every series is measured against the
        viewport's initial domain, the extent the chart fitted on load.
        """
        return self.sync(
            viewport_width_px,
            viewport.domain,
            viewport.initial if full_ranges is None else full_ranges,
        )

    def rebuild_hit_index(self, series_id: str) -> None:
        """Feed the full-resolution data to the spatial query structure.

        Hit-testing works on level 0 regardless of the rendered level, so this
        runs once per ``generate``, not on level switches.
        """
        if self._spatial_query is None:
            return
        table = self._manager.get_levels(series_id)
        if table is None:
            return
        self._spatial_query.rebuild(series_id, table.finest.data, table.finest.point_count)

    def forget(self, series_id: str) -> None:
        self._current.pop(series_id, None)
        self._sources.pop(series_id, None)

    def reset(self) -> None:
        self._current.clear()
        self._sources.clear()
