from __future__ import annotations

import unittest

import numpy as np

from lodchart import DataRange, LevelChange, LevelTracker, LODConfig, LODLevel, LODManager, XViewport


class _RecordingPipeline:
    def __init__(self) -> None:
        self.uploads: list[tuple[str, LODLevel]] = []

    def upload(self, series_id: str, level: LODLevel) -> None:
        self.uploads.append((series_id, level))


class _RecordingIndex:
    def __init__(self) -> None:
        self.builds: list[tuple[str, np.ndarray, int]] = []

    def rebuild(self, series_id: str, data: np.ndarray, point_count: int) -> None:
        self.builds.append((series_id, data, point_count))


def _series(n: int) -> np.ndarray:
    x = np.arange(n, dtype=np.float64)
    out = np.empty(2 * n, dtype=np.float64)
    out[0::2] = x
    out[1::2] = np.cos(x / 50.0)
    return out


FULL = (0.0, 20_000.0)


class LevelTrackerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.manager = LODManager(
            LODConfig(target_levels=(5_000, 1_000), min_points_for_lod=1_000, max_points_per_pixel=1)
        )
        self.buffer = _series(20_000)
        self.manager.generate("line", self.buffer)
        self.pipeline = _RecordingPipeline()
        self.tracker = LevelTracker(self.manager, self.pipeline)

    def test_first_sync_uploads_every_series(self) -> None:
        changes = self.tracker.sync(100, FULL, FULL)
        self.assertEqual(changes, [LevelChange(series_id="line", previous=None, current=2)])
        self.assertEqual(len(self.pipeline.uploads), 1)
        self.assertEqual(self.tracker.current_level("line"), 2)

    def test_unchanged_level_is_not_reuploaded(self) -> None:
        self.tracker.sync(100, FULL, FULL)
        self.assertEqual(self.tracker.sync(100, (100.0, 20_000.0), FULL), [])
        self.assertEqual(len(self.pipeline.uploads), 1)

    def test_zooming_switches_to_finer_levels(self) -> None:
        self.tracker.sync(100, FULL, FULL)

        changes = self.tracker.sync(100, (0.0, 300.0), FULL)
        self.assertEqual(changes, [LevelChange(series_id="line", previous=2, current=1)])

        changes = self.tracker.sync(100, (0.0, 50.0), FULL)
        self.assertEqual(changes, [LevelChange(series_id="line", previous=1, current=0)])
        series_id, level = self.pipeline.uploads[-1]
        self.assertEqual(series_id, "line")
        self.assertIs(level.data, self.buffer)

    def test_per_series_full_ranges(self) -> None:
        self.manager.generate("other", _series(20))
        changes = self.tracker.sync(100, FULL, {"line": FULL})
        self.assertEqual([c.series_id for c in changes], ["line"])
        self.assertIsNone(self.tracker.current_level("other"))

        changes = self.tracker.sync(100, FULL, {"line": FULL, "other": (0.0, 20.0)})
        self.assertEqual(changes, [LevelChange(series_id="other", previous=None, current=0)])
        self.assertEqual(self.tracker.current_levels(), {"line": 2, "other": 0})

    def test_forget_forces_reupload(self) -> None:
        self.tracker.sync(100, FULL, FULL)
        self.manager.generate("line", self.buffer)
        self.tracker.forget("line")
        self.assertEqual(len(self.tracker.sync(100, FULL, FULL)), 1)
        self.assertEqual(len(self.pipeline.uploads), 2)

        self.tracker.reset()
        self.assertEqual(self.tracker.current_levels(), {})

    def test_regenerated_series_is_reuploaded_at_same_level(self) -> None:
        self.tracker.sync(100, FULL, FULL)
        self.manager.generate("line", _series(20_000))
        changes = self.tracker.sync(100, FULL, FULL)
        self.assertEqual(changes, [LevelChange(series_id="line", previous=2, current=2)])
        self.assertEqual(len(self.pipeline.uploads), 2)
        self.assertEqual(self.tracker.sync(100, FULL, FULL), [])

    def test_records_of_removed_series_are_dropped(self) -> None:
        self.tracker.sync(100, FULL, FULL)
        self.manager.remove("line")
        self.assertEqual(self.tracker.sync(100, FULL, FULL), [])
        self.assertIsNone(self.tracker.current_level("line"))

    def test_viewport_zoom_drives_level_switches(self) -> None:
        viewport = XViewport.fit(self.buffer, bounds_padding=0.0)
        self.assertEqual(viewport.initial, DataRange(0.0, 19_999.0))
        self.assertEqual(
            self.tracker.sync_viewport(100, viewport),
            [LevelChange(series_id="line", previous=None, current=2)],
        )

        viewport = XViewport(FULL)
        viewport.zoom(100.0)
        self.assertEqual(viewport.domain, DataRange(9_900.0, 10_100.0))
        self.assertEqual(
            self.tracker.sync_viewport(100, viewport),
            [LevelChange(series_id="line", previous=2, current=1)],
        )

    def test_hit_index_uses_full_resolution_data(self) -> None:
        index = _RecordingIndex()
        tracker = LevelTracker(self.manager, self.pipeline, spatial_query=index)
        tracker.sync(100, FULL, FULL)
        tracker.rebuild_hit_index("line")
        tracker.rebuild_hit_index("missing")
        self.assertEqual(len(index.builds), 1)
        series_id, data, count = index.builds[0]
        self.assertEqual(series_id, "line")
        self.assertIs(data, self.buffer)
        self.assertEqual(count, 20_000)

    def test_removed_series_are_not_selected(self) -> None:
        self.manager.remove("line")
        self.assertEqual(self.tracker.sync(100, FULL, FULL), [])


if __name__ == "__main__":
    unittest.main()
