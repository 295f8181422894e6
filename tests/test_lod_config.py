from __future__ import annotations

from pathlib import Path
import tempfile
import unittest

from lodchart import LODConfig, LODManager, load_lod_config
from lodchart.config import DEFAULT_TARGET_LEVELS, lod_config_from_mapping


class LODConfigTests(unittest.TestCase):
    def test_defaults(self) -> None:
        config = LODConfig()
        self.assertEqual(config.target_levels, DEFAULT_TARGET_LEVELS)
        self.assertEqual(config.min_points_for_lod, 10_000)
        self.assertEqual(config.max_points_per_pixel, 4.0)
        self.assertEqual(LODManager().config.target_levels, DEFAULT_TARGET_LEVELS)

    def test_list_targets_are_frozen_to_tuple(self) -> None:
        config = LODConfig(target_levels=[1000, 100])  # type: ignore[arg-type]
        self.assertEqual(config.target_levels, (1000, 100))

    def test_invalid_values_are_rejected(self) -> None:
        for kwargs in (
            {"target_levels": (100, 1000)},
            {"target_levels": (100, 100)},
            {"target_levels": (1,)},
            {"min_points_for_lod": -1},
            {"max_points_per_pixel": 0.0},
        ):
            with self.subTest(kwargs=kwargs):
                with self.assertRaises(ValueError):
                    LODConfig(**kwargs)

    def test_config_is_immutable(self) -> None:
        config = LODConfig()
        with self.assertRaises(AttributeError):
            config.min_points_for_lod = 5  # type: ignore[misc]
        changed = config.replace(max_points_per_pixel=8.0)
        self.assertEqual(changed.max_points_per_pixel, 8.0)
        self.assertEqual(config.max_points_per_pixel, 4.0)

    def test_load_from_toml(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "chart.toml"
            path.write_text(
                "[lod]\n"
                "target_levels = [50000, 5000]\n"
                "max_points_per_pixel = 6\n",
                encoding="utf-8",
            )
            config = load_lod_config(path)
        self.assertEqual(config.target_levels, (50_000, 5_000))
        self.assertEqual(config.max_points_per_pixel, 6.0)
        self.assertEqual(config.min_points_for_lod, 10_000)

    def test_missing_table_uses_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "chart.toml"
            path.write_text("[other]\nvalue = 1\n", encoding="utf-8")
            self.assertEqual(load_lod_config(path), LODConfig())

    def test_missing_file_raises(self) -> None:
        with self.assertRaises(FileNotFoundError):
            load_lod_config("/nonexistent/lod.toml")

    def test_malformed_values_raise(self) -> None:
        for raw in (
            {"target_levels": 5000},
            {"target_levels": [5000, "100"]},
            {"min_points_for_lod": 1.5},
            {"max_points_per_pixel": True},
        ):
            with self.subTest(raw=raw):
                with self.assertRaises(ValueError):
                    lod_config_from_mapping(raw)
        with self.assertRaises(ValueError):
            lod_config_from_mapping([1, 2])

    def test_unknown_keys_are_logged(self) -> None:
        with self.assertLogs("lodchart.config", level="WARNING") as logs:
            config = lod_config_from_mapping({"use_workers": True, "min_points_for_lod": 10})
        self.assertEqual(config.min_points_for_lod, 10)
        self.assertIn("use_workers", logs.output[0])


if __name__ == "__main__":
    unittest.main()
