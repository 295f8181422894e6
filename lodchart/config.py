from __future__ import annotations

from dataclasses import dataclass, replace
import logging
from pathlib import Path
import tomllib
from typing import Any


LOGGER = logging.getLogger(__name__)

DEFAULT_TARGET_LEVELS: tuple[int, ...] = (500_000, 100_000, 50_000, 10_000, 2_000, 500)
DEFAULT_MIN_POINTS_FOR_LOD = 10_000
DEFAULT_MAX_POINTS_PER_PIXEL = 4.0

_KNOWN_KEYS = frozenset({"target_levels", "min_points_for_lod", "max_points_per_pixel"})


@dataclass(frozen=True)
class LODConfig:
    """Construction-time settings of an ``LODManager``; never mutated afterwards."""

    target_levels: tuple[int, ...] = DEFAULT_TARGET_LEVELS
    min_points_for_lod: int = DEFAULT_MIN_POINTS_FOR_LOD
    max_points_per_pixel: float = DEFAULT_MAX_POINTS_PER_PIXEL

    def __post_init__(self) -> None:
        levels = tuple(int(v) for v in self.target_levels)
        object.__setattr__(self, "target_levels", levels)
        for target in levels:
            if target < 2:
                raise ValueError(f"target levels must be >= 2, got {target}")
        for prev, cur in zip(levels, levels[1:]):
            if cur >= prev:
                raise ValueError(f"target levels must be strictly descending: {list(levels)}")
        if self.min_points_for_lod < 0:
            raise ValueError("min_points_for_lod must be >= 0")
        if not self.max_points_per_pixel > 0:
            raise ValueError("max_points_per_pixel must be > 0")

    def replace(self, **changes: Any) -> "LODConfig":
        return replace(self, **changes)


def load_lod_config(path: str | Path) -> LODConfig:
    """Read the ``[lod]`` table of a TOML file; absent keys keep their defaults."""
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"LOD config not found: {config_path}")
    with config_path.open("rb") as f:
        raw = tomllib.load(f)
    return lod_config_from_mapping(raw.get("lod", {}))


def lod_config_from_mapping(raw: Any) -> LODConfig:
    if not isinstance(raw, dict):
        raise ValueError("[lod] must be a table")
    unknown = sorted(set(raw) - _KNOWN_KEYS)
    if unknown:
        LOGGER.warning("ignoring unknown LOD config keys: %s", ", ".join(unknown))

    kwargs: dict[str, Any] = {}
    if "target_levels" in raw:
        kwargs["target_levels"] = _coerce_int_list(raw["target_levels"], "target_levels")
    if "min_points_for_lod" in raw:
        kwargs["min_points_for_lod"] = _coerce_int(raw["min_points_for_lod"], "min_points_for_lod")
    if "max_points_per_pixel" in raw:
        kwargs["max_points_per_pixel"] = _coerce_float(raw["max_points_per_pixel"], "max_points_per_pixel")
    return LODConfig(**kwargs)


def _coerce_int_list(value: object, field_name: str) -> tuple[int, ...]:
    if not isinstance(value, list):
        raise ValueError(f"{field_name} must be a list of integers")
    return tuple(_coerce_int(item, field_name) for item in value)


def _coerce_int(value: object, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{field_name} must be an integer, got {value!r}")
    return value


def _coerce_float(value: object, field_name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{field_name} must be a number, got {value!r}")
    return float(value)
