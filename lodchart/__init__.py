from lodchart.adapters import normalize_points
from lodchart.config import LODConfig, load_lod_config
from lodchart.decimate import (
    DecimationResult,
    DecimationStrategy,
    decimate,
    douglas_peucker_decimate,
    grid_decimate,
    lttb_decimate,
)
from lodchart.errors import LODError, MissingLevelsError, PointDataError
from lodchart.levels import LevelTable, LODLevel
from lodchart.manager import LODManager, MemoryUsage
from lodchart.scales import DataRange, compute_bounds, visible_ratio
from lodchart.selection import LevelChange, LevelTracker, RenderPipeline, SpatialQuery
from lodchart.viewport import XViewport

__all__ = [
    "DataRange",
    "DecimationResult",
    "DecimationStrategy",
    "LODConfig",
    "LODError",
    "LODLevel",
    "LODManager",
    "LevelChange",
    "LevelTable",
    "LevelTracker",
    "MemoryUsage",
    "MissingLevelsError",
    "PointDataError",
    "RenderPipeline",
    "SpatialQuery",
    "XViewport",
    "compute_bounds",
    "decimate",
    "douglas_peucker_decimate",
    "grid_decimate",
    "load_lod_config",
    "lttb_decimate",
    "normalize_points",
    "visible_ratio",
]
