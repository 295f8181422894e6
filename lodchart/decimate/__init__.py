from .douglas_peucker import douglas_peucker_decimate, douglas_peucker_mask
from .grid import grid_decimate, grid_indices
from .lttb import lttb_decimate, lttb_indices
from .result import DecimationResult
from .strategy import DecimationStrategy, decimate

__all__ = [
    "DecimationResult",
    "DecimationStrategy",
    "decimate",
    "douglas_peucker_decimate",
    "douglas_peucker_mask",
    "grid_decimate",
    "grid_indices",
    "lttb_decimate",
    "lttb_indices",
]
