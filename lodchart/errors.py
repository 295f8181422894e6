from __future__ import annotations


class PointDataError(ValueError):
    """Raised when input data cannot be turned into a usable point buffer."""


class LODError(RuntimeError):
    pass


class MissingLevelsError(LODError):
    """Raised when a level is requested for a series that was never generated."""

    def __init__(self, series_id: str) -> None:
        super().__init__(f'no LOD levels for series "{series_id}"')
        self.series_id = series_id
