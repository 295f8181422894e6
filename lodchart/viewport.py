from __future__ import annotations

from typing import Any

from lodchart.buffers import as_point_buffer
from lodchart.scales import DataRange, RangeLike, compute_bounds


class XViewport:
    """Visible x-domain of a chart, panned and zoomed inside the data bounds.

    ``zoom_level`` is the initial span divided by the visible span: ``1`` shows
    the whole initial domain and is the default floor, ``10`` shows a tenth of
    it. Pans may overshoot the initial domain by ``padding`` times the visible
    span; zooms by ``padding`` times the initial span.
    """

    def __init__(
        self,
        initial: RangeLike,
        *,
        min_zoom: float = 1.0,
        max_zoom: float = 100.0,
        padding: float = 0.1,
    ) -> None:
        if min_zoom <= 0 or max_zoom < min_zoom:
            raise ValueError("zoom limits must satisfy 0 < min_zoom <= max_zoom")
        if padding < 0:
            raise ValueError("padding must be >= 0")
        self._min_zoom = float(min_zoom)
        self._max_zoom = float(max_zoom)
        self._padding = float(padding)
        self._initial = _ordered(initial)
        self._domain = self._initial

    @classmethod
    def fit(cls, buffer: Any, point_count: int | None = None, *, bounds_padding: float = 0.05, **limits: float) -> "XViewport":
        """Viewport whose initial domain is the padded x-extent of a point buffer."""
        data, count = as_point_buffer(buffer, point_count)
        x_range, _ = compute_bounds(data, count, padding=bounds_padding)
        return cls(x_range, **limits)

    @property
    def initial(self) -> DataRange:
        return self._initial

    @property
    def domain(self) -> DataRange:
        return self._domain

    @property
    def zoom_level(self) -> float:
        return self._initial.span / self._domain.span

    def reset(self, initial: RangeLike | None = None) -> DataRange:
        """Show the whole initial domain again, optionally replacing it first."""
        if initial is not None:
            self._initial = _ordered(initial)
        self._domain = self._initial
        return self._domain

    def set_domain(self, xmin: float, xmax: float) -> DataRange:
        requested = _ordered((xmin, xmax))
        full = self._initial.span
        span = min(max(requested.span, full / self._max_zoom), full / self._min_zoom)
        center = (requested.vmin + requested.vmax) * 0.5
        self._domain = self._clamp(center - span * 0.5, span, span * self._padding)
        return self._domain

    def pan(self, delta_x: float) -> DataRange:
        """Shift the domain by ``delta_x`` data units."""
        span = self._domain.span
        self._domain = self._clamp(self._domain.vmin + float(delta_x), span, span * self._padding)
        return self._domain

    def zoom(self, factor: float, anchor_x: float | None = None) -> DataRange:
        """Zoom in for ``factor > 1`` and out for ``factor < 1``.

        ``anchor_x`` (default: the domain center) keeps its relative position
        on screen. The resulting zoom level is clamped to the viewport limits.
        """
        if factor <= 0:
            raise ValueError("zoom factor must be > 0")
        current = self.zoom_level
        target = min(max(current * float(factor), self._min_zoom), self._max_zoom)
        if target == current:
            return self._domain

        left = self._domain.vmin
        old_span = self._domain.span
        span = self._initial.span / target
        anchor = (left + self._domain.vmax) * 0.5 if anchor_x is None else float(anchor_x)
        ratio = (anchor - left) / old_span
        self._domain = self._clamp(anchor - ratio * span, span, self._initial.span * self._padding)
        return self._domain

    def _clamp(self, start: float, span: float, overshoot: float) -> DataRange:
        lower = self._initial.vmin - overshoot
        upper = self._initial.vmax + overshoot
        if span >= upper - lower:
            center = (self._initial.vmin + self._initial.vmax) * 0.5
            return DataRange(center - span * 0.5, center + span * 0.5)
        start = min(max(start, lower), upper - span)
        return DataRange(start, start + span)


def _ordered(value: RangeLike) -> DataRange:
    rng = DataRange.coerce(value)
    lo, hi = min(rng.vmin, rng.vmax), max(rng.vmin, rng.vmax)
    if not hi - lo > 0:
        raise ValueError(f"x domain must have a positive span, got ({rng.vmin}, {rng.vmax})")
    return DataRange(float(lo), float(hi))
