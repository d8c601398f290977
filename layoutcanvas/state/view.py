"""View state - zoom scale and pan offset of the drawing surface."""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional, Tuple

from ..types import ViewParams
from ..view_math import (
    zoom_scale_for, recompute_view_anchor_zoom,
    screen_to_logical, logical_to_screen,
)
from ..logging import log


@dataclass
class ViewState:
    """Viewport transform. Every screen->logical conversion goes through here."""
    view: ViewParams = field(default_factory=ViewParams)
    pan_start_pointer: Optional[Tuple[float, float]] = None
    pan_start_offset: Tuple[float, float] = (0.0, 0.0)

    @property
    def scale(self) -> float:
        """Current zoom scale."""
        return self.view.scale

    @property
    def offset(self) -> Tuple[float, float]:
        """Current pan offset."""
        return (self.view.offx, self.view.offy)

    @property
    def is_panning(self) -> bool:
        return self.pan_start_pointer is not None

    def zoom(self, pointer: Tuple[float, float], delta_y: float) -> None:
        """Zoom one wheel step, keeping the point under the pointer fixed."""
        new_scale = zoom_scale_for(self.view.scale, delta_y)
        self.view = recompute_view_anchor_zoom(self.view, new_scale, pointer)

    def screen_to_logical(self, pos: Tuple[float, float]) -> Tuple[float, float]:
        return screen_to_logical(self.view, pos[0], pos[1])

    def logical_to_screen(self, pos: Tuple[float, float]) -> Tuple[float, float]:
        return logical_to_screen(self.view, pos[0], pos[1])

    def start_pan(self, pointer: Tuple[float, float]) -> None:
        self.pan_start_pointer = (pointer[0], pointer[1])
        self.pan_start_offset = (self.view.offx, self.view.offy)

    def update_pan(self, pointer: Tuple[float, float]) -> None:
        """Recompute the offset from the pan start, so no drift accumulates."""
        if self.pan_start_pointer is None:
            return
        dx = pointer[0] - self.pan_start_pointer[0]
        dy = pointer[1] - self.pan_start_pointer[1]
        self.view = ViewParams(
            scale=self.view.scale,
            offx=self.pan_start_offset[0] + dx,
            offy=self.pan_start_offset[1] + dy,
        )

    def end_pan(self) -> bool:
        """End panning. Returns True if a pan was in progress."""
        was_panning = self.is_panning
        self.pan_start_pointer = None
        return was_panning

    def reset(self) -> None:
        """Back to scale 1 and zero offset."""
        self.view = ViewParams()
        self.pan_start_pointer = None
        log("[VIEW] Reset")
