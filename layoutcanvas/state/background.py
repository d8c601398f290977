"""Background state - the backdrop image and its load bookkeeping."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from ..types import BackgroundImage, LoadedImage
from ..view_math import compute_fit_scale, center_position_for
from ..logging import log


@dataclass
class BackgroundState:
    """Current backdrop plus the generation of the newest load request."""
    image: Optional[BackgroundImage] = None
    generation: int = 0
    pending_path: Optional[str] = None
    error: Optional[str] = None

    @property
    def loading(self) -> bool:
        return self.pending_path is not None

    def next_generation(self, path: str) -> int:
        """Register a new load request. Older requests become stale."""
        self.generation += 1
        self.pending_path = path
        return self.generation

    def is_current(self, generation: int) -> bool:
        return generation == self.generation

    def apply(self, loaded: LoadedImage, viewport_w: float, viewport_h: float) -> BackgroundImage:
        """Replace the backdrop, shrinking it to fit and centering it."""
        scale = compute_fit_scale(loaded.width, loaded.height, viewport_w, viewport_h)
        x, y = center_position_for(scale, loaded.width, loaded.height, viewport_w, viewport_h)
        self.image = BackgroundImage(
            source=loaded.path,
            data_url=loaded.data_url,
            natural_width=loaded.width,
            natural_height=loaded.height,
            display_scale=scale,
            x=x, y=y,
        )
        self.pending_path = None
        self.error = None
        log(f"[BG] {loaded.path}: {loaded.width}x{loaded.height} scale={scale:.3f}")
        return self.image

    def fail(self, message: str) -> None:
        """Record a failed load. The previous backdrop stays in place."""
        self.pending_path = None
        self.error = message
        log(f"[BG][ERR] {message}")
