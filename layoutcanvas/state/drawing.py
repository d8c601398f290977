"""Drawing state - the rectangle being drawn between pointer-down and pointer-up."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple

from ..types import DraftShape
from ..math_utils import normalize_rect
from ..config import DEFAULT_SHAPE_SIZE, MIN_DRAFT_EXTENT
from ..logging import log


def _nonzero_extent(delta: float, motion: float) -> float:
    """Keep a draft extent renderable while the pointer sits on the origin."""
    if delta != 0:
        return delta
    return -MIN_DRAFT_EXTENT if motion < 0 else MIN_DRAFT_EXTENT


@dataclass
class DrawingSession:
    """Lifecycle of one draft rectangle, in logical coordinates."""
    draft: Optional[DraftShape] = None
    moved: bool = False  # any update with a non-zero net delta
    last_pos: Tuple[float, float] = (0.0, 0.0)

    @property
    def is_active(self) -> bool:
        return self.draft is not None

    def begin(self, pos: Tuple[float, float]) -> DraftShape:
        self.draft = DraftShape(x=pos[0], y=pos[1], width=0.0, height=0.0)
        self.moved = False
        self.last_pos = (pos[0], pos[1])
        log(f"[DRAW] Begin at ({pos[0]:.1f}, {pos[1]:.1f})")
        return self.draft

    def update(self, pos: Tuple[float, float]) -> None:
        """Stretch the draft to the pointer.

        A zero delta on an axis becomes +1 or -1 following the direction of
        the last pointer motion on that axis, so the draft never collapses.
        """
        d = self.draft
        if d is None:
            return
        dx = pos[0] - d.x
        dy = pos[1] - d.y
        d.width = _nonzero_extent(dx, pos[0] - self.last_pos[0])
        d.height = _nonzero_extent(dy, pos[1] - self.last_pos[1])
        if dx != 0 or dy != 0:
            self.moved = True
        self.last_pos = (pos[0], pos[1])

    def commit(self) -> Optional[DraftShape]:
        """Finish the gesture and return the rect to persist.

        A click whose pointer never left the origin becomes a default-size
        square centered on the click point. Signed extents are normalized to
        top-left plus positive size. Returns None when no draft is active.
        """
        d = self.draft
        if d is None:
            return None
        self.draft = None

        if not self.moved:
            half = DEFAULT_SHAPE_SIZE / 2.0
            result = DraftShape(
                x=d.x - half, y=d.y - half,
                width=DEFAULT_SHAPE_SIZE, height=DEFAULT_SHAPE_SIZE,
            )
            log(f"[DRAW] Click -> default shape at ({result.x:.1f}, {result.y:.1f})")
            return result

        x, y, w, h = normalize_rect(d.x, d.y, d.width, d.height)
        log(f"[DRAW] Commit ({x:.1f}, {y:.1f}) {w:.1f}x{h:.1f}")
        return DraftShape(x=x, y=y, width=w, height=h)

    def cancel(self) -> None:
        self.draft = None
