"""Input state - the active pointer gesture, captured from down to up."""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Tuple

from ..types import PersistedShape


class DragKind(Enum):
    PAN = auto()
    MOVE = auto()
    RESIZE = auto()
    ROTATE = auto()
    DRAW = auto()


@dataclass
class DragSession:
    """One pointer gesture. Lives only between pointer-down and pointer-up."""
    kind: DragKind
    start_pointer: Tuple[float, float]          # logical
    shape_id: Optional[int] = None
    start_shape: Optional[PersistedShape] = None
    grab_offset: Tuple[float, float] = (0.0, 0.0)
    scale_x: float = 1.0
    scale_y: float = 1.0
    rotation: float = 0.0
    started: bool = False  # MOVE: first motion seen


@dataclass
class InputState:
    """State for input handling."""
    session: Optional[DragSession] = None
    pointer: Tuple[float, float] = (0.0, 0.0)  # last screen position

    @property
    def is_dragging(self) -> bool:
        return self.session is not None

    def capture(self, session: DragSession) -> DragSession:
        self.session = session
        return session

    def release(self) -> Optional[DragSession]:
        """End the gesture. Returns the session that was active."""
        session = self.session
        self.session = None
        return session

    def is_kind(self, kind: DragKind) -> bool:
        return self.session is not None and self.session.kind is kind
