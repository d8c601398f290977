"""UI state - toolbar and transient warnings."""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional

from ..types import Mode, Notice
from ..config import WARNING_DURATION_S
from ..logging import log, now


@dataclass
class ToolbarButton:
    """A toolbar button that selects a mode."""
    mode: Mode
    tooltip: str


DEFAULT_TOOLBAR_BUTTONS: List[ToolbarButton] = [
    ToolbarButton(Mode.VIEW, "Select"),
    ToolbarButton(Mode.GRAB, "Pan"),
    ToolbarButton(Mode.DRAW, "Draw zone"),
]


@dataclass
class ToolbarState:
    buttons: List[ToolbarButton] = field(default_factory=lambda: list(DEFAULT_TOOLBAR_BUTTONS))
    hover_index: int = -1


@dataclass
class UIState:
    """State for UI elements."""
    toolbar: ToolbarState = field(default_factory=ToolbarState)
    notice: Optional[Notice] = None

    def warn(self, message: str, duration_s: float = WARNING_DURATION_S) -> None:
        self.notice = Notice(message=message, expires_at=now() + duration_s)
        log(f"[UI][WARN] {message}")

    def active_notice(self, t: Optional[float] = None) -> Optional[Notice]:
        """Current warning, or None once it has expired."""
        if self.notice is None:
            return None
        if (now() if t is None else t) >= self.notice.expires_at:
            self.notice = None
        return self.notice
