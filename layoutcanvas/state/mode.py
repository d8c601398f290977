"""Mode state - view/grab/draw with a momentary pan override.

Transitions:

    event              current   result    saved_mode
    select(m)          any       m         GRAB if m is GRAB, else unchanged
    modifier down      != GRAB   GRAB      current mode (first down only)
    modifier down      GRAB      GRAB      unchanged
    modifier repeat    any       unchanged unchanged
    modifier up        any       saved     unchanged
    draw committed     DRAW      VIEW      unchanged
    draw committed     GRAB (*)  GRAB      VIEW

(*) momentary override active while the draft was finished.
"""

from __future__ import annotations
from dataclasses import dataclass

from ..types import Mode, Cursor
from ..logging import log


@dataclass
class ModeState:
    """Current interaction mode plus the mode to restore after an override."""
    mode: Mode = Mode.VIEW
    saved_mode: Mode = Mode.VIEW
    modifier_held: bool = False

    def select(self, mode: Mode) -> None:
        """Explicit toolbar selection."""
        if mode is Mode.GRAB:
            self.saved_mode = Mode.GRAB
        if mode is not self.mode:
            log(f"[MODE] {self.mode.value} -> {mode.value}")
        self.mode = mode

    def press_modifier(self) -> bool:
        """Modifier key down. Returns False for key-repeat events."""
        if self.modifier_held:
            return False
        self.modifier_held = True
        if self.mode is not Mode.GRAB:
            self.saved_mode = self.mode
            self.mode = Mode.GRAB
            log(f"[MODE] Momentary grab (saved {self.saved_mode.value})")
        return True

    def release_modifier(self) -> bool:
        """Modifier key up. Restores the mode active before the override."""
        if not self.modifier_held:
            return False
        self.modifier_held = False
        self.mode = self.saved_mode
        log(f"[MODE] Restored {self.mode.value}")
        return True

    def finish_draw(self) -> None:
        """Drawing is one-shot: a committed shape drops back to view.

        With the pan modifier held the override stays, but its release
        restores view instead of draw.
        """
        if self.modifier_held:
            self.saved_mode = Mode.VIEW
            return
        self.mode = Mode.VIEW

    def cursor(self, panning: bool = False) -> Cursor:
        """Cursor token for the current mode."""
        if self.mode is Mode.GRAB:
            return Cursor.GRABBING if panning else Cursor.GRAB
        if self.mode is Mode.DRAW:
            return Cursor.CROSSHAIR
        return Cursor.AUTO
