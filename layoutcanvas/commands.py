"""Command Pattern for input handling.

Commands encapsulate actions that can be triggered by various inputs.
Each command has an execute() method and optional can_execute() for guards.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional, Tuple

if TYPE_CHECKING:
    from .state import EditorState
    from .image_loader import AsyncImageLoader

from .types import Mode, LoadedImage
from .state.shapes import ShapeError
from .image_loader import ImageLoadError, decode_image
from .snapshot import save_snapshot
from .config import MSG_IMAGE_FAILED
from .logging import log


class Command(ABC):
    """Base class for all commands."""

    @abstractmethod
    def execute(self, state: "EditorState") -> bool:
        """Execute the command. Returns True if action was taken."""
        pass

    def can_execute(self, state: "EditorState") -> bool:
        """Check if command can be executed. Override for guards."""
        return True


# ═══════════════════════════════════════════════════════════════════════════
# Mode Commands
# ═══════════════════════════════════════════════════════════════════════════

@dataclass
class SelectMode(Command):
    """Toolbar mode selection."""
    mode: Mode

    def execute(self, state: "EditorState") -> bool:
        ok = state.select_mode(self.mode)
        log(f"[CMD] SelectMode: {self.mode.value} -> {'ok' if ok else 'refused'}")
        return ok


class ModifierDown(Command):
    """Momentary pan key pressed."""

    def execute(self, state: "EditorState") -> bool:
        state.modifier_down()
        return True


class ModifierUp(Command):
    """Momentary pan key released."""

    def execute(self, state: "EditorState") -> bool:
        state.modifier_up()
        return True


# ═══════════════════════════════════════════════════════════════════════════
# Pointer Commands
# ═══════════════════════════════════════════════════════════════════════════

@dataclass
class PointerDown(Command):
    x: float
    y: float

    def execute(self, state: "EditorState") -> bool:
        state.pointer_down((self.x, self.y))
        return True


@dataclass
class PointerMove(Command):
    x: float
    y: float

    def can_execute(self, state: "EditorState") -> bool:
        return state.input.is_dragging

    def execute(self, state: "EditorState") -> bool:
        if not self.can_execute(state):
            return False
        state.pointer_move((self.x, self.y))
        return True


@dataclass
class PointerUp(Command):
    x: float
    y: float

    def can_execute(self, state: "EditorState") -> bool:
        return state.input.is_dragging

    def execute(self, state: "EditorState") -> bool:
        if not self.can_execute(state):
            return False
        state.pointer_up((self.x, self.y))
        return True


# ═══════════════════════════════════════════════════════════════════════════
# View Commands
# ═══════════════════════════════════════════════════════════════════════════

@dataclass
class WheelZoom(Command):
    """Zoom with mouse wheel. Positive delta zooms out."""
    delta: float
    anchor: Tuple[float, float] = (0.0, 0.0)
    zoom_modifier: bool = False

    def execute(self, state: "EditorState") -> bool:
        if not state.wheel(self.anchor, self.delta, self.zoom_modifier):
            return False
        log(f"[CMD] WheelZoom: delta={self.delta} scale={state.view.scale:.3f}")
        return True


class ResetView(Command):

    def execute(self, state: "EditorState") -> bool:
        state.reset_view()
        return True


# ═══════════════════════════════════════════════════════════════════════════
# Zone Commands (operation variant)
# ═══════════════════════════════════════════════════════════════════════════

@dataclass
class ApplyZone(Command):
    """Regenerate the passenger overlay of one zone."""
    index: int

    def can_execute(self, state: "EditorState") -> bool:
        return state.is_operation

    def execute(self, state: "EditorState") -> bool:
        if not self.can_execute(state):
            return False
        try:
            count = state.apply_zone(self.index)
        except ShapeError as e:
            state.ui.warn(str(e))
            return False
        log(f"[CMD] ApplyZone: {self.index} -> {count} points")
        return True


@dataclass
class DeleteZoneShape(Command):
    """Delete the shape of a zone. Only the last placed shape can go."""
    index: int

    def can_execute(self, state: "EditorState") -> bool:
        return state.is_operation and self.index == len(state.shapes) - 1

    def execute(self, state: "EditorState") -> bool:
        if not self.can_execute(state):
            log(f"[CMD] DeleteZoneShape: {self.index} not allowed")
            return False
        try:
            state.delete_zone_shape(self.index)
        except ShapeError as e:
            state.ui.warn(str(e))
            return False
        return True


@dataclass
class UpdateZone(Command):
    index: int
    values: dict = field(default_factory=dict)

    def execute(self, state: "EditorState") -> bool:
        try:
            state.update_zone(self.index, **self.values)
        except (ShapeError, ValueError) as e:
            state.ui.warn(str(e))
            return False
        return True


# ═══════════════════════════════════════════════════════════════════════════
# File Commands
# ═══════════════════════════════════════════════════════════════════════════

@dataclass
class LoadBackground(Command):
    """Replace the backdrop with an image file.

    With a loader the file is decoded on a worker thread and applied when
    the loader's UI events are polled; without one it is decoded inline.
    """
    path: str
    loader: Optional["AsyncImageLoader"] = None

    def execute(self, state: "EditorState") -> bool:
        generation = state.request_background(self.path)
        log(f"[CMD] LoadBackground: {self.path} (gen {generation})")

        def on_loaded(path: str, gen: int, result: Optional[LoadedImage],
                      error: Optional[ImageLoadError]) -> None:
            if error is not None:
                state.report_background_error(f"{MSG_IMAGE_FAILED}: {error}", gen)
            else:
                state.set_background(result, gen)

        if self.loader is not None:
            self.loader.submit(self.path, generation, on_loaded)
            return True

        try:
            loaded = decode_image(self.path)
        except ImageLoadError as e:
            on_loaded(self.path, generation, None, e)
            return False
        on_loaded(self.path, generation, loaded, None)
        return True


@dataclass
class SaveSnapshot(Command):
    path: str

    def execute(self, state: "EditorState") -> bool:
        try:
            save_snapshot(state, self.path)
        except OSError as e:
            log(f"[CMD][ERR] SaveSnapshot: {e!r}")
            state.ui.warn(f"Could not save snapshot: {e.strerror or e}")
            return False
        return True


# ═══════════════════════════════════════════════════════════════════════════
# App Control Commands
# ═══════════════════════════════════════════════════════════════════════════

class CloseApp(Command):
    """Close the application."""

    def execute(self, state: "EditorState") -> bool:
        log("[CMD] CloseApp")
        return True
