"""Input Handler - maps raylib input events to commands.

This module bridges the gap between raw raylib input and the command pattern.
It polls input each frame and returns a list of commands to execute.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional, Tuple

if TYPE_CHECKING:
    from .state import EditorState

from .rl_compat import rl, get_dropped_files
from .commands import (
    Command,
    SelectMode, ModifierDown, ModifierUp,
    PointerDown, PointerMove, PointerUp,
    WheelZoom, ResetView,
    ApplyZone, DeleteZoneShape, UpdateZone,
    LoadBackground, SaveSnapshot, CloseApp,
)
from .panel import toolbar_button_at, zone_hit, ZONE_FIELDS, ZONE_FIELD_STEPS
from .types import Mode
from .config import (
    KEY_MOMENTARY_PAN, KEY_MODE_VIEW, KEY_MODE_GRAB, KEY_MODE_DRAW,
    KEY_RESET_VIEW, KEY_SAVE, KEY_CLOSE,
    KEY_LEFT_CONTROL, KEY_RIGHT_CONTROL, KEY_LEFT_SUPER, KEY_RIGHT_SUPER,
    DEFAULT_SNAPSHOT_PATH,
)


@dataclass
class MouseState:
    """Current mouse state snapshot."""
    x: float = 0.0
    y: float = 0.0
    left_pressed: bool = False
    left_released: bool = False
    left_down: bool = False
    wheel: float = 0.0


@dataclass
class InputHandler:
    """Handles input polling and command generation."""

    key_momentary_pan: int = KEY_MOMENTARY_PAN
    mode_keys: List[Tuple[int, Mode]] = field(default_factory=lambda: [
        (KEY_MODE_VIEW, Mode.VIEW),
        (KEY_MODE_GRAB, Mode.GRAB),
        (KEY_MODE_DRAW, Mode.DRAW),
    ])
    zoom_modifier_keys: List[int] = field(default_factory=lambda: [
        KEY_LEFT_CONTROL, KEY_RIGHT_CONTROL, KEY_LEFT_SUPER, KEY_RIGHT_SUPER,
    ])
    snapshot_path: str = DEFAULT_SNAPSHOT_PATH

    _last_pos: Optional[Tuple[float, float]] = None

    def poll_mouse(self) -> MouseState:
        """Get current mouse state."""
        pos = rl.GetMousePosition()
        return MouseState(
            x=pos.x,
            y=pos.y,
            left_pressed=rl.IsMouseButtonPressed(rl.MOUSE_BUTTON_LEFT),
            left_released=rl.IsMouseButtonReleased(rl.MOUSE_BUTTON_LEFT),
            left_down=rl.IsMouseButtonDown(rl.MOUSE_BUTTON_LEFT),
            wheel=rl.GetMouseWheelMove(),
        )

    def zoom_modifier_down(self) -> bool:
        return any(rl.IsKeyDown(k) for k in self.zoom_modifier_keys)

    def _momentary_pan_pressed(self) -> bool:
        if rl.IsKeyPressed(self.key_momentary_pan):
            return True
        # OS key repeat; the mode state ignores repeats.
        repeat = getattr(rl, "IsKeyPressedRepeat", None)
        return bool(repeat and repeat(self.key_momentary_pan))

    def poll_keys(self, state: "EditorState") -> List[Command]:
        commands: List[Command] = []

        if self._momentary_pan_pressed():
            commands.append(ModifierDown())
        if rl.IsKeyReleased(self.key_momentary_pan):
            commands.append(ModifierUp())

        for key, mode in self.mode_keys:
            if rl.IsKeyPressed(key):
                commands.append(SelectMode(mode))

        if rl.IsKeyPressed(KEY_RESET_VIEW):
            commands.append(ResetView())

        if state.is_operation and rl.IsKeyPressed(KEY_SAVE):
            commands.append(SaveSnapshot(self.snapshot_path))

        for path in get_dropped_files():
            commands.append(LoadBackground(path))
        return commands

    def poll_panel(self, state: "EditorState", mouse: MouseState,
                   screen_w: float) -> Optional[List[Command]]:
        """Zone panel input. Returns None when the mouse is not over the panel."""
        hit = zone_hit(screen_w, len(state.zones), mouse.x, mouse.y)
        if hit is None:
            return None
        index, part = hit
        commands: List[Command] = []
        if mouse.left_pressed:
            if part == "apply":
                commands.append(ApplyZone(index))
            elif part == "delete":
                commands.append(DeleteZoneShape(index))
        if mouse.wheel != 0.0 and part in ZONE_FIELDS:
            zone = state.zones[index]
            step = ZONE_FIELD_STEPS[part] * (1 if mouse.wheel > 0 else -1)
            value = max(1, getattr(zone, part) + step)
            commands.append(UpdateZone(index, {part: value}))
        return commands

    def poll(self, state: "EditorState", screen_w: float, screen_h: float) -> List[Command]:
        """Poll all inputs and return list of commands to execute."""
        if rl.IsKeyPressed(KEY_CLOSE):
            return [CloseApp()]

        commands = self.poll_keys(state)
        mouse = self.poll_mouse()
        pos = (mouse.x, mouse.y)
        moved = self._last_pos is not None and pos != self._last_pos
        self._last_pos = pos

        # An active gesture owns the pointer until release, wherever it goes.
        if state.input.is_dragging:
            if moved:
                commands.append(PointerMove(mouse.x, mouse.y))
            if mouse.left_released or not mouse.left_down:
                commands.append(PointerUp(mouse.x, mouse.y))
            if mouse.wheel != 0.0:
                commands.append(WheelZoom(-mouse.wheel, pos, self.zoom_modifier_down()))
            return commands

        if state.is_operation:
            panel_commands = self.poll_panel(state, mouse, screen_w)
            if panel_commands is not None:
                return commands + panel_commands

        if mouse.left_pressed:
            n = len(state.ui.toolbar.buttons)
            idx = toolbar_button_at(screen_w, screen_h, n, mouse.x, mouse.y)
            if idx >= 0:
                commands.append(SelectMode(state.ui.toolbar.buttons[idx].mode))
                return commands
            commands.append(PointerDown(mouse.x, mouse.y))

        if mouse.wheel != 0.0:
            # raylib reports wheel-up as positive; wheel-up zooms in.
            commands.append(WheelZoom(-mouse.wheel, pos, self.zoom_modifier_down()))

        return commands
