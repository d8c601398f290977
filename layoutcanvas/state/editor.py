"""Composite EditorState - combines the sub-states and routes pointer input.

All pointer positions passed in are screen coordinates; they are converted
to logical coordinates through the view before any shape math.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .view import ViewState
from .mode import ModeState
from .drawing import DrawingSession
from .shapes import ShapeCollection, ShapeError
from .background import BackgroundState
from .input import InputState, DragSession, DragKind
from .ui import UIState
from ..types import Mode, Variant, Cursor, ZoneConfig, LoadedImage, PersistedShape
from ..handles import HandleKind, handle_at, resize_scale, rotation_for
from ..config import DEFAULT_ZONES, WINDOW_WIDTH, WINDOW_HEIGHT, MSG_ZONE_QUOTA
from ..logging import log


def default_zones() -> List[ZoneConfig]:
    return [ZoneConfig.from_dict(z) for z in DEFAULT_ZONES]


@dataclass
class EditorState:
    """
    Facility-layout canvas editor.

    Sub-states:
        view        zoom/pan transform
        mode        view/grab/draw + momentary override
        drawing     in-progress draft
        shapes      persisted rectangles (sole owner)
        background  backdrop image
        input       active pointer gesture
        ui          toolbar and warnings
    """
    variant: Variant = Variant.BASE
    viewport_w: float = WINDOW_WIDTH
    viewport_h: float = WINDOW_HEIGHT
    zones: List[ZoneConfig] = field(default_factory=default_zones)

    view: ViewState = field(default_factory=ViewState)
    mode: ModeState = field(default_factory=ModeState)
    drawing: DrawingSession = field(default_factory=DrawingSession)
    shapes: ShapeCollection = field(default_factory=ShapeCollection)
    background: BackgroundState = field(default_factory=BackgroundState)
    input: InputState = field(default_factory=InputState)
    ui: UIState = field(default_factory=UIState)

    # ═══════════════════════════════════════════════════════════════════════
    # Derived properties
    # ═══════════════════════════════════════════════════════════════════════

    @property
    def is_operation(self) -> bool:
        return self.variant is Variant.OPERATION

    @property
    def current_mode(self) -> Mode:
        return self.mode.mode

    @property
    def zone_quota_exhausted(self) -> bool:
        """Operation variant only: one shape per zone."""
        return self.is_operation and len(self.shapes) >= len(self.zones)

    @property
    def shapes_interactive(self) -> bool:
        """Whether pointer-down on a shape selects and drags it."""
        if self.mode.mode is Mode.DRAW:
            return False
        if self.is_operation:
            return True
        return self.mode.mode is Mode.VIEW

    @property
    def cursor(self) -> Cursor:
        return self.mode.cursor(panning=self.input.is_kind(DragKind.PAN))

    def set_viewport(self, width: float, height: float) -> None:
        self.viewport_w = width
        self.viewport_h = height

    # ═══════════════════════════════════════════════════════════════════════
    # Modes
    # ═══════════════════════════════════════════════════════════════════════

    def select_mode(self, mode: Mode) -> bool:
        """Toolbar selection. Drawing is refused once every zone has a shape."""
        if mode is Mode.DRAW and self.zone_quota_exhausted:
            self.ui.warn(MSG_ZONE_QUOTA)
            return False
        self.mode.select(mode)
        return True

    def modifier_down(self) -> None:
        self.mode.press_modifier()

    def modifier_up(self) -> None:
        self.mode.release_modifier()

    # ═══════════════════════════════════════════════════════════════════════
    # Pointer
    # ═══════════════════════════════════════════════════════════════════════

    def pointer_down(self, screen: Tuple[float, float]) -> None:
        self.input.pointer = screen
        if self.input.is_dragging:
            # A second down without an up; finish the first gesture.
            self.pointer_up(screen)

        pos = self.view.screen_to_logical(screen)
        mode = self.mode.mode

        if mode is Mode.DRAW:
            if self.zone_quota_exhausted:
                self.ui.warn(MSG_ZONE_QUOTA)
                self.mode.finish_draw()
                return
            self.shapes.select(None)
            self.drawing.begin(pos)
            self.input.capture(DragSession(DragKind.DRAW, start_pointer=pos))
            return

        if self.shapes_interactive:
            if self._begin_handle_drag(pos):
                return
            hit = self.shapes.hit_test(pos)
            if hit is not None:
                self.shapes.select(hit.id)
                self.input.capture(DragSession(
                    DragKind.MOVE,
                    start_pointer=pos,
                    shape_id=hit.id,
                    grab_offset=(pos[0] - hit.x, pos[1] - hit.y),
                ))
                return

        # Empty canvas or background image
        self.shapes.select(None)
        if mode is Mode.GRAB:
            self.view.start_pan(screen)
            self.input.capture(DragSession(DragKind.PAN, start_pointer=pos))

    def _begin_handle_drag(self, pos: Tuple[float, float]) -> bool:
        shape = self.shapes.selected
        if shape is None:
            return False
        kind = handle_at(shape, pos[0], pos[1], self.view.scale)
        if kind is None:
            return False
        drag_kind = DragKind.RESIZE if kind is HandleKind.RESIZE else DragKind.ROTATE
        self.shapes.start_transform(shape.id)
        self.input.capture(DragSession(
            drag_kind,
            start_pointer=pos,
            shape_id=shape.id,
            start_shape=shape.copy(),
            rotation=shape.rotation,
        ))
        return True

    def pointer_move(self, screen: Tuple[float, float]) -> None:
        self.input.pointer = screen
        session = self.input.session
        if session is None:
            return
        pos = self.view.screen_to_logical(screen)

        if session.kind is DragKind.DRAW:
            self.drawing.update(pos)
        elif session.kind is DragKind.PAN:
            self.view.update_pan(screen)
        elif session.kind is DragKind.MOVE:
            if not session.started:
                self.shapes.start_drag(session.shape_id)
                session.started = True
            ox, oy = session.grab_offset
            self.shapes.drag(session.shape_id, (pos[0] - ox, pos[1] - oy))
        elif session.kind is DragKind.RESIZE:
            session.scale_x, session.scale_y = resize_scale(session.start_shape, pos[0], pos[1])
        elif session.kind is DragKind.ROTATE:
            session.rotation = rotation_for(
                session.start_shape, session.start_pointer, pos[0], pos[1]
            )

    def pointer_up(self, screen: Tuple[float, float]) -> Optional[PersistedShape]:
        """Finish the active gesture. Returns a newly drawn shape, if any."""
        self.input.pointer = screen
        session = self.input.release()
        if session is None:
            return None

        if session.kind is DragKind.DRAW:
            rect = self.drawing.commit()
            if rect is None:
                return None
            shape = self.shapes.add(rect)
            self.mode.finish_draw()
            return shape

        if session.kind is DragKind.PAN:
            self.view.end_pan()
        elif session.kind in (DragKind.RESIZE, DragKind.ROTATE):
            start = session.start_shape
            self.shapes.transform(
                session.shape_id,
                start.x, start.y, start.width, start.height,
                session.rotation,
                scale_x=session.scale_x, scale_y=session.scale_y,
            )
        return None

    def wheel(self, screen: Tuple[float, float], delta_y: float, zoom_modifier: bool) -> bool:
        """Zoom at the pointer. Ignored unless the zoom modifier is held."""
        if not zoom_modifier:
            return False
        self.view.zoom(screen, delta_y)
        if self.input.is_kind(DragKind.PAN):
            self.view.start_pan(screen)
        return True

    def reset_view(self) -> None:
        self.view.reset()

    def transform_preview(self, shape: PersistedShape) -> PersistedShape:
        """Shape as it should be drawn while a handle gesture is in progress."""
        session = self.input.session
        if (session is None or session.shape_id != shape.id or
                session.kind not in (DragKind.RESIZE, DragKind.ROTATE)):
            return shape
        preview = session.start_shape.copy()
        preview.width *= session.scale_x
        preview.height *= session.scale_y
        preview.rotation = session.rotation
        preview.points = []
        return preview

    # ═══════════════════════════════════════════════════════════════════════
    # Zones (operation variant)
    # ═══════════════════════════════════════════════════════════════════════

    def zone(self, index: int) -> ZoneConfig:
        if not 0 <= index < len(self.zones):
            raise ShapeError(f"no zone at index {index}")
        return self.zones[index]

    def apply_zone(self, index: int) -> int:
        """Regenerate overlay points for the zone's shape. Returns point count."""
        zone = self.zone(index)
        if index >= len(self.shapes):
            raise ShapeError(f"{zone.title} has no shape yet")
        return len(self.shapes.draw_lines(index, zone))

    def delete_zone_shape(self, index: int) -> PersistedShape:
        if not self.is_operation:
            raise ShapeError("shapes can only be deleted in the operation variant")
        self.zone(index)
        return self.shapes.remove(index)

    def update_zone(self, index: int, **values) -> ZoneConfig:
        """Edit zone fields (passenger_count, line_count, circle_size)."""
        zone = self.zone(index)
        for key, value in values.items():
            if key == "passenger_count":
                zone.passenger_count = int(value)
            elif key == "line_count":
                zone.line_count = int(value)
            elif key == "circle_size":
                zone.circle_size = float(value)
            else:
                raise ValueError(f"unknown zone field: {key}")
        log(f"[ZONE] {zone.title}: {values}")
        return zone

    # ═══════════════════════════════════════════════════════════════════════
    # Background
    # ═══════════════════════════════════════════════════════════════════════

    def request_background(self, path: str) -> int:
        return self.background.next_generation(path)

    def set_background(self, loaded: LoadedImage, generation: int) -> bool:
        """Install a loaded image unless a newer request superseded it."""
        if not self.background.is_current(generation):
            log(f"[BG] Dropping stale load of {loaded.path} (gen {generation})")
            return False
        self.background.apply(loaded, self.viewport_w, self.viewport_h)
        return True

    def report_background_error(self, message: str, generation: int) -> bool:
        if not self.background.is_current(generation):
            return False
        self.background.fail(message)
        self.ui.warn(message)
        return True
