"""Render description - what the host renderer should draw this frame.

Geometry in a Scene is logical; the renderer applies scene.view to reach
screen space. build_scene() only reads state.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional, Tuple

if TYPE_CHECKING:
    from .state import EditorState

from .types import BackgroundImage, Mode, ViewParams
from .handles import HandleKind, handle_positions
from .config import COLOR_SHAPE, COLOR_DRAFT, COLOR_OVERLAY_POINT


@dataclass
class RenderRect:
    x: float
    y: float
    width: float
    height: float
    rotation: float = 0.0
    color: Tuple[int, int, int, int] = COLOR_SHAPE
    shape_id: Optional[int] = None  # None for the draft
    selected: bool = False


@dataclass
class RenderPoint:
    x: float
    y: float
    radius: float
    color: Tuple[int, int, int, int] = COLOR_OVERLAY_POINT


@dataclass
class ZoneRow:
    """One zone line of the operation panel."""
    title: str
    passenger_count: int
    line_count: int
    circle_size: float
    can_apply: bool
    can_delete: bool


@dataclass
class Scene:
    view: ViewParams
    cursor: str
    mode: Mode
    background: Optional[BackgroundImage] = None
    rects: List[RenderRect] = field(default_factory=list)
    points: List[RenderPoint] = field(default_factory=list)
    handles: List[Tuple[HandleKind, float, float]] = field(default_factory=list)
    zones: List[ZoneRow] = field(default_factory=list)
    notice: Optional[str] = None
    loading: bool = False


def build_scene(state: "EditorState") -> Scene:
    """Describe the current editor state for rendering."""
    scene = Scene(
        view=state.view.view.copy(),
        cursor=state.cursor.value,
        mode=state.current_mode,
        background=state.background.image,
        loading=state.background.loading,
    )

    for index, shape in enumerate(state.shapes):
        drawn = state.transform_preview(shape)
        selected = shape.id == state.shapes.selected_id
        scene.rects.append(RenderRect(
            x=drawn.x, y=drawn.y,
            width=drawn.width, height=drawn.height,
            rotation=drawn.rotation,
            shape_id=shape.id,
            selected=selected,
        ))
        radius = state.zones[index].circle_size if index < len(state.zones) else 1.0
        for p in drawn.points:
            scene.points.append(RenderPoint(p.x, p.y, radius))
        if selected:
            for kind, (hx, hy) in handle_positions(drawn, state.view.scale).items():
                scene.handles.append((kind, hx, hy))

    draft = state.drawing.draft
    if draft is not None:
        scene.rects.append(RenderRect(
            x=draft.x, y=draft.y,
            width=draft.width, height=draft.height,
            color=COLOR_DRAFT,
        ))

    if state.is_operation:
        count = len(state.shapes)
        for i, zone in enumerate(state.zones):
            scene.zones.append(ZoneRow(
                title=zone.title,
                passenger_count=zone.passenger_count,
                line_count=zone.line_count,
                circle_size=zone.circle_size,
                can_apply=count >= i + 1,
                can_delete=count == i + 1,
            ))

    notice = state.ui.active_notice()
    if notice is not None:
        scene.notice = notice.message
    return scene
