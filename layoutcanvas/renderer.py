"""Renderer - draws a Scene with raylib.

The Renderer only reads the scene and draws to screen. The one piece of
state it keeps is the GPU texture of the current backdrop.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Optional, Tuple

from .rl_compat import (
    rl, make_rect as RL_Rect, make_vec2 as RL_V2, make_color as RL_Color,
    draw_text as RL_DrawText, measure_text as RL_MeasureText,
    load_texture_from_memory, is_texture_valid, set_cursor,
)
from .scene import Scene, RenderRect
from .image_loader import ImageLoadError, upload_payload
from .types import BackgroundImage, Cursor, ViewParams
from .view_math import logical_to_screen
from .math_utils import normalize_rect, rotate_point
from .handles import HandleKind
from .panel import (
    toolbar_bounds, toolbar_button_rects, panel_bounds, zone_cells,
    ZONE_FIELDS, ZONE_FIELD_LABELS,
)
from .state.ui import DEFAULT_TOOLBAR_BUTTONS
from .config import (
    COLOR_CANVAS_BG, COLOR_SELECTED, COLOR_TOOLBAR_BG, COLOR_TOOLBAR_ACTIVE,
    COLOR_WARNING_BG, COLOR_TEXT, HANDLE_SIZE, FONT_SIZE,
)
from .logging import log


@dataclass
class _BackdropTexture:
    data_url: str
    tex: Any  # None when the upload failed


@dataclass
class Renderer:
    """
    Handles all drawing operations.

    Usage:
        renderer = Renderer()
        renderer.draw_frame(scene, screen_w, screen_h)
    """
    _backdrop: Optional[_BackdropTexture] = None
    _cursor: Optional[Cursor] = None
    _white: Any = field(default=None, repr=False)

    # ═══════════════════════════════════════════════════════════════════════
    # Backdrop
    # ═══════════════════════════════════════════════════════════════════════

    def _texture_for(self, bg: BackgroundImage) -> Any:
        """Texture for the backdrop, uploaded once per decoded image."""
        if self._backdrop is not None and self._backdrop.data_url is bg.data_url:
            return self._backdrop.tex
        self.unload()
        tex = None
        try:
            file_type, data = upload_payload(bg.data_url)
            tex = load_texture_from_memory(file_type, data)
        except ImageLoadError as e:
            log(f"[RENDER][ERR] {bg.source}: {e}")
        if tex is not None and not is_texture_valid(tex):
            tex = None
        if tex is None:
            log(f"[RENDER][ERR] Texture upload failed for {bg.source}")
        self._backdrop = _BackdropTexture(bg.data_url, tex)
        return tex

    def draw_background(self, scene: Scene) -> None:
        bg = scene.background
        if bg is None:
            return
        tex = self._texture_for(bg)
        if tex is None:
            return
        v = scene.view
        sx, sy = logical_to_screen(v, bg.x, bg.y)
        rl.DrawTexturePro(
            tex,
            RL_Rect(0, 0, bg.natural_width, bg.natural_height),
            RL_Rect(sx, sy, bg.display_width * v.scale, bg.display_height * v.scale),
            RL_V2(0, 0), 0.0, self._white_tint(),
        )

    def _white_tint(self) -> Any:
        if self._white is None:
            self._white = RL_Color((255, 255, 255, 255))
        return self._white

    # ═══════════════════════════════════════════════════════════════════════
    # Shapes
    # ═══════════════════════════════════════════════════════════════════════

    def _corners(self, r: RenderRect, v: ViewParams):
        x, y, w, h = normalize_rect(r.x, r.y, r.width, r.height)
        corners = []
        for ux, uy in ((0, 0), (w, 0), (w, h), (0, h)):
            rx, ry = rotate_point(ux, uy, r.rotation)
            corners.append(logical_to_screen(v, x + rx, y + ry))
        return corners

    def draw_rect(self, r: RenderRect, v: ViewParams) -> None:
        x, y, w, h = normalize_rect(r.x, r.y, r.width, r.height)
        sx, sy = logical_to_screen(v, x, y)
        rl.DrawRectanglePro(
            RL_Rect(sx, sy, w * v.scale, h * v.scale),
            RL_V2(0, 0), r.rotation, RL_Color(r.color),
        )
        if r.selected:
            color = RL_Color(COLOR_SELECTED)
            pts = self._corners(r, v)
            for i in range(4):
                a, b = pts[i], pts[(i + 1) % 4]
                rl.DrawLineEx(RL_V2(*a), RL_V2(*b), 2.0, color)

    def draw_shapes(self, scene: Scene) -> None:
        v = scene.view
        for r in scene.rects:
            self.draw_rect(r, v)
        for p in scene.points:
            sx, sy = logical_to_screen(v, p.x, p.y)
            rl.DrawCircleV(RL_V2(sx, sy), max(1.0, p.radius * v.scale), RL_Color(p.color))
        color = RL_Color(COLOR_SELECTED)
        half = HANDLE_SIZE / 2.0
        for kind, hx, hy in scene.handles:
            sx, sy = logical_to_screen(v, hx, hy)
            if kind is HandleKind.ROTATE:
                rl.DrawCircleV(RL_V2(sx, sy), half, color)
            else:
                rl.DrawRectangleRec(RL_Rect(sx - half, sy - half, HANDLE_SIZE, HANDLE_SIZE), color)

    # ═══════════════════════════════════════════════════════════════════════
    # Overlay UI
    # ═══════════════════════════════════════════════════════════════════════

    def draw_toolbar(self, scene: Scene, screen_w: float, screen_h: float) -> None:
        buttons = DEFAULT_TOOLBAR_BUTTONS
        bx, by, bw, bh = toolbar_bounds(screen_w, screen_h, len(buttons))
        rl.DrawRectangleRounded(RL_Rect(bx, by, bw, bh), 0.3, 6, RL_Color(COLOR_TOOLBAR_BG))
        text_color = RL_Color(COLOR_TEXT)
        for btn, (x, y, w, h) in zip(buttons, toolbar_button_rects(screen_w, screen_h, len(buttons))):
            if btn.mode is scene.mode:
                rl.DrawRectangleRounded(RL_Rect(x, y, w, h), 0.2, 4, RL_Color(COLOR_TOOLBAR_ACTIVE))
            label = btn.mode.value[0].upper()
            tw = RL_MeasureText(label, FONT_SIZE)
            RL_DrawText(label, int(x + (w - tw) / 2), int(y + (h - FONT_SIZE) / 2), FONT_SIZE, text_color)

    def draw_zone_panel(self, scene: Scene, screen_w: float) -> None:
        if not scene.zones:
            return
        px, py, pw, ph = panel_bounds(screen_w, len(scene.zones))
        rl.DrawRectangleRec(RL_Rect(px, py, pw, ph), RL_Color(COLOR_TOOLBAR_BG))
        text_color = RL_Color(COLOR_TEXT)
        small = FONT_SIZE - 4
        for row, cells in zip(scene.zones, zone_cells(screen_w, len(scene.zones))):
            RL_DrawText(row.title, int(cells.title[0]), int(cells.title[1] + 4), FONT_SIZE, text_color)
            for name, (x, y, w, h) in zip(ZONE_FIELDS, cells.fields):
                rl.DrawRectangleRec(RL_Rect(x, y, w, h), RL_Color(COLOR_TOOLBAR_ACTIVE))
                value = getattr(row, name)
                text = f"{ZONE_FIELD_LABELS[name]} {value:g}"
                RL_DrawText(text, int(x + 4), int(y + 4), small, text_color)
            self._draw_button(cells.apply, "Apply", row.can_apply)
            self._draw_button(cells.delete, "Delete", row.can_delete)

    def _draw_button(self, rect: Tuple[float, float, float, float], label: str, enabled: bool) -> None:
        x, y, w, h = rect
        alpha = 255 if enabled else 90
        rl.DrawRectangleRec(RL_Rect(x, y, w, h), RL_Color((203, 213, 225, alpha)))
        RL_DrawText(label, int(x + 6), int(y + 4), FONT_SIZE - 4, RL_Color((31, 41, 55, alpha)))

    def draw_notice(self, scene: Scene, screen_w: float) -> None:
        if not scene.notice:
            return
        tw = RL_MeasureText(scene.notice, FONT_SIZE)
        x = (screen_w - tw) / 2 - 12
        rl.DrawRectangleRec(RL_Rect(x, 12, tw + 24, FONT_SIZE + 16), RL_Color(COLOR_WARNING_BG))
        RL_DrawText(scene.notice, int(x + 12), 20, FONT_SIZE, RL_Color((255, 255, 255, 255)))

    def draw_loading(self, scene: Scene) -> None:
        if scene.loading:
            RL_DrawText("Loading...", 12, 12, FONT_SIZE, RL_Color(COLOR_TEXT))

    def update_cursor(self, scene: Scene) -> None:
        cursor = Cursor(scene.cursor)
        if cursor is not self._cursor:
            set_cursor(cursor)
            self._cursor = cursor

    # ═══════════════════════════════════════════════════════════════════════
    # Frame
    # ═══════════════════════════════════════════════════════════════════════

    def draw_frame(self, scene: Scene, screen_w: float, screen_h: float) -> None:
        """Draw a complete frame."""
        rl.BeginDrawing()
        rl.ClearBackground(RL_Color(COLOR_CANVAS_BG))
        self.draw_background(scene)
        self.draw_shapes(scene)
        self.draw_toolbar(scene, screen_w, screen_h)
        self.draw_zone_panel(scene, screen_w)
        self.draw_notice(scene, screen_w)
        self.draw_loading(scene)
        rl.EndDrawing()
        self.update_cursor(scene)

    def unload(self) -> None:
        """Release the backdrop texture."""
        if self._backdrop is not None:
            if self._backdrop.tex is not None and is_texture_valid(self._backdrop.tex):
                rl.UnloadTexture(self._backdrop.tex)
            self._backdrop = None
