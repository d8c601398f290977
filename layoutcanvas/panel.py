"""Screen geometry of the toolbar and the zone panel.

Shared by the input handler (hit testing) and the renderer (drawing), so
both always agree on where a button is.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .config import (
    TOOLBAR_BTN_SIZE, TOOLBAR_BTN_SPACING, TOOLBAR_PADDING, TOOLBAR_MARGIN_BOTTOM,
    PANEL_WIDTH, PANEL_ROW_HEIGHT,
)

Rect = Tuple[float, float, float, float]  # x, y, w, h

ZONE_FIELDS = ("passenger_count", "line_count", "circle_size")
ZONE_FIELD_STEPS = {"passenger_count": 10, "line_count": 1, "circle_size": 1}
ZONE_FIELD_LABELS = {"passenger_count": "Pax", "line_count": "Lines", "circle_size": "Size"}

_PANEL_PAD = 8
_BLOCK_GAP = 10


def rect_contains(rect: Rect, x: float, y: float) -> bool:
    rx, ry, rw, rh = rect
    return rx <= x <= rx + rw and ry <= y <= ry + rh


def toolbar_bounds(screen_w: float, screen_h: float, n_buttons: int) -> Rect:
    """Toolbar panel, centered at the bottom of the window."""
    w = n_buttons * TOOLBAR_BTN_SIZE + (n_buttons - 1) * TOOLBAR_BTN_SPACING + 2 * TOOLBAR_PADDING
    h = TOOLBAR_BTN_SIZE + 2 * TOOLBAR_PADDING
    return ((screen_w - w) / 2.0, screen_h - TOOLBAR_MARGIN_BOTTOM - h, w, h)


def toolbar_button_rects(screen_w: float, screen_h: float, n_buttons: int) -> List[Rect]:
    bx, by, _, _ = toolbar_bounds(screen_w, screen_h, n_buttons)
    return [
        (bx + TOOLBAR_PADDING + i * (TOOLBAR_BTN_SIZE + TOOLBAR_BTN_SPACING),
         by + TOOLBAR_PADDING, TOOLBAR_BTN_SIZE, TOOLBAR_BTN_SIZE)
        for i in range(n_buttons)
    ]


def toolbar_button_at(screen_w: float, screen_h: float, n_buttons: int,
                      x: float, y: float) -> int:
    """Index of the toolbar button under (x, y), or -1."""
    for i, rect in enumerate(toolbar_button_rects(screen_w, screen_h, n_buttons)):
        if rect_contains(rect, x, y):
            return i
    return -1


@dataclass
class ZoneCells:
    """Screen rects of one zone block in the panel."""
    title: Rect
    fields: List[Rect]   # in ZONE_FIELDS order
    apply: Rect
    delete: Rect


def panel_bounds(screen_w: float, n_zones: int) -> Rect:
    block_h = 3 * PANEL_ROW_HEIGHT
    h = n_zones * block_h + max(0, n_zones - 1) * _BLOCK_GAP + 2 * _PANEL_PAD
    return (screen_w - PANEL_WIDTH, 0.0, PANEL_WIDTH, h)


def zone_cells(screen_w: float, n_zones: int) -> List[ZoneCells]:
    px, py, pw, _ = panel_bounds(screen_w, n_zones)
    inner_x = px + _PANEL_PAD
    inner_w = pw - 2 * _PANEL_PAD
    field_w = inner_w / len(ZONE_FIELDS)
    half_w = inner_w / 2.0
    row = PANEL_ROW_HEIGHT

    cells = []
    for i in range(n_zones):
        y0 = py + _PANEL_PAD + i * (3 * row + _BLOCK_GAP)
        cells.append(ZoneCells(
            title=(inner_x, y0, inner_w, row),
            fields=[(inner_x + k * field_w, y0 + row, field_w - 4, row - 4)
                    for k in range(len(ZONE_FIELDS))],
            apply=(inner_x, y0 + 2 * row, half_w - 4, row - 4),
            delete=(inner_x + half_w, y0 + 2 * row, half_w - 4, row - 4),
        ))
    return cells


def zone_hit(screen_w: float, n_zones: int, x: float,
             y: float) -> Optional[Tuple[int, str]]:
    """What part of the zone panel is under (x, y).

    Returns:
        (zone index, part) where part is "apply", "delete", a field name
        from ZONE_FIELDS, or "panel" for the panel background; None when
        outside the panel.
    """
    if not rect_contains(panel_bounds(screen_w, n_zones), x, y):
        return None
    for i, cells in enumerate(zone_cells(screen_w, n_zones)):
        if rect_contains(cells.apply, x, y):
            return (i, "apply")
        if rect_contains(cells.delete, x, y):
            return (i, "delete")
        for name, rect in zip(ZONE_FIELDS, cells.fields):
            if rect_contains(rect, x, y):
                return (i, name)
    return (-1, "panel")
