"""Pure view calculation functions - no side effects, no state mutation."""

from __future__ import annotations
from typing import Tuple

from .types import ViewParams
from .math_utils import clamp
from .config import (
    ZOOM_MIN, ZOOM_MAX, ZOOM_SCALE_BY,
    WHEEL_FINE_LIMIT, WHEEL_FINE_AMPLIFY,
    WHEEL_COARSE_LIMIT, WHEEL_COARSE_DAMPEN,
)


def normalize_wheel_delta(delta_y: float) -> float:
    """Bring trackpad and high-resolution wheel deltas onto one step scale.

    Deltas smaller than 1 are amplified x20, deltas larger than 100 are
    damped /100, everything in between is passed through.
    """
    if abs(delta_y) < WHEEL_FINE_LIMIT:
        return delta_y * WHEEL_FINE_AMPLIFY
    if abs(delta_y) > WHEEL_COARSE_LIMIT:
        return delta_y / WHEEL_COARSE_DAMPEN
    return delta_y


def zoom_scale_for(old_scale: float, delta_y: float) -> float:
    """Compute the clamped scale after one wheel step.

    A positive delta zooms out, zero or negative zooms in.

    Args:
        old_scale: Current zoom scale.
        delta_y: Raw wheel deltaY from the host.

    Returns:
        New scale within [ZOOM_MIN, ZOOM_MAX].
    """
    amount = normalize_wheel_delta(delta_y)
    if amount > 0:
        new_scale = old_scale / ZOOM_SCALE_BY
    else:
        new_scale = old_scale * ZOOM_SCALE_BY
    return clamp(new_scale, ZOOM_MIN, ZOOM_MAX)


def screen_to_logical(view: ViewParams, sx: float, sy: float) -> Tuple[float, float]:
    """Convert a screen position to logical drawing-surface coordinates."""
    return ((sx - view.offx) / view.scale, (sy - view.offy) / view.scale)


def logical_to_screen(view: ViewParams, lx: float, ly: float) -> Tuple[float, float]:
    """Convert a logical position to screen coordinates."""
    return (lx * view.scale + view.offx, ly * view.scale + view.offy)


def recompute_view_anchor_zoom(
    view: ViewParams,
    new_scale: float,
    anchor: Tuple[float, float]
) -> ViewParams:
    """Recompute view for new scale, keeping anchor point fixed.

    The logical point under the anchor before the zoom stays under it
    after the zoom.

    Args:
        view: Current view parameters.
        new_scale: Target scale factor (already clamped).
        anchor: Screen position (x, y) to keep fixed.

    Returns:
        New ViewParams with adjusted offsets.
    """
    ax, ay = anchor
    wx, wy = screen_to_logical(view, ax, ay)

    result = ViewParams(scale=float(new_scale))
    result.offx = ax - wx * result.scale
    result.offy = ay - wy * result.scale
    return result


def compute_fit_scale(
    img_w: int,
    img_h: int,
    screen_w: float,
    screen_h: float
) -> float:
    """Scale that shrinks an image to fit the viewport, never enlarging it.

    Returns:
        min(1, screen_w / img_w, screen_h / img_h)
    """
    if img_w <= 0 or img_h <= 0:
        return 1.0
    return min(1.0, screen_w / img_w, screen_h / img_h)


def center_position_for(
    scale: float,
    img_w: int,
    img_h: int,
    screen_w: float,
    screen_h: float
) -> Tuple[float, float]:
    """Top-left position that centers the scaled image in the viewport."""
    return (
        screen_w / 2.0 - img_w * scale / 2.0,
        screen_h / 2.0 - img_h * scale / 2.0,
    )
