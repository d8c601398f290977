"""Hit testing and handle math for rotated rectangles.

Shapes rotate about their top-left corner, so the local frame of a shape
has its origin at (shape.x, shape.y) and its axes turned by shape.rotation.
Handle sizes are given in screen pixels and divided by the view scale to
stay the same size on screen at every zoom level.
"""

from __future__ import annotations
import math
from enum import Enum
from typing import Iterable, Optional, Tuple

from .types import PersistedShape
from .math_utils import rotate_point, distance_squared
from .config import HANDLE_SIZE, HANDLE_HIT_TOLERANCE, ROTATE_HANDLE_OFFSET, MIN_SHAPE_EXTENT


class HandleKind(Enum):
    RESIZE = "resize"
    ROTATE = "rotate"


def to_local(shape: PersistedShape, lx: float, ly: float) -> Tuple[float, float]:
    """Logical point -> shape-local unrotated frame."""
    return rotate_point(lx - shape.x, ly - shape.y, -shape.rotation)


def to_logical(shape: PersistedShape, ux: float, uy: float) -> Tuple[float, float]:
    """Shape-local point -> logical coordinates."""
    rx, ry = rotate_point(ux, uy, shape.rotation)
    return (shape.x + rx, shape.y + ry)


def contains(shape: PersistedShape, lx: float, ly: float) -> bool:
    ux, uy = to_local(shape, lx, ly)
    return 0.0 <= ux <= shape.width and 0.0 <= uy <= shape.height


def topmost_at(shapes: Iterable[PersistedShape], lx: float, ly: float) -> Optional[PersistedShape]:
    """Last-drawn shape under the point, or None."""
    hit = None
    for shape in shapes:
        if contains(shape, lx, ly):
            hit = shape
    return hit


def handle_positions(shape: PersistedShape, view_scale: float) -> dict:
    """Logical centers of the transform handles."""
    offset = ROTATE_HANDLE_OFFSET / view_scale
    return {
        HandleKind.RESIZE: to_logical(shape, shape.width, shape.height),
        HandleKind.ROTATE: to_logical(shape, shape.width / 2.0, -offset),
    }


def handle_at(
    shape: PersistedShape,
    lx: float,
    ly: float,
    view_scale: float
) -> Optional[HandleKind]:
    """Which transform handle of a selected shape is under the point."""
    radius = (HANDLE_SIZE / 2.0 + HANDLE_HIT_TOLERANCE) / view_scale
    for kind, (hx, hy) in handle_positions(shape, view_scale).items():
        if distance_squared(lx, ly, hx, hy) <= radius * radius:
            return kind
    return None


def resize_scale(start: PersistedShape, lx: float, ly: float) -> Tuple[float, float]:
    """Multiplicative scale that moves the resize handle under the pointer.

    Args:
        start: Shape as it was when the gesture started.
        lx, ly: Pointer in logical coordinates.

    Returns:
        (scale_x, scale_y) relative to the start size.
    """
    ux, uy = to_local(start, lx, ly)
    w = max(MIN_SHAPE_EXTENT, ux)
    h = max(MIN_SHAPE_EXTENT, uy)
    sx = w / start.width if start.width else 1.0
    sy = h / start.height if start.height else 1.0
    return (sx, sy)


def rotation_for(
    start: PersistedShape,
    start_pointer: Tuple[float, float],
    lx: float,
    ly: float
) -> float:
    """Rotation after turning the pointer about the shape's top-left corner."""
    a0 = math.atan2(start_pointer[1] - start.y, start_pointer[0] - start.x)
    a1 = math.atan2(ly - start.y, lx - start.x)
    angle = start.rotation + math.degrees(a1 - a0)
    return (angle + 180.0) % 360.0 - 180.0
