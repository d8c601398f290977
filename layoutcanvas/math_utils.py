"""Pure math utilities - no external dependencies."""

from __future__ import annotations
import math
from typing import Tuple


def clamp(v: float, a: float, b: float) -> float:
    """Clamp value v to range [a, b]."""
    return a if v < a else b if v > b else v


def rotate_point(x: float, y: float, degrees: float) -> Tuple[float, float]:
    """Rotate (x, y) about the origin by the given angle in degrees."""
    rad = math.radians(degrees)
    c = math.cos(rad)
    s = math.sin(rad)
    return (x * c - y * s, x * s + y * c)


def normalize_rect(x: float, y: float, w: float, h: float) -> Tuple[float, float, float, float]:
    """Convert a rect with signed extents into top-left + positive size."""
    if w < 0:
        x, w = x + w, -w
    if h < 0:
        y, h = y + h, -h
    return (x, y, w, h)


def distance_squared(x1: float, y1: float, x2: float, y2: float) -> float:
    """Squared distance between two points (avoids sqrt for comparisons)."""
    dx = x2 - x1
    dy = y2 - y1
    return dx * dx + dy * dy
