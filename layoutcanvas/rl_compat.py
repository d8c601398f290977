"""Raylib compatibility layer - abstracts differences between raylibpy and python-raylib."""

from __future__ import annotations
import ctypes
from typing import Any, List

try:
    import raylibpy as rl
    RL_VERSION = "raylibpy"
except ImportError:
    import raylib as rl
    RL_VERSION = "python-raylib"

from .types import Cursor

# raylib MouseCursor values
_CURSOR_CODES = {
    Cursor.AUTO: 0,        # MOUSE_CURSOR_DEFAULT
    Cursor.CROSSHAIR: 3,   # MOUSE_CURSOR_CROSSHAIR
    Cursor.GRAB: 4,        # MOUSE_CURSOR_POINTING_HAND
    Cursor.GRABBING: 9,    # MOUSE_CURSOR_RESIZE_ALL
}


class _CTypesRect(ctypes.Structure):
    """Fallback Rectangle structure for ctypes."""
    _fields_ = [
        ("x", ctypes.c_float),
        ("y", ctypes.c_float),
        ("width", ctypes.c_float),
        ("height", ctypes.c_float),
    ]


class _CTypesVec2(ctypes.Structure):
    """Fallback Vector2 structure for ctypes."""
    _fields_ = [
        ("x", ctypes.c_float),
        ("y", ctypes.c_float),
    ]


def make_rect(x: float, y: float, w: float, h: float) -> Any:
    """Create a raylib Rectangle compatible with the current binding."""
    if hasattr(rl, 'Rectangle'):
        try:
            return rl.Rectangle(x, y, w, h)
        except TypeError:
            pass
    if hasattr(rl, 'ffi'):
        r = rl.ffi.new("Rectangle *")
        r[0].x = float(x)
        r[0].y = float(y)
        r[0].width = float(w)
        r[0].height = float(h)
        return r[0]
    return _CTypesRect(float(x), float(y), float(w), float(h))


def make_vec2(x: float, y: float) -> Any:
    """Create a raylib Vector2 compatible with the current binding."""
    if hasattr(rl, 'Vector2'):
        try:
            return rl.Vector2(x, y)
        except TypeError:
            pass
    if hasattr(rl, 'ffi'):
        v = rl.ffi.new("Vector2 *")
        v[0].x = float(x)
        v[0].y = float(y)
        return v[0]
    return _CTypesVec2(float(x), float(y))


def make_color(rgba) -> Any:
    """Create a raylib Color from an (r, g, b, a) tuple."""
    r, g, b, a = (int(c) for c in rgba)
    ctor = getattr(rl, "Color", None)
    if ctor:
        try:
            return ctor(r, g, b, a)
        except TypeError:
            pass
    if hasattr(rl, 'ffi'):
        c = rl.ffi.new("Color *")
        c[0].r, c[0].g, c[0].b, c[0].a = r, g, b, a
        return c[0]
    base = rl.WHITE if (r + g + b) >= 384 else rl.BLACK
    return rl.Fade(base, max(0.0, min(1.0, a / 255.0)))


def _as_c_string(text: str):
    return text.encode('utf-8') if RL_VERSION == "python-raylib" else text


def init_window(w: int, h: int, title: str) -> None:
    rl.InitWindow(w, h, _as_c_string(title))


def draw_text(text: str, x: int, y: int, size: int, color: Any) -> None:
    """Draw text with encoding fallback."""
    try:
        rl.DrawText(text, int(x), int(y), size, color)
    except TypeError:
        rl.DrawText(text.encode('utf-8'), int(x), int(y), size, color)


def measure_text(text: str, size: int) -> int:
    """Measure text width with encoding fallback."""
    try:
        return rl.MeasureText(text, size)
    except TypeError:
        return rl.MeasureText(text.encode('utf-8'), size)


def load_texture_from_memory(file_type: str, data: bytes) -> Any:
    """Decode encoded image bytes (file_type like ".png") into a texture.

    Returns None when raylib cannot decode the bytes.
    """
    if hasattr(rl, "ffi"):
        buf = rl.ffi.from_buffer("unsigned char[]", data)
        img = rl.LoadImageFromMemory(file_type.encode("ascii"), buf, len(data))
    else:
        img = rl.LoadImageFromMemory(file_type, data, len(data))
    if img.width <= 0 or img.height <= 0:
        return None
    tex = rl.LoadTextureFromImage(img)
    rl.UnloadImage(img)
    return tex


def is_texture_valid(tex: Any) -> bool:
    """Check if texture is valid and loaded."""
    return (getattr(tex, 'id', 0) or 0) > 0


def set_cursor(cursor: Cursor) -> None:
    rl.SetMouseCursor(_CURSOR_CODES.get(cursor, 0))


def get_dropped_files() -> List[str]:
    """Paths dropped onto the window this frame."""
    if not rl.IsFileDropped():
        return []
    files = rl.LoadDroppedFiles()
    paths = []
    try:
        for i in range(files.count):
            p = files.paths[i]
            if hasattr(rl, 'ffi'):
                p = rl.ffi.string(p)
            paths.append(p.decode('utf-8') if isinstance(p, bytes) else str(p))
    finally:
        rl.UnloadDroppedFiles(files)
    return paths


__all__ = [
    'rl',
    'RL_VERSION',
    'make_rect',
    'make_vec2',
    'make_color',
    'init_window',
    'draw_text',
    'measure_text',
    'load_texture_from_memory',
    'is_texture_valid',
    'set_cursor',
    'get_dropped_files',
]
