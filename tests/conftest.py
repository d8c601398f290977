"""
Shared fixtures for layout canvas tests.

Provides editor states for both variants and sample image files.
"""
import os
import sys

import pytest
from PIL import Image

# Ensure the repository root is on the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from layoutcanvas.state import EditorState
from layoutcanvas.types import Mode, Variant


@pytest.fixture
def editor():
    state = EditorState(variant=Variant.BASE, viewport_w=800, viewport_h=600)
    return state


@pytest.fixture
def operation_editor():
    return EditorState(variant=Variant.OPERATION, viewport_w=800, viewport_h=600)


@pytest.fixture
def draw():
    """Draw one rectangle from start to end (screen coordinates)."""
    def _draw(state, start, end):
        assert state.select_mode(Mode.DRAW)
        state.pointer_down(start)
        state.pointer_move(end)
        return state.pointer_up(end)
    return _draw


@pytest.fixture
def png_factory(tmp_path):
    """Write a solid PNG of the given size and return its path."""
    def make(width, height, name="plan.png"):
        path = tmp_path / name
        Image.new("RGB", (width, height), (200, 200, 200)).save(path)
        return str(path)
    return make


@pytest.fixture
def broken_image(tmp_path):
    path = tmp_path / "broken.png"
    path.write_bytes(b"\x89PNG\r\n\x1a\nthis is not really a png")
    return str(path)
