"""State management submodules for the layout canvas."""

from .view import ViewState
from .mode import ModeState
from .drawing import DrawingSession
from .shapes import ShapeCollection, ShapeError, overlay_points
from .background import BackgroundState
from .input import InputState, DragSession, DragKind
from .ui import UIState
from .editor import EditorState

__all__ = [
    'ViewState',
    'ModeState',
    'DrawingSession',
    'ShapeCollection',
    'ShapeError',
    'overlay_points',
    'BackgroundState',
    'InputState',
    'DragSession',
    'DragKind',
    'UIState',
    'EditorState',
]
