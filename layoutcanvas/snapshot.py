"""Layout snapshot - stage transform, backdrop placement and overlay markers."""

from __future__ import annotations
import json
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .state import EditorState

from .logging import log


def build_snapshot(state: "EditorState") -> dict:
    """JSON-ready snapshot of the current layout.

    markers holds one list of {x, y} per shape, in shape order.
    """
    view = state.view.view
    bg = state.background.image
    return {
        "stage": {
            "zoom": {"scale_x": view.scale, "scale_y": view.scale},
            "position": {"x": view.offx, "y": view.offy},
        },
        "image": {
            "zoom": bg.display_scale if bg else 1.0,
            "position": {"x": bg.x if bg else 0.0, "y": bg.y if bg else 0.0},
        },
        "markers": [
            [{"x": p.x, "y": p.y} for p in shape.points]
            for shape in state.shapes
        ],
    }


def save_snapshot(state: "EditorState", path: str) -> dict:
    """Write the snapshot to path as JSON and return it."""
    snapshot = build_snapshot(state)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(snapshot, f, indent=2)
    log(f"[SNAPSHOT] Saved {len(snapshot['markers'])} shapes to {path}")
    return snapshot
