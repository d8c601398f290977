"""
Tests for the render description and the layout snapshot.
"""
import json

import pytest

from layoutcanvas.config import COLOR_DRAFT, COLOR_SHAPE
from layoutcanvas.handles import HandleKind
from layoutcanvas.scene import build_scene
from layoutcanvas.snapshot import build_snapshot, save_snapshot
from layoutcanvas.types import LoadedImage, Mode, ViewParams


class TestScene:

    def test_empty_scene(self, editor):
        scene = build_scene(editor)
        assert scene.cursor == "auto"
        assert scene.mode is Mode.VIEW
        assert scene.rects == []
        assert scene.zones == []
        assert scene.background is None

    def test_shapes_and_draft(self, editor, draw):
        draw(editor, (0, 0), (50, 50))
        editor.select_mode(Mode.DRAW)
        editor.pointer_down((100, 100))
        editor.pointer_move((120, 130))
        scene = build_scene(editor)
        assert [r.color for r in scene.rects] == [COLOR_SHAPE, COLOR_DRAFT]
        draft = scene.rects[-1]
        assert draft.shape_id is None
        assert (draft.width, draft.height) == (20, 30)
        assert scene.cursor == "crosshair"

    def test_selected_shape_has_handles(self, editor, draw):
        draw(editor, (0, 0), (50, 50))
        editor.pointer_down((25, 25))
        editor.pointer_up((25, 25))
        scene = build_scene(editor)
        assert scene.rects[0].selected
        assert {kind for kind, _, _ in scene.handles} == {HandleKind.RESIZE, HandleKind.ROTATE}

    def test_points_use_zone_circle_size(self, operation_editor, draw):
        draw(operation_editor, (0, 0), (100, 100))
        operation_editor.update_zone(0, passenger_count=4, line_count=2, circle_size=3)
        operation_editor.apply_zone(0)
        scene = build_scene(operation_editor)
        assert len(scene.points) == 4
        assert all(p.radius == 3 for p in scene.points)

    def test_zone_rows(self, operation_editor, draw):
        draw(operation_editor, (0, 0), (10, 10))
        draw(operation_editor, (20, 0), (30, 10))
        rows = build_scene(operation_editor).zones
        assert [r.title for r in rows] == ["Zone A", "Zone B", "Zone C"]
        assert [r.can_apply for r in rows] == [True, True, False]
        assert [r.can_delete for r in rows] == [False, True, False]

    def test_notice(self, operation_editor, draw):
        for i in range(3):
            draw(operation_editor, (i * 20, 0), (i * 20 + 10, 10))
        operation_editor.select_mode(Mode.DRAW)
        assert build_scene(operation_editor).notice is not None

    def test_scene_view_is_a_copy(self, editor):
        scene = build_scene(editor)
        editor.wheel((10, 10), -1, zoom_modifier=True)
        assert scene.view.scale == 1.0


class TestSnapshot:

    def test_structure(self, operation_editor, draw):
        operation_editor.view.view = ViewParams(scale=2.0, offx=10.0, offy=-5.0)
        draw(operation_editor, (10, -5), (210, 195))
        operation_editor.update_zone(0, passenger_count=4, line_count=2)
        operation_editor.apply_zone(0)
        gen = operation_editor.request_background("plan.png")
        operation_editor.set_background(
            LoadedImage(path="plan.png", data_url="", width=1600, height=600), gen)

        snap = build_snapshot(operation_editor)
        assert snap["stage"] == {
            "zoom": {"scale_x": 2.0, "scale_y": 2.0},
            "position": {"x": 10.0, "y": -5.0},
        }
        assert snap["image"]["zoom"] == pytest.approx(0.5)
        assert snap["image"]["position"] == pytest.approx({"x": 0.0, "y": 150.0})
        assert snap["markers"][0][0] == pytest.approx({"x": 25.0, "y": 25.0})
        assert len(snap["markers"][0]) == 4

    def test_without_background(self, editor):
        snap = build_snapshot(editor)
        assert snap["image"] == {"zoom": 1.0, "position": {"x": 0.0, "y": 0.0}}
        assert snap["markers"] == []

    def test_save_writes_json(self, editor, draw, tmp_path):
        draw(editor, (0, 0), (10, 10))
        path = tmp_path / "snapshot.json"
        save_snapshot(editor, str(path))
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["markers"] == [[]]
