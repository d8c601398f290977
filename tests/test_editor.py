"""
Integration tests for EditorState pointer routing.

Covers:
- Drawing at identity and under a zoomed/panned view
- One-shot draw mode and the operation zone quota
- Zoom modifier gate, pan gesture and momentary pan
- Moving, resizing and rotating shapes through their handles
- Variant differences (base vs operation)
- Background request generations
"""
import pytest

from layoutcanvas.config import MSG_ZONE_QUOTA
from layoutcanvas.state import ShapeError
from layoutcanvas.types import Cursor, LoadedImage, Mode, ViewParams


def _rect(shape):
    return (shape.x, shape.y, shape.width, shape.height)


def _loaded(path="plan.png", w=1600, h=600):
    return LoadedImage(path=path, data_url="data:image/png;base64,", width=w, height=h)


class TestDrawing:

    def test_draw_at_identity(self, editor, draw):
        shape = draw(editor, (40, 60), (100, 100))
        assert _rect(shape) == (40, 60, 60, 40)
        assert len(editor.shapes) == 1

    def test_draw_mode_is_one_shot(self, editor, draw):
        draw(editor, (0, 0), (10, 10))
        assert editor.current_mode is Mode.VIEW
        assert editor.drawing.draft is None

    def test_draw_under_zoom_and_pan(self, editor, draw):
        editor.view.view = ViewParams(scale=2.0, offx=100.0, offy=50.0)
        shape = draw(editor, (300, 250), (500, 450))
        assert _rect(shape) == pytest.approx((100, 100, 100, 100))

    def test_click_draws_default_square(self, editor):
        editor.select_mode(Mode.DRAW)
        editor.pointer_down((10, 10))
        shape = editor.pointer_up((10, 10))
        assert _rect(shape) == (-40, -40, 100, 100)

    def test_draft_visible_while_drawing(self, editor):
        editor.select_mode(Mode.DRAW)
        editor.pointer_down((10, 10))
        editor.pointer_move((30, 50))
        draft = editor.drawing.draft
        assert (draft.width, draft.height) == (20, 40)
        assert editor.cursor is Cursor.CROSSHAIR

    def test_second_down_finishes_first_gesture(self, editor):
        editor.select_mode(Mode.DRAW)
        editor.pointer_down((0, 0))
        editor.pointer_move((20, 20))
        editor.pointer_down((200, 200))
        assert len(editor.shapes) == 1
        assert not editor.input.is_dragging

    def test_draw_deselects(self, editor, draw):
        draw(editor, (0, 0), (50, 50))
        editor.pointer_down((25, 25))
        editor.pointer_up((25, 25))
        assert editor.shapes.selected_id == 0
        editor.select_mode(Mode.DRAW)
        editor.pointer_down((300, 300))
        assert editor.shapes.selected_id is None


class TestZoneQuota:

    def test_operation_refuses_draw_when_full(self, operation_editor, draw):
        for i in range(3):
            draw(operation_editor, (i * 100, 0), (i * 100 + 50, 50))
        assert operation_editor.zone_quota_exhausted
        assert operation_editor.select_mode(Mode.DRAW) is False
        assert operation_editor.current_mode is Mode.VIEW
        assert operation_editor.ui.active_notice().message == MSG_ZONE_QUOTA

    def test_quota_frees_after_delete(self, operation_editor, draw):
        for i in range(3):
            draw(operation_editor, (i * 100, 0), (i * 100 + 50, 50))
        operation_editor.delete_zone_shape(2)
        assert operation_editor.select_mode(Mode.DRAW) is True

    def test_base_variant_is_unlimited(self, editor, draw):
        for i in range(5):
            draw(editor, (i * 60, 0), (i * 60 + 50, 50))
        assert len(editor.shapes) == 5
        assert editor.ui.notice is None

    def test_pan_key_held_over_last_draw_keeps_quota(self, operation_editor, draw):
        draw(operation_editor, (0, 0), (50, 50))
        draw(operation_editor, (100, 0), (150, 50))
        operation_editor.select_mode(Mode.DRAW)
        operation_editor.pointer_down((200, 0))
        operation_editor.pointer_move((250, 50))
        operation_editor.modifier_down()
        operation_editor.pointer_up((250, 50))
        operation_editor.modifier_up()
        assert operation_editor.current_mode is Mode.VIEW

        operation_editor.pointer_down((400, 400))
        operation_editor.pointer_up((400, 400))
        assert len(operation_editor.shapes) == len(operation_editor.zones)

    def test_draw_pointer_down_refused_when_full(self, operation_editor, draw):
        for i in range(3):
            draw(operation_editor, (i * 100, 0), (i * 100 + 50, 50))
        operation_editor.mode.mode = Mode.DRAW
        operation_editor.pointer_down((400, 400))
        operation_editor.pointer_up((400, 400))
        assert len(operation_editor.shapes) == 3
        assert operation_editor.drawing.draft is None
        assert operation_editor.current_mode is Mode.VIEW
        assert operation_editor.ui.active_notice().message == MSG_ZONE_QUOTA


class TestViewGestures:

    def test_wheel_needs_modifier(self, editor):
        assert editor.wheel((100, 100), -1, zoom_modifier=False) is False
        assert editor.view.scale == 1.0
        assert editor.wheel((100, 100), -1, zoom_modifier=True) is True
        assert editor.view.scale == pytest.approx(1.05)

    def test_pan_in_grab_mode(self, editor):
        editor.select_mode(Mode.GRAB)
        editor.pointer_down((100, 100))
        assert editor.cursor is Cursor.GRABBING
        editor.pointer_move((150, 130))
        editor.pointer_up((150, 130))
        assert editor.view.offset == (50, 30)
        assert editor.cursor is Cursor.GRAB

    def test_view_mode_does_not_pan(self, editor):
        editor.pointer_down((100, 100))
        editor.pointer_move((150, 130))
        editor.pointer_up((150, 130))
        assert editor.view.offset == (0, 0)

    def test_wheel_during_pan_keeps_pointer_anchor(self, editor):
        editor.select_mode(Mode.GRAB)
        editor.pointer_down((100, 100))
        editor.pointer_move((150, 100))
        editor.wheel((150, 100), -1, zoom_modifier=True)
        offx, offy = editor.view.offset
        editor.pointer_move((160, 100))
        assert editor.view.offset == pytest.approx((offx + 10, offy))

    def test_momentary_pan_from_draw(self, editor):
        editor.select_mode(Mode.DRAW)
        editor.modifier_down()
        assert editor.current_mode is Mode.GRAB
        editor.pointer_down((0, 0))
        editor.pointer_move((20, 0))
        editor.pointer_up((20, 0))
        editor.modifier_up()
        assert editor.current_mode is Mode.DRAW
        assert editor.view.offset == (20, 0)
        assert len(editor.shapes) == 0

    def test_draw_finished_with_pan_key_held_is_one_shot(self, editor):
        editor.select_mode(Mode.DRAW)
        editor.pointer_down((0, 0))
        editor.pointer_move((40, 40))
        editor.modifier_down()
        shape = editor.pointer_up((40, 40))
        assert shape is not None
        assert editor.current_mode is Mode.GRAB
        editor.modifier_up()
        assert editor.current_mode is Mode.VIEW

    def test_reset_view(self, editor):
        editor.wheel((300, 200), -1, zoom_modifier=True)
        editor.reset_view()
        assert editor.view.scale == 1.0
        assert editor.view.offset == (0.0, 0.0)


class TestShapeGestures:

    @pytest.fixture
    def drawn(self, editor, draw):
        draw(editor, (40, 60), (100, 100))
        return editor

    def _select(self, state, at=(50, 70)):
        state.pointer_down(at)
        state.pointer_up(at)

    def test_click_selects_without_clearing_points(self, drawn):
        drawn.apply_zone(0)
        self._select(drawn)
        assert drawn.shapes.selected_id == 0
        assert len(drawn.shapes.shapes[0].points) > 0

    def test_click_on_empty_deselects(self, drawn):
        self._select(drawn)
        self._select(drawn, at=(400, 400))
        assert drawn.shapes.selected_id is None

    def test_move_shape(self, drawn):
        drawn.apply_zone(0)
        drawn.pointer_down((50, 70))
        drawn.pointer_move((60, 80))
        drawn.pointer_up((60, 80))
        shape = drawn.shapes.shapes[0]
        assert _rect(shape) == (50, 70, 60, 40)
        assert shape.points == []

    def test_move_under_zoom(self, drawn):
        drawn.view.view = ViewParams(scale=2.0)
        drawn.pointer_down((100, 140))
        drawn.pointer_move((120, 160))
        drawn.pointer_up((120, 160))
        shape = drawn.shapes.shapes[0]
        assert (shape.x, shape.y) == pytest.approx((50, 70))

    def test_resize_handle(self, drawn):
        self._select(drawn)
        drawn.pointer_down((100, 100))
        drawn.pointer_move((160, 140))
        preview = drawn.transform_preview(drawn.shapes.shapes[0])
        assert (preview.width, preview.height) == pytest.approx((120, 80))
        # stored shape is untouched until release
        assert drawn.shapes.shapes[0].width == 60
        drawn.pointer_up((160, 140))
        assert _rect(drawn.shapes.shapes[0]) == pytest.approx((40, 60, 120, 80))

    def test_rotate_handle(self, drawn):
        self._select(drawn)
        drawn.pointer_down((70, 36))
        drawn.pointer_move((64, 90))
        drawn.pointer_up((64, 90))
        shape = drawn.shapes.shapes[0]
        assert shape.rotation == pytest.approx(90.0)
        assert (shape.x, shape.y, shape.width, shape.height) == (40, 60, 60, 40)

    def test_transform_start_clears_points(self, drawn):
        self._select(drawn)
        drawn.apply_zone(0)
        drawn.pointer_down((100, 100))
        assert drawn.shapes.shapes[0].points == []

    def test_base_grab_mode_pans_over_shapes(self, drawn):
        drawn.select_mode(Mode.GRAB)
        drawn.pointer_down((50, 70))
        drawn.pointer_move((60, 80))
        drawn.pointer_up((60, 80))
        assert _rect(drawn.shapes.shapes[0]) == (40, 60, 60, 40)
        assert drawn.view.offset == (10, 10)

    def test_operation_grab_mode_moves_shapes(self, operation_editor, draw):
        draw(operation_editor, (40, 60), (100, 100))
        operation_editor.select_mode(Mode.GRAB)
        operation_editor.pointer_down((50, 70))
        operation_editor.pointer_move((60, 80))
        operation_editor.pointer_up((60, 80))
        assert (operation_editor.shapes.shapes[0].x, operation_editor.shapes.shapes[0].y) == (50, 70)
        assert operation_editor.view.offset == (0, 0)


class TestZones:

    def test_apply_zone_without_shape(self, operation_editor):
        with pytest.raises(ShapeError):
            operation_editor.apply_zone(0)

    def test_apply_zone_bad_index(self, operation_editor):
        with pytest.raises(ShapeError):
            operation_editor.apply_zone(7)

    def test_apply_zone_counts(self, operation_editor, draw):
        draw(operation_editor, (0, 0), (200, 350))
        assert operation_editor.apply_zone(0) == 350

    def test_update_zone(self, operation_editor):
        zone = operation_editor.update_zone(1, passenger_count="40", line_count=4)
        assert (zone.passenger_count, zone.line_count) == (40, 4)

    def test_update_zone_unknown_field(self, operation_editor):
        with pytest.raises(ValueError):
            operation_editor.update_zone(0, colour=3)

    def test_delete_only_in_operation(self, editor, draw):
        draw(editor, (0, 0), (10, 10))
        with pytest.raises(ShapeError):
            editor.delete_zone_shape(0)

    def test_delete_only_last(self, operation_editor, draw):
        draw(operation_editor, (0, 0), (10, 10))
        draw(operation_editor, (20, 20), (30, 30))
        with pytest.raises(ShapeError):
            operation_editor.delete_zone_shape(0)
        operation_editor.delete_zone_shape(1)
        assert len(operation_editor.shapes) == 1


class TestBackground:

    def test_newest_request_wins(self, editor):
        first = editor.request_background("a.png")
        second = editor.request_background("b.png")
        assert editor.set_background(_loaded("a.png"), first) is False
        assert editor.background.image is None
        assert editor.set_background(_loaded("b.png"), second) is True
        assert editor.background.image.source == "b.png"
        assert not editor.background.loading

    def test_fit_and_center(self, editor):
        gen = editor.request_background("plan.png")
        editor.set_background(_loaded(w=1600, h=600), gen)
        bg = editor.background.image
        assert bg.display_scale == pytest.approx(0.5)
        assert (bg.x, bg.y) == pytest.approx((0, 150))
        assert (bg.display_width, bg.display_height) == pytest.approx((800, 300))

    def test_error_keeps_previous_image(self, editor):
        gen = editor.request_background("plan.png")
        editor.set_background(_loaded(), gen)
        gen = editor.request_background("broken.png")
        assert editor.report_background_error("bad file", gen) is True
        assert editor.background.image.source == "plan.png"
        assert editor.background.error == "bad file"
        assert editor.ui.active_notice().message == "bad file"

    def test_stale_error_is_ignored(self, editor):
        old = editor.request_background("broken.png")
        editor.request_background("plan.png")
        assert editor.report_background_error("bad file", old) is False
        assert editor.ui.notice is None

    def test_viewport_size_used_for_fit(self, editor):
        editor.set_viewport(400, 300)
        gen = editor.request_background("plan.png")
        editor.set_background(_loaded(w=800, h=300), gen)
        assert editor.background.image.display_scale == pytest.approx(0.5)
