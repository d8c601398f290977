"""
Tests for the renderer's backdrop texture cache.

raylib calls are replaced on the renderer module, so no window is opened.
"""
from types import SimpleNamespace

import pytest

try:
    from layoutcanvas import renderer as renderer_mod
except (ImportError, OSError) as e:
    pytest.skip(f"raylib binding unavailable: {e}", allow_module_level=True)

from layoutcanvas.image_loader import to_data_url
from layoutcanvas.types import BackgroundImage


def _backdrop(png_bytes=b"\x89PNG", source="plan.png"):
    return BackgroundImage(
        source=source,
        data_url=to_data_url(png_bytes, "image/png"),
        natural_width=10, natural_height=10,
    )


@pytest.fixture
def uploads(monkeypatch):
    """Record texture uploads; the next result is set through .result."""
    calls = SimpleNamespace(args=[], unloaded=[], errors=[], result=None)

    def fake_upload(file_type, data):
        calls.args.append((file_type, data))
        return calls.result

    monkeypatch.setattr(renderer_mod, "load_texture_from_memory", fake_upload)
    monkeypatch.setattr(renderer_mod, "rl", SimpleNamespace(UnloadTexture=calls.unloaded.append))
    monkeypatch.setattr(
        renderer_mod, "log",
        lambda msg: calls.errors.append(msg) if "[ERR]" in msg else None,
    )
    return calls


class TestBackdropTexture:

    def test_uploads_decoded_bytes_once(self, uploads):
        uploads.result = SimpleNamespace(id=7)
        r = renderer_mod.Renderer()
        bg = _backdrop(b"\x89PNG-bytes")
        for _ in range(3):
            assert r._texture_for(bg) is uploads.result
        assert uploads.args == [(".png", b"\x89PNG-bytes")]

    def test_failed_upload_is_not_retried(self, uploads):
        uploads.result = None
        r = renderer_mod.Renderer()
        bg = _backdrop()
        for _ in range(60):
            assert r._texture_for(bg) is None
        assert len(uploads.args) == 1
        assert len(uploads.errors) == 1

    def test_invalid_texture_counts_as_failure(self, uploads):
        uploads.result = SimpleNamespace(id=0)
        r = renderer_mod.Renderer()
        bg = _backdrop()
        assert r._texture_for(bg) is None
        assert r._texture_for(bg) is None
        assert len(uploads.args) == 1

    def test_new_backdrop_replaces_texture(self, uploads):
        first = SimpleNamespace(id=1)
        uploads.result = first
        r = renderer_mod.Renderer()
        r._texture_for(_backdrop(b"one"))
        uploads.result = SimpleNamespace(id=2)
        assert r._texture_for(_backdrop(b"two")).id == 2
        assert uploads.unloaded == [first]

    def test_new_backdrop_after_failure_is_tried(self, uploads):
        uploads.result = None
        r = renderer_mod.Renderer()
        r._texture_for(_backdrop(b"bad"))
        uploads.result = SimpleNamespace(id=3)
        assert r._texture_for(_backdrop(b"good")).id == 3
        assert uploads.unloaded == []
