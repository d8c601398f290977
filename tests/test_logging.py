"""
Tests for the frame-tagged logger.
"""
from layoutcanvas.logging import Logger, area_of


def test_area_of():
    assert area_of("[DRAW] Begin at (1, 2)") == "DRAW"
    assert area_of("[LOAD][ERR] bad file") == "LOAD"
    assert area_of("no tag") is None


def test_line_format(capsys):
    lg = Logger()
    lg.increment_frame()
    lg.log("[MODE] view -> draw")
    out = capsys.readouterr().out
    assert "F000001] [MODE] view -> draw" in out


def test_quiet_keeps_history(capsys):
    lg = Logger(quiet=True)
    lg.log("[SHAPES] Added #0")
    assert capsys.readouterr().out == ""
    assert lg.recent() == ["[SHAPES] Added #0"]


def test_recent_filters_by_area():
    lg = Logger(quiet=True)
    lg("[DRAW] Begin")
    lg("[VIEW] Reset")
    lg("[DRAW] Commit")
    assert lg.recent("DRAW") == ["[DRAW] Begin", "[DRAW] Commit"]


def test_history_is_bounded():
    lg = Logger(quiet=True, history=3)
    for i in range(5):
        lg.log(f"[CMD] {i}")
    assert lg.recent() == ["[CMD] 2", "[CMD] 3", "[CMD] 4"]


def test_log_file(tmp_path):
    path = tmp_path / "canvas.log"
    lg = Logger(log_file=str(path), quiet=True)
    lg.log("[APP] Initialized")
    lg.close()
    assert "[APP] Initialized" in path.read_text(encoding="utf-8")
