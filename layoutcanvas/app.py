"""Application - main loop orchestrator.

The Application class coordinates, once per frame:
- Input handling (via InputHandler)
- Command execution
- Loader events (background images decoded off-thread)
- Rendering (via Renderer)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional
import os
import sys
import traceback

from .state import EditorState
from .renderer import Renderer
from .input_handler import InputHandler
from .image_loader import AsyncImageLoader
from .commands import Command, CloseApp, LoadBackground
from .scene import build_scene
from .types import Variant
from .rl_compat import rl, init_window
from .config import (
    WINDOW_TITLE, WINDOW_WIDTH, WINDOW_HEIGHT, TARGET_FPS, DEFAULT_SNAPSHOT_PATH,
)
from .logging import log, increment_frame, configure, get_logger


@dataclass
class Application:
    """
    Main application orchestrator.

    Usage:
        app = Application(state=EditorState(variant=Variant.OPERATION))
        app.initialize(image_path)
        app.run()
    """

    state: EditorState = field(default_factory=EditorState)
    renderer: Renderer = field(default_factory=Renderer)
    input_handler: InputHandler = field(default_factory=InputHandler)
    loader: Optional[AsyncImageLoader] = None
    running: bool = False

    def initialize(self, image_path: Optional[str] = None) -> bool:
        """Open the window and start the loader. Returns True on success."""
        try:
            rl.SetConfigFlags(rl.FLAG_WINDOW_RESIZABLE)
            init_window(WINDOW_WIDTH, WINDOW_HEIGHT, WINDOW_TITLE)
            rl.SetTargetFPS(TARGET_FPS)
            rl.SetExitKey(0)
        except Exception as e:
            log(f"[INIT][CRITICAL] Failed to initialize window: {e!r}")
            log(f"[INIT][CRITICAL] Traceback:\n{traceback.format_exc()}")
            return False

        self.state.set_viewport(rl.GetScreenWidth(), rl.GetScreenHeight())
        self.loader = AsyncImageLoader()
        log(f"[APP] Initialized ({self.state.variant.value} variant)")

        if image_path:
            self._execute_command(LoadBackground(image_path))
        return True

    def run(self) -> None:
        """Run the main loop until the window closes."""
        self.running = True
        log("[APP] Starting main loop")
        try:
            while self.running:
                self._frame()
        except Exception as e:
            log(f"[APP][CRITICAL] Unhandled exception: {e!r}")
            log(f"[APP][CRITICAL] Traceback:\n{traceback.format_exc()}")
        finally:
            self._cleanup()

    def _frame(self) -> None:
        """Execute a single frame."""
        if rl.WindowShouldClose():
            self.running = False
            return

        screen_w = rl.GetScreenWidth()
        screen_h = rl.GetScreenHeight()
        if rl.IsWindowResized():
            self.state.set_viewport(screen_w, screen_h)

        # 1. Poll input and generate commands
        commands = self.input_handler.poll(self.state, screen_w, screen_h)

        # 2. Execute commands
        for cmd in commands:
            self._execute_command(cmd)
            if not self.running:
                return

        # 3. Deliver finished image loads on this thread
        if self.loader is not None:
            self.loader.poll_ui_events()

        # 4. Render
        self.renderer.draw_frame(build_scene(self.state), screen_w, screen_h)

        increment_frame()

    def _execute_command(self, cmd: Command) -> None:
        if isinstance(cmd, CloseApp):
            cmd.execute(self.state)
            self.running = False
            return

        if isinstance(cmd, LoadBackground) and cmd.loader is None:
            cmd.loader = self.loader

        if cmd.can_execute(self.state):
            cmd.execute(self.state)

    def _cleanup(self) -> None:
        log("[APP] Starting cleanup")
        if self.loader is not None:
            log("[APP] Shutting down async loader")
            self.loader.shutdown()
        self.renderer.unload()
        log("[APP] Closing window")
        rl.CloseWindow()
        log("[APP] Cleanup complete")

    def stop(self) -> None:
        self.running = False


def parse_args(argv: List[str]) -> dict:
    """Parse command-line arguments.

    Recognized: an image path, --operation, --snapshot PATH, --log-file PATH
    and --quiet.
    """
    opts = {"image": None, "variant": Variant.BASE, "snapshot": DEFAULT_SNAPSHOT_PATH,
            "log_file": None, "quiet": False}
    args = iter(argv)
    for a in args:
        if a == "--operation":
            opts["variant"] = Variant.OPERATION
        elif a == "--snapshot":
            opts["snapshot"] = next(args, DEFAULT_SNAPSHOT_PATH)
        elif a == "--log-file":
            opts["log_file"] = next(args, None)
        elif a == "--quiet":
            opts["quiet"] = True
        else:
            p = os.path.abspath(a)
            log(f"[ARGS] Checking argument: {a} -> {p}")
            if os.path.isfile(p):
                opts["image"] = p
            else:
                log(f"[ARGS] Ignoring {a}: not a file")
    return opts


def main() -> int:
    opts = parse_args(sys.argv[1:])
    configure(log_file=opts["log_file"], quiet=opts["quiet"])
    log("[MAIN] Starting application")

    app = Application(
        state=EditorState(variant=opts["variant"]),
        input_handler=InputHandler(snapshot_path=opts["snapshot"]),
    )
    try:
        if not app.initialize(opts["image"]):
            return 1
        app.run()
        return 0
    finally:
        get_logger().close()


if __name__ == "__main__":
    sys.exit(main())
