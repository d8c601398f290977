"""Background image loading - file read and decode off the UI thread.

Worker threads read and decode files; results are queued as UI events and
delivered on the UI thread by poll_ui_events(), once per frame.
"""

from __future__ import annotations
import base64
import binascii
import io
import os
from collections import deque
from queue import Queue, Empty
from threading import Thread, Lock
from typing import Callable, List, Tuple

from PIL import Image, UnidentifiedImageError

from .types import LoadTask, LoadedImage, UIEvent
from .config import ASYNC_WORKERS, MAX_FILE_SIZE_MB
from .logging import log, now


class ImageLoadError(Exception):
    """The file could not be read or decoded as an image."""


# MIME types raylib decodes itself, with the file type it expects
UPLOAD_FILE_TYPES = {
    "image/png": ".png",
    "image/jpeg": ".jpg",
    "image/bmp": ".bmp",
    "image/gif": ".gif",
}


def to_data_url(data: bytes, mime: str) -> str:
    return f"data:{mime};base64,{base64.b64encode(data).decode('ascii')}"


def from_data_url(data_url: str) -> Tuple[str, bytes]:
    """Split a base64 data URL into (mime, raw bytes)."""
    header, sep, payload = data_url.partition(",")
    if not sep or not header.startswith("data:") or not header.endswith(";base64"):
        raise ImageLoadError("not a base64 data URL")
    try:
        return header[5:-7], base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ImageLoadError(f"bad data URL payload: {e}") from e


def upload_payload(data_url: str) -> Tuple[str, bytes]:
    """File type and bytes for a GPU upload of an already-read image.

    Formats raylib cannot decode (webp, tiff, ...) are re-encoded to PNG.
    """
    mime, data = from_data_url(data_url)
    ext = UPLOAD_FILE_TYPES.get(mime)
    if ext is not None:
        return ext, data
    try:
        with Image.open(io.BytesIO(data)) as img:
            out = io.BytesIO()
            img.convert("RGBA").save(out, format="PNG")
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise ImageLoadError(f"cannot re-encode {mime} image: {e}") from e
    return ".png", out.getvalue()


def decode_image(path: str) -> LoadedImage:
    """Read a file into a data URL and decode it to learn its natural size.

    Raises:
        ImageLoadError: missing, oversized, or undecodable file.
    """
    try:
        size_mb = os.path.getsize(path) / (1024 * 1024)
    except OSError as e:
        raise ImageLoadError(f"cannot access {path}: {e.strerror or e}") from e
    if size_mb > MAX_FILE_SIZE_MB:
        raise ImageLoadError(f"file too large: {size_mb:.1f}MB")

    try:
        with open(path, "rb") as f:
            data = f.read()
    except OSError as e:
        raise ImageLoadError(f"cannot read {path}: {e.strerror or e}") from e

    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            w, h = img.size
            mime = Image.MIME.get(img.format or "", "application/octet-stream")
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as e:
        raise ImageLoadError(f"cannot decode {os.path.basename(path)}: {e}") from e

    if w <= 0 or h <= 0:
        raise ImageLoadError("empty image")

    return LoadedImage(path=path, data_url=to_data_url(data, mime), width=w, height=h)


class AsyncImageLoader:
    """Worker pool that decodes images and hands results back to the UI thread.

    Callbacks receive (path, generation, result, error), exactly one of
    result/error being None.
    """

    def __init__(self, loader_func: Callable[[str], LoadedImage] = decode_image,
                 workers: int = ASYNC_WORKERS):
        self.task_queue: "Queue[LoadTask]" = Queue()
        self.loader_func = loader_func
        self.running = True
        self.ui_events: deque = deque()
        self.ui_lock = Lock()
        self.workers: List[Thread] = []

        for _ in range(workers):
            worker = Thread(target=self._worker_loop, daemon=True)
            worker.start()
            self.workers.append(worker)

    def _worker_loop(self) -> None:
        while self.running:
            try:
                task = self.task_queue.get(timeout=0.1)
            except Empty:
                continue

            result = None
            error = None
            try:
                result = self.loader_func(task.path)
            except ImageLoadError as e:
                error = e
            except Exception as e:
                error = ImageLoadError(f"unexpected error loading {task.path}: {e!r}")

            if error is not None:
                log(f"[LOAD][ERR] {error}")

            self._push_ui_event(task.callback, (task.path, task.generation, result, error))
            self.task_queue.task_done()

    def _push_ui_event(self, callback: Callable, args: tuple) -> None:
        with self.ui_lock:
            if self.running:
                self.ui_events.append(UIEvent(callback, args))

    def submit(self, path: str, generation: int, callback: Callable) -> None:
        log(f"[LOAD] Queued {path} (gen {generation})")
        self.task_queue.put(LoadTask(path, generation, callback, now()))

    def poll_ui_events(self, max_events: int = 100) -> int:
        """Run pending completion callbacks on the calling (UI) thread."""
        events_to_process = []
        with self.ui_lock:
            while self.ui_events and len(events_to_process) < max_events:
                events_to_process.append(self.ui_events.popleft())

        for event in events_to_process:
            try:
                event.callback(*event.args)
            except Exception as e:
                log(f"[UI_EVENT][ERR] {e!r}")
        return len(events_to_process)

    def wait_idle(self) -> None:
        """Block until every queued task has been processed."""
        self.task_queue.join()

    def shutdown(self) -> None:
        """Stop workers and drop undelivered results."""
        self.running = False
        with self.ui_lock:
            self.ui_events.clear()
        for worker in self.workers:
            worker.join(timeout=1.0)
