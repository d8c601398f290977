"""Application configuration constants."""

from __future__ import annotations

# Window
WINDOW_TITLE = "Facility Layout"
WINDOW_WIDTH = 1280
WINDOW_HEIGHT = 800
TARGET_FPS = 60

# Loader
ASYNC_WORKERS = 2
MAX_FILE_SIZE_MB = 200

# Zoom
ZOOM_MIN = 0.5
ZOOM_MAX = 4.5
ZOOM_SCALE_BY = 1.05
WHEEL_FINE_LIMIT = 1.0       # |deltaY| below this is a trackpad delta
WHEEL_FINE_AMPLIFY = 20.0
WHEEL_COARSE_LIMIT = 100.0   # |deltaY| above this is a high-resolution wheel
WHEEL_COARSE_DAMPEN = 100.0

# Drawing
DEFAULT_SHAPE_SIZE = 100.0
MIN_DRAFT_EXTENT = 1.0

# Transform handles (screen pixels)
HANDLE_SIZE = 10
HANDLE_HIT_TOLERANCE = 4
ROTATE_HANDLE_OFFSET = 24
MIN_SHAPE_EXTENT = 5.0

# Operation-settings zones
DEFAULT_ZONES = [
    {"title": "Zone A", "passenger_count": 350, "line_count": 10, "circle_size": 1},
    {"title": "Zone B", "passenger_count": 350, "line_count": 10, "circle_size": 1},
    {"title": "Zone C", "passenger_count": 350, "line_count": 10, "circle_size": 1},
]
DEFAULT_SNAPSHOT_PATH = "layout_snapshot.json"

# Messages
WARNING_DURATION_S = 3.0
MSG_ZONE_QUOTA = "No more zones can be placed."
MSG_IMAGE_FAILED = "Could not load image"

# Toolbar
TOOLBAR_BTN_SIZE = 36
TOOLBAR_BTN_SPACING = 8
TOOLBAR_PADDING = 8
TOOLBAR_MARGIN_BOTTOM = 12

# Zone panel (operation variant)
PANEL_WIDTH = 260
PANEL_ROW_HEIGHT = 28
FONT_SIZE = 18

# Colors (r, g, b, a)
COLOR_CANVAS_BG = (229, 231, 235, 255)
COLOR_SHAPE = (0, 0, 255, 102)
COLOR_DRAFT = (0, 0, 255, 77)
COLOR_SELECTED = (255, 140, 0, 255)
COLOR_OVERLAY_POINT = (0, 128, 0, 255)
COLOR_TOOLBAR_BG = (156, 163, 175, 255)
COLOR_TOOLBAR_ACTIVE = (243, 244, 246, 255)
COLOR_WARNING_BG = (220, 38, 38, 230)
COLOR_TEXT = (31, 41, 55, 255)

# Hotkeys (raylib key codes)
# See: https://github.com/raysan5/raylib/blob/master/src/raylib.h
KEY_MOMENTARY_PAN = 32      # KEY_SPACE
KEY_MODE_VIEW = 86          # KEY_V
KEY_MODE_GRAB = 72          # KEY_H
KEY_MODE_DRAW = 82          # KEY_R
KEY_RESET_VIEW = 48         # KEY_ZERO
KEY_SAVE = 83               # KEY_S
KEY_CLOSE = 256             # KEY_ESCAPE
KEY_LEFT_CONTROL = 341
KEY_RIGHT_CONTROL = 345
KEY_LEFT_SUPER = 343
KEY_RIGHT_SUPER = 347
