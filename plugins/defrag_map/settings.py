"""
Display Profiles

Each profile fixes how fast the map animates and how the status bar is
laid out. "run" is the fullscreen saver, "preview" the tiny Control Panel
thumbnail, "window" a resizable developer window.
"""

PROFILES = {
    "run": {
        "name": "Fullscreen",
        "steps_per_frame": 260,
        "margin": 10,
        "status_height": 28,
        "font_size": 13,
        "line_height": 14,
        "text_top": 4,
        "fps": 60,
        "exit_on_input": True,
    },
    "preview": {
        "name": "Preview",
        "steps_per_frame": 80,
        "margin": 4,
        "status_height": 20,
        "font_size": 10,
        "line_height": 9,
        "text_top": 2,
        "fps": 60,
        "exit_on_input": False,
    },
    "window": {
        "name": "Window",
        "steps_per_frame": 260,
        "margin": 10,
        "status_height": 28,
        "font_size": 13,
        "line_height": 14,
        "text_top": 4,
        "fps": 60,
        "exit_on_input": False,
    },
}

PROFILE_ORDER = list(PROFILES.keys())

# Status bar theme
STATUS_BG = (24, 24, 24)
STATUS_SEPARATOR = (64, 64, 64)
STATUS_TEXT = (235, 235, 235)
MAP_BORDER = (48, 48, 48)
TEXT_LEFT = 8
FONT_NAME = "consolas"

# Mouse travel (|dx| + |dy|) that counts as a real move, not jitter
MOUSE_JITTER = 8

DEFAULT_WINDOW = (1024, 640)
DEFAULT_SNAP_SIZE = (800, 600)


def get_profile(name):
    """Get a display profile dict by name. Raises KeyError if unknown."""
    return PROFILES[name]


def map_layout(width, height, profile):
    """
    Split a surface into status bar and map rectangles.

    Returns:
        (status_rect, map_rect) as (x, y, w, h) tuples, sizes >= 1
    """
    margin = profile["margin"]
    status_h = profile["status_height"]

    status_rect = (0, 0, max(1, width), status_h)
    map_rect = (
        margin,
        status_h + margin,
        max(1, width - margin * 2),
        max(1, height - status_h - margin * 2),
    )
    return status_rect, map_rect
