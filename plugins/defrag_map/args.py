"""
Screensaver Command Line

Windows passes one of:
    /s            run full screen
    /c            configure (sometimes /c:<HWND>)
    /p <HWND>     preview inside the Control Panel thumbnail
    /p:<HWND>     same, single-token form

Developer flags may follow (or replace) the mode flag:
    --window WxH  resizable window instead of full screen
    --snap N      headless: run N frames, save a PNG, exit
    --size WxH    grid size for --snap
    --seed N      fixed random seed
    --out PATH    output path for --snap
"""

import enum

from .settings import DEFAULT_SNAP_SIZE


class ScreenSaverMode(enum.Enum):
    RUN = "run"
    PREVIEW = "preview"
    CONFIG = "config"
    WINDOW = "window"
    SNAP = "snap"
    HELP = "help"


class ScreenSaverArgs:
    def __init__(self, mode=ScreenSaverMode.RUN, preview_handle=0, window_size=None,
                 snap_steps=0, snap_size=DEFAULT_SNAP_SIZE, seed=None, out=None):
        self.mode = mode
        self.preview_handle = preview_handle
        self.window_size = window_size
        self.snap_steps = snap_steps
        self.snap_size = snap_size
        self.seed = seed
        self.out = out

    def __repr__(self):
        return (f"ScreenSaverArgs(mode={self.mode.name}, preview_handle={self.preview_handle}, "
                f"window_size={self.window_size}, snap_steps={self.snap_steps}, "
                f"seed={self.seed})")

    @classmethod
    def parse(cls, args):
        """Parse argv (without program name). Raises ValueError on bad flags."""
        args = list(args)
        parsed = cls()
        i = 0

        if args and not args[0].startswith("--"):
            a0 = args[0].strip().lower()
            i = 1
            if a0.startswith(("/p", "-p")):
                parsed.mode = ScreenSaverMode.PREVIEW
                parsed.preview_handle = _extract_handle(args)
            elif a0.startswith(("/c", "-c")):
                parsed.mode = ScreenSaverMode.CONFIG
            elif a0 == "-h":
                parsed.mode = ScreenSaverMode.HELP
            # /s and anything unrecognised: run full screen

            # Host-supplied handle after the mode flag, e.g. "/p 12345"
            if len(args) > 1 and not args[1].startswith("-"):
                i = 2

        while i < len(args):
            arg = args[i]
            if arg in ("--help", "-h"):
                parsed.mode = ScreenSaverMode.HELP
                i += 1
            elif arg == "--window" and i + 1 < len(args):
                parsed.window_size = _parse_size(args[i + 1])
                if parsed.mode == ScreenSaverMode.RUN:
                    parsed.mode = ScreenSaverMode.WINDOW
                i += 2
            elif arg == "--snap" and i + 1 < len(args):
                parsed.snap_steps = _parse_int(arg, args[i + 1])
                parsed.mode = ScreenSaverMode.SNAP
                i += 2
            elif arg == "--size" and i + 1 < len(args):
                parsed.snap_size = _parse_size(args[i + 1])
                i += 2
            elif arg == "--seed" and i + 1 < len(args):
                parsed.seed = _parse_int(arg, args[i + 1])
                i += 2
            elif arg == "--out" and i + 1 < len(args):
                parsed.out = args[i + 1]
                i += 2
            else:
                raise ValueError(f"Unknown argument: {arg}")

        return parsed


def _extract_handle(args):
    """Parent window handle for preview mode; 0 when missing or unparsable."""
    # /p <HWND>
    if len(args) >= 2:
        try:
            return int(args[1])
        except ValueError:
            pass

    # /p:<HWND>
    token = args[0]
    idx = token.find(":")
    if idx >= 0:
        try:
            return int(token[idx + 1:])
        except ValueError:
            pass

    return 0


def _parse_size(text):
    parts = text.lower().split("x")
    if len(parts) != 2:
        raise ValueError(f"Expected WxH, got: {text}")
    try:
        w, h = int(parts[0]), int(parts[1])
    except ValueError:
        raise ValueError(f"Expected WxH, got: {text}") from None
    return max(1, w), max(1, h)


def _parse_int(flag, text):
    try:
        return int(text)
    except ValueError:
        raise ValueError(f"{flag} expects an integer, got: {text}") from None
