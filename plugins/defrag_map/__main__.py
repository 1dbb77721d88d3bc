"""
Defrag Map Screen Saver - Entry Point

Usage:
    python -m defrag_map [/s | /c | /p <HWND>] [--window WxH] [--seed N]
    python -m defrag_map --snap N [--size WxH] [--seed N] [--out PATH]

Examples:
    python -m defrag_map                      full screen
    python -m defrag_map /p 1234567           Control Panel preview
    python -m defrag_map --window 1280x720    resizable window
    python -m defrag_map --snap 300 --size 640x400 --seed 7

Keys (window mode):
    Q / ESC     Quit
"""

import os
import sys

from .args import ScreenSaverArgs, ScreenSaverMode


def snap(frames, size, seed=None, out=None):
    """Headless mode: run N frames, save the map as PNG, return the path."""
    from PIL import Image

    from .settings import get_profile
    from .simulator import DiskMapSimulator
    from .surface import MapSurface

    width, height = size
    steps = get_profile("run")["steps_per_frame"]

    sim = DiskMapSimulator(seed=seed)
    sim.reset(width, height)
    surface = MapSurface(sim.width, sim.height)
    surface.full_redraw(sim)

    print(f"  running {frames} frames x {steps} ticks...", end="", flush=True)
    for _ in range(frames):
        surface.apply_segments(sim.step(steps))

    if out is None:
        screenshots_dir = os.path.join(os.getcwd(), "screenshots")
        os.makedirs(screenshots_dir, exist_ok=True)
        out = os.path.join(screenshots_dir, f"defrag_{width}x{height}_{sim.ticks}.png")

    Image.fromarray(surface.pixels).save(out)
    print(f" saved: {out}")
    for line in sim.get_status_lines():
        print(f"  {line}")
    return out


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    try:
        args = ScreenSaverArgs.parse(argv)
    except ValueError as e:
        print(e)
        print("Use --help for usage")
        return 2

    if args.mode == ScreenSaverMode.HELP:
        print(__doc__)
        return 0

    if args.mode == ScreenSaverMode.SNAP:
        w, h = args.snap_size
        print(f"Headless snap mode: {w}x{h}, {args.snap_steps} frames")
        snap(args.snap_steps, args.snap_size, seed=args.seed, out=args.out)
        return 0

    if args.mode == ScreenSaverMode.CONFIG:
        from .controls import ConfigDialog
        ConfigDialog().run()
        return 0

    from .viewer import ScreenSaverViewer

    viewer = ScreenSaverViewer(
        profile=args.mode.value,
        preview_handle=args.preview_handle,
        window_size=args.window_size,
        seed=args.seed,
    )
    viewer.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
