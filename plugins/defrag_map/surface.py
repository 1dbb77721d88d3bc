"""
MapSurface - RGB pixel buffer mirroring the simulator grid

Pygame-free, so it can be driven headless (snap mode, tests) as well as
by the viewer, which blits only the rows touched since the last frame.
"""

import numpy as np

from .palette import PALETTE_LUT, colorize


class MapSurface:
    """(H, W, 3) uint8 image kept in sync with a DiskMapSimulator."""

    def __init__(self, width, height):
        self.width = max(1, int(width))
        self.height = max(1, int(height))
        self.pixels = np.zeros((self.height, self.width, 3), dtype=np.uint8)
        self._dirty = None  # (first_row, last_row_exclusive)

    @property
    def total(self):
        return self.width * self.height

    def full_redraw(self, sim):
        """Recolor every pixel from the simulator's current grid."""
        self.pixels[:] = colorize(sim.cells, self.width, self.height)
        self._dirty = (0, self.height)

    def apply_segments(self, segments):
        """Paint SegmentChanges in order. Later changes win on overlap."""
        flat = self.pixels.reshape(-1, 3)
        total = self.total

        for seg in segments:
            start = max(0, seg.start_index)
            end = min(total, seg.start_index + max(0, seg.length))
            if end <= start:
                continue
            flat[start:end] = PALETTE_LUT[seg.new_type]
            self._mark_dirty(start // self.width, (end - 1) // self.width + 1)

    def _mark_dirty(self, first, last):
        if self._dirty is None:
            self._dirty = (first, last)
        else:
            self._dirty = (min(self._dirty[0], first), max(self._dirty[1], last))

    def take_dirty_rows(self):
        """Return (first_row, last_row_exclusive) touched since last call, or None."""
        dirty = self._dirty
        self._dirty = None
        return dirty
