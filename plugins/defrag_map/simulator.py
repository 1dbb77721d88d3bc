"""
DiskMapSimulator - Headless core of the defrag map screensaver

Owns a flat grid of disk "clusters", paints a plausible initial layout,
and advances a fake defragmentation tick by tick. Every tick returns the
minimal list of SegmentChange diffs a renderer needs to stay in sync.

No pygame, no pixels: colors live in palette.py, drawing in viewer.py.

Usage:
    from defrag_map.simulator import DiskMapSimulator
    sim = DiskMapSimulator(seed=1234)
    sim.reset(800, 600)
    for change in sim.step(260):
        ...  # repaint [change.start_index, change.start_index + change.length)
"""

import enum
from typing import NamedTuple

import numpy as np


class Cell(enum.IntEnum):
    EMPTY = 0
    REGULAR = 1
    SPACE_HOG = 2
    FRAGMENTED = 3
    UNMOVABLE = 4
    BUSY = 5
    MFT_RESERVED = 6
    UNKNOWN = 7


class SegmentChange(NamedTuple):
    """Half-open range [start_index, start_index + length) set to new_type."""
    start_index: int
    length: int
    new_type: Cell


class RunSpan(NamedTuple):
    start: int
    length: int


# Layout generation
EMPTY_TAIL_FRAC = 0.18
MFT_START_FRAC = 0.06
MFT_MIN_LEN = 800
HOG_START_FRAC = 0.72
HOG_MIN_LEN = 2000
UNMOVABLE_COUNT = 40
UNMOVABLE_ZONE_FRAC = 0.35
FRAGMENT_COUNT = 140
HOLE_COUNT = 120

# Animation
BUSY_FADE_EVERY = 10
BUSY_FADE_SEGMENTS = 12
INJECT_EVERY = 240
INJECT_TAIL_FRAC = 0.86
PROGRESS_PERIOD = 6000

# Search limits
FRAGMENT_PROBES = 400
GAP_PROBES = 120
MIN_MOVABLE_RUN = 8

_SCAN_CHUNK = 512

# Plain ints for numpy comparisons in the per-tick loops
_EMPTY = int(Cell.EMPTY)
_REGULAR = int(Cell.REGULAR)
_FRAGMENTED = int(Cell.FRAGMENTED)
_BUSY = int(Cell.BUSY)
_MFT = int(Cell.MFT_RESERVED)


class DiskMapSimulator:
    """Fake defragmentation engine over a flat cell buffer.

    The grid is logically width x height but stored flat, index = row * width + col.
    Randomness comes from a single numpy Generator owned by the engine, so two
    engines built with the same seed produce the same layout and animation.
    """

    def __init__(self, seed=None, rng=None):
        """
        Args:
            seed: Seed for a fresh numpy Generator
            rng: Pre-built stream exposing integers(low, high, size=None);
                 takes precedence over seed (tests pass fixed sequences here)
        """
        self.rng = rng if rng is not None else np.random.default_rng(seed)

        self.width = 1
        self.height = 1
        self._cells = np.zeros(1, dtype=np.uint8)

        self.ticks = 0
        self.last_move_from = 0
        self.last_move_to = 0
        self.last_move_len = 0
        self.fragmented_segments = 0

    # ── Public surface ──────────────────────────────────────────────────

    @property
    def total_cells(self):
        return self._cells.size

    @property
    def cells(self):
        """Read-only view of the flat grid (uint8 Cell values)."""
        view = self._cells.view()
        view.flags.writeable = False
        return view

    def reset(self, width, height):
        """Rebuild the grid for a new surface size and regenerate the layout."""
        self.width = max(1, int(width))
        self.height = max(1, int(height))

        self._cells = np.empty(self.width * self.height, dtype=np.uint8)
        self._generate_initial_map()

        self.ticks = 0
        self.last_move_from = 0
        self.last_move_to = 0
        self.last_move_len = 0

    def get_cell_by_index(self, index):
        if not 0 <= index < self._cells.size:
            raise IndexError(f"cell index {index} out of range [0, {self._cells.size})")
        return Cell(int(self._cells[index]))

    def get_status_lines(self):
        progress = (self.ticks % PROGRESS_PERIOD) / PROGRESS_PERIOD * 100.0
        return [
            f"v3.36   Phase 2: Defragment   {progress:.2f}%   "
            f"Moving {self.last_move_len} clusters from {self.last_move_from} "
            f"to {self.last_move_to}",
            f"Fragments: {self.fragmented_segments}   Busy: white   "
            f"Unmovable: red   MFT: dark green",
        ]

    def step(self, steps=1):
        """Advance `steps` ticks. Returns all SegmentChanges in emission order."""
        changes = []

        for _ in range(max(0, int(steps))):
            self.ticks += 1

            # Fade old busy highlights back to regular
            if self.ticks % BUSY_FADE_EVERY == 0:
                changes.extend(self._clear_busy_highlights(BUSY_FADE_SEGMENTS))

            # Keep the map from ever looking finished
            if self.ticks % INJECT_EVERY == 0:
                changes.extend(self._inject_fragmentation())

            moved = self._move_one_fragmented_segment()
            if moved is None:
                moved = self._ambient_nudge()
            changes.extend(moved)

        return changes

    @property
    def stats(self):
        """Return current map statistics."""
        counts = np.bincount(self._cells, minlength=len(Cell))
        return {
            "ticks": self.ticks,
            "progress": (self.ticks % PROGRESS_PERIOD) / PROGRESS_PERIOD * 100.0,
            "fragmented_segments": self.fragmented_segments,
            "last_move": (self.last_move_len, self.last_move_from, self.last_move_to),
            "counts": {cell.name.lower(): int(counts[cell]) for cell in Cell},
        }

    # ── Random helpers ──────────────────────────────────────────────────

    def _rand(self, low, high):
        """Uniform int in [low, high); degenerate ranges collapse to low."""
        if high <= low:
            return low
        return int(self.rng.integers(low, high))

    def _sample_length(self, min_len, max_len):
        """Uniform length in [min(min_len, max_len), max_len], or 0 if max_len <= 0.

        Every capped length goes through here so a stripe never exceeds
        the ceiling its caller computed.
        """
        if max_len <= 0:
            return 0
        return self._rand(min(min_len, max_len), max_len + 1)

    def _random_row_start(self, min_len, max_len):
        """Pick a row-local stripe: returns (flat start, length)."""
        row = self._rand(0, self.height)
        col = self._rand(0, self.width)
        length = self._sample_length(min_len, min(self.width - col, max_len))
        return row * self.width + col, length

    # ── Grid primitives ─────────────────────────────────────────────────

    def _paint(self, start, length, cell):
        """Clamp [start, start+length) to the grid and fill it.

        Returns the clamped SegmentChange, or None when nothing was painted.
        """
        if length <= 0:
            return None
        total = self._cells.size
        s = min(max(start, 0), total)
        e = min(max(start + length, 0), total)
        if e <= s:
            return None
        self._cells[s:e] = cell
        return SegmentChange(s, e - s, Cell(cell))

    def _run_start(self, index, cell):
        """Walk backward from index to the first cell of its run."""
        start = index
        while start > 0:
            lo = max(0, start - _SCAN_CHUNK)
            breaks = np.flatnonzero(self._cells[lo:start] != cell)
            if breaks.size:
                return lo + int(breaks[-1]) + 1
            start = lo
        return 0

    def _run_length(self, start, cell, cap, limit=None):
        """Count cells equal to `cell` from start, stopping at cap or limit."""
        end = self._cells.size if limit is None else min(limit, self._cells.size)
        end = min(end, start + cap)
        if end <= start:
            return 0
        window = self._cells[start:end]
        breaks = np.flatnonzero(window != cell)
        return int(breaks[0]) if breaks.size else int(window.size)

    # ── Layout generation ───────────────────────────────────────────────

    def _generate_initial_map(self):
        cells = self._cells
        total = cells.size

        cells[:] = Cell.REGULAR

        # Big empty tail, like a disk that is not full
        empty_tail = int(total * EMPTY_TAIL_FRAC)
        self._paint(total - empty_tail, empty_tail, Cell.EMPTY)

        # MFT reserved zone near the start
        self._paint(int(total * MFT_START_FRAC), max(MFT_MIN_LEN, total // 400),
                    Cell.MFT_RESERVED)

        # Space hogs band in the later zone
        self._paint(int(total * HOG_START_FRAC), max(HOG_MIN_LEN, total // 120),
                    Cell.SPACE_HOG)

        # Unmovable, scattered over the first third
        for _ in range(UNMOVABLE_COUNT):
            start = self._rand(0, int(total * UNMOVABLE_ZONE_FRAC))
            self._paint(start, self._rand(120, 1200), Cell.UNMOVABLE)

        self.fragmented_segments = 0
        for _ in range(FRAGMENT_COUNT):
            start, length = self._random_row_start(40, 600)
            if length <= 0:
                continue
            if cells[start] == Cell.MFT_RESERVED:
                continue
            self._paint(start, length, Cell.FRAGMENTED)
            self.fragmented_segments += 1

        # Holes that show up as short black lines
        for _ in range(HOLE_COUNT):
            start, length = self._random_row_start(10, 200)
            self._paint(start, length, Cell.EMPTY)

    # ── Per-tick operations ─────────────────────────────────────────────

    def _clear_busy_highlights(self, max_segments):
        """Best-effort fade: random probes, each landing on BUSY clears its run."""
        changes = []
        # Earlier fades can clear a later probe's cell, so check the live grid
        for idx in self.rng.integers(0, self._cells.size, size=max_segments):
            idx = int(idx)
            if self._cells[idx] != _BUSY:
                continue
            run = self._run_length(idx, _BUSY, 2000)
            change = self._paint(idx, run, _REGULAR)
            if change is not None:
                changes.append(change)
        return changes

    def _inject_fragmentation(self):
        changes = []
        tail = int(self._cells.size * INJECT_TAIL_FRAC)
        for _ in range(self._rand(2, 6)):
            start, length = self._random_row_start(40, 900)
            if length <= 0 or start > tail:
                continue
            change = self._paint(start, length, _FRAGMENTED)
            if change is None:
                continue
            self.fragmented_segments += 1
            changes.append(change)
        return changes

    def _find_fragmented_run(self):
        """Probe for a FRAGMENTED cell and return its run, or None."""
        probes = self.rng.integers(0, self._cells.size, size=FRAGMENT_PROBES)
        hits = np.flatnonzero(self._cells[probes] == _FRAGMENTED)
        if not hits.size:
            return None
        start = self._run_start(int(probes[hits[0]]), _FRAGMENTED)
        return RunSpan(start, self._run_length(start, _FRAGMENTED, 6000))

    def _find_empty_gap_before(self, before_index, min_len):
        """Find an EMPTY run of at least min_len lying entirely below before_index.

        All GAP_PROBES indices are drawn up front; hits are examined in draw
        order. Returns a RunSpan whose start is a random offset inside the gap
        and whose length is min_len, or None when no probe finds one.
        """
        min_len = max(20, min_len)
        upper = max(1, before_index)

        probes = self.rng.integers(0, upper, size=GAP_PROBES)
        hits = probes[self._cells[probes] == _EMPTY]

        checked = set()
        for idx in hits:
            s = self._run_start(int(idx), _EMPTY)
            if s in checked:
                continue
            checked.add(s)

            run = self._run_length(s, _EMPTY, 8000, limit=upper)
            if run >= min_len:
                return RunSpan(s + self._rand(0, max(1, run - min_len)), min_len)

        return None

    def _move_one_fragmented_segment(self):
        """Relocate part of a fragmented run into an earlier gap.

        Returns [source->REGULAR, dest->BUSY], or None when no run or gap
        qualifies.
        """
        frag = self._find_fragmented_run()
        if frag is None or frag.length < MIN_MOVABLE_RUN:
            return None

        gap = self._find_empty_gap_before(frag.start, min(frag.length, 1200))
        if gap is None:
            return None

        move_len = min(frag.length, self._sample_length(80, min(frag.length, 1200)))

        changes = [
            self._paint(frag.start, move_len, _REGULAR),
            self._paint(gap.start, move_len, _BUSY),
        ]

        self.fragmented_segments = max(0, self.fragmented_segments - 1)
        self.last_move_from = frag.start
        self.last_move_to = gap.start
        self.last_move_len = move_len

        return [c for c in changes if c is not None]

    def _ambient_nudge(self):
        """Tiny busy blip so every tick shows some motion."""
        start, length = self._random_row_start(30, 260)

        # Leave the MFT stripe alone
        if self._cells[start] == _MFT:
            return []

        change = self._paint(start, length, _BUSY)
        if change is None:
            return []
        self.last_move_from = start
        self.last_move_to = start + length
        self.last_move_len = length
        return [change]
