#!/usr/bin/env python3
"""
Tests for the palette lookup and the MapSurface pixel buffer.
"""

import numpy as np
from defrag_map.palette import FALLBACK_COLOR, PALETTE_LUT, colorize, get_color
from defrag_map.simulator import Cell, DiskMapSimulator, SegmentChange
from defrag_map.surface import MapSurface


def test_palette_covers_every_cell():
    assert PALETTE_LUT.shape == (len(Cell), 3)
    assert PALETTE_LUT.dtype == np.uint8
    for cell in Cell:
        assert tuple(PALETTE_LUT[cell]) == get_color(cell), f"LUT mismatch for {cell.name}"
    assert get_color(Cell.BUSY) == (255, 255, 255)
    assert get_color(Cell.FRAGMENTED) == (255, 69, 0)
    assert get_color(Cell.EMPTY) == get_color(Cell.UNKNOWN) == (0, 0, 0)


def test_palette_fallback_gray():
    assert get_color(42) == FALLBACK_COLOR
    assert get_color(-1) == FALLBACK_COLOR


def test_colorize_shape():
    cells = np.array([Cell.EMPTY, Cell.REGULAR, Cell.BUSY,
                      Cell.UNMOVABLE, Cell.SPACE_HOG, Cell.MFT_RESERVED], dtype=np.uint8)
    rgb = colorize(cells, 3, 2)
    assert rgb.shape == (2, 3, 3)
    assert tuple(rgb[0, 2]) == (255, 255, 255)
    assert tuple(rgb[1, 0]) == (255, 0, 0)


def test_surface_tracks_simulator():
    print("Testing MapSurface against simulator...")
    sim = DiskMapSimulator(seed=31)
    sim.reset(90, 60)
    surface = MapSurface(sim.width, sim.height)
    surface.full_redraw(sim)
    assert surface.take_dirty_rows() == (0, 60), "Full redraw dirties every row"
    assert surface.take_dirty_rows() is None, "Dirty range resets after take"

    for _ in range(4):
        surface.apply_segments(sim.step(250))
        expected = colorize(sim.cells, sim.width, sim.height)
        assert np.array_equal(surface.pixels, expected), "Incremental paint drifted from grid"
    print("  ✓ incremental paint matches full redraw")


def test_surface_dirty_rows_and_clamping():
    surface = MapSurface(10, 5)
    surface.apply_segments([
        SegmentChange(23, 4, Cell.BUSY),     # row 2
        SegmentChange(38, 100, Cell.FRAGMENTED),  # rows 3-4, clamped at 50
        SegmentChange(-5, 3, Cell.BUSY),     # entirely before the grid
        SegmentChange(12, 0, Cell.BUSY),     # empty
    ])
    assert surface.take_dirty_rows() == (2, 5)
    flat = surface.pixels.reshape(-1, 3)
    assert np.all(flat[23:27] == (255, 255, 255))
    assert np.all(flat[38:50] == (255, 69, 0))
    assert np.all(flat[:23] == 0), "Clamped and empty changes paint nothing"


def test_surface_later_changes_win():
    surface = MapSurface(8, 1)
    surface.apply_segments([
        SegmentChange(0, 8, Cell.FRAGMENTED),
        SegmentChange(2, 3, Cell.REGULAR),
    ])
    row = surface.pixels[0]
    assert tuple(row[0]) == (255, 69, 0)
    assert tuple(row[3]) == (0, 255, 0)
    assert tuple(row[7]) == (255, 69, 0)


def test_surface_clamps_size():
    surface = MapSurface(0, -2)
    assert surface.pixels.shape == (1, 1, 3)


if __name__ == "__main__":
    print("\n=== Testing Palette and MapSurface ===\n")

    test_palette_covers_every_cell()
    test_palette_fallback_gray()
    test_colorize_shape()
    test_surface_tracks_simulator()
    test_surface_dirty_rows_and_clamping()
    test_surface_later_changes_win()
    test_surface_clamps_size()

    print("\n✓ All tests passed!\n")
