"""
Disk Map Palette

Maps Cell values to RGB. The table is an (8, 3) uint8 array that serves
as a lookup table, so a whole grid can be colorized with one fancy index.

Legend:
  Black       empty
  Green       regular files, unfragmented
  Dark green  spacehogs, unfragmented
  Orange-red  fragmented
  Red         unmovable
  White       busy
  Deep green  MFT reserved zone
  Black       unknown
"""

import numpy as np

from .simulator import Cell


FALLBACK_COLOR = (128, 128, 128)

# Loud, mid-2000s utility palette
COLORS = {
    Cell.EMPTY: (0, 0, 0),
    Cell.REGULAR: (0, 255, 0),
    Cell.SPACE_HOG: (0, 140, 0),
    Cell.FRAGMENTED: (255, 69, 0),
    Cell.UNMOVABLE: (255, 0, 0),
    Cell.BUSY: (255, 255, 255),
    Cell.MFT_RESERVED: (0, 100, 0),
    Cell.UNKNOWN: (0, 0, 0),
}


def _build_lut():
    lut = np.zeros((len(Cell), 3), dtype=np.uint8)
    for cell in Cell:
        lut[cell] = COLORS.get(cell, FALLBACK_COLOR)
    return lut


PALETTE_LUT = _build_lut()


def get_color(cell):
    """RGB tuple for a Cell (or raw int); gray for anything unrecognised."""
    try:
        return COLORS[Cell(cell)]
    except (ValueError, KeyError):
        return FALLBACK_COLOR


def colorize(cells, width, height):
    """
    Apply the palette to a flat cell buffer.

    Args:
        cells: 1D uint8 array of Cell values, length width * height
        width, height: Grid dimensions

    Returns:
        (H, W, 3) uint8 RGB image
    """
    return PALETTE_LUT[np.asarray(cells).reshape(height, width)]
