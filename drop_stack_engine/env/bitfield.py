"""Bit-level primitives for the stacking field.

A grid is a one-dimensional ``numpy.uint16`` array with the floor at index
``0``. Bits ``11..2`` of every row hold the ten playable columns (bit 11 is
the leftmost column); all other bits stay zero. Shapes are three rows tall
and stored top row first, so ``shape[0]`` is tested against ``grid[top]``,
``shape[1]`` against ``grid[top - 1]`` and so on.

Collisions are a bitwise AND between a shifted shape row and a grid row,
placement is a bitwise OR.
"""

from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np

from .errors import InvariantViolation

COLUMN_COUNT = 10
SHAPE_HEIGHT = 3
# Spare rows above ``max_height`` so a shape landing at the ceiling still fits.
HEADROOM = 3
BASE_SHIFT = 8
PLAYFIELD_MASK = 0b111111111100
FULL_ROW = PLAYFIELD_MASK
ROW_LIMIT = 0xFFFF
# Top row index of a shape resting on the floor.
FLOOR_TOP = SHAPE_HEIGHT - 1

Grid = np.ndarray
Rows = Tuple[int, ...]


def new_grid(max_height: int) -> Grid:
    """Return an empty grid with room for ``max_height`` rows plus headroom."""
    return np.zeros(max_height + HEADROOM, dtype=np.uint16)


def shift_row(row: int, offset: int) -> int:
    """Position a template row at column ``offset``."""
    shift = BASE_SHIFT - offset
    if shift >= 0:
        return row << shift
    return row >> -shift


def shift_shape(rows: Sequence[int], offset: int) -> Rows:
    return tuple(shift_row(row, offset) for row in rows)


def fits(rows: Sequence[int], offset: int) -> bool:
    """Return ``True`` if ``rows`` placed at ``offset`` stay inside the field."""
    if not 0 <= offset < COLUMN_COUNT:
        return False
    shift = BASE_SHIFT - offset
    for row in rows:
        # A right shift must not drop cells off the edge.
        if shift < 0 and row & ((1 << -shift) - 1):
            return False
        if shift_row(row, offset) & ~PLAYFIELD_MASK:
            return False
    return True


def collides(grid: Grid, shifted: Sequence[int], top: int) -> bool:
    for y, row in enumerate(shifted):
        if row & int(grid[top - y]):
            return True
    return False


def find_landing(grid: Grid, shifted: Sequence[int], highest: int) -> int:
    """Return the top row index at which ``shifted`` comes to rest.

    Candidate positions are scanned from ``highest + 2`` downwards. The first
    collision at ``top`` puts the shape one row above it; a clean scan drops
    the shape onto the floor. The start is clamped to the grid's top row.
    """
    start = min(highest + 2, len(grid) - 1)
    for top in range(start, FLOOR_TOP - 1, -1):
        if collides(grid, shifted, top):
            return top + 1
    return FLOOR_TOP


def merge_shape(grid: Grid, shifted: Sequence[int], top: int) -> None:
    """OR ``shifted`` into the three rows ending at ``top``."""
    for y, row in enumerate(shifted):
        if row & ~PLAYFIELD_MASK:
            raise InvariantViolation(
                f"row value {row:#06x} has bits outside the playfield"
            )
        grid[top - y] = int(grid[top - y]) | (row & PLAYFIELD_MASK)


def find_highest(grid: Grid) -> int:
    """Index of the topmost non-empty row, ``0`` when the grid is empty."""
    filled = np.flatnonzero(grid)
    if filled.size == 0:
        return 0
    return int(filled[-1])


def clear_full_rows(grid: Grid, highest: int) -> int:
    """Remove full rows at or below ``highest`` and return how many went.

    Rows above a cleared row move down by one and row ``highest`` is zeroed.
    ``highest`` itself is left for the caller to recompute.
    """
    cleared = 0
    for y in range(highest, -1, -1):
        if grid[y] == FULL_ROW:
            grid[y:highest] = grid[y + 1 : highest + 1]
            grid[highest] = 0
            cleared += 1
    return cleared


def stack_height(grid: Grid) -> int:
    """Return the 1-based height of the stack, ``0`` for an empty grid."""
    if not grid.any():
        return 0
    return find_highest(grid) + 1


def check_grid(grid: Grid) -> None:
    """Raise ``InvariantViolation`` if any row has bits outside the field."""
    stray = np.flatnonzero(grid & np.uint16(~PLAYFIELD_MASK & ROW_LIMIT))
    if stray.size:
        y = int(stray[0])
        raise InvariantViolation(
            f"grid row {y} holds {int(grid[y]):#06x} outside the playfield"
        )
