import numpy as np
import pytest

from drop_stack_engine.env.bitfield import (
    FLOOR_TOP,
    FULL_ROW,
    PLAYFIELD_MASK,
    check_grid,
    clear_full_rows,
    find_highest,
    find_landing,
    fits,
    merge_shape,
    new_grid,
    shift_row,
    stack_height,
)
from drop_stack_engine.env.errors import InvariantViolation


def test_new_grid_has_headroom():
    grid = new_grid(3)
    assert grid.dtype == np.uint16
    assert len(grid) == 6
    assert not grid.any()


def test_shift_row_places_leftmost_cell():
    assert shift_row(0b1000, 0) == 1 << 11
    assert shift_row(0b1000, 9) == 1 << 2
    assert shift_row(0b1111, 4) == 0b000011110000


def test_fits_rejects_offsets_past_the_edge():
    bar = (0, 0, 0b1111)
    assert fits(bar, 0)
    assert fits(bar, 6)
    assert not fits(bar, 7)
    assert not fits(bar, -1)
    assert not fits(bar, 10)
    # A single column piece may use the last column.
    assert fits((0, 0, 0b1000), 9)
    assert not fits((0, 0b1100, 0b1100), 9)


def test_find_landing_on_empty_grid_is_floor():
    grid = new_grid(5)
    assert find_landing(grid, (0, 0xC00, 0xC00), 0) == FLOOR_TOP


def test_find_landing_stops_above_collision():
    grid = new_grid(5)
    grid[0] = 0b100000000000
    # Bottom shape row overlaps the occupied cell at top=2.
    top = find_landing(grid, (0, 0, 0b110000000000), 0)
    assert top == 3


def test_find_landing_clamps_search_to_grid():
    grid = new_grid(1)
    grid[:] = 0b100000000000
    assert find_landing(grid, (0, 0, 0b100000000000), find_highest(grid)) == len(grid)


def test_merge_shape_ors_rows_in():
    grid = new_grid(3)
    grid[0] = 0b000000001100
    merge_shape(grid, (0, 0b110000000000, 0b110000000000), 2)
    assert int(grid[0]) == 0b110000001100
    assert int(grid[1]) == 0b110000000000
    assert int(grid[2]) == 0


def test_merge_shape_refuses_stray_bits():
    grid = new_grid(3)
    with pytest.raises(InvariantViolation):
        merge_shape(grid, (0, 0, 0b1), 2)
    assert not grid.any()


def test_find_highest_and_height():
    grid = new_grid(4)
    assert find_highest(grid) == 0
    assert stack_height(grid) == 0
    grid[0] = 4
    assert stack_height(grid) == 1
    grid[3] = 8
    assert find_highest(grid) == 3
    assert stack_height(grid) == 4


def test_clear_full_rows_shifts_rows_down():
    grid = new_grid(4)
    grid[0] = 0b100000000000
    grid[1] = FULL_ROW
    grid[2] = 0b010000000000
    grid[3] = FULL_ROW
    cleared = clear_full_rows(grid, 3)
    assert cleared == 2
    assert [int(row) for row in grid[:4]] == [0b100000000000, 0b010000000000, 0, 0]


def test_check_grid_detects_stray_bits():
    grid = new_grid(2)
    grid[0] = PLAYFIELD_MASK
    check_grid(grid)
    grid[1] = 0b1
    with pytest.raises(InvariantViolation, match="row 1"):
        check_grid(grid)
