"""Stacking engine for one drop sequence."""

from __future__ import annotations

from typing import Dict, Iterable, NamedTuple

from .bitfield import (
    COLUMN_COUNT,
    check_grid,
    clear_full_rows,
    find_highest,
    find_landing,
    fits,
    merge_shape,
    new_grid,
    shift_shape,
    stack_height,
)
from .errors import CapacityError, ConfigurationError, StackError, ValidationError
from .shapes import ShapeLibrary


class DropCommand(NamedTuple):
    letter: str
    offset: int


def validate_command(
    shapes: ShapeLibrary, command: DropCommand, sequence_index: int | None = None
) -> None:
    """Raise if ``command`` cannot be simulated against ``shapes``."""
    letter, offset = command
    if letter not in shapes:
        raise ConfigurationError(f"Unknown shape {letter!r}", sequence_index, command)
    if isinstance(offset, bool) or not isinstance(offset, int):
        raise ValidationError(f"Offset {offset!r} is not an integer", sequence_index, command)
    if not 0 <= offset < COLUMN_COUNT:
        raise ValidationError(
            f"Offset {offset} outside 0..{COLUMN_COUNT - 1}", sequence_index, command
        )
    if not fits(shapes[letter], offset):
        raise ValidationError(
            f"Shape {letter!r} does not fit at offset {offset}", sequence_index, command
        )


def validate_sequence(
    shapes: ShapeLibrary,
    commands: Iterable[DropCommand],
    sequence_index: int | None = None,
) -> None:
    for command in commands:
        validate_command(shapes, command, sequence_index)


class StackEnv:
    """Bounded-width stacking field.

    ``highest`` is refreshed after every merge but not after rows are
    cleared, so the next drop may start its landing search from a stale,
    higher row. ``height()`` always recomputes from the grid.
    """

    def __init__(self, shapes: ShapeLibrary, max_height: int) -> None:
        if isinstance(max_height, bool) or not isinstance(max_height, int) or max_height < 1:
            raise ConfigurationError(f"max_height must be a positive integer, got {max_height!r}")
        self.shapes = shapes
        self.max_height = max_height
        self.reset()

    # Public API -----------------------------------------------------------
    def reset(self) -> Dict[str, object]:
        """Start again on an empty grid."""
        self.grid = new_grid(self.max_height)
        self.highest = 0
        self.lines = 0
        return self.get_state()

    def step(self, letter: str, offset: int) -> tuple[Dict[str, object], int]:
        """Drop ``letter`` at column ``offset``.

        Returns a tuple of ``(next_state, rows_cleared)``.
        """
        command = DropCommand(letter, offset)
        validate_command(self.shapes, command)

        shifted = shift_shape(self.shapes[letter], offset)
        top = find_landing(self.grid, shifted, self.highest)
        if top >= len(self.grid):
            raise CapacityError(
                f"Stack exceeds {len(self.grid)} rows", command=command
            )
        merge_shape(self.grid, shifted, top)

        self.highest = find_highest(self.grid)
        cleared = clear_full_rows(self.grid, self.highest)
        self.lines += cleared
        return self.get_state(), cleared

    def height(self) -> int:
        """Recompute ``highest`` and return the 1-based stack height."""
        check_grid(self.grid)
        self.highest = find_highest(self.grid)
        return stack_height(self.grid)

    def get_state(self) -> Dict[str, object]:
        return {
            "grid": self.grid.copy(),
            "highest": self.highest,
            "height": stack_height(self.grid),
            "lines": self.lines,
        }


def run_sequence(
    shapes: ShapeLibrary,
    max_height: int,
    commands: Iterable[DropCommand],
    sequence_index: int | None = None,
) -> int:
    """Validate then simulate ``commands`` on a fresh grid, returning the height."""
    commands = [DropCommand(*command) for command in commands]
    validate_sequence(shapes, commands, sequence_index)
    env = StackEnv(shapes, max_height)
    for command in commands:
        try:
            env.step(*command)
        except StackError as exc:
            raise exc.with_context(sequence_index, command) from exc
    return env.height()
