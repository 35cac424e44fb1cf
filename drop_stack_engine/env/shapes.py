"""Shape templates for the stacking engine.

Each template is three rows, top row first, with the piece pushed to the
left so that its leftmost cell sits on bit 3. ``shift_row`` then moves bit 3
onto the playfield column selected by the drop offset.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Dict, Iterator, Sequence, Tuple

from .bitfield import ROW_LIMIT, SHAPE_HEIGHT, fits
from .errors import ConfigurationError

Template = Tuple[int, int, int]

DEFAULT_SHAPES: Dict[str, Template] = {
    "Q": (0b0000, 0b1100, 0b1100),
    "Z": (0b0000, 0b1100, 0b0110),
    "S": (0b0000, 0b0110, 0b1100),
    "T": (0b0000, 0b1110, 0b0100),
    "I": (0b0000, 0b0000, 0b1111),
    "L": (0b1000, 0b1000, 0b1100),
    "J": (0b0100, 0b0100, 0b1100),
}


def _check_template(letter: object, rows: Sequence[int]) -> Template:
    if not isinstance(letter, str) or len(letter) != 1:
        raise ConfigurationError(f"Shape identifier {letter!r} must be one character")
    rows = tuple(rows)
    if len(rows) != SHAPE_HEIGHT:
        raise ConfigurationError(
            f"Shape {letter!r} needs {SHAPE_HEIGHT} rows, got {len(rows)}"
        )
    for row in rows:
        if isinstance(row, bool) or not isinstance(row, int) or not 0 <= row <= ROW_LIMIT:
            raise ConfigurationError(f"Shape {letter!r} has invalid row {row!r}")
    if not any(rows):
        raise ConfigurationError(f"Shape {letter!r} is empty")
    if not fits(rows, 0):
        raise ConfigurationError(
            f"Shape {letter!r} is not left-aligned within the playfield"
        )
    return rows


class ShapeLibrary(Mapping):
    """Read-only mapping of shape identifier to its three row template."""

    def __init__(self, templates: Mapping[str, Sequence[int]]) -> None:
        self._templates: Dict[str, Template] = {
            letter: _check_template(letter, rows) for letter, rows in templates.items()
        }

    def __getitem__(self, letter: str) -> Template:
        return self._templates[letter]

    def __iter__(self) -> Iterator[str]:
        return iter(self._templates)

    def __len__(self) -> int:
        return len(self._templates)

    def __repr__(self) -> str:
        return f"ShapeLibrary({self._templates!r})"


def default_shapes() -> ShapeLibrary:
    return ShapeLibrary(DEFAULT_SHAPES)
