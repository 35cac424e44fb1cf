"""Engine configuration: the shape library and the field height."""

from __future__ import annotations

import configparser
from dataclasses import dataclass, field

from drop_stack_engine.env.errors import ConfigurationError
from drop_stack_engine.env.shapes import ShapeLibrary, default_shapes
from drop_stack_engine.utils.serialization import load_text


@dataclass(frozen=True)
class EngineConfig:
    shapes: ShapeLibrary = field(default_factory=default_shapes)
    max_height: int = 100

    def __post_init__(self) -> None:
        if (
            isinstance(self.max_height, bool)
            or not isinstance(self.max_height, int)
            or self.max_height < 1
        ):
            raise ConfigurationError(
                f"max_height must be a positive integer, got {self.max_height!r}"
            )
        if not isinstance(self.shapes, ShapeLibrary):
            object.__setattr__(self, "shapes", ShapeLibrary(self.shapes))


def _parse_rows(letter: str, value: str) -> list[int]:
    try:
        return [int(part, 0) for part in value.split(",")]
    except ValueError:
        raise ConfigurationError(f"Shape {letter!r} has malformed rows {value!r}") from None


def parse_config(text: str) -> EngineConfig:
    """Build an ``EngineConfig`` from INI ``text``.

    ``[engine] max_height`` sets the field height and each ``[shapes]`` entry
    maps a letter to three comma separated rows. Without a ``[shapes]``
    section the default pieces are used.
    """
    parser = configparser.ConfigParser()
    parser.optionxform = str  # shape letters are case sensitive
    try:
        parser.read_string(text)
    except configparser.Error as exc:
        raise ConfigurationError(f"Unreadable config: {exc}") from exc

    kwargs = {}
    if parser.has_option("engine", "max_height"):
        raw = parser.get("engine", "max_height")
        try:
            kwargs["max_height"] = int(raw)
        except ValueError:
            raise ConfigurationError(f"max_height {raw!r} is not an integer") from None
    if parser.has_section("shapes"):
        templates = {
            letter: _parse_rows(letter, value)
            for letter, value in parser.items("shapes")
        }
        kwargs["shapes"] = ShapeLibrary(templates)
    return EngineConfig(**kwargs)


def load_config(path: str) -> EngineConfig:
    """Load an ``EngineConfig`` from a local path or ``gs://`` URI."""
    try:
        text = load_text(path)
    except FileNotFoundError:
        raise ConfigurationError(f"Config file {path} not found") from None
    return parse_config(text)
