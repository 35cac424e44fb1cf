"""Exceptions raised while loading shapes or simulating drop sequences."""

from __future__ import annotations

from typing import Any


class StackError(Exception):
    """Base error carrying the sequence and command that triggered it."""

    def __init__(
        self,
        message: str,
        sequence_index: int | None = None,
        command: Any = None,
    ) -> None:
        self.message = message
        self.sequence_index = sequence_index
        self.command = command
        super().__init__(self._describe())

    def _describe(self) -> str:
        parts = []
        if self.sequence_index is not None:
            parts.append(f"sequence {self.sequence_index}")
        if self.command is not None:
            parts.append(f"command {tuple(self.command)!r}")
        if not parts:
            return self.message
        return f"{self.message} ({', '.join(parts)})"

    def with_context(
        self, sequence_index: int | None = None, command: Any = None
    ) -> "StackError":
        """Return a copy of this error with missing context filled in."""
        return type(self)(
            self.message,
            self.sequence_index if self.sequence_index is not None else sequence_index,
            self.command if self.command is not None else command,
        )

    def __reduce__(self):
        # Keep the context when the error crosses a process boundary.
        return (type(self), (self.message, self.sequence_index, self.command))


class ConfigurationError(StackError):
    """A shape template or config value is missing or malformed."""


class ValidationError(StackError, ValueError):
    """A drop command cannot be simulated as given."""


class CapacityError(StackError):
    """A shape came to rest above the allocated grid."""


class InvariantViolation(StackError, RuntimeError):
    """Bits appeared outside the playable columns."""
