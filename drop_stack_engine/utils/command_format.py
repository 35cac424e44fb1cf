"""Text format for drop sequences and their results.

Every non-blank line is one sequence of comma separated commands. A command
is a shape letter followed by the column offset, e.g. ``Q0,I4,Q8``.
"""

from __future__ import annotations

import re
from typing import Iterable, List

from drop_stack_engine.env.errors import ValidationError
from drop_stack_engine.env.stack_env import DropCommand

_COMMAND = re.compile(r"(\D)(\d+)")


def parse_line(
    line: str, sequence_index: int | None = None, line_number: int | None = None
) -> List[DropCommand]:
    commands = []
    for token in line.split(","):
        token = token.strip()
        match = _COMMAND.fullmatch(token)
        if match is None:
            where = f" on line {line_number}" if line_number is not None else ""
            raise ValidationError(f"Malformed command {token!r}{where}", sequence_index)
        commands.append(DropCommand(match.group(1), int(match.group(2))))
    return commands


def parse_commands(text: str) -> List[List[DropCommand]]:
    """Parse every non-blank line of ``text`` into a sequence."""
    sequences: List[List[DropCommand]] = []
    for line_number, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        sequences.append(parse_line(line, len(sequences), line_number))
    return sequences


def format_results(results: Iterable[int]) -> str:
    return "".join(f"{height}\n" for height in results)
