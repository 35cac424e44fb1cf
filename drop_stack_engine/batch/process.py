from __future__ import annotations

from typing import List, Sequence, Tuple

import multiprocessing as mp
import os

from drop_stack_engine.config.engine_config import EngineConfig
from drop_stack_engine.env.shapes import ShapeLibrary
from drop_stack_engine.env.stack_env import DropCommand, run_sequence, validate_sequence
from drop_stack_engine.utils.serialization import load_commands, save_results


def _worker(args: Tuple[int, ShapeLibrary, int, List[DropCommand]]) -> int:
    """Helper for ``process_sequences`` running in a separate process."""
    index, shapes, max_height, commands = args
    return run_sequence(shapes, max_height, commands, index)


def process_sequences(
    config: EngineConfig,
    sequences: Sequence[Sequence[DropCommand]],
    *,
    processes: int | None = 1,
    timeout: float | None = None,
) -> List[int]:
    """Return the stack height for each of ``sequences`` in input order.

    Every sequence is validated before any is simulated. With ``processes``
    other than ``1`` the sequences run on a spawn pool (``None`` uses all
    CPUs) and ``timeout`` bounds the whole batch.
    """
    sequences = [[DropCommand(*command) for command in commands] for commands in sequences]
    for index, commands in enumerate(sequences):
        validate_sequence(config.shapes, commands, index)

    if processes == 1 or len(sequences) <= 1:
        return [
            run_sequence(config.shapes, config.max_height, commands, index)
            for index, commands in enumerate(sequences)
        ]

    args = [
        (index, config.shapes, config.max_height, commands)
        for index, commands in enumerate(sequences)
    ]
    print(f"[process_sequences] sequences={len(sequences)} processes={processes}")
    ctx = mp.get_context("spawn")
    with ctx.Pool(processes) as pool:
        results = pool.map_async(_worker, args).get(timeout)
    print(f"[process_sequences] pid={os.getpid()} collected {len(results)} results")
    return results


def process_file(
    input_path: str,
    output_path: str,
    config: EngineConfig,
    *,
    processes: int | None = 1,
    timeout: float | None = None,
) -> List[int]:
    """Read sequences from ``input_path`` and write their heights to ``output_path``."""
    sequences = load_commands(input_path)
    print(f"[process_file] loaded {len(sequences)} sequences from {input_path}")
    results = process_sequences(config, sequences, processes=processes, timeout=timeout)
    save_results(results, output_path)
    print(f"[process_file] wrote {len(results)} heights to {output_path}")
    return results
