import argparse
import dataclasses
import sys

from drop_stack_engine.batch.process import process_file
from drop_stack_engine.config.engine_config import EngineConfig, load_config
from drop_stack_engine.env.errors import StackError


def build_config(config_path: str | None, max_height: int | None) -> EngineConfig:
    """Load the engine config and apply command line overrides."""
    config = load_config(config_path) if config_path else EngineConfig()
    if max_height is not None:
        config = dataclasses.replace(config, max_height=max_height)
    return config


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Compute the stack height left by each drop sequence"
    )
    parser.add_argument(
        "input",
        nargs="?",
        default="input.txt",
        help="Drop sequences, one per line (local path or gs:// URI)",
    )
    parser.add_argument(
        "output",
        nargs="?",
        default="output.txt",
        help="Where to write one height per line (local path or gs:// URI)",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="INI file with [engine] max_height and [shapes] templates",
    )
    parser.add_argument(
        "--max-height",
        type=int,
        default=None,
        help="Override the configured field height",
    )
    parser.add_argument(
        "--processes",
        type=int,
        default=1,
        help="Worker processes for the batch (0 uses all CPUs)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Deadline in seconds for the whole batch when using workers",
    )
    args = parser.parse_args(argv)

    try:
        config = build_config(args.config, args.max_height)
        print(
            f"[main] max_height={config.max_height} shapes={''.join(sorted(config.shapes))}"
        )
        results = process_file(
            args.input,
            args.output,
            config,
            processes=args.processes or None,
            timeout=args.timeout,
        )
    except (StackError, FileNotFoundError) as exc:
        print(f"[main] failed: {exc}", file=sys.stderr)
        return 1
    print(f"[main] processed {len(results)} sequences")
    return 0


if __name__ == "__main__":
    sys.exit(main())
