"""Height of a falling-block stack after each drop sequence."""

from drop_stack_engine.config.engine_config import EngineConfig, load_config
from drop_stack_engine.env.shapes import ShapeLibrary, default_shapes
from drop_stack_engine.env.stack_env import DropCommand, StackEnv, run_sequence

__all__ = [
    "DropCommand",
    "EngineConfig",
    "ShapeLibrary",
    "StackEnv",
    "default_shapes",
    "load_config",
    "run_sequence",
]
