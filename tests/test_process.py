import multiprocessing as mp
import multiprocessing.pool
from unittest.mock import patch

import pytest

from drop_stack_engine.batch import process
from drop_stack_engine.batch.process import process_file, process_sequences
from drop_stack_engine.config.engine_config import EngineConfig
from drop_stack_engine.env.errors import CapacityError, ConfigurationError, ValidationError

SEQUENCES = [
    [("I", 0), ("I", 4), ("Q", 8)],
    [("T", 1), ("Z", 3), ("I", 4)],
    [],
    [("Q", 0), ("Q", 1)],
    [("Q", 0), ("I", 2), ("I", 6), ("I", 0), ("I", 6), ("I", 6), ("Q", 2), ("Q", 4)],
]
EXPECTED = [1, 4, 0, 4, 3]


def test_sequential_results_in_order():
    assert process_sequences(EngineConfig(), SEQUENCES) == EXPECTED


def test_pool_preserves_input_order():
    assert process_sequences(EngineConfig(), SEQUENCES, processes=2, timeout=120) == EXPECTED


def test_pool_reports_worker_errors_with_context():
    config = EngineConfig(max_height=1)
    with pytest.raises(CapacityError) as info:
        process_sequences(config, [[("Q", 0)], [("Q", 0), ("Q", 0)]], processes=2, timeout=120)
    assert info.value.sequence_index == 1


def test_validation_happens_before_any_simulation():
    bad = SEQUENCES + [[("Q", 0), ("Q", 9)]]
    with patch.object(process, "run_sequence") as run:
        with pytest.raises(ValidationError) as info:
            process_sequences(EngineConfig(), bad)
    run.assert_not_called()
    assert info.value.sequence_index == len(SEQUENCES)


def test_unknown_shape_aborts_batch():
    with pytest.raises(ConfigurationError):
        process_sequences(EngineConfig(), [[("Q", 0)], [("X", 1)]], processes=2)


def test_pool_timeout():
    config = EngineConfig()
    with patch.object(mp.pool.ApplyResult, "get", side_effect=mp.TimeoutError):
        with pytest.raises(mp.TimeoutError):
            process_sequences(config, SEQUENCES, processes=2, timeout=0.001)


def test_process_file(tmp_path):
    source = tmp_path / "input.txt"
    source.write_text("I0,I4,Q8\nT1,Z3,I4\n\nQ0,Q1\n")
    output = tmp_path / "out" / "output.txt"
    assert process_file(str(source), str(output), EngineConfig()) == [1, 4, 4]
    assert output.read_text() == "1\n4\n4\n"
