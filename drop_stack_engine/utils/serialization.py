import os
from typing import Iterable, List

from google.cloud import storage

from .command_format import format_results, parse_commands
from drop_stack_engine.env.stack_env import DropCommand


def _split_gcs(path: str) -> tuple[str, str]:
    bucket, _, blob_name = path[5:].partition("/")
    if not bucket or not blob_name:
        raise ValueError(f"Expected gs://bucket/blob, got {path}")
    return bucket, blob_name


def _write_bytes(path: str, data: bytes) -> None:
    if path.startswith("gs://"):
        bucket, blob_name = _split_gcs(path)
        client = storage.Client()
        client.bucket(bucket).blob(blob_name).upload_from_string(data)
    else:
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(path, "wb") as f:
            f.write(data)


def _read_bytes(path: str) -> bytes:
    if path.startswith("gs://"):
        bucket, blob_name = _split_gcs(path)
        client = storage.Client()
        return client.bucket(bucket).blob(blob_name).download_as_bytes()
    else:
        with open(path, "rb") as f:
            return f.read()


def load_bytes(path: str) -> bytes:
    """Load raw bytes from ``path`` which may be local or ``gs://``."""
    return _read_bytes(path)


def save_bytes(data: bytes, path: str) -> None:
    """Write raw bytes to ``path`` which may be local or ``gs://``."""
    _write_bytes(path, data)


def load_text(path: str) -> str:
    return _read_bytes(path).decode("utf-8")


def save_text(text: str, path: str) -> None:
    _write_bytes(path, text.encode("utf-8"))


def load_commands(path: str) -> List[List[DropCommand]]:
    """Read drop sequences from ``path``, one sequence per line."""
    return parse_commands(load_text(path))


def save_results(results: Iterable[int], path: str) -> None:
    """Write one height per line to ``path``."""
    save_text(format_results(results), path)
