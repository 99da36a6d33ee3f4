"""Splitting a file into fixed-size chunks."""

from __future__ import annotations

import os
from collections.abc import Sequence

DATA_CHUNK_SIZE = 1024


def get_file_chunks(file_path: str | os.PathLike[str]) -> list[bytes]:
    """Read a file and return its contents as chunks of DATA_CHUNK_SIZE bytes.

    Every chunk but the last is full; an empty file gives no chunks.
    Raises OSError (for example FileNotFoundError) if the file cannot be read.
    """
    with open(file_path, "rb") as stream:
        return list(iter(lambda: stream.read(DATA_CHUNK_SIZE), b""))


def total_size(chunks: Sequence[bytes | bytearray]) -> int:
    """Number of bytes held by chunks, counting all but the last as full."""
    if not chunks:
        return 0
    return (len(chunks) - 1) * DATA_CHUNK_SIZE + len(chunks[-1])