"""Positioned file I/O and split-artifact naming shared by split and squash."""

import os
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO

from .config import PilConfig
from .errors import FormatError, ImageIOError, SidecarRangeError, TruncatedReadError


@contextmanager
def open_binary(path: Path, mode: str, action: str) -> Iterator[BinaryIO]:
    """Open ``path`` in binary ``mode``; OS failures become ImageIOError.

    ``action`` names the operation for the diagnostic ("open", "create").
    """
    try:
        f = open(path, mode)
    except OSError as e:
        raise ImageIOError(f"Failed to {action} {path}", e.errno, str(path)) from e

    with f:
        try:
            yield f
        except OSError as e:
            raise ImageIOError(f"I/O error on {path}", e.errno, str(path)) from e


def stream_size(f: BinaryIO) -> int:
    return f.seek(0, os.SEEK_END)


def read_at(f: BinaryIO, offset: int, size: int) -> bytes:
    """Read exactly ``size`` bytes at ``offset`` or raise TruncatedReadError.

    The request is checked against the stream length before seeking.
    """
    available = max(0, stream_size(f) - offset)
    if size > available:
        raise TruncatedReadError(size, available, offset)
    f.seek(offset)
    data = f.read(size)
    if len(data) != size:
        raise TruncatedReadError(size, len(data), offset)
    return data


def write_at(f: BinaryIO, offset: int, data: bytes) -> None:
    try:
        f.seek(offset)
    except (ValueError, OverflowError) as e:
        raise ImageIOError(f"Cannot write {len(data)} bytes at offset 0x{offset:x}: {e}") from e
    f.write(data)


def append(f: BinaryIO, data: bytes) -> None:
    f.seek(0, os.SEEK_END)
    f.write(data)


def check_metadata_path(metadata_path: Path, config: PilConfig) -> None:
    """Reject a metadata path that lacks the configured metadata suffix."""
    if metadata_path.suffix != config.metadata_suffix:
        raise FormatError(f"{metadata_path} is not a {config.metadata_suffix} file")


def sidecar_path(metadata_path: Path, index: int, config: PilConfig) -> Path:
    """``foo.mdt`` + index 5 -> ``foo.b05``."""
    if not 0 <= index <= config.max_sidecar_index:
        raise SidecarRangeError(index, config.max_sidecar_index)
    return metadata_path.with_suffix(f"{config.sidecar_prefix}{index:02d}")


def sidecar_paths(metadata_path: Path, entries, config: PilConfig) -> dict[int, Path]:
    """Map the index of every non-empty, non-hash entry to its side-car path.

    All names are resolved at once so an index past ``max_sidecar_index``
    fails before any output is created.
    """
    return {
        e.index: sidecar_path(metadata_path, e.index, config)
        for e in entries
        if e.file_size and not e.is_hash
    }
