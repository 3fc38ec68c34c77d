"""Reassemble a monolithic PIL image from an .mdt file and its side-cars."""

import logging
from pathlib import Path
from typing import BinaryIO

from .config import PilConfig
from .elf.headers import ProgramHeaderEntry, read_elf, write_headers
from .errors import FormatError, ImageIOError, MissingArtifactError
from .fileio import check_metadata_path, open_binary, read_at, sidecar_paths, write_at

log = logging.getLogger(__name__)


def read_sidecar(path: Path, size: int) -> bytes:
    """Return the full content of a side-car, which must be ``size`` bytes."""
    try:
        f = open(path, "rb")
    except OSError as e:
        raise MissingArtifactError(path) from e

    with f:
        try:
            data = read_at(f, 0, size)
            extra = f.read(1)
        except OSError as e:
            raise ImageIOError(f"I/O error on {path}", e.errno, str(path)) from e
        if extra:
            raise FormatError(f"{path} is larger than its declared {size} bytes")
    return data


def hash_region_start(entries: list[ProgramHeaderEntry]) -> int:
    """Offset of the concatenated hash segments inside the metadata file.

    By convention entry 0 describes the ELF header and program headers, so
    its file size is where the appended hash bytes begin.
    """
    if not entries:
        return 0
    return entries[0].file_size


def read_segment(
    mdt: BinaryIO,
    entry: ProgramHeaderEntry,
    sidecar: Path | None,
    hash_offset: int,
) -> tuple[bytes, int]:
    """Fetch one segment's bytes; returns them with the next hash offset."""
    if entry.is_hash:
        segment = read_at(mdt, hash_offset, entry.file_size)
        return segment, hash_offset + entry.file_size
    return read_sidecar(sidecar, entry.file_size), hash_offset


def squash(
    metadata_path: Path,
    destination_path: Path,
    config: PilConfig | None = None,
) -> Path:
    """Rebuild ``destination_path`` from ``metadata_path`` and its side-cars."""
    config = config or PilConfig()
    metadata_path = Path(metadata_path)
    destination_path = Path(destination_path)
    check_metadata_path(metadata_path, config)

    with open_binary(metadata_path, "rb", "open") as mdt:
        header, entries = read_elf(mdt)
        sidecars = sidecar_paths(metadata_path, entries, config)

        with open_binary(destination_path, "wb", "create") as out:
            write_headers(out, header, entries)

            hash_offset = hash_region_start(entries)
            log.debug("Hash region starts at offset 0x%x", hash_offset)

            for entry in entries:
                if entry.file_size == 0:
                    log.debug("[%d] empty segment, skipped", entry.index)
                    continue

                segment, hash_offset = read_segment(
                    mdt, entry, sidecars.get(entry.index), hash_offset
                )
                write_at(out, entry.file_offset, segment)
                log.debug("[%d] %d bytes written at 0x%x",
                          entry.index, len(segment), entry.file_offset)

    log.info("MBN %s (%d segments)", destination_path,
             sum(1 for e in entries if e.file_size))
    return destination_path
