"""Split a monolithic PIL image into an .mdt metadata file and .bNN side-cars.

The metadata file receives the ELF header and program-header table at the
offsets they occupy in the source image, followed by the bytes of every hash
segment in table order. Every other non-empty segment is written verbatim to
its own side-car file named after its table index.
"""

import logging
from pathlib import Path

from .config import PilConfig
from .elf.headers import read_elf, write_headers
from .fileio import append, check_metadata_path, open_binary, read_at, sidecar_paths

log = logging.getLogger(__name__)


def split(
    source_path: Path,
    metadata_path: Path,
    config: PilConfig | None = None,
) -> list[Path]:
    """Split ``source_path`` into ``metadata_path`` plus side-car files.

    Returns the paths written, metadata file first. The whole source header
    and table are validated before any output is created; a failure while
    copying segments may leave partial output behind.
    """
    config = config or PilConfig()
    source_path = Path(source_path)
    metadata_path = Path(metadata_path)
    check_metadata_path(metadata_path, config)

    written: list[Path] = []
    with open_binary(source_path, "rb", "open") as src:
        header, entries = read_elf(src)

        sidecars = sidecar_paths(metadata_path, entries, config)

        with open_binary(metadata_path, "wb", "create") as mdt:
            write_headers(mdt, header, entries)
            written.append(metadata_path)

            hash_bytes = 0
            for entry in entries:
                if entry.file_size == 0:
                    log.debug("[%d] empty segment, skipped", entry.index)
                    continue

                segment = read_at(src, entry.file_offset, entry.file_size)

                if entry.is_hash:
                    append(mdt, segment)
                    hash_bytes += len(segment)
                    log.debug("[%d] %d hash bytes appended to %s",
                              entry.index, len(segment), metadata_path)
                    continue

                bxx_path = sidecars[entry.index]
                with open_binary(bxx_path, "wb", "create") as bxx:
                    bxx.write(segment)
                written.append(bxx_path)
                log.info("BIN %s (%d bytes)", bxx_path, len(segment))

        log.info("MDT %s (%d program headers, %d hash bytes)",
                 metadata_path, len(entries), hash_bytes)

    return written
