"""Summaries of PIL images and metadata files for inspection."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .config import PilConfig
from .elf.headers import read_elf
from .errors import SidecarRangeError
from .fileio import open_binary, sidecar_path


@dataclass
class SegmentSummary:
    """Where one program-header entry ends up once the image is split."""

    index: int
    offset: int
    size: int
    flags: int
    segment_class: str
    artifact: str  # "metadata", "sidecar" or "skipped"
    sidecar: str | None = None


@dataclass
class ImageSummary:
    """Decoded identity, table geometry and segment routing of an image."""

    path: str
    address_width: int
    byte_order: str
    phoff: int
    phnum: int
    entry_size: int
    segments: list[SegmentSummary] = field(default_factory=list)

    @property
    def hash_bytes(self) -> int:
        return sum(s.size for s in self.segments if s.artifact == "metadata")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "path": self.path,
            "elf": {
                "address_width": self.address_width,
                "byte_order": self.byte_order,
            },
            "program_headers": {
                "offset": self.phoff,
                "count": self.phnum,
                "entry_size": self.entry_size,
            },
            "hash_bytes": self.hash_bytes,
            "segments": [
                {
                    "index": s.index,
                    "offset": s.offset,
                    "size": s.size,
                    "flags": f"0x{s.flags:08x}",
                    "class": s.segment_class,
                    "artifact": s.artifact,
                    "sidecar": s.sidecar,
                }
                for s in self.segments
            ],
        }


def describe_image(path: Path, config: PilConfig | None = None) -> ImageSummary:
    """Decode ``path`` and report how split would route each segment.

    Side-car names are given relative to ``path`` with the metadata suffix,
    i.e. the names split would produce for ``<stem>.mdt`` beside the image.
    """
    config = config or PilConfig()
    path = Path(path)
    metadata_path = path.with_suffix(config.metadata_suffix)

    with open_binary(path, "rb", "open") as f:
        header, entries = read_elf(f)

    summary = ImageSummary(
        path=str(path),
        address_width=header.identity.address_width,
        byte_order=header.identity.byte_order,
        phoff=header.phoff,
        phnum=header.phnum,
        entry_size=header.entry_size,
    )
    for entry in entries:
        if entry.file_size == 0:
            artifact, sidecar = "skipped", None
        elif entry.is_hash:
            artifact, sidecar = "metadata", None
        else:
            artifact = "sidecar"
            try:
                sidecar = sidecar_path(metadata_path, entry.index, config).name
            except SidecarRangeError:
                sidecar = None
        summary.segments.append(SegmentSummary(
            index=entry.index,
            offset=entry.file_offset,
            size=entry.file_size,
            flags=entry.flags,
            segment_class=entry.segment_class.value,
            artifact=artifact,
            sidecar=sidecar,
        ))
    return summary
