"""Synthetic PIL image builder shared by the test modules."""

import struct
from dataclasses import dataclass, field
from pathlib import Path

import pytest

# flags type 2 in bits 24-26
HASH_FLAGS = 0x02200000
# flags type 7, used by the entry that covers the ELF header and table
HEADER_FLAGS = 0x07000000
LOAD_FLAGS = 0x80000005

_EHDR_FMT = {32: "16sHHIIIIIHHHHHH", 64: "16sHHIQQQIHHHHHH"}
_PHDR_FMT = {32: "IIIIIIII", 64: "IIQQQQQQ"}


@dataclass
class Segment:
    data: bytes
    flags: int = LOAD_FLAGS
    p_type: int = 1


@dataclass
class SyntheticImage:
    data: bytes
    width: int
    byte_order: str
    phoff: int
    entry_size: int
    # (offset, filesz, flags) per table entry
    entries: list[tuple[int, int, int]] = field(default_factory=list)

    @property
    def table_end(self) -> int:
        return self.phoff + len(self.entries) * self.entry_size

    def segment_bytes(self, index: int) -> bytes:
        offset, size, _ = self.entries[index]
        return self.data[offset:offset + size]


def build_image(
    segments: list[Segment],
    width: int = 32,
    byte_order: str = "little",
    header_entry: bool = True,
    align: int = 16,
) -> SyntheticImage:
    """Lay out an ELF image whose segments follow the program-header table.

    With ``header_entry`` the first table entry describes the header plus the
    table itself, as signed PIL images do.
    """
    prefix = "<" if byte_order == "little" else ">"
    ehdr_fmt = prefix + _EHDR_FMT[width]
    phdr_fmt = prefix + _PHDR_FMT[width]
    ehdr_size = struct.calcsize(ehdr_fmt)
    entry_size = struct.calcsize(phdr_fmt)

    phnum = len(segments) + (1 if header_entry else 0)
    phoff = ehdr_size
    table_end = phoff + phnum * entry_size

    entries: list[tuple[int, int, int, int]] = []  # (type, offset, size, flags)
    if header_entry:
        entries.append((0, 0, table_end, HEADER_FLAGS))

    body = bytearray()
    cursor = table_end
    for seg in segments:
        cursor = (cursor + align - 1) // align * align
        entries.append((seg.p_type, cursor, len(seg.data), seg.flags))
        pad = cursor - table_end - len(body)
        body.extend(b"\x00" * pad)
        body.extend(seg.data)
        cursor += len(seg.data)

    ident = b"\x7fELF" + bytes([1 if width == 32 else 2, 1 if byte_order == "little" else 2, 1])
    ident = ident.ljust(16, b"\x00")
    ehdr = struct.pack(
        ehdr_fmt,
        ident,
        2,  # ET_EXEC
        164,  # EM_QDSP6
        1,
        0x8C000000,
        phoff,
        0,
        0x73,
        ehdr_size,
        entry_size,
        phnum,
        0,
        0,
        0,
    )

    table = bytearray()
    for p_type, offset, size, flags in entries:
        vaddr = 0x8C000000 + offset
        if width == 32:
            table += struct.pack(phdr_fmt, p_type, offset, vaddr, vaddr, size, size, flags, 0x1000)
        else:
            table += struct.pack(phdr_fmt, p_type, flags, offset, vaddr, vaddr, size, size, 0x1000)

    data = ehdr + bytes(table) + bytes(body)
    return SyntheticImage(
        data=data,
        width=width,
        byte_order=byte_order,
        phoff=phoff,
        entry_size=entry_size,
        entries=[(o, s, f) for _, o, s, f in entries],
    )


FORMATS = [(32, "little"), (32, "big"), (64, "little"), (64, "big")]


@pytest.fixture(params=FORMATS, ids=lambda p: f"elf{p[0]}-{p[1]}")
def elf_format(request) -> tuple[int, str]:
    return request.param


@pytest.fixture
def make_image():
    return build_image


@pytest.fixture
def interleaved_segments() -> list[Segment]:
    """Ordinary, hash, empty, ordinary, hash, ordinary."""
    return [
        Segment(b"\x11" * 40),
        Segment(b"HASH-A" * 8, flags=HASH_FLAGS),
        Segment(b""),
        Segment(bytes(range(256)) * 2),
        Segment(b"HASH-B" * 3, flags=HASH_FLAGS),
        Segment(b"\xee" * 17),
    ]


@pytest.fixture
def write_image(tmp_path: Path):
    def _write(image: SyntheticImage, name: str = "modem.mbn") -> Path:
        path = tmp_path / name
        path.write_bytes(image.data)
        return path

    return _write
