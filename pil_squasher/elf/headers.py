"""Width-agnostic decoding of the ELF header and program-header table.

Both records are described as ordered ``(name, struct code)`` field tables.
Each field is unpacked on its own at its computed offset with an explicit
byte-order prefix, so decoded values are plain Python ints regardless of the
file's encoding, and :meth:`RecordLayout.encode` reverses the same steps to
reproduce the original on-disk bytes.
"""

import logging
import struct
from dataclasses import dataclass
from typing import BinaryIO

from ..fileio import read_at, write_at
from .ident import ElfIdentity, detect_elf_format
from .segments import SegmentClass, classify

log = logging.getLogger(__name__)

Field = tuple[str, str]


# ---------------------------------------------------------------------------
# Record layouts
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RecordLayout:
    """A fixed-size record of consecutive, unpadded fields."""

    name: str
    fields: tuple[Field, ...]

    def _field_offsets(self, prefix: str):
        offset = 0
        for name, code in self.fields:
            fmt = prefix + code
            yield name, fmt, offset
            offset += struct.calcsize(fmt)

    @property
    def size(self) -> int:
        return sum(struct.calcsize("<" + code) for _, code in self.fields)

    def offset_of(self, field_name: str) -> int:
        for name, _, offset in self._field_offsets("<"):
            if name == field_name:
                return offset
        raise KeyError(f"{self.name} has no field {field_name!r}")

    def decode(self, data: bytes, byte_order: str) -> dict[str, int | bytes]:
        """Unpack every field of ``data`` from ``byte_order`` into host values."""
        prefix = "<" if byte_order == "little" else ">"
        values: dict[str, int | bytes] = {}
        for name, fmt, offset in self._field_offsets(prefix):
            (values[name],) = struct.unpack_from(fmt, data, offset)
        return values

    def encode(self, values: dict[str, int | bytes], byte_order: str) -> bytes:
        """Pack decoded values back into their ``byte_order`` representation."""
        prefix = "<" if byte_order == "little" else ">"
        buf = bytearray(self.size)
        for name, fmt, offset in self._field_offsets(prefix):
            struct.pack_into(fmt, buf, offset, values[name])
        return bytes(buf)


ELF32_EHDR = RecordLayout(
    "Elf32_Ehdr",
    (
        ("e_ident", "16s"),
        ("e_type", "H"),
        ("e_machine", "H"),
        ("e_version", "I"),
        ("e_entry", "I"),
        ("e_phoff", "I"),
        ("e_shoff", "I"),
        ("e_flags", "I"),
        ("e_ehsize", "H"),
        ("e_phentsize", "H"),
        ("e_phnum", "H"),
        ("e_shentsize", "H"),
        ("e_shnum", "H"),
        ("e_shstrndx", "H"),
    ),
)

ELF64_EHDR = RecordLayout(
    "Elf64_Ehdr",
    (
        ("e_ident", "16s"),
        ("e_type", "H"),
        ("e_machine", "H"),
        ("e_version", "I"),
        ("e_entry", "Q"),
        ("e_phoff", "Q"),
        ("e_shoff", "Q"),
        ("e_flags", "I"),
        ("e_ehsize", "H"),
        ("e_phentsize", "H"),
        ("e_phnum", "H"),
        ("e_shentsize", "H"),
        ("e_shnum", "H"),
        ("e_shstrndx", "H"),
    ),
)

ELF32_PHDR = RecordLayout(
    "Elf32_Phdr",
    (
        ("p_type", "I"),
        ("p_offset", "I"),
        ("p_vaddr", "I"),
        ("p_paddr", "I"),
        ("p_filesz", "I"),
        ("p_memsz", "I"),
        ("p_flags", "I"),
        ("p_align", "I"),
    ),
)

# p_flags moves up next to p_type in the 64-bit layout
ELF64_PHDR = RecordLayout(
    "Elf64_Phdr",
    (
        ("p_type", "I"),
        ("p_flags", "I"),
        ("p_offset", "Q"),
        ("p_vaddr", "Q"),
        ("p_paddr", "Q"),
        ("p_filesz", "Q"),
        ("p_memsz", "Q"),
        ("p_align", "Q"),
    ),
)


@dataclass(frozen=True)
class ElfLayout:
    """Header and program-header record layouts for one address width."""

    address_width: int
    header: RecordLayout
    program_header: RecordLayout

    @property
    def header_size(self) -> int:
        return self.header.size

    @property
    def entry_size(self) -> int:
        return self.program_header.size


LAYOUT32 = ElfLayout(32, ELF32_EHDR, ELF32_PHDR)
LAYOUT64 = ElfLayout(64, ELF64_EHDR, ELF64_PHDR)

LAYOUTS: dict[int, ElfLayout] = {32: LAYOUT32, 64: LAYOUT64}


def layout_for(identity: ElfIdentity) -> ElfLayout:
    """Select the record layouts matching a detected identity."""
    return LAYOUTS[identity.address_width]


# ---------------------------------------------------------------------------
# Decoded records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ElfHeader:
    """Decoded ELF header plus what is needed to write it back unchanged."""

    identity: ElfIdentity
    layout: ElfLayout
    values: dict[str, int | bytes]

    @property
    def phoff(self) -> int:
        return self.values["e_phoff"]

    @property
    def phnum(self) -> int:
        return self.values["e_phnum"]

    @property
    def entry_size(self) -> int:
        return self.layout.entry_size

    def entry_offset(self, index: int) -> int:
        """Absolute file offset of program-header entry ``index``."""
        return self.phoff + index * self.entry_size

    def to_bytes(self) -> bytes:
        return self.layout.header.encode(self.values, self.identity.byte_order)


@dataclass(frozen=True)
class ProgramHeaderEntry:
    """One decoded program-header table entry and its table position."""

    index: int
    identity: ElfIdentity
    layout: ElfLayout
    values: dict[str, int | bytes]

    @property
    def file_offset(self) -> int:
        return self.values["p_offset"]

    @property
    def file_size(self) -> int:
        return self.values["p_filesz"]

    @property
    def flags(self) -> int:
        return self.values["p_flags"]

    @property
    def segment_class(self) -> SegmentClass:
        return classify(self.flags)

    @property
    def is_hash(self) -> bool:
        return self.segment_class is SegmentClass.HASH

    def to_bytes(self) -> bytes:
        return self.layout.program_header.encode(self.values, self.identity.byte_order)


# ---------------------------------------------------------------------------
# Readers
# ---------------------------------------------------------------------------


def read_header(f: BinaryIO, identity: ElfIdentity) -> ElfHeader:
    """Read and decode the ELF header at offset 0."""
    layout = layout_for(identity)
    raw = read_at(f, 0, layout.header_size)
    header = ElfHeader(
        identity=identity,
        layout=layout,
        values=layout.header.decode(raw, identity.byte_order),
    )
    log.debug(
        "%s: phoff=0x%x phnum=%d entry_size=%d",
        layout.header.name, header.phoff, header.phnum, header.entry_size,
    )
    return header


def read_program_headers(f: BinaryIO, header: ElfHeader) -> list[ProgramHeaderEntry]:
    """Read all ``phnum`` program-header entries starting at ``phoff``."""
    layout = header.layout
    entries: list[ProgramHeaderEntry] = []
    for i in range(header.phnum):
        raw = read_at(f, header.entry_offset(i), header.entry_size)
        entry = ProgramHeaderEntry(
            index=i,
            identity=header.identity,
            layout=layout,
            values=layout.program_header.decode(raw, header.identity.byte_order),
        )
        log.debug(
            "[%d] offset=0x%08x size=0x%x flags=0x%08x %s",
            i, entry.file_offset, entry.file_size, entry.flags,
            entry.segment_class.value,
        )
        entries.append(entry)
    return entries


def read_elf(f: BinaryIO) -> tuple[ElfHeader, list[ProgramHeaderEntry]]:
    """Detect, then decode the header and the full program-header table."""
    identity = detect_elf_format(f)
    header = read_header(f, identity)
    return header, read_program_headers(f, header)


def write_headers(f: BinaryIO, header: ElfHeader, entries: list[ProgramHeaderEntry]) -> None:
    """Write the header and table back at their original absolute offsets."""
    write_at(f, 0, header.to_bytes())
    for entry in entries:
        write_at(f, header.entry_offset(entry.index), entry.to_bytes())
