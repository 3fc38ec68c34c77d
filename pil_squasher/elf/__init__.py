"""ELF identification, header/program-header decoding and PIL segment typing."""

from .headers import (
    ELF32_EHDR,
    ELF32_PHDR,
    ELF64_EHDR,
    ELF64_PHDR,
    LAYOUT32,
    LAYOUT64,
    ElfHeader,
    ElfLayout,
    ProgramHeaderEntry,
    RecordLayout,
    layout_for,
    read_elf,
    read_header,
    read_program_headers,
    write_headers,
)
from .ident import ELF_MAGIC, ElfIdentity, detect_elf_format, parse_identity
from .segments import SegmentClass, classify, segment_type

__all__ = [
    # Identification
    "ELF_MAGIC",
    "ElfIdentity",
    "detect_elf_format",
    "parse_identity",
    # Headers
    "ELF32_EHDR",
    "ELF32_PHDR",
    "ELF64_EHDR",
    "ELF64_PHDR",
    "LAYOUT32",
    "LAYOUT64",
    "ElfHeader",
    "ElfLayout",
    "ProgramHeaderEntry",
    "RecordLayout",
    "layout_for",
    "read_elf",
    "read_header",
    "read_program_headers",
    "write_headers",
    # Segments
    "SegmentClass",
    "classify",
    "segment_type",
]
