"""ELF identification: magic, address width and byte order."""

import logging
from dataclasses import dataclass
from typing import BinaryIO

from ..errors import FormatError

log = logging.getLogger(__name__)

EI_NIDENT = 16
EI_CLASS = 4
EI_DATA = 5

ELF_MAGIC = b"\x7fELF"

ELFCLASS32 = 1
ELFCLASS64 = 2
ELFDATA2LSB = 1
ELFDATA2MSB = 2

_CLASS_TO_WIDTH: dict[int, int] = {ELFCLASS32: 32, ELFCLASS64: 64}
_DATA_TO_ORDER: dict[int, str] = {ELFDATA2LSB: "little", ELFDATA2MSB: "big"}


@dataclass(frozen=True)
class ElfIdentity:
    """Address width and byte order declared by an image's e_ident block."""

    address_width: int  # 32 or 64
    byte_order: str  # "little" or "big"


def parse_identity(ident: bytes) -> ElfIdentity:
    """Decode a 16-byte identification block."""
    if ident[: len(ELF_MAGIC)] != ELF_MAGIC:
        raise FormatError("Not a valid ELF image")

    elf_class = ident[EI_CLASS]
    if elf_class not in _CLASS_TO_WIDTH:
        raise FormatError(f"Unsupported ELF class {elf_class}")

    elf_data = ident[EI_DATA]
    if elf_data not in _DATA_TO_ORDER:
        raise FormatError(f"Unknown ELF data encoding {elf_data}")

    return ElfIdentity(
        address_width=_CLASS_TO_WIDTH[elf_class],
        byte_order=_DATA_TO_ORDER[elf_data],
    )


def detect_elf_format(f: BinaryIO) -> ElfIdentity:
    """Read the identification block from the start of ``f``."""
    f.seek(0)
    ident = f.read(EI_NIDENT)
    if len(ident) < EI_NIDENT:
        # too short to carry class/data bytes, so it cannot be an image
        raise FormatError("Not a valid ELF image")

    identity = parse_identity(ident)
    log.debug(
        "Detected ELF%d %s-endian image", identity.address_width, identity.byte_order
    )
    return identity
