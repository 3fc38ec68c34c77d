import io

import pytest

from pil_squasher.elf.ident import ElfIdentity, detect_elf_format, parse_identity
from pil_squasher.errors import FormatError


def _ident(elf_class=1, elf_data=1, magic=b"\x7fELF"):
    return (magic + bytes([elf_class, elf_data, 1])).ljust(16, b"\x00")


@pytest.mark.parametrize(
    "elf_class, elf_data, expected",
    [
        (1, 1, ElfIdentity(32, "little")),
        (1, 2, ElfIdentity(32, "big")),
        (2, 1, ElfIdentity(64, "little")),
        (2, 2, ElfIdentity(64, "big")),
    ],
)
def test_parse_identity(elf_class, elf_data, expected):
    assert parse_identity(_ident(elf_class, elf_data)) == expected


@pytest.mark.parametrize("magic", [b"\x7fELG", b"MZ\x90\x00", b"\x00\x00\x00\x00", b"ELF\x7f"])
def test_bad_magic_rejected_regardless_of_rest(magic):
    with pytest.raises(FormatError, match="Not a valid ELF"):
        parse_identity(_ident(magic=magic))


@pytest.mark.parametrize("elf_class", [0, 3, 0xFF])
def test_unsupported_class(elf_class):
    with pytest.raises(FormatError, match="Unsupported ELF class"):
        parse_identity(_ident(elf_class=elf_class))


@pytest.mark.parametrize("elf_data", [0, 3, 0x80])
def test_unknown_data_encoding(elf_data):
    with pytest.raises(FormatError, match="Unknown ELF data encoding"):
        parse_identity(_ident(elf_data=elf_data))


def test_detect_seeks_to_start():
    f = io.BytesIO(_ident(2, 2) + b"\x00" * 64)
    f.seek(40)
    assert detect_elf_format(f) == ElfIdentity(64, "big")


def test_detect_short_file_is_not_elf():
    with pytest.raises(FormatError):
        detect_elf_format(io.BytesIO(b"\x7fELF\x01"))
