"""Exception hierarchy for PIL image splitting and squashing."""

import os


class PilError(Exception):
    """Base class for every failure raised while splitting or squashing."""


class FormatError(PilError):
    """Raised when an input is not a supported ELF image or artifact path."""


class SidecarRangeError(FormatError):
    """Raised when a segment index cannot be expressed as a side-car name."""

    def __init__(self, index: int, max_index: int):
        super().__init__(
            f"Segment {index} needs a side-car file but only indices "
            f"0-{max_index} can be named"
        )
        self.index = index
        self.max_index = max_index


class TruncatedReadError(PilError):
    """Raised when fewer bytes are available than a record or segment needs."""

    def __init__(self, expected: int, actual: int, offset: int):
        super().__init__(
            f"Incomplete read: expected {expected} bytes, "
            f"got {actual} bytes at offset {offset}"
        )
        self.expected = expected
        self.actual = actual
        self.offset = offset


class ImageIOError(PilError):
    """Wraps an OSError raised while opening, seeking or writing a file."""

    def __init__(self, message: str, errno: int | None = None, filename: str | None = None):
        self.errno = errno
        self.filename = filename
        if errno is not None:
            message = f"{message} ({os.strerror(errno)})"
        super().__init__(message)


class MissingArtifactError(PilError):
    """Raised when a side-car segment file cannot be opened during squash."""

    def __init__(self, path):
        super().__init__(f"Failed to open required segment file {path}")
        self.path = path


class ConfigError(PilError):
    """Raised when a configuration file cannot be loaded."""
