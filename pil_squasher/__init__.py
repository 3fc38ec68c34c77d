"""PIL Squasher - split and reassemble Qualcomm peripheral firmware images."""

from . import elf
from .config import PilConfig, load_config
from .errors import (
    ConfigError,
    FormatError,
    ImageIOError,
    MissingArtifactError,
    PilError,
    SidecarRangeError,
    TruncatedReadError,
)
from .image import ImageSummary, SegmentSummary, describe_image
from .split import split
from .squash import squash

__all__ = [
    # Config
    "PilConfig",
    "load_config",
    # Errors
    "PilError",
    "FormatError",
    "SidecarRangeError",
    "TruncatedReadError",
    "ImageIOError",
    "MissingArtifactError",
    "ConfigError",
    # Operations
    "split",
    "squash",
    "describe_image",
    "ImageSummary",
    "SegmentSummary",
    # ELF subpackage
    "elf",
]
