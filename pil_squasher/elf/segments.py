"""Qualcomm PIL segment classification from program-header flags."""

from enum import Enum

# Qualcomm PIL segment type lives in p_flags bits 24-26
PIL_SEGMENT_TYPE_SHIFT = 24
PIL_SEGMENT_TYPE_MASK = 0x7
PIL_SEGMENT_TYPE_HASH = 2


class SegmentClass(Enum):
    HASH = "hash"
    ORDINARY = "ordinary"


def segment_type(flags: int) -> int:
    """Extract the 3-bit PIL segment type from ``p_flags``."""
    return (flags >> PIL_SEGMENT_TYPE_SHIFT) & PIL_SEGMENT_TYPE_MASK


def classify(flags: int) -> SegmentClass:
    """Hash segments carry type 2; no other flag bits are interpreted."""
    if segment_type(flags) == PIL_SEGMENT_TYPE_HASH:
        return SegmentClass.HASH
    return SegmentClass.ORDINARY
