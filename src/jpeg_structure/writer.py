from __future__ import annotations
import struct
from pathlib import Path
from typing import BinaryIO, Iterable, Union

from .errors import MalformedSegmentError
from .logger import get_log
from .marker import MARKER_PREFIX, LengthClass, length_class
from .primitives import Segment


def encode_segment(segment: Segment) -> bytes:
    """Re-emit one segment as it appears in a JPEG stream."""
    if segment.is_scan_data:
        return segment.payload

    marker = bytes((MARKER_PREFIX, segment.marker_id))
    size_class = length_class(segment.marker_id)

    if size_class is LengthClass.IMPLICIT:
        if segment.payload:
            raise MalformedSegmentError(
                f"marker (0x{segment.marker_id:02x}) carries no length but has a payload",
                offset=segment.offset, marker_id=segment.marker_id)
        return marker

    if size_class is LengthClass.EXTENDED_BE32:
        length = len(segment.payload) + 4
        if length > 0xFFFFFFFF:
            raise MalformedSegmentError(
                f"payload too large for a four-byte length: ({len(segment.payload)})",
                offset=segment.offset, marker_id=segment.marker_id)
        return marker + struct.pack(">I", length) + segment.payload

    # The length includes its own two bytes.
    length = len(segment.payload) + 2
    if length > 0xFFFF:
        raise MalformedSegmentError(
            f"payload too large for a two-byte length: ({len(segment.payload)})",
            offset=segment.offset, marker_id=segment.marker_id)
    return marker + struct.pack(">H", length) + segment.payload


def write_segments(segments: Iterable[Segment], f: BinaryIO) -> int:
    """Write segments to a binary stream, returning the byte count."""
    written = 0
    for segment in segments:
        written += f.write(encode_segment(segment))
    return written


def segments_to_bytes(segments: Iterable[Segment]) -> bytes:
    return b"".join(encode_segment(segment) for segment in segments)


def write_file(segments: Iterable[Segment], path: Union[str, Path]) -> int:
    with open(path, "wb") as f:
        written = write_segments(segments, f)
    get_log().info("Wrote (%d) bytes to %s", written, path)
    return written
