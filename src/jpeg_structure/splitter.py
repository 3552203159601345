from __future__ import annotations
import struct
from typing import Optional, Protocol, Union

from .errors import (
    MalformedSegmentError, NotAJpegError, ObserverFailure, UnsupportedFormatError,
)
from .logger import get_log
from .marker import (
    JPEG_MAGIC_2000, JPEG_MAGIC_STANDARD, MARKER_EOI, MARKER_PREFIX, MARKER_SOS,
    LengthClass, is_sof, length_class, marker_name, parse_frame_header,
)
from .primitives import (
    SCAN_DATA_MARKER_ID, SCAN_DATA_MARKER_NAME, FrameHeader, Segment,
)
from .segment_list import SegmentList

SCAN_DATA_TERMINATOR = bytes((MARKER_PREFIX, MARKER_EOI))


class SegmentVisitor(Protocol):
    def handle_segment(self, marker_id: int, marker_name: str, counter: int, is_scan_data: bool) -> None:
        ...


class FrameHeaderVisitor(Protocol):
    def handle_frame_header(self, frame_header: FrameHeader) -> None:
        ...


Visitor = Union[SegmentVisitor, FrameHeaderVisitor]


class JpegSplitter:
    """Re-entrant splitter turning a chunked JPEG stream into segments.

    Feed ``split()`` the bytes available so far, starting at the first
    unconsumed byte. It returns ``None`` when the window does not yet
    hold a complete segment (nothing is consumed), or the number of bytes
    to drop from the front of the window. Every call either consumes a
    whole segment or nothing, so chunk boundaries never affect the result.

    The optional visitor may implement ``handle_segment`` and/or
    ``handle_frame_header``; both are looked up once, here.
    """

    def __init__(self, visitor: Optional[Visitor] = None):
        self._last_marker_id = 0
        self._last_marker_name = ""
        self._counter = 0
        self._last_is_scan_data = False
        self._finished = False

        self._current_offset = 0
        self._segments = SegmentList()

        self._segment_hook = getattr(visitor, "handle_segment", None)
        self._frame_header_hook = getattr(visitor, "handle_frame_header", None)
        self.log = get_log()

    @property
    def segments(self) -> SegmentList:
        return self._segments

    @property
    def marker_id(self) -> int:
        return self._last_marker_id

    @property
    def marker_name(self) -> str:
        return self._last_marker_name

    @property
    def counter(self) -> int:
        return self._counter

    @property
    def is_scan_data(self) -> bool:
        return self._last_is_scan_data

    @property
    def current_offset(self) -> int:
        return self._current_offset

    @property
    def finished(self) -> bool:
        return self._finished

    def split(self, data, at_eof: bool = False) -> Optional[int]:
        """Consume at most one segment from the front of ``data``.

        ``at_eof`` is informational: whether ``None`` after the source is
        exhausted means a truncated stream is for the caller to decide.
        """
        data_length = len(data)
        self.log.debug("SPLIT: LEN=(%d) COUNTER=(%d) EOF=(%s)", data_length, self._counter, at_eof)

        if data_length == 0:
            return None

        if self._counter == 0:
            # Verify magic bytes.
            if data_length < 3:
                self.log.debug("Not enough data for the magic bytes")
                return None

            magic = bytes(data[:3])
            if magic == JPEG_MAGIC_2000:
                raise UnsupportedFormatError("JPEG2000 not supported")
            if magic != JPEG_MAGIC_STANDARD:
                raise NotAJpegError(
                    "file does not look like a JPEG: ({:02X}) ({:02X}) ({:02X})".format(*magic))

        # If the last segment was the SOS we're sitting on scan data.
        if self._last_marker_id == MARKER_SOS:
            return self._split_scan_data(data)

        return self._split_marker(data)

    def _split_scan_data(self, data) -> Optional[int]:
        # Always searched from the window start, a refill rescans the
        # remainder rather than resuming a partial search.
        haystack = data if isinstance(data, (bytes, bytearray)) else bytes(data)
        i = haystack.find(SCAN_DATA_TERMINATOR)
        if i < 0:
            self.log.debug("Not enough data to find the end of the scan-data")
            return None

        self._last_is_scan_data = True
        self._last_marker_id = 0
        self._last_marker_name = ""

        self.log.debug("End of scan-data: (%d) bytes", i)

        # Scan data isn't a structural segment, the counter is unchanged.
        segment = Segment(
            marker_id=SCAN_DATA_MARKER_ID,
            marker_name=SCAN_DATA_MARKER_NAME,
            offset=self._current_offset,
            payload=bytes(haystack[:i]),
        )
        self._segments.append(segment)
        self._current_offset += i
        self._dispatch(segment)

        # The EOI itself is left for the next call.
        return i

    def _split_marker(self, data) -> Optional[int]:
        data_length = len(data)

        if data[0] != MARKER_PREFIX:
            raise MalformedSegmentError(
                f"not on new segment marker: ({data[0]:02X}) at offset ({self._current_offset})",
                offset=self._current_offset)

        # Fill bytes before the marker id are legal.
        i = 0
        while i < data_length and data[i] == MARKER_PREFIX:
            i += 1

        if i >= data_length:
            self.log.debug("Not enough data past the fill bytes")
            return None

        self.log.debug("Skipped leading 0xFF bytes: (%d)", i)

        # Offset of the 0xFF right before the marker id.
        offset = self._current_offset + i - 1
        marker_id = data[i]
        # FF 00 is a stuffed byte inside scan data, never a marker.
        if marker_id == SCAN_DATA_MARKER_ID:
            raise MalformedSegmentError(
                f"stuffed byte (FF00) outside of scan data at offset ({offset})",
                offset=offset, marker_id=marker_id)

        name = marker_name(marker_id)
        size_class = length_class(marker_id)
        self.log.debug("MARKER-ID=(0x%02x) NAME=(%s) LENGTH-CLASS=(%s)", marker_id, name, size_class.name)

        i += 1

        if size_class is LengthClass.IMPLICIT:
            header_size = 2
            payload_length = 0
        elif size_class is LengthClass.EXTENDED_BE32:
            if i + 4 > data_length:
                self.log.debug("Not enough data for a four-byte length")
                return None

            (length,) = struct.unpack_from(">I", data, i)
            header_size = 2 + 4
            payload_length = length - 4
            i += 4
        else:
            if i + 2 > data_length:
                self.log.debug("Not enough data for a two-byte length")
                return None

            (length,) = struct.unpack_from(">H", data, i)
            if length <= 2:
                raise MalformedSegmentError(
                    f"length of size read for marker (0x{marker_id:02x}) at offset ({offset}) "
                    f"is unexpectedly not more than two: ({length})",
                    offset=offset, marker_id=marker_id)

            # The length includes its own two bytes.
            header_size = 2 + 2
            payload_length = length - 2
            i += 2

        if payload_length < 0:
            raise MalformedSegmentError(
                f"payload length less than zero for marker (0x{marker_id:02x}) "
                f"at offset ({offset}): ({payload_length})",
                offset=offset, marker_id=marker_id)

        end = i + payload_length
        if end > data_length:
            self.log.debug("Not enough data for the payload: (%d) > (%d)", end, data_length)
            return None

        self.log.debug("Found whole segment: HEADER=(%d) PAYLOAD=(%d)", header_size, payload_length)

        segment = Segment(
            marker_id=marker_id,
            marker_name=name,
            offset=offset,
            payload=bytes(data[i:end]),
        )
        self._segments.append(segment)
        self._current_offset += end
        self._counter += 1
        self._last_is_scan_data = False
        self._last_marker_id = marker_id
        self._last_marker_name = name
        if marker_id == MARKER_EOI:
            self._finished = True

        self._dispatch(segment)

        return end

    def _dispatch(self, segment: Segment) -> None:
        if self._segment_hook is not None:
            try:
                self._segment_hook(
                    segment.marker_id, segment.marker_name, self._counter, self._last_is_scan_data)
            except Exception as e:
                raise ObserverFailure(
                    f"segment visitor failed on ({segment.marker_name or hex(segment.marker_id)}) "
                    f"at offset ({segment.offset}): {e}") from e

        if self._frame_header_hook is not None and is_sof(segment.marker_id):
            frame_header = parse_frame_header(segment.payload)
            self.log.debug("Frame header: %s", frame_header)
            try:
                self._frame_header_hook(frame_header)
            except Exception as e:
                raise ObserverFailure(
                    f"frame header visitor failed at offset ({segment.offset}): {e}") from e
