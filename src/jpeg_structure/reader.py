from __future__ import annotations
import io
from pathlib import Path
from typing import BinaryIO, Optional, Union

from .errors import JpegStructureError, UnterminatedStreamError
from .logger import get_log
from .segment_list import SegmentList
from .settings import READER_SETTINGS
from .splitter import JpegSplitter, Visitor


def split_stream(f: BinaryIO, visitor: Optional[Visitor] = None, chunk_size: Optional[int] = None) -> SegmentList:
    """
    Split a JPEG read incrementally from a binary stream.

    Args:
        f: Readable binary stream positioned at the SOI marker
        visitor: Optional object implementing handle_segment and/or
            handle_frame_header
        chunk_size: Bytes read per refill (defaults to READER_SETTINGS)

    Returns:
        The SegmentList, from SOI to EOI inclusive

    Any JpegStructureError raised carries the partial list as ``segments``.
    """
    if chunk_size is None:
        chunk_size = READER_SETTINGS['chunk_size']
    if chunk_size < 1:
        raise ValueError(f"chunk_size must be positive: ({chunk_size})")

    log = get_log()
    splitter = JpegSplitter(visitor)
    window = bytearray()
    at_eof = False

    try:
        while not splitter.finished:
            advance = splitter.split(window, at_eof)
            if advance is not None:
                del window[:advance]
                continue

            if at_eof:
                raise UnterminatedStreamError(
                    f"stream ended before EOI: ({len(window)}) unconsumed bytes "
                    f"at offset ({splitter.current_offset})")

            chunk = f.read(chunk_size)
            if not chunk:
                at_eof = True
            else:
                window += chunk
                log.debug("Read chunk: (%d) bytes, window now (%d)", len(chunk), len(window))
    except JpegStructureError as e:
        e.segments = splitter.segments
        raise

    trailing = len(window) + len(f.read(1))
    if trailing:
        log.warning("Ignoring data after EOI at offset (%d)", splitter.current_offset)

    return splitter.segments


def split_bytes(data: bytes, visitor: Optional[Visitor] = None, chunk_size: Optional[int] = None) -> SegmentList:
    return split_stream(io.BytesIO(data), visitor, chunk_size)


def split_file(path: Union[str, Path], visitor: Optional[Visitor] = None, chunk_size: Optional[int] = None) -> SegmentList:
    with open(path, "rb") as f:
        return split_stream(f, visitor, chunk_size)
