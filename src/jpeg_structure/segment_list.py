from __future__ import annotations
from typing import List, Optional

from .errors import StructuralInconsistencyError
from .marker import MARKER_EOI, MARKER_PREFIX, MARKER_SOI
from .primitives import Segment


class SegmentList(list):
    """Ordered segments of one JPEG stream, in emission order."""

    def find(self, marker_id: int) -> Optional[Segment]:
        for segment in self:
            if segment.marker_id == marker_id:
                return segment
        return None

    def find_all(self, marker_id: int) -> List[Segment]:
        return [segment for segment in self if segment.marker_id == marker_id]

    def describe(self) -> List[str]:
        if len(self) == 0:
            return ["No segments."]

        lines = []
        for i, s in enumerate(self):
            lines.append(
                f"{i:2d}: ID=(0x{s.marker_id:02x}) {s.marker_name or '?':<10} "
                f"OFFSET=(0x{s.offset:08x} {s.offset}) LENGTH=({len(s.payload)})"
            )
        return lines

    def validate(self, data: bytes) -> None:
        """Check the list against the stream it was split from.

        Raises StructuralInconsistencyError naming the failing segment
        index and check:

        - ``count``: fewer than two segments
        - ``first``: first segment is not SOI
        - ``last``: last segment is not EOI
        - ``order``: offsets not strictly increasing
        - ``marker``: the bytes at a segment offset are not FF <marker id>
        """
        if len(self) < 2:
            raise StructuralInconsistencyError(
                f"minimum segments not found: ({len(self)})", index=len(self), check="count")

        if self[0].marker_id != MARKER_SOI:
            raise StructuralInconsistencyError(
                f"first segment not SOI: (0x{self[0].marker_id:02x})", index=0, check="first")

        last_index = len(self) - 1
        if self[last_index].marker_id != MARKER_EOI:
            raise StructuralInconsistencyError(
                f"last segment not EOI: (0x{self[last_index].marker_id:02x})",
                index=last_index, check="last")

        last_offset = None
        for i, s in enumerate(self):
            if last_offset is not None and s.offset <= last_offset:
                raise StructuralInconsistencyError(
                    f"segment offset not greater than the last: SEGMENT=({i}) "
                    f"(0x{s.offset:08x}) <= (0x{last_offset:08x})",
                    index=i, check="order")
            last_offset = s.offset

            # The scan-data doesn't start with a marker.
            if s.is_scan_data:
                continue

            found = bytes(data[s.offset:s.offset + 2])
            if found != bytes((MARKER_PREFIX, s.marker_id)):
                raise StructuralInconsistencyError(
                    f"segment offset does not point to the start of a segment: "
                    f"SEGMENT=({i}) (0x{s.offset:08x}) expected FF{s.marker_id:02X} "
                    f"found {found.hex().upper() or 'nothing'}",
                    index=i, check="marker")
