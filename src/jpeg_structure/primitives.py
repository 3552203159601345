from dataclasses import dataclass

# Marker id reserved for scan-data pseudo-segments.
SCAN_DATA_MARKER_ID = 0x00
SCAN_DATA_MARKER_NAME = "!SCANDATA"


@dataclass(frozen=True)
class Segment:
    """One structural unit of a JPEG stream (or one scan-data block).

    ``offset`` points at the ``0xFF`` immediately preceding the marker id
    in the original stream; for scan data it is where the entropy-coded
    bytes begin. ``payload`` excludes the marker and any length field.
    """
    marker_id: int
    marker_name: str
    offset: int
    payload: bytes = b""

    @property
    def is_scan_data(self) -> bool:
        return self.marker_id == SCAN_DATA_MARKER_ID

    def __len__(self) -> int:
        return len(self.payload)


@dataclass(frozen=True)
class FrameHeader:
    bits_per_sample: int = 0
    height: int = 0
    width: int = 0
    component_count: int = 0

    def __str__(self) -> str:
        return (
            f"SOF<BitsPerSample=({self.bits_per_sample}) Width=({self.width}) "
            f"Height=({self.height}) ComponentCount=({self.component_count})>"
        )
