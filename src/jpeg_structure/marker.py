# --------------------------------------------------------------
# |length class      |markers                                   |
# --------------------------------------------------------------
# |IMPLICIT          |SOI, EOI, SOS, RST0-7, TEM, 0x00, J2C     |
# |                  |standalone (0x30-0x3F, 0x4F, 0x92, 0x93)  |
# |EXTENDED_BE32     |J2C extensions 0x74, 0x75, 0x77           |
# |STANDARD_BE16     |everything else                           |
# --------------------------------------------------------------
# STANDARD_BE16 lengths count the two length bytes themselves.
# SOS is IMPLICIT here: its header is left in the scan-data block.
from __future__ import annotations
import enum
import io

from .errors import TruncatedPayloadError
from .primitives import FrameHeader

MARKER_PREFIX = 0xFF

MARKER_SOI = 0xD8
MARKER_EOI = 0xD9
MARKER_SOS = 0xDA
MARKER_SOD = 0x93
MARKER_DQT = 0xDB
MARKER_APP0 = 0xE0
MARKER_APP1 = 0xE1
MARKER_APP2 = 0xE2
MARKER_APP3 = 0xE3
MARKER_APP4 = 0xE4
MARKER_APP5 = 0xE5
MARKER_APP6 = 0xE6
MARKER_APP7 = 0xE7
MARKER_APP8 = 0xE8
MARKER_APP10 = 0xEA
MARKER_APP12 = 0xEC
MARKER_APP13 = 0xED
MARKER_APP14 = 0xEE
MARKER_APP15 = 0xEF
MARKER_COM = 0xFE
MARKER_CME = 0x64
MARKER_SIZ = 0x51

MARKER_DHT = 0xC4
MARKER_JPG = 0xC8
MARKER_DAC = 0xCC

MARKER_SOF0 = 0xC0
MARKER_SOF1 = 0xC1
MARKER_SOF2 = 0xC2
MARKER_SOF3 = 0xC3
MARKER_SOF5 = 0xC5
MARKER_SOF6 = 0xC6
MARKER_SOF7 = 0xC7
MARKER_SOF9 = 0xC9
MARKER_SOF10 = 0xCA
MARKER_SOF11 = 0xCB
MARKER_SOF13 = 0xCD
MARKER_SOF14 = 0xCE
MARKER_SOF15 = 0xCF

JPEG_MAGIC_STANDARD = bytes((MARKER_PREFIX, MARKER_SOI, MARKER_PREFIX))
JPEG_MAGIC_2000 = bytes((MARKER_PREFIX, 0x4F, MARKER_PREFIX))

FRAME_HEADER_SIZE = 6


class LengthClass(enum.Enum):
    IMPLICIT = 0
    EXTENDED_BE32 = 4
    STANDARD_BE16 = 2

    @property
    def field_size(self) -> int:
        return self.value


MARKER_NAMES = {
    MARKER_SOI: "SOI",
    MARKER_EOI: "EOI",
    MARKER_SOS: "SOS",
    MARKER_SOD: "SOD",
    MARKER_DQT: "DQT",
    MARKER_APP0: "APP0",
    MARKER_APP1: "APP1",
    MARKER_APP2: "APP2",
    MARKER_APP3: "APP3",
    MARKER_APP4: "APP4",
    MARKER_APP5: "APP5",
    MARKER_APP6: "APP6",
    MARKER_APP7: "APP7",
    MARKER_APP8: "APP8",
    MARKER_APP10: "APP10",
    MARKER_APP12: "APP12",
    MARKER_APP13: "APP13",
    MARKER_APP14: "APP14",
    MARKER_APP15: "APP15",
    MARKER_COM: "COM",
    MARKER_CME: "CME",
    MARKER_SIZ: "SIZ",

    MARKER_DHT: "DHT",
    MARKER_JPG: "JPG",
    MARKER_DAC: "DAC",

    MARKER_SOF0: "SOF0",
    MARKER_SOF1: "SOF1",
    MARKER_SOF2: "SOF2",
    MARKER_SOF3: "SOF3",
    MARKER_SOF5: "SOF5",
    MARKER_SOF6: "SOF6",
    MARKER_SOF7: "SOF7",
    MARKER_SOF9: "SOF9",
    MARKER_SOF10: "SOF10",
    MARKER_SOF11: "SOF11",
    MARKER_SOF13: "SOF13",
    MARKER_SOF14: "SOF14",
    MARKER_SOF15: "SOF15",
}

_IMPLICIT_MARKERS = (
    [0x00, 0x01]
    + list(range(0xD0, 0xD8))  # RST0-7
    + [MARKER_SOI, MARKER_EOI, MARKER_SOS]
    + list(range(0x30, 0x40))  # J2C
    + [0x4F, 0x92, MARKER_SOD]
)

MARKER_LENGTH_CLASSES = {marker: LengthClass.IMPLICIT for marker in _IMPLICIT_MARKERS}
MARKER_LENGTH_CLASSES.update({
    # J2C extensions
    0x74: LengthClass.EXTENDED_BE32,
    0x75: LengthClass.EXTENDED_BE32,
    0x77: LengthClass.EXTENDED_BE32,
})

SOF_MARKERS = frozenset(
    marker for marker in range(MARKER_SOF0, MARKER_SOF15 + 1)
    if marker not in (MARKER_DHT, MARKER_JPG, MARKER_DAC)
)

_MARKER_IDS_BY_NAME = {name: marker for marker, name in MARKER_NAMES.items()}


def marker_name(marker: int) -> str:
    return MARKER_NAMES.get(marker, "")


def length_class(marker: int) -> LengthClass:
    return MARKER_LENGTH_CLASSES.get(marker, LengthClass.STANDARD_BE16)


def is_sof(marker: int) -> bool:
    return marker in SOF_MARKERS


def marker_id_by_name(name: str) -> int:
    """Resolve a display name (``"APP1"``) or hex literal (``"0xe1"``)."""
    upper = name.upper()
    if upper in _MARKER_IDS_BY_NAME:
        return _MARKER_IDS_BY_NAME[upper]
    try:
        marker = int(name, 16)
    except ValueError:
        raise KeyError(f"Unknown marker: {name}") from None
    if not 0 <= marker <= 0xFF:
        raise KeyError(f"Marker out of range: {name}")
    return marker


def read_u8(f) -> int:
    byte = f.read(1)
    if len(byte) != 1:
        raise TruncatedPayloadError("Unexpected length while reading 1 byte", expected=1, found=len(byte))
    return byte[0]


def read_u16(f) -> int:
    bytes_read = f.read(2)
    if len(bytes_read) != 2:
        raise TruncatedPayloadError("Unexpected length while reading 2 bytes", expected=2, found=len(bytes_read))
    return (bytes_read[0] << 8) | bytes_read[1]


def parse_frame_header(payload: bytes) -> FrameHeader:
    """Decode the fixed part of a Start-Of-Frame payload.

    Only the first six bytes are read; the per-component entries which
    follow are left untouched. Values are not range-checked.
    """
    if len(payload) < FRAME_HEADER_SIZE:
        raise TruncatedPayloadError(
            f"frame header needs {FRAME_HEADER_SIZE} bytes, got {len(payload)}",
            expected=FRAME_HEADER_SIZE, found=len(payload))

    f = io.BytesIO(payload)
    # Precision: 1 byte (bits per sample, usually 8)
    bits_per_sample = read_u8(f)
    # Height: 2 bytes
    height = read_u16(f)
    # Width: 2 bytes
    width = read_u16(f)
    # Number of components: 1 byte
    component_count = read_u8(f)

    return FrameHeader(
        bits_per_sample=bits_per_sample,
        height=height,
        width=width,
        component_count=component_count,
    )
