import cv2
import numpy as np
import pytest

# SOI
SOI = b"\xFF\xD8"
# APP0, length 16 (14 bytes of JFIF payload)
APP0_PAYLOAD = (
    b"JFIF\x00"  # Identifier
    b"\x01\x02"  # Version 1.2
    b"\x00"      # Units: no units
    b"\x00\x01"  # X density: 1
    b"\x00\x01"  # Y density: 1
    b"\x00"      # X thumbnail: 0
    b"\x00"      # Y thumbnail: 0
)
APP0 = b"\xFF\xE0\x00\x10" + APP0_PAYLOAD
# SOF0, length 17: 8 bit, 16 high, 32 wide, 3 components
SOF0_PAYLOAD = (
    b"\x08"
    b"\x00\x10"
    b"\x00\x20"
    b"\x03"
    b"\x01\x22\x00"
    b"\x02\x11\x01"
    b"\x03\x11\x01"
)
SOF0 = b"\xFF\xC0\x00\x11" + SOF0_PAYLOAD
SOS = b"\xFF\xDA"
# The SOS header travels with the scan data.
SCAN_DATA = (
    b"\x00\x0C\x03\x01\x00\x02\x11\x03\x11\x00\x3F\x00"
    b"\x12\x34\xFF\x00\x56"
)
EOI = b"\xFF\xD9"

SAMPLE_JPEG = SOI + APP0 + SOF0 + SOS + SCAN_DATA + EOI


@pytest.fixture
def sample_jpeg():
    """Hand-built baseline JPEG: SOI APP0 SOF0 SOS <scan> EOI."""
    return SAMPLE_JPEG


@pytest.fixture
def encoded_jpeg():
    """A real 64x48 colour JPEG produced by OpenCV."""
    ramp = np.tile(np.arange(64, dtype=np.uint8) * 4, (48, 1))
    image = np.dstack([ramp, ramp[::-1], np.full_like(ramp, 128)])
    ok, buffer = cv2.imencode(".jpg", image)
    assert ok
    return buffer.tobytes()


@pytest.fixture
def encoded_gray_jpeg():
    """A real 40x24 grayscale JPEG produced by OpenCV."""
    ramp = np.tile(np.arange(40, dtype=np.uint8) * 6, (24, 1))
    ok, buffer = cv2.imencode(".jpg", ramp)
    assert ok
    return buffer.tobytes()


class RecordingVisitor:
    """Records every callback made by the splitter."""

    def __init__(self):
        self.calls = []
        self.frame_headers = []

    def handle_segment(self, marker_id, marker_name, counter, is_scan_data):
        self.calls.append((marker_id, marker_name, counter, is_scan_data))

    def handle_frame_header(self, frame_header):
        self.frame_headers.append(frame_header)


@pytest.fixture
def visitor():
    return RecordingVisitor()
