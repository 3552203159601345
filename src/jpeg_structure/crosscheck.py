from dataclasses import dataclass

import cv2
import numpy as np

from .errors import JpegStructureError
from .logger import get_log
from .primitives import FrameHeader


@dataclass
class CrossCheckResult:
    width: int
    height: int
    component_count: int
    reference_width: int
    reference_height: int
    reference_component_count: int

    @property
    def matches(self) -> bool:
        return (
            self.width == self.reference_width
            and self.height == self.reference_height
            and self.component_count == self.reference_component_count
        )


def decode_reference(data: bytes) -> np.ndarray:
    """
    Decode the image with OpenCV, used as ground truth.
    """
    buffer = np.frombuffer(data, dtype=np.uint8)
    image = cv2.imdecode(buffer, cv2.IMREAD_UNCHANGED)
    if image is None:
        raise JpegStructureError("OpenCV could not decode the image")
    return image


def crosscheck_frame_header(data: bytes, frame_header: FrameHeader) -> CrossCheckResult:
    """Compare a decoded frame header with OpenCV's decode of the same bytes.

    OpenCV converts CMYK/YCCK images to three channels, so four-component
    frames are reported as a mismatch.
    """
    image = decode_reference(data)

    # Grayscale decodes to (height, width), colour to (height, width, channels)
    reference_height, reference_width = image.shape[:2]
    reference_components = 1 if image.ndim == 2 else image.shape[2]

    result = CrossCheckResult(
        width=frame_header.width,
        height=frame_header.height,
        component_count=frame_header.component_count,
        reference_width=int(reference_width),
        reference_height=int(reference_height),
        reference_component_count=int(reference_components),
    )

    log = get_log()
    if result.matches:
        log.info("Frame header matches OpenCV decode: %dx%d", reference_width, reference_height)
    else:
        log.warning(
            "Frame header %dx%dx%d differs from OpenCV decode %dx%dx%d",
            result.width, result.height, result.component_count,
            result.reference_width, result.reference_height, result.reference_component_count)
    return result
