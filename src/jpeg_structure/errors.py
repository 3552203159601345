class JpegStructureError(Exception):
    """ Base class for all exception raised by this library. """
    # Partial SegmentList, attached by the reader when a scan aborts.
    segments = None


class NotAJpegError(JpegStructureError):
    """ Raised when the leading magic bytes are not those of a JPEG. """
    pass


class UnsupportedFormatError(JpegStructureError):
    """ Raised when a JPEG-2000 codestream is detected. """
    pass


class MalformedSegmentError(JpegStructureError):
    """ Raised on a missing marker prefix or an invalid length field. """
    def __init__(self, msg, offset=None, marker_id=None):
        super().__init__(msg)
        self.offset = offset
        self.marker_id = marker_id


class TruncatedPayloadError(JpegStructureError):
    """ Raised when a payload is shorter than its decoder requires. """
    def __init__(self, msg, expected=None, found=None):
        super().__init__(msg)
        self.expected = expected
        self.found = found


class StructuralInconsistencyError(JpegStructureError):
    """ Raised by SegmentList.validate(), naming the failing check. """
    def __init__(self, msg, index=None, check=None):
        super().__init__(msg)
        self.index = index
        self.check = check


class ObserverFailure(JpegStructureError):
    """ Raised when a visitor hook fails, the hook error is the cause. """
    pass


class UnterminatedStreamError(JpegStructureError):
    """ Raised by the reader when input ends before End-Of-Image. """
    pass
