ERR_CAPABILITY_DENIED = "CAPABILITY_DENIED"
ERR_DEVICE = "DEVICE_ERROR"
ERR_WRITE = "WRITE_FAILED"
ERR_SHARE = "SHARE_FAILED"
ERR_NO_RECORD = "NO_RECORD"
ERR_NO_TEXT = "NO_TEXT"
ERR_NOT_CAPTURED = "NOT_CAPTURED"
ERR_UNKNOWN = "UNKNOWN"


class ScanError(Exception):
    code = ERR_UNKNOWN


class UserCancelled(ScanError):
    """Raised by a chooser when the user backs out. Never shown to the user."""


class DeviceError(ScanError):
    code = ERR_DEVICE


class RecognitionFailed(ScanError):
    pass


class PositioningUnavailable(ScanError):
    pass


class WriteFailed(ScanError):
    code = ERR_WRITE


class ShareFailed(ScanError):
    code = ERR_SHARE
