import threading
import time

EXPORT_PREFIX = "ocr_result_"
EXPORT_SUFFIX = ".txt"


class MillisStamp:
    """Epoch-millisecond stamps that never repeat within one process."""

    def __init__(self, clock=time.time):
        self._clock = clock
        self._last = 0
        self._lock = threading.Lock()

    def next(self) -> int:
        with self._lock:
            now = int(self._clock() * 1000)
            if now <= self._last:
                now = self._last + 1
            self._last = now
            return now


def export_filename(stamp_ms: int) -> str:
    return f"{EXPORT_PREFIX}{stamp_ms}{EXPORT_SUFFIX}"
