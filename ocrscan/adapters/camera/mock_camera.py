"""Mock camera: serves a sample JPEG, or a synthetic white frame when none is given."""
from pathlib import Path
import cv2
import numpy as np
from ocrscan.adapters.camera.base import CameraAdapter

class MockCamera(CameraAdapter):
    def __init__(self, status_store, sample: Path | None = None, fail: bool = False):
        self.status = status_store
        self.sample = Path(sample) if sample else None
        self.fail = fail
        self.released = False

    def capture_bytes(self) -> bytes | None:
        if self.fail:
            self.status.log("mock_camera: simulated capture failure")
            return None
        if self.sample is not None and self.sample.is_file():
            self.status.log(f"mock_camera: serving {self.sample.name}")
            return self.sample.read_bytes()
        frame = np.full((480, 640, 3), 255, dtype=np.uint8)
        ok, buf = cv2.imencode(".jpg", frame)
        if not ok:
            return None
        self.status.log("mock_camera: serving blank frame")
        return bytes(buf)

    def release(self):
        self.released = True
