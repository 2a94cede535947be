"""
OpenCV document camera.

CAMERA_INDEX selects the device (default 0). CAMERA_WIDTH / CAMERA_HEIGHT
request a capture resolution; OCR reads small print far better at 1080p than
at the 640x480 most webcams open with.
"""
import os
import cv2
from ocrscan.adapters.camera.base import CameraAdapter

# auto-exposure needs a few frames after the device opens
WARMUP_FRAMES = 5


class CV2Camera(CameraAdapter):
    def __init__(self, status_store, index: int | None = None, jpeg_quality: int = 92):
        self.status = status_store
        self.index = index if index is not None else int(os.getenv("CAMERA_INDEX", "0"))
        self.size = (int(os.getenv("CAMERA_WIDTH", "1920")), int(os.getenv("CAMERA_HEIGHT", "1080")))
        self.jpeg_quality = jpeg_quality
        self._device = None

    def _device_ready(self) -> bool:
        if self._device is not None and self._device.isOpened():
            return True
        device = cv2.VideoCapture(self.index)
        if not device.isOpened():
            self.status.log(f"cv2_camera: cannot open device {self.index}")
            return False
        device.set(cv2.CAP_PROP_FRAME_WIDTH, self.size[0])
        device.set(cv2.CAP_PROP_FRAME_HEIGHT, self.size[1])
        for _ in range(WARMUP_FRAMES):
            device.grab()
        self._device = device
        w = int(device.get(cv2.CAP_PROP_FRAME_WIDTH))
        h = int(device.get(cv2.CAP_PROP_FRAME_HEIGHT))
        self.status.log(f"cv2_camera: device {self.index} open at {w}x{h}")
        return True

    def capture_bytes(self) -> bytes | None:
        if not self._device_ready():
            return None
        grabbed, frame = self._device.read()
        if not grabbed or frame is None:
            self.status.log("cv2_camera: device returned no frame")
            return None

        # variance of the Laplacian: low values mean a blurred page
        sharpness = cv2.Laplacian(cv2.cvtColor(frame, cv2.COLOR_BGR2GRAY), cv2.CV_64F).var()
        self.status.log(f"cv2_camera: frame {frame.shape[1]}x{frame.shape[0]} sharpness={sharpness:.0f}")

        encoded, buf = cv2.imencode(".jpg", frame, [cv2.IMWRITE_JPEG_QUALITY, self.jpeg_quality])
        return buf.tobytes() if encoded else None

    def release(self):
        if self._device is not None:
            self._device.release()
            self._device = None
            self.status.log(f"cv2_camera: device {self.index} released")
