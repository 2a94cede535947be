"""
Image chooser backed by a CameraAdapter and a library directory.

capture(): grabs one frame and stores it as CAPTURE_DIR/capture_<epoch-ms>.jpg.
There is no viewfinder on this service, so a capture cannot be dismissed:
it either stores a frame or raises DeviceError. Cancellation only comes
from the library picker.
select_from_library(name): resolves name inside LIBRARY_DIR. No name means
the user dismissed the picker.
"""
import asyncio
from pathlib import Path

import cv2

from ocrscan.adapters.chooser.base import ChooserAdapter
from ocrscan.orchestrator.contracts import ImageHandle, Provenance
from ocrscan.orchestrator.errors import DeviceError, UserCancelled
from ocrscan.orchestrator.naming import MillisStamp


class DeviceChooser(ChooserAdapter):
    def __init__(self, status_store, camera, capture_dir, library_dir, stamp: MillisStamp | None = None):
        self.status = status_store
        self.camera = camera
        self.capture_dir = Path(capture_dir)
        self.library_dir = Path(library_dir)
        self.stamp = stamp or MillisStamp()

    def _shoot(self):
        # one camera session per shot, like a native capture screen
        try:
            return self.camera.capture_bytes()
        finally:
            self.camera.release()

    async def capture(self) -> ImageHandle:
        frame_bytes = await asyncio.to_thread(self._shoot)
        if not frame_bytes:
            raise DeviceError("camera capture failed")
        path = self.capture_dir / f"capture_{self.stamp.next()}.jpg"
        try:
            self.capture_dir.mkdir(parents=True, exist_ok=True)
            await asyncio.to_thread(path.write_bytes, frame_bytes)
        except OSError as e:
            raise DeviceError(f"could not store capture: {e}") from e
        self.status.log(f"chooser: captured {path.name} ({len(frame_bytes)} bytes)")
        return ImageHandle(locator=str(path), provenance=Provenance.CAPTURED)

    async def select_from_library(self, locator: str | None = None) -> ImageHandle:
        if not locator:
            raise UserCancelled("no image selected")
        root = self.library_dir.resolve()
        path = (root / locator).resolve()
        if root not in path.parents:
            raise DeviceError(f"{locator} is outside the library")
        if not path.is_file():
            raise DeviceError(f"{locator} not found in library")
        img = await asyncio.to_thread(cv2.imread, str(path))
        if img is None:
            raise DeviceError(f"{locator} is not a readable image")
        self.status.log(f"chooser: selected {path.name}")
        return ImageHandle(locator=str(path), provenance=Provenance.SELECTED)
