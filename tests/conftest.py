"""
Shared fixtures for the ocrscan test suite.

Wires a ScanController from in-memory collaborators so the pipeline can be
driven end to end without a camera, OCR engine or GPS.
"""
import asyncio
from pathlib import Path

import pytest

from ocrscan.adapters.chooser.base import ChooserAdapter
from ocrscan.adapters.clipboard.system_clipboard import MemoryClipboard
from ocrscan.adapters.location.mock_position import MockPosition
from ocrscan.adapters.permissions.policy import GRANTED, PolicyCapabilityService
from ocrscan.adapters.recognizer.base import RecognizerAdapter
from ocrscan.adapters.recognizer.mock_recognizer import MockRecognizer
from ocrscan.adapters.share.webhook_share import LogShare
from ocrscan.adapters.storage.base import MediaWriter
from ocrscan.adapters.storage.local import GalleryWriter, LocalFileWriter
from ocrscan.orchestrator.actions import ActionGate
from ocrscan.orchestrator.capability_gate import CapabilityGate
from ocrscan.orchestrator.contracts import Capability, ImageHandle, PositionOptions, Provenance
from ocrscan.orchestrator.errors import DeviceError, UserCancelled
from ocrscan.orchestrator.pipeline import PipelineOrchestrator
from ocrscan.orchestrator.state_machine import ScanController
from ocrscan.services.status_store import StatusStore

ALL_GRANTED = {cap: GRANTED for cap in Capability}


class FakeChooser(ChooserAdapter):
    """Chooser with a scripted outcome: "image", "cancel", "error" or "crash"."""

    def __init__(self, image_path: Path, outcome: str = "image", delay_s: float = 0.0):
        self.image_path = image_path
        self.outcome = outcome
        self.delay_s = delay_s
        self.calls = 0

    async def _pick(self, provenance):
        self.calls += 1
        if self.delay_s:
            await asyncio.sleep(self.delay_s)
        if self.outcome == "cancel":
            raise UserCancelled("dismissed")
        if self.outcome == "error":
            raise DeviceError("lens blocked")
        if self.outcome == "crash":
            raise RuntimeError("driver fault")
        return ImageHandle(locator=str(self.image_path), provenance=provenance)

    async def capture(self):
        return await self._pick(Provenance.CAPTURED)

    async def select_from_library(self, locator=None):
        return await self._pick(Provenance.SELECTED)


class ScriptedRecognizer(RecognizerAdapter):
    """Returns (text, delay) pairs in call order."""

    def __init__(self, script):
        self.script = list(script)
        self.calls = 0

    async def recognize(self, image):
        text, delay = self.script[self.calls]
        self.calls += 1
        await asyncio.sleep(delay)
        return text


class RecordingMediaWriter(MediaWriter):
    def __init__(self):
        self.saved = []

    async def save(self, image):
        self.saved.append(image)


@pytest.fixture
def status():
    return StatusStore()


@pytest.fixture
def image_file(tmp_path):
    path = tmp_path / "scan.jpg"
    path.write_bytes(b"\xff\xd8\xff\xe0fake-jpeg")
    return path


@pytest.fixture
def make_controller(tmp_path, status, image_file):
    """Build a controller; keyword overrides replace individual collaborators."""

    def _make(text="INVOICE #102\nTOTAL 45.00", decisions=None, prompter=None,
              recognizer=None, position=None, chooser=None, media_writer=None,
              file_writer=None, share=None, options=None, copy_confirm_s=1.5):
        capabilities = PolicyCapabilityService(
            status,
            decisions=ALL_GRANTED if decisions is None else decisions,
            prompter=prompter,
        )
        gate = CapabilityGate(capabilities, status)
        recognizer = recognizer or MockRecognizer(status, text=text)
        position = position or MockPosition(status, latitude=40.71, longitude=-74.00)
        pipeline = PipelineOrchestrator(
            gate, position, recognizer, status,
            options=options or PositionOptions(timeout_ms=10000, max_cache_age_ms=10000),
        )
        actions = ActionGate(
            gate, status,
            media_writer=media_writer or GalleryWriter(status, tmp_path / "gallery"),
            file_writer=file_writer or LocalFileWriter(status),
            share=share or LogShare(status),
            clipboard=MemoryClipboard(status),
            export_dir=tmp_path / "exports",
            copy_confirm_s=copy_confirm_s,
        )
        chooser = chooser or FakeChooser(image_file)
        return ScanController(gate, chooser, pipeline, status, actions=actions)

    return _make
