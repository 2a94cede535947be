import asyncio
import json

import cv2
import httpx
import numpy as np
import pytest

from ocrscan.adapters.camera.mock_camera import MockCamera
from ocrscan.adapters.chooser.device_chooser import DeviceChooser
from ocrscan.adapters.location.http_position import HttpPosition
from ocrscan.adapters.recognizer.http_recognizer import HttpRecognizer
from ocrscan.adapters.share.webhook_share import WebhookShare
from ocrscan.adapters.storage.local import GalleryWriter, LocalFileWriter
from ocrscan.orchestrator.contracts import Coordinate, ImageHandle, PositionOptions, Provenance
from ocrscan.orchestrator.errors import (
    DeviceError, PositioningUnavailable, RecognitionFailed, ShareFailed, UserCancelled, WriteFailed,
)
from ocrscan.orchestrator.naming import MillisStamp, export_filename


@pytest.fixture
def library(tmp_path):
    lib = tmp_path / "library"
    lib.mkdir()
    cv2.imwrite(str(lib / "receipt.png"), np.full((40, 80, 3), 255, dtype=np.uint8))
    (lib / "notes.txt").write_text("not an image")
    return lib


def _chooser(status, tmp_path, library, camera=None):
    return DeviceChooser(status, camera or MockCamera(status), tmp_path / "captures", library)


# ── chooser ────────────────────────────────────────────────────────────────

def test_capture_stores_frame(status, tmp_path, library):
    camera = MockCamera(status)
    handle = asyncio.run(_chooser(status, tmp_path, library, camera=camera).capture())
    assert camera.released
    assert handle.provenance == Provenance.CAPTURED
    assert handle.locator.startswith(str(tmp_path / "captures" / "capture_"))
    assert cv2.imread(handle.locator) is not None


def test_capture_failure_is_device_error(status, tmp_path, library):
    chooser = _chooser(status, tmp_path, library, camera=MockCamera(status, fail=True))
    with pytest.raises(DeviceError):
        asyncio.run(chooser.capture())
    assert chooser.camera.released


def test_library_selection(status, tmp_path, library):
    handle = asyncio.run(_chooser(status, tmp_path, library).select_from_library("receipt.png"))
    assert handle == ImageHandle(locator=str((library / "receipt.png").resolve()), provenance=Provenance.SELECTED)


def test_library_without_selection_is_cancel(status, tmp_path, library):
    with pytest.raises(UserCancelled):
        asyncio.run(_chooser(status, tmp_path, library).select_from_library(None))


@pytest.mark.parametrize("locator", ["missing.jpg", "notes.txt", "../library/../outside.jpg"])
def test_library_bad_selection_is_device_error(status, tmp_path, library, locator):
    with pytest.raises(DeviceError):
        asyncio.run(_chooser(status, tmp_path, library).select_from_library(locator))


# ── storage ────────────────────────────────────────────────────────────────

def test_file_writer_refuses_to_overwrite(status, tmp_path):
    writer = LocalFileWriter(status)
    path = tmp_path / "out" / "a.txt"
    asyncio.run(writer.write(path, "first"))
    with pytest.raises(WriteFailed):
        asyncio.run(writer.write(path, "second"))
    assert path.read_text(encoding="utf-8") == "first"


def test_gallery_writer_keeps_both_copies(status, tmp_path, image_file):
    writer = GalleryWriter(status, tmp_path / "gallery")
    image = ImageHandle(locator=str(image_file), provenance=Provenance.CAPTURED)
    first = asyncio.run(writer.save(image))
    second = asyncio.run(writer.save(image))
    assert first.name == "scan.jpg"
    assert second.name == "scan_1.jpg"


def test_gallery_writer_missing_source(status, tmp_path):
    writer = GalleryWriter(status, tmp_path / "gallery")
    image = ImageHandle(locator=str(tmp_path / "gone.jpg"), provenance=Provenance.CAPTURED)
    with pytest.raises(WriteFailed):
        asyncio.run(writer.save(image))


def test_export_names_are_unique_per_millisecond():
    stamp = MillisStamp(clock=lambda: 1.5)
    assert [stamp.next() for _ in range(3)] == [1500, 1501, 1502]
    assert export_filename(1500) == "ocr_result_1500.txt"


# ── http adapters ──────────────────────────────────────────────────────────

def test_http_position_caches_recent_fix(status):
    hits = []

    def handler(request):
        hits.append(request.url.params["high_accuracy"])
        return httpx.Response(200, json={"latitude": 40.71, "longitude": -74.0})

    now = [100.0]
    position = HttpPosition(status, clock=lambda: now[0], transport=httpx.MockTransport(handler))
    options = PositionOptions(max_cache_age_ms=10000)
    assert asyncio.run(position.get_current_position(options)) == Coordinate(40.71, -74.0)
    now[0] += 5
    asyncio.run(position.get_current_position(options))
    assert hits == ["1"]
    now[0] += 6
    asyncio.run(position.get_current_position(options))
    assert len(hits) == 2


@pytest.mark.parametrize("response", [
    httpx.Response(200, json={"error": "no fix"}),
    httpx.Response(503, text="down"),
    httpx.Response(200, json={"latitude": "north"}),
])
def test_http_position_failures(status, response):
    position = HttpPosition(status, transport=httpx.MockTransport(lambda request: response))
    with pytest.raises(PositioningUnavailable):
        asyncio.run(position.get_current_position(PositionOptions()))


def test_http_recognizer_reads_text(status, image_file):
    def handler(request):
        assert b"fake-jpeg" in request.content
        return httpx.Response(200, json={"text": "TOTAL 45.00"})

    recognizer = HttpRecognizer(status, url="http://ocr.local/ocr", transport=httpx.MockTransport(handler))
    image = ImageHandle(locator=str(image_file), provenance=Provenance.SELECTED)
    assert asyncio.run(recognizer.recognize(image)) == "TOTAL 45.00"


def test_http_recognizer_server_error(status, image_file):
    transport = httpx.MockTransport(lambda request: httpx.Response(500, text="oops"))
    recognizer = HttpRecognizer(status, url="http://ocr.local/ocr", transport=transport)
    image = ImageHandle(locator=str(image_file), provenance=Provenance.SELECTED)
    with pytest.raises(RecognitionFailed):
        asyncio.run(recognizer.recognize(image))


def test_http_recognizer_missing_image(status, tmp_path):
    calls = []
    transport = httpx.MockTransport(lambda request: calls.append(request) or httpx.Response(200, json={"text": "x"}))
    recognizer = HttpRecognizer(status, url="http://ocr.local/ocr", transport=transport)
    image = ImageHandle(locator=str(tmp_path / "gone.jpg"), provenance=Provenance.CAPTURED)
    with pytest.raises(RecognitionFailed, match="cannot read image gone.jpg"):
        asyncio.run(recognizer.recognize(image))
    assert calls == []


def test_webhook_share(status):
    bodies = []

    def handler(request):
        bodies.append(request.content)
        return httpx.Response(204)

    share = WebhookShare(status, url="http://hook.local/", transport=httpx.MockTransport(handler))
    asyncio.run(share.share("hello"))
    assert [json.loads(body) for body in bodies] == [{"text": "hello"}]


def test_webhook_share_failure(status):
    share = WebhookShare(status, url="http://hook.local/",
                         transport=httpx.MockTransport(lambda request: httpx.Response(500)))
    with pytest.raises(ShareFailed):
        asyncio.run(share.share("hello"))


# ── tesseract ──────────────────────────────────────────────────────────────

def test_tesseract_recognizer_binarizes_and_reads(status, tmp_path, monkeypatch):
    from ocrscan.adapters.recognizer import tesseract_recognizer

    seen = {}

    def fake_image_to_string(frame, lang):
        seen["shape"], seen["lang"] = frame.shape, lang
        seen["values"] = set(np.unique(frame).tolist())
        return "TOTAL 45.00\n"

    monkeypatch.setattr(tesseract_recognizer.pytesseract, "image_to_string", fake_image_to_string)
    path = tmp_path / "wide.png"
    img = np.full((100, 3000, 3), 255, dtype=np.uint8)
    img[40:60, 100:900] = 0
    cv2.imwrite(str(path), img)

    recognizer = tesseract_recognizer.TesseractRecognizer(status, lang="deu")
    text = asyncio.run(recognizer.recognize(ImageHandle(locator=str(path), provenance=Provenance.CAPTURED)))
    assert text == "TOTAL 45.00\n"
    assert seen["lang"] == "deu"
    assert seen["shape"] == (80, tesseract_recognizer.MAX_WIDTH)
    assert seen["values"] <= {0, 255}


def test_tesseract_recognizer_unreadable_image(status, image_file):
    from ocrscan.adapters.recognizer.tesseract_recognizer import TesseractRecognizer

    recognizer = TesseractRecognizer(status)
    with pytest.raises(RecognitionFailed):
        asyncio.run(recognizer.recognize(ImageHandle(locator=str(image_file), provenance=Provenance.CAPTURED)))
