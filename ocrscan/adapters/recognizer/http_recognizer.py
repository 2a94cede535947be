"""
HTTP OCR recognizer.

Posts the image to an OCR service and reads back plain text.
Contract:
  Request:  POST <OCR_HTTP_URL>  multipart file=<image>
  Response: {"text": "..."}     (or {"error": "..."})
"""
import asyncio
import os
from pathlib import Path

import httpx
from ocrscan.adapters.recognizer.base import RecognizerAdapter
from ocrscan.orchestrator.errors import RecognitionFailed


class HttpRecognizer(RecognizerAdapter):
    def __init__(self, status_store, url: str | None = None, timeout: float = 60.0, transport=None):
        self.status = status_store
        self.url = url or os.getenv("OCR_HTTP_URL", "http://127.0.0.1:9100/ocr")
        self.timeout = timeout
        self._transport = transport

    async def recognize(self, image) -> str:
        name = os.path.basename(image.locator)
        try:
            content = await asyncio.to_thread(Path(image.locator).read_bytes)
        except OSError as e:
            raise RecognitionFailed(f"cannot read image {name}: {e}") from e

        self.status.log(f"http_recognizer: POST {self.url} ({len(content)} bytes)")
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.post(self.url, files={"file": (name, content, "image/jpeg")})
        except httpx.HTTPError as e:
            raise RecognitionFailed(f"OCR service unreachable: {e}") from e

        if not resp.is_success:
            self.status.log(f"http_recognizer: HTTP {resp.status_code} — {resp.text[:300]}")
            raise RecognitionFailed(f"OCR service returned HTTP {resp.status_code}")
        data = resp.json()
        if data.get("error"):
            raise RecognitionFailed(str(data["error"]))
        return data.get("text") or ""
