"""
Tesseract OCR recognizer.

Pipeline:
  1. Load image with OpenCV, convert to grayscale
  2. Otsu binarization to flatten uneven lighting from phone/webcam shots
  3. pytesseract.image_to_string on the binarized frame

Runs in a worker thread; tesseract is CPU bound and can take seconds on
large captures. TESSERACT_LANG selects the language pack (default eng).
"""
import asyncio
import os

import cv2
import pytesseract

from ocrscan.adapters.recognizer.base import RecognizerAdapter
from ocrscan.orchestrator.errors import RecognitionFailed

# Downscale anything larger; tesseract gains nothing past this width
MAX_WIDTH = 2400


def _preprocess(path: str):
    img = cv2.imread(path)
    if img is None:
        raise RecognitionFailed(f"cannot read image {os.path.basename(path)}")
    h, w = img.shape[:2]
    if w > MAX_WIDTH:
        scale = MAX_WIDTH / w
        img = cv2.resize(img, (MAX_WIDTH, int(h * scale)), interpolation=cv2.INTER_AREA)
    gray = cv2.cvtColor(img, cv2.COLOR_BGR2GRAY)
    _, binary = cv2.threshold(gray, 0, 255, cv2.THRESH_BINARY + cv2.THRESH_OTSU)
    return binary


class TesseractRecognizer(RecognizerAdapter):
    def __init__(self, status_store, lang: str | None = None):
        self.status = status_store
        self.lang = lang or os.getenv("TESSERACT_LANG", "eng")

    def _recognize_sync(self, path: str) -> str:
        frame = _preprocess(path)
        try:
            return pytesseract.image_to_string(frame, lang=self.lang)
        except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError) as e:
            raise RecognitionFailed(str(e)) from e

    async def recognize(self, image) -> str:
        self.status.log(f"tesseract: recognizing {os.path.basename(image.locator)} lang={self.lang}")
        text = await asyncio.to_thread(self._recognize_sync, image.locator)
        self.status.log(f"tesseract: {len(text.strip())} chars")
        return text
