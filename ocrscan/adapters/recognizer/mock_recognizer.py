import asyncio
from ocrscan.adapters.recognizer.base import RecognizerAdapter
from ocrscan.orchestrator.errors import RecognitionFailed

class MockRecognizer(RecognizerAdapter):
    def __init__(self, status_store, text: str = "", delay_s: float = 0.0, error: str | None = None):
        self.status = status_store
        self.text = text
        self.delay_s = delay_s
        self.error = error
        self.calls = []

    async def recognize(self, image) -> str:
        self.calls.append(image)
        if self.delay_s:
            await asyncio.sleep(self.delay_s)
        if self.error is not None:
            self.status.log(f"mock_recognizer: failing ({self.error})")
            raise RecognitionFailed(self.error)
        self.status.log(f"mock_recognizer: {len(self.text)} chars")
        return self.text
