class RecognizerAdapter:
    async def recognize(self, image) -> str:
        """Return the raw text found in the image (may be blank).

        Raises RecognitionFailed when the engine cannot process the image.
        """
        raise NotImplementedError
