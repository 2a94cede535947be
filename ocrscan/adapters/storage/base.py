class MediaWriter:
    async def save(self, image):
        """Store the image in the user's gallery. Raises WriteFailed."""
        raise NotImplementedError


class FileWriter:
    async def write(self, path, text: str):
        """Write text as UTF-8 to path. Raises WriteFailed."""
        raise NotImplementedError
