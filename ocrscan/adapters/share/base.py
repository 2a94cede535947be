class ShareAdapter:
    async def share(self, text: str):
        """Hand text to the share target. Raises ShareFailed."""
        raise NotImplementedError
