class ChooserAdapter:
    async def capture(self):
        """Return an ImageHandle from the capture device.

        Raises UserCancelled when the user backs out and DeviceError when the
        device fails.
        """
        raise NotImplementedError

    async def select_from_library(self, locator: str | None = None):
        """Return an ImageHandle for a stored image. Same failure shape as capture()."""
        raise NotImplementedError
