class ClipboardAdapter:
    def set_text(self, text: str):
        """Fire-and-forget: failures are logged, never raised."""
        raise NotImplementedError
