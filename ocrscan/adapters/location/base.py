class PositionAdapter:
    async def get_current_position(self, options):
        """Return a Coordinate for the current fix.

        options is a PositionOptions (high_accuracy, timeout_ms,
        max_cache_age_ms). Raises PositioningUnavailable when no fix can be
        produced.
        """
        raise NotImplementedError
