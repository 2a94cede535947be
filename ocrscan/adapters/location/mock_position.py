import asyncio
from ocrscan.adapters.location.base import PositionAdapter
from ocrscan.orchestrator.contracts import Coordinate
from ocrscan.orchestrator.errors import PositioningUnavailable

class MockPosition(PositionAdapter):
    def __init__(self, status_store, latitude: float = 0.0, longitude: float = 0.0,
                 delay_s: float = 0.0, error: str | None = None):
        self.status = status_store
        self.fix = Coordinate(latitude=latitude, longitude=longitude)
        self.delay_s = delay_s
        self.error = error
        self.calls = []

    async def get_current_position(self, options) -> Coordinate:
        self.calls.append(options)
        if self.delay_s:
            await asyncio.sleep(self.delay_s)
        if self.error is not None:
            raise PositioningUnavailable(self.error)
        self.status.log(f"mock_position: {self.fix.latitude},{self.fix.longitude}")
        return self.fix
