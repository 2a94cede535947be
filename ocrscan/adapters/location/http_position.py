"""
HTTP adapter for a positioning service (gpsd bridge, phone companion app, ...).

Contract:
  Request:  GET /position?high_accuracy=1
  Response: {"latitude": 40.71, "longitude": -74.0}   (or {"error": "..."})

The last fix is kept and served again while it is younger than
max_cache_age_ms, so back-to-back scans do not wait on the device.
"""
import time
import httpx
from ocrscan.adapters.location.base import PositionAdapter
from ocrscan.orchestrator.contracts import Coordinate
from ocrscan.orchestrator.errors import PositioningUnavailable


class HttpPosition(PositionAdapter):
    def __init__(self, status_store, base_url: str = "http://127.0.0.1:9200", clock=time.monotonic, transport=None):
        self.status = status_store
        self.base_url = base_url.rstrip("/")
        self._clock = clock
        self._transport = transport
        self._last_fix: Coordinate | None = None
        self._last_at = 0.0

    def _cached(self, max_age_ms: int) -> Coordinate | None:
        if self._last_fix is None:
            return None
        age_ms = (self._clock() - self._last_at) * 1000
        return self._last_fix if age_ms <= max_age_ms else None

    async def get_current_position(self, options) -> Coordinate:
        cached = self._cached(options.max_cache_age_ms)
        if cached is not None:
            self.status.log("http_position: cached fix")
            return cached

        url = f"{self.base_url}/position"
        params = {"high_accuracy": int(options.high_accuracy)}
        self.status.log(f"http_position: GET {url}")
        try:
            async with httpx.AsyncClient(timeout=options.timeout_ms / 1000, transport=self._transport) as client:
                resp = await client.get(url, params=params)
            resp.raise_for_status()
            data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            raise PositioningUnavailable(str(e)) from e

        if data.get("error"):
            raise PositioningUnavailable(str(data["error"]))
        try:
            fix = Coordinate(latitude=float(data["latitude"]), longitude=float(data["longitude"]))
        except (KeyError, TypeError, ValueError) as e:
            raise PositioningUnavailable(f"malformed fix: {data!r}") from e
        self._last_fix, self._last_at = fix, self._clock()
        return fix
