"""
Fake positioning server for testing HttpPosition without a GPS device.

Serves a fixed fix on port 9200. Pass ?delay=<seconds> (or FAKE_FIX_DELAY)
to simulate a slow device and exercise the positioning timeout.

Usage:
    python ocrscan/scripts/fake_position_server.py
    POSITION_ADAPTER=http uvicorn ocrscan.services.api:app  (other terminal)
"""

import asyncio
import os
import uvicorn
from fastapi import FastAPI

app = FastAPI(title="fake-position-server")

LATITUDE = float(os.getenv("FAKE_LATITUDE", "40.71"))
LONGITUDE = float(os.getenv("FAKE_LONGITUDE", "-74.00"))
DEFAULT_DELAY = float(os.getenv("FAKE_FIX_DELAY", "0"))


@app.get("/position")
async def position(high_accuracy: int = 1, delay: float | None = None, fail: bool = False):
    wait = DEFAULT_DELAY if delay is None else delay
    print(f"[gps] fix requested (high_accuracy={high_accuracy}) — settling for {wait:.1f}s ...")
    await asyncio.sleep(wait)
    if fail:
        print("[gps] no satellites")
        return {"error": "no fix"}
    print(f"[gps] fix {LATITUDE},{LONGITUDE}")
    return {"latitude": LATITUDE, "longitude": LONGITUDE}


if __name__ == "__main__":
    print("Fake position server starting on http://localhost:9200")
    uvicorn.run(app, host="0.0.0.0", port=9200)
