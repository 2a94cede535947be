"""
Pipeline orchestrator: one image in, one ScanRecord out.

Positioning and recognition run as two independent tasks and are joined
before the record is built; neither waits on the other's result and neither
can abort the run. Positioning is bounded by PositionOptions.timeout_ms,
recognition waits as long as the engine takes.
"""
import asyncio
import time
from typing import Optional

from ocrscan.orchestrator.contracts import (
    Capability, Coordinate, Failed, PositionOptions, ScanRecord,
    outcome_from_text, outcome_kind,
)
from ocrscan.orchestrator.errors import PositioningUnavailable, RecognitionFailed


class PipelineOrchestrator:
    def __init__(self, gate, position, recognizer, status_store,
                 options: PositionOptions | None = None, clock=time.time):
        self.gate = gate
        self.position = position
        self.recognizer = recognizer
        self.status = status_store
        self.options = options or PositionOptions()
        self._clock = clock

    async def _locate(self) -> Optional[Coordinate]:
        if not self.gate.ensure(Capability.POSITIONING):
            self.status.log("pipeline: positioning denied, no coordinate")
            return None
        try:
            return await asyncio.wait_for(
                self.position.get_current_position(self.options),
                timeout=self.options.timeout_ms / 1000,
            )
        except asyncio.TimeoutError:
            self.status.log(f"pipeline: positioning timed out after {self.options.timeout_ms}ms")
        except PositioningUnavailable as e:
            self.status.log(f"pipeline: positioning unavailable: {e}")
        except Exception as e:
            self.status.log(f"pipeline: positioning error {type(e).__name__}: {e}")
        return None

    async def _recognize(self, image):
        try:
            text = await self.recognizer.recognize(image)
        except RecognitionFailed as e:
            return Failed(reason=str(e) or "Unknown error")
        except Exception as e:
            return Failed(reason=f"{type(e).__name__}: {e}")
        return outcome_from_text(text)

    async def process(self, image, token=None) -> ScanRecord:
        """Run both attempts and build the record from their settled values.

        When a token is given the record is committed to the status store
        and the machine moves to Ready only if the token is still current;
        a superseded run just returns its record.
        """
        t0 = time.time()
        self.status.log(f"pipeline: start {image.provenance.value} {image.locator}")
        coordinate, outcome = await asyncio.gather(self._locate(), self._recognize(image))
        record = ScanRecord(image=image, text=outcome, coordinate=coordinate, created_at=self._clock())

        dt = int((time.time() - t0) * 1000)
        where = f"{coordinate.latitude},{coordinate.longitude}" if coordinate else "none"
        if token is not None and not token.is_current():
            self.status.log(f"pipeline: gen={token.generation} superseded, result discarded dt={dt}ms")
            return record
        self.status.log(f"pipeline: done text={outcome_kind(outcome)} coordinate={where} dt={dt}ms")
        if token is not None:
            token.commit(record)
        return record
