from transitions import Machine

from ocrscan.adapters.permissions.rationale import DENIED_MESSAGE
from ocrscan.orchestrator.contracts import (
    AcquireResult, PipelineState, Source, SOURCE_CAPABILITY,
)
from ocrscan.orchestrator import errors
from ocrscan.orchestrator.errors import DeviceError, UserCancelled

S = PipelineState

TRANSITIONS = [
    # a new acquisition may start from anywhere and supersedes the current run
    {"trigger": "begin", "source": "*", "dest": S.AWAITING_CAPABILITY},
    {"trigger": "deny", "source": S.AWAITING_CAPABILITY, "dest": S.ACQUISITION_FAILED},
    {"trigger": "open_chooser", "source": S.AWAITING_CAPABILITY, "dest": S.ACQUIRING},
    {"trigger": "cancel", "source": S.ACQUIRING, "dest": S.IDLE},
    {"trigger": "device_failed", "source": S.ACQUIRING, "dest": S.IDLE},
    {"trigger": "start_processing", "source": S.ACQUIRING, "dest": S.PROCESSING},
    {"trigger": "finish", "source": S.PROCESSING, "dest": S.READY},
]

CHOOSER_ERROR_TITLE = {
    Source.CAPTURE: "Camera Error",
    Source.LIBRARY: "Gallery Error",
}


class PipelineMachine:
    """Pipeline state, mirrored into the status store on every change."""

    def __init__(self, status_store):
        self.status = status_store
        self.machine = Machine(
            model=self,
            states=PipelineState,
            transitions=TRANSITIONS,
            initial=S.IDLE,
            auto_transitions=False,
            after_state_change="_sync_status",
        )

    def _sync_status(self):
        self.status.state = self.state


class RunToken:
    """Identifies one acquisition. Anything a superseded run produces is dropped."""

    def __init__(self, controller, generation: int):
        self._controller = controller
        self.generation = generation

    def is_current(self) -> bool:
        return self._controller.generation == self.generation

    def commit(self, record):
        self._controller._commit(self, record)


class ScanController:
    """
    Acquisition controller: owns the pipeline state machine and the live
    record. Each acquire() call clears the previous run, gates the chooser
    behind its capability, then hands the image to the orchestrator.
    """

    def __init__(self, gate, chooser, pipeline, status_store, actions=None):
        self.gate = gate
        self.chooser = chooser
        self.pipeline = pipeline
        self.status = status_store
        self.actions = actions
        self.fsm = PipelineMachine(status_store)

    @property
    def generation(self) -> int:
        return self.status.generation

    @property
    def state(self) -> PipelineState:
        return self.fsm.state

    @property
    def record(self):
        return self.status.record

    def _begin(self) -> RunToken:
        self.status.generation += 1
        self.status.reset_run()
        if self.actions is not None:
            self.actions.reset()
        self.fsm.begin()
        return RunToken(self, self.status.generation)

    def _result(self, token: RunToken, record=None, error_code=None) -> AcquireResult:
        if not token.is_current():
            return AcquireResult(state=self.state, generation=token.generation, record=record, superseded=True)
        return AcquireResult(state=self.state, generation=token.generation, record=record,
                             alert=self.status.alert, error_code=error_code)

    def _commit(self, token: RunToken, record):
        if not token.is_current():
            return
        self.status.record = record
        self.fsm.finish()

    async def _choose(self, source: Source, locator: str | None):
        if source == Source.CAPTURE:
            return await self.chooser.capture()
        return await self.chooser.select_from_library(locator)

    async def acquire(self, source: Source, locator: str | None = None) -> AcquireResult:
        source = Source(source)
        token = self._begin()
        self.status.log(f"acquire: gen={token.generation} source={source.value}")

        capability = SOURCE_CAPABILITY[source]
        granted = self.gate.ensure(capability)
        if not token.is_current():
            return self._result(token)
        if not granted:
            self.status.raise_alert("Permission Denied", DENIED_MESSAGE[capability])
            self.fsm.deny()
            return self._result(token, error_code=errors.ERR_CAPABILITY_DENIED)

        self.fsm.open_chooser()
        try:
            image = await self._choose(source, locator)
        except UserCancelled:
            if token.is_current():
                self.status.log("acquire: cancelled by user")
                self.fsm.cancel()
            return self._result(token)
        except DeviceError as e:
            if token.is_current():
                self.status.raise_alert(CHOOSER_ERROR_TITLE[source], str(e) or "Unknown error")
                self.fsm.device_failed()
                return self._result(token, error_code=e.code)
            return self._result(token)
        except Exception as e:
            if token.is_current():
                self.status.log(f"acquire: chooser error {type(e).__name__}: {e}")
                self.status.raise_alert(CHOOSER_ERROR_TITLE[source], str(e) or "Unknown error")
                self.fsm.device_failed()
                return self._result(token, error_code=errors.ERR_DEVICE)
            return self._result(token)

        if not token.is_current():
            self.status.log(f"acquire: gen={token.generation} superseded before processing")
            return self._result(token)

        self.status.image = image
        self.fsm.start_processing()
        record = await self.pipeline.process(image, token)
        return self._result(token, record if token.is_current() else None)
