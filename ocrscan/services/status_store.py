import logging
from dataclasses import dataclass, field
from typing import Optional, List
from ocrscan.orchestrator.contracts import Alert, PipelineState, ScanRecord, ImageHandle

logger = logging.getLogger("ocrscan")


@dataclass
class StatusStore:
    state: PipelineState = PipelineState.IDLE
    generation: int = 0
    image: Optional[ImageHandle] = None
    record: Optional[ScanRecord] = None
    save_status: Optional[str] = None   # last persist/export outcome message
    copy_status: Optional[str] = None   # "Copied!" while the confirmation is showing
    alert: Optional[Alert] = None       # surfaced failure, cleared after the UI reads it
    logs: List[str] = field(default_factory=list)

    @property
    def busy(self) -> bool:
        return self.state in (
            PipelineState.AWAITING_CAPABILITY,
            PipelineState.ACQUIRING,
            PipelineState.PROCESSING,
        )

    def reset_run(self):
        """Drop everything that belongs to the previous acquisition."""
        self.image = None
        self.record = None
        self.save_status = None
        self.copy_status = None
        self.alert = None

    def raise_alert(self, title: str, message: str):
        self.alert = Alert(title=title, message=message)
        self.log(f"alert: {title}: {message}")

    def take_alert(self) -> Optional[Alert]:
        alert, self.alert = self.alert, None
        return alert

    def log(self, msg: str):
        logger.info(msg)
        self.logs.append(msg)
        if len(self.logs) > 200:
            self.logs = self.logs[-200:]
