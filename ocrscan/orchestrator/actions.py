import asyncio
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from ocrscan.adapters.permissions.rationale import DENIED_MESSAGE
from ocrscan.orchestrator.contracts import Capability, PipelineState, Provenance, Recognized
from ocrscan.orchestrator import errors
from ocrscan.orchestrator.errors import ShareFailed, WriteFailed
from ocrscan.orchestrator.naming import MillisStamp, export_filename

COPY_CONFIRMATION = "Copied!"


class ActionStatus(str, Enum):
    DONE = "done"
    SKIPPED = "skipped"     # preconditions not met, no collaborator touched
    DENIED = "denied"
    FAILED = "failed"


@dataclass
class ActionResult:
    status: ActionStatus
    message: Optional[str] = None
    path: Optional[str] = None
    error_code: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == ActionStatus.DONE


class ActionGate:
    """
    Post-processing actions on the live ScanRecord.

    Every call re-reads the record from the status store and re-checks its
    preconditions: the pipeline must be Ready and the text Recognized;
    persist_image also needs a captured (not selected) image.
    """

    def __init__(self, gate, status_store, media_writer, file_writer, share, clipboard,
                 export_dir, copy_confirm_s: float = 1.5, stamp: MillisStamp | None = None,
                 export_requires_media_write: bool = False):
        self.gate = gate
        self.status = status_store
        self.media_writer = media_writer
        self.file_writer = file_writer
        self.share = share
        self.clipboard = clipboard
        self.export_dir = Path(export_dir)
        self.copy_confirm_s = copy_confirm_s
        self.stamp = stamp or MillisStamp()
        self.export_requires_media_write = export_requires_media_write
        self._copy_timer: asyncio.TimerHandle | None = None

    def reset(self):
        if self._copy_timer is not None:
            self._copy_timer.cancel()
            self._copy_timer = None

    def _text_record(self, action: str):
        """Return (record, None) when a text action may run, else (None, error code)."""
        record = self.status.record
        if self.status.state != PipelineState.READY or record is None:
            self.status.log(f"actions: {action} skipped, no ready record")
            return None, errors.ERR_NO_RECORD
        if not isinstance(record.text, Recognized):
            self.status.log(f"actions: {action} skipped, no recognized text")
            return None, errors.ERR_NO_TEXT
        return record, None

    def _skipped(self, code: str) -> ActionResult:
        return ActionResult(status=ActionStatus.SKIPPED, error_code=code)

    def _still_current(self, generation: int) -> bool:
        return self.status.generation == generation

    def _denied(self, capability: Capability) -> ActionResult:
        message = DENIED_MESSAGE[capability]
        self.status.raise_alert("Permission Denied", message)
        return ActionResult(status=ActionStatus.DENIED, message=message, error_code=errors.ERR_CAPABILITY_DENIED)

    async def persist_image(self) -> ActionResult:
        record, code = self._text_record("persist_image")
        if record is None:
            return self._skipped(code)
        if record.image.provenance != Provenance.CAPTURED:
            self.status.log("actions: persist_image skipped, image was not captured")
            return self._skipped(errors.ERR_NOT_CAPTURED)

        generation = self.status.generation
        self.status.save_status = None
        if not self.gate.ensure(Capability.MEDIA_WRITE):
            return self._denied(Capability.MEDIA_WRITE)

        try:
            await self.media_writer.save(record.image)
        except WriteFailed as e:
            message = "Failed to save photo."
            if self._still_current(generation):
                self.status.save_status = message
                self.status.raise_alert("Error", f"Failed to save photo: {str(e) or 'Unknown error'}")
            return ActionResult(status=ActionStatus.FAILED, message=message, error_code=e.code)

        message = "Photo saved to gallery."
        if self._still_current(generation):
            self.status.save_status = message
        return ActionResult(status=ActionStatus.DONE, message=message)

    async def export_text(self) -> ActionResult:
        record, code = self._text_record("export_text")
        if record is None:
            return self._skipped(code)

        generation = self.status.generation
        self.status.save_status = None
        if self.export_requires_media_write and not self.gate.ensure(Capability.MEDIA_WRITE):
            return self._denied(Capability.MEDIA_WRITE)

        path = self.export_dir / export_filename(self.stamp.next())
        try:
            await self.file_writer.write(path, record.text.text)
        except WriteFailed as e:
            message = "Failed to save text."
            if self._still_current(generation):
                self.status.save_status = message
                self.status.raise_alert("Error", f"Failed to save text: {str(e) or 'Unknown error'}")
            return ActionResult(status=ActionStatus.FAILED, message=message, path=str(path), error_code=e.code)

        message = f"Text saved to file:\n{path}"
        if self._still_current(generation):
            self.status.save_status = message
        return ActionResult(status=ActionStatus.DONE, message=message, path=str(path))

    async def share_text(self) -> ActionResult:
        record, code = self._text_record("share_text")
        if record is None:
            return self._skipped(code)
        generation = self.status.generation
        try:
            await self.share.share(record.text.text)
        except ShareFailed as e:
            message = f"Failed to share text: {str(e) or 'Unknown error'}"
            if self._still_current(generation):
                self.status.raise_alert("Error", message)
            return ActionResult(status=ActionStatus.FAILED, message=message, error_code=e.code)
        return ActionResult(status=ActionStatus.DONE)

    async def copy_text(self) -> ActionResult:
        record, code = self._text_record("copy_text")
        if record is None:
            return self._skipped(code)
        generation = self.status.generation
        try:
            await asyncio.to_thread(self.clipboard.set_text, record.text.text)
        except Exception as e:
            self.status.log(f"actions: clipboard error {type(e).__name__}: {e}")
        if not self._still_current(generation):
            return ActionResult(status=ActionStatus.DONE)

        self.status.copy_status = COPY_CONFIRMATION
        self.reset()
        loop = asyncio.get_running_loop()
        self._copy_timer = loop.call_later(self.copy_confirm_s, self._clear_copy_status)
        return ActionResult(status=ActionStatus.DONE, message=COPY_CONFIRMATION)

    def _clear_copy_status(self):
        self._copy_timer = None
        self.status.copy_status = None
