from fastapi import FastAPI, HTTPException
from ocrscan.services.config import Settings
from ocrscan.services.models import (
    AcquireRequest, AcquireResponse, ActionResponse, AlertOut, CapabilityDecisionRequest,
    CoordinateOut, ImageOut, RecordOut, StatusResponse, TextOut,
)
from ocrscan.services.status_store import StatusStore
from ocrscan.orchestrator.actions import ActionGate
from ocrscan.orchestrator.capability_gate import CapabilityGate
from ocrscan.orchestrator.contracts import Capability, Failed, Recognized, Source
from ocrscan.orchestrator.pipeline import PipelineOrchestrator
from ocrscan.orchestrator.state_machine import ScanController
from ocrscan.adapters.permissions.policy import PolicyCapabilityService
from ocrscan.adapters.chooser.device_chooser import DeviceChooser
from ocrscan.adapters.storage.local import GalleryWriter, LocalFileWriter
from ocrscan.adapters.clipboard.system_clipboard import SystemClipboard


def build_controller(settings: Settings, status: StatusStore) -> ScanController:
    capabilities = PolicyCapabilityService(
        status,
        decisions=settings.grants,
        prompter=lambda cap, rationale: settings.prompt_answer == "grant",
    )
    gate = CapabilityGate(capabilities, status)

    # Camera: CAMERA_ADAPTER=cv2 for a real webcam, mock otherwise
    if settings.camera_adapter == "cv2":
        from ocrscan.adapters.camera.cv2_camera import CV2Camera
        camera = CV2Camera(status)
    else:
        from ocrscan.adapters.camera.mock_camera import MockCamera
        camera = MockCamera(status)
    status.log(f"camera adapter: {type(camera).__name__}")

    # Recognizer: tesseract | http | mock (default: mock)
    if settings.recognizer_adapter == "tesseract":
        from ocrscan.adapters.recognizer.tesseract_recognizer import TesseractRecognizer
        recognizer = TesseractRecognizer(status)
    elif settings.recognizer_adapter == "http":
        from ocrscan.adapters.recognizer.http_recognizer import HttpRecognizer
        recognizer = HttpRecognizer(status, url=settings.ocr_http_url)
    else:
        from ocrscan.adapters.recognizer.mock_recognizer import MockRecognizer
        recognizer = MockRecognizer(status, text=settings.mock_text)
    status.log(f"recognizer adapter: {type(recognizer).__name__}")

    if settings.position_adapter == "http":
        from ocrscan.adapters.location.http_position import HttpPosition
        position = HttpPosition(status, base_url=settings.position_http_url)
    else:
        from ocrscan.adapters.location.mock_position import MockPosition
        position = MockPosition(status, latitude=settings.mock_latitude, longitude=settings.mock_longitude)
    status.log(f"position adapter: {type(position).__name__}")

    if settings.share_adapter == "http" and settings.share_webhook_url:
        from ocrscan.adapters.share.webhook_share import WebhookShare
        share = WebhookShare(status, url=settings.share_webhook_url)
    else:
        from ocrscan.adapters.share.webhook_share import LogShare
        share = LogShare(status)
    status.log(f"share adapter: {type(share).__name__}")

    actions = ActionGate(
        gate, status,
        media_writer=GalleryWriter(status, settings.gallery_dir),
        file_writer=LocalFileWriter(status),
        share=share,
        clipboard=SystemClipboard(status),
        export_dir=settings.export_dir,
        copy_confirm_s=settings.copy_confirm_s,
        export_requires_media_write=settings.export_requires_media_write,
    )
    chooser = DeviceChooser(status, camera, settings.capture_dir, settings.library_dir)
    pipeline = PipelineOrchestrator(gate, position, recognizer, status, options=settings.position)
    return ScanController(gate, chooser, pipeline, status, actions=actions)


def image_out(image):
    return ImageOut(locator=image.locator, provenance=image.provenance.value)


def record_out(record):
    if record is None:
        return None
    if isinstance(record.text, Recognized):
        text = TextOut(kind="recognized", text=record.text.text)
    elif isinstance(record.text, Failed):
        text = TextOut(kind="failed", reason=record.text.reason)
    else:
        text = TextOut(kind="empty")
    coord = record.coordinate
    return RecordOut(
        image=image_out(record.image),
        text=text,
        coordinate=CoordinateOut(latitude=coord.latitude, longitude=coord.longitude) if coord else None,
        created_at=record.created_at,
    )


def alert_out(alert):
    return AlertOut(title=alert.title, message=alert.message) if alert else None


def action_out(result):
    return ActionResponse(ok=result.ok, status=result.status.value, message=result.message, path=result.path,
                          error_code=result.error_code)


def create_app(controller: ScanController, settings: Settings | None = None) -> FastAPI:
    app = FastAPI(title="ocrscan")
    status = controller.status
    actions = controller.actions
    capabilities = controller.gate.service

    @app.get("/status", response_model=StatusResponse)
    async def get_status():
        return StatusResponse(
            state=status.state.value,
            generation=status.generation,
            busy=status.busy,
            image=image_out(status.image) if status.image else None,
            record=record_out(status.record),
            save_status=status.save_status,
            copy_status=status.copy_status,
            # Read-and-clear: the client shows an alert once
            alert=alert_out(status.take_alert()),
            logs=status.logs,
        )

    @app.post("/acquire", response_model=AcquireResponse)
    async def acquire(req: AcquireRequest):
        result = await controller.acquire(Source(req.source), req.locator)
        return AcquireResponse(
            state=result.state.value,
            generation=result.generation,
            record=record_out(result.record),
            alert=alert_out(result.alert),
            error_code=result.error_code,
            superseded=result.superseded,
        )

    @app.post("/actions/persist_image", response_model=ActionResponse)
    async def persist_image():
        return action_out(await actions.persist_image())

    @app.post("/actions/export_text", response_model=ActionResponse)
    async def export_text():
        return action_out(await actions.export_text())

    @app.post("/actions/share_text", response_model=ActionResponse)
    async def share_text():
        return action_out(await actions.share_text())

    @app.post("/actions/copy_text", response_model=ActionResponse)
    async def copy_text():
        return action_out(await actions.copy_text())

    @app.get("/capabilities")
    async def get_capabilities():
        return {"capabilities": capabilities.decisions()}

    @app.post("/capabilities/{name}")
    async def set_capability(name: str, req: CapabilityDecisionRequest):
        """Grant or revoke a capability at runtime (undecided re-arms the prompt)."""
        try:
            cap = Capability(name)
        except ValueError:
            raise HTTPException(status_code=404, detail=f"unknown capability {name}")
        capabilities.set_decision(cap, req.decision)
        return {"ok": True, "capabilities": capabilities.decisions()}

    @app.get("/health")
    async def health():
        """Adapters in use and whether the working directories exist."""
        checks = {
            "api": True,
            "state": status.state.value,
            "recognizer": type(controller.pipeline.recognizer).__name__,
            "position": type(controller.pipeline.position).__name__,
            "camera": type(controller.chooser.camera).__name__,
            "share": type(actions.share).__name__,
        }
        if settings is not None:
            checks["library_dir"] = settings.library_dir.is_dir()
            checks["export_dir"] = str(settings.export_dir)
        return checks

    return app


status = StatusStore()
settings = Settings.from_env()
controller = build_controller(settings, status)
app = create_app(controller, settings)
