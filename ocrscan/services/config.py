import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from ocrscan.adapters.permissions.policy import parse_grants
from ocrscan.orchestrator.contracts import Capability, PositionOptions

load_dotenv(dotenv_path="ocrscan/.env", override=False)

_HOME = Path(os.path.expanduser("~")) / ".ocrscan"


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    camera_adapter: str = "mock"          # cv2 | mock
    recognizer_adapter: str = "mock"      # tesseract | http | mock
    position_adapter: str = "mock"        # http | mock
    share_adapter: str = "log"            # http | log
    ocr_http_url: str = "http://127.0.0.1:9100/ocr"
    position_http_url: str = "http://127.0.0.1:9200"
    share_webhook_url: str = ""
    mock_text: str = ""
    mock_latitude: float = 0.0
    mock_longitude: float = 0.0
    position: PositionOptions = field(default_factory=PositionOptions)
    copy_confirm_s: float = 1.5
    capture_dir: Path = _HOME / "captures"
    library_dir: Path = _HOME / "library"
    gallery_dir: Path = _HOME / "gallery"
    export_dir: Path = _HOME / "exports"
    export_requires_media_write: bool = False
    grants: dict[Capability, str] = field(default_factory=dict)
    prompt_answer: str = "grant"          # answer given when an undecided capability is prompted

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            camera_adapter=os.getenv("CAMERA_ADAPTER", "mock").lower(),
            recognizer_adapter=os.getenv("RECOGNIZER_ADAPTER", "mock").lower(),
            position_adapter=os.getenv("POSITION_ADAPTER", "mock").lower(),
            share_adapter=os.getenv("SHARE_ADAPTER", "log").lower(),
            ocr_http_url=os.getenv("OCR_HTTP_URL", "http://127.0.0.1:9100/ocr"),
            position_http_url=os.getenv("POSITION_HTTP_URL", "http://127.0.0.1:9200"),
            share_webhook_url=os.getenv("SHARE_WEBHOOK_URL", ""),
            mock_text=os.getenv("MOCK_TEXT", ""),
            mock_latitude=float(os.getenv("MOCK_LATITUDE", "0")),
            mock_longitude=float(os.getenv("MOCK_LONGITUDE", "0")),
            position=PositionOptions(
                high_accuracy=_env_bool("POSITION_HIGH_ACCURACY", True),
                timeout_ms=int(os.getenv("POSITION_TIMEOUT_MS", "10000")),
                max_cache_age_ms=int(os.getenv("POSITION_MAX_AGE_MS", "10000")),
            ),
            copy_confirm_s=float(os.getenv("COPY_CONFIRM_S", "1.5")),
            capture_dir=Path(os.getenv("CAPTURE_DIR", str(_HOME / "captures"))),
            library_dir=Path(os.getenv("LIBRARY_DIR", str(_HOME / "library"))),
            gallery_dir=Path(os.getenv("GALLERY_DIR", str(_HOME / "gallery"))),
            export_dir=Path(os.getenv("EXPORT_DIR", str(_HOME / "exports"))),
            export_requires_media_write=_env_bool("EXPORT_REQUIRES_MEDIA_WRITE", False),
            grants=parse_grants(os.getenv("CAPABILITY_GRANTS", "")),
            prompt_answer=os.getenv("CAPABILITY_PROMPT_ANSWER", "grant").lower(),
        )
