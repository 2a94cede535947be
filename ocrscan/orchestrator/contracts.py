import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union


class Capability(str, Enum):
    CAPTURE = "capture"
    POSITIONING = "positioning"
    MEDIA_READ = "media_read"
    MEDIA_WRITE = "media_write"


class Provenance(str, Enum):
    CAPTURED = "captured"
    SELECTED = "selected"


class Source(str, Enum):
    CAPTURE = "capture"
    LIBRARY = "library"


# capability the chooser needs before it may be opened
SOURCE_CAPABILITY = {
    Source.CAPTURE: Capability.CAPTURE,
    Source.LIBRARY: Capability.MEDIA_READ,
}


class PipelineState(str, Enum):
    IDLE = "idle"
    AWAITING_CAPABILITY = "awaiting_capability"
    ACQUIRING = "acquiring"
    PROCESSING = "processing"
    READY = "ready"
    ACQUISITION_FAILED = "acquisition_failed"


@dataclass(frozen=True)
class ImageHandle:
    locator: str               # file path of the image on disk
    provenance: Provenance


@dataclass(frozen=True)
class Coordinate:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class PositionOptions:
    high_accuracy: bool = True
    timeout_ms: int = 10000
    max_cache_age_ms: int = 10000


@dataclass(frozen=True)
class Recognized:
    text: str

    def __post_init__(self):
        if not self.text.strip():
            raise ValueError("Recognized text must contain non-whitespace characters")


@dataclass(frozen=True)
class Empty:
    pass


@dataclass(frozen=True)
class Failed:
    reason: str


RecognitionOutcome = Union[Recognized, Empty, Failed]


def outcome_from_text(text: Optional[str]) -> RecognitionOutcome:
    """Classify raw recognizer output. Blank or missing text is Empty."""
    if text and text.strip():
        return Recognized(text=text)
    return Empty()


def outcome_kind(outcome: RecognitionOutcome) -> str:
    if isinstance(outcome, Recognized):
        return "recognized"
    if isinstance(outcome, Failed):
        return "failed"
    return "empty"


@dataclass(frozen=True)
class ScanRecord:
    image: ImageHandle
    text: RecognitionOutcome
    coordinate: Optional[Coordinate] = None
    created_at: float = field(default_factory=time.time)  # epoch seconds

    @property
    def has_text(self) -> bool:
        return isinstance(self.text, Recognized)


@dataclass(frozen=True)
class Alert:
    title: str
    message: str


@dataclass
class AcquireResult:
    state: PipelineState
    generation: int
    record: Optional[ScanRecord] = None
    alert: Optional[Alert] = None
    error_code: Optional[str] = None
    superseded: bool = False   # a newer acquisition started before this one settled
