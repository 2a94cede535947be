from pydantic import BaseModel
from typing import Literal, Optional

class AcquireRequest(BaseModel):
    source: Literal["capture", "library"]
    # library only: image name relative to LIBRARY_DIR; omitted means the picker was dismissed
    locator: Optional[str] = None

class CoordinateOut(BaseModel):
    latitude: float
    longitude: float

class ImageOut(BaseModel):
    locator: str
    provenance: Literal["captured", "selected"]

class TextOut(BaseModel):
    kind: Literal["recognized", "empty", "failed"]
    text: Optional[str] = None     # set only when kind == "recognized"
    reason: Optional[str] = None   # set only when kind == "failed"

class RecordOut(BaseModel):
    image: ImageOut
    text: TextOut
    coordinate: Optional[CoordinateOut] = None
    created_at: float

class AlertOut(BaseModel):
    title: str
    message: str

class AcquireResponse(BaseModel):
    state: str
    generation: int
    record: Optional[RecordOut] = None
    alert: Optional[AlertOut] = None
    error_code: Optional[str] = None
    superseded: bool = False

class StatusResponse(BaseModel):
    state: str
    generation: int
    busy: bool
    image: Optional[ImageOut] = None
    record: Optional[RecordOut] = None
    save_status: Optional[str] = None
    copy_status: Optional[str] = None
    alert: Optional[AlertOut] = None        # read-and-clear: returned once, then dropped
    logs: list[str]

class ActionResponse(BaseModel):
    ok: bool
    status: Literal["done", "skipped", "denied", "failed"]
    message: Optional[str] = None
    path: Optional[str] = None
    error_code: Optional[str] = None

class CapabilityDecisionRequest(BaseModel):
    decision: Literal["granted", "denied", "undecided"]
