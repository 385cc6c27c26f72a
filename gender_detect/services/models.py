from pydantic import BaseModel
from typing import Optional

from gender_detect.orchestrator.contracts import AcquisitionState, GenderResult


class ImageOut(BaseModel):
    name: Optional[str] = None
    mime_type: str
    size: int               # decoded bytes


class StatusResponse(BaseModel):
    state: AcquisitionState
    busy: bool                               # True while a classification is in flight
    result: GenderResult = GenderResult.UNSET
    error: Optional[str] = None              # user-facing message, cleared by /reset
    image: Optional[ImageOut] = None
    camera_open: bool = False
    logs: list[str]


class AcquireResponse(BaseModel):
    ok: bool
    state: AcquisitionState
    image: Optional[ImageOut] = None
    error_code: Optional[str] = None
    error: Optional[str] = None


class ClassifyResponse(BaseModel):
    ok: bool
    result: Optional[GenderResult] = None    # None when the request was superseded by a reset
    state: AcquisitionState
    error_code: Optional[str] = None
    error: Optional[str] = None


class HealthResponse(BaseModel):
    api: bool = True
    vision_adapter: str
    credential_configured: bool
    camera_adapter: str
    camera_open: bool
