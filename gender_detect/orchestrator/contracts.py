import base64
from dataclasses import dataclass
from enum import Enum
from typing import Optional

# Inline image payloads are capped by the vision transport
MAX_UPLOAD_BYTES = 4 * 1024 * 1024

ALLOWED_MIME_TYPES = frozenset({
    "image/png",
    "image/jpeg",
    "image/webp",
    "image/gif",
    "image/heic",
    "image/heif",
})

CAPTURE_MIME_TYPE = "image/jpeg"
CAPTURE_NAME = "camera-capture.jpg"


class GenderResult(str, Enum):
    MALE = "Male"
    FEMALE = "Female"
    INDETERMINATE = "Indeterminate"
    NO_FACE_DETECTED = "NoFaceDetected"
    ERROR = "Error"
    UNSET = "Unset"          # nothing classified yet


class AcquisitionState(str, Enum):
    IDLE = "Idle"
    CAMERA_LIVE = "CameraLive"
    CAPTURED = "Captured"    # an image is selected or captured, ready to classify
    SUBMITTED = "Submitted"  # classification in flight


@dataclass(frozen=True)
class ImageData:
    data: str                  # base64 of the image bytes
    mime_type: str
    name: Optional[str] = None

    @classmethod
    def from_bytes(cls, raw: bytes, mime_type: str, name: Optional[str] = None) -> "ImageData":
        return cls(data=base64.standard_b64encode(raw).decode("ascii"), mime_type=mime_type, name=name)

    def raw_bytes(self) -> bytes:
        return base64.standard_b64decode(self.data)
