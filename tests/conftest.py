import asyncio
import threading
import time

import pytest

from gender_detect.adapters.camera.mock_camera import MockCamera
from gender_detect.adapters.vision.base import VisionAdapter
from gender_detect.adapters.vision.mock_vision import MockVision
from gender_detect.orchestrator.classifier import ClassificationClient
from gender_detect.orchestrator.state_machine import AcquisitionController
from gender_detect.services.status_store import StatusStore

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


class FakeUpload:
    """Stands in for fastapi.UploadFile."""

    def __init__(self, data: bytes = PNG_BYTES, content_type: str | None = "image/png",
                 filename: str | None = "face.png", size: int | None = None,
                 error: Exception | None = None, gate: asyncio.Event | None = None):
        self.data = data
        self.content_type = content_type
        self.filename = filename
        self.size = size
        self.error = error
        self.gate = gate
        self.reads = 0

    async def read(self) -> bytes:
        self.reads += 1
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.data


class KeyedVision(MockVision):
    """Mock that behaves like a hosted model: needs an API key."""
    requires_credential = True


class GatedVision(VisionAdapter):
    """Holds the reply until the test opens the gate."""
    requires_credential = False

    def __init__(self, reply: str = "Male"):
        self.reply = reply
        self.started = asyncio.Event()
        self.gate = asyncio.Event()

    async def ask(self, image, prompt):
        self.started.set()
        await self.gate.wait()
        return self.reply


class SlowCamera(MockCamera):
    """open() blocks its worker thread like a real device: sleeps, or waits for ``gate``."""

    def __init__(self, status_store, delay: float = 0.0, gated: bool = False):
        super().__init__(status_store)
        self.delay = delay
        self.gated = gated
        self.opening = threading.Event()
        self.gate = threading.Event()

    def open(self) -> bool:
        self.opening.set()
        if self.gated:
            self.gate.wait(timeout=5)
        time.sleep(self.delay)
        return super().open()


@pytest.fixture
def status() -> StatusStore:
    return StatusStore()


@pytest.fixture
def camera(status) -> MockCamera:
    return MockCamera(status)


@pytest.fixture
def controller(camera, status) -> AcquisitionController:
    return AcquisitionController(camera, status)


@pytest.fixture
def mock_client(status) -> ClassificationClient:
    return ClassificationClient(MockVision(status, reply="Female"), status)
