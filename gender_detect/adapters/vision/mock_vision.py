from gender_detect.adapters.vision.base import VisionAdapter
from gender_detect.orchestrator.contracts import ImageData


class MockVision(VisionAdapter):
    requires_credential = False

    def __init__(self, status_store, reply: str = "Indeterminate", error: Exception | None = None):
        self.status = status_store
        self.reply = reply
        self.error = error
        self.calls = 0

    async def ask(self, image: ImageData, prompt: str) -> str:
        self.calls += 1
        if self.error is not None:
            raise self.error
        self.status.log(f"mock_vision: {self.reply!r} ({image.mime_type}, {len(image.data)} b64 chars)")
        return self.reply
