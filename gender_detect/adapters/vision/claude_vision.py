"""
Claude vision adapter.

Sends the image to a Claude model via the Anthropic API with the same
classification prompt as the Gemini adapter. Selected with VISION_ADAPTER=claude;
the key comes from ANTHROPIC_API_KEY.
"""
import anthropic
from gender_detect.adapters.vision.base import VisionAdapter
from gender_detect.orchestrator.contracts import ImageData

# Image block media types the messages API accepts (no HEIC/HEIF)
SUPPORTED_MIME_TYPES = frozenset({"image/jpeg", "image/png", "image/gif", "image/webp"})


class UnsupportedImageType(ValueError):
    pass


class ClaudeVision(VisionAdapter):
    def __init__(self, status_store, api_key: str | None, model: str,
                 timeout: float = 30.0, client: anthropic.AsyncAnthropic | None = None):
        self.status = status_store
        self.model = model
        self._client = client
        if self._client is None and api_key:
            self._client = anthropic.AsyncAnthropic(api_key=api_key, timeout=timeout)
        if self._client is not None:
            self.status.log(f"claude_vision: ready ({model})")
        else:
            self.status.log("claude_vision: ANTHROPIC_API_KEY not set")

    async def ask(self, image: ImageData, prompt: str) -> str:
        if image.mime_type not in SUPPORTED_MIME_TYPES:
            self.status.log(f"claude_vision: {image.mime_type} not accepted by the API, not sending")
            raise UnsupportedImageType(image.mime_type)
        if self._client is None:
            raise RuntimeError("claude_vision: client not configured")
        message = await self._client.messages.create(
            model=self.model,
            max_tokens=16,
            messages=[
                {
                    "role": "user",
                    "content": [
                        {
                            "type": "image",
                            "source": {
                                "type": "base64",
                                "media_type": image.mime_type,
                                "data": image.data,
                            },
                        },
                        {"type": "text", "text": prompt},
                    ],
                }
            ],
        )
        raw = message.content[0].text
        self.status.log(f"claude_vision: raw response = '{raw}'")
        return raw

    async def aclose(self):
        if self._client is not None:
            await self._client.close()
