"""
Google Gemini vision adapter.
Calls the generateContent REST endpoint with the image as inline data.
The API key comes from Settings (GEMINI_API_KEY / API_KEY in gender_detect/.env).

No SDK needed, plain httpx like the rest of the service.
"""
import httpx
from gender_detect.adapters.vision.base import VisionAdapter
from gender_detect.orchestrator.contracts import ImageData

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com"


class MalformedResponse(ValueError):
    pass


class GeminiVision(VisionAdapter):
    def __init__(self, status_store, api_key: str | None, model: str,
                 base_url: str = DEFAULT_BASE_URL, timeout: float = 30.0,
                 client: httpx.AsyncClient | None = None):
        self.status = status_store
        self.model = model
        self._api_key = api_key
        self._url = f"{base_url.rstrip('/')}/v1beta/models/{model}:generateContent"
        self._client = client or httpx.AsyncClient(timeout=timeout)
        if api_key:
            self.status.log(f"gemini_vision: ready (model={model})")
        else:
            self.status.log("gemini_vision: GEMINI_API_KEY not set")

    async def ask(self, image: ImageData, prompt: str) -> str:
        # No generationConfig: the model's default sampling is used
        payload = {
            "contents": [
                {
                    "parts": [
                        {"inline_data": {"mime_type": image.mime_type, "data": image.data}},
                        {"text": prompt},
                    ]
                }
            ]
        }
        headers = {
            "x-goog-api-key": self._api_key or "",
            "Content-Type": "application/json",
        }
        resp = await self._client.post(self._url, json=payload, headers=headers)
        if not resp.is_success:
            self.status.log(f"gemini_vision: HTTP {resp.status_code}: {resp.text[:300]}")
            resp.raise_for_status()
        raw = self._extract_text(resp.json())
        self.status.log(f"gemini_vision: raw='{raw}'")
        return raw

    def _extract_text(self, body: dict) -> str:
        try:
            parts = body["candidates"][0]["content"]["parts"]
        except (KeyError, IndexError, TypeError) as e:
            raise MalformedResponse(f"no candidate text in response: {e!r}") from e
        texts = [p["text"] for p in parts if isinstance(p, dict) and isinstance(p.get("text"), str)]
        if not texts:
            raise MalformedResponse("candidate has no text parts")
        return "".join(texts)

    async def aclose(self):
        await self._client.aclose()
