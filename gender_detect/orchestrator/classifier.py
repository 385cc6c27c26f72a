"""
Classification client: one vision call per image, reply normalized to a GenderResult.

The prompt below is what the model is tuned against; keep it byte-for-byte.
"""
import re
from gender_detect.orchestrator.contracts import GenderResult, ImageData

PROMPT = (
    "Analyze the provided image. What is the perceived gender of the most prominent human face visible? \n"
    "Respond with *only one* of the following keywords: 'Male', 'Female', 'Indeterminate'. \n"
    "If no clear human face is visible, respond with 'NoFaceDetected'."
)

_KEYWORDS = {
    r.value: r
    for r in (GenderResult.MALE, GenderResult.FEMALE, GenderResult.INDETERMINATE, GenderResult.NO_FACE_DETECTED)
}

# Fallback for chatty replies, first match wins.
# "female" contains "male", so it has to be checked first.
RESPONSE_RULES = [
    (r"female",                  GenderResult.FEMALE),
    (r"male",                    GenderResult.MALE),
    (r"indeterminate",           GenderResult.INDETERMINATE),
    (r"no face|nofacedetected",  GenderResult.NO_FACE_DETECTED),
]


def normalize_response(text: str) -> GenderResult:
    raw = text.strip()
    if raw in _KEYWORDS:
        return _KEYWORDS[raw]
    for pattern, result in RESPONSE_RULES:
        if re.search(pattern, raw, re.IGNORECASE):
            return result
    return GenderResult.INDETERMINATE


class ClassificationClient:
    def __init__(self, vision, status_store, api_key: str | None = None):
        self.vision = vision
        self.status = status_store
        self._api_key = api_key

    @property
    def configured(self) -> bool:
        return bool(self._api_key) or not self.vision.requires_credential

    async def classify(self, image: ImageData) -> GenderResult:
        """Never raises: every failure comes back as GenderResult.ERROR."""
        if not self.configured:
            self.status.log("classifier: config fault: API key not set, skipping vision call")
            return GenderResult.ERROR

        try:
            text = await self.vision.ask(image, PROMPT)
            if not isinstance(text, str):
                raise TypeError(f"expected text reply, got {type(text).__name__}")
            result = normalize_response(text)
        except Exception as e:
            self.status.log(f"classifier: runtime fault: {type(e).__name__}: {e}")
            return GenderResult.ERROR

        if text.strip() != result.value:
            self.status.log(f"classifier: unexpected reply '{text.strip()}' → {result.value}")
        else:
            self.status.log(f"classifier: → {result.value}")
        return result
