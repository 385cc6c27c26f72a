from gender_detect.adapters.vision.base import VisionAdapter


def build_vision(settings, status) -> VisionAdapter:
    """Vision adapter selected by VISION_ADAPTER: gemini | claude | mock (default: gemini)."""
    if settings.vision_adapter == "claude":
        from gender_detect.adapters.vision.claude_vision import ClaudeVision
        return ClaudeVision(status, api_key=settings.api_key, model=settings.claude_model,
                            timeout=settings.vision_timeout)

    if settings.vision_adapter == "mock":
        from gender_detect.adapters.vision.mock_vision import MockVision
        return MockVision(status, reply=settings.mock_vision_reply)

    from gender_detect.adapters.vision.gemini_vision import GeminiVision
    return GeminiVision(status, api_key=settings.api_key, model=settings.gemini_model,
                        base_url=settings.gemini_base_url, timeout=settings.vision_timeout)
