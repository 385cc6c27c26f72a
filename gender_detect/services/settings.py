import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

ENV_FILE = Path(__file__).resolve().parents[1] / ".env"


@dataclass(frozen=True)
class Settings:
    vision_adapter: str = "gemini"          # gemini | claude | mock
    api_key: Optional[str] = None           # credential for the selected adapter
    gemini_model: str = "gemini-2.5-flash"
    gemini_base_url: str = "https://generativelanguage.googleapis.com"
    claude_model: str = "claude-haiku-4-5-20251001"
    mock_vision_reply: str = "Indeterminate"
    vision_timeout: float = 30.0
    camera_adapter: str = "cv2"             # cv2 | mock
    camera_index: int = 0
    jpeg_quality: int = 85


def load_settings(env_file: Path | str | None = ENV_FILE) -> Settings:
    """Build Settings from the process environment, after loading gender_detect/.env."""
    if env_file is not None:
        load_dotenv(dotenv_path=env_file, override=False)

    adapter = os.getenv("VISION_ADAPTER", "gemini").lower()
    if adapter == "claude":
        api_key = os.getenv("ANTHROPIC_API_KEY")
    elif adapter == "mock":
        api_key = None
    else:
        api_key = os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY")

    return Settings(
        vision_adapter=adapter,
        api_key=api_key or None,
        gemini_model=os.getenv("GEMINI_MODEL", Settings.gemini_model),
        gemini_base_url=os.getenv("GEMINI_BASE_URL", Settings.gemini_base_url),
        claude_model=os.getenv("CLAUDE_MODEL", Settings.claude_model),
        mock_vision_reply=os.getenv("MOCK_VISION_REPLY", Settings.mock_vision_reply),
        vision_timeout=float(os.getenv("VISION_TIMEOUT", "30")),
        camera_adapter=os.getenv("CAMERA_ADAPTER", "cv2").lower(),
        camera_index=int(os.getenv("CAMERA_INDEX", "0")),
        jpeg_quality=int(os.getenv("JPEG_QUALITY", "85")),
    )
