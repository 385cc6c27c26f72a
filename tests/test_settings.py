"""Tests for environment-driven settings and adapter selection."""

from __future__ import annotations

import pytest

from gender_detect.adapters.vision.claude_vision import ClaudeVision
from gender_detect.adapters.vision.factory import build_vision
from gender_detect.adapters.vision.gemini_vision import GeminiVision
from gender_detect.adapters.vision.mock_vision import MockVision
from gender_detect.services.settings import load_settings

_VARS = ("VISION_ADAPTER", "GEMINI_API_KEY", "API_KEY", "ANTHROPIC_API_KEY", "CAMERA_INDEX", "GEMINI_MODEL")


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    # setenv first so monkeypatch restores the original state, including vars set by load_dotenv
    for name in _VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


def test_defaults_without_key() -> None:
    settings = load_settings(env_file=None)

    assert settings.vision_adapter == "gemini"
    assert settings.api_key is None
    assert settings.camera_index == 0


def test_gemini_key_falls_back_to_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("API_KEY", "legacy")

    assert load_settings(env_file=None).api_key == "legacy"

    monkeypatch.setenv("GEMINI_API_KEY", "primary")
    assert load_settings(env_file=None).api_key == "primary"


def test_claude_uses_anthropic_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("VISION_ADAPTER", "Claude")
    monkeypatch.setenv("GEMINI_API_KEY", "ignored")
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-test")

    settings = load_settings(env_file=None)

    assert settings.vision_adapter == "claude"
    assert settings.api_key == "sk-test"


def test_dotenv_file_does_not_override_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("GEMINI_API_KEY=from-file\nCAMERA_INDEX=2\nGEMINI_MODEL=gemini-file\n", encoding="utf-8")
    monkeypatch.setenv("GEMINI_API_KEY", "from-env")

    settings = load_settings(env_file=env_file)

    assert settings.api_key == "from-env"
    assert settings.camera_index == 2
    assert settings.gemini_model == "gemini-file"


@pytest.mark.parametrize(
    ("adapter", "expected"),
    [("gemini", GeminiVision), ("claude", ClaudeVision), ("mock", MockVision), ("unknown", GeminiVision)],
)
def test_build_vision(monkeypatch: pytest.MonkeyPatch, status, adapter: str, expected: type) -> None:
    monkeypatch.setenv("VISION_ADAPTER", adapter)

    vision = build_vision(load_settings(env_file=None), status)

    assert isinstance(vision, expected)
