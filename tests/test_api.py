"""End-to-end flows through the FastAPI service with mock camera and vision."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from conftest import PNG_BYTES, KeyedVision
from gender_detect.adapters.camera.mock_camera import MockCamera
from gender_detect.adapters.vision.mock_vision import MockVision
from gender_detect.services.api import create_app
from gender_detect.services.settings import Settings
from gender_detect.services.status_store import StatusStore


def _client(reply: str = "Male", vision=None, api_key: str | None = None) -> TestClient:
    status = StatusStore()
    app = create_app(
        Settings(vision_adapter="mock", camera_adapter="mock", api_key=api_key),
        camera=MockCamera(status),
        vision=vision or MockVision(status, reply=reply),
        status=status,
    )
    return TestClient(app)


@pytest.fixture
def client() -> TestClient:
    return _client()


def _upload(client: TestClient, data: bytes = PNG_BYTES, mime_type: str = "image/png", name: str = "face.png"):
    return client.post("/select_file", files={"file": (name, data, mime_type)})


def test_initial_status(client: TestClient) -> None:
    body = client.get("/status").json()

    assert body["state"] == "Idle"
    assert body["result"] == "Unset"
    assert body["busy"] is False
    assert body["image"] is None
    assert body["error"] is None


def test_upload_then_classify(client: TestClient) -> None:
    uploaded = _upload(client).json()
    assert uploaded["ok"] is True
    assert uploaded["state"] == "Captured"
    assert uploaded["image"] == {"name": "face.png", "mime_type": "image/png", "size": len(PNG_BYTES)}

    classified = client.post("/classify").json()
    assert classified == {"ok": True, "result": "Male", "state": "Captured",
                          "error_code": None, "error": None}
    assert client.get("/status").json()["result"] == "Male"


def test_image_preview(client: TestClient) -> None:
    assert client.get("/image").status_code == 404

    _upload(client, mime_type="image/webp", name="face.webp")
    resp = client.get("/image")

    assert resp.status_code == 200
    assert resp.headers["content-type"] == "image/webp"
    assert resp.content == PNG_BYTES


def test_upload_invalid_type(client: TestClient) -> None:
    body = _upload(client, data=b"hello", mime_type="text/plain", name="notes.txt").json()

    assert body["ok"] is False
    assert body["error_code"] == "INVALID_FILE_TYPE"
    assert body["state"] == "Idle"
    assert client.get("/status").json()["error"].startswith("Invalid file type")


def test_upload_too_large(client: TestClient) -> None:
    body = _upload(client, data=b"x" * (4 * 1024 * 1024 + 1)).json()

    assert body["ok"] is False
    assert body["error_code"] == "FILE_TOO_LARGE"
    assert body["image"] is None


def test_camera_capture_flow(client: TestClient) -> None:
    opened = client.post("/camera/open").json()
    assert opened["ok"] is True
    assert opened["state"] == "CameraLive"
    assert client.get("/health").json()["camera_open"] is True

    captured = client.post("/camera/capture").json()
    assert captured["ok"] is True
    assert captured["state"] == "Captured"
    assert captured["image"]["mime_type"] == "image/jpeg"
    assert client.get("/health").json()["camera_open"] is False

    assert client.post("/classify").json()["result"] == "Male"


def test_camera_frame_while_live(client: TestClient) -> None:
    assert client.get("/camera/frame").status_code == 404

    client.post("/camera/open")
    resp = client.get("/camera/frame")

    assert resp.status_code == 200
    assert resp.headers["content-type"] == "image/jpeg"
    assert resp.content[:2] == b"\xff\xd8"
    assert client.get("/health").json()["camera_open"] is True
    assert client.get("/status").json()["state"] == "CameraLive"


def test_capture_when_camera_not_live(client: TestClient) -> None:
    body = client.post("/camera/capture").json()

    assert body["ok"] is False
    assert body["error_code"] == "NOT_CAMERA_LIVE"
    assert body["state"] == "Idle"


def test_camera_unavailable() -> None:
    client = _client()
    client.app.state.camera.fail_open = True

    body = client.post("/camera/open").json()

    assert body["ok"] is False
    assert body["error_code"] == "CAMERA_UNAVAILABLE"
    assert body["state"] == "Idle"


def test_classify_without_image(client: TestClient) -> None:
    body = client.post("/classify").json()

    assert body["ok"] is False
    assert body["error_code"] == "NO_IMAGE"


def test_missing_credential_returns_error_without_call() -> None:
    status = StatusStore()
    vision = KeyedVision(status, reply="Female")
    client = _client(vision=vision, api_key=None)
    _upload(client)

    body = client.post("/classify").json()

    assert body["ok"] is False
    assert body["result"] == "Error"
    assert body["error_code"] == "MISSING_CREDENTIAL"
    assert body["error"] == "Could not classify the image. Please try again."
    assert vision.calls == 0
    assert client.get("/health").json()["credential_configured"] is False


def test_vision_failure_is_generic_error() -> None:
    status = StatusStore()
    client = _client(vision=MockVision(status, error=RuntimeError("quota exceeded")))
    _upload(client)

    body = client.post("/classify").json()

    assert body["result"] == "Error"
    assert body["error_code"] == "CLASSIFICATION_FAILURE"
    assert "quota" not in body["error"]
    assert client.get("/status").json()["state"] == "Captured"


def test_reset_is_idempotent(client: TestClient) -> None:
    _upload(client)
    client.post("/classify")

    first = client.post("/reset").json()
    second = client.post("/reset").json()

    assert first == second
    assert first["state"] == "Idle"
    status = client.get("/status").json()
    assert status["result"] == "Unset"
    assert status["image"] is None
    assert status["camera_open"] is False


def test_reset_releases_live_camera(client: TestClient) -> None:
    client.post("/camera/open")

    client.post("/reset")

    assert client.get("/health").json()["camera_open"] is False


def test_shutdown_releases_camera() -> None:
    status = StatusStore()
    camera = MockCamera(status)
    app = create_app(Settings(vision_adapter="mock"), camera=camera,
                     vision=MockVision(status), status=status)

    with TestClient(app) as client:
        client.post("/camera/open")
        assert camera.is_open

    assert not camera.is_open
