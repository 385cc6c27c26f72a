import asyncio
from typing import Optional

from gender_detect.orchestrator.contracts import (
    ALLOWED_MIME_TYPES, CAPTURE_MIME_TYPE, CAPTURE_NAME, MAX_UPLOAD_BYTES,
    AcquisitionState, GenderResult, ImageData,
)
from gender_detect.orchestrator import errors


class AcquisitionController:
    """
    Owns the single image slot, the camera handle and the live result.

      Idle ──open_camera──▶ CameraLive ──capture_frame──▶ Captured ──classify──▶ Submitted
        ▲                       │                           ▲  │                     │
        └──────── reset ────────┴────── select_file ────────┘  └─────── result ◀─────┘

    The camera is open iff state is CameraLive. Every method that leaves
    CameraLive goes through _release_camera().

    All methods are meant to be called from one event loop. Blocking device
    calls run in a worker thread while holding ``_device_lock``; a reset that
    lands meanwhile leaves the device to the lock holder, which releases it
    once it sees ``generation`` has moved. Anything that happens during the
    file read or the classification call bumps ``generation`` too, so the
    late result is dropped.
    """

    def __init__(self, camera, status_store):
        self.camera = camera
        self.status = status_store
        self.state = AcquisitionState.IDLE
        self.image: Optional[ImageData] = None
        self.result = GenderResult.UNSET
        self.error: Optional[str] = None
        self.generation = 0
        self._device_lock = asyncio.Lock()

    @property
    def busy(self) -> bool:
        return self.state == AcquisitionState.SUBMITTED

    # ── acquisition ────────────────────────────────────────────────────────

    async def select_file(self, upload) -> Optional[ImageData]:
        """Store an uploaded image. Returns None if a reset superseded the read."""
        if self.state == AcquisitionState.CAMERA_LIVE:
            self._release_camera()
            self.state = AcquisitionState.IDLE
        self._invalidate()
        self.error = None
        token = self.generation

        name = getattr(upload, "filename", None)
        mime_type = getattr(upload, "content_type", None) or ""
        self.status.log(f"acquisition: select_file name={name!r} type={mime_type!r}")

        if mime_type not in ALLOWED_MIME_TYPES:
            self._fail(errors.InvalidFileType())
        declared = getattr(upload, "size", None)
        if declared is not None and declared > MAX_UPLOAD_BYTES:
            self._fail(errors.FileTooLarge())

        raw, read_error = None, None
        try:
            raw = await upload.read()
        except Exception as e:
            read_error = e

        if token != self.generation:
            self.status.log("acquisition: select_file superseded, discarding upload")
            return None
        if read_error is not None:
            self.status.log(f"acquisition: read error {type(read_error).__name__}: {read_error}")
            self._fail(errors.FileReadFailure())
        if not raw:
            self._fail(errors.FileReadFailure("The selected file is empty."))
        if len(raw) > MAX_UPLOAD_BYTES:
            self._fail(errors.FileTooLarge())

        self.image = ImageData.from_bytes(raw, mime_type=mime_type, name=name)
        self.state = AcquisitionState.CAPTURED
        self.status.log(f"acquisition: selected {name!r} ({len(raw)} bytes)")
        return self.image

    async def open_camera(self) -> bool:
        """Go live. Returns False if a reset or another acquisition superseded the open."""
        self.reset()
        token = self.generation
        self.status.log("acquisition: open_camera")
        async with self._device_lock:
            if token != self.generation:
                return False
            opened = await asyncio.to_thread(self.camera.open)
            if token != self.generation:
                self.status.log("acquisition: open_camera superseded, releasing device")
                self.camera.release()
                return False
            if not opened:
                self.camera.release()
                self._fail(errors.CameraUnavailable())
            self.state = AcquisitionState.CAMERA_LIVE
            return True

    async def capture_frame(self) -> Optional[ImageData]:
        if self.state != AcquisitionState.CAMERA_LIVE:
            self.status.log(f"acquisition: capture_frame ignored in state {self.state.value}")
            return None

        async with self._device_lock:
            if self.state != AcquisitionState.CAMERA_LIVE:
                return None
            token = self.generation
            frame = await asyncio.to_thread(self.camera.read_jpeg)
            self.camera.release()
            if token != self.generation:
                self.status.log("acquisition: capture_frame superseded, frame discarded")
                return None
            if not frame:
                self.state = AcquisitionState.IDLE
                self._fail(errors.CameraUnavailable("Could not capture a frame from the camera."))

            self.image = ImageData.from_bytes(frame, mime_type=CAPTURE_MIME_TYPE, name=CAPTURE_NAME)
            self.state = AcquisitionState.CAPTURED
            self.status.log(f"acquisition: captured frame ({len(frame)} bytes)")
            return self.image

    async def preview_frame(self) -> Optional[bytes]:
        """Current JPEG frame while CameraLive, for the live view. Changes no state."""
        if self.state != AcquisitionState.CAMERA_LIVE:
            return None
        async with self._device_lock:
            if self.state != AcquisitionState.CAMERA_LIVE:
                return None
            token = self.generation
            frame = await asyncio.to_thread(self.camera.read_jpeg)
            if token != self.generation:
                self.camera.release()
                return None
            return frame

    def reset(self):
        self._release_camera()
        self.generation += 1
        self.image = None
        self.result = GenderResult.UNSET
        self.error = None
        self.state = AcquisitionState.IDLE

    def close(self):
        """Teardown: the device handle must not outlive the controller."""
        if self.state == AcquisitionState.CAMERA_LIVE:
            self.state = AcquisitionState.IDLE
        self.generation += 1
        self._release_camera()

    # ── classification ─────────────────────────────────────────────────────

    async def classify(self, client) -> Optional[GenderResult]:
        """Run one classification of the current image.

        Returns None when the result arrived after a reset or a new
        acquisition; it is then discarded.
        """
        if self.state == AcquisitionState.SUBMITTED:
            raise errors.ClassificationBusy()
        if self.state != AcquisitionState.CAPTURED or self.image is None:
            raise errors.NoImageSelected()

        image = self.image
        self.generation += 1
        token = self.generation
        self.result = GenderResult.UNSET
        self.error = None
        self.state = AcquisitionState.SUBMITTED

        try:
            result = await client.classify(image)
        finally:
            if token == self.generation and self.state == AcquisitionState.SUBMITTED:
                self.state = AcquisitionState.CAPTURED

        if token != self.generation:
            self.status.log(f"acquisition: stale result {result.value} discarded")
            return None

        self.result = result
        if result == GenderResult.ERROR:
            self.error = errors.CLASSIFY_FAILED_MESSAGE
        return result

    def snapshot(self) -> dict:
        image = None
        if self.image is not None:
            image = {"name": self.image.name, "mime_type": self.image.mime_type,
                     "size": len(self.image.raw_bytes())}
        return {
            "state": self.state,
            "busy": self.busy,
            "result": self.result,
            "error": self.error,
            "image": image,
            "camera_open": self.camera.is_open,
        }

    # ── internals ──────────────────────────────────────────────────────────

    def _invalidate(self):
        """Forget the shown result and orphan any in-flight classification."""
        self.generation += 1
        self.result = GenderResult.UNSET
        if self.state == AcquisitionState.SUBMITTED:
            self.state = AcquisitionState.CAPTURED

    def _release_camera(self):
        # A device call in a worker thread owns the handle; it releases on seeing the new generation
        if self._device_lock.locked():
            return
        if self.camera.is_open:
            self.status.log("acquisition: releasing camera")
        self.camera.release()

    def _fail(self, err: errors.AcquisitionError):
        self.error = err.message
        self.status.log(f"acquisition: {err.code}: {err.message}")
        raise err
