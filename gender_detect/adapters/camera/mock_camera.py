"""Mock camera: serves a synthetic gradient frame, for tests and hosts without a webcam."""
import cv2
import numpy as np
from gender_detect.adapters.camera.base import CameraAdapter


class MockCamera(CameraAdapter):
    def __init__(self, status_store, fail_open: bool = False, fail_read: bool = False,
                 width: int = 64, height: int = 48):
        self.status = status_store
        self.fail_open = fail_open
        self.fail_read = fail_read
        self._size = (height, width)
        self._open = False
        self.open_count = 0
        self.release_count = 0

    @property
    def is_open(self) -> bool:
        return self._open

    def open(self) -> bool:
        if self.fail_open:
            self.status.log("mock_camera: open refused")
            return False
        self._open = True
        self.open_count += 1
        self.status.log("mock_camera: open")
        return True

    def read_jpeg(self) -> bytes | None:
        if not self._open or self.fail_read:
            self.status.log("mock_camera: no frame")
            return None
        h, w = self._size
        frame = np.zeros((h, w, 3), dtype=np.uint8)
        frame[:, :, 0] = np.linspace(0, 255, w, dtype=np.uint8)
        frame[:, :, 2] = np.linspace(255, 0, h, dtype=np.uint8)[:, None]
        ok, buf = cv2.imencode(".jpg", frame)
        if not ok:
            return None
        return bytes(buf)

    def release(self):
        if self._open:
            self._open = False
            self.release_count += 1
            self.status.log("mock_camera: released")
