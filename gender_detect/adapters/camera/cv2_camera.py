"""
OpenCV webcam capture adapter.
CAMERA_INDEX (default 0, usually the front-facing webcam) selects the device.
"""
import cv2
from gender_detect.adapters.camera.base import CameraAdapter


class CV2Camera(CameraAdapter):
    def __init__(self, status_store, index: int = 0, jpeg_quality: int = 85):
        self.status = status_store
        self._index = index
        self._quality = jpeg_quality
        self._cap = None

    @property
    def is_open(self) -> bool:
        return self._cap is not None and self._cap.isOpened()

    def open(self) -> bool:
        if self.is_open:
            return True
        self._cap = cv2.VideoCapture(self._index)
        if not self._cap.isOpened():
            self.status.log(f"cv2_camera: failed to open device {self._index}")
            self.release()
            return False
        self.status.log(f"cv2_camera: device {self._index} open")
        return True

    def read_jpeg(self) -> bytes | None:
        if not self.is_open:
            return None
        ret, frame = self._cap.read()
        if not ret or frame is None:
            self.status.log("cv2_camera: frame capture failed")
            return None
        ok, buf = cv2.imencode(".jpg", frame, [cv2.IMWRITE_JPEG_QUALITY, self._quality])
        if not ok:
            self.status.log("cv2_camera: jpeg encode failed")
            return None
        return bytes(buf)

    def release(self):
        if self._cap is not None:
            self._cap.release()
            self._cap = None
            self.status.log(f"cv2_camera: device {self._index} released")
