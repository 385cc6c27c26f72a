from abc import ABC, abstractmethod


class CameraAdapter(ABC):
    @abstractmethod
    def open(self) -> bool:
        """Open the video stream. Returns False if the device is unavailable."""
        ...

    @abstractmethod
    def read_jpeg(self) -> bytes | None:
        """Grab the current frame. Returns JPEG bytes or None on failure."""
        ...

    @abstractmethod
    def release(self):
        """Stop the stream and drop the device handle. Safe to call repeatedly."""
        ...

    @property
    @abstractmethod
    def is_open(self) -> bool:
        ...
