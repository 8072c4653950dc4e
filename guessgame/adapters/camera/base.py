from abc import ABC, abstractmethod


class CameraAdapter(ABC):
    @abstractmethod
    def capture_bytes(self) -> bytes | None:
        """Capture one frame. Returns JPEG bytes or None when no frame is available."""
        ...

    def release(self):
        """Free the device. No-op for cameras that hold nothing open."""
