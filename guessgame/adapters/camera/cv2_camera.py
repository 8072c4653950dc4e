"""
OpenCV webcam capture adapter.
CAMERA_INDEX (default 0) selects the device, CAM_WIDTH / CAM_HEIGHT the
requested resolution. Frames are mirrored so the player sees the sign the
way they hold it.
"""
import os
import cv2
from guessgame.adapters.camera.base import CameraAdapter

JPEG_QUALITY = 85


class CV2Camera(CameraAdapter):
    def __init__(self, status_store, index: int | None = None, mirror: bool = True):
        self.status = status_store
        self._index = index if index is not None else int(os.getenv("CAMERA_INDEX", "0"))
        self._width = int(os.getenv("CAM_WIDTH", "640"))
        self._height = int(os.getenv("CAM_HEIGHT", "480"))
        self._mirror = mirror
        self._cap = None

    @property
    def is_open(self) -> bool:
        return self._cap is not None and self._cap.isOpened()

    def _open(self):
        if self.is_open:
            return
        self._cap = cv2.VideoCapture(self._index)
        if not self._cap.isOpened():
            self.status.log(f"cv2_camera: failed to open device {self._index}")
            return
        self._cap.set(cv2.CAP_PROP_FRAME_WIDTH, self._width)
        self._cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self._height)
        self.status.log(f"cv2_camera: opened device {self._index} ({self._width}x{self._height})")

    def capture_bytes(self) -> bytes | None:
        self._open()
        if not self.is_open:
            return None
        ret, frame = self._cap.read()
        if not ret or frame is None:
            self.status.log("cv2_camera: frame capture failed")
            return None
        if self._mirror:
            frame = cv2.flip(frame, 1)
        ok, buf = cv2.imencode(".jpg", frame, [cv2.IMWRITE_JPEG_QUALITY, JPEG_QUALITY])
        if not ok:
            return None
        return bytes(buf)

    def release(self):
        if self.is_open:
            self._cap.release()
        self._cap = None
