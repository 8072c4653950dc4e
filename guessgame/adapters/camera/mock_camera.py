"""Mock camera: cycles through JPEG files in a folder (the classifier refs by default)."""
import itertools
from pathlib import Path
from guessgame.adapters.camera.base import CameraAdapter

REFS_DIR = Path(__file__).parent.parent / "vision" / "refs"


class MockCamera(CameraAdapter):
    def __init__(self, status_store, frames_dir: Path | str | None = None):
        self.status = status_store
        self.frames_dir = Path(frames_dir) if frames_dir else REFS_DIR
        self._frames = None

    def capture_bytes(self) -> bytes | None:
        if self._frames is None:
            jpegs = sorted(self.frames_dir.glob("*.jpg"))
            if not jpegs:
                self.status.log(f"mock_camera: no jpg frames in {self.frames_dir}")
                return None
            self._frames = itertools.cycle(jpegs)
        chosen = next(self._frames)
        self.status.log(f"mock_camera: serving {chosen.name}")
        return chosen.read_bytes()
