import random
from collections import deque
from guessgame.adapters.vision.base import VisionAdapter
from guessgame.engine.contracts import LABELS, RecognizeResult


class MockVision(VisionAdapter):
    """Replays a scripted label sequence, then picks labels at random.

    A None entry in the script means "no prediction this tick".
    """

    def __init__(self, status_store, script=None, confidence: float = 0.9):
        self.status = status_store
        self.confidence = confidence
        self._script = deque(script or [])

    def push(self, *labels):
        self._script.extend(labels)

    def recognize_once(self) -> RecognizeResult | None:
        if self._script:
            label = self._script.popleft()
        else:
            label = random.choice(LABELS)
        self.status.log(f"mock_vision: {label}")
        if label is None:
            return None
        return RecognizeResult(label=label, confidence=self.confidence)

    def identify(self, image_bytes: bytes) -> RecognizeResult | None:
        # frame is ignored
        return self.recognize_once()
