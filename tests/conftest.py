import os

# The service wires its adapters at import time; keep tests off real hardware
os.environ["VISION_ADAPTER"] = "mock"
os.environ["CAMERA_ADAPTER"] = "mock"
os.environ["MOCK_FRAMES_DIR"] = os.path.join(os.path.dirname(__file__), "no_frames_here")
os.environ["TTS_ENABLED"] = "0"
os.environ["EXHAUSTION_POLICY"] = "hold"
os.environ["LABEL_CASE_SENSITIVE"] = "0"

import pytest

from guessgame.engine.game_logic import GameLogic
from guessgame.services.status_store import StatusStore


class RecordingTTS:
    def __init__(self):
        self.said = []

    def say(self, line_key, style=None, **fmt):
        self.said.append((line_key, fmt))


@pytest.fixture
def logic():
    return GameLogic()


@pytest.fixture
def status():
    return StatusStore()


@pytest.fixture
def tts():
    return RecordingTTS()
