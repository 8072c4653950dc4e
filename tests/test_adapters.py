import httpx
import pytest

from guessgame.adapters.camera.mock_camera import MockCamera
from guessgame.adapters.tts import lines as L
from guessgame.adapters.tts.player_local import LocalPlayerTTS
from guessgame.adapters.vision.http_vision import HttpVision
from guessgame.adapters.vision.mock_vision import MockVision


def _http_vision(status, handler):
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return HttpVision(status, base_url="http://model.local/", client=client)


def test_http_vision_posts_frame(status):
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["body"] = request.content
        seen["type"] = request.headers["content-type"]
        return httpx.Response(200, json={"label": "stop", "confidence": 0.87})

    result = _http_vision(status, handler).identify(b"jpeg-bytes")
    assert (result.label, result.confidence) == ("stop", 0.87)
    assert seen == {"url": "http://model.local/predict", "body": b"jpeg-bytes", "type": "image/jpeg"}


def test_http_vision_no_prediction(status):
    vision = _http_vision(status, lambda request: httpx.Response(200, json={"label": None}))
    assert vision.identify(b"x") is None
    assert vision.recognize_once() is None


def test_http_vision_raises_on_server_error(status):
    vision = _http_vision(status, lambda request: httpx.Response(500))
    with pytest.raises(httpx.HTTPStatusError):
        vision.identify(b"x")


def test_mock_vision_script_then_random(status):
    vision = MockVision(status, script=["higher", None])
    assert vision.recognize_once().label == "higher"
    assert vision.identify(b"ignored") is None
    assert vision.recognize_once().label in ("higher", "lower", "stop")


def test_mock_camera_cycles_frames(status, tmp_path):
    (tmp_path / "a.jpg").write_bytes(b"a")
    (tmp_path / "b.jpg").write_bytes(b"b")
    cam = MockCamera(status, frames_dir=tmp_path)
    assert [cam.capture_bytes() for _ in range(3)] == [b"a", b"b", b"a"]


def test_mock_camera_without_frames(status, tmp_path):
    assert MockCamera(status, frames_dir=tmp_path).capture_bytes() is None


def test_tts_formats_guess(status, tmp_path, monkeypatch):
    tts = LocalPlayerTTS(status, assets_dir=str(tmp_path))
    spoken = []
    monkeypatch.setattr(tts, "_say_text", spoken.append)
    tts.say(L.GUESS, number=42)
    tts.say(L.CORRECT, style="playful", number=7)
    tts.say(L.NOT_SURE, style="unknown-style")
    assert spoken == ["Is it 42?", "7! Told you I'd get it.", "Sorry, I did not catch that."]


def test_tts_speaks_only_through_line_keys():
    public = [name for name in vars(LocalPlayerTTS) if not name.startswith("_")]
    assert sorted(public) == ["line_text", "say"]


def test_tts_plays_prerendered_line(status, tmp_path, monkeypatch):
    (tmp_path / "polite").mkdir()
    (tmp_path / "polite" / L.LINE_WAV[L.GAME_START]).write_bytes(b"mp3")
    tts = LocalPlayerTTS(status, assets_dir=str(tmp_path))
    played = []
    monkeypatch.setattr(tts, "_play_audio", played.append)
    tts.say(L.GAME_START)
    assert played == [str(tmp_path / "polite" / "game_start.mp3")]
