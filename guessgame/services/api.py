import base64
import binascii
import os
from contextlib import asynccontextmanager
from fastapi import FastAPI
from dotenv import load_dotenv
from guessgame.services.models import (
    StatusResponse, RecognizeOut, SearchStateOut,
    FeedbackRequest, TickResponse, ResetResponse, CaptureFrameRequest,
    RECOGNITION_SUCCESS_THRESHOLD,
)
from guessgame.services.status_store import StatusStore
from guessgame.engine.contracts import TickResult
from guessgame.engine.game_logic import GameLogic
from guessgame.engine.game_loop import GuessingGame, DEFAULT_POLL_INTERVAL_S
from guessgame.adapters.tts.player_local import LocalPlayerTTS

load_dotenv(dotenv_path="guessgame/.env", override=False)


def _env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@asynccontextmanager
async def lifespan(_app: FastAPI):
    yield
    game.stop(timeout=1.0)
    if hasattr(vision, "close"):
        vision.close()
    status.log("shutdown: poll loop stopped, adapters closed")


app = FastAPI(title="guessgame", lifespan=lifespan)

status = StatusStore()

logic = GameLogic(
    case_sensitive=_env_flag("LABEL_CASE_SENSITIVE"),
    exhaustion=os.getenv("EXHAUSTION_POLICY", "hold").lower(),
)
status.log(f"engine: case_sensitive={logic.case_sensitive} exhaustion={logic.exhaustion}")

# Vision adapter: VISION_ADAPTER = histogram | http | mock  (default: histogram)
_vision_adapter = os.getenv("VISION_ADAPTER", "histogram").lower()

if _vision_adapter == "http":
    from guessgame.adapters.vision.http_vision import HttpVision
    vision_url = os.getenv("VISION_HTTP_URL", "http://127.0.0.1:9100")
    vision = HttpVision(status, base_url=vision_url)
    status.log(f"vision adapter: http -> {vision_url}")
elif _vision_adapter == "mock":
    from guessgame.adapters.vision.mock_vision import MockVision
    vision = MockVision(status)
else:
    from guessgame.adapters.vision.histogram_vision import HistogramVision
    vision = HistogramVision(status, refs_dir=os.getenv("VISION_REFS_DIR") or None)

status.log(f"vision adapter: {type(vision).__name__}")

# Camera adapter: CAMERA_ADAPTER = cv2 | mock  (default: cv2)
if os.getenv("CAMERA_ADAPTER", "cv2").lower() == "mock":
    from guessgame.adapters.camera.mock_camera import MockCamera
    camera = MockCamera(status, frames_dir=os.getenv("MOCK_FRAMES_DIR") or None)
else:
    from guessgame.adapters.camera.cv2_camera import CV2Camera
    camera = CV2Camera(status)
status.log(f"camera: {type(camera).__name__}")

tts = LocalPlayerTTS(status, style=os.getenv("TTS_STYLE", "polite")) if _env_flag("TTS_ENABLED", "1") else None
status.log(f"tts: {'on' if tts else 'off'}")

game = GuessingGame(
    logic=logic, vision=vision, status_store=status, camera=camera, tts=tts,
    interval_s=float(os.getenv("POLL_INTERVAL_S", str(DEFAULT_POLL_INTERVAL_S))),
)
game.reset_game()


def _search_out() -> SearchStateOut:
    st = logic.state
    return SearchStateOut(left=st.left, right=st.right, guess=st.guess)


def _rec_out(rec):
    if rec is None:
        return None, None
    return (RecognizeOut(label=rec.label, confidence=rec.confidence),
            rec.confidence >= RECOGNITION_SUCCESS_THRESHOLD)


def _tick_out(tr: TickResult) -> TickResponse:
    rec_out, rec_ok = _rec_out(tr.recognized)
    return TickResponse(
        ok=tr.ok, result=tr.result, guess=tr.guess, correct=tr.correct,
        feedback=tr.feedback.value if tr.feedback else None,
        recognized=rec_out, recognition_ok=rec_ok, error_code=tr.error_code,
    )


@app.get("/status", response_model=StatusResponse)
def get_status():
    rec_out, rec_ok = _rec_out(status.last_recognized)
    return StatusResponse(
        busy=status.busy,
        running=status.running,
        round_over=status.round_over,
        computer_guess=status.computer_guess,
        final_number=status.final_number,
        last_result=status.last_result,
        last_error=status.last_error,
        rounds_played=status.rounds_played,
        search=_search_out(),
        exhausted=logic.exhausted,
        recognized=rec_out,
        recognition_ok=rec_ok,
        logs=status.logs,
    )


@app.post("/feedback", response_model=TickResponse)
def feedback(req: FeedbackRequest):
    """Feed one label to the round, as if the classifier had produced it."""
    status.log(f"FEEDBACK: {req.label!r}")
    return _tick_out(game.submit_label(req.label, req.confidence))


@app.post("/tick", response_model=TickResponse)
def tick():
    """Run one poll right now: capture → classify → engine."""
    return _tick_out(game.tick())


@app.post("/start")
def start():
    game.start()
    return {"ok": True, "running": status.running, "interval_s": game.interval_s}


@app.post("/stop")
def stop():
    game.stop(timeout=game.interval_s + 1.0)
    return {"ok": True, "running": status.running}


@app.post("/reset", response_model=ResetResponse)
def reset():
    """Play again."""
    game.reset_game()
    return ResetResponse(ok=True, search=_search_out())


@app.post("/capture_frame", response_model=TickResponse)
def capture_frame(req: CaptureFrameRequest):
    try:
        image_bytes = base64.b64decode(req.image, validate=True)
    except (binascii.Error, ValueError) as e:
        status.log(f"CAPTURE_FRAME decode error: {e}")
        return TickResponse(ok=False, error_code="BAD_IMAGE")

    status.log("CAPTURE_FRAME received")
    try:
        recognized = vision.identify(image_bytes)
    except Exception as e:
        status.log(f"CAPTURE_FRAME vision error: {e}")
        status.last_error = str(e)
        return TickResponse(ok=False, error_code="VISION_ERROR")
    return _tick_out(game.submit(recognized))


@app.post("/calibrate")
def calibrate(req: CaptureFrameRequest, label: str):
    """Save a reference frame for one label.
    Usage: POST /calibrate?label=higher  body: { image: base64 }
    """
    if not hasattr(vision, "calibrate"):
        return {"ok": False, "error": "Vision adapter does not support calibration"}
    try:
        image_bytes = base64.b64decode(req.image, validate=True)
    except (binascii.Error, ValueError):
        return {"ok": False, "error": "base64 decode failed"}

    ok = vision.calibrate(label, image_bytes)
    return {"ok": ok, "label": label, "calibration": vision.calibration_status()}


@app.get("/calibrate")
def calibrate_status():
    if hasattr(vision, "calibration_status"):
        return {"calibration": vision.calibration_status()}
    return {"calibration": {}}


@app.post("/calibrate/from_camera")
def calibrate_from_camera(label: str):
    """Grab a frame from the server camera and store it as the reference for `label`.
    Usage: POST /calibrate/from_camera?label=stop  (hold the sign up first)
    """
    if not hasattr(vision, "calibrate"):
        return {"ok": False, "error": "Vision adapter does not support calibration"}
    frame_bytes = camera.capture_bytes()
    if not frame_bytes:
        return {"ok": False, "error": "Camera capture failed — check camera connection"}
    ok = vision.calibrate(label, frame_bytes)
    status.log(f"CALIBRATE from_camera: label={label} ok={ok}")
    return {"ok": ok, "label": label, "calibration": vision.calibration_status()}


@app.get("/health")
def health():
    """Check connectivity to all subsystems."""
    checks = {"api": True, "vision_adapter": type(vision).__name__, "camera": type(camera).__name__}

    if _vision_adapter == "http":
        try:
            vision.get_status()
            checks["vision_reachable"] = True
        except Exception as e:
            checks["vision_reachable"] = False
            checks["vision_error"] = str(e)
    else:
        checks["vision_reachable"] = True

    if hasattr(vision, "calibration_status"):
        checks["calibrated"] = all(vision.calibration_status().values())

    checks["poll_loop"] = game.loop_alive
    checks["all_ok"] = checks["api"] and checks["vision_reachable"]
    return checks
