from pydantic import BaseModel
from typing import Optional

# A recognition counts as "ok" for display when its confidence reaches this value
RECOGNITION_SUCCESS_THRESHOLD = 0.0


class RecognizeOut(BaseModel):
    label: Optional[str] = None
    confidence: float


class SearchStateOut(BaseModel):
    left: int
    right: int
    guess: int


class StatusResponse(BaseModel):
    busy: bool
    running: bool
    round_over: bool
    computer_guess: Optional[int] = None
    final_number: Optional[int] = None
    last_result: Optional[int] = None
    last_error: Optional[str] = None
    rounds_played: int = 0
    search: SearchStateOut
    exhausted: bool = False
    recognized: Optional[RecognizeOut] = None
    recognition_ok: Optional[bool] = None
    logs: list[str]


class FeedbackRequest(BaseModel):
    label: Optional[str] = None
    confidence: float = 1.0


class TickResponse(BaseModel):
    ok: bool
    result: Optional[int] = None
    guess: Optional[int] = None
    correct: bool = False
    feedback: Optional[str] = None
    recognized: Optional[RecognizeOut] = None
    recognition_ok: Optional[bool] = None
    error_code: Optional[str] = None


class ResetResponse(BaseModel):
    ok: bool
    search: SearchStateOut


class CaptureFrameRequest(BaseModel):
    image: str  # base64 JPEG
