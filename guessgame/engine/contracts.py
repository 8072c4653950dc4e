from dataclasses import dataclass
from enum import Enum
from typing import Optional, Literal

ExhaustionPolicy = Literal["hold", "advance"]

# Labels the classifier is trained on; anything else is ignored by the engine
LABELS = ["higher", "lower", "stop"]


class Feedback(Enum):
    TOO_HIGH = "too_high"          # label "lower": the true number is lower than the guess
    TOO_LOW = "too_low"            # label "higher": the true number is higher than the guess
    CORRECT = "correct"            # label "stop"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class SearchState:
    left: int
    right: int
    guess: int


@dataclass
class RecognizeResult:
    label: Optional[str]       # e.g. "higher" | "lower" | "stop"
    confidence: float


@dataclass
class TickResult:
    ok: bool
    result: Optional[int] = None       # value returned by the engine, -1 for unrecognized labels
    guess: Optional[int] = None        # engine guess after the step
    correct: bool = False
    feedback: Optional[Feedback] = None
    recognized: Optional[RecognizeResult] = None
    error_code: Optional[str] = None
