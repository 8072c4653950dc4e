"""
Label → Feedback conversion.

Classifier labels are converted once, at the boundary, into the closed
Feedback variant so the engine never compares raw strings.

  "lower"  → TOO_HIGH      (guess was too high, move the upper bound down)
  "higher" → TOO_LOW       (guess was too low, move the lower bound up)
  "stop"   → CORRECT
  other    → UNRECOGNIZED  (empty string, None, unknown classes, non-strings)

Surrounding whitespace is always trimmed. Matching is exact and
case-insensitive unless case_sensitive=True.
"""
from guessgame.engine.contracts import Feedback

_LABEL_TO_FEEDBACK = {
    "lower": Feedback.TOO_HIGH,
    "higher": Feedback.TOO_LOW,
    "stop": Feedback.CORRECT,
}


def parse_label(label, case_sensitive: bool = False) -> Feedback:
    if not isinstance(label, str):
        return Feedback.UNRECOGNIZED
    key = label.strip()
    if not case_sensitive:
        key = key.lower()
    return _LABEL_TO_FEEDBACK.get(key, Feedback.UNRECOGNIZED)
