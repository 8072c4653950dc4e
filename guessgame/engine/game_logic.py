import threading

from guessgame.engine.contracts import Feedback, SearchState, ExhaustionPolicy
from guessgame.engine.feedback import parse_label

INVALID_GUESS = -1


class GameLogic:
    """
    Binary search over [low, high] driven by classifier feedback.

    The window is {left, right} and the guess is always (left + right) // 2.
    Labels that are not higher / lower / stop return INVALID_GUESS and leave
    the window untouched.

    exhaustion:
      "hold"    - literal update rule; once the window is exhausted the guess
                  stops changing and the caller sees the same value again
      "advance" - a "higher" step on an exhausted window moves the guess to
                  the upper bound, so `high` itself is reachable
    """

    def __init__(self, low: int = 0, high: int = 100,
                 case_sensitive: bool = False, exhaustion: ExhaustionPolicy = "hold"):
        if low > high:
            raise ValueError(f"empty range [{low}, {high}]")
        if exhaustion not in ("hold", "advance"):
            raise ValueError(f"unknown exhaustion policy '{exhaustion}'")
        self.low = low
        self.high = high
        self.case_sensitive = case_sensitive
        self.exhaustion = exhaustion
        self._lock = threading.Lock()
        self.reset()

    # ── State ───────────────────────────────────────────────────────────────

    @property
    def left(self) -> int:
        return self._left

    @property
    def right(self) -> int:
        return self._right

    @property
    def guess(self) -> int:
        return self._guess

    @property
    def state(self) -> SearchState:
        with self._lock:
            return SearchState(left=self._left, right=self._right, guess=self._guess)

    @property
    def exhausted(self) -> bool:
        """True when another narrowing step cannot move the midpoint."""
        return self._right - self._left <= 1

    def reset(self) -> None:
        with self._lock:
            self._left = self.low
            self._right = self.high
            self._guess = (self._left + self._right) // 2

    # ── Feedback ────────────────────────────────────────────────────────────

    def parse_label(self, label) -> Feedback:
        return parse_label(label, case_sensitive=self.case_sensitive)

    def interpret_feedback(self, label) -> int:
        """Advance the search from a raw classifier label.

        Returns the next guess, the confirmed guess for "stop", or
        INVALID_GUESS (-1) for anything unrecognized.
        """
        return self.apply(self.parse_label(label))

    def apply(self, feedback: Feedback) -> int:
        if feedback is Feedback.TOO_HIGH:
            return self.narrow_upper()
        if feedback is Feedback.TOO_LOW:
            return self.narrow_lower()
        if feedback is Feedback.CORRECT:
            return self.confirm_correct()
        return INVALID_GUESS

    def is_guess_correct(self, label) -> bool:
        return self.parse_label(label) is Feedback.CORRECT

    # ── Steps ───────────────────────────────────────────────────────────────

    def narrow_lower(self) -> int:
        """The true number is higher than the guess: raise the lower bound."""
        with self._lock:
            self._left = self._guess
            guess = (self._left + self._right) // 2
            if self.exhaustion == "advance" and guess == self._left:
                guess = self._right
            self._guess = guess
            return guess

    def narrow_upper(self) -> int:
        """The true number is lower than the guess: lower the upper bound."""
        with self._lock:
            self._right = self._guess
            self._guess = (self._left + self._right) // 2
            return self._guess

    def confirm_correct(self) -> int:
        return self._guess

    def __repr__(self):
        return f"GameLogic(left={self._left}, right={self._right}, guess={self._guess})"
