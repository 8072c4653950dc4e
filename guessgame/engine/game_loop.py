import threading

from guessgame.engine.contracts import Feedback, RecognizeResult, TickResult
from guessgame.engine.game_logic import GameLogic
from guessgame.engine import errors
from guessgame.adapters.tts import lines as L

DEFAULT_POLL_INTERVAL_S = 3.0


class GuessingGame:
    """
    Round driver: polls the classifier on a fixed interval and feeds the
    resulting labels to GameLogic, one at a time and in order.

    Flow per tick:
      capture frame → identify → label?
        none          → skip (engine not touched)
        stop          → round over, loop paused until reset_game()
        higher/lower  → next guess shown + announced
        anything else → -1 from the engine, round keeps going
    """

    def __init__(self, logic: GameLogic, vision, status_store, camera=None, tts=None,
                 interval_s: float = DEFAULT_POLL_INTERVAL_S):
        self.logic = logic
        self.vision = vision
        self.status = status_store
        self.camera = camera
        self.tts = tts
        self.interval_s = interval_s
        self._tick_lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    # ── Round lifecycle ─────────────────────────────────────────────────────

    def play_game(self):
        """Start a fresh round and the poll loop."""
        self.reset_game()
        self.start()

    def reset_game(self):
        """Play again: fresh search window, loop resumes if it was started."""
        with self._tick_lock:
            self.logic.reset()
            self.status.new_round(self.logic.guess)
            self.status.log(f"round reset: window=[{self.logic.left}, {self.logic.right}] guess={self.logic.guess}")
            if self.loop_alive:
                self.status.running = True
        self._say(L.GAME_START)

    def _load_game_over(self, number: int):
        # Pause the loop; the thread stays alive so reset_game() can resume it
        self.status.running = False
        self.status.final_number = number
        self.status.rounds_played += 1
        self.status.round_over = True
        self.status.log(f"round over: number={number}")
        self._say(L.CORRECT, number=number)

    # ── Poll loop ───────────────────────────────────────────────────────────

    @property
    def loop_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self):
        if self.loop_alive:
            self.status.running = not self.status.round_over
            return
        # Fresh event per loop: a thread left over from a timed-out stop() stays stopped
        self._stop_event = threading.Event()
        self.status.running = not self.status.round_over
        self._thread = threading.Thread(target=self._run, args=(self._stop_event,),
                                        name="guess-poll", daemon=True)
        self._thread.start()
        self.status.log(f"poll loop started: interval={self.interval_s}s")

    def stop(self, timeout: float | None = None):
        self._stop_event.set()
        self.status.running = False
        thread, self._thread = self._thread, None
        if thread is not None:
            thread.join(timeout)
            if thread.is_alive():
                # Mid-tick; it exits on its own once the tick returns
                self.status.log("poll loop stopping: tick still in flight, camera left open")
                return
        if self.camera is not None:
            self.camera.release()
        self.status.log("poll loop stopped")

    def _run(self, stop_event: threading.Event):
        while not stop_event.wait(self.interval_s):
            if not self.status.running:
                continue
            self.tick()

    # ── Feedback handling ───────────────────────────────────────────────────

    def tick(self) -> TickResult:
        """One poll: capture, classify, feed the engine."""
        if self.status.round_over:
            return TickResult(ok=False, guess=self.logic.guess, error_code=errors.ERR_ROUND_OVER)
        if not self._tick_lock.acquire(blocking=False):
            return TickResult(ok=False, error_code=errors.ERR_BUSY)

        self.status.set_busy(True)
        try:
            try:
                recognized = self._recognize()
            except Exception as e:
                self.status.last_error = f"{type(e).__name__}: {e}"
                self.status.log(f"tick: vision error {type(e).__name__}: {e}")
                return TickResult(ok=False, guess=self.logic.guess, error_code=errors.ERR_VISION)
            return self._handle(recognized)
        except Exception as e:
            self.status.last_error = f"{type(e).__name__}: {e}"
            self.status.log(f"tick: error {type(e).__name__}: {e}")
            return TickResult(ok=False, guess=self.logic.guess, error_code=errors.ERR_UNKNOWN)
        finally:
            self.status.set_busy(False)
            self._tick_lock.release()

    def submit_label(self, label: str | None, confidence: float = 0.0) -> TickResult:
        """Process a label produced outside the poll loop (web page, HTTP client)."""
        return self.submit(RecognizeResult(label=label, confidence=confidence))

    def submit(self, recognized: RecognizeResult | None) -> TickResult:
        if self.status.round_over:
            return TickResult(ok=False, guess=self.logic.guess, error_code=errors.ERR_ROUND_OVER)
        with self._tick_lock:
            self.status.set_busy(True)
            try:
                return self._handle(recognized)
            finally:
                self.status.set_busy(False)

    def _recognize(self) -> RecognizeResult | None:
        frame_bytes = None
        if self.camera is not None:
            frame_bytes = self.camera.capture_bytes()
        if frame_bytes:
            return self.vision.identify(frame_bytes)
        return self.vision.recognize_once()

    def _handle(self, recognized: RecognizeResult | None) -> TickResult:
        # Caller holds _tick_lock; the round may have ended while it waited for it
        if self.status.round_over:
            self.status.log("label after round over ignored")
            return TickResult(ok=False, guess=self.logic.guess, error_code=errors.ERR_ROUND_OVER)
        if recognized is None or recognized.label is None:
            self.status.log("tick: no prediction, engine not invoked")
            return TickResult(ok=False, guess=self.logic.guess, error_code=errors.ERR_NO_LABEL)

        self.status.last_recognized = recognized
        self.status.log(f"user response: {recognized.label} ({recognized.confidence:.2f})")

        feedback = self.logic.parse_label(recognized.label)
        result = self.logic.apply(feedback)
        self.status.last_result = result

        if feedback is Feedback.CORRECT:
            self._load_game_over(result)
            return TickResult(ok=True, result=result, guess=result, correct=True,
                              feedback=feedback, recognized=recognized)

        if feedback is Feedback.UNRECOGNIZED:
            self.status.log(f"unrecognized label '{recognized.label}', guess stays at {self.logic.guess}")
            self._say(L.NOT_SURE)
            return TickResult(ok=False, result=result, guess=self.logic.guess, feedback=feedback,
                              recognized=recognized, error_code=errors.ERR_UNRECOGNIZED)

        self.status.computer_guess = result
        state = self.logic.state
        self.status.log(f"Computer Guess: {result}  window=[{state.left}, {state.right}]")
        if self.logic.exhausted:
            self.status.log("search window exhausted")
        self._say(L.GUESS, number=result)
        return TickResult(ok=True, result=result, guess=result, feedback=feedback, recognized=recognized)

    def _say(self, line_key: str, **fmt):
        if self.tts is None:
            return
        try:
            self.tts.say(line_key, **fmt)
        except OSError as e:
            self.status.log(f"tts: failed {e}")
