from dataclasses import dataclass, field
from typing import Optional, List
from guessgame.engine.contracts import RecognizeResult

MAX_LOGS = 200


@dataclass
class StatusStore:
    busy: bool = False
    running: bool = False               # poll loop is actively ticking
    round_over: bool = False
    final_number: Optional[int] = None
    computer_guess: Optional[int] = None
    last_result: Optional[int] = None   # raw engine return, -1 for unrecognized labels
    last_error: Optional[str] = None
    last_recognized: Optional[RecognizeResult] = None
    rounds_played: int = 0
    logs: List[str] = field(default_factory=list)

    def set_busy(self, v: bool):
        self.busy = v

    def new_round(self, first_guess: int):
        self.round_over = False
        self.final_number = None
        self.computer_guess = first_guess
        self.last_result = None
        self.last_error = None
        self.last_recognized = None

    def log(self, msg: str):
        self.logs.append(msg)
        if len(self.logs) > MAX_LOGS:
            self.logs = self.logs[-MAX_LOGS:]
