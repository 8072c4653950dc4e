# Line key constants
GAME_START = "GAME_START"    # new round, ask the player to think of a number
GUESS = "GUESS"              # announce the next guess ({number})
CORRECT = "CORRECT"          # round over ({number})
NOT_SURE = "NOT_SURE"        # label was not higher / lower / stop

# Text content per style; {number} is filled in at runtime
LINE_TEXT: dict[str, dict[str, str]] = {
    GAME_START: {
        "polite": "Think of a number between zero and one hundred.",
        "playful": "Pick a number, any number. Well, zero to one hundred.",
    },
    GUESS: {
        "polite": "Is it {number}?",
        "playful": "My guess is {number}. Higher or lower?",
    },
    CORRECT: {
        "polite": "Your number is {number}.",
        "playful": "{number}! Told you I'd get it.",
    },
    NOT_SURE: {
        "polite": "Sorry, I did not catch that.",
        "playful": "Was that a wave? Try again.",
    },
}

# Pre-rendered audio for lines without placeholders (assets/<style>/<filename>)
LINE_WAV: dict[str, str] = {
    GAME_START: "game_start.mp3",
    NOT_SURE: "not_sure.mp3",
}
