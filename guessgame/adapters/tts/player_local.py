"""
Voice feedback player — cross-platform.

Priority:
  1. Pre-rendered audio for static lines: assets/<style>/<line>.mp3
  2. Spoken text: macOS `say`, espeak / espeak-ng on Linux
  3. Silent log if no tool is available

Guesses contain a number, so they always go through path 2.
"""

import os
import shutil
import subprocess
import sys
from guessgame.adapters.tts import lines as L


class LocalPlayerTTS:
    def __init__(self, status_store, assets_dir: str | None = None, style: str = "polite"):
        self.status = status_store
        self.assets_dir = assets_dir or os.path.join(os.path.dirname(__file__), "assets")
        self.style = style

    def say(self, line_key: str, style: str | None = None, **fmt):
        style = style or self.style
        audio_path = self._resolve_path(line_key, style)
        if audio_path and os.path.isfile(audio_path):
            self.status.log(f"tts({style}): playing {os.path.basename(audio_path)}")
            self._play_audio(audio_path)
            return
        text = self.line_text(line_key, style, **fmt)
        self.status.log(f"tts({style}): say -> {text}")
        self._say_text(text)

    @staticmethod
    def line_text(line_key: str, style: str = "polite", **fmt) -> str:
        styles = L.LINE_TEXT.get(line_key, {})
        template = styles.get(style) or styles.get("polite", line_key)
        try:
            return template.format(**fmt)
        except KeyError:
            return template

    def _resolve_path(self, line_key: str, style: str) -> str | None:
        fname = L.LINE_WAV.get(line_key)
        if fname is None:
            return None
        return os.path.join(self.assets_dir, style, fname)

    def _play_audio(self, path: str):
        # run() blocks until playback finishes so announcements never overlap
        if sys.platform == "darwin":
            subprocess.run(["afplay", path], check=False)
        elif shutil.which("ffplay"):
            subprocess.run(["ffplay", "-nodisp", "-autoexit", "-loglevel", "quiet", path], check=False)
        elif shutil.which("mpv"):
            subprocess.run(["mpv", "--no-video", path], check=False)
        elif shutil.which("paplay"):
            subprocess.run(["paplay", path], check=False)
        else:
            self.status.log("tts: no audio player found, skipping playback")

    def _say_text(self, text: str):
        if sys.platform == "darwin":
            subprocess.run(["say", text], check=False)
        elif shutil.which("espeak"):
            subprocess.run(["espeak", text], check=False)
        elif shutil.which("espeak-ng"):
            subprocess.run(["espeak-ng", text], check=False)
        else:
            self.status.log(f"tts: no speech tool available, would say: {text}")
