"""
Pre-render the static voice lines with edge-tts.

Usage:
    pip install edge-tts
    python -m guessgame.scripts.gen_tts

Output:
    guessgame/adapters/tts/assets/polite/*.mp3
    guessgame/adapters/tts/assets/playful/*.mp3

Lines with a {number} placeholder are spoken live and are not rendered.
"""

import asyncio
import os
import edge_tts
from guessgame.adapters.tts.lines import LINE_TEXT, LINE_WAV

ASSETS_DIR = os.path.join(os.path.dirname(__file__), "..", "adapters", "tts", "assets")

VOICE_MAP = {
    "polite": "en-US-JennyNeural",
    "playful": "en-US-GuyNeural",
}


async def generate_line(line_key: str, style: str, text: str, voice: str):
    out_dir = os.path.join(ASSETS_DIR, style)
    os.makedirs(out_dir, exist_ok=True)
    out_path = os.path.join(out_dir, LINE_WAV[line_key])
    communicate = edge_tts.Communicate(text, voice)
    await communicate.save(out_path)
    print(f"  [{style}] {line_key} -> {LINE_WAV[line_key]}")


async def main():
    print("Generating voice lines...")
    tasks = []
    for line_key in LINE_WAV:
        for style, text in LINE_TEXT[line_key].items():
            voice = VOICE_MAP.get(style, VOICE_MAP["polite"])
            tasks.append(generate_line(line_key, style, text, voice))
    await asyncio.gather(*tasks)
    print("Done. Files saved to adapters/tts/assets/")


if __name__ == "__main__":
    asyncio.run(main())
