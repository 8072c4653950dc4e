"""
One-time calibration from reference photos.

Usage:
  python -m guessgame.scripts.calibrate_refs path/to/photos

Expects higher.jpg, lower.jpg and stop.jpg in the given folder (one photo of
each hand sign), computes the features and saves them to
adapters/vision/refs/histograms.pkl.
"""
import sys
from pathlib import Path

from guessgame.adapters.vision.histogram_vision import HistogramVision
from guessgame.engine.contracts import LABELS
from guessgame.services.status_store import StatusStore


def main(photos_dir: Path) -> int:
    status = StatusStore()
    vision = HistogramVision(status)

    for label in LABELS:
        path = photos_dir / f"{label}.jpg"
        if not path.exists():
            print(f"[ERROR] {path} not found")
            return 1
        ok = vision.calibrate(label, path.read_bytes())
        print(f"  {'OK  ' if ok else 'FAIL'}  {label}  <- {path.name}")

    print()
    print("Calibration status:", vision.calibration_status())
    print(f"Done, features saved to {vision.hist_file}")
    return 0


if __name__ == "__main__":
    sys.exit(main(Path(sys.argv[1] if len(sys.argv) > 1 else ".")))
