"""
Local hand-sign classifier (3-class: higher / lower / stop).

Pipeline:
  1. Calibrate: POST /calibrate with one reference frame per label
     - Saves histogram + shape thumbnail to refs/
  2. Identify:
     a. Center crop (player is expected to hold the sign in the middle)
     b. Skin mask in YCrCb
     c. HSV histogram of the masked hand + downscaled mask thumbnail
     d. Fuse histogram correlation with thumbnail correlation
     e. Return best label with a margin-based confidence

The histogram separates a hand from the background, the thumbnail separates
thumb-up from thumb-down from open palm (orientation lives in the mask, not
in the colours).

No external ML model needed. Works offline.
"""
import pickle
from pathlib import Path

import cv2
import numpy as np

from guessgame.adapters.vision.base import VisionAdapter
from guessgame.engine.contracts import LABELS, RecognizeResult

REFS_DIR = Path(__file__).parent / "refs"
HIST_FILENAME = "histograms.pkl"

# HSV histogram: H+S channels
H_BINS, S_BINS = 30, 32
HIST_SIZE = [H_BINS, S_BINS]
HIST_RANGES = [0, 180, 0, 256]
CHANNELS = [0, 1]

THUMB_SIZE = (32, 32)
CROP_RATIO = 0.6

# Skin range in YCrCb (Cr, Cb bounds)
SKIN_LOW = (0, 133, 77)
SKIN_HIGH = (255, 173, 127)

# Fusion weights: colour histogram vs mask shape
HIST_WEIGHT = 0.35
SHAPE_WEIGHT = 0.65


# ── Image helpers ───────────────────────────────────────────────────────────

def _bytes_to_bgr(image_bytes: bytes):
    arr = np.frombuffer(image_bytes, dtype=np.uint8)
    if arr.size == 0:
        return None
    return cv2.imdecode(arr, cv2.IMREAD_COLOR)


def _center_crop(img, ratio=CROP_RATIO):
    h, w = img.shape[:2]
    ch, cw = int(h * ratio), int(w * ratio)
    y0, x0 = (h - ch) // 2, (w - cw) // 2
    return img[y0:y0+ch, x0:x0+cw]


def _skin_mask(bgr_img):
    ycrcb = cv2.cvtColor(bgr_img, cv2.COLOR_BGR2YCrCb)
    mask = cv2.inRange(ycrcb, SKIN_LOW, SKIN_HIGH)
    kernel = cv2.getStructuringElement(cv2.MORPH_ELLIPSE, (5, 5))
    mask = cv2.morphologyEx(mask, cv2.MORPH_OPEN, kernel)
    return cv2.morphologyEx(mask, cv2.MORPH_CLOSE, kernel, iterations=2)


# ── Feature extraction ──────────────────────────────────────────────────────

def _compute_hist(bgr_img, mask=None):
    hsv = cv2.cvtColor(bgr_img, cv2.COLOR_BGR2HSV)
    hist = cv2.calcHist([hsv], CHANNELS, mask, HIST_SIZE, HIST_RANGES)
    cv2.normalize(hist, hist, 0, 1, cv2.NORM_MINMAX)
    return hist


def _compute_thumb(mask) -> np.ndarray:
    thumb = cv2.resize(mask, THUMB_SIZE, interpolation=cv2.INTER_AREA)
    return thumb.astype(np.float32) / 255.0


def _shape_score(query_thumb: np.ndarray, ref_thumb: np.ndarray) -> float:
    """Normalized cross-correlation of two mask thumbnails, mapped to [0, 1]."""
    q = query_thumb - query_thumb.mean()
    r = ref_thumb - ref_thumb.mean()
    denom = float(np.sqrt((q * q).sum() * (r * r).sum()))
    if denom == 0.0:
        return 0.0
    corr = float((q * r).sum()) / denom
    return float(np.clip((corr + 1.0) / 2.0, 0.0, 1.0))


def extract_features(bgr_img) -> dict:
    crop = _center_crop(bgr_img)
    mask = _skin_mask(crop)
    # Fall back to the whole crop when no skin is found (gloves, odd lighting)
    hist_mask = mask if cv2.countNonZero(mask) > 0 else None
    return {"hist": _compute_hist(crop, hist_mask), "thumb": _compute_thumb(mask)}


# ── Classifier ──────────────────────────────────────────────────────────────

class HistogramVision(VisionAdapter):
    """
    3-class hand-sign classifier using fused colour histogram + mask shape.
    Call calibrate() once per label before use; until every label has a
    reference, identify() returns None (no prediction).
    """

    def __init__(self, status_store, refs_dir: Path | str | None = None):
        self.status = status_store
        self.refs_dir = Path(refs_dir) if refs_dir else REFS_DIR
        self.refs_dir.mkdir(parents=True, exist_ok=True)
        self._refs: dict[str, dict] = {}
        self._load_refs()

    @property
    def hist_file(self) -> Path:
        return self.refs_dir / HIST_FILENAME

    # ── Calibration ────────────────────────────────────────────────────────

    def calibrate(self, label: str, image_bytes: bytes) -> bool:
        """Save reference features for the given label."""
        if label not in LABELS:
            self.status.log(f"histogram_vision: unknown label '{label}'")
            return False

        img = _bytes_to_bgr(image_bytes)
        if img is None:
            self.status.log("histogram_vision: failed to decode calibration image")
            return False

        self._refs[label] = extract_features(img)
        # Keep the raw frame so refs can be rebuilt after a feature change
        cv2.imwrite(str(self.refs_dir / f"{label}.jpg"), img)
        self._save_refs()
        self.status.log(f"histogram_vision: calibrated '{label}'")
        return True

    def calibration_status(self) -> dict:
        return {label: label in self._refs for label in LABELS}

    @property
    def ready(self) -> bool:
        return all(label in self._refs for label in LABELS)

    # ── Identification ──────────────────────────────────────────────────────

    def identify(self, image_bytes: bytes) -> RecognizeResult | None:
        if not self.ready:
            missing = [l for l in LABELS if l not in self._refs]
            self.status.log(f"histogram_vision: missing refs for {missing}, no prediction")
            return None

        img = _bytes_to_bgr(image_bytes)
        if img is None:
            self.status.log("histogram_vision: failed to decode frame")
            return None

        query = extract_features(img)
        fused = {}
        for label in LABELS:
            ref = self._refs[label]
            hist_score = max(0.0, cv2.compareHist(ref["hist"], query["hist"], cv2.HISTCMP_CORREL))
            shape_score = _shape_score(query["thumb"], ref["thumb"])
            fused[label] = HIST_WEIGHT * hist_score + SHAPE_WEIGHT * shape_score

        ranked = sorted(fused, key=fused.__getitem__, reverse=True)
        best, second = ranked[0], ranked[1]
        margin = fused[best] - fused[second]
        confidence = float(np.clip(0.5 + margin * 2.5, 0.0, 1.0))

        self.status.log(
            f"histogram_vision: {best}"
            f"  fused={fused[best]:.3f}/{fused[second]:.3f}"
            f"  margin={margin:.3f}  conf={confidence:.2f}"
        )
        return RecognizeResult(label=best, confidence=confidence)

    def recognize_once(self) -> RecognizeResult | None:
        """No frame available, nothing to classify."""
        return None

    # ── Persistence ─────────────────────────────────────────────────────────

    def _save_refs(self):
        with open(self.hist_file, "wb") as f:
            pickle.dump(self._refs, f)

    def _load_refs(self):
        if self.hist_file.exists():
            try:
                with open(self.hist_file, "rb") as f:
                    self._refs = pickle.load(f)
                self.status.log(f"histogram_vision: loaded refs for {list(self._refs.keys())}")
            except (OSError, pickle.UnpicklingError, EOFError) as e:
                self.status.log(f"histogram_vision: failed to load refs: {e}")
                self._refs = {}

        missing = [l for l in LABELS if l not in self._refs]
        if missing:
            self._calibrate_from_jpgs(missing)

    def _calibrate_from_jpgs(self, labels):
        """Rebuild features from refs/<label>.jpg files left by an earlier calibration."""
        calibrated = []
        for label in labels:
            jpg_path = self.refs_dir / f"{label}.jpg"
            if not jpg_path.exists():
                continue
            img = cv2.imread(str(jpg_path))
            if img is None:
                self.status.log(f"histogram_vision: failed to read {jpg_path.name}")
                continue
            self._refs[label] = extract_features(img)
            calibrated.append(label)
        if calibrated:
            self._save_refs()
            self.status.log(f"histogram_vision: auto-calibrated {calibrated} from jpgs")
