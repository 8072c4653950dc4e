"""
HTTP adapter for a locally-run model server.

Sends the frame to the server and reads back the top prediction.
Default contract (see scripts/fake_model_server.py):
  Request:  POST /predict  raw JPEG body (Content-Type: image/jpeg)
  Response: {"label": "higher", "confidence": 0.93}
            {"label": null} when the model has no prediction yet
"""

import httpx

from guessgame.adapters.vision.base import VisionAdapter
from guessgame.engine.contracts import RecognizeResult


class HttpVision(VisionAdapter):
    def __init__(self, status_store, base_url: str = "http://127.0.0.1:9100", timeout: float = 5.0,
                 client: httpx.Client | None = None):
        self.status = status_store
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client or httpx.Client(timeout=timeout)

    def identify(self, image_bytes: bytes) -> RecognizeResult | None:
        url = f"{self.base_url}/predict"
        resp = self._client.post(url, content=image_bytes, headers={"Content-Type": "image/jpeg"})
        resp.raise_for_status()
        data = resp.json()
        label = data.get("label")
        if label is None:
            self.status.log("http_vision: no prediction")
            return None
        confidence = float(data.get("confidence", 0.0))
        self.status.log(f"http_vision: {label} conf={confidence:.2f}")
        return RecognizeResult(label=label, confidence=confidence)

    def recognize_once(self) -> RecognizeResult | None:
        return None

    def get_status(self) -> dict:
        resp = self._client.get(f"{self.base_url}/status")
        resp.raise_for_status()
        return resp.json()

    def close(self):
        self._client.close()
