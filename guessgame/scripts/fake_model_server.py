"""
Fake model server for testing HttpVision without a trained model.

Simulates a locally-run classifier on port 9100.
/predict accepts a raw JPEG body and answers with a label + confidence.
Labels come from the LABELS env var (comma separated) in order, then at random.

Usage:
    python -m guessgame.scripts.fake_model_server
    VISION_ADAPTER=http uvicorn guessgame.web.app:app   (other terminal)
"""

import os
import random
import uvicorn
from fastapi import FastAPI, Request

from guessgame.engine.contracts import LABELS

app = FastAPI(title="fake-model-server")

_scripted = [l.strip() for l in os.getenv("LABELS", "").split(",") if l.strip()]


@app.post("/predict")
async def predict(request: Request):
    body = await request.body()
    label = _scripted.pop(0) if _scripted else random.choice(LABELS)
    confidence = round(random.uniform(0.6, 0.99), 2)
    print(f"[model] {len(body)} bytes -> {label} ({confidence})")
    return {"label": label, "confidence": confidence}


@app.get("/status")
async def status():
    return {"ok": True, "labels": LABELS}


if __name__ == "__main__":
    print("Fake model server starting on http://localhost:9100")
    uvicorn.run(app, host="0.0.0.0", port=9100)
