from fastapi import FastAPI
from fastapi.responses import HTMLResponse
from fastapi.staticfiles import StaticFiles
from pathlib import Path

from guessgame.services.api import app as api_app, lifespan

root = Path(__file__).resolve().parent

# Mounted sub-apps get no lifespan events of their own
app = FastAPI(title="guessgame web", lifespan=lifespan)


# "/" must be registered BEFORE the catch-all mount("") or it gets intercepted
@app.get("/", response_class=HTMLResponse)
def index():
    return (root / "templates" / "index.html").read_text(encoding="utf-8")


app.mount("/static", StaticFiles(directory=str(root / "static")), name="static")

# API sub-app last: its "" prefix would shadow the routes above
app.mount("", api_app)
