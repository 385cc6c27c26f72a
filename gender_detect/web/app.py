import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.responses import HTMLResponse
from fastapi.staticfiles import StaticFiles

from gender_detect.services.api import create_app

root = Path(__file__).resolve().parent

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")

api_app = create_app()


# Starlette does not run lifespans of mounted apps; forward it so the camera is released on shutdown
@asynccontextmanager
async def lifespan(app: FastAPI):
    async with api_app.router.lifespan_context(api_app):
        yield


app = FastAPI(title="gender-detect web", lifespan=lifespan)


# "/" must be registered BEFORE the catch-all mount("") or it gets intercepted
@app.get("/", response_class=HTMLResponse)
def index():
    return (root / "templates" / "index.html").read_text(encoding="utf-8")


app.mount("/static", StaticFiles(directory=str(root / "static")), name="static")

# mount API sub-app last, catch-all prefix "" would shadow routes above it
app.mount("", api_app)
