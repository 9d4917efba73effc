# backend/app/main.py
import logging
import os
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from backend.app.api.auth import router as auth_router
from backend.app.api.emails import router as emails_router

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="inbox-insights API")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(auth_router, prefix="/api")
app.include_router(emails_router, prefix="/api")


@app.get("/api/ping")
def ping() -> dict:
    return {"message": os.getenv("PING_MESSAGE", "ping")}


repo_root = Path(__file__).resolve().parents[2]
frontend_dist = repo_root / "frontend" / "dist"

if frontend_dist.exists():
    app.mount("/static", StaticFiles(directory=frontend_dist), name="static")

    @app.get("/", include_in_schema=False)
    def index() -> FileResponse:
        return FileResponse(frontend_dist / "index.html")

    @app.get("/{path:path}", include_in_schema=False)
    def spa_fallback(path: str) -> FileResponse:
        return FileResponse(frontend_dist / "index.html")
