# -*- coding: utf-8 -*-
"""
Calorie tracker API

Google sign-in, activity logging, AI text analysis, statistics and admin views.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import settings
from .app_db import init_app_db
from .admin.api import router as admin_router
from .analyze.api import router as analyze_router
from .auth.api import router as auth_router
from .logs.api import router as logs_router
from .stats.api import router as stats_router
from .verification.api import router as verification_router
from .verification.gate import check_request

app = FastAPI(
    title="Calorie Tracker",
    description="Free-text food and exercise logging with AI parsing",
    version="1.0.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)

@app.on_event("startup")
def _startup_init_db() -> None:
    init_app_db(settings.db_path)


# Ensure the app DB exists even when lifespan events are not triggered (e.g. some test clients).
init_app_db(settings.db_path)


@app.middleware("http")
async def _human_gate(request: Request, call_next):
    rejection = check_request(request)
    if rejection is not None:
        return rejection
    return await call_next(request)


# Added after the gate so CORS wraps it and preflights are answered first.
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


app.include_router(verification_router)
app.include_router(auth_router)
app.include_router(logs_router)
app.include_router(stats_router)
app.include_router(analyze_router)
app.include_router(admin_router)


@app.get("/api/health")
def health() -> dict:
    return {"ok": True}


# ---------- Static frontend ----------

frontend_dist_dir = Path(
    os.environ.get("TRACKER_FRONTEND_DIST") or (Path(__file__).resolve().parent.parent / "frontend" / "dist")
)

if (frontend_dist_dir / "assets").exists():
    app.mount("/assets", StaticFiles(directory=frontend_dist_dir / "assets"), name="assets")


@app.get("/", include_in_schema=False)
def root():
    index_file = frontend_dist_dir / "index.html"
    if index_file.exists():
        return FileResponse(index_file)
    return {"message": "Calorie Tracker API", "docs": "/api/docs"}


@app.exception_handler(StarletteHTTPException)
async def spa_fallback(request: Request, exc: StarletteHTTPException):
    # Only unmatched page GETs fall back to the SPA; 405s and API errors keep their status.
    path = request.url.path
    if (
        exc.status_code != 404
        or request.method not in ("GET", "HEAD")
        or path.startswith("/api/")
        or path.startswith("/assets/")
    ):
        return await http_exception_handler(request, exc)
    dist_root = frontend_dist_dir.resolve()
    candidate = (dist_root / path.lstrip("/")).resolve()
    if candidate.is_file() and dist_root in candidate.parents:
        return FileResponse(candidate)
    index_file = frontend_dist_dir / "index.html"
    if not index_file.exists():
        return JSONResponse(status_code=404, content={"detail": "frontend not found"})
    return FileResponse(index_file)


def run() -> None:
    """Console entry point (used by pyproject [project.scripts])."""
    import uvicorn

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    host = os.environ.get("TRACKER_HOST") or os.environ.get("HOST") or "127.0.0.1"
    port_raw = os.environ.get("TRACKER_PORT") or os.environ.get("PORT") or "8000"
    try:
        port = int(port_raw)
    except ValueError:
        port = 8000

    uvicorn.run("calorie_tracker.api:app", host=host, port=port, reload=False)
