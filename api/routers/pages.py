"""Pages router for helloworldapp.

Serves the bundled HTML pages and the path-variable demo route.
"""

import logging
import sqlite3
from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import HTMLResponse, PlainTextResponse

from api.dependencies import get_db
from storage import VisitRepository, run_in_db_thread

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Pages"])

UI_DIR = Path(__file__).parent.parent / "ui"


def get_static_file_text(name: str) -> str:
    """Read a bundled UI file by its path relative to the ui/ directory."""
    path = UI_DIR / name
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.error(f"Static file not found: {path}")
        raise HTTPException(status_code=404, detail=f"{name} not found")


@router.get("/", response_class=HTMLResponse)
async def home_page():
    """Serve the index page."""
    return HTMLResponse(get_static_file_text("index.html"))


@router.get("/helloworld", response_class=HTMLResponse)
async def hello_world(db: sqlite3.Connection = Depends(get_db)):
    """Serve the hello world page and record the visit."""
    try:
        await run_in_db_thread(VisitRepository(db).record, "/helloworld")
    except sqlite3.Error as e:
        # Happens when the v1 migration has not been applied
        logger.warning(f"Failed to record visit: {e}")
    return HTMLResponse(get_static_file_text("pages/helloworld.html"))


@router.get("/hellovars/{var1}/{var2}", response_class=PlainTextResponse)
async def hello_vars(var1: str, var2: str):
    """Echo the two path parameters."""
    return PlainTextResponse(f"Path params: {var1} {var2}\n")
