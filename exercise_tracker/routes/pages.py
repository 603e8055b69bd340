"""
Exercise Tracker — Static Page Route
=====================================

What:  Serves the static HTML front page at GET /.
How:   Reads index.html from STATIC_DIR unmodified. Other assets in the same
       directory are mounted at /public in main.py.
"""

from pathlib import Path

from fastapi import APIRouter
from fastapi.responses import FileResponse

from exercise_tracker.config import settings
from exercise_tracker.exceptions import NotFoundError

router = APIRouter(tags=["Pages"])


@router.get("/", include_in_schema=False)
async def index() -> FileResponse:
    page = Path(settings.static_dir) / "index.html"
    if not page.is_file():
        raise NotFoundError(resource="page", resource_id="index.html")
    return FileResponse(path=str(page), media_type="text/html")
