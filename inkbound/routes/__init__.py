"""FastAPI API endpoints under /api.

Endpoint groups: health, sessions. A session wraps one Interpreter; its
child endpoints (advance, select, navigate, action, load, scroll) are the
input events a renderer forwards, each answered with the new snapshot.
"""

from fastapi import APIRouter

from .health import router as health_router
from .sessions import router as sessions_router

router = APIRouter()
router.include_router(health_router)
router.include_router(sessions_router)
