"""Play session endpoints: the input side of a remote renderer.

Every mutating endpoint returns the new StateSnapshot. Input that makes no
sense in the current mode (a choice while no menu is open, an unknown screen)
is not an error; the snapshot simply comes back unchanged.
"""

import asyncio

from fastapi import APIRouter, HTTPException, Request

from inkbound.interpreter import Interpreter
from inkbound.loader import BookLoadError
from inkbound.sessions import SessionRegistry

from .models import ActionBody, CreateSession, LoadBody, NavigateBody, ScrollBody, SelectBody

router = APIRouter()


def _registry(request: Request) -> SessionRegistry:
    return request.app.state.sessions


def _session(request: Request, session_id: str) -> Interpreter:
    interpreter = _registry(request).get(session_id)
    if interpreter is None:
        raise HTTPException(404, "Session not found")
    return interpreter


async def _settle(task: asyncio.Task | None) -> None:
    """Wait for a loadBook dispatched by an action and surface its failure."""
    if task is None:
        return
    try:
        await task
    except BookLoadError as e:
        raise HTTPException(502, str(e))


@router.post("/sessions")
async def create_session(request: Request, body: CreateSession | None = None):
    """Start a new session on the given book (default: the start book)."""
    try:
        session_id, interpreter = await _registry(request).create(body.book if body else None)
    except BookLoadError as e:
        raise HTTPException(502, str(e))
    return {"id": session_id, "state": interpreter.snapshot()}


@router.get("/sessions/{session_id}")
async def get_session(request: Request, session_id: str):
    """Current snapshot of a session."""
    return _session(request, session_id).snapshot()


@router.delete("/sessions/{session_id}")
async def delete_session(request: Request, session_id: str):
    """End a session and stop its countdown."""
    if not _registry(request).close(session_id):
        raise HTTPException(404, "Session not found")
    return {"ok": True}


@router.post("/sessions/{session_id}/advance")
async def advance(request: Request, session_id: str):
    """Advance requested (click on dialogue or splash)."""
    interpreter = _session(request, session_id)
    await _settle(interpreter.advance())
    return interpreter.snapshot()


@router.post("/sessions/{session_id}/select")
async def select(request: Request, session_id: str, body: SelectBody):
    """Choice N pressed, in a normal or a timed menu."""
    interpreter = _session(request, session_id)
    interpreter.select(body.index)
    return interpreter.snapshot()


@router.post("/sessions/{session_id}/navigate")
async def navigate(request: Request, session_id: str, body: NavigateBody):
    """Jump to a screen."""
    interpreter = _session(request, session_id)
    interpreter.navigate(body.screen)
    return interpreter.snapshot()


@router.post("/sessions/{session_id}/action")
async def run_action(request: Request, session_id: str, body: ActionBody):
    """Run the action attached to a pressed button."""
    interpreter = _session(request, session_id)
    await _settle(interpreter.run_action(body.action))
    return interpreter.snapshot()


@router.post("/sessions/{session_id}/load")
async def load_book(request: Request, session_id: str, body: LoadBody):
    """Replace the session's book."""
    interpreter = _session(request, session_id)
    try:
        await interpreter.load_book(body.path)
    except BookLoadError as e:
        raise HTTPException(502, str(e))
    return interpreter.snapshot()


@router.post("/sessions/{session_id}/scroll")
async def scroll(request: Request, session_id: str, body: ScrollBody):
    """Scroll the current screen's content."""
    interpreter = _session(request, session_id)
    interpreter.scroll_by(body.delta)
    return interpreter.snapshot()
