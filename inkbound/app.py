from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from fastapi import FastAPI

from inkbound.config import get_config
from inkbound.loader import BookLoader
from inkbound.routes import router
from inkbound.scheduler import Clock
from inkbound.sessions import SessionRegistry

load_dotenv(Path(__file__).parent.parent / ".env")


def create_app(
    config: dict[str, Any] | None = None,
    *,
    loader: BookLoader | None = None,
    clock: Clock | None = None,
) -> FastAPI:
    resolved = config or get_config()
    sessions = SessionRegistry(resolved, loader=loader, clock=clock)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        sessions.close_all()

    app = FastAPI(title="Inkbound", lifespan=lifespan)
    app.state.sessions = sessions
    app.include_router(router, prefix="/api")
    return app


# Default app instance for uvicorn (uses INKBOUND_* env vars or defaults)
app = create_app()
