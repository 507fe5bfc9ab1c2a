"""Independent play sessions, one Interpreter each."""

from __future__ import annotations

import logging
import uuid
from pathlib import Path
from typing import Any

from inkbound.interpreter import Interpreter
from inkbound.loader import BookLoader, DefaultBookLoader
from inkbound.scheduler import Clock

logger = logging.getLogger(__name__)


class SessionRegistry:
    def __init__(
        self,
        config: dict[str, Any],
        *,
        loader: BookLoader | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._config = config
        self._loader = loader or DefaultBookLoader(
            Path(config["books_dir"]), timeout=config["http_timeout"],
        )
        self._clock = clock
        self._sessions: dict[str, Interpreter] = {}

    async def create(self, book: str | None = None) -> tuple[str, Interpreter]:
        """Start a session on `book` (default: the configured start book).

        Raises BookLoadError if the book cannot be loaded; no session is kept.
        """
        interpreter = Interpreter(
            self._loader, clock=self._clock, tick_seconds=self._config["tick_seconds"],
        )
        await interpreter.load_book(book or self._config["start_book"])
        session_id = uuid.uuid4().hex[:12]
        self._sessions[session_id] = interpreter
        logger.debug("session %s created", session_id)
        return session_id, interpreter

    def get(self, session_id: str) -> Interpreter | None:
        return self._sessions.get(session_id)

    def close(self, session_id: str) -> bool:
        interpreter = self._sessions.pop(session_id, None)
        if interpreter is None:
            return False
        interpreter.close()
        logger.debug("session %s closed", session_id)
        return True

    def close_all(self) -> None:
        for session_id in list(self._sessions):
            self.close(session_id)

    def __len__(self) -> int:
        return len(self._sessions)
