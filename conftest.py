import asyncio
import copy
from dataclasses import dataclass, field
from typing import Any, Callable

import pytest

from inkbound.interpreter import Interpreter
from inkbound.loader import BookLoadError
from inkbound.models import Book

# Book from the dialogue → menu → dialogue walkthrough used across tests.
SCENARIO_BOOK: dict[str, Any] = {
    "start": "a",
    "screens": {
        "a": {"type": "dialogue", "dialogue": [{"speaker": "N", "text": "Hi"}], "next": "b"},
        "b": {"type": "choices", "choices": [
            {"text": "X", "next": "a"},
            {"text": "Y", "next": "c"},
        ]},
        "c": {"type": "dialogue", "dialogue": [{"speaker": "N", "text": "Bye"}]},
    },
}


@dataclass
class _Handle:
    when: float
    callback: Callable[[], None]
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualClock:
    """Clock whose time only moves when a test calls advance()."""

    def __init__(self) -> None:
        self.now = 0.0
        self._handles: list[_Handle] = []

    def call_later(self, delay: float, callback: Callable[[], None]) -> _Handle:
        handle = _Handle(self.now + delay, callback)
        self._handles.append(handle)
        return handle

    @property
    def pending(self) -> int:
        return sum(1 for h in self._handles if not h.cancelled)

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while True:
            due = [h for h in self._handles if not h.cancelled and h.when <= target]
            if not due:
                break
            handle = min(due, key=lambda h: h.when)
            self._handles.remove(handle)
            self.now = handle.when
            handle.callback()
        self.now = target


@dataclass
class StubBookLoader:
    """In-memory BookLoader. Values are book dicts, Book objects or exceptions.

    A path listed in `gates` blocks until its event is set.
    """

    books: dict[str, Any] = field(default_factory=dict)
    gates: dict[str, asyncio.Event] = field(default_factory=dict)
    calls: list[str] = field(default_factory=list)

    async def __call__(self, path: str) -> Book:
        self.calls.append(path)
        if path in self.gates:
            await self.gates[path].wait()
        if path not in self.books:
            raise BookLoadError(f"Cannot read {path}")
        value = self.books[path]
        if isinstance(value, Exception):
            raise value
        if isinstance(value, Book):
            return value
        return Book.model_validate(value)


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def loader() -> StubBookLoader:
    return StubBookLoader()


@pytest.fixture
def interp(loader: StubBookLoader, clock: ManualClock) -> Interpreter:
    return Interpreter(loader, clock=clock)


@pytest.fixture
def make_interp(loader: StubBookLoader, clock: ManualClock):
    """Interpreter with `data` already installed as its book."""
    def make(data: dict[str, Any], **kwargs: Any) -> Interpreter:
        interpreter = Interpreter(loader, clock=clock, **kwargs)
        interpreter.set_book(Book.model_validate(data))
        return interpreter
    return make


@pytest.fixture
def scenario_book() -> dict[str, Any]:
    return copy.deepcopy(SCENARIO_BOOK)
