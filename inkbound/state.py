"""Narrative state: the interpreter's mutable cursor into a book.

One NarrativeState belongs to one Interpreter; renderers only ever see the
immutable StateSnapshot built from it.
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel

from inkbound.models import Book, Choice, DialogueLine, Element, Screen
from inkbound.modes import Mode, derive_mode


@dataclass
class Countdown:
    """A running timed-choice countdown. Written only by CountdownScheduler."""

    screen_id: str
    remaining: int
    default_index: int


@dataclass
class NarrativeState:
    book: Book | None = None
    screen_id: str | None = None
    dialogue_index: int = 0
    scroll_offset: float = 0.0
    # Set when a non-menu screen reveals its choices after the last line.
    menu_open: bool = False
    countdown: Countdown | None = None

    @property
    def screen(self) -> Screen | None:
        if self.book is None:
            return None
        return self.book.screen(self.screen_id)

    @property
    def time_remaining(self) -> int:
        return self.countdown.remaining if self.countdown is not None else 0

    @property
    def mode(self) -> Mode:
        if self.countdown is not None:
            return Mode.TIMED
        if self.menu_open:
            return Mode.CHOICE
        return derive_mode(self.screen)

    def current_line(self) -> DialogueLine | None:
        screen = self.screen
        if screen is None or not screen.dialogue:
            return None
        if 0 <= self.dialogue_index < len(screen.dialogue):
            return screen.dialogue[self.dialogue_index]
        return None

    def visible_options(self) -> list[Choice]:
        """Options the renderer should offer as buttons in the current mode."""
        screen = self.screen
        if screen is None:
            return []
        mode = self.mode
        if mode is Mode.CHOICE:
            return list(screen.choices or [])
        if mode is Mode.TIMED and screen.timed_choices is not None:
            return list(screen.timed_choices.options)
        return []

    def snapshot(self) -> StateSnapshot:
        screen = self.screen
        return StateSnapshot(
            book_title=self.book.title if self.book else None,
            screen_id=self.screen_id if screen else None,
            screen_type=screen.type if screen else None,
            mode=self.mode,
            dialogue_index=self.dialogue_index,
            line=self.current_line(),
            options=self.visible_options(),
            time_remaining=self.time_remaining,
            countdown_running=self.countdown is not None,
            scroll_offset=self.scroll_offset,
            background=screen.background_ref if screen else None,
            elements=list(screen.elements) if screen else [],
        )


class StateSnapshot(BaseModel):
    """Read-only view of the narrative state for renderers and the HTTP API."""

    book_title: str | None = None
    screen_id: str | None = None
    screen_type: str | None = None
    mode: Mode = Mode.NONE
    dialogue_index: int = 0
    line: DialogueLine | None = None
    options: list[Choice] = []
    time_remaining: int = 0
    countdown_running: bool = False
    scroll_offset: float = 0.0
    background: str | None = None
    elements: list[Element] = []
