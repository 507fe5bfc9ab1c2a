"""Narrative interpreter: the state machine that walks a book.

Entry points and what they do:

    advance()          show the next dialogue line, or resolve the exhausted
                       screen: open its choices, start its countdown, run its
                       action, follow `next`, or stop at an ending
    choose(i)          pick option i of an open choice menu
    choose_timed(i)    pick option i of a timed menu, cancelling its countdown
    select(i)          "choice i pressed"; routes to choose or choose_timed by mode
    navigate(id)       jump to a screen
    run_action(a)      execute a navigate / loadBook / advance action
    load_book(path)    fetch a book and swap it in atomically
    set_book(book)     swap in an already-parsed book

Contract violations (wrong mode, bad index, unknown screen) are no-ops that
return False. Nothing here raises across the boundary except load_book(),
which re-raises BookLoadError so the host can offer a retry.

All entry points run to completion on one event loop; the only background
work is the countdown tick and in-flight loadBook tasks.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

from inkbound.assets import AssetLoader, NullAssetLoader, preload
from inkbound.loader import BookLoader, BookLoadError, DefaultBookLoader
from inkbound.models import (
    Action,
    AdvanceAction,
    Book,
    LoadBookAction,
    NavigateAction,
    Screen,
)
from inkbound.modes import Mode
from inkbound.scheduler import Clock, CountdownScheduler
from inkbound.state import Countdown, NarrativeState, StateSnapshot

logger = logging.getLogger(__name__)


class Interpreter:
    """One play session over one NarrativeState.

    Args:
        loader:            BookLoader used by load_book(). Defaults to DefaultBookLoader.
        assets:            AssetLoader for background preloads. Defaults to NullAssetLoader.
        clock:             Countdown tick source. Defaults to the asyncio loop.
        tick_seconds:      Seconds per countdown tick. Defaults to 1.
        on_screen_changed: Called with the new screen id after navigation or load.
        on_tick:           Called with the remaining seconds after each countdown tick.
        on_load_error:     Called with (path, error) when load_book() fails.
    """

    def __init__(
        self,
        loader: BookLoader | None = None,
        *,
        assets: AssetLoader | None = None,
        clock: Clock | None = None,
        tick_seconds: float = 1.0,
        on_screen_changed: Callable[[str], None] | None = None,
        on_tick: Callable[[int], None] | None = None,
        on_load_error: Callable[[str, BookLoadError], None] | None = None,
    ) -> None:
        self.state = NarrativeState()
        self._loader = loader or DefaultBookLoader()
        self._assets = assets or NullAssetLoader()
        self._scheduler = CountdownScheduler(
            self.state, self._expire, clock=clock, interval=tick_seconds, on_tick=on_tick,
        )
        self._loads: set[asyncio.Task] = set()
        self.on_screen_changed = on_screen_changed
        self.on_load_error = on_load_error

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def mode(self) -> Mode:
        return self.state.mode

    @property
    def screen(self) -> Screen | None:
        return self.state.screen

    @property
    def countdown_running(self) -> bool:
        return self._scheduler.running

    def snapshot(self) -> StateSnapshot:
        return self.state.snapshot()

    # ------------------------------------------------------------------
    # advance
    # ------------------------------------------------------------------

    def advance(self) -> asyncio.Task | None:
        """Move the presentation forward by exactly one step.

        Returns the load task when the step dispatched a loadBook action,
        otherwise None.
        """
        screen = self.state.screen
        if screen is None:
            return None
        if self.state.mode is Mode.NONE:
            logger.debug("advance ignored on inert screen %s (type %r)",
                         self.state.screen_id, screen.type)
            return None
        # An open menu or a running countdown waits for select(), not advance().
        if self.state.countdown is not None or self.state.menu_open:
            return None

        if screen.dialogue and self.state.dialogue_index < len(screen.dialogue) - 1:
            self.state.dialogue_index += 1
            logger.debug("dialogue %s[%d]", self.state.screen_id, self.state.dialogue_index)
            return None

        return self._resolve_exhausted(screen)

    def _resolve_exhausted(self, screen: Screen) -> asyncio.Task | None:
        if screen.choices:
            self.state.menu_open = True
            logger.debug("choices open on %s", self.state.screen_id)
            return None

        timed = screen.timed_choices
        if timed is not None and timed.options:
            self._scheduler.start(self.state.screen_id, timed.time, timed.default_index)
            return None

        # An `advance` action on the screen itself means "fall through to next".
        if screen.action is not None and not isinstance(screen.action, AdvanceAction):
            return self.run_action(screen.action)

        if screen.next:
            self.navigate(screen.next)
            return None

        logger.debug("end of the line at %s", self.state.screen_id)
        return None

    # ------------------------------------------------------------------
    # Choices
    # ------------------------------------------------------------------

    def choose(self, index: int) -> bool:
        """Pick option `index` of the open choice menu."""
        if self.state.mode is not Mode.CHOICE:
            return False
        choices = self.state.screen.choices or []
        if not 0 <= index < len(choices):
            return False
        return self.navigate(choices[index].next)

    def choose_timed(self, index: int) -> bool:
        """Pick option `index` of the active timed menu, stopping its countdown."""
        if self.state.mode is not Mode.TIMED:
            return False
        return self._take_timed_option(index)

    def select(self, index: int) -> bool:
        """Route a "choice pressed" event to the menu that is showing."""
        mode = self.state.mode
        if mode is Mode.TIMED:
            return self.choose_timed(index)
        if mode is Mode.CHOICE:
            return self.choose(index)
        return False

    def _take_timed_option(self, index: int) -> bool:
        screen = self.state.screen
        if screen is None or screen.timed_choices is None:
            return False
        options = screen.timed_choices.options
        if not 0 <= index < len(options):
            return False
        # navigate() cancels the countdown before the screen changes.
        return self.navigate(options[index].next)

    def _expire(self, countdown: Countdown) -> None:
        if countdown.screen_id != self.state.screen_id:
            return
        if not self._take_timed_option(countdown.default_index):
            logger.warning("timed default %d on %s did not resolve",
                           countdown.default_index, countdown.screen_id)

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def navigate(self, screen_id: str) -> bool:
        """Make `screen_id` the active screen. Unknown ids are ignored."""
        book = self.state.book
        if book is None or screen_id not in book.screens:
            logger.warning("navigate to unknown screen %r ignored", screen_id)
            return False

        self._scheduler.cancel()
        self.state.screen_id = screen_id
        self.state.dialogue_index = 0
        self.state.scroll_offset = 0.0
        self.state.menu_open = False
        logger.debug("screen %s (%s)", screen_id, self.state.mode.value)
        self._entered(book.screens[screen_id])
        return True

    def scroll_by(self, delta: float) -> float:
        if self.state.screen is not None:
            self.state.scroll_offset = max(0.0, self.state.scroll_offset + delta)
        return self.state.scroll_offset

    # ------------------------------------------------------------------
    # Actions and book loading
    # ------------------------------------------------------------------

    def run_action(self, action: Action) -> asyncio.Task | None:
        """Execute an action. loadBook runs as a task, which is returned."""
        if isinstance(action, NavigateAction):
            self.navigate(action.screen)
            return None
        if isinstance(action, LoadBookAction):
            return self._spawn_load(action.path)
        if isinstance(action, AdvanceAction):
            return self.advance()
        logger.warning("Unknown action %r skipped", action)
        return None

    async def load_book(self, path: str) -> Book:
        """Fetch and install a book. State is untouched if this raises."""
        try:
            book = await self._loader(path)
        except BookLoadError as e:
            logger.warning("Failed to load book %s: %s", path, e)
            if self.on_load_error is not None:
                self.on_load_error(path, e)
            raise
        self.set_book(book)
        return book

    def set_book(self, book: Book) -> None:
        """Swap in a parsed book and open its start screen, all in one step."""
        self._scheduler.cancel()
        self.state.book = book
        self.state.screen_id = book.start
        self.state.dialogue_index = 0
        self.state.scroll_offset = 0.0
        self.state.menu_open = False

        screen = book.screen(book.start)
        if screen is None:
            logger.warning("book start %r is not a screen", book.start)
            return
        logger.debug("book loaded start=%s (%s)", book.start, self.state.mode.value)
        self._entered(screen)

    def _spawn_load(self, path: str) -> asyncio.Task | None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.error("loadBook %s needs a running event loop; ignored", path)
            return None
        task = loop.create_task(self.load_book(path))
        self._loads.add(task)
        task.add_done_callback(self._load_done)
        return task

    def _load_done(self, task: asyncio.Task) -> None:
        self._loads.discard(task)
        if not task.cancelled():
            # Already logged and reported by load_book(); mark it retrieved.
            task.exception()

    async def wait_for_loads(self) -> None:
        """Wait for every loadBook task dispatched by actions to settle."""
        while self._loads:
            await asyncio.gather(*list(self._loads), return_exceptions=True)

    def close(self) -> None:
        """Stop the countdown and abandon in-flight loads."""
        self._scheduler.cancel()
        for task in list(self._loads):
            task.cancel()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _entered(self, screen: Screen) -> None:
        ref = screen.background_ref
        if ref:
            preload(self._assets, ref)
        if self.on_screen_changed is not None:
            self.on_screen_changed(self.state.screen_id)
