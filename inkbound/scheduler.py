"""Timed-choice countdown scheduler.

Two states: Idle (state.countdown is None) and Running (state.countdown set).

    start()  Idle/Running → Running   any previous countdown is cancelled first;
                                      stays Idle if the clock cannot arm a tick
    tick     Running → Running        remaining -= 1, once per interval
    expiry   Running → Idle           remaining hit 0; on_expire(countdown) fires once
    cancel() Running → Idle           pending tick is dropped, nothing fires

Ticks are driven by a Clock. Production uses the running asyncio loop; tests
inject a manual clock and step it explicitly. Each tick re-arms the next one
only after it has run, so a suspended host never catches up on missed ticks;
the countdown simply resumes from where it was.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Protocol

from inkbound.state import Countdown, NarrativeState

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Clock protocol: anything that can call back later and be cancelled
# ---------------------------------------------------------------------------

class Cancellable(Protocol):
    def cancel(self) -> None: ...


class Clock(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> Cancellable: ...


class AsyncioClock:
    """Schedules callbacks on the running asyncio event loop."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> Cancellable:
        return asyncio.get_running_loop().call_later(delay, callback)


# ---------------------------------------------------------------------------
# CountdownScheduler
# ---------------------------------------------------------------------------

class CountdownScheduler:
    """Owns `state.countdown`; at most one countdown is ever running.

    Args:
        state:     The narrative state whose `countdown` field this scheduler owns.
        on_expire: Called with the finished Countdown after it reaches 0.
                   The scheduler is already Idle when this runs.
        clock:     Tick source. Defaults to AsyncioClock.
        interval:  Seconds between ticks. Defaults to 1.
        on_tick:   Optional listener called with the remaining seconds after each tick.
    """

    def __init__(
        self,
        state: NarrativeState,
        on_expire: Callable[[Countdown], None],
        *,
        clock: Clock | None = None,
        interval: float = 1.0,
        on_tick: Callable[[int], None] | None = None,
    ) -> None:
        self._state = state
        self._on_expire = on_expire
        self._clock = clock or AsyncioClock()
        self._interval = interval
        self.on_tick = on_tick
        self._handle: Cancellable | None = None

    @property
    def running(self) -> bool:
        return self._state.countdown is not None

    def start(self, screen_id: str, seconds: int, default_index: int) -> Countdown | None:
        """Begin a countdown. Returns None, still Idle, if no tick could be armed."""
        self.cancel()
        countdown = Countdown(
            screen_id=screen_id,
            remaining=max(int(seconds), 0),
            default_index=default_index,
        )
        if countdown.remaining > 0:
            # Arm before publishing so a clock failure leaves the state Idle.
            try:
                self._arm(countdown)
            except RuntimeError as e:
                logger.error("countdown on %s needs a running event loop; ignored (%s)",
                             screen_id, e)
                return None
        self._state.countdown = countdown
        logger.debug("countdown start screen=%s seconds=%d default=%d",
                     screen_id, countdown.remaining, default_index)
        if countdown.remaining == 0:
            self._expire(countdown)
        return countdown

    def cancel(self) -> bool:
        """Stop the running countdown. Returns False if it was already Idle."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        if self._state.countdown is None:
            return False
        logger.debug("countdown cancelled screen=%s remaining=%d",
                     self._state.countdown.screen_id, self._state.countdown.remaining)
        self._state.countdown = None
        return True

    def _arm(self, countdown: Countdown) -> None:
        self._handle = self._clock.call_later(self._interval, lambda: self._tick(countdown))

    def _tick(self, countdown: Countdown) -> None:
        # A callback for a countdown that is no longer current must do nothing.
        if self._state.countdown is not countdown:
            return
        self._handle = None
        countdown.remaining = max(countdown.remaining - 1, 0)
        logger.debug("countdown tick screen=%s remaining=%d", countdown.screen_id, countdown.remaining)
        try:
            if self.on_tick is not None:
                self.on_tick(countdown.remaining)
        finally:
            # The listener may have cancelled or replaced this countdown.
            if self._state.countdown is countdown:
                if countdown.remaining > 0:
                    self._arm(countdown)
                else:
                    self._expire(countdown)

    def _expire(self, countdown: Countdown) -> None:
        self._state.countdown = None
        logger.debug("countdown expired screen=%s default=%d",
                     countdown.screen_id, countdown.default_index)
        self._on_expire(countdown)
