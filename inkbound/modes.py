"""Presentation modes and their derivation from the active screen."""

from __future__ import annotations

from enum import Enum

from inkbound.models import Screen


class Mode(str, Enum):
    SPLASH = "splash"
    UI = "ui"
    DIALOGUE = "dialogue"
    CHOICE = "choices"
    TIMED = "timed"
    NONE = "none"


_SCREEN_MODES: dict[str, Mode] = {
    "splash": Mode.SPLASH,
    "ui": Mode.UI,
    "dialogue": Mode.DIALOGUE,
    "choices": Mode.CHOICE,
    "timed": Mode.TIMED,
}


def derive_mode(screen: Screen | None) -> Mode:
    """Map a screen to the mode it is presented in.

    Mode.NONE covers both "nothing loaded" and screen types the interpreter
    does not know; such screens are inert.
    """
    if screen is None:
        return Mode.NONE
    return _SCREEN_MODES.get(screen.type, Mode.NONE)
