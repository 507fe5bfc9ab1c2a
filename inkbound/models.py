"""Content model for authored books.

A book is a JSON document of screens keyed by id, plus the id of the screen
to open first:

    {
      "start": "intro",
      "screens": {
        "intro":  {"type": "dialogue", "dialogue": [...], "next": "menu"},
        "menu":   {"type": "choices", "choices": [{"text": "...", "next": "..."}]},
        "escape": {"type": "timed", "timedChoices": {"time": 3, "defaultIndex": 0,
                                                      "options": [...]}}
      }
    }

These models are passive data. Presentation-only keys (fonts, colours,
layout hints) are kept as extras so renderers can read them, but nothing in
the interpreter looks at them.
"""

from __future__ import annotations

import math
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_TIMED_SECONDS = 5

SCREEN_TYPES = ("splash", "ui", "dialogue", "choices", "timed")


class DialogueLine(BaseModel):
    """One spoken line: who says it and what they say."""

    speaker: str = ""
    text: str


class Choice(BaseModel):
    text: str
    next: str  # target screen id


class TimedChoiceSpec(BaseModel):
    """A choice menu with a countdown and a fallback option."""

    model_config = ConfigDict(populate_by_name=True)

    time: int = DEFAULT_TIMED_SECONDS  # whole seconds
    default_index: int = Field(default=0, alias="defaultIndex")
    options: list[Choice] = Field(default_factory=list)

    @field_validator("time", mode="before")
    @classmethod
    def _whole_seconds(cls, value: Any) -> Any:
        # Authored 0, null or a missing value all mean "use the default".
        if value is None:
            return DEFAULT_TIMED_SECONDS
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            seconds = math.ceil(value)
            return seconds if seconds > 0 else DEFAULT_TIMED_SECONDS
        return value

    @field_validator("default_index", mode="before")
    @classmethod
    def _default_index(cls, value: Any) -> Any:
        return 0 if value is None else value


# ---------------------------------------------------------------------------
# Actions: deferred effects a screen or a button can request
# ---------------------------------------------------------------------------

class NavigateAction(BaseModel):
    type: Literal["navigate"] = "navigate"
    screen: str


class LoadBookAction(BaseModel):
    type: Literal["loadBook"] = "loadBook"
    path: str  # file path or URL, resolved by the BookLoader


class AdvanceAction(BaseModel):
    type: Literal["advance"] = "advance"


Action = Annotated[
    NavigateAction | LoadBookAction | AdvanceAction,
    Field(discriminator="type"),
]


class Element(BaseModel):
    """A presentation element ("label", "button", ...).

    Only `action` is interpreted: buttons carry one so the host can hand it
    straight to Interpreter.run_action() when the button is pressed.
    """

    model_config = ConfigDict(extra="allow")

    type: str
    text: str = ""
    action: Action | None = None


class Screen(BaseModel):
    """One addressable unit of content. `type` decides its behaviour."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    type: str
    title: str | None = None
    background: str | None = None
    cover: str | None = None  # full-page background, wins over `background`
    dialogue: list[DialogueLine] | None = None
    choices: list[Choice] | None = None
    timed_choices: TimedChoiceSpec | None = Field(default=None, alias="timedChoices")
    next: str | None = None
    action: Action | None = None
    elements: list[Element] = Field(default_factory=list)

    @property
    def background_ref(self) -> str | None:
        return self.cover or self.background

    def button_actions(self) -> list[Action]:
        return [el.action for el in self.elements if el.action is not None]


class Book(BaseModel):
    """The root document: every screen plus the id of the first one."""

    title: str | None = None
    start: str
    screens: dict[str, Screen]

    def screen(self, screen_id: str | None) -> Screen | None:
        if screen_id is None:
            return None
        return self.screens.get(screen_id)
