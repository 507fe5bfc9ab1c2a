"""Tests for inkbound.models."""

import pytest
from pydantic import ValidationError

from inkbound.models import (
    AdvanceAction,
    Book,
    LoadBookAction,
    NavigateAction,
    Screen,
    TimedChoiceSpec,
)


class TestTimedChoiceSpec:
    def test_defaults(self) -> None:
        spec = TimedChoiceSpec.model_validate({"options": [{"text": "Run", "next": "x"}]})
        assert spec.time == 5
        assert spec.default_index == 0

    def test_camel_case_keys(self) -> None:
        spec = TimedChoiceSpec.model_validate(
            {"time": 3, "defaultIndex": 1, "options": [{"text": "a", "next": "x"}, {"text": "b", "next": "y"}]}
        )
        assert spec.time == 3
        assert spec.default_index == 1

    def test_zero_time_falls_back_to_default(self) -> None:
        spec = TimedChoiceSpec.model_validate({"time": 0, "options": []})
        assert spec.time == 5

    def test_null_time_and_index_fall_back(self) -> None:
        spec = TimedChoiceSpec.model_validate({"time": None, "defaultIndex": None, "options": []})
        assert spec.time == 5
        assert spec.default_index == 0

    def test_fractional_time_rounds_up_to_whole_seconds(self) -> None:
        spec = TimedChoiceSpec.model_validate({"time": 2.2, "options": []})
        assert spec.time == 3


class TestActions:
    def test_discriminated_on_type(self) -> None:
        screen = Screen.model_validate({"type": "ui", "action": {"type": "loadBook", "path": "b.json"}})
        assert isinstance(screen.action, LoadBookAction)
        assert screen.action.path == "b.json"

    def test_navigate_and_advance(self) -> None:
        nav = Screen.model_validate({"type": "ui", "action": {"type": "navigate", "screen": "x"}})
        adv = Screen.model_validate({"type": "ui", "action": {"type": "advance"}})
        assert isinstance(nav.action, NavigateAction)
        assert isinstance(adv.action, AdvanceAction)

    def test_unknown_action_type_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Screen.model_validate({"type": "ui", "action": {"type": "explode"}})

    def test_button_actions(self) -> None:
        screen = Screen.model_validate({
            "type": "ui",
            "elements": [
                {"type": "label", "text": "Title"},
                {"type": "button", "text": "Go", "action": {"type": "navigate", "screen": "x"}},
            ],
        })
        assert screen.button_actions() == [NavigateAction(screen="x")]


class TestScreen:
    def test_presentation_extras_kept(self) -> None:
        screen = Screen.model_validate({"type": "splash", "font": "64px serif"})
        assert screen.model_extra == {"font": "64px serif"}

    def test_cover_wins_over_background(self) -> None:
        screen = Screen(type="splash", background="bg.png", cover="cover.png")
        assert screen.background_ref == "cover.png"

    def test_background_ref_without_cover(self) -> None:
        assert Screen(type="splash", background="bg.png").background_ref == "bg.png"

    def test_unknown_type_still_parses(self) -> None:
        assert Screen.model_validate({"type": "minigame"}).type == "minigame"

    def test_timed_choices_alias(self) -> None:
        screen = Screen.model_validate(
            {"type": "timed", "timedChoices": {"options": [{"text": "Run", "next": "x"}]}}
        )
        assert screen.timed_choices is not None
        assert screen.timed_choices.options[0].next == "x"


class TestBook:
    def test_start_required(self) -> None:
        with pytest.raises(ValidationError):
            Book.model_validate({"screens": {}})

    def test_screen_lookup(self, scenario_book) -> None:
        book = Book.model_validate(scenario_book)
        assert book.screen("b").type == "choices"
        assert book.screen("missing") is None
        assert book.screen(None) is None

    def test_serialise_roundtrip_with_aliases(self) -> None:
        book = Book.model_validate({
            "start": "t",
            "screens": {"t": {"type": "timed", "timedChoices": {"time": 3, "options": [{"text": "a", "next": "t"}]}}},
        })
        restored = Book.model_validate_json(book.model_dump_json(by_alias=True))
        assert restored == book
