"""Tests for find_content_errors."""

from inkbound.models import Book
from inkbound.validation import find_content_errors


def _errors(screens, start="a"):
    return find_content_errors(Book.model_validate({"start": start, "screens": screens}))


def test_clean_book_has_no_errors(scenario_book):
    assert find_content_errors(Book.model_validate(scenario_book)) == []


def test_missing_start():
    assert _errors({"a": {"type": "splash"}}, start="zz") == ["start: unknown screen 'zz'"]


def test_dangling_next_and_choice():
    errors = _errors({
        "a": {"type": "choices", "next": "x", "choices": [{"text": "Go", "next": "y"}]},
    })
    assert "screens.a.next: unknown screen 'x'" in errors
    assert "screens.a.choices[0].next: unknown screen 'y'" in errors


def test_dangling_action_targets():
    errors = _errors({
        "a": {
            "type": "ui",
            "action": {"type": "navigate", "screen": "p"},
            "elements": [{"type": "button", "text": "Q", "action": {"type": "navigate", "screen": "q"}}],
        },
    })
    assert errors == [
        "screens.a.action.screen: unknown screen 'p'",
        "screens.a.elements[0].action.screen: unknown screen 'q'",
    ]


def test_load_book_actions_are_not_screen_refs():
    assert _errors({"a": {"type": "ui", "action": {"type": "loadBook", "path": "other.json"}}}) == []


def test_unknown_screen_type():
    assert _errors({"a": {"type": "minigame"}}) == ["screens.a.type: unsupported screen type 'minigame'"]


def test_choices_screen_without_choices():
    assert _errors({"a": {"type": "choices"}}) == [
        "screens.a: choices screen needs 'choices' or button elements"
    ]


def test_choices_screen_with_buttons_is_fine():
    screens = {"a": {"type": "choices", "elements": [
        {"type": "button", "text": "Go", "action": {"type": "navigate", "screen": "a"}},
    ]}}
    assert _errors(screens) == []


def test_timed_screen_without_timed_choices():
    assert _errors({"a": {"type": "timed"}}) == ["screens.a: timed screen needs 'timedChoices'"]


def test_timed_without_options():
    assert _errors({"a": {"type": "timed", "timedChoices": {"options": []}}}) == [
        "screens.a.timedChoices.options: must not be empty"
    ]


def test_timed_default_out_of_range():
    errors = _errors({"a": {"type": "timed", "timedChoices": {"defaultIndex": 2, "options": [
        {"text": "Go", "next": "a"},
    ]}}})
    assert errors == ["screens.a.timedChoices.defaultIndex: 2 is out of range for 1 option(s)"]


def test_timed_option_refs_checked():
    errors = _errors({"a": {"type": "timed", "timedChoices": {"options": [{"text": "Go", "next": "b"}]}}})
    assert errors == ["screens.a.timedChoices.options[0].next: unknown screen 'b'"]
