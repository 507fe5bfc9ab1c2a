"""Content linting for books.

The interpreter never rejects a book for these problems; it skips the broken
transition at the point of use. The loader logs what this module finds and
`main.py --validate` prints it for authors.
"""

from __future__ import annotations

from typing import Callable

from inkbound.models import SCREEN_TYPES, Book, NavigateAction, Screen


def find_content_errors(book: Book) -> list[str]:
    """Return one message per content error, prefixed with its path in the book."""
    errors: list[str] = []

    def check_ref(where: str, target: str | None) -> None:
        if target is not None and target not in book.screens:
            errors.append(f"{where}: unknown screen '{target}'")

    check_ref("start", book.start)

    for screen_id, screen in book.screens.items():
        where = f"screens.{screen_id}"

        if screen.type not in SCREEN_TYPES:
            errors.append(f"{where}.type: unsupported screen type '{screen.type}'")

        check_ref(f"{where}.next", screen.next)
        for i, choice in enumerate(screen.choices or []):
            check_ref(f"{where}.choices[{i}].next", choice.next)

        if isinstance(screen.action, NavigateAction):
            check_ref(f"{where}.action.screen", screen.action.screen)
        for i, element in enumerate(screen.elements):
            if isinstance(element.action, NavigateAction):
                check_ref(f"{where}.elements[{i}].action.screen", element.action.screen)

        if screen.type == "choices" and not screen.choices and not screen.button_actions():
            errors.append(f"{where}: choices screen needs 'choices' or button elements")

        errors.extend(_timed_errors(where, screen, check_ref))

    return errors


def _timed_errors(
    where: str, screen: Screen, check_ref: Callable[[str, str | None], None]
) -> list[str]:
    timed = screen.timed_choices
    if timed is None:
        if screen.type == "timed":
            return [f"{where}: timed screen needs 'timedChoices'"]
        return []

    errors: list[str] = []
    if not timed.options:
        errors.append(f"{where}.timedChoices.options: must not be empty")
    elif not 0 <= timed.default_index < len(timed.options):
        errors.append(
            f"{where}.timedChoices.defaultIndex: {timed.default_index} is out of range "
            f"for {len(timed.options)} option(s)"
        )
    for i, option in enumerate(timed.options):
        check_ref(f"{where}.timedChoices.options[{i}].next", option.next)
    return errors
