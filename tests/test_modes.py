"""Tests for derive_mode."""

import pytest

from inkbound.models import Screen
from inkbound.modes import Mode, derive_mode


@pytest.mark.parametrize("screen_type, mode", [
    ("splash", Mode.SPLASH),
    ("ui", Mode.UI),
    ("dialogue", Mode.DIALOGUE),
    ("choices", Mode.CHOICE),
    ("timed", Mode.TIMED),
])
def test_screen_type_maps_to_mode(screen_type, mode):
    assert derive_mode(Screen(type=screen_type)) is mode


def test_no_screen_is_none():
    assert derive_mode(None) is Mode.NONE


def test_unknown_type_is_none():
    assert derive_mode(Screen(type="cutscene")) is Mode.NONE
