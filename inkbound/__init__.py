"""Inkbound: an interpreter for branching visual-novel books.

Typical use from a host:

    interpreter = Interpreter(FileBookLoader(Path("books")))
    await interpreter.load_book("startmenu.json")
    interpreter.advance()
    interpreter.select(0)
    draw(interpreter.snapshot())
"""

from inkbound.interpreter import Interpreter  # noqa: F401
from inkbound.loader import (  # noqa: F401
    BookLoadError,
    DefaultBookLoader,
    FileBookLoader,
    HttpBookLoader,
)
from inkbound.models import (  # noqa: F401
    AdvanceAction,
    Book,
    Choice,
    DialogueLine,
    LoadBookAction,
    NavigateAction,
    Screen,
    TimedChoiceSpec,
)
from inkbound.modes import Mode, derive_mode  # noqa: F401
from inkbound.state import NarrativeState, StateSnapshot  # noqa: F401
