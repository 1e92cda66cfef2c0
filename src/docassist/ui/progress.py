"""Status spinner for long-running API calls."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from docassist.ui.console import get_console


@contextmanager
def status_spinner(message: str) -> Iterator[object]:
    console = get_console()
    with console.status(message, spinner="dots", spinner_style="accent") as status:
        yield status
