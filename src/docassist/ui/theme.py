"""Rich theme for the docassist CLI."""

from __future__ import annotations

from rich.theme import Theme

THEME = Theme(
    {
        "accent": "bright_blue",
        "border": "bright_black",
        "subtitle": "dim",
        "step": "bold bright_blue",
        "info": "dim",
        "error": "bold red3",
        "label": "dim",
        "value": "white",
        "path": "cyan",
    }
)
