"""Render helpers for the docassist CLI."""

from __future__ import annotations

import json
from typing import Any, Mapping, Sequence

from rich import box
from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from docassist.ui.console import get_console, get_error_console


def render_banner(title: str, subtitle: str) -> None:
    console = get_console()
    panel = Panel(
        Group(Text(subtitle, style="subtitle")),
        title=Text(title, style="step"),
        title_align="left",
        box=box.ROUNDED,
        border_style="border",
        padding=(0, 2),
        expand=True,
    )
    console.print(panel)


def render_step_header(step_idx: int | None, step_total: int | None, title: str, description: str) -> None:
    console = get_console()
    if step_idx is not None and step_total is not None:
        panel_title = f"Step {step_idx}/{step_total} · {title}"
    else:
        panel_title = title
    content = []
    if description:
        content.append(Text(description, style="subtitle"))
    panel = Panel(
        Group(*content),
        title=Text(panel_title, style="step"),
        title_align="left",
        box=box.ROUNDED,
        border_style="border",
        padding=(0, 2),
        expand=True,
    )
    console.print(panel)


def render_result(label: str, value: str) -> None:
    """Print ``label: value`` on one unwrapped line so output stays scriptable."""
    console = get_console()
    line = Text(f"{label}: ", style="label")
    line.append(value, style="value")
    console.print(line, soft_wrap=True)


def render_json(payload: Any) -> None:
    console = get_console()
    console.print(
        json.dumps(payload, indent=2, sort_keys=True, ensure_ascii=True),
        markup=False,
        emoji=False,
        soft_wrap=True,
    )


def render_info(text: str) -> None:
    console = get_console()
    console.print(text, style="info", markup=False)


def render_error(text: str) -> None:
    console = get_error_console()
    panel = Panel(
        Text(text, style="error"),
        box=box.ROUNDED,
        border_style="error",
        padding=(0, 2),
        expand=True,
    )
    console.print(panel)


def render_summary_table(rows: Mapping[str, str] | Sequence[tuple[str, str]], title: str = "Summary") -> None:
    console = get_console()
    table = Table(
        show_header=False,
        box=None,
        pad_edge=False,
    )
    table.add_column(style="label", no_wrap=True, justify="right")
    table.add_column(style="value")

    items = rows.items() if hasattr(rows, "items") else rows
    for key, value in items:
        label = Text(str(key), style="label")
        value_text = Text(str(value), style="value")
        if str(key).lower() in {"file", "endpoint"}:
            value_text.stylize("path")
        table.add_row(label, value_text)

    panel = Panel(
        table,
        title=Text(title, style="step"),
        title_align="left",
        border_style="border",
        box=box.ROUNDED,
        padding=(0, 2),
        expand=True,
    )
    console.print(panel)
