"""Minimal .env loader for the docassist CLI."""

from __future__ import annotations

import os
from pathlib import Path

from loguru import logger


def parse_dotenv(text: str) -> dict[str, str]:
    values: dict[str, str] = {}
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or "=" not in stripped:
            continue
        if stripped.startswith("export "):
            stripped = stripped[len("export "):].lstrip()
        key, value = stripped.split("=", 1)
        key = key.strip()
        value = value.strip()
        if not key:
            continue
        if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
            value = value[1:-1]
        if value:
            values[key] = value
    return values


def load_dotenv(path: str | Path = ".env") -> list[str]:
    """Copy variables from ``path`` into the environment.

    Variables that are already set win. Returns the keys that were applied.
    """
    env_path = Path(path)
    if not env_path.is_file():
        return []
    try:
        text = env_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Skipping unreadable env file {}: {}", env_path, exc)
        return []

    applied: list[str] = []
    for key, value in parse_dotenv(text).items():
        if key in os.environ:
            continue
        os.environ[key] = value
        applied.append(key)
    if applied:
        logger.debug("Loaded {} variable(s) from {}", len(applied), env_path)
    return applied
