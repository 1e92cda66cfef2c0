"""Runtime configuration for the docassist entry point."""

from __future__ import annotations

from dataclasses import dataclass, replace
import os
from typing import Mapping

from docassist.client import DEFAULT_BASE_URL

API_KEY_ENV = "OPENAI_API_KEY"
BASE_URL_ENV = "OPENAI_BASE_URL"
FILE_PATH_ENV = "DOCASSIST_FILE_PATH"
QUERY_ENV = "DOCASSIST_QUERY"

MOCK_API_KEY = "mock-key"


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class AppConfig:
    api_key: str | None = None
    file_path: str | None = None
    query: str | None = None
    base_url: str = DEFAULT_BASE_URL

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "AppConfig":
        env = os.environ if environ is None else environ
        return cls(
            api_key=env.get(API_KEY_ENV) or None,
            file_path=env.get(FILE_PATH_ENV) or None,
            query=env.get(QUERY_ENV) or None,
            base_url=env.get(BASE_URL_ENV) or DEFAULT_BASE_URL,
        )

    def merged(self, **overrides: str | None) -> "AppConfig":
        """Return a copy where every non-empty override replaces the stored value."""
        updates = {key: value for key, value in overrides.items() if value}
        return replace(self, **updates)

    def require_api_key(self) -> str:
        if not self.api_key:
            raise ConfigError(f"{API_KEY_ENV} is required (set it or pass --api-key).")
        return self.api_key

    def require_file_path(self) -> str:
        if not self.file_path:
            raise ConfigError(f"A document path is required (pass --file or set {FILE_PATH_ENV}).")
        return self.file_path

    def require_query(self) -> str:
        if not self.query:
            raise ConfigError(f"A query is required (pass --query or set {QUERY_ENV}).")
        return self.query
