from __future__ import annotations

import os
from pathlib import Path

import pytest

from docassist.client import DEFAULT_BASE_URL
from docassist.config import AppConfig, ConfigError
from docassist.env import load_dotenv, parse_dotenv


def _unset(monkeypatch: pytest.MonkeyPatch, *keys: str) -> None:
    for key in keys:
        monkeypatch.setenv(key, "placeholder")
        monkeypatch.delenv(key)


def test_from_env_reads_configuration_surface() -> None:
    config = AppConfig.from_env(
        {
            "OPENAI_API_KEY": "sk-test",
            "DOCASSIST_FILE_PATH": "bank_policies.json",
            "DOCASSIST_QUERY": "What is the policy for credit cards?",
        }
    )
    assert config == AppConfig(
        api_key="sk-test",
        file_path="bank_policies.json",
        query="What is the policy for credit cards?",
        base_url=DEFAULT_BASE_URL,
    )


def test_merged_prefers_explicit_values() -> None:
    config = AppConfig.from_env({"OPENAI_API_KEY": "from-env", "OPENAI_BASE_URL": "http://localhost:8000/v1"})
    merged = config.merged(api_key="from-flag", base_url=None, query="")
    assert merged.api_key == "from-flag"
    assert merged.base_url == "http://localhost:8000/v1"
    assert merged.query is None


def test_require_helpers_raise_config_error() -> None:
    config = AppConfig.from_env({})
    with pytest.raises(ConfigError, match="OPENAI_API_KEY"):
        config.require_api_key()
    with pytest.raises(ConfigError, match="--file"):
        config.require_file_path()
    with pytest.raises(ConfigError, match="--query"):
        config.require_query()


def test_parse_dotenv_handles_quotes_comments_and_export() -> None:
    text = "\n".join(
        [
            "# credentials",
            "OPENAI_API_KEY='sk-quoted'",
            'export DOCASSIST_QUERY="What is covered?"',
            "EMPTY=",
            "not a pair",
            "=orphan",
        ]
    )
    assert parse_dotenv(text) == {
        "OPENAI_API_KEY": "sk-quoted",
        "DOCASSIST_QUERY": "What is covered?",
    }


def test_load_dotenv_keeps_existing_variables(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _unset(monkeypatch, "DOCASSIST_FILE_PATH")
    monkeypatch.setenv("DOCASSIST_QUERY", "already set")
    env_file = tmp_path / ".env"
    env_file.write_text("DOCASSIST_QUERY=from file\nDOCASSIST_FILE_PATH=doc.txt\n", encoding="utf-8")

    applied = load_dotenv(env_file)

    assert applied == ["DOCASSIST_FILE_PATH"]
    assert os.environ["DOCASSIST_QUERY"] == "already set"
    assert os.environ["DOCASSIST_FILE_PATH"] == "doc.txt"


def test_load_dotenv_missing_file(tmp_path: Path) -> None:
    assert load_dotenv(tmp_path / ".env") == []
