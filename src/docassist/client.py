"""Async client for the files, embeddings and chat-completion endpoints."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import httpx
from loguru import logger

from docassist.errors import FileReadError, TransportError
from docassist.types import (
    CHAT_ENDPOINT,
    EMBEDDINGS_ENDPOINT,
    FILES_ENDPOINT,
    ChatCompletion,
    EmbeddingResponse,
    FileObject,
)

DEFAULT_BASE_URL = "https://api.openai.com/v1"
EMBEDDING_MODEL = "text-embedding-ada-002"
CHAT_MODEL = "gpt-3.5-turbo"
CHAT_MAX_TOKENS = 200
CHAT_TEMPERATURE = 0.7
UPLOAD_PURPOSE = "assistants"
UPLOAD_CONTENT_TYPE = "application/octet-stream"
SYSTEM_PROMPT = "You are an assistant that uses provided content to answer queries."
PROMPT_TEMPLATE = "Based on the following content:\n\n{content}\n\nQuery: {query}\nAssistant Response:"


def build_prompt(query: str, content: str) -> str:
    return PROMPT_TEMPLATE.format(content=content, query=query)


def build_chat_body(query: str, content: str) -> dict[str, Any]:
    return {
        "model": CHAT_MODEL,
        "messages": [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": build_prompt(query, content)},
        ],
        "max_tokens": CHAT_MAX_TOKENS,
        "temperature": CHAT_TEMPERATURE,
    }


def build_embeddings_body(text: str) -> dict[str, Any]:
    return {
        "model": EMBEDDING_MODEL,
        "input": text,
    }


class AssistantClient:
    """Thin async wrapper over an OpenAI-compatible API.

    Each operation is one authenticated request. The credential is not checked
    here; a bad key shows up as the first failed call. No timeout is applied,
    so callers that need one wrap the call themselves (``asyncio.wait_for``).
    """

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(base_url=self._base_url, timeout=None, transport=transport)

    @property
    def base_url(self) -> str:
        return self._base_url

    async def upload_document(self, file_path: str | Path) -> str:
        file_name = _file_name(file_path)
        try:
            file_content = Path(file_path).read_bytes()
        except (OSError, ValueError) as exc:
            raise _read_error(file_path, exc) from exc

        logger.debug("Uploading {} ({} bytes)", file_name, len(file_content))
        files = {"file": (file_name, file_content, UPLOAD_CONTENT_TYPE)}
        data = {"purpose": UPLOAD_PURPOSE}
        payload, status_code = await self._send(FILES_ENDPOINT, data=data, files=files)
        uploaded = FileObject.from_payload(payload, status_code=status_code)
        logger.info("File uploaded with ID {}", uploaded.id)
        return uploaded.id

    async def get_embeddings(self, text: str) -> list[float]:
        payload, status_code = await self._send(EMBEDDINGS_ENDPOINT, json=build_embeddings_body(text))
        response = EmbeddingResponse.from_payload(payload, status_code=status_code)
        logger.debug("Received {}-dimension embedding from {}", len(response.first), response.model)
        return response.first

    async def query_assistant_with_content(self, query: str, file_content: str) -> str:
        body = build_chat_body(query, file_content)
        payload, status_code = await self._send(CHAT_ENDPOINT, json=body)
        completion = ChatCompletion.from_payload(payload, status_code=status_code)
        logger.debug("Chat completion from {} finished (reason={})", completion.model, completion.finish_reason)
        return completion.content

    @staticmethod
    def read_file_content(file_path: str | Path) -> str:
        try:
            return Path(file_path).read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise FileReadError(path=str(file_path), reason=f"not valid UTF-8 text ({exc.reason})") from exc
        except (OSError, ValueError) as exc:
            raise _read_error(file_path, exc) from exc

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "AssistantClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def _send(self, endpoint: str, **kwargs: Any) -> tuple[Any, int]:
        logger.debug("POST {}{}", self._base_url, endpoint)
        try:
            response = await self._client.post(endpoint, headers=_auth_headers(self._api_key), **kwargs)
        except httpx.HTTPError as exc:
            raise TransportError(endpoint=endpoint, reason=str(exc) or type(exc).__name__) from exc
        try:
            payload = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise TransportError(
                endpoint=endpoint,
                reason=f"response body is not JSON (status {response.status_code})",
            ) from exc
        if response.is_error:
            logger.warning("{} answered with status {}", endpoint, response.status_code)
        return payload, response.status_code


def _file_name(file_path: str | Path) -> str:
    name = Path(file_path).name
    if name in {"", ".", ".."}:
        raise FileReadError(path=str(file_path), reason="Invalid file path")
    return name


def _read_error(file_path: str | Path, exc: Exception) -> FileReadError:
    reason = getattr(exc, "strerror", None) or str(exc)
    return FileReadError(path=str(file_path), reason=reason)


def _auth_headers(api_key: str) -> dict[str, str]:
    return {
        "Authorization": f"Bearer {api_key}",
    }
