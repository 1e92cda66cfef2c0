"""Typed response records decoded at the HTTP boundary."""

from __future__ import annotations

from array import array
import base64
import binascii
from dataclasses import dataclass
import sys
from typing import Any

from docassist.errors import NoValidResponseError, ProtocolError

FILES_ENDPOINT = "/files"
EMBEDDINGS_ENDPOINT = "/embeddings"
CHAT_ENDPOINT = "/chat/completions"

NO_VALID_RESPONSE = "Failed to retrieve a valid response from the assistant."

# Base64 embeddings are packed little-endian float32.
SWAP_BASE64_BYTES = sys.byteorder == "big"


@dataclass(frozen=True)
class FileObject:
    id: str

    @classmethod
    def from_payload(cls, payload: Any, *, status_code: int | None = None) -> "FileObject":
        file_id = payload.get("id") if isinstance(payload, dict) else None
        if not isinstance(file_id, str):
            raise ProtocolError(
                endpoint=FILES_ENDPOINT,
                body=payload,
                detail="Failed to retrieve file ID from response",
                status_code=status_code,
            )
        return cls(id=file_id)


@dataclass(frozen=True)
class EmbeddingResponse:
    model: str | None
    embeddings: list[list[float]]

    @classmethod
    def from_payload(cls, payload: Any, *, status_code: int | None = None) -> "EmbeddingResponse":
        def fail(detail: str) -> ProtocolError:
            return ProtocolError(
                endpoint=EMBEDDINGS_ENDPOINT,
                body=payload,
                detail=detail,
                status_code=status_code,
            )

        items = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(items, list) or not items:
            raise fail("Embeddings response has no data entries")

        embeddings: list[list[float]] = []
        for position, item in enumerate(items):
            if not isinstance(item, dict):
                raise fail(f"Embeddings entry {position} is not an object")
            try:
                embeddings.append(decode_embedding(item.get("embedding")))
            except ValueError as exc:
                raise fail(f"Embeddings entry {position}: {exc}") from exc

        return cls(model=_optional_str(payload.get("model")), embeddings=embeddings)

    @property
    def first(self) -> list[float]:
        return self.embeddings[0]


@dataclass(frozen=True)
class ChatCompletion:
    content: str
    model: str | None = None
    finish_reason: str | None = None

    @classmethod
    def from_payload(cls, payload: Any, *, status_code: int | None = None) -> "ChatCompletion":
        choices = payload.get("choices") if isinstance(payload, dict) else None
        choice = choices[0] if isinstance(choices, list) and choices else None
        message = choice.get("message") if isinstance(choice, dict) else None
        content = message.get("content") if isinstance(message, dict) else None
        if not isinstance(content, str):
            raise NoValidResponseError(
                endpoint=CHAT_ENDPOINT,
                body=payload,
                detail=NO_VALID_RESPONSE,
                status_code=status_code,
            )
        return cls(
            content=content,
            model=_optional_str(payload.get("model")),
            finish_reason=_optional_str(choice.get("finish_reason")),
        )


def decode_embedding(raw: Any) -> list[float]:
    """Decode an embedding into 32-bit float precision.

    Accepts a JSON array of numbers or a base64 string of packed little-endian
    float32 values.
    """
    if isinstance(raw, list):
        for value in raw:
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"non-numeric embedding value {value!r}")
        try:
            return list(array("f", raw))
        except OverflowError as exc:
            raise ValueError(f"embedding value out of float range ({exc})") from exc
    if isinstance(raw, str):
        try:
            packed = base64.b64decode(raw, validate=True)
        except binascii.Error as exc:
            raise ValueError("embedding is not valid base64") from exc
        if len(packed) % 4:
            raise ValueError("embedding byte length is not a multiple of 4")
        values = array("f")
        values.frombytes(packed)
        if SWAP_BASE64_BYTES:
            values.byteswap()
        return list(values)
    raise ValueError("missing or unsupported embedding format")


def _optional_str(value: Any) -> str | None:
    return value if isinstance(value, str) else None
