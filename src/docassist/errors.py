"""Error taxonomy for assistant client calls."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import json
from typing import Any


class ErrorKind(str, Enum):
    IO = "io"
    TRANSPORT = "transport"
    PROTOCOL = "protocol"


class ClientError(RuntimeError):
    """Base class for every failure surfaced by AssistantClient."""

    kind: ErrorKind


@dataclass
class FileReadError(ClientError):
    path: str
    reason: str

    kind = ErrorKind.IO

    def __str__(self) -> str:
        return f"File read error ({self.path}): {self.reason}"


@dataclass
class TransportError(ClientError):
    endpoint: str
    reason: str

    kind = ErrorKind.TRANSPORT

    def __str__(self) -> str:
        return f"Request error ({self.endpoint}): {self.reason}"


@dataclass
class ProtocolError(ClientError):
    """The request succeeded but the decoded body lacked an expected field."""

    endpoint: str
    body: Any
    detail: str
    status_code: int | None = None

    kind = ErrorKind.PROTOCOL

    def __str__(self) -> str:
        return f"{self.detail}: {serialize_body(self.body)}"


class NoValidResponseError(ProtocolError):
    def __str__(self) -> str:
        return self.detail


def serialize_body(body: Any) -> str:
    try:
        return json.dumps(body, sort_keys=True, ensure_ascii=True)
    except (TypeError, ValueError):
        return repr(body)
