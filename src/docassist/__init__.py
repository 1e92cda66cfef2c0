"""Async client for document upload, embeddings and content-grounded chat."""

from docassist.client import AssistantClient, build_chat_body, build_embeddings_body, build_prompt
from docassist.errors import (
    ClientError,
    ErrorKind,
    FileReadError,
    NoValidResponseError,
    ProtocolError,
    TransportError,
)
from docassist.types import ChatCompletion, EmbeddingResponse, FileObject

__all__ = [
    "AssistantClient",
    "ChatCompletion",
    "ClientError",
    "EmbeddingResponse",
    "ErrorKind",
    "FileObject",
    "FileReadError",
    "NoValidResponseError",
    "ProtocolError",
    "TransportError",
    "build_chat_body",
    "build_embeddings_body",
    "build_prompt",
]
