"""Offline stand-in for the remote API, used by --mock and the tests."""

from __future__ import annotations

from dataclasses import dataclass, field
import email
import email.policy
import hashlib
import json
import math
import random
from typing import Any

import httpx

from docassist.types import CHAT_ENDPOINT, EMBEDDINGS_ENDPOINT, FILES_ENDPOINT


@dataclass(frozen=True)
class UploadedPart:
    filename: str | None
    content_type: str
    content: bytes


@dataclass
class CapturedRequest:
    method: str
    path: str
    headers: dict[str, str]
    json: Any = None
    form: dict[str, str] = field(default_factory=dict)
    files: dict[str, UploadedPart] = field(default_factory=dict)


class MockAPI:
    """Deterministic fake of the files, embeddings and chat endpoints.

    Instances are ``httpx.MockTransport`` handlers and keep every request they
    see in ``requests``.
    """

    def __init__(self, *, dims: int = 1536, prefix: str = "/v1") -> None:
        self._dims = dims
        self._prefix = prefix.rstrip("/")
        self.requests: list[CapturedRequest] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        captured = capture_request(request)
        self.requests.append(captured)
        endpoint = captured.path
        if self._prefix and endpoint.startswith(self._prefix):
            endpoint = endpoint[len(self._prefix):]

        if request.method != "POST":
            return httpx.Response(405, json=_error_body("Method not allowed"))
        scheme, _, token = request.headers.get("authorization", "").partition(" ")
        if scheme != "Bearer" or not token.strip():
            return httpx.Response(401, json=_error_body("Missing bearer credential"))
        if endpoint == FILES_ENDPOINT:
            return httpx.Response(200, json=self._file_object(captured))
        if endpoint == EMBEDDINGS_ENDPOINT:
            return httpx.Response(200, json=self._embeddings(captured.json or {}))
        if endpoint == CHAT_ENDPOINT:
            return httpx.Response(200, json=self._chat_completion(captured.json or {}))
        return httpx.Response(404, json=_error_body(f"Unknown endpoint {captured.path}"))

    def _file_object(self, captured: CapturedRequest) -> dict[str, Any]:
        upload = captured.files.get("file")
        if upload is None:
            return _error_body("Missing file part")
        digest = hashlib.sha256(upload.content).hexdigest()
        return {
            "id": f"file-{digest[:24]}",
            "object": "file",
            "bytes": len(upload.content),
            "filename": upload.filename,
            "purpose": captured.form.get("purpose"),
        }

    def _embeddings(self, body: dict[str, Any]) -> dict[str, Any]:
        model = str(body.get("model", ""))
        text = str(body.get("input", ""))
        seed = int(hashlib.sha256((model + "|" + text).encode("utf-8")).hexdigest(), 16) % (2**32)
        rng = random.Random(seed)
        vec = [rng.gauss(0, 1) for _ in range(self._dims)]
        norm = math.sqrt(sum(value * value for value in vec)) or 1.0
        return {
            "object": "list",
            "model": model,
            "data": [{"object": "embedding", "index": 0, "embedding": [value / norm for value in vec]}],
            "usage": {"prompt_tokens": max(1, len(text) // 4), "total_tokens": max(1, len(text) // 4)},
        }

    def _chat_completion(self, body: dict[str, Any]) -> dict[str, Any]:
        messages = body.get("messages") or []
        prompt = str(messages[-1].get("content", "")) if messages else ""
        digest = hashlib.sha256(prompt.encode("utf-8")).hexdigest()
        query = prompt.rsplit("Query: ", 1)[-1].split("\n", 1)[0].strip()
        text = f"Mock answer for: {query}" if query else "Mock answer."
        return {
            "id": f"chatcmpl-{digest[:12]}",
            "object": "chat.completion",
            "model": body.get("model"),
            "choices": [
                {
                    "index": 0,
                    "message": {"role": "assistant", "content": text},
                    "finish_reason": "stop",
                }
            ],
            "usage": {
                "prompt_tokens": max(1, len(prompt) // 4),
                "completion_tokens": max(1, len(text) // 4),
                "total_tokens": max(1, len(prompt) // 4) + max(1, len(text) // 4),
            },
        }


def build_mock_transport(api: MockAPI | None = None) -> httpx.MockTransport:
    return httpx.MockTransport(api or MockAPI())


def capture_request(request: httpx.Request) -> CapturedRequest:
    captured = CapturedRequest(
        method=request.method,
        path=request.url.path,
        headers=dict(request.headers),
    )
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        captured.json = json.loads(request.content.decode("utf-8"))
    elif content_type.startswith("multipart/form-data"):
        captured.form, captured.files = parse_multipart(content_type, request.content)
    return captured


def parse_multipart(content_type: str, body: bytes) -> tuple[dict[str, str], dict[str, UploadedPart]]:
    header = f"Content-Type: {content_type}\r\n\r\n".encode("ascii")
    message = email.message_from_bytes(header + body, policy=email.policy.HTTP)
    form: dict[str, str] = {}
    files: dict[str, UploadedPart] = {}
    for part in message.iter_parts():
        name = part.get_param("name", header="content-disposition")
        if not name:
            continue
        payload = part.get_payload(decode=True) or b""
        filename = part.get_filename()
        if filename is None:
            form[name] = payload.decode("utf-8")
        else:
            files[name] = UploadedPart(
                filename=filename,
                content_type=part.get_content_type(),
                content=payload,
            )
    return form, files


def _error_body(message: str) -> dict[str, Any]:
    return {"error": {"message": message, "type": "invalid_request_error"}}
