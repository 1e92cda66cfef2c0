from __future__ import annotations

from pathlib import Path

import httpx
import pytest

from docassist.errors import (
    ErrorKind,
    FileReadError,
    NoValidResponseError,
    ProtocolError,
    TransportError,
    serialize_body,
)
from docassist.mock import MockAPI
from tests.helpers import API_KEY, json_handler


@pytest.mark.asyncio
@pytest.mark.parametrize("file_id", ["file-abc123", "x", ""])
async def test_upload_returns_id_from_response(make_client, policy_file: Path, file_id: str) -> None:
    client = make_client(json_handler({"id": file_id}))
    assert await client.upload_document(policy_file) == file_id


@pytest.mark.asyncio
async def test_upload_wire_shape(client, mock_api: MockAPI, policy_file: Path) -> None:
    file_id = await client.upload_document(str(policy_file))

    assert file_id.startswith("file-")
    assert len(mock_api.requests) == 1
    sent = mock_api.requests[0]
    assert sent.method == "POST"
    assert sent.path == "/v1/files"
    assert sent.headers["authorization"] == f"Bearer {API_KEY}"
    assert sent.form == {"purpose": "assistants"}
    part = sent.files["file"]
    assert part.filename == "bank_policies.json"
    assert part.content_type == "application/octet-stream"
    assert part.content == policy_file.read_bytes()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"object": "file", "filename": "bank_policies.json"},
        {"id": 42},
        {"id": None},
        ["not", "an", "object"],
    ],
)
async def test_upload_missing_id_is_protocol_error(make_client, policy_file: Path, payload) -> None:
    client = make_client(json_handler(payload))
    with pytest.raises(ProtocolError) as excinfo:
        await client.upload_document(policy_file)

    err = excinfo.value
    assert not isinstance(err, NoValidResponseError)
    assert err.kind is ErrorKind.PROTOCOL
    assert err.body == payload
    assert str(err) == f"Failed to retrieve file ID from response: {serialize_body(payload)}"


@pytest.mark.asyncio
async def test_upload_error_status_carries_body(make_client, policy_file: Path) -> None:
    payload = {"error": {"message": "Incorrect API key provided", "type": "invalid_request_error"}}
    client = make_client(json_handler(payload, status_code=401))
    with pytest.raises(ProtocolError) as excinfo:
        await client.upload_document(policy_file)
    assert excinfo.value.status_code == 401
    assert "Incorrect API key provided" in str(excinfo.value)


@pytest.mark.asyncio
async def test_upload_missing_file_sends_nothing(client, mock_api: MockAPI, tmp_path: Path) -> None:
    with pytest.raises(FileReadError) as excinfo:
        await client.upload_document(tmp_path / "missing.json")
    assert excinfo.value.kind is ErrorKind.IO
    assert mock_api.requests == []


@pytest.mark.asyncio
@pytest.mark.parametrize("path", ["..", "/", ""])
async def test_upload_rejects_path_without_file_name(client, mock_api: MockAPI, path: str) -> None:
    with pytest.raises(FileReadError, match="Invalid file path"):
        await client.upload_document(path)
    assert mock_api.requests == []


@pytest.mark.asyncio
async def test_upload_network_failure_is_transport_error(make_client, policy_file: Path) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = make_client(handler)
    with pytest.raises(TransportError) as excinfo:
        await client.upload_document(policy_file)
    assert excinfo.value.kind is ErrorKind.TRANSPORT
    assert isinstance(excinfo.value.__cause__, httpx.ConnectError)


@pytest.mark.asyncio
async def test_upload_non_json_body_is_transport_error(make_client, policy_file: Path) -> None:
    client = make_client(lambda request: httpx.Response(502, text="<html>Bad gateway</html>"))
    with pytest.raises(TransportError, match="not JSON"):
        await client.upload_document(policy_file)


@pytest.mark.asyncio
async def test_upload_path_with_nul_byte_is_file_read_error(client, mock_api: MockAPI) -> None:
    with pytest.raises(FileReadError, match="null byte") as excinfo:
        await client.upload_document("bad\x00name.json")
    assert excinfo.value.kind is ErrorKind.IO
    assert mock_api.requests == []
