from __future__ import annotations

from pathlib import Path
from typing import Callable

import httpx
import pytest
import pytest_asyncio

from docassist.client import AssistantClient
from docassist.mock import MockAPI, build_mock_transport
from tests.helpers import API_KEY, BASE_URL


@pytest.fixture
def mock_api() -> MockAPI:
    return MockAPI(prefix="/v1")


@pytest_asyncio.fixture
async def client(mock_api: MockAPI):
    async with AssistantClient(API_KEY, base_url=BASE_URL, transport=build_mock_transport(mock_api)) as instance:
        yield instance


@pytest_asyncio.fixture
async def make_client():
    created: list[AssistantClient] = []

    def factory(handler: Callable[[httpx.Request], httpx.Response]) -> AssistantClient:
        instance = AssistantClient(API_KEY, base_url=BASE_URL, transport=httpx.MockTransport(handler))
        created.append(instance)
        return instance

    yield factory
    for instance in created:
        await instance.aclose()


@pytest.fixture
def policy_file(tmp_path: Path) -> Path:
    path = tmp_path / "bank_policies.json"
    path.write_text('{"credit_cards": "Limits are reviewed yearly."}', encoding="utf-8")
    return path
