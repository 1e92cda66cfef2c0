from __future__ import annotations

from typing import Any, Callable

import httpx

API_KEY = "test-key"
BASE_URL = "https://api.test/v1"


def json_handler(payload: Any, status_code: int = 200) -> Callable[[httpx.Request], httpx.Response]:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json=payload)

    return handler
