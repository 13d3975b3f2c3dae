from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import httpx
import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


class RecordingTransport:
    """Answers every request with a canned response and keeps the requests."""

    def __init__(
        self,
        status: int = 200,
        body: Any = None,
        *,
        content: bytes | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.status = status
        self.body = body
        self.content = content
        self.headers = headers or {}
        self.requests: list[httpx.Request] = []

    def respond(self, status: int = 200, body: Any = None, *, content: bytes | None = None) -> None:
        self.status = status
        self.body = body
        self.content = content

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.content is not None:
            return httpx.Response(self.status, content=self.content, headers=self.headers)
        return httpx.Response(
            self.status,
            content=json.dumps(self.body).encode("utf-8"),
            headers={"content-type": "application/json", **self.headers},
        )

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def last(self) -> httpx.Request:
        assert self.requests, "no request was sent"
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last.content)


@pytest.fixture
def recorder() -> RecordingTransport:
    return RecordingTransport(200, {"data": {"status": "ok", "version": "1.0.0", "uptime": 100}})


@pytest.fixture(autouse=True)
def reset_request_stats():
    from momo_sdk.instrumentation import request_stats

    request_stats.reset()
    yield
    request_stats.reset()
