"""Pytest 配置文件"""

import httpx
import pytest

from libs.easy_http import Client


class RecordingTransport:
    """Transport double: records outgoing requests and replays a canned response."""

    def __init__(self, status_code: int = 200, content: bytes = b"", headers=None, error=None):
        self.status_code = status_code
        self.content = content
        self.headers = headers or {}
        self.error = error
        self.requests: list[httpx.Request] = []
        self.closed = False

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    async def do(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(
            self.status_code,
            headers=self.headers,
            content=self.content,
            request=request,
        )

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def client(transport):
    return Client(transport=transport)
