"""Pytest configuration and fixtures."""

from __future__ import annotations

import pytest

from roboot.assertions import AssertionEngine
from roboot.transport import BaseTransport, HTTPError, HTTPRequest, HTTPResponse


class FakeTransport(BaseTransport):
    """Replays canned responses and records every request it was sent."""

    def __init__(self, responses=None):
        self.responses = list(responses or [])
        self.requests: list[HTTPRequest] = []
        self._connected = False
        self.connects = 0
        self.disconnects = 0

    @property
    def is_connected(self) -> bool:
        return self._connected

    async def connect(self) -> None:
        self._connected = True
        self.connects += 1

    async def disconnect(self) -> None:
        self._connected = False
        self.disconnects += 1

    async def send(self, request: HTTPRequest) -> HTTPResponse:
        self.requests.append(request)
        if not self.responses:
            return HTTPResponse(status=200, body={})
        response = self.responses.pop(0)
        if isinstance(response, HTTPError):
            return HTTPResponse.from_error(response)
        if isinstance(response, HTTPResponse):
            return response
        return HTTPResponse(status=200, body=response)


@pytest.fixture
def engine():
    return AssertionEngine()


@pytest.fixture
def fake_transport():
    return FakeTransport
