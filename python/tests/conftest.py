"""Pytest fixtures for client pipeline tests."""

from typing import Callable

import httpx
import pytest

from shuftipro import ShuftiProClient, ShuftiProCredentials


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it receives."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: list[httpx.Request] = []

        def record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(record)


@pytest.fixture
def credentials():
    return ShuftiProCredentials(client_id="abc", secret_key="xyz")


@pytest.fixture
def make_client(credentials):
    """Build a client whose HTTP traffic goes to *handler*."""

    def factory(handler, *, client_credentials=credentials, **kwargs):
        transport = RecordingTransport(handler)
        http_client = httpx.AsyncClient(transport=transport)
        client = ShuftiProClient(client_credentials, http_client=http_client, **kwargs)
        return client, transport

    return factory
