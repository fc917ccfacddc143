"""
Shared fixtures for fetch_resource tests.
"""
import asyncio
import json
import random
from typing import Callable, List, Optional, Union

import pytest

from fetch_resource.config import ClientConfig
from fetch_resource.executor import AsyncExecutor
from fetch_resource.client import ResourceClient
from fetch_resource.types import RequestDescriptor, TransportResponse

Responder = Callable[[RequestDescriptor], Union[TransportResponse, BaseException]]

APPLICATION_JSON = {
    "sid": "AP123",
    "account_sid": "AC123",
    "friendly_name": "My App",
    "voice_url": "https://example.com/voice",
    "voice_method": "POST",
    "voice_caller_id_lookup": False,
}


def json_response(payload, status_code: int = 200, status_description: str = "OK") -> TransportResponse:
    """TransportResponse with a JSON body."""
    return TransportResponse(
        status_code=status_code,
        status_description=status_description,
        headers={"content-type": "application/json"},
        body=json.dumps(payload).encode("utf-8"),
        url="https://api.example.com/stub",
    )


class StubTransport:
    """In-memory transport returning canned responses after optional latency."""

    def __init__(
        self,
        responder: Optional[Responder] = None,
        min_latency: float = 0.0,
        max_latency: float = 0.0,
    ):
        self.sent: List[RequestDescriptor] = []
        self.closed = False
        self._responder = responder or (lambda descriptor: json_response(APPLICATION_JSON))
        self._min_latency = min_latency
        self._max_latency = max_latency

    async def send(self, descriptor: RequestDescriptor) -> TransportResponse:
        self.sent.append(descriptor)
        if self._max_latency:
            await asyncio.sleep(random.uniform(self._min_latency, self._max_latency))
        result = self._responder(descriptor)
        if isinstance(result, BaseException):
            raise result
        return result

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def client_config():
    """Config with an account sid filling {AccountSid}."""
    return ClientConfig(
        base_url="https://api.example.com/2010-04-01",
        account_sid="AC123",
        auth_token="secret-token",
    )


@pytest.fixture
def stub_transport():
    return StubTransport()


@pytest.fixture
def executor():
    """Executor owning its loop thread; closed after the test."""
    executor = AsyncExecutor()
    yield executor
    executor.close()


@pytest.fixture
def client(client_config, stub_transport):
    """ResourceClient wired to the stub transport."""
    client = ResourceClient(client_config, transport=stub_transport)
    yield client
    client.close()
