import json

import httpx
import pytest

from transparency.services.assistant import AssistantClient
from transparency.services.storage import InMemoryProductStore


class AssistantStub:
    """Scriptable assistant service served through httpx.MockTransport.

    ``responses`` maps a request path to ``(status_code, body)``. A body of
    ``str`` is sent raw, anything else as JSON. ``available = False``
    simulates a connection failure.
    """

    def __init__(self):
        self.available = True
        self.responses: dict[str, tuple[int, object]] = {}
        self.calls: list[tuple[str, dict]] = []

    def respond(self, path: str, body: object, status_code: int = 200) -> None:
        self.responses[path] = (status_code, body)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append((request.url.path, json.loads(request.content or b"{}")))
        if not self.available:
            raise httpx.ConnectError("assistant down", request=request)
        status_code, body = self.responses.get(request.url.path, (404, {"error": "no route"}))
        if isinstance(body, str):
            return httpx.Response(status_code, text=body)
        return httpx.Response(status_code, json=body)


@pytest.fixture
def assistant_stub():
    return AssistantStub()


@pytest.fixture
def assistant_client(assistant_stub):
    return AssistantClient(base_url="http://assistant.test", transport=httpx.MockTransport(assistant_stub.handler))


@pytest.fixture
def memory_store():
    return InMemoryProductStore()
