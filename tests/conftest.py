import json
from typing import Any, List, Optional

import httpx
import pytest
from fastapi.testclient import TestClient

from app.main import create_app
from bot.groq_client import GroqClient
from config.settings import Settings


TEST_CONTEXT = "Saturnalia 2025 runs from 14 to 16 November. Mirage is the flagship AR hunt."


def completion_body(*answers: str) -> bytes:
    return json.dumps(
        {
            "id": "chatcmpl-test",
            "object": "chat.completion",
            "choices": [
                {"index": i, "message": {"role": "assistant", "content": a}, "finish_reason": "stop"}
                for i, a in enumerate(answers)
            ],
        }
    ).encode("utf-8")


class FakeGroq:
    """Records every upstream request and replays a canned response."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.status_code = 200
        self.body: bytes = completion_body("Mirage is an AR treasure hunt.")
        self.error: Optional[Exception] = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, content=self.body)

    @property
    def calls(self) -> int:
        return len(self.requests)

    def last_payload(self) -> Any:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def upstream() -> FakeGroq:
    return FakeGroq()


@pytest.fixture
def groq_client(upstream) -> GroqClient:
    return GroqClient(http_client=httpx.AsyncClient(transport=httpx.MockTransport(upstream)))


@pytest.fixture
def settings() -> Settings:
    return Settings(groq_api_key="gsk_test_key")


@pytest.fixture
def client(settings, groq_client) -> TestClient:
    app = create_app(settings=settings, context=TEST_CONTEXT, groq_client=groq_client)
    with TestClient(app) as test_client:
        yield test_client
