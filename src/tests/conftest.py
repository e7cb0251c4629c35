"""Shared test fixtures.

Provides an in-memory transport standing in for the network, and factories
for chat-completion response bodies.
"""

import json
import pytest
from typing import Any, Dict, List, Optional, Union

from llmgraph.core.transport import HTTPRequest, HTTPResponse
from llmgraph.core.graph.state import StateStore


class FakeTransport:
    """Transport that replays canned responses and records requests."""

    def __init__(self):
        self.requests: List[HTTPRequest] = []
        self._replies: List[Union[HTTPResponse, Exception]] = []

    def reply(self, body: Any, status: int = 200) -> "FakeTransport":
        """Queue a response; dicts and lists are JSON-encoded."""
        if not isinstance(body, (bytes, str)):
            body = json.dumps(body)
        if isinstance(body, str):
            body = body.encode("utf-8")
        self._replies.append(HTTPResponse(status=status, body=body))
        return self

    def fail(self, error: Exception) -> "FakeTransport":
        """Queue an exception to raise instead of responding."""
        self._replies.append(error)
        return self

    async def send(self, request: HTTPRequest) -> HTTPResponse:
        self.requests.append(request)
        if not self._replies:
            raise AssertionError(f"Unexpected request to {request.url}")
        reply = self._replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply

    def last_payload(self) -> Dict[str, Any]:
        return json.loads(self.requests[-1].body)


@pytest.fixture
def fake_transport() -> FakeTransport:
    """Fixture providing an empty fake transport."""
    return FakeTransport()


@pytest.fixture
def state() -> StateStore:
    """Fixture providing a fresh state store."""
    return StateStore()


@pytest.fixture
def chat_response():
    """Factory for a plain-content chat-completion response body."""
    def build(content: str, model: str = "gpt-4o-mini") -> Dict[str, Any]:
        return {
            "id": "chatcmpl-test",
            "object": "chat.completion",
            "model": model,
            "choices": [
                {
                    "index": 0,
                    "message": {"role": "assistant", "content": content},
                    "finish_reason": "stop"
                }
            ]
        }
    return build


@pytest.fixture
def tool_call_response():
    """Factory for a chat-completion response requesting one function call."""
    def build(name: str, arguments: Dict[str, Any], call_id: Optional[str] = "call_1") -> Dict[str, Any]:
        return {
            "id": "chatcmpl-test",
            "object": "chat.completion",
            "choices": [
                {
                    "index": 0,
                    "message": {
                        "role": "assistant",
                        "content": None,
                        "tool_calls": [
                            {
                                "id": call_id,
                                "type": "function",
                                "function": {
                                    "name": name,
                                    "arguments": json.dumps(arguments)
                                }
                            }
                        ]
                    },
                    "finish_reason": "tool_calls"
                }
            ]
        }
    return build
