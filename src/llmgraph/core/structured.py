"""Structured (JSON-like) values.

Parsing, serialization and JSON-pointer lookups over the plain Python
structures produced by ``json``. Also helpers for reading chat-completion
responses stored by an LLMNode:

    content = message_content(state.get_llm_response())
    for call in extract_tool_calls(state.get_llm_response()):
        await registry.dispatch(call.name, state, call.arguments)
"""

import json
from typing import Any, Dict, List, Optional, Union
from pydantic import BaseModel, Field

TOOL_CALLS_PATH = "/choices/0/message/tool_calls"
CONTENT_PATH = "/choices/0/message/content"
FUNCTION_NAME_PATH = "/function/name"
FUNCTION_ARGUMENTS_PATH = "/function/arguments"


def parse(data: Union[bytes, str]) -> Any:
    """Parse JSON text into a structured value.

    Raises:
        ValueError: If the data is not valid UTF-8 JSON
    """
    if isinstance(data, bytes):
        data = data.decode("utf-8")
    return json.loads(data)


def dumps(value: Any) -> str:
    """Serialize a structured value to compact JSON text."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def _unescape(token: str) -> str:
    return token.replace("~1", "/").replace("~0", "~")


def pointer(value: Any, path: str) -> Optional[Any]:
    """Resolve a JSON pointer (RFC 6901) against a structured value.

    Args:
        value: Parsed JSON value
        path: Pointer such as ``/function/arguments``; ``""`` is the whole value

    Returns:
        The referenced value, or None when any segment does not resolve.
    """
    if path == "":
        return value
    if not path.startswith("/"):
        return None

    current = value
    for token in path[1:].split("/"):
        token = _unescape(token)
        if isinstance(current, dict):
            if token not in current:
                return None
            current = current[token]
        elif isinstance(current, list):
            if not (token.isascii() and token.isdigit()) or (len(token) > 1 and token.startswith("0")):
                return None
            index = int(token)
            if index >= len(current):
                return None
            current = current[index]
        else:
            return None
    return current


class ToolCall(BaseModel):
    """A function call requested by the language model."""
    id: Optional[str] = None
    name: str
    arguments: Dict[str, Any] = Field(default_factory=dict)


def _decode_arguments(raw: Any) -> Dict[str, Any]:
    # Chat-completion APIs send arguments as a JSON-encoded string
    if raw is None or raw == "":
        return {}
    if isinstance(raw, str):
        raw = parse(raw)
    if not isinstance(raw, dict):
        raise ValueError(f"Tool call arguments must be an object, got {type(raw).__name__}")
    return raw


def tool_call_from(call: Any) -> ToolCall:
    """Build a ToolCall from one entry of a response's ``tool_calls`` list.

    Raises:
        ValueError: If the entry has no function name or malformed arguments
    """
    name = pointer(call, FUNCTION_NAME_PATH)
    if not isinstance(name, str) or not name:
        raise ValueError(f"Tool call has no function name: {call}")
    return ToolCall(
        id=pointer(call, "/id"),
        name=name,
        arguments=_decode_arguments(pointer(call, FUNCTION_ARGUMENTS_PATH))
    )


def extract_tool_calls(response: Any) -> List[ToolCall]:
    """Return the tool calls in a chat-completion response, in order.

    An empty list means the model answered with plain content.
    """
    calls = pointer(response, TOOL_CALLS_PATH)
    if not calls:
        return []
    return [tool_call_from(call) for call in calls]


def message_content(response: Any) -> Optional[str]:
    """Return the assistant message content of a chat-completion response."""
    content = pointer(response, CONTENT_PATH)
    return content if isinstance(content, str) else None
