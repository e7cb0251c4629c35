"""Error taxonomy for llmgraph.

Every failure raised by the core carries a specific ``kind`` so callers can
branch on what went wrong without parsing messages:

1. StateError: missing keys, wrong value kinds, lock failures
2. GraphError: unknown edge endpoints, cycles, duplicate node ids
3. LLMError: transport failures, non-success statuses, unparseable bodies,
   prompt template mismatches
4. ToolError: lookup misses and duplicate tool names

Nothing in the core retries or swallows these. ``Graph.run`` re-raises the
first node error unchanged, filling in ``node_id`` when it is not yet set.
"""

from enum import Enum
from typing import Optional, List


class StateErrorKind(str, Enum):
    """Ways a state store access can fail."""
    NOT_FOUND = "not_found"
    TYPE_MISMATCH = "type_mismatch"
    LOCK_FAILURE = "lock_failure"


class GraphErrorKind(str, Enum):
    """Ways graph construction can fail."""
    UNKNOWN_NODE = "unknown_node"
    CYCLE_DETECTED = "cycle_detected"
    DUPLICATE_ID = "duplicate_id"


class LLMErrorKind(str, Enum):
    """Ways a language-model call can fail."""
    TRANSPORT_FAILURE = "transport_failure"
    NON_SUCCESS_STATUS = "non_success_status"
    PARSE_FAILURE = "parse_failure"
    TEMPLATE_MISMATCH = "template_mismatch"


class ToolErrorKind(str, Enum):
    """Ways tool registration or lookup can fail."""
    NOT_FOUND = "not_found"
    DUPLICATE_TOOL = "duplicate_tool"


class LLMGraphError(Exception):
    """Base class for every error raised by llmgraph.

    Attributes:
        kind: Specific error kind (an enum member of the subclass's kind type)
        node_id: Id of the graph node the error originated in, if known
    """

    def __init__(self, kind: Enum, message: str, node_id: Optional[str] = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.node_id = node_id

    def __str__(self) -> str:
        if self.node_id:
            return f"[{self.node_id}] {self.message}"
        return self.message


class StateError(LLMGraphError):
    """Raised by StateStore accessors."""

    def __init__(self, kind: StateErrorKind, message: str, key: Optional[str] = None):
        super().__init__(kind, message)
        self.key = key

    @classmethod
    def not_found(cls, key: str) -> "StateError":
        return cls(StateErrorKind.NOT_FOUND, f"State key not found: {key}", key=key)

    @classmethod
    def type_mismatch(cls, key: str, expected: str, actual: str) -> "StateError":
        return cls(
            StateErrorKind.TYPE_MISMATCH,
            f"State key '{key}' holds a {actual} value, not a {expected}",
            key=key
        )

    @classmethod
    def lock_failure(cls, reason: str) -> "StateError":
        return cls(StateErrorKind.LOCK_FAILURE, f"Could not acquire state lock: {reason}")


class GraphError(LLMGraphError):
    """Raised by GraphBuilder while registering nodes or building."""

    def __init__(self, kind: GraphErrorKind, message: str, nodes: Optional[List[str]] = None):
        super().__init__(kind, message)
        self.nodes = nodes or []

    @classmethod
    def unknown_node(cls, node_id: str, edge: tuple) -> "GraphError":
        return cls(
            GraphErrorKind.UNKNOWN_NODE,
            f"Edge {edge[0]} -> {edge[1]} references unknown node: {node_id}",
            nodes=[node_id]
        )

    @classmethod
    def cycle_detected(cls, remaining: List[str]) -> "GraphError":
        return cls(
            GraphErrorKind.CYCLE_DETECTED,
            f"Graph contains a cycle through nodes: {', '.join(remaining)}",
            nodes=list(remaining)
        )

    @classmethod
    def duplicate_id(cls, node_id: str) -> "GraphError":
        return cls(
            GraphErrorKind.DUPLICATE_ID,
            f"Node id already registered: {node_id}",
            nodes=[node_id]
        )


class LLMError(LLMGraphError):
    """Raised by LLMNode while templating, sending or parsing."""

    def __init__(
        self,
        kind: LLMErrorKind,
        message: str,
        code: Optional[int] = None,
        body: Optional[str] = None
    ):
        super().__init__(kind, message)
        self.code = code
        self.body = body

    @classmethod
    def transport_failure(cls, reason: str) -> "LLMError":
        return cls(LLMErrorKind.TRANSPORT_FAILURE, f"Transport failure: {reason}")

    @classmethod
    def non_success_status(cls, code: int, body: str) -> "LLMError":
        return cls(
            LLMErrorKind.NON_SUCCESS_STATUS,
            f"Endpoint returned HTTP {code}: {body}",
            code=code,
            body=body
        )

    @classmethod
    def parse_failure(cls, reason: str, body: Optional[str] = None) -> "LLMError":
        return cls(LLMErrorKind.PARSE_FAILURE, f"Could not parse response: {reason}", body=body)

    @classmethod
    def template_mismatch(cls, placeholders: int, variables: int) -> "LLMError":
        return cls(
            LLMErrorKind.TEMPLATE_MISMATCH,
            f"Prompt has {placeholders} placeholder(s) but {variables} variable(s) were given"
        )


class ToolError(LLMGraphError):
    """Raised by ToolRegistry on registration or lookup."""

    def __init__(self, kind: ToolErrorKind, message: str, name: Optional[str] = None):
        super().__init__(kind, message)
        self.name = name

    @classmethod
    def not_found(cls, name: str) -> "ToolError":
        return cls(ToolErrorKind.NOT_FOUND, f"Tool not found: {name}", name=name)

    @classmethod
    def duplicate_tool(cls, name: str) -> "ToolError":
        return cls(ToolErrorKind.DUPLICATE_TOOL, f"Tool already registered: {name}", name=name)
