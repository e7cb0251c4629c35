"""Base node class for the graph system.

This module defines the Node abstraction for the Graph framework. A Node represents
an individual unit of work (custom logic, an LLM call, a tool invocation) that is
executed once per run against the run's shared StateStore. Nodes are validated via
Pydantic and execute asynchronously.

Typical Usage:
    - Create a subclass of Node, or wrap a callable in a FunctionNode
    - Override the 'execute' method to implement custom logic
    - Register the node on a GraphBuilder under a unique id
"""

from typing import Any, Dict, TYPE_CHECKING

from pydantic import BaseModel, Field

from llmgraph.core.logging import get_logger, LogComponent

if TYPE_CHECKING:
    from llmgraph.core.graph.state import StateStore

logger = get_logger(LogComponent.NODES)


class Node(BaseModel):
    """
    Abstract base node for graph operations.

    A node's only contract is ``execute``: run once against the shared state,
    to completion or to error. Failures are raised, never returned; the graph
    stops at the first one. Side effects are limited to state reads and writes
    plus whatever external effects the node's own logic performs.

    Attributes:
        metadata: Optional node metadata
    """
    metadata: Dict[str, Any] = Field(default_factory=dict)

    model_config = {"arbitrary_types_allowed": True}

    async def execute(self, state: "StateStore") -> None:
        """Run node logic. Must be implemented by subclasses."""
        raise NotImplementedError("Subclasses must implement execute()")

    def set_metadata(self, key: str, value: Any) -> None:
        """Set metadata value."""
        self.metadata[key] = value

    def get_metadata(self, key: str, default: Any = None) -> Any:
        """Get metadata value."""
        return self.metadata.get(key, default)
