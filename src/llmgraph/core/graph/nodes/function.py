"""
Function Node Implementation

Wraps one unit of custom logic as a graph node. The wrapped callable takes the
shared StateStore and may be synchronous or a coroutine function:

>>> def set_location(state):
...     state.set_string("location", "America")
>>>
>>> node = FunctionNode(func=set_location, name="set_location")

The node is a pure adapter: no retries and no state inspection beyond what the
wrapped logic does. Whatever the callable raises propagates unchanged.
"""

import asyncio
from typing import Any, Callable, Optional, TYPE_CHECKING

from pydantic import Field, model_validator

from llmgraph.core.logging import get_logger, LogComponent
from llmgraph.core.graph.nodes.base.node import Node

if TYPE_CHECKING:
    from llmgraph.core.graph.state import StateStore

logger = get_logger(LogComponent.NODES)


class FunctionNode(Node):
    """
    Node that executes a callable against the shared state.

    Attributes:
        func: Callable (sync or async) taking the StateStore
        name: Optional human-readable name used in logs
    """
    func: Callable[..., Any] = Field(
        ...,
        description="A callable (sync or async) that receives the shared state."
    )
    name: Optional[str] = Field(
        default=None,
        description="A human-readable name for the function."
    )

    @model_validator(mode='after')
    def validate_func(self) -> "FunctionNode":
        if not callable(self.func):
            raise ValueError("FunctionNode requires a callable 'func'.")
        return self

    @property
    def label(self) -> str:
        return self.name or getattr(self.func, "__name__", type(self.func).__name__)

    async def execute(self, state: "StateStore") -> None:
        logger.debug(f"Calling function {self.label}")
        if asyncio.iscoroutinefunction(self.func):
            await self.func(state)
            return

        result = self.func(state)
        if asyncio.iscoroutine(result):
            await result
