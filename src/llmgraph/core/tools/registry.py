"""Tools callable by the language model.

A Tool names a FunctionNode and describes its parameters with a schema the
endpoint understands. The registry collects tools for two consumers:

1. LLMNode configuration: ``get_tool_list()`` gives the schema descriptors,
   in registration order, to advertise in requests
2. A downstream dispatch node: ``get_tool(name)`` / ``dispatch(...)`` look up
   and run the tool a response asked for

Example:
    ```python
    class WeatherArgs(BaseModel):
        location: str = Field(..., description="City to report on")

    registry = ToolRegistry()
    registry.register(Tool.from_model(
        name="fetch_weather",
        description="Current weather for a city",
        params=WeatherArgs,
        node=FunctionNode(func=fetch_weather)
    ))
    ```
"""

import copy
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Type, TYPE_CHECKING

from pydantic import BaseModel, Field, PrivateAttr, field_validator, model_validator

from llmgraph.core.errors import ToolError
from llmgraph.core.logging import get_logger, LogComponent, GraphLoggingConfig, log_verbose
from llmgraph.core.graph.nodes.function import FunctionNode

if TYPE_CHECKING:
    from llmgraph.core.graph.state import StateStore

logger = get_logger(LogComponent.TOOLS)


def function_schema(name: str, description: str, parameters: Dict[str, Any]) -> Dict[str, Any]:
    """Chat-completion style function descriptor."""
    return {
        "type": "function",
        "function": {
            "name": name,
            "description": description,
            "parameters": parameters
        }
    }


class Tool(BaseModel):
    """A named FunctionNode the language model may ask to have invoked.

    Attributes:
        name: Unique tool name, matched against the model's function calls
        node: The FunctionNode run on dispatch
        schema_: Descriptor advertised to the endpoint
    """
    name: str = Field(..., min_length=1)
    node: FunctionNode
    schema_: Dict[str, Any] = Field(..., alias="schema")

    model_config = {"frozen": True, "populate_by_name": True}

    @field_validator("schema_")
    @classmethod
    def copy_schema(cls, value: Dict[str, Any]) -> Dict[str, Any]:
        return copy.deepcopy(value)

    @model_validator(mode='after')
    def validate_schema_name(self) -> "Tool":
        declared = self.schema_.get("function", {}).get("name")
        if declared is not None and declared != self.name:
            raise ValueError(f"Tool '{self.name}' schema declares function '{declared}'")
        return self

    def descriptor(self) -> Dict[str, Any]:
        """Copy of the schema advertised to the endpoint."""
        return copy.deepcopy(self.schema_)

    @classmethod
    def from_model(
        cls,
        name: str,
        description: str,
        params: Type[BaseModel],
        node: FunctionNode
    ) -> "Tool":
        """Build a tool whose parameters are described by a pydantic model."""
        return cls(
            name=name,
            node=node,
            schema=function_schema(name, description, params.model_json_schema())
        )

    async def invoke(self, state: "StateStore", arguments: Optional[Dict[str, Any]] = None) -> None:
        """Write arguments into state, then execute the wrapped node."""
        for key, value in (arguments or {}).items():
            state.set_value(key, value)
        logger.debug(f"Invoking tool node for '{self.name}'")
        await self.node.execute(state)


class ToolRegistry(BaseModel):
    """Tools by name, remembering registration order."""

    logging_config: GraphLoggingConfig = Field(default_factory=GraphLoggingConfig)
    _tools: Dict[str, Tool] = PrivateAttr(default_factory=dict)

    def register(self, tool: Tool) -> None:
        """Add a tool.

        Raises:
            ToolError: DUPLICATE_TOOL if the name is already registered
        """
        if tool.name in self._tools:
            raise ToolError.duplicate_tool(tool.name)
        self._tools[tool.name] = tool
        logger.info(f"Registered tool: {tool.name}")

    def get_tool_list(self) -> List[Dict[str, Any]]:
        """Schema descriptors in registration order."""
        return [tool.descriptor() for tool in self._tools.values()]

    def get_tools(self) -> Mapping[str, Tool]:
        """Read-only name → Tool mapping."""
        return MappingProxyType(self._tools)

    def get_tool(self, name: str) -> Tool:
        """Look up a tool by name.

        Raises:
            ToolError: NOT_FOUND if no tool has that name
        """
        try:
            return self._tools[name]
        except KeyError:
            raise ToolError.not_found(name) from None

    async def dispatch(
        self,
        name: str,
        state: "StateStore",
        arguments: Optional[Dict[str, Any]] = None
    ) -> None:
        """Look up a tool and invoke it against the state."""
        tool = self.get_tool(name)
        message = f"Calling tool '{name}' with args {arguments or {}}"
        if self.logging_config.show_tool_calls:
            logger.tool(message)
        else:
            log_verbose(logger, message)
        await tool.invoke(state, arguments)

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)
