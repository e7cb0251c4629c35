"""Core modules for llmgraph."""

from llmgraph.core.config import LLMSettings
from llmgraph.core.errors import (
    LLMGraphError,
    StateError,
    StateErrorKind,
    GraphError,
    GraphErrorKind,
    LLMError,
    LLMErrorKind,
    ToolError,
    ToolErrorKind
)
from llmgraph.core.logging import configure_logging, LogLevel, LogComponent
from llmgraph.core.graph import (
    GraphBuilder,
    Graph,
    GraphStatus,
    Node,
    FunctionNode,
    LLMNode,
    StateStore,
    Value,
    ValueKind,
    NodeStatus
)
from llmgraph.core.tools import Tool, ToolRegistry

__all__ = [
    'LLMSettings',
    'LLMGraphError',
    'StateError',
    'StateErrorKind',
    'GraphError',
    'GraphErrorKind',
    'LLMError',
    'LLMErrorKind',
    'ToolError',
    'ToolErrorKind',
    'configure_logging',
    'LogLevel',
    'LogComponent',
    'GraphBuilder',
    'Graph',
    'GraphStatus',
    'Node',
    'FunctionNode',
    'LLMNode',
    'StateStore',
    'Value',
    'ValueKind',
    'NodeStatus',
    'Tool',
    'ToolRegistry'
]
