"""llmgraph - DAG orchestration of custom logic and language-model calls."""

from llmgraph.core import (
    GraphBuilder,
    Graph,
    GraphStatus,
    Node,
    FunctionNode,
    LLMNode,
    StateStore,
    Value,
    ValueKind,
    Tool,
    ToolRegistry,
    LLMSettings,
    configure_logging,
    LogLevel,
    LogComponent
)

__all__ = [
    'GraphBuilder',
    'Graph',
    'GraphStatus',
    'Node',
    'FunctionNode',
    'LLMNode',
    'StateStore',
    'Value',
    'ValueKind',
    'Tool',
    'ToolRegistry',
    'LLMSettings',
    'configure_logging',
    'LogLevel',
    'LogComponent'
]
