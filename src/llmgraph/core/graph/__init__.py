"""Graph package initialization.

Exposes core graph components for building workflows.
"""

from llmgraph.core.graph.base import GraphBuilder, Graph, GraphStatus
from llmgraph.core.graph.state import StateStore, Value, ValueKind, NodeStatus
from llmgraph.core.graph.nodes import Node, FunctionNode, LLMNode

__all__ = [
    # Builder and executor
    "GraphBuilder",
    "Graph",
    "GraphStatus",

    # State
    "StateStore",
    "Value",
    "ValueKind",
    "NodeStatus",

    # Nodes
    "Node",
    "FunctionNode",
    "LLMNode",
]
