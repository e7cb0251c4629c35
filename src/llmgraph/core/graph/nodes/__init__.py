"""Node package initialization.

Exposes node types for building workflows.
"""

from llmgraph.core.graph.nodes.base.node import Node
from llmgraph.core.graph.nodes.function import FunctionNode
from llmgraph.core.graph.nodes.llm import LLMNode

__all__ = [
    "Node",
    "FunctionNode",
    "LLMNode",
]
