"""Tools module for llmgraph."""

from llmgraph.core.tools.registry import Tool, ToolRegistry, function_schema

__all__ = [
    'Tool',
    'ToolRegistry',
    'function_schema'
]
