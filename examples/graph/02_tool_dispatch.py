"""
Tool Dispatch Example

This example demonstrates:
1. Registering a FunctionNode as a tool with a pydantic parameter model
2. Advertising the registry's schemas from an LLMNode
3. Dispatching the requested call in a downstream node
4. Rendering the finished run as a Mermaid flowchart

Set LLMGRAPH_API_KEY (or OPENAI_API_KEY) in the environment or a .env file.
"""

import asyncio
from dotenv import load_dotenv
from pydantic import BaseModel, Field

from llmgraph.core.config import LLMSettings
from llmgraph.core.logging import (
    configure_logging,
    LogLevel,
    LogComponent,
    Colors,
    get_logger
)
from llmgraph.core.graph import GraphBuilder, FunctionNode, LLMNode, StateStore
from llmgraph.core.graph.viz import GraphVisualizer
from llmgraph.core.structured import extract_tool_calls, message_content
from llmgraph.core.tools import Tool, ToolRegistry

logger = get_logger(LogComponent.WORKFLOW)


class WeatherArgs(BaseModel):
    """Arguments for the weather tool."""
    location: str = Field(..., description="City to report on")


def fetch_weather(state: StateStore) -> None:
    location = state.get_string("location")
    state.set_string("tool_response", f"The Weather today in {location} is sunny, 34*C")


def build_registry() -> ToolRegistry:
    registry = ToolRegistry()
    registry.register(Tool.from_model(
        name="fetch_weather",
        description="Current weather for a city",
        params=WeatherArgs,
        node=FunctionNode(func=fetch_weather, name="fetch_weather")
    ))
    return registry


async def main():
    """Run the tool dispatch workflow."""
    load_dotenv()  # Load LLMGRAPH_* settings from .env if present
    configure_logging(default_level=LogLevel.INFO)
    registry = build_registry()

    def set_city(state: StateStore) -> None:
        state.set_string("city", "Paris")

    async def dispatch(state: StateStore) -> None:
        response = state.get_llm_response()
        calls = extract_tool_calls(response)
        if not calls:
            state.set_string("tool_response", message_content(response) or "")
            return
        for call in calls:
            await registry.dispatch(call.name, state, call.arguments)

    def show(state: StateStore) -> None:
        print(f"\n{Colors.SUCCESS}Result:{Colors.RESET} {state.get_string('tool_response')}")

    builder = GraphBuilder()
    builder.add_node("set_city", FunctionNode(func=set_city))
    builder.add_node("ask", LLMNode.from_settings(
        LLMSettings(),
        prompt="What's the weather like in {} today?",
        variables=["city"],
        tools=registry.get_tool_list()
    ))
    builder.add_node("dispatch", FunctionNode(func=dispatch))
    builder.add_node("show", FunctionNode(func=show))
    builder.chain("set_city", "ask", "dispatch", "show")
    graph = builder.build()

    state = StateStore()
    try:
        await graph.run(state)
    except Exception as e:
        logger.error(f"Workflow failed: {str(e)}")
        raise
    finally:
        print(f"\n{Colors.INFO}Execution:{Colors.RESET}")
        print(GraphVisualizer(graph).render_execution(state))

if __name__ == "__main__":
    asyncio.run(main())
