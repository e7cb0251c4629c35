"""
Capital Chain Example

This example demonstrates:
1. A linear function → LLM → function workflow
2. Reading endpoint settings from the environment
3. Reading the stored response in a downstream node

The workflow:
- Writes a location into state
- Asks the model for its capital
- Prints the answer

Set LLMGRAPH_API_KEY (or OPENAI_API_KEY) in the environment or a .env file.
"""

import asyncio
from dotenv import load_dotenv

from llmgraph.core.config import LLMSettings
from llmgraph.core.logging import (
    configure_logging,
    LogLevel,
    LogComponent,
    Colors,
    get_logger
)
from llmgraph.core.graph import GraphBuilder, FunctionNode, LLMNode, StateStore
from llmgraph.core.structured import message_content


def set_location(state: StateStore) -> None:
    state.set_string("location", "America")


def show_answer(state: StateStore) -> None:
    answer = message_content(state.get_llm_response())
    print(f"\n{Colors.SUCCESS}Answer:{Colors.RESET} {answer}")


async def main():
    """Run the capital chain."""
    load_dotenv()  # Load LLMGRAPH_* settings from .env if present
    configure_logging(default_level=LogLevel.INFO)
    logger = get_logger(LogComponent.WORKFLOW)
    logger.info("Starting workflow...")

    builder = GraphBuilder()
    builder.add_node("set_location", FunctionNode(func=set_location))
    builder.add_node("ask", LLMNode.from_settings(
        LLMSettings(),
        prompt="What's the capital of {}? Answer with the city name only.",
        variables=["location"]
    ))
    builder.add_node("show", FunctionNode(func=show_answer))
    builder.chain("set_location", "ask", "show")

    try:
        graph = builder.build()
        await graph.run()
    except Exception as e:
        logger.error(f"Workflow failed: {str(e)}")
        raise

if __name__ == "__main__":
    asyncio.run(main())
