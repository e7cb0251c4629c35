"""End-to-end workflows over a mocked endpoint.

Each test wires FunctionNodes and LLMNodes into a graph, swaps the network for
the in-memory transport and checks what a full run leaves in state.
"""

import asyncio
from typing import Any, List

import pytest
from pydantic import BaseModel, Field

from llmgraph.core.errors import LLMError, LLMErrorKind
from llmgraph.core.graph.base import GraphBuilder, GraphStatus
from llmgraph.core.graph.nodes.function import FunctionNode
from llmgraph.core.graph.nodes.llm import LLMNode
from llmgraph.core.graph.state import StateStore, NodeStatus
from llmgraph.core.structured import (
    FUNCTION_ARGUMENTS_PATH,
    FUNCTION_NAME_PATH,
    TOOL_CALLS_PATH,
    extract_tool_calls,
    message_content,
    parse,
    pointer
)
from llmgraph.core.tools.registry import Tool, ToolRegistry

ENDPOINT = "https://llm.example.test/v1/chat/completions"


class WeatherArgs(BaseModel):
    location: str = Field(..., description="City to report on")


def fetch_weather(state: StateStore) -> None:
    location = state.get_string("location")
    state.set_string("tool_response", f"The Weather today in {location} is sunny, 34*C")


@pytest.fixture
def weather_registry() -> ToolRegistry:
    registry = ToolRegistry()
    registry.register(Tool.from_model(
        name="fetch_weather",
        description="Current weather for a city",
        params=WeatherArgs,
        node=FunctionNode(func=fetch_weather)
    ))
    return registry


def capital_graph(transport, observed: List[Any]) -> GraphBuilder:
    def set_location(state: StateStore):
        state.set_string("location", "America")

    def read_answer(state: StateStore):
        observed.append(message_content(state.get_llm_response()))

    builder = GraphBuilder()
    builder.add_node("A", FunctionNode(func=set_location))
    builder.add_node("B", LLMNode(
        endpoint=ENDPOINT,
        api_key="sk-test",
        model="gpt-4o-mini",
        prompt="What's the capital of {}?",
        variables=["location"],
        transport=transport
    ))
    builder.add_node("C", FunctionNode(func=read_answer))
    builder.chain("A", "B", "C")
    return builder


class TestLinearChain:
    """Function → LLM → function."""

    @pytest.mark.asyncio
    async def test_chain_completes(self, fake_transport, chat_response):
        fake_transport.reply(chat_response("Washington, D.C."))
        observed: List[Any] = []
        graph = capital_graph(fake_transport, observed).build()

        state = await graph.run()

        assert graph.status == GraphStatus.COMPLETED
        assert observed == ["Washington, D.C."]
        assert fake_transport.last_payload()["messages"][0]["content"] == "What's the capital of America?"
        assert state.statuses == {
            "A": NodeStatus.COMPLETED,
            "B": NodeStatus.COMPLETED,
            "C": NodeStatus.COMPLETED
        }


class TestToolDispatch:
    """LLM requests a function call; a downstream node performs it."""

    def _graph(self, transport, registry: ToolRegistry, dispatch) -> GraphBuilder:
        def set_city(state: StateStore):
            state.set_string("city", "Paris")

        builder = GraphBuilder()
        builder.add_node("set_city", FunctionNode(func=set_city))
        builder.add_node("ask", LLMNode(
            endpoint=ENDPOINT,
            api_key="sk-test",
            model="gpt-4o-mini",
            prompt="What's the weather in {}?",
            variables=["city"],
            tools=registry.get_tool_list(),
            transport=transport
        ))
        builder.add_node("dispatch", FunctionNode(func=dispatch))
        builder.chain("set_city", "ask", "dispatch")
        return builder

    @pytest.mark.asyncio
    async def test_dispatch_by_path(self, fake_transport, tool_call_response, weather_registry):
        fake_transport.reply(tool_call_response("fetch_weather", {"location": "Paris"}))

        async def dispatch(state: StateStore):
            call = pointer(state.get_llm_response(), TOOL_CALLS_PATH + "/0")
            name = pointer(call, FUNCTION_NAME_PATH)
            arguments = parse(pointer(call, FUNCTION_ARGUMENTS_PATH))
            tool = weather_registry.get_tool(name)
            await tool.invoke(state, {"location": arguments["location"]})

        graph = self._graph(fake_transport, weather_registry, dispatch).build()
        state = await graph.run()

        assert state.get_string("tool_response") == "The Weather today in Paris is sunny, 34*C"
        assert fake_transport.last_payload()["tools"][0]["function"]["name"] == "fetch_weather"

    @pytest.mark.asyncio
    async def test_dispatch_with_helpers(self, fake_transport, tool_call_response, weather_registry):
        fake_transport.reply(tool_call_response("fetch_weather", {"location": "Paris"}))

        async def dispatch(state: StateStore):
            for call in extract_tool_calls(state.get_llm_response()):
                await weather_registry.dispatch(call.name, state, call.arguments)

        graph = self._graph(fake_transport, weather_registry, dispatch).build()
        state = await graph.run()

        assert state.get_string("tool_response") == "The Weather today in Paris is sunny, 34*C"
        assert graph.status == GraphStatus.COMPLETED


class TestEndpointFailure:
    """A non-2xx reply stops the run at the LLM node."""

    @pytest.mark.asyncio
    async def test_http_500(self, fake_transport):
        fake_transport.reply('{"error": {"message": "server error"}}', status=500)
        observed: List[Any] = []
        graph = capital_graph(fake_transport, observed).build()
        state = StateStore()

        with pytest.raises(LLMError) as exc_info:
            await graph.run(state)

        assert exc_info.value.kind == LLMErrorKind.NON_SUCCESS_STATUS
        assert exc_info.value.code == 500
        assert exc_info.value.node_id == "B"
        assert observed == []
        assert graph.status == GraphStatus.FAILED
        assert graph.failed_node == "B"
        assert state.status_of("A") == NodeStatus.COMPLETED
        assert state.status_of("B") == NodeStatus.ERROR
        assert state.status_of("C") is None


class TestConcurrentRuns:
    """Runs on distinct stores do not see each other's keys."""

    @pytest.mark.asyncio
    async def test_isolated_stores(self):
        def writer(key: str):
            async def write(state: StateStore):
                state.set_string(key, key)
                await asyncio.sleep(0.01)
                state.set_json("seen", sorted(state.keys()))
            return write

        builder = GraphBuilder()
        builder.add_node("w", FunctionNode(func=writer("w")))
        graph = builder.build()

        first = StateStore()
        first.set_string("run", "first")
        second = StateStore()
        second.set_string("other", "second")

        await asyncio.gather(graph.run(first), graph.run(second))

        assert first.get_json("seen") == ["run", "w"]
        assert second.get_json("seen") == ["other", "w"]
        assert not first.has("other")
        assert not second.has("run")
