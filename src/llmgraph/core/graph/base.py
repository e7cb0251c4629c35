"""Graph Base Classes

This module defines the builder and executor for node workflows.
The graph provides a lightweight way to:
1. Register nodes (custom functions, LLM calls) under unique ids
2. Declare "must run before" dependencies between them
3. Validate acyclicity and fix a deterministic execution order
4. Run every node once, sequentially, against one shared StateStore

Example:
    ```python
    builder = GraphBuilder()
    builder.add_node("set_location", FunctionNode(func=set_location))
    builder.add_node("ask", LLMNode(endpoint=url, api_key=key, model="gpt-4o-mini",
                                    prompt="What's the capital of {}?",
                                    variables=["location"]))
    builder.add_node("show", FunctionNode(func=show_answer))
    builder.chain("set_location", "ask", "show")

    graph = builder.build()
    state = await graph.run()
    ```

Independent branches are not run concurrently, and a run cannot be cancelled
once started. A timeout, if needed, belongs to the LLM node's transport.
"""

import heapq
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, Field, PrivateAttr

from llmgraph.core.errors import GraphError, LLMGraphError
from llmgraph.core.logging import (
    LogComponent,
    GraphLoggingConfig,
    get_logger,
    log_verbose
)
from llmgraph.core.graph.state import StateStore, NodeStatus, GraphStatus
from llmgraph.core.graph.nodes.base.node import Node

logger = get_logger(LogComponent.GRAPH)

Edge = Tuple[str, str]


class GraphBuilder(BaseModel):
    """Accumulates nodes and edges until ``build()``.

    Edges may name nodes that are registered later; endpoints are only
    resolved when the graph is built.

    Attributes:
        logging_config: Passed on to the built graph
    """
    logging_config: GraphLoggingConfig = Field(default_factory=GraphLoggingConfig)

    _nodes: Dict[str, Node] = PrivateAttr(default_factory=dict)
    _edges: List[Edge] = PrivateAttr(default_factory=list)

    def add_node(self, node_id: str, node: Node) -> None:
        """Register a node under a unique id.

        Raises:
            ValueError: If the id is empty or node is not a Node
            GraphError: DUPLICATE_ID if the id is already registered
        """
        if not node_id:
            raise ValueError("Node id must be a non-empty string")
        if not isinstance(node, Node):
            raise ValueError(f"Node {node_id} must be a Node instance, got {type(node).__name__}")
        if node_id in self._nodes:
            raise GraphError.duplicate_id(node_id)

        self._nodes[node_id] = node
        logger.debug(f"Added node: {node_id} of type {type(node).__name__}")

    def add_edge(self, edge: Edge) -> None:
        """Record that ``edge[0]`` must complete before ``edge[1]`` starts."""
        from_id, to_id = edge
        if (from_id, to_id) not in self._edges:
            self._edges.append((from_id, to_id))
        logger.debug(f"Added edge: {from_id} --> {to_id}")

    def chain(self, *node_ids: str) -> None:
        """Add edges between each consecutive pair of ids."""
        for from_id, to_id in zip(node_ids, node_ids[1:]):
            self.add_edge((from_id, to_id))

    def _topological_order(self) -> List[str]:
        index = {node_id: i for i, node_id in enumerate(self._nodes)}
        in_degree = {node_id: 0 for node_id in self._nodes}
        successors: Dict[str, List[str]] = {node_id: [] for node_id in self._nodes}

        for from_id, to_id in self._edges:
            successors[from_id].append(to_id)
            in_degree[to_id] += 1

        # Ready queue keyed by registration index
        ready = [index[node_id] for node_id, degree in in_degree.items() if degree == 0]
        heapq.heapify(ready)
        ids = list(self._nodes)
        order: List[str] = []

        while ready:
            node_id = ids[heapq.heappop(ready)]
            order.append(node_id)
            for next_id in successors[node_id]:
                in_degree[next_id] -= 1
                if in_degree[next_id] == 0:
                    heapq.heappush(ready, index[next_id])

        if len(order) != len(self._nodes):
            done = set(order)
            remaining = [node_id for node_id in ids if node_id not in done]
            raise GraphError.cycle_detected(remaining)

        return order

    def build(self) -> "Graph":
        """Validate the topology and fix the execution order.

        Raises:
            GraphError: UNKNOWN_NODE for an edge endpoint that was never
                registered, CYCLE_DETECTED if the edges form a cycle
        """
        for edge in self._edges:
            for endpoint in edge:
                if endpoint not in self._nodes:
                    raise GraphError.unknown_node(endpoint, edge)

        order = self._topological_order()
        logger.info(f"Built graph with {len(order)} node(s): {' -> '.join(order)}")

        return Graph(
            nodes=dict(self._nodes),
            edges=list(self._edges),
            order=order,
            logging_config=self.logging_config
        )


class Graph:
    """A validated, immutable workflow topology.

    Built by ``GraphBuilder.build()``; may be run any number of times, each
    time against a fresh StateStore.

    Each run records its own status and failing node on the StateStore it
    owns. ``status`` and ``failed_node`` read them from the store of the most
    recently started run, so the pair always describes the same run.
    """

    def __init__(
        self,
        nodes: Dict[str, Node],
        edges: List[Edge],
        order: List[str],
        logging_config: Optional[GraphLoggingConfig] = None
    ):
        self._nodes = nodes
        self._edges = tuple(edges)
        self._order = tuple(order)
        self.logging_config = logging_config or GraphLoggingConfig()
        self._last_run: Optional[StateStore] = None

    @property
    def status(self) -> GraphStatus:
        if self._last_run is None:
            return GraphStatus.BUILT
        return self._last_run.run_status

    @property
    def failed_node(self) -> Optional[str]:
        if self._last_run is None:
            return None
        return self._last_run.failed_node

    @property
    def nodes(self) -> Mapping[str, Node]:
        return MappingProxyType(self._nodes)

    @property
    def edges(self) -> Tuple[Edge, ...]:
        return self._edges

    @property
    def order(self) -> Tuple[str, ...]:
        return self._order

    def predecessors(self, node_id: str) -> List[str]:
        self._require(node_id)
        return [from_id for from_id, to_id in self._edges if to_id == node_id]

    def successors(self, node_id: str) -> List[str]:
        self._require(node_id)
        return [to_id for from_id, to_id in self._edges if from_id == node_id]

    def _require(self, node_id: str) -> None:
        if node_id not in self._nodes:
            raise KeyError(f"Node not found: {node_id}")

    async def run(self, state: Optional[StateStore] = None) -> StateStore:
        """Execute every node once, in build order, against one state.

        Args:
            state: Store shared by the nodes of this run (fresh if omitted)

        Returns:
            The state after every node completed

        Raises:
            Exception: The first node error, unchanged. Nodes after it do not
                run, and writes from nodes that completed stay in the state.
        """
        if state is None:
            state = StateStore()

        state.start_run()
        self._last_run = state
        logger.info(f"Starting graph run over {len(self._order)} node(s)")

        for node_id in self._order:
            node = self._nodes[node_id]
            if self.logging_config.show_node_transitions:
                logger.info(f"Running node: {node_id}")
            else:
                log_verbose(logger, f"Running node: {node_id}")

            try:
                state.mark_status(node_id, NodeStatus.RUNNING)
                await node.execute(state)
                state.mark_status(node_id, NodeStatus.COMPLETED)
            except Exception as e:
                if isinstance(e, LLMGraphError) and e.node_id is None:
                    e.node_id = node_id
                logger.error(f"Error in node {node_id}: {e}")
                self._record_failure(state, node_id, e)
                raise

        state.finish_run()
        logger.info("Graph run completed")
        return state

    @staticmethod
    def _record_failure(state: StateStore, node_id: str, error: Exception) -> None:
        # Bookkeeping failures must not mask the node error
        try:
            state.mark_status(node_id, NodeStatus.ERROR)
            state.finish_run(failed_node=node_id)
            state.add_error(node_id, str(error))
        except LLMGraphError as bookkeeping_error:
            logger.error(f"Could not record failure of node {node_id}: {bookkeeping_error}")
