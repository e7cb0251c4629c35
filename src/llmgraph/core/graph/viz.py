"""Graph visualization as Mermaid flowcharts."""

from typing import List

from llmgraph.core.graph.base import Graph
from llmgraph.core.graph.state import StateStore, NodeStatus

STATUS_CLASSES = {
    NodeStatus.PENDING: "fill:#eeeeee",
    NodeStatus.RUNNING: "fill:#fff3b0",
    NodeStatus.COMPLETED: "fill:#c8f7c5",
    NodeStatus.ERROR: "fill:#f7c5c5",
}


class GraphVisualizer:
    """Visualize graph structure and execution."""

    def __init__(self, graph: Graph):
        self.graph = graph
        # Mermaid ids follow registration order; labels carry the real ids
        self._ids = {node_id: f"n{index}" for index, node_id in enumerate(graph.nodes)}

    def _label(self, node_id: str) -> str:
        return node_id.replace('"', "#quot;")

    def _lines(self) -> List[str]:
        lines = ["flowchart TD"]
        for node_id in self.graph.order:
            node = self.graph.nodes[node_id]
            lines.append(f'    {self._ids[node_id]}["{self._label(node_id)}<br/>{type(node).__name__}"]')
        for from_id, to_id in self.graph.edges:
            lines.append(f"    {self._ids[from_id]} --> {self._ids[to_id]}")
        return lines

    def render_graph(self) -> str:
        """Mermaid flowchart of the topology."""
        return "\n".join(self._lines())

    def render_execution(self, state: StateStore) -> str:
        """Mermaid flowchart colored by each node's status in a run."""
        lines = self._lines()
        for status, style in STATUS_CLASSES.items():
            lines.append(f"    classDef {status.value} {style}")

        statuses = state.statuses
        for node_id in self.graph.order:
            status = statuses.get(node_id, NodeStatus.PENDING)
            lines.append(f"    class {self._ids[node_id]} {status.value}")
        return "\n".join(lines)
