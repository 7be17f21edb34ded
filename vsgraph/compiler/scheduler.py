"""
vsgraph Compiler: Execution Scheduler
=====================================
Maps a (nodes, connections) snapshot → an ordered list of nodes in which every
producer precedes its consumers.

Traversal
---------
Depth-first, walking dependencies backwards from consumer to producer:

  1. seed from every Output node, in the order they appear in `nodes`;
  2. then visit every node not yet scheduled, again in input order, so
     disconnected islands and unused branches still appear (after the
     Output-reachable prefix, internally ordered).

Each node is "in-progress" while its producers are being visited and "done"
once appended. Reaching an in-progress node again means the graph has a cycle
and the whole compilation is aborted with CycleError.

Dependency resolution
---------------------
For every input connector the *first* connection in sequence order whose
target is that connector is honoured; later ones are ignored. A connection
with no source, or whose source connector belongs to a node outside the
snapshot, contributes no dependency.

The traversal keeps an explicit work stack instead of recursing, so graph
depth is not bounded by the interpreter's recursion limit. The resulting order
is identical to the recursive formulation.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Optional, Sequence, Set, Tuple

from vsgraph.core.GraphPrimitives import Connection
from vsgraph.core.Node import GraphNode
from vsgraph.core.Types import NodeKind

from .errors import CycleError
from .validator import CompileOptions, validate

logger = logging.getLogger(__name__)


def first_connections_by_target(connections: Sequence[Connection]) -> Dict[str, Connection]:
    """Input connector id → the first connection (in sequence order) targeting it."""
    index: Dict[str, Connection] = {}
    for conn in connections:
        if conn.target is not None:
            index.setdefault(conn.target.id, conn)
    return index


class Scheduler:
    def __init__(
        self,
        nodes: Sequence[GraphNode],
        connections: Sequence[Connection],
        options: Optional[CompileOptions] = None,
    ):
        self.nodes = tuple(nodes)
        self.connections = tuple(connections)
        self.options = options or CompileOptions()

        self._nodes_by_id: Dict[str, GraphNode] = {n.id: n for n in self.nodes}
        self._incoming = first_connections_by_target(self.connections)

        self._in_progress: Set[str] = set()
        self._done: Set[str] = set()
        self._order: List[GraphNode] = []

    # ── Dependency lookup ─────────────────────────────────────────────────

    def _producers(self, node: GraphNode) -> Iterator[GraphNode]:
        for connector in node.inputs:
            conn = self._incoming.get(connector.id)
            if conn is None or conn.source is None:
                continue
            producer = self._nodes_by_id.get(conn.source.node_id)
            if producer is not None:
                yield producer

    # ── Traversal ─────────────────────────────────────────────────────────

    def _enter(self, node: GraphNode) -> Iterator[GraphNode]:
        if node.id in self._in_progress:
            raise CycleError(node)
        self._in_progress.add(node.id)
        return self._producers(node)

    def _visit(self, root: GraphNode) -> None:
        if root.id in self._done:
            return

        stack: List[Tuple[GraphNode, Iterator[GraphNode]]] = [(root, self._enter(root))]
        while stack:
            node, producers = stack[-1]
            for producer in producers:
                if producer.id in self._done:
                    continue
                stack.append((producer, self._enter(producer)))
                break
            else:
                stack.pop()
                self._in_progress.discard(node.id)
                self._done.add(node.id)
                self._order.append(node)
                logger.debug(f"Scheduled node '{node.title}' ({node.id}) at position {len(self._order) - 1}")

    # ── Public API ────────────────────────────────────────────────────────

    def build(self) -> List[GraphNode]:
        """
        Validate the snapshot and return every node in execution order.

        Raises:
            ValidationError: If the graph has no Source or no Output node.
            CycleError:      If the connections form a cycle.
        """
        validate(self.nodes, self.connections, self.options)

        self._in_progress.clear()
        self._done.clear()
        self._order = []

        for node in self.nodes:
            if node.kind == NodeKind.OUTPUT:
                self._visit(node)

        for node in self.nodes:
            if node.id not in self._done:
                self._visit(node)

        return list(self._order)


def schedule(
    nodes: Sequence[GraphNode],
    connections: Sequence[Connection],
    options: Optional[CompileOptions] = None,
) -> List[GraphNode]:
    return Scheduler(nodes, connections, options).build()


__all__ = ["Scheduler", "first_connections_by_target", "schedule"]
