"""
vsgraph Compiler: Graph Validator
=================================
Structural checks that run before any traversal.

Always enforced:
  • at least one Source node   → ValidationError(NO_SOURCE_NODE)
  • at least one Output node   → ValidationError(NO_OUTPUT_NODE)

Source is checked first, so a graph with neither fails on the source check.

Strict policy (CompileOptions(strict=True))
-------------------------------------------
The default policy is permissive: when several connections target the same
input the first one in sequence order wins, and an input with no resolvable
producer falls back to the default variable. Strict mode rejects both:
  • an input connector targeted more than once → MULTIPLE_INPUT_CONNECTIONS
  • a Filter/Output whose first input has no producer → UNRESOLVED_INPUT
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Sequence

from vsgraph.core.GraphPrimitives import Connection
from vsgraph.core.Node import GraphNode
from vsgraph.core.Types import NodeKind

from .errors import ValidationError, ValidationReason

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompileOptions:
    strict: bool = False


def _require_kind(nodes: Sequence[GraphNode], kind: NodeKind, reason: ValidationReason) -> None:
    if not any(n.kind == kind for n in nodes):
        raise ValidationError(reason)


def _check_single_connection_per_input(connections: Sequence[Connection]) -> None:
    seen: Dict[str, Connection] = {}
    for conn in connections:
        if conn.target is None:
            continue
        first = seen.setdefault(conn.target.id, conn)
        if first is not conn:
            raise ValidationError(
                ValidationReason.MULTIPLE_INPUT_CONNECTIONS,
                f"Input '{conn.target.name}' of node '{conn.target.node_id}' "
                f"has more than one incoming connection",
            )


def _check_inputs_resolved(nodes: Sequence[GraphNode], connections: Sequence[Connection]) -> None:
    node_ids = {n.id for n in nodes}
    for node in nodes:
        if node.kind == NodeKind.SOURCE:
            continue
        first = node.first_input()
        if first is None:
            continue
        conn = next((c for c in connections if c.target is not None and c.target.id == first.id), None)
        if conn is None or conn.source is None or conn.source.node_id not in node_ids:
            raise ValidationError(
                ValidationReason.UNRESOLVED_INPUT,
                f"Input '{first.name}' of node '{node.title}' ({node.id}) is not connected",
            )


def validate(
    nodes: Sequence[GraphNode],
    connections: Sequence[Connection] = (),
    options: Optional[CompileOptions] = None,
) -> None:
    """
    Validate a graph snapshot.

    Raises:
        ValidationError: On the first failed check.
    """
    options = options or CompileOptions()

    _require_kind(nodes, NodeKind.SOURCE, ValidationReason.NO_SOURCE_NODE)
    _require_kind(nodes, NodeKind.OUTPUT, ValidationReason.NO_OUTPUT_NODE)

    if options.strict:
        _check_single_connection_per_input(connections)
        _check_inputs_resolved(nodes, connections)

    logger.debug(f"Validated graph: {len(nodes)} nodes, {len(connections)} connections, strict={options.strict}")


__all__ = ["CompileOptions", "validate"]
