"""
vsgraph Compiler
================
Turns a node graph snapshot into a VapourSynth script.

Pipeline:
    (nodes, connections) →  [validator]  →  checked snapshot
    checked snapshot     →  [scheduler]  →  nodes in execution order
    ordered nodes        →  [emitter]    →  script str

Public API
----------
    from vsgraph.compiler import compile_graph

    script = compile_graph(nodes, connections)
    with open("output.vpy", "w") as f:
        f.write(script)

The call is synchronous and keeps no state between invocations; hand it a
snapshot the editor will not mutate while it runs.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from vsgraph.core.GraphPrimitives import Connection
from vsgraph.core.Node import GraphNode

from .emitter import emit
from .errors import CompileError, CycleError, ValidationError, ValidationReason
from .scheduler import Scheduler, schedule
from .validator import CompileOptions, validate

logger = logging.getLogger(__name__)


def compile_graph(
    nodes: Sequence[GraphNode],
    connections: Sequence[Connection],
    options: Optional[CompileOptions] = None,
) -> str:
    """
    Compile a graph snapshot into script text.

    Args:
        nodes:       Nodes in editor order.
        connections: Connections in editor order.
        options:     CompileOptions; the default policy is permissive.

    Returns:
        Complete script source as a single string.

    Raises:
        ValidationError: No Source / Output node, or a strict-policy violation.
        CycleError:      The connections form a cycle.
    """
    order = Scheduler(nodes, connections, options).build()
    script = emit(order, connections)
    logger.info(f"Compiled {len(order)} nodes into {script.count(chr(10))} script lines")
    return script


__all__ = [
    "CompileError",
    "CompileOptions",
    "CycleError",
    "Scheduler",
    "ValidationError",
    "ValidationReason",
    "compile_graph",
    "emit",
    "schedule",
    "validate",
]
