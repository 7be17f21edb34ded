"""
vsgraph Compiler: Script Emitter
================================
Converts a scheduled node list into VapourSynth script text.

Output structure
----------------
    import vapoursynth as vs
    from vapoursynth import core

    # Source: Video Source
    clip0 = core.ffms2.Source(r"in.mkv")

    # Filter: Resize
    clip1 = core.resize.Lanczos(clip0, width=1280)

    # Output: Output
    clip1.set_output(0)

Variable naming
---------------
Every scheduled node draws the next `clip<N>` from a counter starting at 0,
Output nodes included. Source and Filter nodes bind it to their first output
connector; every consumer of that connector (fan-out) reads the same name.

Input resolution
----------------
Only a node's first input is resolved: the first connection targeting it
whose source connector already has a variable. Anything else falls back to
FALLBACK_INPUT_VAR without raising.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional, Sequence

from vsgraph.core.GraphPrimitives import Connection
from vsgraph.core.Node import GraphNode

from .scheduler import first_connections_by_target
from .templates import (
    FALLBACK_INPUT_VAR,
    SCRIPT_PREAMBLE,
    VAR_PREFIX,
    CodeWriter,
    binds_variable,
    write_block,
)

logger = logging.getLogger(__name__)


def _resolve_input(
    node: GraphNode,
    incoming: Dict[str, Connection],
    variables: Dict[str, str],
) -> str:
    first = node.first_input()
    if first is None:
        return ""

    conn: Optional[Connection] = incoming.get(first.id)
    if conn is not None and conn.source is not None and conn.source.id in variables:
        return variables[conn.source.id]

    logger.debug(f"Input '{first.name}' of '{node.title}' unresolved, using '{FALLBACK_INPUT_VAR}'")
    return FALLBACK_INPUT_VAR


def emit(ordered_nodes: Sequence[GraphNode], connections: Sequence[Connection]) -> str:
    """
    Emit a complete script from nodes already in execution order.

    Args:
        ordered_nodes: Output of Scheduler.build().
        connections:   The connections of the same snapshot.

    Returns:
        Script source as a single string.
    """
    incoming = first_connections_by_target(connections)
    variables: Dict[str, str] = {}
    counter = 0

    writer = CodeWriter()
    writer.extend(SCRIPT_PREAMBLE)
    writer.blank()

    for node in ordered_nodes:
        var_name = f"{VAR_PREFIX}{counter}"
        counter += 1

        input_var = _resolve_input(node, incoming, variables)
        write_block(node, var_name, input_var, writer)

        if binds_variable(node.kind):
            out = node.first_output()
            if out is not None:
                variables[out.id] = var_name

    logger.debug(f"Emitted {len(ordered_nodes)} node blocks, {len(variables)} bound variables")
    return writer.result()


__all__ = ["emit"]
