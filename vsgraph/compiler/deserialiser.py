"""
vsgraph Compiler: JSON Deserialiser
===================================
Rebuilds Graph Model values (nodes, connectors, connections) from the saved
graph JSON described in schema.py.

Pipeline
--------
    graph.json  →  [schema.validate]            →  dict
    dict        →  [deserialiser.json_to_graph] →  GraphData
    GraphData   →  compile_graph(nodes, connections)

Saved node ids are kept, so connections can be restored by
(node id, connector name). Connector ids are fresh on every load.

Recovery rules
--------------
  • A Filter without plugin_namespace/function is rebuilt from the filter
    catalog when its filter_type is known, otherwise it is dropped.
  • A connection naming a dropped node or an unknown connector is dropped.
  • When several connections target one input, the last one is kept.
Each case logs a warning rather than failing the load.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Tuple

from vsgraph.core.GraphPrimitives import Connection
from vsgraph.core.Node import (
    FilterNode,
    GraphNode,
    NodeParameter,
    OutputNode,
    SourceNode,
)
from vsgraph.core.Types import NodeKind
from vsgraph.noderegistry.NodeRegistry import create_filter_node, get_definition

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GraphData:
    name: str
    nodes: Tuple[GraphNode, ...]
    connections: Tuple[Connection, ...]
    version: str = "1.0"
    description: str = ""


# ── Node builders ─────────────────────────────────────────────────────────────

def _parameters(raw: Optional[List[Dict[str, Any]]], filter_type: Optional[str]) -> Tuple[NodeParameter, ...]:
    definition = get_definition(filter_type) if filter_type else None
    defaults = {name: default for name, _, default in definition.parameters} if definition else {}
    return tuple(
        NodeParameter(
            name=p["name"],
            value=p.get("value") or "",
            type=p.get("type") or "string",
            default_value=defaults.get(p["name"]),
        )
        for p in (raw or [])
    )


def _build_source(data: Dict[str, Any]) -> SourceNode:
    return SourceNode.create(
        title=data.get("title") or "Video Source",
        file_path=data.get("file_path") or "",
        source_plugin=data.get("source_plugin") or "ffms2",
        node_id=data["id"],
    )


def _build_filter(data: Dict[str, Any]) -> Optional[FilterNode]:
    filter_type = data.get("filter_type")
    namespace = data.get("plugin_namespace")
    function = data.get("function")

    if namespace and function:
        return FilterNode.create(
            title=data.get("title") or function,
            plugin_namespace=namespace,
            function=function,
            parameters=_parameters(data.get("parameters"), filter_type),
            node_id=data["id"],
        )

    if filter_type and get_definition(filter_type) is not None:
        node = create_filter_node(filter_type, node_id=data["id"])
        for param in _parameters(data.get("parameters"), filter_type):
            if node.parameter(param.name) is not None:
                node = node.with_parameter(param.name, param.value)
        if data.get("title"):
            node = replace(node, title=data["title"])
        return node

    logger.warning(f"Dropping filter node '{data['id']}': no plugin call and unknown filter_type '{filter_type}'")
    return None


def _build_output(data: Dict[str, Any]) -> OutputNode:
    return OutputNode.create(
        title=data.get("title") or "Output",
        output_index=data.get("output_index") or 0,
        node_id=data["id"],
    )


_BUILDERS = {
    NodeKind.SOURCE: _build_source,
    NodeKind.FILTER: _build_filter,
    NodeKind.OUTPUT: _build_output,
}


def _build_node(data: Dict[str, Any]) -> Optional[GraphNode]:
    node_cls = GraphNode.class_for(data["type"])
    return _BUILDERS[node_cls.kind](data)


# ── Public entry point ───────────────────────────────────────────────────────

def json_to_graph(data: Dict[str, Any]) -> GraphData:
    """
    Build a GraphData snapshot from a validated graph JSON dict.

    Args:
        data: A dict that passed schema.validate().

    Returns:
        GraphData with nodes and connections in their saved order.
    """
    nodes: List[GraphNode] = []
    node_map: Dict[str, GraphNode] = {}

    for node_data in data.get("nodes", []):
        node = _build_node(node_data)
        if node is None:
            continue
        nodes.append(node)
        node_map[node.id] = node

    connections: List[Connection] = []
    for i, conn_data in enumerate(data.get("connections", [])):
        source_node = node_map.get(conn_data["from_node"])
        target_node = node_map.get(conn_data["to_node"])
        if source_node is None or target_node is None:
            logger.warning(f"Dropping connections[{i}]: endpoint node missing")
            continue

        source = source_node.output_named(conn_data["from_port"])
        target = target_node.input_named(conn_data["to_port"])
        if source is None or target is None:
            logger.warning(
                f"Dropping connections[{i}]: "
                f"'{conn_data['from_node']}.{conn_data['from_port']}' -> "
                f"'{conn_data['to_node']}.{conn_data['to_port']}' names an unknown connector"
            )
            continue

        # An input holds one connection; a later one replaces it.
        if any(c.target.id == target.id for c in connections):
            logger.warning(
                f"Replacing earlier connection into '{conn_data['to_node']}.{conn_data['to_port']}' "
                f"with connections[{i}]"
            )
            connections = [c for c in connections if c.target.id != target.id]

        connections.append(Connection.create(source, target, connection_id=conn_data.get("id")))

    logger.info(f"Loaded graph '{data.get('name', '')}': {len(nodes)} nodes, {len(connections)} connections")
    return GraphData(
        name=data.get("name", ""),
        nodes=tuple(nodes),
        connections=tuple(connections),
        version=data.get("version") or "1.0",
        description=data.get("description") or "",
    )


__all__ = ["GraphData", "json_to_graph"]
