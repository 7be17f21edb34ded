"""
vsgraph Compiler: Graph JSON Schema + Validator
===============================================
Defines the saved graph format and a lightweight structural validator that
runs without any third-party JSON Schema library.

Canonical JSON format
---------------------

    {
      "version":     "1.0",                      // format version (str, optional)
      "name":        "denoise-and-resize",       // human label (str, required)
      "description": "",                         // (str, optional)
      "nodes": [
        {
          "id":    "n1",                          // unique within this graph (str, required)
          "type":  "Source",                      // Source | Filter | Output (str, required)
          "title": "Video Source",                // display label (str, optional)

          // Source
          "file_path":     "input.mkv",
          "source_plugin": "ffms2",               // ffms2 | lsmashsource

          // Filter
          "filter_type":      "resize",           // catalog key
          "plugin_namespace": "resize",
          "function":         "Lanczos",
          "parameters": [ {"name": "width", "value": "1280", "type": "int"} ],

          // Output
          "output_index": 0
        }
      ],
      "connections": [
        {
          "from_node": "n1",  "from_port": "clip",
          "to_node":   "n2",  "to_port":   "clip"
        }
      ]
    }

Editor-only keys (e.g. "x", "y") are accepted and ignored.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Union

KNOWN_NODE_TYPES: frozenset[str] = frozenset({"Source", "Filter", "Output"})

SOURCE_PLUGINS: frozenset[str] = frozenset({"ffms2", "lsmashsource"})


# ── Validation helpers ────────────────────────────────────────────────────────

class SchemaError(ValueError):
    """Raised when graph JSON fails structural validation."""


def _require(condition: bool, message: str) -> None:
    if not condition:
        raise SchemaError(message)


def _require_keys(obj: Dict, keys: List[str], context: str) -> None:
    for key in keys:
        _require(key in obj, f"{context}: missing required field '{key}'")


def _validate_optional_str(node: Dict, key: str, ctx: str) -> None:
    if key in node and node[key] is not None:
        _require(isinstance(node[key], str), f"{ctx}.{key} must be a string")


def _validate_parameters(params: Any, ctx: str) -> None:
    _require(isinstance(params, list), f"{ctx}.parameters must be a list")
    for j, param in enumerate(params):
        pctx = f"{ctx}.parameters[{j}]"
        _require(isinstance(param, dict), f"{pctx}: each parameter must be a JSON object")
        _require_keys(param, ["name"], pctx)
        _require(isinstance(param["name"], str), f"{pctx}.name must be a string")
        for key in ("value", "type"):
            _validate_optional_str(param, key, pctx)


# ── Public validator ─────────────────────────────────────────────────────────

def validate(data: Dict[str, Any]) -> None:
    """
    Validate a parsed graph JSON dict.

    Raises:
        SchemaError: On any structural violation.
    """
    _require(isinstance(data, dict), "graph JSON must be a JSON object at the top level")
    _require_keys(data, ["name", "nodes", "connections"], "graph root")

    _require(isinstance(data["name"], str), "name must be a string")
    _require(isinstance(data["nodes"], list), "nodes must be a list")
    _require(isinstance(data["connections"], list), "connections must be a list")

    # ── Validate nodes ──────────────────────────────────────────────────────

    node_ids: set[str] = set()

    for i, node in enumerate(data["nodes"]):
        ctx = f"nodes[{i}]"
        _require(isinstance(node, dict), f"{ctx}: each node must be a JSON object")
        _require_keys(node, ["id", "type"], ctx)
        _require(isinstance(node["id"], str), f"{ctx}.id must be a string")
        _require(isinstance(node["type"], str), f"{ctx}.type must be a string")
        _require(
            node["id"] not in node_ids,
            f"{ctx}: duplicate node id '{node['id']}'",
        )
        node_ids.add(node["id"])

        _require(
            node["type"] in KNOWN_NODE_TYPES,
            f"{ctx}: unknown node type '{node['type']}'",
        )

        for key in ("title", "file_path", "filter_type", "plugin_namespace", "function"):
            _validate_optional_str(node, key, ctx)

        plugin = node.get("source_plugin")
        if plugin is not None:
            _require(plugin in SOURCE_PLUGINS, f"{ctx}.source_plugin must be one of {sorted(SOURCE_PLUGINS)}")

        if node.get("parameters") is not None:
            _validate_parameters(node["parameters"], ctx)

        index = node.get("output_index")
        if index is not None:
            _require(
                isinstance(index, int) and not isinstance(index, bool) and index >= 0,
                f"{ctx}.output_index must be a non-negative integer",
            )

    # ── Validate connections ────────────────────────────────────────────────

    for i, conn in enumerate(data["connections"]):
        ctx = f"connections[{i}]"
        _require(isinstance(conn, dict), f"{ctx}: each connection must be a JSON object")
        _require_keys(conn, ["from_node", "from_port", "to_node", "to_port"], ctx)

        for field in ("from_node", "from_port", "to_node", "to_port"):
            _require(isinstance(conn[field], str), f"{ctx}.{field} must be a string")

        _require(
            conn["from_node"] in node_ids,
            f"{ctx}: from_node '{conn['from_node']}' not found in nodes",
        )
        _require(
            conn["to_node"] in node_ids,
            f"{ctx}: to_node '{conn['to_node']}' not found in nodes",
        )


def validate_file(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load and validate a graph JSON file.

    Returns:
        The parsed dict on success.

    Raises:
        FileNotFoundError: If the file does not exist.
        json.JSONDecodeError: If the file is not valid JSON.
        SchemaError: If the graph structure is invalid.
    """
    path = Path(path)
    with path.open(encoding="utf-8") as fh:
        data = json.load(fh)
    validate(data)
    return data


__all__ = ["KNOWN_NODE_TYPES", "SchemaError", "validate", "validate_file"]
