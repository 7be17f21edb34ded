"""
Filter catalog: the built-in filter nodes offered by the editor palette.

Each entry maps a filter type key (e.g. "resize") to the VapourSynth plugin
namespace + function it calls and the parameters the node exposes. Parameter
values start empty so a freshly added node only passes the clip; the defaults
are applied on request (`apply_defaults=True` or FilterNode.reset_parameters).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from ..core.Node import FilterNode, NodeParameter


@dataclass(frozen=True)
class FilterDefinition:
    title: str
    plugin_namespace: str
    function: str
    category: str
    # (name, type, default)
    parameters: Tuple[Tuple[str, str, str], ...] = ()


FILTER_DEFINITIONS: Dict[str, FilterDefinition] = {
    # Resize
    "resize": FilterDefinition("Resize", "resize", "Lanczos", "Resize", (
        ("width", "int", "1920"),
        ("height", "int", "1080"),
    )),
    "descale": FilterDefinition("Descale", "descale", "Debicubic", "Resize", (
        ("width", "int", "1280"),
        ("height", "int", "720"),
        ("b", "float", "0.33"),
        ("c", "float", "0.33"),
    )),
    "fmtconv": FilterDefinition("FmtConv", "fmtc", "resample", "Resize", (
        ("w", "int", "1920"),
        ("h", "int", "1080"),
        ("kernel", "string", "spline36"),
    )),

    # Denoise
    "bm3d": FilterDefinition("BM3D Denoise", "bm3d", "VAggregate", "Denoise", (
        ("sigma", "float", "3.0"),
    )),
    "dfttest": FilterDefinition("DFTTest", "dfttest", "DFTTest", "Denoise", (
        ("sigma", "float", "4.0"),
        ("tbsize", "int", "1"),
    )),
    "knlm": FilterDefinition("KNLMeansCL", "knlm", "KNLMeansCL", "Denoise", (
        ("d", "int", "1"),
        ("a", "int", "2"),
        ("s", "int", "4"),
        ("h", "float", "1.2"),
    )),
    "bilateral": FilterDefinition("Bilateral", "bilateral", "Bilateral", "Denoise", (
        ("sigmaS", "float", "3.0"),
        ("sigmaR", "float", "0.02"),
    )),

    # Deinterlace
    "eedi3": FilterDefinition("EEDI3", "eedi3", "eedi3", "Deinterlace", (
        ("field", "int", "1"),
        ("dh", "bool", "False"),
    )),
    "nnedi3": FilterDefinition("NNEDI3", "nnedi3", "nnedi3", "Deinterlace", (
        ("field", "int", "1"),
        ("nsize", "int", "0"),
        ("nns", "int", "3"),
    )),

    # Sharpen
    "cas": FilterDefinition("CAS Sharpen", "cas", "CAS", "Sharpen", (
        ("sharpness", "float", "0.5"),
    )),
    "tcanny": FilterDefinition("TCanny", "tcanny", "TCanny", "Sharpen", (
        ("sigma", "float", "1.5"),
        ("mode", "int", "0"),
    )),

    # Utility
    "crop": FilterDefinition("Crop", "std", "Crop", "Utility", (
        ("left", "int", "0"),
        ("right", "int", "0"),
        ("top", "int", "0"),
        ("bottom", "int", "0"),
    )),
    "trim": FilterDefinition("Trim", "std", "Trim", "Utility", (
        ("first", "int", "0"),
        ("last", "int", "0"),
    )),
}

_BY_PLUGIN_CALL: Dict[Tuple[str, str], str] = {
    (d.plugin_namespace, d.function): key for key, d in FILTER_DEFINITIONS.items()
}


def get_definition(filter_type: str) -> Optional[FilterDefinition]:
    return FILTER_DEFINITIONS.get(filter_type)


def create_filter_node(
    filter_type: str,
    node_id: Optional[str] = None,
    apply_defaults: bool = False,
) -> FilterNode:
    """
    Build a FilterNode for a catalog entry.

    Raises:
        ValueError: If `filter_type` is not in the catalog.
    """
    definition = FILTER_DEFINITIONS.get(filter_type)
    if definition is None:
        raise ValueError(f"Unknown filter type: {filter_type}")

    params = tuple(
        NodeParameter(name=name, type=ptype, default_value=default)
        for name, ptype, default in definition.parameters
    )
    node = FilterNode.create(
        title=definition.title,
        plugin_namespace=definition.plugin_namespace,
        function=definition.function,
        parameters=params,
        node_id=node_id,
    )
    return node.reset_parameters() if apply_defaults else node


def filter_type_of(node: FilterNode) -> str:
    """Map a filter node back to its catalog key; unknown calls fall back to the namespace."""
    return _BY_PLUGIN_CALL.get((node.plugin_namespace, node.function), node.plugin_namespace)


def palette() -> List[Dict[str, Any]]:
    """Palette entries for the editor: the source, the output and every catalog filter."""
    entries: List[Dict[str, Any]] = [
        {"name": "Video Source", "type": "Source", "category": "Input",
         "description": "Load a video file"},
        {"name": "Output", "type": "Output", "category": "Output",
         "description": "Set script output"},
    ]
    for key, d in FILTER_DEFINITIONS.items():
        entries.append({
            "name": d.title,
            "type": "Filter",
            "filter_type": key,
            "category": d.category,
            "description": f"core.{d.plugin_namespace}.{d.function}",
            "parameters": [
                {"name": n, "type": t, "default": v} for n, t, v in d.parameters
            ],
        })
    return entries


__all__ = [
    "FILTER_DEFINITIONS",
    "FilterDefinition",
    "create_filter_node",
    "filter_type_of",
    "get_definition",
    "palette",
]
