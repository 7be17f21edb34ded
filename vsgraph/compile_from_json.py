"""
compile_from_json.py: CLI for the vsgraph compiler
==================================================
Compiles a saved node graph JSON file into a VapourSynth script.

Usage
-----
    vsgraph-compile <graph.json> [options]
    python -m vsgraph.compile_from_json <graph.json> [options]

Options
-------
    --out        <dir>   Output directory (default: $VSGRAPH_OUTPUT_DIR or compiled/)
    --print              Print the generated script to stdout instead of writing a file
    --strict             Reject inputs with several or no incoming connections
    --log-level  <lvl>   Logging level (default: $VSGRAPH_LOG_LEVEL or INFO)

Examples
--------
    # Compile into compiled/denoise_and_resize.vpy
    vsgraph-compile graphs/denoise_and_resize.json

    # Print the script without writing a file
    vsgraph-compile graphs/denoise_and_resize.json --print
"""

from __future__ import annotations

import argparse
import json
import logging
import re
import sys
from pathlib import Path

from vsgraph.compiler import CompileError, CompileOptions, emit, schedule
from vsgraph.compiler.deserialiser import json_to_graph
from vsgraph.compiler.schema import SchemaError, validate_file
from vsgraph.config import load_settings

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="vsgraph-compile",
        description="Compile a node graph JSON file to a VapourSynth script.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    p.add_argument(
        "graph_json",
        metavar="graph.json",
        help="Path to the graph JSON file to compile.",
    )
    p.add_argument(
        "--out",
        metavar="DIR",
        default=None,
        help="Output directory for the compiled .vpy file.",
    )
    p.add_argument(
        "--print",
        dest="print_only",
        action="store_true",
        help="Print generated script to stdout instead of writing a file.",
    )
    p.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="Treat multiply-connected or unconnected inputs as errors.",
    )
    p.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level.",
    )
    return p


def _graph_name_to_filename(graph_name: str) -> str:
    """Turn 'Denoise and Resize' → 'denoise_and_resize.vpy'; path separators never survive."""
    safe = re.sub(r"[^\w.]", "_", graph_name.strip().lower()).strip(".") or "graph"
    return f"{safe}.vpy"


def main(argv=None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    try:
        settings = load_settings()
    except ValueError as exc:
        print(f"[error] Invalid configuration: {exc}", file=sys.stderr)
        return 1

    logging.basicConfig(
        level=args.log_level or settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    json_path = Path(args.graph_json)
    if not json_path.exists():
        print(f"[error] File not found: {json_path}", file=sys.stderr)
        return 1

    # ── Validate JSON ────────────────────────────────────────────────────────
    try:
        data = validate_file(json_path)
    except json.JSONDecodeError as exc:
        print(f"[error] Invalid JSON: {exc}", file=sys.stderr)
        return 1
    except SchemaError as exc:
        print(f"[error] Schema validation failed: {exc}", file=sys.stderr)
        return 1

    # ── Deserialise JSON → nodes + connections ───────────────────────────────
    graph = json_to_graph(data)
    graph_name = graph.name or json_path.stem
    strict = settings.strict if args.strict is None else args.strict
    print(f"[compile_from_json] graph       : {graph_name}", file=sys.stderr)
    print(f"[compile_from_json] nodes       : {len(graph.nodes)}", file=sys.stderr)
    print(f"[compile_from_json] connections : {len(graph.connections)}", file=sys.stderr)

    # ── Schedule + emit ──────────────────────────────────────────────────────
    try:
        order = schedule(graph.nodes, graph.connections, CompileOptions(strict=strict))
    except CompileError as exc:
        print(f"[error] Compilation failed: {exc}", file=sys.stderr)
        return 1
    source = emit(order, graph.connections)

    # ── Output ───────────────────────────────────────────────────────────────
    if args.print_only:
        sys.stdout.write(source)
        return 0

    out_dir = Path(args.out or settings.output_dir)
    out_path = out_dir / _graph_name_to_filename(graph_name)
    try:
        out_dir.mkdir(parents=True, exist_ok=True)
        out_path.write_text(source, encoding="utf-8")
    except OSError as exc:
        print(f"[error] Could not write {out_path}: {exc}", file=sys.stderr)
        return 1

    print(f"[compile_from_json] wrote       : {out_path}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
