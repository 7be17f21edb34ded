"""
vsgraph Compiler: Script Templates
==================================
Text building blocks shared by the emitter.

  CodeWriter       simple line accumulator
  SCRIPT_PREAMBLE  the fixed import lines every VapourSynth script starts with
  block templates  one per node kind:

      Source / Filter             Output
      ---------------             ------
      # Source: <title>           # Output: <title>
      clipN = <fragment>          <input_var>.set_output(<index>)
      <blank>                     <blank>
"""

from __future__ import annotations

from typing import Callable, Dict, List

from vsgraph.core.Node import GraphNode
from vsgraph.core.Types import NodeKind

SCRIPT_PREAMBLE: List[str] = [
    "import vapoursynth as vs",
    "from vapoursynth import core",
]

# Variable used when an input cannot be traced back to an emitted clip.
FALLBACK_INPUT_VAR = "clip"

VAR_PREFIX = "clip"


# ── Code writer ───────────────────────────────────────────────────────────────

class CodeWriter:
    """Simple string accumulator."""

    def __init__(self):
        self._lines: List[str] = []

    def writeln(self, line: str = "") -> "CodeWriter":
        self._lines.append(line)
        return self

    def blank(self) -> "CodeWriter":
        return self.writeln()

    def comment(self, text: str) -> "CodeWriter":
        return self.writeln(f"# {text}")

    def extend(self, lines: List[str]) -> "CodeWriter":
        for line in lines:
            self.writeln(line)
        return self

    def lines(self) -> List[str]:
        return self._lines

    def result(self) -> str:
        return "\n".join(self._lines) + "\n"


# ── Block templates ───────────────────────────────────────────────────────────

def _assignment_block(label: str) -> Callable[[GraphNode, str, str, CodeWriter], None]:
    def write(node: GraphNode, var_name: str, input_var: str, writer: CodeWriter) -> None:
        writer.comment(f"{label}: {node.title}")
        writer.writeln(f"{var_name} = {node.emit(input_var)}")
        writer.blank()
    return write


def _sink_block(node: GraphNode, var_name: str, input_var: str, writer: CodeWriter) -> None:
    writer.comment(f"Output: {node.title}")
    writer.writeln(node.emit(input_var))
    writer.blank()


BLOCK_TEMPLATES: Dict[NodeKind, Callable[[GraphNode, str, str, CodeWriter], None]] = {
    NodeKind.SOURCE: _assignment_block("Source"),
    NodeKind.FILTER: _assignment_block("Filter"),
    NodeKind.OUTPUT: _sink_block,
}


def binds_variable(kind: NodeKind) -> bool:
    """Whether a node of this kind publishes its clip for downstream nodes."""
    return kind != NodeKind.OUTPUT


def write_block(node: GraphNode, var_name: str, input_var: str, writer: CodeWriter) -> None:
    BLOCK_TEMPLATES[node.kind](node, var_name, input_var, writer)


__all__ = [
    "BLOCK_TEMPLATES",
    "CodeWriter",
    "FALLBACK_INPUT_VAR",
    "SCRIPT_PREAMBLE",
    "VAR_PREFIX",
    "binds_variable",
    "write_block",
]
