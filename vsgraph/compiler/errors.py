"""
Compiler error kinds.

Both kinds are terminal for a compilation attempt: no partial script is
produced and the error reaches the caller unchanged.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from vsgraph.core.Node import GraphNode


class ValidationReason(Enum):
    NO_SOURCE_NODE = "NoSourceNode"
    NO_OUTPUT_NODE = "NoOutputNode"
    # Only raised under CompileOptions(strict=True)
    MULTIPLE_INPUT_CONNECTIONS = "MultipleInputConnections"
    UNRESOLVED_INPUT = "UnresolvedInput"


class CompileError(ValueError):
    """Base class for graphs that cannot be compiled."""


class ValidationError(CompileError):
    """Raised before traversal when the graph is structurally incomplete."""

    def __init__(self, reason: ValidationReason, message: str = ""):
        self.reason = reason
        super().__init__(message or _DEFAULT_MESSAGES.get(reason, reason.value))


class CycleError(CompileError):
    """Raised when a node is reached again while it is still being scheduled."""

    def __init__(self, node: "GraphNode"):
        self.node = node
        super().__init__(f"Cycle detected in node graph at '{node.title}' ({node.id})")


_DEFAULT_MESSAGES = {
    ValidationReason.NO_SOURCE_NODE: "No source node found",
    ValidationReason.NO_OUTPUT_NODE: "No output node found",
}


__all__ = ["CompileError", "CycleError", "ValidationError", "ValidationReason"]
