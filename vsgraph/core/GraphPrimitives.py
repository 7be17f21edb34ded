from dataclasses import dataclass
from typing import Optional

import uuid

from .Types import ConnectorDirection


def new_id() -> str:
    return uuid.uuid4().hex


# Connectors never own their node. `node_id` is resolved through the node
# table of the graph being compiled, so the ownership graph stays a flat arena
# even when the connections between nodes form a cycle.
@dataclass(frozen=True)
class Connector:
    id: str
    name: str
    direction: ConnectorDirection
    node_id: str

    @property
    def is_input(self) -> bool:
        return self.direction == ConnectorDirection.INPUT

    def __repr__(self):
        arrow = "in" if self.is_input else "out"
        return f"Connector({self.node_id}.{self.name}:{arrow})"


# A directed edge between an output connector and an input connector.
# Either end may be unset while the editor is mid-drag; such a connection is
# inert and never contributes a dependency.
@dataclass(frozen=True)
class Connection:
    id: str
    source: Optional[Connector] = None
    target: Optional[Connector] = None

    @classmethod
    def create(cls,
               source: Optional[Connector],
               target: Optional[Connector],
               connection_id: Optional[str] = None) -> 'Connection':
        return cls(id=connection_id or new_id(), source=source, target=target)

    def __repr__(self):
        src = f"{self.source.node_id}.{self.source.name}" if self.source else "?"
        tgt = f"{self.target.node_id}.{self.target.name}" if self.target else "?"
        return f"Connection({src} -> {tgt})"
