from dataclasses import dataclass, field, replace
from typing import ClassVar, Dict, Optional, Tuple, Type

import logging

from .GraphPrimitives import Connection, Connector, new_id
from .Types import ConnectorDirection, NodeKind, ParameterType

# Get a logger for this module
logger = logging.getLogger(__name__)

CLIP_PORT = "clip"


def _connector(node_id: str, name: str, direction: ConnectorDirection) -> Connector:
    return Connector(id=new_id(), name=name, direction=direction, node_id=node_id)


@dataclass(frozen=True)
class NodeParameter:
    name: str
    value: str = ""
    type: str = "string"  # legacy: string, int, float, bool, choice
    default_value: Optional[str] = None
    description: str = ""

    @property
    def parameter_type(self) -> ParameterType:
        return ParameterType.from_name(self.type)

    def reset_to_default(self) -> 'NodeParameter':
        if self.default_value is None:
            return self
        return replace(self, value=self.default_value)


# =========================================================================================
# NODE VARIANTS
#
# The set of kinds is closed: Source, Filter and Output. Each variant is an
# immutable value registered under its kind name so saved graphs can be
# rebuilt by name. `emit()` returns the script fragment for the node given the
# variable name feeding its first input.
# =========================================================================================

@dataclass(frozen=True)
class GraphNode:
    id: str
    title: str
    inputs: Tuple[Connector, ...] = ()
    outputs: Tuple[Connector, ...] = ()

    kind: ClassVar[NodeKind]
    _node_registry: ClassVar[Dict[str, Type['GraphNode']]] = {}

    @classmethod
    def register(cls, kind: NodeKind):
        def decorator(subclass):
            if kind.value in cls._node_registry:
                raise ValueError(f"Node kind '{kind.value}' is already registered")
            subclass.kind = kind
            cls._node_registry[kind.value] = subclass
            return subclass
        return decorator

    @classmethod
    def class_for(cls, type_name: str) -> Type['GraphNode']:
        node_cls = cls._node_registry.get(type_name)
        if node_cls is None:
            raise ValueError(f"Unknown node type '{type_name}'")
        return node_cls

    @classmethod
    def registered_types(cls) -> Tuple[str, ...]:
        return tuple(cls._node_registry.keys())

    def emit(self, input_var: str) -> str:
        raise NotImplementedError(f"{type(self).__name__} does not emit a fragment")

    def first_input(self) -> Optional[Connector]:
        return self.inputs[0] if self.inputs else None

    def first_output(self) -> Optional[Connector]:
        return self.outputs[0] if self.outputs else None

    def input_named(self, name: str) -> Optional[Connector]:
        return next((c for c in self.inputs if c.name == name), None)

    def output_named(self, name: str) -> Optional[Connector]:
        return next((c for c in self.outputs if c.name == name), None)

    def __repr__(self):
        return f"{self.kind.value}Node({self.id}, '{self.title}')"


@GraphNode.register(NodeKind.SOURCE)
@dataclass(frozen=True, repr=False)
class SourceNode(GraphNode):
    file_path: str = ""
    source_plugin: str = "ffms2"  # ffms2 or lsmashsource

    @classmethod
    def create(cls,
               title: str = "Video Source",
               file_path: str = "",
               source_plugin: str = "ffms2",
               node_id: Optional[str] = None) -> 'SourceNode':
        node_id = node_id or new_id()
        return cls(
            id=node_id,
            title=title,
            outputs=(_connector(node_id, CLIP_PORT, ConnectorDirection.OUTPUT),),
            file_path=file_path,
            source_plugin=source_plugin,
        )

    def emit(self, input_var: str = "") -> str:
        if self.source_plugin == "lsmashsource":
            return f'core.lsmas.LWLibavSource(r"{self.file_path}")'
        return f'core.ffms2.Source(r"{self.file_path}")'


@GraphNode.register(NodeKind.FILTER)
@dataclass(frozen=True, repr=False)
class FilterNode(GraphNode):
    plugin_namespace: str = ""
    function: str = ""
    parameters: Tuple[NodeParameter, ...] = field(default_factory=tuple)

    @classmethod
    def create(cls,
               title: str,
               plugin_namespace: str,
               function: str,
               parameters: Tuple[NodeParameter, ...] = (),
               node_id: Optional[str] = None,
               input_names: Tuple[str, ...] = (CLIP_PORT,)) -> 'FilterNode':
        if not input_names:
            raise ValueError("A filter node needs at least one input connector")
        node_id = node_id or new_id()
        return cls(
            id=node_id,
            title=title,
            inputs=tuple(_connector(node_id, n, ConnectorDirection.INPUT) for n in input_names),
            outputs=(_connector(node_id, CLIP_PORT, ConnectorDirection.OUTPUT),),
            plugin_namespace=plugin_namespace,
            function=function,
            parameters=tuple(parameters),
        )

    def parameter(self, name: str) -> Optional[NodeParameter]:
        return next((p for p in self.parameters if p.name == name), None)

    def with_parameter(self, name: str, value: str) -> 'FilterNode':
        if self.parameter(name) is None:
            raise KeyError(f"Filter '{self.title}' has no parameter '{name}'")
        params = tuple(replace(p, value=value) if p.name == name else p for p in self.parameters)
        return replace(self, parameters=params)

    def reset_parameters(self) -> 'FilterNode':
        return replace(self, parameters=tuple(p.reset_to_default() for p in self.parameters))

    def emit(self, input_var: str) -> str:
        args = [input_var]
        args.extend(f"{p.name}={p.value}" for p in self.parameters if p.value)
        return f"core.{self.plugin_namespace}.{self.function}({', '.join(args)})"


@GraphNode.register(NodeKind.OUTPUT)
@dataclass(frozen=True, repr=False)
class OutputNode(GraphNode):
    output_index: int = 0

    @classmethod
    def create(cls,
               title: str = "Output",
               output_index: int = 0,
               node_id: Optional[str] = None) -> 'OutputNode':
        node_id = node_id or new_id()
        return cls(
            id=node_id,
            title=title,
            inputs=(_connector(node_id, CLIP_PORT, ConnectorDirection.INPUT),),
            output_index=output_index,
        )

    # The sink binding: attach the resolved clip to an output slot.
    def emit(self, input_var: str) -> str:
        return f"{input_var}.set_output({self.output_index})"


def connect(source: GraphNode,
            target: GraphNode,
            source_port: str = CLIP_PORT,
            target_port: str = CLIP_PORT,
            connection_id: Optional[str] = None) -> Connection:
    """Build a Connection from a named output of `source` to a named input of `target`."""
    out_conn = source.output_named(source_port)
    in_conn = target.input_named(target_port)
    if out_conn is None:
        raise ValueError(f"{source!r} has no output connector '{source_port}'")
    if in_conn is None:
        raise ValueError(f"{target!r} has no input connector '{target_port}'")
    logger.debug(f"Connecting '{source.id}.{source_port}' -> '{target.id}.{target_port}'")
    return Connection.create(out_conn, in_conn, connection_id=connection_id)
