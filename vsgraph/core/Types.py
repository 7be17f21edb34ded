from enum import Enum, auto


class NodeKind(Enum):
    SOURCE = "Source"
    FILTER = "Filter"
    OUTPUT = "Output"


class ConnectorDirection(Enum):
    INPUT = auto()
    OUTPUT = auto()


class ParameterType(Enum):
    STRING = "string"
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    CHOICE = "choice"

    @staticmethod
    def from_name(name: str) -> 'ParameterType':
        # Saved graphs only carry the legacy lowercase type name
        for member in ParameterType:
            if member.value == name:
                return member
        return ParameterType.STRING
