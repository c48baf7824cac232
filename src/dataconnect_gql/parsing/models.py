"""Records produced by the GraphQL scanners."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

# Type recorded for a selection whose nested fields are not tracked.
OBJECT_TYPE = "Object"
# Type recorded for a simple field without an explicit annotation.
DEFAULT_SCALAR_TYPE = "String"


class OperationKind(Enum):
    """GraphQL operation kinds."""

    QUERY = "query"
    MUTATION = "mutation"
    SUBSCRIPTION = "subscription"


@dataclass(frozen=True)
class Field:
    """A selected field of an operation or a member of a schema type.

    ``selections`` holds the nested fields of a multi-line selection set;
    ``type`` then carries the synthesized nested-type name. Nested
    selections do not take part in equality.
    """

    name: str
    type: str
    selections: tuple[Field, ...] = field(default=(), compare=False, repr=False)

    @property
    def is_nested(self) -> bool:
        return bool(self.selections)


@dataclass(frozen=True)
class Variable:
    """A ``$name: Type`` declaration."""

    name: str
    type: str


@dataclass(frozen=True)
class OperationHeader:
    """Kind and name matched on an operation header line."""

    kind: OperationKind
    name: str


@dataclass(frozen=True)
class Operation:
    """A parsed query, mutation or subscription."""

    kind: OperationKind
    name: str
    variables: tuple[Variable, ...] = ()
    fields: tuple[Field, ...] = ()


@dataclass
class TypeDefinition:
    """A schema ``type Name { ... }`` block."""

    name: str
    fields: list[Field] = field(default_factory=list)
    is_table: bool = False


class NestedFieldRegistry:
    """Nested selection fields keyed by synthesized type name."""

    def __init__(self) -> None:
        self._fields: dict[str, list[Field]] = {}

    def register(self, type_name: str, fields: list[Field]) -> None:
        """Register the fields of a nested selection, replacing any earlier entry."""
        self._fields[type_name] = list(fields)

    def get(self, type_name: str) -> list[Field] | None:
        """Get the fields of a nested selection by synthesized name."""
        found = self._fields.get(type_name)
        return list(found) if found is not None else None

    def names(self) -> list[str]:
        return list(self._fields)

    def __contains__(self, type_name: object) -> bool:
        return type_name in self._fields

    def __len__(self) -> int:
        return len(self._fields)
