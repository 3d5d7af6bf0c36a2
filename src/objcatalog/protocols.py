from __future__ import annotations

from typing import Any, List, Optional, Protocol, Sequence, runtime_checkable

from .expressions import Expression
from .linq import Enumerator
from .types import RelDataType


class QueryProvider(Protocol):
    """Engine-side handle that executes queries; opaque to the catalog."""

    def execute(self, expression: Expression, element_type: Any) -> Any: ...


@runtime_checkable
class Table(Protocol):
    element_type: Optional[Any]
    expression: Expression

    def enumerator(self) -> Enumerator[Any]: ...


@runtime_checkable
class Parameter(Protocol):
    ordinal: int
    name: str
    type: RelDataType


@runtime_checkable
class TableFunction(Protocol):
    element_type: Optional[Any]

    @property
    def parameters(self) -> List[Parameter]: ...

    def apply(self, arguments: Sequence[Any]) -> Table: ...


__all__ = [
    "QueryProvider",
    "Table",
    "Parameter",
    "TableFunction",
]
