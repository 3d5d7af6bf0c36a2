from __future__ import annotations

"""Base schema holding name-indexed relations, relation functions and sub-schemas."""

from typing import Any, Dict, List, MutableMapping, Optional, TypeVar

from ..expressions import Expression, Expressions
from ..protocols import QueryProvider, Table, TableFunction
from ..types import TypeFactory

K = TypeVar("K")
V = TypeVar("V")


def put_multi(mapping: MutableMapping[K, List[V]], key: K, value: V) -> None:
    """Append ``value`` to the list stored under ``key``."""
    mapping.setdefault(key, []).append(value)


class MapSchema:
    """Schema whose contents live in plain dictionaries.

    Subclasses populate :attr:`table_map` and :attr:`members_map` while they
    are constructed; consumers only read them afterwards.
    """

    def __init__(
        self,
        query_provider: Optional[QueryProvider],
        type_factory: TypeFactory,
        expression: Expression,
    ):
        self.query_provider = query_provider
        self.type_factory = type_factory
        self.expression = expression
        self.table_map: Dict[str, Table] = {}
        self.members_map: Dict[str, List[TableFunction]] = {}
        self.sub_schema_map: Dict[str, "MapSchema"] = {}

    def get_expression(self) -> Expression:
        return self.expression

    def get_query_provider(self) -> Optional[QueryProvider]:
        return self.query_provider

    def get_type_factory(self) -> TypeFactory:
        return self.type_factory

    # --- relations ---
    def get_table(self, name: str) -> Optional[Table]:
        return self.table_map.get(name)

    def get_table_functions(self, name: str) -> List[TableFunction]:
        return list(self.members_map.get(name, []))

    def table_names(self) -> List[str]:
        return list(self.table_map)

    def table_function_names(self) -> List[str]:
        return list(self.members_map)

    # --- sub-schemas ---
    def add_schema(self, name: str, schema: "MapSchema") -> None:
        self.sub_schema_map[name] = schema

    def get_sub_schema(self, name: str) -> Optional["MapSchema"]:
        return self.sub_schema_map.get(name)

    def sub_schema_expression(self, name: str) -> Expression:
        """Expression that reaches the sub-schema ``name`` from this schema."""
        return Expressions.call(self.expression, "get_sub_schema", [Expressions.constant(name)])

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(tables={self.table_names()}, "
            f"functions={self.table_function_names()}, schemas={list(self.sub_schema_map)})"
        )


def root_schema(type_factory: TypeFactory, query_provider: Any = None, name: str = "root") -> MapSchema:
    """An empty schema addressed by the parameter ``name``."""
    return MapSchema(query_provider, type_factory, Expressions.parameter(name))


__all__ = ["MapSchema", "put_multi", "root_schema"]
