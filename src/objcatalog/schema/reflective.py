from __future__ import annotations

"""Schema that exposes the public fields and methods of a Python object."""

import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence

from ..errors import DuplicateRelationError, MemberAccessError
from ..expressions import Expression, Expressions
from ..linq import Enumerator, to_enumerator
from ..protocols import QueryProvider, Table, TableFunction
from ..settings import CatalogSettings
from ..types import PythonTypeFactory, RelDataType, TypeFactory, deduce_element_type
from .base import MapSchema, put_multi
from .members import FieldMember, MethodMember, describe_members, instance_fields

logger = logging.getLogger(__name__)


class ReflectiveTable:
    """Relation whose rows are reached through the schema's host object."""

    def __init__(self, schema: "ReflectiveSchema", element_type: Optional[Any], expression: Expression):
        self.schema = schema
        self.query_provider = schema.query_provider
        self.element_type = element_type
        self.expression = expression

    @property
    def data_context(self) -> "ReflectiveSchema":
        return self.schema

    @property
    def row_type(self) -> RelDataType:
        return self.schema.type_factory.create_type(self.element_type)

    def get_element_type(self) -> Optional[Any]:
        return self.element_type

    def get_expression(self) -> Expression:
        return self.expression

    def enumerator(self) -> Enumerator[Any]:  # pragma: no cover - abstract
        raise NotImplementedError

    def __iter__(self) -> Enumerator[Any]:
        return self.enumerator()


class FieldTable(ReflectiveTable):
    """Live view of one field: every enumerator re-reads the field from the host."""

    def __init__(self, schema: "ReflectiveSchema", member: FieldMember, element_type: Any):
        super().__init__(schema, element_type, Expressions.field(schema.target_expression(), member.name))
        self.member = member

    def enumerator(self) -> Enumerator[Any]:
        try:
            value = self.member.read(self.schema.target)
        except Exception as exc:
            raise MemberAccessError(self.member, exc) from exc
        return to_enumerator(value)

    def __repr__(self) -> str:
        return f"FieldTable(field={self.member.name!r})"


class MethodTable(ReflectiveTable):
    """Relation produced by applying a :class:`MethodTableFunction`."""

    def __init__(
        self,
        schema: "ReflectiveSchema",
        element_type: Optional[Any],
        expression: Expression,
        source: Callable[[], Any],
    ):
        super().__init__(schema, element_type, expression)
        self._source = source

    def enumerator(self) -> Enumerator[Any]:
        return to_enumerator(self._source())

    def __repr__(self) -> str:
        return f"MethodTable(expression={str(self.expression)!r})"


@dataclass(frozen=True)
class MethodParameter:
    ordinal: int
    name: str
    type: RelDataType


class MethodTableFunction:
    """Relation generator backed by one method signature of the host."""

    def __init__(self, schema: "ReflectiveSchema", member: MethodMember):
        self.schema = schema
        self.member = member
        self.element_type = deduce_element_type(member.return_type)

    @property
    def parameters(self) -> List[MethodParameter]:
        factory = self.schema.type_factory
        return [
            MethodParameter(ordinal=index, name=f"arg{index}", type=factory.create_type(param_type))
            for index, param_type in enumerate(self.member.parameter_types)
        ]

    def get_parameters(self) -> List[MethodParameter]:
        return self.parameters

    def get_element_type(self) -> Optional[Any]:
        return self.element_type

    def apply(self, arguments: Sequence[Any]) -> MethodTable:
        """Invoke the method with ``arguments`` and wrap the result as a relation.

        With the default ``method_results="capture"`` the method runs once,
        here, and every enumerator of the returned relation replays that
        result. With ``"reinvoke"`` each enumerator calls the method again.
        The relation's expression always describes the call itself.
        """
        args = list(arguments)
        if not self.member.accepts(len(args)):
            raise TypeError(
                f"{self.member} takes {len(self.member.parameter_types)} argument(s), got {len(args)}"
            )
        expression = Expressions.call(
            self.schema.target_expression(),
            self.member.name,
            [Expressions.constant(arg) for arg in args],
        )
        if self.schema.settings.method_results == "reinvoke":
            source: Callable[[], Any] = lambda: self._invoke(args)
        else:
            result = self._invoke(args)
            source = lambda: result
        return MethodTable(self.schema, self.element_type, expression, source)

    def _invoke(self, args: List[Any]) -> Any:
        logger.debug("Invoking %s with %d argument(s)", self.member, len(args))
        try:
            return self.member.invoke(self.schema.target, args)
        except Exception as exc:
            raise MemberAccessError(self.member, exc) from exc

    def __repr__(self) -> str:
        return f"MethodTableFunction(method={str(self.member)!r})"


class ReflectiveSchema(MapSchema):
    """Catalog of the public fields and methods of ``target``.

    Every public field whose declared type is a collection becomes a
    :class:`FieldTable`; every public method becomes one
    :class:`MethodTableFunction` per signature, appended under the method's
    name. The schema keeps a reference to ``target`` and never copies it.
    """

    def __init__(
        self,
        target: Any,
        type_factory: Optional[TypeFactory] = None,
        expression: Optional[Expression] = None,
        query_provider: Optional[QueryProvider] = None,
        settings: Optional[CatalogSettings] = None,
    ):
        super().__init__(
            query_provider,
            type_factory or PythonTypeFactory(),
            expression if expression is not None else Expressions.parameter("root"),
        )
        self.target = target
        self.settings = settings or CatalogSettings()
        self.members = describe_members(type(target))

        fields = [
            member
            for member in self.members.fields
            if self.settings.include_properties or member.kind != "property"
        ]
        if self.settings.include_instance_attributes:
            fields.extend(instance_fields(target, self.members))

        for member in fields:
            element_type = deduce_element_type(member.declared_type)
            if element_type is None:
                logger.debug("Skipping %s: %r is not a collection", member, member.declared_type)
                continue
            self.add_table(member.name, FieldTable(self, member, element_type))

        for member in self.members.methods:
            self.add_table_function(member.name, MethodTableFunction(self, member))

        logger.info(
            "ReflectiveSchema over %s: %d table(s), %d table function name(s)",
            type(target).__qualname__,
            len(self.table_map),
            len(self.members_map),
        )

    def target_expression(self) -> Expression:
        """Expression that evaluates to the host object."""
        return Expressions.field(self.expression, "target")

    def add_table(self, name: str, table: Table) -> None:
        if name in self.table_map:
            if self.settings.duplicate_fields == "error":
                raise DuplicateRelationError(name)
            logger.warning("Relation %r redefined; keeping the later definition", name)
        self.table_map[name] = table

    def add_table_function(self, name: str, function: TableFunction) -> None:
        put_multi(self.members_map, name, function)

    def __repr__(self) -> str:
        return f"ReflectiveSchema(target={type(self.target).__qualname__}, tables={self.table_names()})"


__all__ = [
    "ReflectiveSchema",
    "ReflectiveTable",
    "FieldTable",
    "MethodTable",
    "MethodTableFunction",
    "MethodParameter",
]
