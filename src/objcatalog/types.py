from __future__ import annotations

"""Relational types derived from Python types, and element-type deduction."""

import collections.abc
import dataclasses
import datetime as dt
import inspect
import logging
import sys
import types
import typing
from decimal import Decimal
from enum import Enum
from typing import (
    Annotated,
    Any,
    ClassVar,
    Dict,
    List,
    Optional,
    Protocol,
    Tuple,
    Union,
    get_args,
    get_origin,
)

import numpy as np
from pydantic import BaseModel, ConfigDict

from .linq import PRIMITIVE_ARRAY_TYPES

logger = logging.getLogger(__name__)

class SqlTypeName(str, Enum):
    BOOLEAN = "BOOLEAN"
    BIGINT = "BIGINT"
    DOUBLE = "DOUBLE"
    DECIMAL = "DECIMAL"
    VARCHAR = "VARCHAR"
    VARBINARY = "VARBINARY"
    DATE = "DATE"
    TIMESTAMP = "TIMESTAMP"
    TIME = "TIME"
    STRUCT = "STRUCT"
    ANY = "ANY"


class RelDataTypeField(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    index: int
    type: "RelDataType"


class RelDataType(BaseModel):
    """Relational type of a column, parameter or row."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    type_name: SqlTypeName
    nullable: bool = False
    python_type: Any = None
    fields: Tuple[RelDataTypeField, ...] = ()

    @property
    def is_struct(self) -> bool:
        return self.type_name == SqlTypeName.STRUCT

    def field_names(self) -> List[str]:
        return [f.name for f in self.fields]

    def get_field(self, name: str) -> Optional[RelDataTypeField]:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def __str__(self) -> str:
        if self.is_struct:
            inner = ", ".join(f"{f.name} {f.type}" for f in self.fields)
            text = f"STRUCT({inner})"
        else:
            text = self.type_name.value
        return text if self.nullable else f"{text} NOT NULL"


RelDataTypeField.model_rebuild()
RelDataType.model_rebuild()


class TypeFactory(Protocol):
    def create_type(self, python_type: Any) -> RelDataType: ...

    def create_struct_type(self, python_type: Any) -> RelDataType: ...


# Order matters: bool before int, datetime before date.
_SCALAR_TYPES: Tuple[Tuple[Tuple[type, ...], SqlTypeName], ...] = (
    ((bool, np.bool_), SqlTypeName.BOOLEAN),
    ((int, np.integer), SqlTypeName.BIGINT),
    ((float, np.floating), SqlTypeName.DOUBLE),
    ((Decimal,), SqlTypeName.DECIMAL),
    ((str,), SqlTypeName.VARCHAR),
    ((bytes, bytearray), SqlTypeName.VARBINARY),
    ((dt.datetime,), SqlTypeName.TIMESTAMP),
    ((dt.date,), SqlTypeName.DATE),
    ((dt.time,), SqlTypeName.TIME),
)


def unwrap_optional(python_type: Any) -> Tuple[Any, bool]:
    """Return ``(X, True)`` for ``Optional[X]`` / ``X | None``, else ``(python_type, False)``."""
    origin = get_origin(python_type)
    if origin is Union or origin is types.UnionType:
        args = get_args(python_type)
        non_none = [a for a in args if a is not type(None)]
        if len(non_none) == 1 and len(args) == 2:
            return non_none[0], True
    return python_type, False


def type_hints(obj: Any) -> Dict[str, Any]:
    """Resolved annotations of a class or function.

    When ``typing.get_type_hints`` cannot resolve every annotation at once
    (typically a name imported only under ``TYPE_CHECKING``), each annotation
    is resolved on its own and only the unresolvable ones become ``Any``.
    """
    try:
        return typing.get_type_hints(obj)
    except (NameError, TypeError):
        pass
    hints: Dict[str, Any] = {}
    for annotations, globalns, localns in _annotation_scopes(obj):
        for name, hint in annotations.items():
            hints[name] = _resolve_hint(obj, name, hint, globalns, localns)
    return hints


def _annotation_scopes(obj: Any):
    if isinstance(obj, type):
        # Base classes first, as typing.get_type_hints orders them.
        for base in reversed(obj.__mro__):
            module = sys.modules.get(base.__module__)
            yield inspect.get_annotations(base), getattr(module, "__dict__", {}), dict(vars(base))
    else:
        globalns = getattr(inspect.unwrap(obj), "__globals__", {})
        yield inspect.get_annotations(obj), globalns, None


def _resolve_hint(
    obj: Any,
    name: str,
    hint: Any,
    globalns: Dict[str, Any],
    localns: Optional[Dict[str, Any]],
) -> Any:
    if hint is None:
        return type(None)
    if isinstance(hint, str):
        try:
            hint = eval(hint, globalns, localns)
        except (NameError, AttributeError, SyntaxError, TypeError) as exc:
            logger.debug("Could not resolve annotation %r of %r (%s); using Any", name, obj, exc)
            return Any
    if get_origin(hint) is Annotated:
        return get_args(hint)[0]
    return hint


def is_namedtuple_type(python_type: Any) -> bool:
    return inspect.isclass(python_type) and issubclass(python_type, tuple) and hasattr(python_type, "_fields")


def deduce_element_type(declared_type: Any) -> Optional[Any]:
    """Deduce the element type of a collection from its declared type.

    Lists and homogeneous tuples yield their component type; untyped arrays
    and ndarrays yield ``object``; primitive arrays yield ``int``. Any other
    iterable yields ``object``. Returns ``None`` when the declared type is
    not a collection.
    """
    declared_type, _ = unwrap_optional(declared_type)
    if declared_type is None or declared_type is Any:
        return None
    origin = get_origin(declared_type) or declared_type
    if not inspect.isclass(origin):
        return None
    args = get_args(declared_type)

    if issubclass(origin, list):
        return args[0] if len(args) == 1 else object
    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return args[0]
        return object
    if issubclass(origin, np.ndarray):
        return object
    if issubclass(origin, PRIMITIVE_ARRAY_TYPES):
        return int
    # Records and strings iterate, but are not collections.
    if issubclass(origin, (str, BaseModel)) or is_namedtuple_type(origin):
        return None
    if issubclass(origin, collections.abc.Iterable):
        return object
    return None


def _struct_members(python_type: type) -> Dict[str, Any]:
    if isinstance(python_type, type) and issubclass(python_type, BaseModel):
        return {name: info.annotation for name, info in python_type.model_fields.items()}
    hints = type_hints(python_type)
    if dataclasses.is_dataclass(python_type):
        return {f.name: hints.get(f.name, Any) for f in dataclasses.fields(python_type)}
    if is_namedtuple_type(python_type):
        return {name: hints.get(name, Any) for name in python_type._fields}
    return {
        name: hint
        for name, hint in hints.items()
        if not name.startswith("_") and get_origin(hint) is not ClassVar
    }


class PythonTypeFactory:
    """Default :class:`TypeFactory` mapping Python annotations to relational types."""

    def create_type(self, python_type: Any) -> RelDataType:
        return self._create(python_type, ())

    def create_struct_type(self, python_type: Any) -> RelDataType:
        return self._create_struct(python_type, False, ())

    def _create(self, python_type: Any, seen: Tuple[Any, ...]) -> RelDataType:
        python_type, nullable = unwrap_optional(python_type)
        if python_type in (Any, object, inspect.Parameter.empty, None):
            return RelDataType(type_name=SqlTypeName.ANY, nullable=True, python_type=object)
        if inspect.isclass(python_type):
            for classes, type_name in _SCALAR_TYPES:
                if issubclass(python_type, classes):
                    return RelDataType(type_name=type_name, nullable=nullable, python_type=python_type)
            if python_type not in seen and _is_struct_like(python_type):
                return self._create_struct(python_type, nullable, seen)
        return RelDataType(type_name=SqlTypeName.ANY, nullable=True, python_type=python_type)

    def _create_struct(self, python_type: Any, nullable: bool, seen: Tuple[Any, ...]) -> RelDataType:
        seen = seen + (python_type,)
        fields = tuple(
            RelDataTypeField(name=name, index=index, type=self._create(hint, seen))
            for index, (name, hint) in enumerate(_struct_members(python_type).items())
        )
        return RelDataType(
            type_name=SqlTypeName.STRUCT,
            nullable=nullable,
            python_type=python_type,
            fields=fields,
        )


def _is_struct_like(python_type: type) -> bool:
    if issubclass(python_type, BaseModel) or dataclasses.is_dataclass(python_type):
        return True
    if is_namedtuple_type(python_type):
        return True
    if python_type.__module__ == "builtins" or issubclass(python_type, collections.abc.Iterable):
        return False
    return bool(_struct_members(python_type))


__all__ = [
    "SqlTypeName",
    "RelDataType",
    "RelDataTypeField",
    "TypeFactory",
    "PythonTypeFactory",
    "deduce_element_type",
    "unwrap_optional",
    "is_namedtuple_type",
    "type_hints",
]
