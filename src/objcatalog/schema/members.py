from __future__ import annotations

"""Descriptor table of the public members of a host class.

The table is computed once per class (in a bounded cache) and reused by every schema built over an
instance of that class. Instance attributes are the only members that depend
on the instance; :func:`instance_fields` reads them separately.
"""

import functools
import inspect
import logging
import typing
from dataclasses import dataclass
from typing import Any, Callable, List, Literal, Sequence, Tuple, get_origin

from ..types import type_hints

logger = logging.getLogger(__name__)

FieldKind = Literal["annotation", "class", "property", "instance"]


@dataclass(frozen=True)
class FieldMember:
    name: str
    declared_type: Any
    kind: FieldKind
    owner: type

    def read(self, target: Any) -> Any:
        return getattr(target, self.name)

    def __str__(self) -> str:
        return f"field {self.owner.__qualname__}.{self.name}"


@dataclass(frozen=True)
class MethodMember:
    name: str
    function: Callable[..., Any]
    parameter_types: Tuple[Any, ...]
    return_type: Any
    owner: type
    required_parameters: int = 0

    def accepts(self, argument_count: int) -> bool:
        return self.required_parameters <= argument_count <= len(self.parameter_types)

    def invoke(self, target: Any, arguments: Sequence[Any]) -> Any:
        return getattr(target, self.name)(*arguments)

    def __str__(self) -> str:
        params = ", ".join(_type_label(t) for t in self.parameter_types)
        return f"method {self.owner.__qualname__}.{self.name}({params})"


@dataclass(frozen=True)
class MemberTable:
    owner: type
    fields: Tuple[FieldMember, ...] = ()
    methods: Tuple[MethodMember, ...] = ()

    def field_names(self) -> List[str]:
        return [f.name for f in self.fields]

    def method_names(self) -> List[str]:
        return list(dict.fromkeys(m.name for m in self.methods))


def _type_label(python_type: Any) -> str:
    if isinstance(python_type, type):
        return python_type.__name__
    return str(python_type).replace("typing.", "")


def is_public(name: str) -> bool:
    return not name.startswith("_")


def _unwrap_classvar(hint: Any) -> Any:
    if get_origin(hint) is typing.ClassVar:
        args = typing.get_args(hint)
        return args[0] if args else Any
    return hint


def _is_class_value(value: Any) -> bool:
    return not callable(value) and not hasattr(type(value), "__get__")


def _method_members(owner: type, name: str, raw: Any) -> List[MethodMember]:
    bound_first = not isinstance(raw, staticmethod)
    function = raw.__func__ if isinstance(raw, (staticmethod, classmethod)) else raw
    signatures = typing.get_overloads(function) or [function]
    members = []
    for sig_function in signatures:
        hints = type_hints(sig_function)
        params = [
            p
            for p in inspect.signature(sig_function).parameters.values()
            if p.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
        ]
        if bound_first and params:
            params = params[1:]
        members.append(
            MethodMember(
                name=name,
                function=sig_function,
                parameter_types=tuple(hints.get(p.name, Any) for p in params),
                return_type=hints.get("return", Any),
                owner=owner,
                required_parameters=sum(1 for p in params if p.default is inspect.Parameter.empty),
            )
        )
    return members


# Bounded so classes created at runtime are eventually released.
MEMBER_TABLE_CACHE_SIZE = 256


@functools.lru_cache(maxsize=MEMBER_TABLE_CACHE_SIZE)
def describe_members(owner: type) -> MemberTable:
    """Scan ``owner`` for public annotated attributes, class-level values, properties and methods."""
    hints = type_hints(owner)
    fields: List[FieldMember] = []
    methods: List[MethodMember] = []
    seen: set[str] = set()

    for name, value in inspect.getmembers_static(owner):
        if not is_public(name):
            continue
        if isinstance(value, (property, functools.cached_property)):
            getter = value.fget if isinstance(value, property) else value.func
            declared = type_hints(getter).get("return", Any) if getter is not None else Any
            fields.append(FieldMember(name=name, declared_type=declared, kind="property", owner=owner))
            seen.add(name)
        elif isinstance(value, (staticmethod, classmethod)) or inspect.isfunction(value):
            methods.extend(_method_members(owner, name, value))
            seen.add(name)
        elif name not in hints and _is_class_value(value):
            fields.append(FieldMember(name=name, declared_type=type(value), kind="class", owner=owner))
            seen.add(name)

    annotated: List[FieldMember] = []
    for name, hint in hints.items():
        if is_public(name) and name not in seen:
            annotated.append(
                FieldMember(name=name, declared_type=_unwrap_classvar(hint), kind="annotation", owner=owner)
            )
            seen.add(name)

    table = MemberTable(owner=owner, fields=tuple(annotated + fields), methods=tuple(methods))
    logger.debug(
        "Described %s: fields=%s methods=%s",
        owner.__qualname__,
        table.field_names(),
        table.method_names(),
    )
    return table


def instance_fields(target: Any, table: MemberTable) -> List[FieldMember]:
    """Public attributes set on ``target`` itself that the class table does not describe."""
    known = set(table.field_names()) | set(table.method_names())
    attrs = getattr(target, "__dict__", None) or {}
    return [
        FieldMember(name=name, declared_type=type(value), kind="instance", owner=type(target))
        for name, value in attrs.items()
        if is_public(name) and name not in known
    ]


__all__ = [
    "FieldKind",
    "FieldMember",
    "MethodMember",
    "MemberTable",
    "MEMBER_TABLE_CACHE_SIZE",
    "describe_members",
    "instance_fields",
    "is_public",
    "type_hints",
]
