"""Schemas that bind host objects into catalogs of relations."""

from .base import MapSchema, put_multi, root_schema
from .members import FieldMember, MemberTable, MethodMember, describe_members, instance_fields
from .reflective import (
    FieldTable,
    MethodParameter,
    MethodTable,
    MethodTableFunction,
    ReflectiveSchema,
    ReflectiveTable,
)

__all__ = [
    "MapSchema",
    "put_multi",
    "root_schema",
    "FieldMember",
    "MethodMember",
    "MemberTable",
    "describe_members",
    "instance_fields",
    "ReflectiveSchema",
    "ReflectiveTable",
    "FieldTable",
    "MethodTable",
    "MethodTableFunction",
    "MethodParameter",
]
