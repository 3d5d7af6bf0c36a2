from __future__ import annotations

from typing import Any, Optional


class CatalogError(Exception):
    """Base class for errors raised while binding or enumerating a host object."""


class UnsupportedConversionError(CatalogError):
    def __init__(self, value_type: type):
        super().__init__(f"Cannot enumerate array of primitives {value_type.__name__!r}; no adapter exists")
        self.value_type = value_type


class NotEnumerableError(CatalogError):
    def __init__(self, value_type: type):
        super().__init__(f"Cannot convert {value_type.__module__}.{value_type.__qualname__} into an Enumerable")
        self.value_type = value_type


class MemberAccessError(CatalogError):
    def __init__(self, member: Any, cause: Optional[BaseException] = None):
        msg = f"Error while accessing {member}"
        if cause is not None:
            msg += f": {cause!r}"
        super().__init__(msg)
        self.member = member
        self.cause = cause


class DuplicateRelationError(CatalogError):
    def __init__(self, name: str):
        super().__init__(f"Relation {name!r} is already defined in this schema")
        self.name = name


__all__ = [
    "CatalogError",
    "UnsupportedConversionError",
    "NotEnumerableError",
    "MemberAccessError",
    "DuplicateRelationError",
]
