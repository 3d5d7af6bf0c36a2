from __future__ import annotations

"""Pull-style enumerators and the adapter that turns host values into them."""

import array
import logging
from collections.abc import Iterable
from typing import Any, Callable, Generic, Iterator, List, Optional, TypeVar

import numpy as np
import pandas as pd

from .errors import NotEnumerableError, UnsupportedConversionError

logger = logging.getLogger(__name__)

T = TypeVar("T")

_UNSET = object()

# Arrays whose elements are machine values rather than object references.
PRIMITIVE_ARRAY_TYPES = (array.array, bytes, bytearray, memoryview)
REFERENCE_ARRAY_TYPES = (list, tuple)


class Enumerator(Generic[T]):
    """Cursor over a sequence.

    ``move_next`` advances and reports whether an element is available;
    ``current`` returns it. ``reset`` starts over from a fresh iterator, so an
    array-backed enumerator observes the array's contents at that moment.
    Also usable as a plain Python iterator.
    """

    def __init__(self, factory: Callable[[], Iterator[T]]):
        self._factory = factory
        self._iterator: Optional[Iterator[T]] = None
        self._current: Any = _UNSET
        self._closed = False

    def move_next(self) -> bool:
        if self._closed:
            return False
        if self._iterator is None:
            self._iterator = self._factory()
        try:
            self._current = next(self._iterator)
        except StopIteration:
            self._current = _UNSET
            return False
        return True

    @property
    def current(self) -> T:
        if self._current is _UNSET:
            raise RuntimeError("Enumerator is not positioned on an element")
        return self._current

    def reset(self) -> None:
        self._release()
        self._closed = False

    def close(self) -> None:
        self._release()
        self._closed = True

    def _release(self) -> None:
        close = getattr(self._iterator, "close", None)
        if callable(close):
            close()
        self._iterator = None
        self._current = _UNSET

    def __iter__(self) -> "Enumerator[T]":
        return self

    def __next__(self) -> T:
        if self.move_next():
            return self._current
        raise StopIteration

    def __enter__(self) -> "Enumerator[T]":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


class Enumerable(Generic[T]):
    """A sequence that hands out a fresh :class:`Enumerator` per request."""

    def __init__(self, factory: Callable[[], Iterator[T]]):
        self._factory = factory

    def enumerator(self) -> Enumerator[T]:
        return Enumerator(self._factory)

    def __iter__(self) -> Iterator[T]:
        return self.enumerator()

    def to_list(self) -> List[T]:
        return list(self)


def as_enumerable(source: Iterable) -> Enumerable[Any]:
    """Wrap a list, tuple or other iterable without copying it."""
    return Enumerable(lambda: iter(source))


def is_primitive_array(value: Any) -> bool:
    if isinstance(value, np.ndarray):
        return value.dtype != np.dtype(object)
    return isinstance(value, PRIMITIVE_ARRAY_TYPES)


def is_reference_array(value: Any) -> bool:
    if isinstance(value, np.ndarray):
        return value.dtype == np.dtype(object)
    return isinstance(value, REFERENCE_ARRAY_TYPES)


def to_enumerable(value: Any) -> Enumerable[Any]:
    """Convert a runtime value read from a host object into an :class:`Enumerable`.

    Dispatch follows the value's concrete shape: arrays of references are
    viewed in place, arrays of primitives are rejected, data frames enumerate
    their rows and any other iterable is iterated as-is.
    """
    if is_reference_array(value):
        return as_enumerable(value)
    if is_primitive_array(value):
        raise UnsupportedConversionError(type(value))
    if isinstance(value, pd.DataFrame):
        return Enumerable(lambda: value.itertuples(index=False))
    if isinstance(value, Iterable) and not isinstance(value, str):
        return as_enumerable(value)
    logger.debug("Value of type %s is not enumerable", type(value).__name__)
    raise NotEnumerableError(type(value))


def to_enumerator(value: Any) -> Enumerator[Any]:
    """Shorthand for ``to_enumerable(value).enumerator()``."""
    return to_enumerable(value).enumerator()


__all__ = [
    "Enumerator",
    "Enumerable",
    "as_enumerable",
    "is_primitive_array",
    "is_reference_array",
    "to_enumerable",
    "to_enumerator",
    "PRIMITIVE_ARRAY_TYPES",
    "REFERENCE_ARRAY_TYPES",
]
