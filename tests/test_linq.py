from __future__ import annotations

import array

import numpy as np
import pandas as pd
import pytest

from objcatalog.errors import NotEnumerableError, UnsupportedConversionError
from objcatalog.linq import Enumerable, Enumerator, as_enumerable, to_enumerable, to_enumerator


def test_list_enumerates_in_order():
    assert to_enumerable([3, 1, 2]).to_list() == [3, 1, 2]


def test_array_view_reflects_current_contents():
    values = ["a", "b"]
    enumerable = to_enumerable(values)
    values.append("c")

    assert list(enumerable) == ["a", "b", "c"]


def test_enumerator_cursor_protocol():
    enumerator = to_enumerable(("x", "y")).enumerator()

    with pytest.raises(RuntimeError):
        enumerator.current

    assert enumerator.move_next() is True
    assert enumerator.current == "x"
    assert enumerator.move_next() is True
    assert enumerator.current == "y"
    assert enumerator.move_next() is False
    with pytest.raises(RuntimeError):
        enumerator.current


def test_reset_rewinds_over_current_contents():
    values = [1, 2]
    enumerator = to_enumerable(values).enumerator()
    assert list(enumerator) == [1, 2]

    values.append(3)
    enumerator.reset()

    assert list(enumerator) == [1, 2, 3]


def test_close_stops_enumeration_and_closes_generator():
    state = {"closed": False}

    def rows():
        try:
            yield 1
            yield 2
        finally:
            state["closed"] = True

    with Enumerator(rows) as enumerator:
        assert enumerator.move_next()
        assert enumerator.current == 1

    assert state["closed"] is True
    assert enumerator.move_next() is False


def test_each_enumerator_is_independent():
    enumerable = as_enumerable([1, 2, 3])
    first = enumerable.enumerator()
    second = enumerable.enumerator()

    assert next(first) == 1
    assert next(first) == 2
    assert next(second) == 1


def test_one_shot_iterable_is_not_restartable():
    enumerable = to_enumerable(iter([1, 2]))

    assert enumerable.to_list() == [1, 2]
    assert enumerable.to_list() == []


def test_generic_iterables_are_wrapped():
    assert sorted(to_enumerable({3, 1, 2})) == [1, 2, 3]
    assert list(to_enumerable(range(3))) == [0, 1, 2]
    assert isinstance(to_enumerable(x for x in "ab"), Enumerable)


@pytest.mark.parametrize(
    "value",
    [
        array.array("i", [3, 1, 2]),
        b"abc",
        bytearray(b"abc"),
        memoryview(b"abc"),
        np.array([1.0, 2.0]),
    ],
)
def test_primitive_arrays_are_unsupported(value):
    with pytest.raises(UnsupportedConversionError) as excinfo:
        to_enumerable(value)
    assert excinfo.value.value_type is type(value)


def test_object_ndarray_is_a_reference_array():
    values = np.array(["a", None, 3], dtype=object)

    assert to_enumerable(values).to_list() == ["a", None, 3]


def test_dataframe_enumerates_rows():
    frame = pd.DataFrame({"id": [1, 2], "name": ["Bill", "Eric"]})

    rows = to_enumerable(frame).to_list()

    assert [(row.id, row.name) for row in rows] == [(1, "Bill"), (2, "Eric")]


@pytest.mark.parametrize("value", [42, "text", None, object()])
def test_non_collections_are_not_enumerable(value):
    with pytest.raises(NotEnumerableError) as excinfo:
        to_enumerable(value)
    assert excinfo.value.value_type is type(value)
    assert type(value).__qualname__ in str(excinfo.value)


def test_to_enumerator_returns_fresh_cursor():
    enumerator = to_enumerator(["a"])

    assert isinstance(enumerator, Enumerator)
    assert list(enumerator) == ["a"]
