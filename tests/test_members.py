from __future__ import annotations

import functools
import gc
import weakref
from typing import Any, ClassVar, Optional

from objcatalog.schema.members import MEMBER_TABLE_CACHE_SIZE, describe_members, instance_fields


class Base:
    shared: ClassVar[list[str]] = ["a"]

    def inherited(self) -> list[int]:
        return [1]


class Host(Base):
    rows: list[int]
    note: Optional[str]

    def __init__(self):
        self.rows = [1]
        self.note = None
        self.extra = {"k": 1}
        self._private = [2]

    @property
    def doubled(self) -> list[int]:
        return [r * 2 for r in self.rows]

    @functools.cached_property
    def cached(self) -> tuple[int, ...]:
        return tuple(self.rows)

    def query(self, limit: int, *more: Any, flag: bool = False) -> list[int]:
        return self.rows[:limit]

    def untyped(self, value):
        return [value]

    def __len__(self) -> int:
        return len(self.rows)


def test_describe_members_splits_fields_and_methods():
    table = describe_members(Host)

    assert table.owner is Host
    # Annotations of base classes come first.
    assert table.field_names() == ["shared", "rows", "note", "cached", "doubled"]
    assert table.method_names() == ["inherited", "query", "untyped"]


def test_field_kinds_and_declared_types():
    fields = {f.name: f for f in describe_members(Host).fields}

    assert fields["rows"].kind == "annotation"
    assert fields["rows"].declared_type == list[int]
    assert fields["shared"].declared_type == list[str]
    assert fields["doubled"].kind == "property"
    assert fields["cached"].declared_type == tuple[int, ...]


def test_method_signature_ignores_receiver_and_varargs():
    methods = {m.name: m for m in describe_members(Host).methods}

    query = methods["query"]
    assert query.parameter_types == (int,)
    assert query.return_type == list[int]
    assert query.required_parameters == 1
    assert methods["untyped"].parameter_types == (Any,)
    assert methods["untyped"].return_type is Any
    assert str(query) == "method Host.query(int)"


def test_table_is_built_once_per_class():
    assert describe_members(Host) is describe_members(Host)


def test_instance_fields_are_the_undescribed_public_attributes():
    host = Host()
    extra = instance_fields(host, describe_members(Host))

    assert [(f.name, f.declared_type, f.kind) for f in extra] == [("extra", dict, "instance")]
    assert extra[0].read(host) == {"k": 1}


class ClassLevel:
    nums = [3, 1, 2]
    label = "x"
    limit: int = 3

    def helper(self) -> list[int]:
        return self.nums


def test_unannotated_class_values_are_fields():
    fields = {f.name: f for f in describe_members(ClassLevel).fields}

    assert list(fields) == ["limit", "label", "nums"]
    assert (fields["nums"].kind, fields["nums"].declared_type) == ("class", list)
    assert (fields["label"].kind, fields["label"].declared_type) == ("class", str)
    assert (fields["limit"].kind, fields["limit"].declared_type) == ("annotation", int)
    assert describe_members(ClassLevel).method_names() == ["helper"]


def test_object_contributes_no_members():
    table = describe_members(object)

    assert table.fields == ()
    assert table.methods == ()


def test_member_tables_of_runtime_classes_are_released():
    first = type("Dynamic0", (), {"rows": [0]})
    describe_members(first)
    ref = weakref.ref(first)
    del first

    for index in range(1, MEMBER_TABLE_CACHE_SIZE + 1):
        describe_members(type(f"Dynamic{index}", (), {"rows": [index]}))
    gc.collect()

    assert ref() is None
    assert describe_members.cache_info().currsize <= MEMBER_TABLE_CACHE_SIZE
