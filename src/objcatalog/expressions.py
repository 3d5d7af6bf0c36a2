from __future__ import annotations

"""Symbolic expressions that compiled query code re-emits to reach host data.

An expression tree is rooted at a :class:`ParameterExpression` (usually the
root schema) and evaluated against a mapping of parameter bindings. ``str()``
renders the tree as Python source.
"""

from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence, Tuple


class Expression:
    def evaluate(self, bindings: Mapping[str, Any]) -> Any:  # pragma: no cover - abstract
        raise NotImplementedError


@dataclass(frozen=True)
class ParameterExpression(Expression):
    name: str

    def evaluate(self, bindings: Mapping[str, Any]) -> Any:
        if self.name not in bindings:
            raise KeyError(f"Unbound parameter {self.name!r}")
        return bindings[self.name]

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class ConstantExpression(Expression):
    value: Any

    def evaluate(self, bindings: Mapping[str, Any]) -> Any:
        return self.value

    def __str__(self) -> str:
        return repr(self.value)


@dataclass(frozen=True)
class FieldExpression(Expression):
    target: Expression
    name: str

    def evaluate(self, bindings: Mapping[str, Any]) -> Any:
        return getattr(self.target.evaluate(bindings), self.name)

    def __str__(self) -> str:
        return f"{self.target}.{self.name}"


@dataclass(frozen=True)
class MethodCallExpression(Expression):
    target: Expression
    method: str
    arguments: Tuple[Expression, ...] = field(default_factory=tuple)

    def evaluate(self, bindings: Mapping[str, Any]) -> Any:
        receiver = self.target.evaluate(bindings)
        args = [arg.evaluate(bindings) for arg in self.arguments]
        return getattr(receiver, self.method)(*args)

    def __str__(self) -> str:
        args = ", ".join(str(arg) for arg in self.arguments)
        return f"{self.target}.{self.method}({args})"


class Expressions:
    """Factory for expression nodes."""

    @staticmethod
    def parameter(name: str) -> ParameterExpression:
        return ParameterExpression(name)

    @staticmethod
    def constant(value: Any) -> ConstantExpression:
        return ConstantExpression(value)

    @staticmethod
    def field(target: Expression, name: str) -> FieldExpression:
        return FieldExpression(target, name)

    @staticmethod
    def call(target: Expression, method: str, arguments: Sequence[Expression] = ()) -> MethodCallExpression:
        return MethodCallExpression(target, method, tuple(arguments))


__all__ = [
    "Expression",
    "ParameterExpression",
    "ConstantExpression",
    "FieldExpression",
    "MethodCallExpression",
    "Expressions",
]
