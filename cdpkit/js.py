"""JavaScript evaluation requests and their results."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from cdpkit.utils import is_likely_js_function


@dataclass
class EvaluationResult:
    """Mirror of a remote JavaScript object as returned by the browser."""

    remote_object: dict[str, Any] = field(default_factory=dict)

    @property
    def object_type(self) -> str | None:
        return self.remote_object.get("type")

    @property
    def value(self) -> Any:
        return self.remote_object.get("value")

    def into_value(self) -> Any:
        """Return the value carried by the remote object.

        Raises ValueError if the object holds no value.
        """
        if "value" not in self.remote_object:
            raise ValueError("No value found")
        return self.remote_object["value"]


class EvaluationKind(Enum):
    EXPRESSION = "expression"
    FUNCTION = "function"


@dataclass
class Evaluation:
    """An expression evaluation or a function call, with its protocol params."""

    kind: EvaluationKind
    params: dict[str, Any]

    @classmethod
    def expression(cls, expression: str, **params: Any) -> Evaluation:
        return cls(EvaluationKind.EXPRESSION, {"expression": expression, **params})

    @classmethod
    def function(cls, declaration: str, **params: Any) -> Evaluation:
        return cls(EvaluationKind.FUNCTION, {"functionDeclaration": declaration, **params})


def to_evaluation(expression: str | Evaluation) -> Evaluation:
    """Turn a string into an evaluation, detecting whether it is a function."""
    if isinstance(expression, Evaluation):
        return expression
    if is_likely_js_function(expression):
        return Evaluation.function(expression)
    return Evaluation.expression(expression)