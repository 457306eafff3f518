"""Comparable values — one tagged model per primitive kind the engine can order.

A condition is only ever decided by comparing two values of the same kind: the measure
side and the threshold side are both derived from the metric's value domain.
"""

from __future__ import annotations

import math
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class BoolValue(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["bool"] = "bool"
    value: bool


class IntValue(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["int"] = "int"
    value: int = Field(ge=INT32_MIN, le=INT32_MAX)


class LongValue(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["long"] = "long"
    value: int = Field(ge=INT64_MIN, le=INT64_MAX)


class DoubleValue(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["double"] = "double"
    value: float


class StringValue(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["string"] = "string"
    value: str


Comparable = Annotated[
    BoolValue | IntValue | LongValue | DoubleValue | StringValue,
    Field(discriminator="kind"),
]


def compare_values(left: Comparable, right: Comparable) -> int:
    """Three-way comparison of two comparables of the same kind.

    Returns a negative number, zero or a positive number as ``left`` is lower than,
    equal to or greater than ``right``.
    """
    match (left, right):
        case (BoolValue(value=a), BoolValue(value=b)):
            return _sign(a, b)
        case (IntValue(value=a), IntValue(value=b)):
            return _sign(a, b)
        case (LongValue(value=a), LongValue(value=b)):
            return _sign(a, b)
        case (DoubleValue(value=a), DoubleValue(value=b)):
            return _compare_doubles(a, b)
        case (StringValue(value=a), StringValue(value=b)):
            return _sign(a, b)
        case _:
            msg = f"Cannot compare a {left.kind} value with a {right.kind} value"
            raise TypeError(msg)


def _sign(a: bool | int | str, b: bool | int | str) -> int:
    return (a > b) - (a < b)


def _compare_doubles(a: float, b: float) -> int:
    """Total order on doubles: NaN equals NaN and sorts above all numbers, -0.0 < 0.0."""
    a_nan, b_nan = math.isnan(a), math.isnan(b)
    if a_nan or b_nan:
        return a_nan - b_nan
    if a == b == 0.0:
        return _sign(math.copysign(1.0, a), math.copysign(1.0, b))
    return _sign(a, b)


def truncate_int32(x: float) -> int:
    """Narrow a double to a 32-bit int, toward zero; NaN gives 0, overflow saturates."""
    return _truncate(x, INT32_MIN, INT32_MAX)


def truncate_int64(x: float) -> int:
    """Narrow a double to a 64-bit int, toward zero; NaN gives 0, overflow saturates."""
    return _truncate(x, INT64_MIN, INT64_MAX)


def _truncate(x: float, lower: int, upper: int) -> int:
    if math.isnan(x):
        return 0
    if math.isinf(x):
        return upper if x > 0 else lower
    return max(lower, min(upper, math.trunc(x)))


def raw(value: Comparable | None) -> bool | int | float | str | None:
    """Plain Python scalar held by a comparable, or None."""
    return None if value is None else value.value
