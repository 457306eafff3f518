"""Threshold parsing — reads a condition's textual threshold into the metric's domain."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from quality_gate.errors import ThresholdParseError, UnsupportedTypeError
from quality_gate.types import ValueDomain
from quality_gate.values import (
    INT32_MAX,
    INT32_MIN,
    INT64_MAX,
    INT64_MIN,
    BoolValue,
    Comparable,
    DoubleValue,
    IntValue,
    LongValue,
    StringValue,
)

if TYPE_CHECKING:
    from quality_gate.models import Metric

_INTEGER = re.compile(r"[+-]?[0-9]+")
_DECIMAL = re.compile(
    r"[+-]?(?:NaN|Infinity|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?[fFdD]?)"
)
# Leading and trailing control characters and spaces are ignored around decimals.
_TRIMMED = "".join(chr(c) for c in range(0x21))


def parse_threshold(metric: Metric, threshold: str) -> Comparable:
    """Parse ``threshold`` into a comparable of ``metric``'s value domain.

    BOOLEAN thresholds are integers, ``1`` meaning true and anything else false. INT
    thresholds drop any fractional part textually (``"10.9"`` reads as 10). DOUBLE
    thresholds are decimal numbers, optionally with an exponent, or the literals ``NaN``
    and ``Infinity``. STRING and LEVEL thresholds are taken as they are.

    Raises:
        ThresholdParseError: the threshold is not a number of the expected kind.
        UnsupportedTypeError: the metric's domain cannot be compared.
    """
    domain = metric.type.value_domain
    try:
        match domain:
            case ValueDomain.BOOLEAN:
                return BoolValue(value=_parse_int(threshold, INT32_MIN, INT32_MAX) == 1)
            case ValueDomain.INT:
                return IntValue(value=_parse_truncated_int(threshold))
            case ValueDomain.LONG:
                return LongValue(value=_parse_int(threshold, INT64_MIN, INT64_MAX))
            case ValueDomain.DOUBLE:
                return DoubleValue(value=_parse_double(threshold))
            case ValueDomain.STRING | ValueDomain.LEVEL:
                return StringValue(value=threshold)
    except _NumberFormatError:
        raise ThresholdParseError(threshold, metric.name) from None

    msg = f"Unsupported value type {domain.name}. Can not convert condition value"
    raise UnsupportedTypeError(msg)


class _NumberFormatError(ValueError):
    pass


def _parse_int(text: str, lower: int, upper: int) -> int:
    if not _INTEGER.fullmatch(text):
        raise _NumberFormatError(text)
    value = int(text)
    if not lower <= value <= upper:
        raise _NumberFormatError(text)
    return value


def _parse_truncated_int(text: str) -> int:
    head, _, _ = text.partition(".")
    return _parse_int(head, INT32_MIN, INT32_MAX)


def _parse_double(text: str) -> float:
    trimmed = text.strip(_TRIMMED)
    if not _DECIMAL.fullmatch(trimmed):
        raise _NumberFormatError(text)
    return float(trimmed.rstrip("fFdD"))
