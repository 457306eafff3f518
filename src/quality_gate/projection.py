"""Measure projection — the comparable a condition is decided on.

Two mappings: ``project_value`` reads the measure's own value, ``project_variation`` its
variation narrowed to the metric's domain. Both return None when there is nothing to
compare, which the evaluator treats as an automatic pass.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from quality_gate.errors import UnsupportedTypeError
from quality_gate.types import ValueDomain
from quality_gate.values import (
    BoolValue,
    Comparable,
    DoubleValue,
    IntValue,
    LongValue,
    StringValue,
    truncate_int32,
    truncate_int64,
)

if TYPE_CHECKING:
    from quality_gate.models import Condition, Measure, Metric


def project_measure(condition: Condition, measure: Measure) -> Comparable | None:
    if condition.use_variation:
        return project_variation(condition.metric, measure)
    return project_value(measure)


def project_value(measure: Measure) -> Comparable | None:
    match measure.value_type:
        case ValueDomain.BOOLEAN:
            return BoolValue(value=measure.boolean_value)
        case ValueDomain.INT:
            return IntValue(value=measure.int_value)
        case ValueDomain.LONG:
            return LongValue(value=measure.long_value)
        case ValueDomain.DOUBLE:
            return DoubleValue(value=measure.double_value)
        case ValueDomain.STRING:
            return StringValue(value=measure.string_value)
        case ValueDomain.LEVEL:
            return StringValue(value=measure.level_value.name)
        case ValueDomain.NO_VALUE:
            return None
        case _:
            msg = (
                f"Unsupported measure value type {measure.value_type.name}. "
                "Can not parse measure to a comparable"
            )
            raise UnsupportedTypeError(msg)


def project_variation(metric: Metric, measure: Measure) -> Comparable | None:
    """Narrow the measure's variation to ``metric``'s domain.

    Only numeric and boolean domains have a meaningful variation; a BOOLEAN variation is
    true when its integer part is 1.
    """
    if measure.variation is None:
        return None

    variation = measure.variation
    match metric.type.value_domain:
        case ValueDomain.BOOLEAN:
            return BoolValue(value=truncate_int32(variation) == 1)
        case ValueDomain.INT:
            return IntValue(value=truncate_int32(variation))
        case ValueDomain.LONG:
            return LongValue(value=truncate_int64(variation))
        case ValueDomain.DOUBLE:
            return DoubleValue(value=variation)
        case _:
            msg = f"Unsupported metric type {metric.type}"
            raise UnsupportedTypeError(msg)
