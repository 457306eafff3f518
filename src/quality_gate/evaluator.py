"""Condition evaluator — decides whether a measure breaches a condition.

The evaluation pipeline:
1. Reject metrics whose type cannot be compared at all (DATA)
2. Project the measure to a comparable (value or variation); nothing to compare is a pass,
   a value held in another domain than the metric's is rejected
3. Parse the threshold into the same value domain
4. Compare and apply the operator; a breach is an ERROR

Floating point thresholds are compared exactly. An EQUALS condition on a PERCENT or FLOAT
metric only matches when the threshold has the stored precision of the measure: a
display-rounded "10.2" does not equal a stored 10.2000001.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from quality_gate.errors import UnsupportedOperatorError, UnsupportedTypeError
from quality_gate.models import EvaluationResult
from quality_gate.projection import project_measure
from quality_gate.thresholds import parse_threshold
from quality_gate.types import Level, Operator, ValueDomain
from quality_gate.values import compare_values

if TYPE_CHECKING:
    from quality_gate.models import Condition, Measure
    from quality_gate.values import Comparable

logger = logging.getLogger("quality_gate.evaluator")


class ConditionEvaluator:
    """Evaluates a Condition against a Measure. Holds no state; safe to share."""

    def evaluate(self, condition: Condition, measure: Measure) -> EvaluationResult:
        metric_type = condition.metric.type
        if metric_type.value_domain == ValueDomain.DATA:
            msg = f"Conditions on MetricType {metric_type} are not supported"
            raise UnsupportedTypeError(msg)

        measure_value = project_measure(condition, measure)
        if measure_value is None:
            logger.debug("No value to compare for %s, condition passes", condition.metric.key)
            return EvaluationResult(level=Level.OK, value=None)

        if not condition.use_variation and measure.value_type != metric_type.value_domain:
            msg = (
                f"Measure of value type {measure.value_type.name} can not be compared "
                f"to metric {condition.metric.key} of type {metric_type}"
            )
            raise UnsupportedTypeError(msg)

        threshold = parse_threshold(condition.metric, condition.error_threshold)
        if _reaches_threshold(measure_value, threshold, condition.operator):
            return EvaluationResult(level=Level.ERROR, value=measure_value)
        return EvaluationResult(level=Level.OK, value=measure_value)


def _reaches_threshold(
    measure_value: Comparable, threshold: Comparable, operator: Operator
) -> bool:
    comparison = compare_values(measure_value, threshold)
    match operator:
        case Operator.EQUALS:
            return comparison == 0
        case Operator.NOT_EQUALS:
            return comparison != 0
        case Operator.GREATER_THAN:
            return comparison > 0
        case Operator.LESS_THAN:
            return comparison < 0
        case _:
            raise UnsupportedOperatorError(operator)


_default_evaluator = ConditionEvaluator()


def evaluate_condition(condition: Condition, measure: Measure) -> EvaluationResult:
    return _default_evaluator.evaluate(condition, measure)
