"""Errors raised while evaluating conditions.

Every kind derives from ``ValueError``: each one signals an illegal argument reaching the
engine (a metric type it cannot compare, a threshold it cannot read, an operator it does
not know). None of them is retried; they propagate to the caller as raised.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from quality_gate.models import Metric


class UnsupportedTypeError(ValueError):
    pass


class ThresholdParseError(ValueError):
    def __init__(self, threshold: str, metric_name: str) -> None:
        self.threshold = threshold
        self.metric_name = metric_name
        super().__init__(
            f"Quality Gate: Unable to parse value '{threshold}' to compare against {metric_name}"
        )


class UnsupportedOperatorError(ValueError):
    def __init__(self, operator: object) -> None:
        self.operator = operator
        super().__init__(f"Unsupported operator '{operator}'")


class ConflictingMetricError(ValueError):
    def __init__(self, first: Metric, second: Metric) -> None:
        self.first = first
        self.second = second
        super().__init__(
            f"Metric '{first.key}' is defined twice: {first.name} ({first.type}) "
            f"and {second.name} ({second.type})"
        )
