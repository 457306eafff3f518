"""Builders for metrics and conditions used across the tests."""

from quality_gate.models import Condition, Metric
from quality_gate.types import MetricType, Operator


def make_metric(metric_type: MetricType, key: str = "key") -> Metric:
    return Metric(key=key, name="name", type=metric_type)


def make_new_metric(metric_type: MetricType) -> Metric:
    """A new-code metric: conditions on it compare the variation."""
    return make_metric(metric_type, key="new_key")


def make_condition(metric: Metric, operator: Operator, threshold: str) -> Condition:
    return Condition.from_db(metric, operator.value, threshold)
