"""Quality gate condition evaluation.

Quick Start:
    from quality_gate import Condition, ConditionEvaluator, Measure, Metric, MetricType

    coverage = Metric(key="coverage", name="Coverage", type=MetricType.PERCENT)
    condition = Condition.from_db(coverage, "LT", "80")

    result = ConditionEvaluator().evaluate(condition, Measure.of_double(72.4))
    result.level       # Level.ERROR
    result.raw_value   # 72.4
"""

from quality_gate.errors import (
    ConflictingMetricError,
    ThresholdParseError,
    UnsupportedOperatorError,
    UnsupportedTypeError,
)
from quality_gate.evaluator import ConditionEvaluator, evaluate_condition
from quality_gate.gate import (
    ConditionStatus,
    EvaluationStatus,
    QualityGate,
    QualityGateEvaluator,
    QualityGateStatus,
)
from quality_gate.models import Condition, EvaluationResult, Measure, Metric
from quality_gate.types import Level, MetricType, Operator, ValueDomain

__version__ = "0.1.0"

__all__ = [
    "Condition",
    "ConflictingMetricError",
    "ConditionEvaluator",
    "ConditionStatus",
    "EvaluationResult",
    "EvaluationStatus",
    "Level",
    "Measure",
    "Metric",
    "MetricType",
    "Operator",
    "QualityGate",
    "QualityGateEvaluator",
    "QualityGateStatus",
    "ThresholdParseError",
    "UnsupportedOperatorError",
    "UnsupportedTypeError",
    "ValueDomain",
    "evaluate_condition",
]
