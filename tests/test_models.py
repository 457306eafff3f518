"""Unit tests for metrics, measures, conditions and operators."""

import pytest
from pydantic import ValidationError

from quality_gate.errors import UnsupportedOperatorError
from quality_gate.models import Condition, EvaluationResult, Measure, Metric
from quality_gate.types import Level, MetricType, Operator, ValueDomain
from quality_gate.values import IntValue


class TestMetricType:
    def test_every_type_has_a_domain(self):
        for metric_type in MetricType:
            assert isinstance(metric_type.value_domain, ValueDomain)

    @pytest.mark.parametrize(
        ("metric_type", "domain"),
        [
            (MetricType.RATING, ValueDomain.INT),
            (MetricType.MILLISEC, ValueDomain.INT),
            (MetricType.WORK_DUR, ValueDomain.LONG),
            (MetricType.PERCENT, ValueDomain.DOUBLE),
            (MetricType.BOOL, ValueDomain.BOOLEAN),
            (MetricType.DISTRIB, ValueDomain.STRING),
            (MetricType.DATA, ValueDomain.DATA),
        ],
    )
    def test_domain(self, metric_type, domain):
        assert metric_type.value_domain == domain


class TestOperator:
    @pytest.mark.parametrize(
        ("code", "expected"),
        [
            ("EQ", Operator.EQUALS),
            ("NE", Operator.NOT_EQUALS),
            ("GREATER_THAN", Operator.GREATER_THAN),
        ],
    )
    def test_from_db_value(self, code, expected):
        assert Operator.from_db_value(code) == expected

    def test_unknown(self):
        with pytest.raises(UnsupportedOperatorError):
            Operator.from_db_value("GE")

    def test_symbols(self):
        assert [op.symbol for op in Operator] == ["=", "!=", ">", "<"]


class TestMeasure:
    def test_no_value_with_variation(self):
        measure = Measure.no_value(variation=3)
        assert not measure.has_value
        assert measure.has_variation
        assert measure.variation == 3.0

    def test_value_without_variation(self):
        measure = Measure.of_int(3)
        assert measure.has_value
        assert not measure.has_variation

    def test_typed_accessor_mismatch(self):
        with pytest.raises(TypeError, match="holds a int value, not a long one"):
            _ = Measure.of_int(3).long_value

    @pytest.mark.parametrize(
        ("value_type", "value"),
        [
            (ValueDomain.INT, 2**31),
            (ValueDomain.INT, True),
            (ValueDomain.BOOLEAN, 1),
            (ValueDomain.DOUBLE, "1.0"),
            (ValueDomain.NO_VALUE, 1),
            (ValueDomain.STRING, None),
        ],
    )
    def test_inconsistent_value_rejected(self, value_type, value):
        with pytest.raises(ValidationError):
            Measure(value_type=value_type, value=value)

    def test_immutable(self):
        with pytest.raises(ValidationError):
            Measure.of_int(3).value = 4


class TestMeasureForMetric:
    @pytest.mark.parametrize(
        ("metric_type", "raw", "expected"),
        [
            (MetricType.INT, "12", Measure.of_int(12)),
            (MetricType.WORK_DUR, 60, Measure.of_long(60)),
            (MetricType.PERCENT, "72.5", Measure.of_double(72.5)),
            (MetricType.BOOL, "true", Measure.of_boolean(True)),
            (MetricType.BOOL, 0, Measure.of_boolean(False)),
            (MetricType.STRING, 5, Measure.of_string("5")),
            (MetricType.LEVEL, "ERROR", Measure.of_level(Level.ERROR)),
            (MetricType.FLOAT, None, Measure.no_value()),
        ],
    )
    def test_coercion(self, metric_type, raw, expected):
        metric = Metric(key="k", name="K", type=metric_type)
        assert Measure.for_metric(metric, raw) == expected

    def test_bad_boolean(self):
        metric = Metric(key="k", name="K", type=MetricType.BOOL)
        with pytest.raises(ValueError, match="as a boolean"):
            Measure.for_metric(metric, "maybe")


class TestCondition:
    def test_from_db_on_regular_metric(self):
        metric = Metric(key="coverage", name="Coverage", type=MetricType.PERCENT)
        condition = Condition.from_db(metric, "LT", "80")
        assert condition.operator == Operator.LESS_THAN
        assert condition.use_variation is False

    def test_from_db_on_new_metric(self):
        metric = Metric(key="new_coverage", name="Coverage on New Code", type=MetricType.PERCENT)
        assert Condition.from_db(metric, "LT", "80").use_variation is True

    def test_custom_prefix(self):
        metric = Metric(key="delta_bugs", name="Bugs delta", type=MetricType.INT)
        condition = Condition.from_db(metric, "GT", "0", new_metric_prefix="delta_")
        assert condition.use_variation is True


class TestEvaluationResult:
    def test_raw_value(self):
        assert EvaluationResult(level=Level.OK, value=IntValue(value=3)).raw_value == 3
        assert EvaluationResult(level=Level.OK).raw_value is None

    def test_json_round_trip(self):
        result = EvaluationResult(level=Level.ERROR, value=IntValue(value=3))
        assert EvaluationResult.model_validate_json(result.model_dump_json()) == result
