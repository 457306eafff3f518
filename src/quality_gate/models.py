"""Engine inputs and outputs — Metric, Measure, Condition, EvaluationResult."""

from __future__ import annotations

from typing import Self

from pydantic import BaseModel, ConfigDict, model_validator

from quality_gate.types import (
    NEW_METRIC_PREFIX,
    Level,
    MetricType,
    Operator,
    ValueDomain,
    is_new_metric,
)
from quality_gate.values import (
    INT32_MAX,
    INT32_MIN,
    INT64_MAX,
    INT64_MIN,
    Comparable,
    raw,
)

MeasureScalar = bool | int | float | Level | str


class Metric(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str
    name: str
    type: MetricType


class Measure(BaseModel):
    """Snapshot of one metric's computed value.

    Holds at most one value, consistent with ``value_type``. The variation (delta against
    the baseline period) is recorded independently and may be present on a measure that
    has no value.
    """

    model_config = ConfigDict(frozen=True)

    value_type: ValueDomain
    value: MeasureScalar | None = None
    variation: float | None = None
    data: str | None = None

    @model_validator(mode="after")
    def _check_value_matches_type(self) -> Self:
        v = self.value
        match self.value_type:
            case ValueDomain.NO_VALUE:
                ok = v is None
            case ValueDomain.BOOLEAN:
                ok = isinstance(v, bool)
            case ValueDomain.INT:
                ok = _is_int(v) and INT32_MIN <= v <= INT32_MAX
            case ValueDomain.LONG:
                ok = _is_int(v) and INT64_MIN <= v <= INT64_MAX
            case ValueDomain.DOUBLE:
                ok = isinstance(v, float)
            case ValueDomain.LEVEL:
                ok = isinstance(v, Level)
            case ValueDomain.STRING | ValueDomain.DATA:
                ok = isinstance(v, str) and not isinstance(v, Level)
        if not ok:
            msg = f"Value {v!r} is not valid for a measure of type {self.value_type}"
            raise ValueError(msg)
        return self

    @classmethod
    def of_boolean(cls, value: bool, *, variation: float | None = None) -> Measure:
        return cls(value_type=ValueDomain.BOOLEAN, value=value, variation=variation)

    @classmethod
    def of_int(
        cls, value: int, *, variation: float | None = None, data: str | None = None
    ) -> Measure:
        return cls(value_type=ValueDomain.INT, value=value, variation=variation, data=data)

    @classmethod
    def of_long(cls, value: int, *, variation: float | None = None) -> Measure:
        return cls(value_type=ValueDomain.LONG, value=value, variation=variation)

    @classmethod
    def of_double(cls, value: float, *, variation: float | None = None) -> Measure:
        return cls(value_type=ValueDomain.DOUBLE, value=float(value), variation=variation)

    @classmethod
    def of_string(cls, value: str, *, variation: float | None = None) -> Measure:
        return cls(value_type=ValueDomain.STRING, value=value, variation=variation)

    @classmethod
    def of_level(cls, value: Level, *, variation: float | None = None) -> Measure:
        return cls(value_type=ValueDomain.LEVEL, value=value, variation=variation)

    @classmethod
    def no_value(cls, *, variation: float | None = None) -> Measure:
        return cls(value_type=ValueDomain.NO_VALUE, variation=variation)

    @classmethod
    def for_metric(
        cls,
        metric: Metric,
        value: MeasureScalar | None,
        *,
        variation: float | None = None,
        data: str | None = None,
    ) -> Measure:
        """Build a measure holding ``value`` in the value domain of ``metric``.

        Loosely typed input (for instance read from YAML or the command line) is coerced:
        ``"12"`` becomes an int for an INT metric, ``"ERROR"`` a Level for a LEVEL metric.
        ``None`` gives a measure with no value.
        """
        if value is None:
            return cls.no_value(variation=variation)

        match metric.type.value_domain:
            case ValueDomain.BOOLEAN:
                return cls.of_boolean(_coerce_bool(value), variation=variation)
            case ValueDomain.INT:
                return cls.of_int(int(value), variation=variation, data=data)
            case ValueDomain.LONG:
                return cls.of_long(int(value), variation=variation)
            case ValueDomain.DOUBLE:
                return cls.of_double(float(value), variation=variation)
            case ValueDomain.STRING:
                return cls.of_string(str(value), variation=variation)
            case ValueDomain.LEVEL:
                return cls.of_level(Level(value), variation=variation)
            case ValueDomain.DATA:
                return cls(
                    value_type=ValueDomain.DATA,
                    value=str(value),
                    variation=variation,
                    data=data,
                )
            case ValueDomain.NO_VALUE:
                return cls.no_value(variation=variation)

    @property
    def has_value(self) -> bool:
        return self.value_type != ValueDomain.NO_VALUE

    @property
    def has_variation(self) -> bool:
        return self.variation is not None

    @property
    def boolean_value(self) -> bool:
        return self._typed(ValueDomain.BOOLEAN)

    @property
    def int_value(self) -> int:
        return self._typed(ValueDomain.INT)

    @property
    def long_value(self) -> int:
        return self._typed(ValueDomain.LONG)

    @property
    def double_value(self) -> float:
        return self._typed(ValueDomain.DOUBLE)

    @property
    def string_value(self) -> str:
        return self._typed(ValueDomain.STRING)

    @property
    def level_value(self) -> Level:
        return self._typed(ValueDomain.LEVEL)

    def _typed(self, expected: ValueDomain):
        if self.value_type != expected:
            msg = f"Measure holds a {self.value_type} value, not a {expected} one"
            raise TypeError(msg)
        return self.value


class Condition(BaseModel):
    """Threshold a measure is tested against.

    With ``use_variation`` set, the measure's variation is compared instead of its value.
    """

    model_config = ConfigDict(frozen=True)

    metric: Metric
    operator: Operator
    error_threshold: str
    use_variation: bool = False

    @classmethod
    def from_db(
        cls,
        metric: Metric,
        operator: str,
        error_threshold: str,
        *,
        new_metric_prefix: str = NEW_METRIC_PREFIX,
    ) -> Condition:
        """Build a condition from its persisted form.

        The operator is given by its code (``"GT"``); conditions on new-code metrics
        compare the variation.
        """
        return cls(
            metric=metric,
            operator=Operator.from_db_value(operator),
            error_threshold=error_threshold,
            use_variation=is_new_metric(metric.key, new_metric_prefix),
        )


class EvaluationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    level: Level
    value: Comparable | None = None

    @property
    def raw_value(self) -> bool | int | float | str | None:
        return raw(self.value)


def _is_int(v: object) -> bool:
    return isinstance(v, int) and not isinstance(v, bool)


def _coerce_bool(value: MeasureScalar) -> bool:
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "1", "yes"):
            return True
        if lowered in ("false", "0", "no"):
            return False
        msg = f"Cannot read {value!r} as a boolean"
        raise ValueError(msg)
    return bool(value)
