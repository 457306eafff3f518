"""Quality gate evaluation — every condition of a gate against a set of measures."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict

from quality_gate.errors import ConflictingMetricError
from quality_gate.evaluator import ConditionEvaluator
from quality_gate.labels import alert_label
from quality_gate.models import Condition, Measure, Metric
from quality_gate.types import NEW_METRIC_PREFIX, Level, Operator
from quality_gate.values import Comparable  # noqa: TC001

logger = logging.getLogger("quality_gate.gate")


class EvaluationStatus(StrEnum):
    OK = "OK"
    ERROR = "ERROR"
    NO_VALUE = "NO_VALUE"


class QualityGate(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    conditions: list[Condition]


class ConditionStatus(BaseModel):
    model_config = ConfigDict(frozen=True)

    condition: Condition
    status: EvaluationStatus
    value: Comparable | None = None
    label: str | None = None


class QualityGateStatus(BaseModel):
    model_config = ConfigDict(frozen=True)

    gate_name: str
    level: Level
    conditions: list[ConditionStatus]

    @property
    def failed_conditions(self) -> list[ConditionStatus]:
        return [c for c in self.conditions if c.status == EvaluationStatus.ERROR]


class QualityGateEvaluator:
    """Evaluates all conditions of a gate and aggregates them into one level.

    The gate is ERROR as soon as one condition is. A condition whose metric has no
    measure, or whose measure has nothing to compare, reports NO_VALUE and does not fail
    the gate.
    """

    def __init__(
        self,
        *,
        condition_evaluator: ConditionEvaluator | None = None,
        hours_per_day: int = 8,
    ) -> None:
        self._condition_evaluator = condition_evaluator or ConditionEvaluator()
        self._hours_per_day = hours_per_day

    def evaluate(self, gate: QualityGate, measures: Mapping[str, Measure]) -> QualityGateStatus:
        statuses = [self._evaluate_condition(c, measures) for c in gate.conditions]

        level = (
            Level.ERROR
            if any(s.status == EvaluationStatus.ERROR for s in statuses)
            else Level.OK
        )
        logger.info(
            "Quality gate %s is %s (%d condition(s), %d failed)",
            gate.name,
            level,
            len(statuses),
            sum(1 for s in statuses if s.status == EvaluationStatus.ERROR),
        )
        return QualityGateStatus(gate_name=gate.name, level=level, conditions=statuses)

    def _evaluate_condition(
        self, condition: Condition, measures: Mapping[str, Measure]
    ) -> ConditionStatus:
        measure = measures.get(condition.metric.key)
        if measure is None:
            logger.debug("No measure for metric %s", condition.metric.key)
            return ConditionStatus(condition=condition, status=EvaluationStatus.NO_VALUE)

        result = self._condition_evaluator.evaluate(condition, measure)
        logger.debug(
            "Condition %s %s %s: %s",
            condition.metric.key,
            condition.operator.name,
            condition.error_threshold,
            result.level,
        )

        if result.value is None:
            status = EvaluationStatus.NO_VALUE
        elif result.level == Level.ERROR:
            status = EvaluationStatus.ERROR
        else:
            status = EvaluationStatus.OK

        label = (
            alert_label(condition, hours_per_day=self._hours_per_day)
            if status == EvaluationStatus.ERROR
            else None
        )
        return ConditionStatus(
            condition=condition,
            status=status,
            value=result.value,
            label=label,
        )


def load_gate_document(
    document: Mapping[str, Any],
    *,
    new_metric_prefix: str = NEW_METRIC_PREFIX,
) -> tuple[QualityGate, dict[str, Measure]]:
    """Read a gate and its measures from a parsed document (YAML or JSON).

    Expected shape::

        name: Sonar way
        conditions:
          - metric: {key: new_coverage, name: Coverage on New Code, type: PERCENT}
            operator: LT
            threshold: "80"
        measures:
          new_coverage: {variation: 72.5}
          bugs: 3

    A condition without an explicit ``use_variation`` compares the variation when its
    metric is a new-code metric. A bare scalar measure is the measure's value.

    Raises:
        ConflictingMetricError: two conditions define the same metric key differently.
    """
    conditions: list[Condition] = []
    for entry in document.get("conditions") or []:
        metric = Metric.model_validate(entry["metric"])
        threshold = str(entry["threshold"])
        if "use_variation" in entry:
            condition = Condition(
                metric=metric,
                operator=Operator.from_db_value(entry["operator"]),
                error_threshold=threshold,
                use_variation=bool(entry["use_variation"]),
            )
        else:
            condition = Condition.from_db(
                metric, entry["operator"], threshold, new_metric_prefix=new_metric_prefix
            )
        conditions.append(condition)

    gate = QualityGate(name=document.get("name", "default"), conditions=conditions)
    metrics: dict[str, Metric] = {}
    for c in conditions:
        known = metrics.setdefault(c.metric.key, c.metric)
        if known != c.metric:
            raise ConflictingMetricError(known, c.metric)

    measures: dict[str, Measure] = {}
    for key, raw_measure in (document.get("measures") or {}).items():
        metric = metrics.get(key)
        if metric is None:
            logger.debug("Ignoring measure %s, no condition uses it", key)
            continue
        if isinstance(raw_measure, Mapping):
            measures[key] = Measure.for_metric(
                metric,
                raw_measure.get("value"),
                variation=raw_measure.get("variation"),
                data=raw_measure.get("data"),
            )
        else:
            measures[key] = Measure.for_metric(metric, raw_measure)
    return gate, measures
