"""Unit tests for alert labels."""

import pytest
from factories import make_condition

from quality_gate.labels import alert_label, format_work_duration, rating_letter
from quality_gate.models import Metric
from quality_gate.types import MetricType, Operator


def _metric(metric_type: MetricType, name: str) -> Metric:
    return Metric(key="k", name=name, type=metric_type)


class TestAlertLabel:
    def test_plain_threshold(self):
        metric = _metric(MetricType.PERCENT, "Coverage")
        condition = make_condition(metric, Operator.LESS_THAN, "80")
        assert alert_label(condition) == "Coverage < 80"

    def test_rating_threshold_as_letter(self):
        condition = make_condition(
            _metric(MetricType.RATING, "Maintainability Rating"), Operator.GREATER_THAN, "2"
        )
        assert alert_label(condition) == "Maintainability Rating > B"

    def test_work_duration_threshold(self):
        metric = _metric(MetricType.WORK_DUR, "Debt")
        condition = make_condition(metric, Operator.GREATER_THAN, "570")
        assert alert_label(condition) == "Debt > 1d 1h 30min"
        assert alert_label(condition, hours_per_day=24) == "Debt > 9h 30min"

    def test_unreadable_threshold_kept_raw(self):
        condition = make_condition(_metric(MetricType.RATING, "Rating"), Operator.EQUALS, "Z")
        assert alert_label(condition) == "Rating = Z"

    def test_not_equals_symbol(self):
        condition = make_condition(_metric(MetricType.LEVEL, "Status"), Operator.NOT_EQUALS, "OK")
        assert alert_label(condition) == "Status != OK"


class TestRatingLetter:
    @pytest.mark.parametrize(("rating", "letter"), [(1, "A"), (3, "C"), (5, "E")])
    def test_letters(self, rating, letter):
        assert rating_letter(rating) == letter

    @pytest.mark.parametrize("rating", [0, 6])
    def test_out_of_range(self, rating):
        with pytest.raises(ValueError, match="between 1 and 5"):
            rating_letter(rating)


class TestWorkDuration:
    @pytest.mark.parametrize(
        ("minutes", "expected"),
        [
            (0, "0min"),
            (45, "45min"),
            (60, "1h"),
            (480, "1d"),
            (541, "1d 1h 1min"),
            (-90, "-1h 30min"),
        ],
    )
    def test_format(self, minutes, expected):
        assert format_work_duration(minutes) == expected
