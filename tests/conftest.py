"""Pytest configuration and fixtures for the quality gate tests."""

import pytest

from quality_gate.evaluator import ConditionEvaluator


@pytest.fixture
def evaluator() -> ConditionEvaluator:
    return ConditionEvaluator()
