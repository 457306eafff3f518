"""Metric type system and the closed enumerations shared by the engine."""

from enum import StrEnum

from quality_gate.errors import UnsupportedOperatorError

# Keys of metrics computed on new code only; conditions on them compare the variation.
NEW_METRIC_PREFIX = "new_"


class ValueDomain(StrEnum):
    """Primitive kind a metric's values are stored and compared as."""

    NO_VALUE = "no_value"
    BOOLEAN = "boolean"
    INT = "int"
    LONG = "long"
    DOUBLE = "double"
    STRING = "string"
    LEVEL = "level"
    DATA = "data"


class MetricType(StrEnum):
    INT = "INT"
    MILLISEC = "MILLISEC"
    RATING = "RATING"
    WORK_DUR = "WORK_DUR"
    FLOAT = "FLOAT"
    PERCENT = "PERCENT"
    BOOL = "BOOL"
    STRING = "STRING"
    DISTRIB = "DISTRIB"
    DATA = "DATA"
    LEVEL = "LEVEL"

    @property
    def value_domain(self) -> ValueDomain:
        return _VALUE_DOMAINS[self]


_VALUE_DOMAINS: dict[MetricType, ValueDomain] = {
    MetricType.INT: ValueDomain.INT,
    MetricType.MILLISEC: ValueDomain.INT,
    MetricType.RATING: ValueDomain.INT,
    MetricType.WORK_DUR: ValueDomain.LONG,
    MetricType.FLOAT: ValueDomain.DOUBLE,
    MetricType.PERCENT: ValueDomain.DOUBLE,
    MetricType.BOOL: ValueDomain.BOOLEAN,
    MetricType.STRING: ValueDomain.STRING,
    MetricType.DISTRIB: ValueDomain.STRING,
    MetricType.DATA: ValueDomain.DATA,
    MetricType.LEVEL: ValueDomain.LEVEL,
}


class Operator(StrEnum):
    """Comparison operators; values are the codes persisted with a condition."""

    EQUALS = "EQ"
    NOT_EQUALS = "NE"
    GREATER_THAN = "GT"
    LESS_THAN = "LT"

    @property
    def symbol(self) -> str:
        return _SYMBOLS[self]

    @classmethod
    def from_db_value(cls, code: str) -> "Operator":
        """Resolve an operator from its persisted code (``GT``) or its name (``GREATER_THAN``)."""
        for op in cls:
            if code in (op.value, op.name):
                return op
        raise UnsupportedOperatorError(code)


_SYMBOLS: dict[Operator, str] = {
    Operator.EQUALS: "=",
    Operator.NOT_EQUALS: "!=",
    Operator.GREATER_THAN: ">",
    Operator.LESS_THAN: "<",
}


class Level(StrEnum):
    OK = "OK"
    ERROR = "ERROR"


def is_new_metric(metric_key: str, prefix: str = NEW_METRIC_PREFIX) -> bool:
    return metric_key.startswith(prefix)
