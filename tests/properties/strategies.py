"""Hypothesis strategies for generating quality gate domain objects.

These strategies generate metrics, measures in a metric's value domain, and threshold
text that parses back to a drawn value.
"""

from hypothesis import strategies as st

from quality_gate.models import Measure, Metric
from quality_gate.types import Level, MetricType, Operator, ValueDomain
from quality_gate.values import INT32_MAX, INT32_MIN, INT64_MAX, INT64_MIN

# =============================================================================
# TYPES AND OPERATORS
# =============================================================================

operators = st.sampled_from(list(Operator))

metric_types = st.sampled_from(list(MetricType))

evaluable_metric_types = st.sampled_from([t for t in MetricType if t != MetricType.DATA])

NUMERIC_DOMAINS = (ValueDomain.INT, ValueDomain.LONG, ValueDomain.DOUBLE)

numeric_metric_types = st.sampled_from(
    [t for t in MetricType if t.value_domain in NUMERIC_DOMAINS]
)

integral_metric_types = st.sampled_from(
    [t for t in MetricType if t.value_domain in (ValueDomain.INT, ValueDomain.LONG)]
)

variation_metric_types = st.sampled_from(
    [t for t in MetricType if t.value_domain in (ValueDomain.BOOLEAN, *NUMERIC_DOMAINS)]
)

finite_floats = st.floats(allow_nan=False, allow_infinity=False)


def metrics(types=metric_types, new_code: bool = False):
    key = "new_metric" if new_code else "metric"
    return types.map(lambda t: Metric(key=key, name="Metric", type=t))


# =============================================================================
# VALUES
# =============================================================================


def domain_values(metric_type: MetricType):
    """Raw values a measure of ``metric_type`` can hold."""
    match metric_type.value_domain:
        case ValueDomain.BOOLEAN:
            return st.booleans()
        case ValueDomain.INT:
            return st.integers(min_value=INT32_MIN, max_value=INT32_MAX)
        case ValueDomain.LONG:
            return st.integers(min_value=INT64_MIN, max_value=INT64_MAX)
        case ValueDomain.DOUBLE:
            return finite_floats
        case ValueDomain.LEVEL:
            return st.sampled_from(list(Level))
        case _:
            return st.text(max_size=20)


def threshold_text(metric_type: MetricType, value) -> str:
    """Threshold text parsing back to ``value`` in the domain of ``metric_type``."""
    if metric_type.value_domain == ValueDomain.BOOLEAN:
        return "1" if value else "0"
    return str(value)


@st.composite
def valued_measures(draw, metric_type: MetricType):
    value = draw(domain_values(metric_type))
    variation = draw(st.none() | finite_floats)
    metric = Metric(key="metric", name="Metric", type=metric_type)
    return Measure.for_metric(metric, value, variation=variation)


@st.composite
def empty_measures(draw):
    """Measures with no value, with or without a variation."""
    return Measure.no_value(variation=draw(st.none() | finite_floats))
