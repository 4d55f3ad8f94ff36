"""Metrics derived from cumulative dose volume histograms."""

from ._metric import Metric, MetricKind, MetricResult
from ._geud import GEUD, compute_geud, validate_exponent
from ._hi import HomogeneityIndex, compute_hi, aggregate_prescribed_dose

from ._factory import get_available_metrics, get_metric, register_metric

register_metric(GEUD)
register_metric(HomogeneityIndex)

__all__ = [
    "Metric",
    "MetricKind",
    "MetricResult",
    "GEUD",
    "HomogeneityIndex",
    "compute_geud",
    "compute_hi",
    "validate_exponent",
    "aggregate_prescribed_dose",
    "get_available_metrics",
    "get_metric",
    "register_metric",
]
