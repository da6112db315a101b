"""
Distance metric selection.

Callers name a metric once per call ("Haversine" or "Vincenty", case-sensitive); the
resolved function is then applied to every coordinate pair of that call.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable

from geoweight.core.errors import InvalidMetricName
from geoweight.core.geo import dist_haversine, dist_vincenty

MetricFunction = Callable[[float, float, float, float], float]


class DistanceMetric(str, Enum):
    HAVERSINE = "Haversine"
    VINCENTY = "Vincenty"


_METRICS: dict[DistanceMetric, MetricFunction] = {
    DistanceMetric.HAVERSINE: dist_haversine,
    DistanceMetric.VINCENTY: dist_vincenty,
}


def metric_names() -> list[str]:
    return [m.value for m in DistanceMetric]


def parse_metric(name: str | DistanceMetric) -> DistanceMetric:
    """Map a metric name onto `DistanceMetric` or raise `InvalidMetricName`."""
    if isinstance(name, DistanceMetric):
        return name
    for metric in DistanceMetric:
        if name == metric.value:
            return metric
    raise InvalidMetricName(name, allowed=metric_names())


def resolve_metric(name: str | DistanceMetric) -> MetricFunction:
    """Return the distance function for `name` (lon1, lat1, lon2, lat2 -> meters)."""
    return _METRICS[parse_metric(name)]
