"""
Call-level option models (Pydantic).

`InterpolationOptions` is the validated form of the metric/transform/decay arguments
shared by the aggregators. Building it up front means a bad name fails before a single
row is processed.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from geoweight.core.metrics import DistanceMetric, MetricFunction, parse_metric, resolve_metric
from geoweight.weighting.inverse import DistanceTransform, parse_transform


class InterpolationOptions(BaseModel):
    """Metric, weight transform and decay exponent for one aggregation call."""

    model_config = ConfigDict(frozen=True)

    dist_function: DistanceMetric = DistanceMetric.HAVERSINE
    dist_transform: DistanceTransform = DistanceTransform.LEVEL
    decay: float = 2.0

    @classmethod
    def build(
        cls,
        dist_function: str | DistanceMetric = "Haversine",
        dist_transform: str | DistanceTransform = "level",
        decay: float = 2.0,
    ) -> "InterpolationOptions":
        """Parse user-facing names, raising `InvalidMetricName` / `InvalidTransformName`."""
        return cls(
            dist_function=parse_metric(dist_function),
            dist_transform=parse_transform(dist_transform),
            decay=decay,
        )

    def metric(self) -> MetricFunction:
        return resolve_metric(self.dist_function)
