"""
Inverse-distance weights.

`level`: w = 1 / d**exp
`log`:   w = 1 / ln(d)**exp

The arithmetic is applied literally. Zero distances give +inf under `level`; distances
at or below 1 m give zero, negative, infinite or NaN weights under `log`. Callers that
need guarded weights must filter their inputs first.
"""

from __future__ import annotations

from enum import Enum
from typing import Sequence

import numpy as np

from geoweight.core.errors import InvalidTransformName


class DistanceTransform(str, Enum):
    LEVEL = "level"
    LOG = "log"


def transform_names() -> list[str]:
    return [t.value for t in DistanceTransform]


def parse_transform(name: str | DistanceTransform) -> DistanceTransform:
    """Map a transform name onto `DistanceTransform` or raise `InvalidTransformName`."""
    if isinstance(name, DistanceTransform):
        return name
    for transform in DistanceTransform:
        if name == transform.value:
            return transform
    raise InvalidTransformName(name, allowed=transform_names())


def inverse_value(
    d: Sequence[float] | np.ndarray,
    exp: float = 2.0,
    transform: str | DistanceTransform = "level",
) -> np.ndarray:
    """Convert distances (meters) into inverse-distance weights."""
    kind = parse_transform(transform)
    dist = np.asarray(d, dtype=np.float64)
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        base = dist if kind is DistanceTransform.LEVEL else np.log(dist)
        return 1.0 / np.power(base, float(exp))
