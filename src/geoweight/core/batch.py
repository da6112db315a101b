"""
Batch distance evaluation.

Four iteration shapes over a single resolved metric:
- `dist_1to1`: one point to one point (scalar)
- `dist_1tom`: one point to many points (vector)
- `dist_df`: element-wise pairs, e.g. two coordinate columns of one table (vector)
- `dist_mtom`: every x point to every y point (matrix)

All evaluation is brute force; the metric name is resolved once per call.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from geoweight.core.errors import LengthMismatch
from geoweight.core.metrics import DistanceMetric, MetricFunction, resolve_metric

Coords = Sequence[float] | np.ndarray


def _as_vector(values: Coords) -> np.ndarray:
    return np.asarray(values, dtype=np.float64).reshape(-1)


def _require_equal_lengths(**vectors: np.ndarray) -> int:
    lengths = {name: int(v.shape[0]) for name, v in vectors.items()}
    if len(set(lengths.values())) > 1:
        raise LengthMismatch(lengths)
    return next(iter(lengths.values()), 0)


def one_to_many(fun: MetricFunction, xlon: float, xlat: float, ylon: np.ndarray, ylat: np.ndarray) -> np.ndarray:
    """Apply an already-resolved metric from one point to every (ylon, ylat) pair."""
    out = np.empty(ylon.shape[0], dtype=np.float64)
    for j in range(ylon.shape[0]):
        out[j] = fun(xlon, xlat, float(ylon[j]), float(ylat[j]))
    return out


def dist_1to1(
    xlon: float,
    xlat: float,
    ylon: float,
    ylat: float,
    funname: str | DistanceMetric = "Haversine",
) -> float:
    """Distance in meters between two points."""
    fun = resolve_metric(funname)
    return fun(float(xlon), float(xlat), float(ylon), float(ylat))


def dist_1tom(
    xlon: float,
    xlat: float,
    ylon: Coords,
    ylat: Coords,
    funname: str | DistanceMetric = "Haversine",
) -> np.ndarray:
    """Distances in meters from one starting point to each ending point."""
    fun = resolve_metric(funname)
    ylon_v, ylat_v = _as_vector(ylon), _as_vector(ylat)
    _require_equal_lengths(ylon=ylon_v, ylat=ylat_v)
    return one_to_many(fun, float(xlon), float(xlat), ylon_v, ylat_v)


def dist_df(
    xlon: Coords,
    xlat: Coords,
    ylon: Coords,
    ylat: Coords,
    funname: str | DistanceMetric = "Haversine",
) -> np.ndarray:
    """
    Distances in meters between corresponding coordinate pairs.

    Entry i is the distance from (xlon[i], xlat[i]) to (ylon[i], ylat[i]). All four
    sequences must have the same length; nothing is broadcast.
    """
    fun = resolve_metric(funname)
    xlon_v, xlat_v = _as_vector(xlon), _as_vector(xlat)
    ylon_v, ylat_v = _as_vector(ylon), _as_vector(ylat)
    k = _require_equal_lengths(xlon=xlon_v, xlat=xlat_v, ylon=ylon_v, ylat=ylat_v)

    out = np.empty(k, dtype=np.float64)
    for i in range(k):
        out[i] = fun(float(xlon_v[i]), float(xlat_v[i]), float(ylon_v[i]), float(ylat_v[i]))
    return out


def dist_mtom(
    xlon: Coords,
    xlat: Coords,
    ylon: Coords,
    ylat: Coords,
    funname: str | DistanceMetric = "Haversine",
) -> np.ndarray:
    """Matrix of distances in meters; cell (i, j) is x point i to y point j."""
    fun = resolve_metric(funname)
    xlon_v, xlat_v = _as_vector(xlon), _as_vector(xlat)
    ylon_v, ylat_v = _as_vector(ylon), _as_vector(ylat)
    n = _require_equal_lengths(xlon=xlon_v, xlat=xlat_v)
    k = _require_equal_lengths(ylon=ylon_v, ylat=ylat_v)

    out = np.empty((n, k), dtype=np.float64)
    for i in range(n):
        out[i, :] = one_to_many(fun, float(xlon_v[i]), float(xlat_v[i]), ylon_v, ylat_v)
    return out
