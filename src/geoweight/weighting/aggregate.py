"""
Distance-weighted aggregation over two tables.

Every operation here shares one skeleton:
- read coordinates (and measures) from the origin table `x` and reference table `y`,
- for each x row, compute distances to *all* y rows (brute force, O(n*k)),
- reduce that distance vector to a single value for the row.

Reductions:
- `dist_weighted_mean`: inverse-distance-weighted mean of a y measure
- `popdist_weighted_mean`: same, with each weight multiplied by the y row's population
- `dist_min`: nearest y distance

Results are pandas DataFrames in x row order (`id` + `wmeasure` / `mindist`).
Degenerate weights (zero distance, zero weight sum) produce NaN/inf in the output rather
than an exception; callers decide how to treat them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import numpy as np
import pandas as pd

from geoweight.config.settings import Settings, get_settings
from geoweight.core.batch import one_to_many
from geoweight.core.cancel import CancelHook, RowCheckpoint
from geoweight.core.metrics import DistanceMetric, parse_metric, resolve_metric
from geoweight.domain.models import InterpolationOptions
from geoweight.table.columns import Table, as_table
from geoweight.weighting.inverse import DistanceTransform, inverse_value

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Coordinates:
    lon: np.ndarray
    lat: np.ndarray


def _read_coordinates(table: Table, lon_col: str, lat_col: str) -> _Coordinates:
    return _Coordinates(lon=table.get_numeric_column(lon_col), lat=table.get_numeric_column(lat_col))


def _weighted_mean(w: np.ndarray, measure: np.ndarray) -> float:
    # Each term is normalized before summing; an inf/zero weight sum gives NaN/inf here.
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        w_sum = np.sum(w)
        return float(np.sum(w * measure / w_sum))


def _checkpoint(operation: str, cancel: CancelHook | None, total: int, settings: Settings | None) -> RowCheckpoint:
    settings = settings or get_settings()
    return RowCheckpoint(operation=operation, hook=cancel, every=settings.cancellation.every(operation), total=total)


def _interpolate(
    operation: str,
    x: Table,
    y: Table,
    *,
    measure_col: str,
    x_id: str,
    x_lon_col: str,
    x_lat_col: str,
    y_lon_col: str,
    y_lat_col: str,
    pop_col: str | None,
    options: InterpolationOptions,
    cancel: CancelHook | None,
    settings: Settings | None,
) -> pd.DataFrame:
    fun = options.metric()

    # Read every column up front so a missing column aborts before any distance work.
    ids = x.get_string_column(x_id)
    xc = _read_coordinates(x, x_lon_col, x_lat_col)
    measure = y.get_numeric_column(measure_col)
    yc = _read_coordinates(y, y_lon_col, y_lat_col)
    pop = y.get_numeric_column(pop_col) if pop_col is not None else None

    n = len(ids)
    checkpoint = _checkpoint(operation, cancel, n, settings)
    logger.debug(
        "%s: %d origin rows x %d reference rows (metric=%s transform=%s decay=%s)",
        operation,
        n,
        yc.lon.shape[0],
        options.dist_function.value,
        options.dist_transform.value,
        options.decay,
    )

    out = np.empty(n, dtype=np.float64)
    for i in range(n):
        checkpoint.check(i)
        dist = one_to_many(fun, float(xc.lon[i]), float(xc.lat[i]), yc.lon, yc.lat)
        w = inverse_value(dist, options.decay, options.dist_transform)
        if pop is not None:
            w = w * pop
        out[i] = _weighted_mean(w, measure)

    return pd.DataFrame({"id": ids, "wmeasure": out})


def dist_weighted_mean(
    x_table: Any,
    y_table: Any,
    measure_col: str,
    x_id: str = "id",
    x_lon_col: str = "lon",
    x_lat_col: str = "lat",
    y_lon_col: str = "lon",
    y_lat_col: str = "lat",
    dist_function: str | DistanceMetric = "Haversine",
    dist_transform: str | DistanceTransform = "level",
    decay: float = 2.0,
    *,
    cancel: CancelHook | None = None,
    settings: Settings | None = None,
) -> pd.DataFrame:
    """
    Interpolate inverse-distance-weighted measures for each x coordinate.

    Measures taken at the y coordinates are averaged with weights
    `inverse_value(distance, decay, dist_transform)`, so nearby measures count more.

    Args:
        x_table: Table with coordinates that need weighted measures (DataFrame or column mapping).
        y_table: Table with coordinates at which measures were taken.
        measure_col: Name of the measure column in `y_table`.
        x_id: Name of the identifier column in `x_table`.
        x_lon_col, x_lat_col: Longitude/latitude columns in `x_table`.
        y_lon_col, y_lat_col: Longitude/latitude columns in `y_table`.
        dist_function: "Haversine" (default) or "Vincenty".
        dist_transform: "level" (default) or "log".
        decay: Distance weight decay exponent.
        cancel: Optional host cancel hook, polled every N rows (see settings).
        settings: Optional settings instead of the cached defaults.

    Returns:
        DataFrame with columns `id` and `wmeasure`, one row per x row in input order.
    """
    options = InterpolationOptions.build(dist_function, dist_transform, decay)
    return _interpolate(
        "dist_weighted_mean",
        as_table(x_table),
        as_table(y_table),
        measure_col=measure_col,
        x_id=x_id,
        x_lon_col=x_lon_col,
        x_lat_col=x_lat_col,
        y_lon_col=y_lon_col,
        y_lat_col=y_lat_col,
        pop_col=None,
        options=options,
        cancel=cancel,
        settings=settings,
    )


def popdist_weighted_mean(
    x_table: Any,
    y_table: Any,
    measure_col: str,
    x_id: str = "id",
    x_lon_col: str = "lon",
    x_lat_col: str = "lat",
    y_lon_col: str = "lon",
    y_lat_col: str = "lat",
    pop_col: str = "pop",
    dist_function: str | DistanceMetric = "Haversine",
    dist_transform: str | DistanceTransform = "level",
    decay: float = 2.0,
    *,
    cancel: CancelHook | None = None,
    settings: Settings | None = None,
) -> pd.DataFrame:
    """
    Interpolate population/inverse-distance-weighted measures for each x coordinate.

    Like `dist_weighted_mean`, but each y weight is also multiplied by that row's
    population (`pop_col` in `y_table`), so measures from nearby and more populous
    areas count more.

    Returns:
        DataFrame with columns `id` and `wmeasure`, one row per x row in input order.
    """
    options = InterpolationOptions.build(dist_function, dist_transform, decay)
    return _interpolate(
        "popdist_weighted_mean",
        as_table(x_table),
        as_table(y_table),
        measure_col=measure_col,
        x_id=x_id,
        x_lon_col=x_lon_col,
        x_lat_col=x_lat_col,
        y_lon_col=y_lon_col,
        y_lat_col=y_lat_col,
        pop_col=pop_col,
        options=options,
        cancel=cancel,
        settings=settings,
    )


def _nearest(
    operation: str,
    x: Table,
    y: Table,
    *,
    x_id: str,
    x_lon_col: str,
    x_lat_col: str,
    y_lon_col: str,
    y_lat_col: str,
    metric: DistanceMetric,
    cancel: CancelHook | None,
    settings: Settings | None,
) -> pd.DataFrame:
    fun = resolve_metric(metric)

    ids = x.get_string_column(x_id)
    xc = _read_coordinates(x, x_lon_col, x_lat_col)
    yc = _read_coordinates(y, y_lon_col, y_lat_col)

    n = len(ids)
    checkpoint = _checkpoint(operation, cancel, n, settings)
    logger.debug("%s: %d origin rows x %d reference rows (metric=%s)", operation, n, yc.lon.shape[0], metric.value)

    out = np.empty(n, dtype=np.float64)
    for i in range(n):
        checkpoint.check(i)
        dist = one_to_many(fun, float(xc.lon[i]), float(xc.lat[i]), yc.lon, yc.lat)
        # No reference rows: nothing is near, so the minimum is +inf.
        out[i] = float(np.min(dist)) if dist.size else float("inf")

    return pd.DataFrame({"id": ids, "mindist": out})


def dist_min(
    x_table: Any,
    y_table: Any,
    x_id: str = "id",
    x_lon_col: str = "lon",
    x_lat_col: str = "lat",
    y_lon_col: str = "lon",
    y_lat_col: str = "lat",
    dist_function: str | DistanceMetric = "Haversine",
    *,
    cancel: CancelHook | None = None,
    settings: Settings | None = None,
) -> pd.DataFrame:
    """
    Find the minimum distance (meters) from each x point to any y point.

    Returns:
        DataFrame with columns `id` and `mindist`, one row per x row in input order.
    """
    metric = parse_metric(dist_function)
    return _nearest(
        "dist_min",
        as_table(x_table),
        as_table(y_table),
        x_id=x_id,
        x_lon_col=x_lon_col,
        x_lat_col=x_lat_col,
        y_lon_col=y_lon_col,
        y_lat_col=y_lat_col,
        metric=metric,
        cancel=cancel,
        settings=settings,
    )
