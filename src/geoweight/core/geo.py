from __future__ import annotations
from dataclasses import dataclass
from math import asin, atan, atan2, cos, isfinite, nan, pi, sin, sqrt, tan

"""
Geodesic distance formulas.

Both metrics take (longitude, latitude) pairs in decimal degrees and return meters.
Inputs are not range-checked. Non-finite coordinates (NaN, +/-inf) give NaN.
"""

# Mean Earth radius used by the haversine approximation.
EARTH_RADIUS_M = 6_372_797.56

# WGS84 reference ellipsoid.
WGS84_A = 6_378_137.0
WGS84_F = 1 / 298.257223563
WGS84_B = (1 - WGS84_F) * WGS84_A

VINCENTY_MAX_ITERATIONS = 200
VINCENTY_TOLERANCE = 1e-12


@dataclass(frozen=True)
class GeoPoint:
    """A longitude/latitude pair in decimal degrees."""

    lon: float
    lat: float


def deg_to_rad(degree: float) -> float:
    """Convert decimal degrees to radians."""
    return degree * pi / 180


def _finite(*values: float) -> bool:
    return all(isfinite(v) for v in values)


def dist_haversine(xlon: float, xlat: float, ylon: float, ylat: float) -> float:
    """Great-circle distance in meters on a sphere of radius `EARTH_RADIUS_M`."""
    if not _finite(xlon, xlat, ylon, ylat):
        return nan
    lat1 = deg_to_rad(xlat)
    lat2 = deg_to_rad(ylat)
    dlat = lat2 - lat1
    dlon = deg_to_rad(ylon - xlon)

    h = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
    # Rounding can push h a hair above 1 for antipodal pairs.
    if h > 1.0:
        h = 1.0
    return 2 * EARTH_RADIUS_M * asin(sqrt(h))


def dist_vincenty(xlon: float, xlat: float, ylon: float, ylat: float) -> float:
    """
    Geodesic distance in meters on the WGS84 ellipsoid (Vincenty inverse formula).

    The lambda iteration stops once it moves less than `VINCENTY_TOLERANCE` or after
    `VINCENTY_MAX_ITERATIONS` rounds. Near-antipodal pairs may never converge; the
    estimate from the last round is returned in that case.
    """
    if not _finite(xlon, xlat, ylon, ylat):
        return nan
    f = WGS84_F
    L = deg_to_rad(ylon - xlon)
    U1 = atan((1 - f) * tan(deg_to_rad(xlat)))
    U2 = atan((1 - f) * tan(deg_to_rad(ylat)))
    sin_U1, cos_U1 = sin(U1), cos(U1)
    sin_U2, cos_U2 = sin(U2), cos(U2)

    lam = L
    sin_sigma = cos_sigma = sigma = cos2_alpha = cos_2sigma_m = 0.0
    for _ in range(VINCENTY_MAX_ITERATIONS):
        sin_lam, cos_lam = sin(lam), cos(lam)
        sin_sigma = sqrt(
            (cos_U2 * sin_lam) ** 2 + (cos_U1 * sin_U2 - sin_U1 * cos_U2 * cos_lam) ** 2
        )
        if sin_sigma == 0:
            # Coincident points.
            return 0.0
        cos_sigma = sin_U1 * sin_U2 + cos_U1 * cos_U2 * cos_lam
        sigma = atan2(sin_sigma, cos_sigma)
        sin_alpha = cos_U1 * cos_U2 * sin_lam / sin_sigma
        cos2_alpha = 1 - sin_alpha**2
        # Both points on the equator.
        cos_2sigma_m = cos_sigma - 2 * sin_U1 * sin_U2 / cos2_alpha if cos2_alpha != 0 else 0.0

        C = f / 16 * cos2_alpha * (4 + f * (4 - 3 * cos2_alpha))
        lam_prev = lam
        lam = L + (1 - C) * f * sin_alpha * (
            sigma + C * sin_sigma * (cos_2sigma_m + C * cos_sigma * (-1 + 2 * cos_2sigma_m**2))
        )
        if not abs(lam - lam_prev) > VINCENTY_TOLERANCE:
            break

    u2 = cos2_alpha * (WGS84_A**2 - WGS84_B**2) / WGS84_B**2
    A = 1 + u2 / 16384 * (4096 + u2 * (-768 + u2 * (320 - 175 * u2)))
    B = u2 / 1024 * (256 + u2 * (-128 + u2 * (74 - 47 * u2)))
    delta_sigma = B * sin_sigma * (
        cos_2sigma_m
        + B
        / 4
        * (
            cos_sigma * (-1 + 2 * cos_2sigma_m**2)
            - B / 6 * cos_2sigma_m * (-3 + 4 * sin_sigma**2) * (-3 + 4 * cos_2sigma_m**2)
        )
    )
    return WGS84_B * A * (sigma - delta_sigma)


def haversine_m(a: GeoPoint, b: GeoPoint) -> float:
    """Haversine distance in meters between two points."""
    return dist_haversine(a.lon, a.lat, b.lon, b.lat)


def vincenty_m(a: GeoPoint, b: GeoPoint) -> float:
    """Vincenty distance in meters between two points."""
    return dist_vincenty(a.lon, a.lat, b.lon, b.lat)
