"""Point-to-point distance metrics for planar and lon/lat coordinates.

Every metric takes two points ``a`` and ``b`` indexed as ``(x, y)`` or
``(longitude, latitude)`` and returns a scalar that grows monotonically with
the true distance. Only the squared Euclidean metric is a planar measure; the
others expect degrees and convert to radians internally.

The formulas are written with numpy ufuncs so the same function works on plain
tuples and on coordinate arrays: ``metric(query, points.T)`` returns one value
per point.
"""

from enum import Enum
from typing import Callable

import numpy as np

MetricFn = Callable[..., float]


def squared_euclidean(a, b):
    """Planar squared Euclidean distance ``(ax - bx)^2 + (ay - by)^2``."""
    dx = a[0] - b[0]
    dy = a[1] - b[1]
    return dx * dx + dy * dy


def haversine_relative(a, b):
    """Relative distance from the Haversine formula.

    Returns the square of half the chord length between ``a`` and ``b`` on the
    unit sphere, i.e. ``sin^2(dphi/2) + cos(phi1) cos(phi2) sin^2(dlambda/2)``.
    It ranks points exactly like the great-circle distance and skips the
    inverse trig step. See https://en.wikipedia.org/wiki/Haversine_formula

    Args:
        a: (longitude, latitude) in degrees.
        b: (longitude, latitude) in degrees.
    """
    phi1 = np.radians(a[1])
    phi2 = np.radians(b[1])
    sin_dphi = np.sin((phi2 - phi1) / 2.0)
    sin_dlambda = np.sin(np.radians(b[0] - a[0]) / 2.0)
    return sin_dphi * sin_dphi + np.cos(phi1) * np.cos(phi2) * sin_dlambda * sin_dlambda


def spherical_law_of_cosines(a, b):
    """Arc angle in radians from the spherical law of cosines.

    Loses precision for nearly coincident points because the ``acos``
    argument approaches 1; prefer :func:`haversine_relative` there.
    """
    phi1 = np.radians(a[1])
    phi2 = np.radians(b[1])
    dlambda = np.radians(b[0] - a[0])
    cos_angle = np.sin(phi1) * np.sin(phi2) + np.cos(phi1) * np.cos(phi2) * np.cos(dlambda)
    # rounding can push the argument just past +-1
    return np.arccos(np.clip(cos_angle, -1.0, 1.0))


def equirectangular_relative(a, b):
    """Squared arc angle under the equirectangular projection.

    Cheapest of the geographic metrics. Accurate only over short ranges and
    away from the poles.
    """
    phi1 = np.radians(a[1])
    phi2 = np.radians(b[1])
    x = np.radians(b[0] - a[0]) * np.cos((phi1 + phi2) / 2.0)
    y = phi2 - phi1
    return x * x + y * y


class DistanceMetric(str, Enum):
    """Names for the built-in metrics, usable wherever a metric is accepted."""

    def __str__(self):
        return str(self.value)

    Euclidean = "euclidean"
    """Squared Euclidean distance for planar coordinates (the default)."""

    Haversine = "haversine"
    """Haversine half-chord term for lon/lat degrees."""

    SphericalCosine = "spherical_cosine"
    """Spherical law of cosines arc angle for lon/lat degrees."""

    Equirectangular = "equirectangular"
    """Equirectangular approximation for lon/lat degrees over short ranges."""

    @property
    def is_geographic(self) -> bool:
        return self is not DistanceMetric.Euclidean


_METRICS: dict[DistanceMetric, MetricFn] = {
    DistanceMetric.Euclidean: squared_euclidean,
    DistanceMetric.Haversine: haversine_relative,
    DistanceMetric.SphericalCosine: spherical_law_of_cosines,
    DistanceMetric.Equirectangular: equirectangular_relative,
}


def get_metric(metric: "str | DistanceMetric | MetricFn | None" = None) -> MetricFn:
    """Resolve a metric name, enum member or callable to a metric function.

    ``None`` resolves to :func:`squared_euclidean`. Callables are returned
    unchanged so callers can plug in their own metric.
    """
    if metric is None:
        return squared_euclidean
    if callable(metric):
        return metric
    try:
        return _METRICS[DistanceMetric(metric)]
    except ValueError:
        raise ValueError(
            f"Unknown metric '{metric}'. Available: {[str(m) for m in DistanceMetric]}"
        ) from None


def list_metrics() -> list[str]:
    """Return available metric names."""
    return [str(m) for m in DistanceMetric]
