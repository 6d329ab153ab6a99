"""Noise filtering, smoothing and simplification for recorded GPS routes."""

from __future__ import annotations

from dataclasses import replace
import logging
from typing import List, Sequence

import numpy as np
from numpy.typing import NDArray
from polyline import encode as polyline_encode
from pyproj import CRS, Transformer
from pyproj.exceptions import CRSError
from shapely.geometry import LineString

from .geo import pair_speed_mps
from .models import LocationPoint

_LOG = logging.getLogger(__name__)

MetricArray = NDArray[np.float64]


def is_accurate(point: LocationPoint, max_accuracy_m: float) -> bool:
    """True when the reported accuracy radius is within ``max_accuracy_m``."""

    return point.accuracy <= max_accuracy_m


def is_plausible_move(
    previous: LocationPoint, point: LocationPoint, max_speed_mps: float
) -> bool:
    """True unless moving from ``previous`` to ``point`` exceeds ``max_speed_mps``."""

    return pair_speed_mps(previous, point) <= max_speed_mps


def filter_by_accuracy(
    points: Sequence[LocationPoint], max_accuracy_m: float
) -> List[LocationPoint]:
    """Drop samples whose reported accuracy radius exceeds ``max_accuracy_m``."""

    return [point for point in points if is_accurate(point, max_accuracy_m)]


def filter_by_speed(
    points: Sequence[LocationPoint], max_speed_mps: float
) -> List[LocationPoint]:
    """Drop samples that imply an implausible jump from the last kept sample."""

    kept: List[LocationPoint] = []
    for point in points:
        if kept and not is_plausible_move(kept[-1], point, max_speed_mps):
            continue
        kept.append(point)
    dropped = len(points) - len(kept)
    if dropped:
        _LOG.debug(
            "Speed filter dropped %d of %d samples (max %.1f m/s)",
            dropped,
            len(points),
            max_speed_mps,
        )
    return kept


class KalmanFilter:
    """Scalar Kalman filter used to damp coordinate jitter."""

    def __init__(
        self, process_noise: float = 0.01, measurement_noise: float = 0.1
    ) -> None:
        self.q = process_noise
        self.r = measurement_noise
        self.x = 0.0
        self.p = 0.0

    def reset(self, initial_value: float = 0.0) -> None:
        self.x = initial_value
        self.p = 0.0

    def update(self, measurement: float) -> float:
        self.p += self.q
        gain = self.p / (self.p + self.r)
        self.x += gain * (measurement - self.x)
        self.p *= 1.0 - gain
        return self.x


def smooth_points(points: Sequence[LocationPoint]) -> List[LocationPoint]:
    """Return copies of ``points`` with Kalman-filtered coordinates.

    The first sample seeds the filters and is returned unchanged.
    """

    if len(points) <= 1:
        return list(points)
    lat_filter = KalmanFilter()
    lon_filter = KalmanFilter()
    lat_filter.reset(points[0].latitude)
    lon_filter.reset(points[0].longitude)
    smoothed = [points[0]]
    for point in points[1:]:
        smoothed.append(
            replace(
                point,
                latitude=lat_filter.update(point.latitude),
                longitude=lon_filter.update(point.longitude),
            )
        )
    return smoothed


def simplify_route(
    points: Sequence[LocationPoint], tolerance_m: float
) -> List[LocationPoint]:
    """Douglas-Peucker simplification that returns a subset of ``points``.

    Coordinates are projected into a local UTM zone so ``tolerance_m`` is a
    true metric distance. Endpoints are always kept.
    """

    if len(points) < 3 or tolerance_m <= 0:
        return list(points)
    transformer = _build_local_transformer(points)
    metric = _project_points(points, transformer)
    simplified = LineString(metric).simplify(tolerance_m, preserve_topology=False)
    kept: List[LocationPoint] = []
    cursor = 0
    for coord in np.asarray(simplified.coords, dtype=float):
        while cursor < len(metric) and not np.allclose(metric[cursor], coord):
            cursor += 1
        if cursor >= len(metric):
            break
        kept.append(points[cursor])
        cursor += 1
    if not kept or kept[0] is not points[0]:
        kept.insert(0, points[0])
    if kept[-1] is not points[-1]:
        kept.append(points[-1])
    _LOG.debug(
        "Simplified route from %d to %d points (tolerance %.1fm)",
        len(points),
        len(kept),
        tolerance_m,
    )
    return kept


def encode_route(points: Sequence[LocationPoint], precision: int = 5) -> str:
    """Encode the route as a Google polyline string for map consumers."""

    return polyline_encode(
        [(point.latitude, point.longitude) for point in points], precision
    )


def _build_local_transformer(points: Sequence[LocationPoint]) -> Transformer:
    """Build a local UTM transformer centred on the provided samples."""

    mean_lat = float(np.mean([point.latitude for point in points]))
    mean_lon = float(np.mean([point.longitude for point in points]))
    zone = int((mean_lon + 180.0) // 6.0) + 1
    zone = max(1, min(zone, 60))
    epsg = 32600 + zone if mean_lat >= 0 else 32700 + zone
    try:
        target_crs = CRS.from_epsg(epsg)
    except CRSError:
        target_crs = CRS.from_epsg(3857)
    return Transformer.from_crs(CRS.from_epsg(4326), target_crs, always_xy=True)


def _project_points(
    points: Sequence[LocationPoint], transformer: Transformer
) -> MetricArray:
    lats = np.asarray([point.latitude for point in points], dtype=float)
    lons = np.asarray([point.longitude for point in points], dtype=float)
    xs, ys = transformer.transform(lons, lats)
    return np.column_stack((xs, ys)).astype(float, copy=False)


__all__ = [
    "is_accurate",
    "is_plausible_move",
    "filter_by_accuracy",
    "filter_by_speed",
    "KalmanFilter",
    "smooth_points",
    "simplify_route",
    "encode_route",
]
