"""
Purpose: Value types shared by every routing module.
What it does:
- Coordinate (latitude, longitude in degrees), validated on construction
- RouteBoundingBox (axis-aligned lat/lon box, derived from a route)
- RouteMetrics (aggregate distance/duration of a route)

Rule: No geometry here, models only. All types are immutable.
"""
from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from typing import Any, Mapping, Sequence, Tuple

from .errors import InvalidCoordinate

# internal tuple convention: (lat, lon)
LatLon = Tuple[float, float]


@dataclass(frozen=True)
class Coordinate:
    """
    A point on the globe in degrees.

    Equality is exact float equality and is only meant for bookkeeping;
    geometric "same place" checks go through distance thresholds.
    """

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        _check_axis(self.latitude, 90.0, "latitude")
        _check_axis(self.longitude, 180.0, "longitude")

    @classmethod
    def from_latlon(cls, pair: Sequence[float]) -> Coordinate:
        if len(pair) != 2:
            raise InvalidCoordinate(f"expected a (lat, lon) pair, got {len(pair)} values")
        return cls(latitude=_as_float(pair[0], "latitude"), longitude=_as_float(pair[1], "longitude"))

    def as_latlon(self) -> LatLon:
        return (self.latitude, self.longitude)


@dataclass(frozen=True)
class RouteBoundingBox:
    """
    Minimal axis-aligned box around a route. Disposable: recompute it
    whenever the route changes. Does not handle antimeridian wraparound.
    """

    min_latitude: float
    max_latitude: float
    min_longitude: float
    max_longitude: float


@dataclass(frozen=True)
class RouteMetrics:
    """
    Aggregate distance/duration for a route.
    Only produced by routing.eta_service.estimate_route_metrics.
    """

    total_distance_km: float
    total_duration_minutes: float


def ensure_coordinate(value: Any) -> Coordinate:
    """
    Coerce the shapes callers commonly hold into a validated Coordinate.

    Accepts:
      - a Coordinate (returned as-is)
      - a (lat, lon) tuple/list
      - a mapping keyed latitude/lat and longitude/lng

    Raises InvalidCoordinate for anything else or for out-of-range values.
    """
    if isinstance(value, Coordinate):
        return value

    if isinstance(value, Mapping):
        latitude = value.get("latitude", value.get("lat"))
        longitude = value.get("longitude", value.get("lng"))
        if latitude is None or longitude is None:
            raise InvalidCoordinate(f"mapping is missing latitude/longitude: {value!r}")
        return Coordinate(
            latitude=_as_float(latitude, "latitude"),
            longitude=_as_float(longitude, "longitude"),
        )

    if isinstance(value, (tuple, list)):
        return Coordinate.from_latlon(value)

    raise InvalidCoordinate(f"cannot read a coordinate from {type(value).__name__}")


# -------------------------
# Internal helpers
# -------------------------

def _as_float(value: Any, axis: str) -> float:
    if isinstance(value, bool):
        raise InvalidCoordinate(f"{axis} must be a number, got a bool")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidCoordinate(f"{axis} must be a number, got {value!r}") from exc


def _check_axis(value: Any, limit: float, axis: str) -> None:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidCoordinate(f"{axis} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise InvalidCoordinate(f"{axis} must be finite, got {value!r}")
    if abs(value) > limit:
        raise InvalidCoordinate(f"{axis} {value!r} is outside [-{limit:g}, {limit:g}]")
