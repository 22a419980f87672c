"""
Purpose: Geometric primitives on the sphere.
What it does:
- great-circle (haversine) distance and initial bearing between two coordinates
- distance from a point to a route segment (cross-track, clamped to the segment)
- bounding-box construction, expansion by a margin in meters, containment

Rule: Pure math. No routing rules, no thresholds from policies.
"""
from __future__ import annotations

import math
from typing import Optional, Sequence

from .models import Coordinate, RouteBoundingBox

EARTH_RADIUS_KM = 6371.0

# meters covered by one degree of latitude (and of longitude at the equator)
METERS_PER_DEGREE = 111320.0

# length of one degree of arc on the EARTH_RADIUS_KM sphere, in meters
ARC_METERS_PER_DEGREE = EARTH_RADIUS_KM * 1000.0 * math.pi / 180

# below this |cos(latitude)| a longitude delta is meaningless (poles)
MIN_MERIDIAN_SCALE = 1e-9


def distance_km(a: Coordinate, b: Coordinate) -> float:
    """Haversine distance in kilometers. Symmetric, 0 for coincident points."""
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    delta_lat = lat2 - lat1
    delta_lon = math.radians(b.longitude - a.longitude)

    sin_lat = math.sin(delta_lat / 2)
    sin_lon = math.sin(delta_lon / 2)
    h = sin_lat * sin_lat + math.cos(lat1) * math.cos(lat2) * sin_lon * sin_lon

    return 2 * EARTH_RADIUS_KM * math.asin(min(1.0, math.sqrt(h)))


def initial_bearing_rad(a: Coordinate, b: Coordinate) -> float:
    """Forward azimuth from a to b, radians clockwise from north."""
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    delta_lon = math.radians(b.longitude - a.longitude)

    y = math.sin(delta_lon) * math.cos(lat2)
    x = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(delta_lon)
    return math.atan2(y, x)


def distance_to_segment_m(point: Coordinate, start: Coordinate, end: Coordinate) -> float:
    """
    Distance in meters from point to the nearest point of the arc start->end.

    Uses the spherical cross-track distance when the point projects inside the
    arc; otherwise the distance to the nearer endpoint. A degenerate arc
    (start == end) is just the distance to start.
    """
    segment_km = distance_km(start, end)
    to_point_km = distance_km(start, point)

    if segment_km == 0.0 or to_point_km == 0.0:
        return to_point_km * 1000.0

    angular_to_point = to_point_km / EARTH_RADIUS_KM
    angular_segment = segment_km / EARTH_RADIUS_KM
    bearing_delta = initial_bearing_rad(start, point) - initial_bearing_rad(start, end)

    # point lies behind the start of the segment
    if math.cos(bearing_delta) < 0:
        return to_point_km * 1000.0

    cross_track = math.asin(_clamp_unit(math.sin(angular_to_point) * math.sin(bearing_delta)))
    cos_cross_track = math.cos(cross_track)
    if cos_cross_track == 0.0:
        along_track = 0.0
    else:
        along_track = math.acos(_clamp_unit(math.cos(angular_to_point) / cos_cross_track))

    # point projects past the end of the segment
    if along_track > angular_segment:
        return distance_km(end, point) * 1000.0

    return abs(cross_track) * EARTH_RADIUS_KM * 1000.0


def compute_route_bounding_box(route: Sequence[Coordinate]) -> Optional[RouteBoundingBox]:
    """
    Minimal axis-aligned box containing every point of the route.
    Returns None for an empty route.
    """
    if not route:
        return None

    latitudes = [point.latitude for point in route]
    longitudes = [point.longitude for point in route]

    return RouteBoundingBox(
        min_latitude=min(latitudes),
        max_latitude=max(latitudes),
        min_longitude=min(longitudes),
        max_longitude=max(longitudes),
    )


def expand_bounding_box(box: RouteBoundingBox, meters: float) -> RouteBoundingBox:
    """
    Grow a box outward by `meters` on every side.

    Latitude delta uses a constant 111.32 km/degree; the longitude delta is
    scaled by cos(mean latitude). When that scale collapses (a box touching a
    pole) the box spans the whole longitude range. Results are clamped to
    valid coordinate ranges.
    """
    if meters < 0:
        raise ValueError("meters must be >= 0")

    latitude_delta = meters / METERS_PER_DEGREE
    mean_latitude = (box.min_latitude + box.max_latitude) / 2
    meridian_scale = math.cos(math.radians(mean_latitude))

    min_latitude = max(-90.0, box.min_latitude - latitude_delta)
    max_latitude = min(90.0, box.max_latitude + latitude_delta)

    if meridian_scale < MIN_MERIDIAN_SCALE:
        return RouteBoundingBox(
            min_latitude=min_latitude,
            max_latitude=max_latitude,
            min_longitude=-180.0,
            max_longitude=180.0,
        )

    longitude_delta = latitude_delta / meridian_scale
    return RouteBoundingBox(
        min_latitude=min_latitude,
        max_latitude=max_latitude,
        min_longitude=max(-180.0, box.min_longitude - longitude_delta),
        max_longitude=min(180.0, box.max_longitude + longitude_delta),
    )


def contains_coordinate(coordinate: Coordinate, box: RouteBoundingBox) -> bool:
    """Inclusive containment on both axes."""
    return (
        box.min_latitude <= coordinate.latitude <= box.max_latitude
        and box.min_longitude <= coordinate.longitude <= box.max_longitude
    )


def _clamp_unit(value: float) -> float:
    return max(-1.0, min(1.0, value))
