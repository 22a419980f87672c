#Marks routing as a package.
#Re-exports the public geometry/route APIs (decode_polyline, distance_km,
#simplify_route_waypoints, estimate_route_metrics, ...) so other modules import
#from routing without knowing internal file names.
#No business logic.

from .errors import InvalidCoordinate, MalformedPolyline, RoutingError
from .eta_service import DEFAULT_AVERAGE_SPEED_KMH, estimate_route_metrics, resolve_average_speed_kmh
from .geofence import deviation_geofence_margin, passenger_within_geofence, route_geofence
from .geometry import (
    compute_route_bounding_box,
    contains_coordinate,
    distance_km,
    distance_to_segment_m,
    expand_bounding_box,
    initial_bearing_rad,
)
from .models import Coordinate, LatLon, RouteBoundingBox, RouteMetrics, ensure_coordinate
from .polyline import decode_polyline, encode_polyline
from .route_service import (
    ensure_route_endpoints,
    parse_stored_route_waypoints,
    prepare_route_for_evaluation,
    route_from_polyline,
    sanitize_route_waypoints,
)
from .simplify import simplify_route_waypoints

__all__ = [
           "Coordinate",
           "LatLon",
           "RouteBoundingBox",
           "RouteMetrics",
           "ensure_coordinate",
           "RoutingError",
           "MalformedPolyline",
           "InvalidCoordinate",
           "decode_polyline",
           "encode_polyline",
           "distance_km",
           "initial_bearing_rad",
           "distance_to_segment_m",
           "compute_route_bounding_box",
           "expand_bounding_box",
           "contains_coordinate",
           "simplify_route_waypoints",
           "DEFAULT_AVERAGE_SPEED_KMH",
           "estimate_route_metrics",
           "resolve_average_speed_kmh",
           "sanitize_route_waypoints",
           "parse_stored_route_waypoints",
           "ensure_route_endpoints",
           "route_from_polyline",
           "prepare_route_for_evaluation",
           "route_geofence",
           "passenger_within_geofence",
           "deviation_geofence_margin",
           ]
