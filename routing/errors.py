"""
Purpose: Error taxonomy for the routing capability.
What it does:
- MalformedPolyline: the encoded route text cannot be decoded safely
- InvalidCoordinate: a latitude/longitude is not a usable point on the globe

Rule: These are input-validation failures. "No feasible insertion" is NOT an
error and is never raised from here.
"""


class RoutingError(Exception):
    """Base class for routing input errors."""
    pass


class MalformedPolyline(RoutingError, ValueError):
    """
    Raised when an encoded polyline is truncated mid-chunk, ends between a
    latitude and its longitude, or contains characters outside the
    polyline alphabet (ASCII 63..126).
    """

    def __init__(self, message: str, index: int):
        super().__init__(f"{message} (at index {index})")
        self.index = index


class InvalidCoordinate(RoutingError, ValueError):
    """
    Raised when a latitude/longitude is non-finite or out of range,
    or when a value cannot be read as a coordinate at all.
    """
    pass
