"""
Polyline codec for stored driver routes.

Implements the standard encoded-polyline algorithm (precision 1e5) described at
https://developers.google.com/maps/documentation/utilities/polylinealgorithm

Each coordinate component is a zig-zag signed delta from the previous point,
written as 5-bit chunks (least significant first) offset by 63; bit 0x20 marks
that another chunk follows. The first point is a delta from (0, 0).
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, List, Optional

from .errors import MalformedPolyline
from .models import Coordinate, ensure_coordinate

PRECISION = 1e5

_CHUNK_OFFSET = 63
_CHUNK_MASK = 0x1F
_CONTINUATION_BIT = 0x20
_MAX_CHAR = 126


@dataclass
class _PolylineCursor:
    """
    Read position over an encoded string.
    One call to read_delta() consumes exactly one encoded component.
    """
    encoded: str
    index: int = 0

    def at_end(self) -> bool:
        return self.index >= len(self.encoded)

    def read_delta(self) -> int:
        result = 0
        shift = 0
        while True:
            if self.at_end():
                raise MalformedPolyline("polyline ends in the middle of a chunk", self.index)

            char_code = ord(self.encoded[self.index])
            if char_code < _CHUNK_OFFSET or char_code > _MAX_CHAR:
                raise MalformedPolyline(f"invalid polyline character {self.encoded[self.index]!r}", self.index)

            chunk = char_code - _CHUNK_OFFSET
            self.index += 1
            result |= (chunk & _CHUNK_MASK) << shift
            shift += 5

            if chunk < _CONTINUATION_BIT:
                break

        return ~(result >> 1) if result & 1 else result >> 1


def decode_polyline(encoded: Optional[str]) -> List[Coordinate]:
    """
    Decode an encoded polyline into coordinates, in encoding order.

    Args:
        encoded: encoded polyline text; None or "" decodes to an empty list

    Returns:
        List[Coordinate]

    Raises:
        MalformedPolyline: truncated chunk, dangling latitude, or bad character
        InvalidCoordinate: a decoded point falls outside valid lat/lon ranges
    """
    if not encoded:
        return []

    cursor = _PolylineCursor(encoded)
    points: List[Coordinate] = []
    latitude = 0
    longitude = 0

    while not cursor.at_end():
        latitude += cursor.read_delta()
        if cursor.at_end():
            raise MalformedPolyline("polyline ends after a latitude without its longitude", cursor.index)
        longitude += cursor.read_delta()

        points.append(Coordinate(latitude=latitude / PRECISION, longitude=longitude / PRECISION))

    return points


def encode_polyline(points: Iterable) -> str:
    """
    Encode coordinates (Coordinate or (lat, lon) pairs) as a polyline string.
    Values are rounded half-up to 1e-5 degrees like the reference encoder.
    """
    chunks: List[str] = []
    previous_latitude = 0
    previous_longitude = 0

    for point in points:
        coordinate = ensure_coordinate(point)
        latitude = _to_units(coordinate.latitude)
        longitude = _to_units(coordinate.longitude)

        _write_delta(latitude - previous_latitude, chunks)
        _write_delta(longitude - previous_longitude, chunks)

        previous_latitude = latitude
        previous_longitude = longitude

    return "".join(chunks)


# -------------------------
# Internal helpers
# -------------------------

def _to_units(value: float) -> int:
    return int(math.floor(value * PRECISION + 0.5))


def _write_delta(delta: int, chunks: List[str]) -> None:
    value = ~(delta << 1) if delta < 0 else delta << 1
    while value >= _CONTINUATION_BIT:
        chunks.append(chr((_CONTINUATION_BIT | (value & _CHUNK_MASK)) + _CHUNK_OFFSET))
        value >>= 5
    chunks.append(chr(value + _CHUNK_OFFSET))
