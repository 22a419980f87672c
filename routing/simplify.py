"""
Purpose: Route simplification (Douglas-Peucker on the sphere).
What it does:
- Reduces a coordinate sequence to fewer points while bounding the lateral error,
  so the O(n^2) insertion search gets cheaper input.
- Keeps the first and last points, never reorders, never invents points.
- Guarantees a minimum number of points by lowering the tolerance and, as a last
  resort, merging in evenly spaced points.
"""
from __future__ import annotations

import logging
import math
from typing import List, Sequence, Set

from .geometry import distance_to_segment_m
from .models import Coordinate

logger = logging.getLogger(__name__)

# how many times the tolerance is halved before falling back to resampling
MAX_TOLERANCE_HALVINGS = 32


def simplify_route_waypoints(
    route: Sequence[Coordinate],
    tolerance_meters: float,
    minimum_points: int = 2,
) -> List[Coordinate]:
    """
    Douglas-Peucker simplification with a cross-track error bound in meters.

    Args:
        route: waypoints in traversal order
        tolerance_meters: points closer than this to the chord between their
            anchors are dropped
        minimum_points: lower bound on the size of the result (values < 2 act as 2)

    Returns:
        a new list with a subsequence of the input points
    """
    minimum_points = max(2, minimum_points)
    if len(route) <= minimum_points:
        return list(route)

    tolerance = max(0.0, float(tolerance_meters))
    kept = _douglas_peucker(route, tolerance)

    halvings = 0
    while len(kept) < minimum_points and tolerance > 0 and halvings < MAX_TOLERANCE_HALVINGS:
        tolerance /= 2
        halvings += 1
        kept = _douglas_peucker(route, tolerance)

    if len(kept) < minimum_points:
        kept |= _evenly_spaced_indices(len(route), minimum_points)

    simplified = [route[index] for index in sorted(kept)]
    logger.debug(
        "simplified route from %d to %d points (tolerance %.2f m, %d halvings)",
        len(route), len(simplified), tolerance, halvings,
    )
    return simplified


# -------------------------
# Internal helpers
# -------------------------

def _douglas_peucker(route: Sequence[Coordinate], tolerance: float) -> Set[int]:
    """
    Indices kept by Douglas-Peucker. Uses an explicit stack of (first, last)
    anchor ranges instead of recursion so long routes cannot hit the recursion limit.
    """
    last_index = len(route) - 1
    kept: Set[int] = {0, last_index}
    stack = [(0, last_index)]

    while stack:
        first, last = stack.pop()
        if last - first < 2:
            continue

        farthest_index = None
        farthest_distance = -1.0
        for index in range(first + 1, last):
            distance = distance_to_segment_m(route[index], route[first], route[last])
            if distance > farthest_distance:
                farthest_distance = distance
                farthest_index = index

        if farthest_index is not None and farthest_distance > tolerance:
            kept.add(farthest_index)
            stack.append((first, farthest_index))
            stack.append((farthest_index, last))

    return kept


def _evenly_spaced_indices(length: int, count: int) -> Set[int]:
    step = (length - 1) / (count - 1)
    return {int(math.floor(position * step + 0.5)) for position in range(count)}
