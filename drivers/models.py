"""
Purpose: Core data models for the drivers domain.
What it does:
Defines a published Travel (a driver's route offered to passengers) and its status,
without relying on any ORM. The persistence layer builds these from its records.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Optional, Sequence, Tuple

from routing.models import Coordinate, ensure_coordinate
from routing.route_service import route_from_polyline, sanitize_route_waypoints


class TravelStatus(str, Enum):
    """
    Standardizes the state a published travel can be in.
    Only CONFIRMED travels accept new passengers.
    """
    PENDING = "pending"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class Travel:
    """
    A purely stateless snapshot of a driver's published travel.

    route_waypoints may be empty when the travel has no stored route;
    matching then falls back to the straight start -> end line.
    """
    id: str
    driver_id: str
    start: Coordinate
    end: Coordinate
    start_time: datetime
    route_waypoints: Tuple[Coordinate, ...] = ()
    spaces_available: int = 1
    price: float = 0.0
    status: TravelStatus = TravelStatus.CONFIRMED

    @classmethod
    def new(
        cls,
        travel_id: str,
        driver_id: str,
        start: Any,
        end: Any,
        start_time: datetime,
        *,
        encoded_polyline: Optional[str] = None,
        route_waypoints: Optional[Sequence[Any]] = None,
        spaces_available: int = 1,
        price: float = 0.0,
        status: str | TravelStatus = TravelStatus.CONFIRMED,
    ) -> Travel:
        """
        Build a Travel from raw values. An encoded polyline wins over explicit
        waypoints; either one is validated and de-duplicated.
        """
        if isinstance(status, str):
            status = TravelStatus(status)

        if encoded_polyline:
            waypoints = route_from_polyline(encoded_polyline)
        else:
            waypoints = sanitize_route_waypoints(route_waypoints)

        return cls(
            id=travel_id,
            driver_id=driver_id,
            start=ensure_coordinate(start),
            end=ensure_coordinate(end),
            start_time=start_time,
            route_waypoints=tuple(waypoints or ()),
            spaces_available=int(spaces_available),
            price=float(price),
            status=status,
        )
