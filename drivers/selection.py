"""
Purpose: Business rules for which published travels a passenger may even be matched with.
What it does:
Accepts a pool of travels, filters out ineligible ones (status, seats, own travel,
departure time) and orders the rest by departure. No geometry here: whether the
passenger fits the route is the matching engine's job.
"""

from datetime import datetime, timedelta
from typing import List, Optional, Sequence

from .models import Travel, TravelStatus


def filter_eligible_travels(
    travels: Sequence[Travel],
    *,
    required_seats: int = 1,
    pickup_time: Optional[datetime] = None,
    time_window_minutes: int = 90,
    now: Optional[datetime] = None,
    exclude_driver_id: Optional[str] = None,
) -> List[Travel]:
    """
    Returns only travels that are confirmed, have enough free seats, are not
    driven by the requesting user, and depart in time.

    Departure rule:
      - with pickup_time: start_time within +/- time_window_minutes of it
      - without: start_time not in the past (relative to `now`, which defaults to
        the current time in the travel's own timezone, naive for naive start times)
    """
    window = timedelta(minutes=time_window_minutes)

    eligible = []
    for travel in travels:
        if travel.status != TravelStatus.CONFIRMED:
            continue

        if travel.spaces_available < required_seats:
            continue

        if exclude_driver_id is not None and travel.driver_id == exclude_driver_id:
            continue

        if pickup_time is not None:
            if not (pickup_time - window <= travel.start_time <= pickup_time + window):
                continue
        elif travel.start_time < (now or datetime.now(travel.start_time.tzinfo)):
            continue

        eligible.append(travel)

    eligible.sort(key=lambda travel: travel.start_time)
    return eligible
