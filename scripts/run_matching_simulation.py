import logging
import os
import time
from datetime import datetime
from typing import List

import pandas as pd

from drivers.models import Travel
from matching.engine import find_matching_travels
from matching.log import configure_logging
from matching.models import PassengerStops
from matching.policy import matching_policy_from_env, options_from_env
from routing.errors import RoutingError
from routing.models import Coordinate

logger = logging.getLogger("run_matching_simulation")


def load_travels(filepath="travels_generated.csv") -> List[Travel]:
    df = pd.read_csv(filepath)

    travels = []
    for _, row in df.iterrows():
        try:
            travels.append(
                Travel.new(
                    str(row["travel_id"]),
                    str(row["driver_id"]),
                    (float(row["start_lat"]), float(row["start_lon"])),
                    (float(row["end_lat"]), float(row["end_lon"])),
                    datetime.fromisoformat(row["start_time"]),
                    encoded_polyline=row["route_polyline"] if isinstance(row["route_polyline"], str) else None,
                    spaces_available=int(row["spaces_available"]),
                    price=float(row["price"]),
                    status=str(row["status"]),
                )
            )
        except RoutingError as exc:
            logger.warning("dropping travel %s: %s", row["travel_id"], exc)
    return travels


def load_passengers(filepath="passengers_generated.csv", limit=None) -> pd.DataFrame:
    df = pd.read_csv(filepath)
    return df.head(limit) if limit else df


def run_simulation(
    travels_path="travels_generated.csv",
    passengers_path="passengers_generated.csv",
    output_path="matching_results.csv",
    limit=None,
):
    configure_logging()
    logger.info("=== STARTING PASSENGER MATCHING SIMULATION ===")

    # 1. Load Data
    travels = load_travels(travels_path)
    passengers = load_passengers(passengers_path, limit=limit)
    logger.info("Loaded %d travels and %d passenger requests", len(travels), len(passengers))

    # 2. Configure System (.env / RIDEMATCH_* overrides on top of the defaults)
    options = options_from_env()
    policy = matching_policy_from_env()

    # 3. Match every passenger against the whole pool
    rows = []
    matched_passengers = 0
    start_time = time.time()

    for _, passenger in passengers.iterrows():
        stops = PassengerStops(
            pickup=Coordinate(float(passenger["pickup_lat"]), float(passenger["pickup_lon"])),
            dropoff=Coordinate(float(passenger["dropoff_lat"]), float(passenger["dropoff_lon"])),
        )
        result = find_matching_travels(
            stops,
            travels,
            options=options,
            policy=policy,
            pickup_time=datetime.fromisoformat(passenger["pickup_time"]),
            passenger_id=str(passenger["passenger_id"]),
        )

        if not result.matches:
            rows.append({"passenger_id": passenger["passenger_id"], "rank": None, "travel_id": None})
            continue

        matched_passengers += 1
        for rank, match in enumerate(result.matches, 1):
            rows.append({
                "passenger_id": passenger["passenger_id"],
                "rank": rank,
                "travel_id": match.travel_id,
                "price": match.price,
                **match.summary.to_dict(),
            })

    elapsed = time.time() - start_time

    # 4. Save results next to the inputs
    pd.DataFrame(rows).to_csv(output_path, index=False)

    logger.info("=== SIMULATION COMPLETE ===")
    logger.info("Passengers matched: %d / %d in %.2fs", matched_passengers, len(passengers), elapsed)
    logger.info("Results written to '%s'", os.path.abspath(output_path))


if __name__ == "__main__":
    run_simulation()
