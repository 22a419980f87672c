import uuid
from datetime import datetime, timedelta

import numpy as np
import pandas as pd

from routing.polyline import encode_polyline


def generate_mock_travels(num_travels=200, output_file="travels_generated.csv", seed=None):
    """
    Generates a realistic dataset of published carpool travels.
    Each route is a start -> end line bent through a few jittered intermediate points
    and stored as an encoded polyline, the way the persistence layer keeps it.
    """
    rng = np.random.default_rng(seed)

    # Center around Harare, Zimbabwe
    CENTER_LAT = -17.824858
    CENTER_LON = 31.053028

    now = datetime.now().replace(second=0, microsecond=0)
    data = []

    for travel_index in range(num_travels):
        # Start within ~5km of the center, end ~5-15km away (roughly 0.05-0.15 degrees)
        start_lat = CENTER_LAT + rng.uniform(-0.05, 0.05)
        start_lon = CENTER_LON + rng.uniform(-0.05, 0.05)
        end_lat = start_lat + rng.choice([-1, 1]) * rng.uniform(0.05, 0.15)
        end_lon = start_lon + rng.choice([-1, 1]) * rng.uniform(0.05, 0.15)

        # Intermediate points along the straight line, pushed sideways by up to ~500m
        num_bends = rng.integers(3, 12)
        fractions = np.sort(rng.uniform(0.0, 1.0, size=num_bends))
        route = [(start_lat, start_lon)]
        for fraction in fractions:
            route.append((
                start_lat + fraction * (end_lat - start_lat) + rng.uniform(-0.005, 0.005),
                start_lon + fraction * (end_lon - start_lon) + rng.uniform(-0.005, 0.005),
            ))
        route.append((end_lat, end_lon))

        data.append({
            "travel_id": f"t_{str(travel_index + 1).zfill(5)}",
            "driver_id": f"d_{str(uuid.uuid4())[:8]}",
            "start_lat": np.round(start_lat, 6),
            "start_lon": np.round(start_lon, 6),
            "end_lat": np.round(end_lat, 6),
            "end_lon": np.round(end_lon, 6),
            "route_polyline": encode_polyline(route),
            "start_time": (now + timedelta(minutes=int(rng.integers(0, 240)))).isoformat(),
            "spaces_available": int(rng.integers(0, 5)),
            "price": np.round(rng.uniform(1.0, 8.0), 2),
            "status": rng.choice(["confirmed", "pending"], p=[0.9, 0.1]),
        })

    df = pd.DataFrame(data)
    df.to_csv(output_file, index=False)
    print(f"Generated {num_travels} travels and saved to '{output_file}'")
    return df


def generate_mock_passengers(travels_df, num_passengers=100, output_file="passengers_generated.csv", seed=None):
    """
    Generates passenger requests whose pickup/dropoff lie roughly along existing travels
    (so a good share of them can be matched) plus some random ones.
    """
    rng = np.random.default_rng(seed)
    data = []

    for passenger_index in range(num_passengers):
        travel = travels_df.iloc[int(rng.integers(0, len(travels_df)))]
        pickup_fraction, dropoff_fraction = np.sort(rng.uniform(0.0, 1.0, size=2))

        # 1 in 5 passengers is placed anywhere around the travel's start
        jitter = 0.003 if rng.random() < 0.8 else 0.05

        def along(fraction):
            return (
                travel["start_lat"] + fraction * (travel["end_lat"] - travel["start_lat"]) + rng.uniform(-jitter, jitter),
                travel["start_lon"] + fraction * (travel["end_lon"] - travel["start_lon"]) + rng.uniform(-jitter, jitter),
            )

        pickup_lat, pickup_lon = along(pickup_fraction)
        dropoff_lat, dropoff_lon = along(dropoff_fraction)
        pickup_time = datetime.fromisoformat(travel["start_time"]) + timedelta(minutes=int(rng.integers(-30, 30)))

        data.append({
            "passenger_id": f"p_{str(passenger_index + 1).zfill(5)}",
            "pickup_lat": np.round(pickup_lat, 6),
            "pickup_lon": np.round(pickup_lon, 6),
            "dropoff_lat": np.round(dropoff_lat, 6),
            "dropoff_lon": np.round(dropoff_lon, 6),
            "pickup_time": pickup_time.isoformat(),
        })

    df = pd.DataFrame(data)
    df.to_csv(output_file, index=False)
    print(f"Generated {num_passengers} passenger requests and saved to '{output_file}'")
    return df


if __name__ == "__main__":
    travels = generate_mock_travels(num_travels=200)
    generate_mock_passengers(travels, num_passengers=100)
