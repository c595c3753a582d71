"""
Geoturismo Backend — Route Duration Estimator
===============================================

What:  Approximates how long a route takes on foot from the coordinates of
       its points.
How:   Nearest-neighbour lower bound: for every point, take the great-circle
       distance to the closest *other* point of the route, sum those minima,
       and convert kilometres to minutes at AVERAGE_SPEED_KMH.

           duracion = round(sum_i(min_{j≠i} d(Pi, Pj)) / 5 * 60)

       This is not a tour length. Star-shaped layouts are undercounted and no
       metric property is claimed for the aggregate.

Incremental variants (used when one point is added or removed):
    added_minutes(new, existing)      → minutes to add to the stored value
    removed_minutes(old, remaining)   → minutes to subtract (floored at 0 by
                                        apply_removal)
    Both only look at the changed point; neighbours whose nearest point
    changed are not revisited until the next full recomputation.

Edge cases:
    0 or 1 points → 0 minutes.
"""

import math
from typing import Iterable, Optional, Sequence, Tuple

EARTH_RADIUS_KM = 6371.0
AVERAGE_SPEED_KMH = 5.0

Coordenada = Tuple[float, float]


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in km between two (lat, lon) pairs in degrees."""
    lat1, lon1, lat2, lon2 = map(math.radians, (lat1, lon1, lat2, lon2))
    dlat = lat2 - lat1
    dlon = lon2 - lon1
    a = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    c = 2 * math.asin(math.sqrt(min(1.0, a)))
    return EARTH_RADIUS_KM * c


def km_to_minutes(distance_km: float) -> float:
    """Travel time in minutes at the assumed average speed."""
    return distance_km / AVERAGE_SPEED_KMH * 60


def nearest_km(point: Coordenada, others: Iterable[Coordenada]) -> Optional[float]:
    """Distance from `point` to the closest coordinate in `others`, or None if empty."""
    distances = [haversine_km(point[0], point[1], lat, lon) for lat, lon in others]
    if not distances:
        return None
    return min(distances)


def nearest_neighbour_sum_km(points: Sequence[Coordenada]) -> float:
    """Sum over all points of the distance to their nearest other point."""
    if len(points) < 2:
        return 0.0
    total = 0.0
    for i, point in enumerate(points):
        others = [p for j, p in enumerate(points) if j != i]
        total += nearest_km(point, others)
    return total


def estimate_minutes(points: Sequence[Coordenada]) -> int:
    """Full duration estimate for a route, in whole minutes."""
    return round(km_to_minutes(nearest_neighbour_sum_km(points)))


def added_minutes(new_point: Coordenada, existing: Sequence[Coordenada]) -> int:
    """Contribution of a point joining a route that already holds `existing`."""
    distance = nearest_km(new_point, existing)
    if distance is None:
        return 0
    return round(km_to_minutes(distance))


def removed_minutes(old_point: Coordenada, remaining: Sequence[Coordenada]) -> int:
    """Contribution of a point leaving a route; `remaining` excludes it."""
    return added_minutes(old_point, remaining)


def apply_removal(current: int, contribution: int) -> int:
    """Subtracts a contribution from a stored duration, never going below zero."""
    return max(0, current - contribution)
