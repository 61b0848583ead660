"""Coarse city-distance heuristic used to rank marketplace offers.

Distances come from approximate governorate capital positions and are only
meant for ordering. They are never shown to users.
"""
import math

# (latitude, longitude) of each governorate capital, rounded.
CITY_POSITIONS = {
    "Alexandria": (31.20, 29.92),
    "Aswan": (24.09, 32.90),
    "Assiut": (27.18, 31.18),
    "Beheira": (31.03, 30.47),
    "Beni Suef": (29.07, 31.10),
    "Cairo": (30.04, 31.24),
    "Dakahlia": (31.04, 31.38),
    "Damietta": (31.42, 31.81),
    "Fayoum": (29.31, 30.84),
    "Gharbia": (30.79, 31.00),
    "Giza": (30.01, 31.21),
    "Ismailia": (30.60, 32.27),
    "Kafr El Sheikh": (31.11, 30.94),
    "Luxor": (25.69, 32.64),
    "Matrouh": (31.35, 27.24),
    "Minya": (28.11, 30.74),
    "Monufia": (30.55, 31.01),
    "New Valley": (25.44, 30.55),
    "North Sinai": (31.13, 33.80),
    "Port Said": (31.26, 32.30),
    "Qalyubia": (30.46, 31.18),
    "Qena": (26.16, 32.72),
    "Red Sea": (27.26, 33.81),
    "Sharqia": (30.59, 31.50),
    "Sohag": (26.56, 31.69),
    "South Sinai": (28.24, 33.62),
    "Suez": (29.97, 32.53),
}

UNKNOWN_DISTANCE = math.inf
_KM_PER_DEGREE = 111.2


def _position(city):
    if not city:
        return None
    return CITY_POSITIONS.get(str(city).strip())


def city_distance(city_a, city_b):
    """Approximate distance in whole kilometres; inf if either city is unknown."""
    a = _position(city_a)
    b = _position(city_b)
    if a is None or b is None:
        return UNKNOWN_DISTANCE
    if a == b:
        return 0
    mean_lat = math.radians((a[0] + b[0]) / 2)
    dx = (b[1] - a[1]) * math.cos(mean_lat)
    dy = b[0] - a[0]
    return round(math.hypot(dx, dy) * _KM_PER_DEGREE)


def rank_by_proximity(offers, viewer_city):
    """Return a new list ordered by distance from ``viewer_city``.

    ``sorted`` is stable, so offers at the same distance keep their incoming
    (creation-descending) order.
    """
    return sorted(offers, key=lambda offer: city_distance(viewer_city, offer.city))


__all__ = ["CITY_POSITIONS", "UNKNOWN_DISTANCE", "city_distance", "rank_by_proximity"]
