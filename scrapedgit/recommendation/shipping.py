"""City-distance based shipping fee estimation for Indonesian couriers.

Distances are rough road/sea figures in kilometres between major cities. The
table is sparse and may be asymmetric, so lookups try both directions before
falling back to a continental-average distance.
"""

from __future__ import annotations

import math
import re
from enum import Enum
from typing import Mapping

BASE_COST = 10_000
PER_KM_RATE = 15
PER_EXTRA_KG_RATE = 2_000
DEFAULT_DISTANCE_KM = 500
ROUNDING_STEP = 500

CITY_DISTANCES: Mapping[str, Mapping[str, int]] = {
    "jakarta": {
        "jakarta": 0,
        "bogor": 60,
        "depok": 30,
        "tangerang": 25,
        "bekasi": 20,
        "bandung": 150,
        "semarang": 450,
        "surabaya": 800,
        "malang": 850,
        "yogyakarta": 520,
        "solo": 550,
        "medan": 1800,
        "palembang": 450,
        "makassar": 1400,
        "denpasar": 1200,
        "balikpapan": 1200,
        "pontianak": 750,
        "manado": 2500,
        "padang": 900,
        "pekanbaru": 1200,
    },
    "surabaya": {
        "jakarta": 800,
        "surabaya": 0,
        "malang": 90,
        "semarang": 350,
        "yogyakarta": 330,
        "solo": 260,
        "bandung": 700,
        "denpasar": 400,
        "makassar": 700,
        "balikpapan": 500,
    },
    "bandung": {
        "jakarta": 150,
        "bandung": 0,
        "semarang": 340,
        "surabaya": 700,
        "yogyakarta": 420,
        "bogor": 110,
    },
    "yogyakarta": {
        "jakarta": 520,
        "yogyakarta": 0,
        "solo": 65,
        "semarang": 120,
        "surabaya": 330,
        "bandung": 420,
        "malang": 350,
    },
    "medan": {
        "jakarta": 1800,
        "medan": 0,
        "padang": 800,
        "pekanbaru": 450,
        "palembang": 1500,
    },
}

_ADMIN_PREFIX = re.compile(
    r"^(?:(?:city|regency|province)\s+of|kota|kabupaten|kab\.?|provinsi)\s+"
)


class ShippingTier(str, Enum):
    """Display bands for an estimated fee."""

    CHEAP = "cheap"
    MEDIUM = "medium"
    EXPENSIVE = "expensive"
    VERY_EXPENSIVE = "very-expensive"


def normalize_city(city: str | None) -> str:
    """Case-fold a city name and strip administrative prefixes."""

    if not city:
        return ""
    normalized = " ".join(city.casefold().split())
    return _ADMIN_PREFIX.sub("", normalized)


def get_city_distance(from_city: str | None, to_city: str | None) -> int:
    """Return the tabulated distance between two cities in kilometres."""

    origin = normalize_city(from_city)
    destination = normalize_city(to_city)

    if origin == destination:
        return 0

    forward = CITY_DISTANCES.get(origin, {}).get(destination)
    if forward is not None:
        return forward
    backward = CITY_DISTANCES.get(destination, {}).get(origin)
    if backward is not None:
        return backward

    return DEFAULT_DISTANCE_KM


def estimate_shipping_fee(
    from_city: str | None, to_city: str | None, weight_kg: float = 1.0
) -> int:
    """Estimate the courier fee for a parcel, rounded to the nearest 500."""

    distance = get_city_distance(from_city, to_city)
    extra_weight = max(0.0, weight_kg - 1.0)
    fee = BASE_COST + distance * PER_KM_RATE + extra_weight * PER_EXTRA_KG_RATE
    return int(math.floor(fee / ROUNDING_STEP + 0.5)) * ROUNDING_STEP


def shipping_tier(fee: float) -> ShippingTier:
    """Classify a fee for display; carries no ranking semantics."""

    if fee <= 15_000:
        return ShippingTier.CHEAP
    if fee <= 30_000:
        return ShippingTier.MEDIUM
    if fee <= 50_000:
        return ShippingTier.EXPENSIVE
    return ShippingTier.VERY_EXPENSIVE


def available_cities() -> list[str]:
    """Return every city known to the distance table, title-cased and sorted."""

    cities: set[str] = set()
    for origin, destinations in CITY_DISTANCES.items():
        cities.add(origin.title())
        cities.update(name.title() for name in destinations)
    return sorted(cities)


__all__ = [
    "BASE_COST",
    "CITY_DISTANCES",
    "DEFAULT_DISTANCE_KM",
    "PER_EXTRA_KG_RATE",
    "PER_KM_RATE",
    "ShippingTier",
    "available_cities",
    "estimate_shipping_fee",
    "get_city_distance",
    "normalize_city",
    "shipping_tier",
]
