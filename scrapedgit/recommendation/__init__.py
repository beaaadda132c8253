"""Public exports for the recommendation scoring engine."""

from __future__ import annotations

from .engine import filter_scored_products, normalize_score, score, summarize
from .models import (
    DEFAULT_WEIGHTS,
    PriceRange,
    RawProduct,
    ResultsSummary,
    ScoredProduct,
    Weights,
)
from .shipping import (
    ShippingTier,
    available_cities,
    estimate_shipping_fee,
    get_city_distance,
    shipping_tier,
)

__all__ = [
    "DEFAULT_WEIGHTS",
    "PriceRange",
    "RawProduct",
    "ResultsSummary",
    "ScoredProduct",
    "ShippingTier",
    "Weights",
    "available_cities",
    "estimate_shipping_fee",
    "filter_scored_products",
    "get_city_distance",
    "normalize_score",
    "score",
    "shipping_tier",
    "summarize",
]
