"""Multi-attribute scoring and ranking of scraped product listings."""

from __future__ import annotations

from collections import Counter
from typing import Callable, Iterable, Sequence

import logfire

from .models import (
    DEFAULT_WEIGHTS,
    PriceRange,
    RawProduct,
    ResultsSummary,
    ScoredProduct,
    Weights,
)
from .shipping import estimate_shipping_fee

ShippingEstimator = Callable[[str, str], int]

_DEGENERATE_SCORE = 50.0
_DEFAULT_MAX_RATING = 5.0


def normalize_score(value: float, low: float, high: float, invert: bool = False) -> float:
    """Min-max scale ``value`` into ``[0, 100]``; 50 when the range collapses."""

    if high == low:
        return _DEGENERATE_SCORE
    scaled = (value - low) / (high - low) * 100
    if invert:
        scaled = 100 - scaled
    return max(0.0, min(100.0, scaled))


def score(
    products: Sequence[RawProduct],
    target_location: str = "Jakarta",
    weights: Weights = DEFAULT_WEIGHTS,
    *,
    estimator: ShippingEstimator = estimate_shipping_fee,
) -> list[ScoredProduct]:
    """Score every product against the batch and return them ranked best first.

    Ties keep their input order, so re-scoring an unchanged batch reproduces
    identical ranks.
    """

    if not products:
        return []

    with logfire.span(
        "recommendation.score",
        products=len(products),
        target_location=target_location,
    ):
        shipping = [estimator(product.seller_location, target_location) for product in products]

        prices = [product.price for product in products]
        sold_counts = [product.sold_count for product in products]
        ratings = [product.rating for product in products]
        positive_ratings = [rating for rating in ratings if rating > 0]

        min_price, max_price = min(prices), max(prices)
        min_shipping, max_shipping = min(shipping), max(shipping)
        min_sold, max_sold = min(sold_counts), max(sold_counts)
        min_rating = min(ratings)
        max_rating = max(positive_ratings) if positive_ratings else _DEFAULT_MAX_RATING

        unranked: list[dict] = []
        for product, fee in zip(products, shipping):
            price_score = normalize_score(product.price, min_price, max_price, invert=True)
            shipping_score = normalize_score(fee, min_shipping, max_shipping, invert=True)
            sold_score = normalize_score(product.sold_count, min_sold, max_sold)
            rating_score = normalize_score(product.rating, min_rating, max_rating)

            final_score = (
                price_score * weights.price
                + shipping_score * weights.shipping
                + sold_score * weights.sold_count
                + rating_score * weights.rating
            )

            unranked.append(
                {
                    **product.model_dump(),
                    "price_score": round(price_score, 2),
                    "shipping_score": round(shipping_score, 2),
                    "sold_score": round(sold_score, 2),
                    "rating_score": round(rating_score, 2),
                    "final_score": round(final_score, 2),
                    "estimated_shipping": fee,
                }
            )

        # sorted() with reverse=True is still stable for equal keys.
        ordered = sorted(unranked, key=lambda item: item["final_score"], reverse=True)
        ranked = [
            ScoredProduct(**item, rank=position)
            for position, item in enumerate(ordered, start=1)
        ]

        logfire.info(
            "recommendation.ranked",
            count=len(ranked),
            top_score=ranked[0].final_score,
            sources=sorted({product.source for product in ranked}),
        )
        return ranked


def summarize(products: Sequence[RawProduct]) -> ResultsSummary:
    """Return aggregate statistics for a (scored) result set."""

    if not products:
        return ResultsSummary()

    prices = [product.price for product in products]
    ratings = [product.rating for product in products if product.rating > 0]
    sources = Counter(product.source for product in products)

    average_rating = round(sum(ratings) / len(ratings), 1) if ratings else 0.0

    return ResultsSummary(
        total_products=len(products),
        average_price=round(sum(prices) / len(prices)),
        price_range=PriceRange(min=min(prices), max=max(prices)),
        average_rating=average_rating,
        sources=dict(sources),
    )


def filter_scored_products(
    products: Iterable[ScoredProduct],
    *,
    min_final_score: float | None = None,
    max_price: float | None = None,
    min_rating: float | None = None,
    sources: Sequence[str] | None = None,
) -> list[ScoredProduct]:
    """Apply optional post-ranking filters; ranks are left untouched."""

    allowed_sources = {source.lower() for source in sources} if sources else None

    filtered: list[ScoredProduct] = []
    for product in products:
        if min_final_score is not None and product.final_score < min_final_score:
            continue
        if max_price is not None and product.price > max_price:
            continue
        if min_rating is not None and product.rating < min_rating:
            continue
        if allowed_sources is not None and product.source.lower() not in allowed_sources:
            continue
        filtered.append(product)
    return filtered


__all__ = ["filter_scored_products", "normalize_score", "score", "summarize"]
