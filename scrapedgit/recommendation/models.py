"""Structured models consumed and produced by the scoring engine."""

from __future__ import annotations

import math

from pydantic import ConfigDict, Field, model_validator

from ..schemas import CamelModel


class RawProduct(CamelModel):
    """A single listing returned by the scraping collaborator."""

    model_config = ConfigDict(frozen=True)

    name: str
    price: float = Field(..., ge=0)
    rating: float = Field(0.0, ge=0)
    sold_count: int = Field(0, ge=0)
    seller_location: str = ""
    image_url: str | None = None
    source: str
    product_link: str = ""


class ScoredProduct(RawProduct):
    """A listing enriched with normalised sub-scores and its final rank."""

    price_score: float = Field(..., ge=0, le=100)
    shipping_score: float = Field(..., ge=0, le=100)
    sold_score: float = Field(..., ge=0, le=100)
    rating_score: float = Field(..., ge=0, le=100)
    final_score: float = Field(..., ge=0, le=100)
    estimated_shipping: int = Field(..., ge=0)
    rank: int = Field(..., ge=1)


class Weights(CamelModel):
    """Relative importance of each attribute in the final score."""

    model_config = ConfigDict(frozen=True)

    price: float = Field(0.5, ge=0, le=1)
    shipping: float = Field(0.25, ge=0, le=1)
    sold_count: float = Field(0.15, ge=0, le=1)
    rating: float = Field(0.10, ge=0, le=1)

    @model_validator(mode="after")
    def _check_total(self) -> "Weights":
        total = self.price + self.shipping + self.sold_count + self.rating
        if not math.isclose(total, 1.0, abs_tol=1e-6):
            raise ValueError(f"weights must sum to 1.0 (got {total:.4f})")
        return self


DEFAULT_WEIGHTS = Weights()


class PriceRange(CamelModel):
    """Cheapest and most expensive price in a result set."""

    min: float = 0
    max: float = 0


class ResultsSummary(CamelModel):
    """Aggregate statistics describing a scored result set."""

    total_products: int = 0
    average_price: int = 0
    price_range: PriceRange = Field(default_factory=PriceRange)
    average_rating: float = 0.0
    sources: dict[str, int] = Field(default_factory=dict)


__all__ = [
    "DEFAULT_WEIGHTS",
    "PriceRange",
    "RawProduct",
    "ResultsSummary",
    "ScoredProduct",
    "Weights",
]
