"""Pydantic schemas for HTTP API payloads."""
from __future__ import annotations

from pydantic import Field

from ..conversation.contracts import AccumulatedQuery, ResponseType
from ..recommendation.models import DEFAULT_WEIGHTS, RawProduct, ResultsSummary, ScoredProduct, Weights
from ..recommendation.shipping import ShippingTier
from ..schemas import CamelModel


class ChatRequest(CamelModel):
    """Payload accepted by the /chat endpoint."""

    message: str = Field(..., min_length=1)
    session_id: str | None = None
    user_location: str | None = None
    confirm_search: bool = False
    modify_search: bool = False


class ChatResponse(CamelModel):
    """Response contract for the /chat endpoint."""

    session_id: str
    type: ResponseType
    message: str
    accumulated_query: AccumulatedQuery
    quick_replies: list[str] | None = None


class RecommendationRequest(CamelModel):
    """Payload accepted by the /recommendations endpoint."""

    products: list[RawProduct] = Field(default_factory=list)
    target_location: str | None = None
    weights: Weights = DEFAULT_WEIGHTS


class RecommendationResponse(CamelModel):
    """Ranked products together with aggregate statistics."""

    products: list[ScoredProduct]
    summary: ResultsSummary


class ShippingQuote(CamelModel):
    """Estimated courier fee between two cities."""

    fee: int
    tier: ShippingTier
    distance: int
