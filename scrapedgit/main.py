"""Main FastAPI application for the price-comparison assistant."""

import logging

from fastapi import Depends, FastAPI, HTTPException, Query

from .api.models import (
    ChatRequest,
    ChatResponse,
    RecommendationRequest,
    RecommendationResponse,
    ShippingQuote,
)
from .config import settings
from .conversation import accumulate
from .conversation.delegate import NLUDelegate, get_nlu_delegate
from .conversation.memory import ChatSession, SessionStore, get_session_store, new_session_id
from .logging import configure_logfire
from .recommendation import (
    available_cities,
    estimate_shipping_fee,
    get_city_distance,
    score,
    shipping_tier,
    summarize,
)


configure_logfire()

app = FastAPI(title="ScrapeDgit Assistant API", version="0.1.0")


logger = logging.getLogger(__name__)


@app.post("/chat", response_model=ChatResponse)
async def chat_endpoint(
    request: ChatRequest,
    store: SessionStore = Depends(get_session_store),
    delegate: NLUDelegate = Depends(get_nlu_delegate),
) -> ChatResponse:
    """Accumulate one chat turn for a guest session."""

    session_id = request.session_id
    session = await store.load(session_id) if session_id else None
    if session is None:
        session_id = session_id or new_session_id()
        session = ChatSession()

    try:
        result = await accumulate(
            request.message,
            session.query,
            session.history,
            request.user_location,
            delegate=delegate,
            confirm_search=request.confirm_search,
            modify_search=request.modify_search,
        )
    except Exception as exc:  # pragma: no cover - defensive logging path
        logger.exception("Unhandled error while processing chat request")
        raise HTTPException(
            status_code=500, detail="Failed to process your request. Please try again."
        ) from exc

    session.query = result.updated_query
    session.record_exchange(request.message, result.response_message)
    await store.save(session_id, session)

    return ChatResponse(
        session_id=session_id,
        type=result.response_type,
        message=result.response_message,
        accumulated_query=result.updated_query,
        quick_replies=result.quick_replies,
    )


@app.post("/recommendations", response_model=RecommendationResponse)
async def recommendations_endpoint(request: RecommendationRequest) -> RecommendationResponse:
    """Rank a batch of scraped listings for the buyer's location."""

    target = request.target_location or settings.default_location
    ranked = score(request.products, target, request.weights)
    return RecommendationResponse(products=ranked, summary=summarize(ranked))


@app.get("/shipping/estimate", response_model=ShippingQuote)
async def shipping_estimate(
    from_city: str = Query(..., alias="fromCity", min_length=1),
    to_city: str = Query(..., alias="toCity", min_length=1),
    weight_kg: float = Query(1.0, alias="weightKg", gt=0),
) -> ShippingQuote:
    """Estimate the courier fee between two cities."""

    fee = estimate_shipping_fee(from_city, to_city, weight_kg)
    return ShippingQuote(
        fee=fee,
        tier=shipping_tier(fee),
        distance=get_city_distance(from_city, to_city),
    )


@app.get("/shipping/cities", response_model=list[str])
async def shipping_cities() -> list[str]:
    """Return every city the distance table knows about."""

    return available_cities()


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}
