"""Deterministic extractor used whenever the NLU delegate cannot answer."""

from __future__ import annotations

import logfire

from .contracts import AccumulatedQuery, AccumulationResult, QueryCandidate, TurnSource
from .merge import fold_candidate
from .parsing import (
    blank_term,
    derive_keyword,
    detect_brand,
    detect_correction,
    detect_product,
    extract_colors,
    extract_min_rating,
    extract_price,
    extract_specs,
    is_greeting,
    normalize_text,
)
from .policy import greeting_turn, resolve_turn


def extract_candidate(message: str) -> QueryCandidate:
    """Parse one message into the fields it mentions."""

    text = normalize_text(message)
    if not text:
        return QueryCandidate()

    specs, masked = extract_specs(text)
    colors, masked = extract_colors(masked)
    min_rating, masked = extract_min_rating(masked)
    bounds, masked = extract_price(masked)
    _, residual = detect_brand(masked)

    correction = detect_correction(text)
    product = None
    keyword = None
    if correction is not None:
        product = detect_product(correction.text)
        keyword = product.canonical if product else derive_keyword(residual[correction.start :])
    if keyword is None:
        product = detect_product(text)
        keyword = product.canonical if product else derive_keyword(residual)

    # "hp samsung" names a phone, so the product word cannot double as a brand.
    brand, _ = detect_brand(blank_term(text, product.term) if product else text)

    constraints = list(specs)
    constraints.extend(f"{color} color" for color in colors)

    min_price, max_price = bounds if bounds is not None else (None, None)
    return QueryCandidate(
        is_search=True if keyword else None,
        keyword=keyword,
        category=product.category if product else None,
        preferred_brand=brand,
        min_price=min_price,
        max_price=max_price,
        min_rating=min_rating,
        spec_constraints=constraints or None,
    )


def fallback_accumulate(
    message: str,
    prior_query: AccumulatedQuery | None = None,
    user_location: str | None = None,
) -> AccumulationResult:
    """Accumulate one turn without any language model."""

    prior = prior_query or AccumulatedQuery()
    if is_greeting(message):
        return greeting_turn(prior, user_location, source=TurnSource.FALLBACK)

    candidate = extract_candidate(message)
    logfire.info(
        "conversation.delta",
        source=TurnSource.FALLBACK.value,
        **candidate.model_dump(exclude_none=True),
    )
    merged = fold_candidate(prior, candidate, message, user_location)
    return resolve_turn(merged, message, source=TurnSource.FALLBACK)


__all__ = ["extract_candidate", "fallback_accumulate"]
