"""Fold per-turn candidates into the accumulated query."""

from __future__ import annotations

import re

import logfire

from .contracts import AccumulatedQuery, QueryCandidate
from .lexicon import COLORS, STOP_WORDS
from .parsing import (
    detect_correction,
    detect_product,
    extract_approximate_budget,
    normalize_text,
)

_KEYWORD_TOKEN = re.compile(r"[^\W_][\w'+./-]*")
_MAX_KEYWORD_TOKENS = 2
_SCALAR_FIELDS = ("category", "preferred_brand", "min_price", "max_price", "min_rating")


def _append_unique(values: list[str], value: str) -> None:
    value = value.strip()
    if value and value.casefold() not in {existing.casefold() for existing in values}:
        values.append(value)


def _is_keyword_correction(message: str, prior: str) -> bool:
    """Return ``True`` when the message explicitly swaps the product searched for.

    "not X but Y" only counts when Y is a known product or X names the current
    keyword; "not too heavy but powerful" describes the product instead.
    """

    text = normalize_text(message)
    correction = detect_correction(text)
    if correction is None:
        return False
    if detect_product(correction.text) is not None:
        return True
    return prior.casefold() in text[: correction.start].casefold()


def _merge_keyword(
    prior: str | None,
    candidate: str | None,
    message: str,
    specs: list[str],
) -> str | None:
    if not candidate or not candidate.strip():
        return prior
    candidate = candidate.strip()
    if not prior:
        return candidate
    if candidate.isdigit():
        return prior

    prior_folded = prior.casefold()
    candidate_folded = candidate.casefold()
    if prior_folded == candidate_folded:
        return prior

    if _is_keyword_correction(message, prior):
        logfire.info("conversation.keyword_corrected", previous=prior, keyword=candidate)
        return candidate

    if candidate_folded in prior_folded:
        return prior
    if prior_folded in candidate_folded:
        # "gaming TWS" refines "TWS": keep the keyword, record the extra words.
        remainder = " ".join(
            token for token in candidate.split() if token.casefold() not in prior_folded.split()
        )
        if remainder:
            _append_unique(specs, remainder)
        return prior

    _append_unique(specs, candidate)
    return prior


def merge_candidate(
    prior: AccumulatedQuery,
    candidate: QueryCandidate,
    message: str,
) -> AccumulatedQuery:
    """Return a new query with ``candidate`` layered over ``prior``.

    Scalars use "new value if mentioned, else prior", specs are a
    de-duplicated union and the keyword only changes when it was empty or the
    message explicitly corrects it. The ``*_asked`` flags are carried over
    untouched; only the gate machine and the no-preference rule set them.
    """

    updated = prior.model_copy(deep=True)

    for field in _SCALAR_FIELDS:
        value = getattr(candidate, field)
        if value is not None:
            setattr(updated, field, value)
    if candidate.is_search is not None:
        updated.is_search = candidate.is_search

    specs = list(updated.spec_constraints)
    for value in candidate.spec_constraints or []:
        _append_unique(specs, value)

    updated.keyword = _merge_keyword(prior.keyword, candidate.keyword, message, specs)
    updated.spec_constraints = specs
    return updated


def apply_budget_override(query: AccumulatedQuery, message: str) -> AccumulatedQuery:
    """Replace both price bounds when the message says "around N"."""

    bounds = extract_approximate_budget(normalize_text(message))
    if bounds is None:
        return query
    updated = query.model_copy()
    updated.min_price, updated.max_price = bounds
    return updated


def clean_keyword(query: AccumulatedQuery, prior_keyword: str | None) -> AccumulatedQuery:
    """Strip stop words and colours from the keyword, keeping two tokens.

    Colours move into the spec list as ``"<colour> color"``. When nothing
    survives, the keyword falls back to ``prior_keyword``.
    """

    if not query.keyword:
        return query

    kept: list[str] = []
    specs = list(query.spec_constraints)
    for match in _KEYWORD_TOKEN.finditer(query.keyword):
        token = match.group(0).rstrip(".")
        lowered = token.lower()
        if not token or lowered in STOP_WORDS:
            continue
        color = COLORS.get(lowered)
        if color is not None:
            _append_unique(specs, f"{color} color")
            continue
        kept.append(token)

    updated = query.model_copy()
    updated.keyword = " ".join(kept[:_MAX_KEYWORD_TOKENS]) if kept else prior_keyword
    updated.spec_constraints = specs
    return updated


def fold_candidate(
    prior: AccumulatedQuery,
    candidate: QueryCandidate,
    message: str,
    user_location: str | None,
) -> AccumulatedQuery:
    """Run the full merge pipeline for one turn."""

    merged = merge_candidate(prior, candidate, message)
    merged = apply_budget_override(merged, message)
    merged = clean_keyword(merged, prior.keyword)
    merged.user_location = user_location or prior.user_location
    return merged


__all__ = [
    "apply_budget_override",
    "clean_keyword",
    "fold_candidate",
    "merge_candidate",
]
