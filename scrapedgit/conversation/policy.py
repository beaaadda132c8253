"""Dialogue policy: which question to ask next and how each turn is classified."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence

import logfire
from pydantic import BaseModel, Field

from .contracts import AccumulatedQuery, AccumulationResult, ResponseType, TurnSource
from .parsing import is_no_preference

GREETING_MESSAGE = "Hello! What product are you looking for today?"
PRODUCT_QUESTION = "What type of product are you looking for?"
MODIFY_QUESTION = "Sure, what would you like to change?"

GREETING_REPLIES = ["Help me find something", "Show me popular products"]
PRODUCT_REPLIES = ["Laptop", "Phone", "Earbuds", "Tablet", "Other"]
BUDGET_REPLIES = ["Under 500K", "500K-2M", "2-5 million", "5-10 million", "No budget limit"]
SPECS_REPLIES = ["Yes, I have additional requirements", "No, please search"]
CONFIRMATION_REPLIES = ["Yes, search now", "I want to modify"]
MODIFY_REPLIES = ["Change product type", "Change budget", "Change brand", "Add specifications"]


class Gate(str, Enum):
    """Questions the assistant works through before it offers to search."""

    KEYWORD = "keyword"
    BUDGET = "budget"
    SPECS = "specs"
    CONFIRMATION = "confirmation"


@dataclass(frozen=True, slots=True)
class PolicyStep:
    """The reply the policy wants to give for a gate."""

    gate: Gate
    response_type: ResponseType
    message: str
    quick_replies: list[str] | None


class QueryValidation(BaseModel):
    """Outcome of :func:`validate_query`."""

    valid: bool
    missing_fields: list[str] = Field(default_factory=list)


def format_price(amount: int) -> str:
    """Render rupiah amounts the way the assistant speaks them."""

    if amount >= 1_000_000:
        millions = amount / 1_000_000
        text = f"{millions:.0f}" if amount % 1_000_000 == 0 else f"{millions:.1f}"
        return f"{text} million"
    if amount >= 1_000:
        return f"{amount / 1_000:.0f}K"
    return str(amount)


def build_confirmation_message(query: AccumulatedQuery) -> str:
    """Summarise everything collected so far and ask to start the search."""

    parts = [f"Ready to search for {query.keyword}"]
    if query.preferred_brand:
        parts.append(f"brand: {query.preferred_brand}")
    if query.has_price_bounds:
        low = format_price(query.min_price) if query.min_price else "0"
        high = format_price(query.max_price) if query.max_price else "no limit"
        parts.append(f"budget: {low}-{high} IDR")
    if query.min_rating:
        parts.append(f"rating: {query.min_rating:g}+")
    if query.spec_constraints:
        parts.append(f"specs: {', '.join(query.spec_constraints)}")
    if query.user_location:
        parts.append(f"shipping to: {query.user_location}")
    return ", ".join(parts) + ". Shall I start the search?"


def current_gate(query: AccumulatedQuery) -> Gate:
    """Return the first gate the query has not passed yet."""

    if not query.is_searchable:
        return Gate.KEYWORD
    if not query.has_price_bounds and not query.budget_asked:
        return Gate.BUDGET
    if not query.specs_asked:
        return Gate.SPECS
    return Gate.CONFIRMATION


def describe_gate(gate: Gate, query: AccumulatedQuery) -> PolicyStep:
    """Return the question (or confirmation) belonging to ``gate``."""

    if gate is Gate.KEYWORD:
        return PolicyStep(gate, ResponseType.CLARIFICATION, PRODUCT_QUESTION, list(PRODUCT_REPLIES))
    if gate is Gate.BUDGET:
        return PolicyStep(
            gate,
            ResponseType.CLARIFICATION,
            f"What is your budget for the {query.keyword}?",
            list(BUDGET_REPLIES),
        )
    if gate is Gate.SPECS:
        return PolicyStep(
            gate,
            ResponseType.CLARIFICATION,
            f"Do you have any specific requirements or a preferred brand for the {query.keyword}?",
            list(SPECS_REPLIES),
        )
    return PolicyStep(
        gate,
        ResponseType.CONFIRMATION,
        build_confirmation_message(query),
        list(CONFIRMATION_REPLIES),
    )


def advance(query: AccumulatedQuery) -> tuple[AccumulatedQuery, PolicyStep]:
    """Pick the next question and mark its gate as asked on a copy of ``query``."""

    gate = current_gate(query)
    step = describe_gate(gate, query)
    updated = query.model_copy()
    if gate is Gate.BUDGET:
        updated.budget_asked = True
    elif gate is Gate.SPECS:
        updated.specs_asked = True
        updated.brand_asked = True
    return updated, step


def open_gate(query: AccumulatedQuery) -> Gate | None:
    """Return the first optional gate whose value is unset and not yet asked."""

    if not query.is_searchable:
        return None
    if not query.has_price_bounds and not query.budget_asked:
        return Gate.BUDGET
    has_details = bool(query.spec_constraints or query.preferred_brand)
    if not has_details and not query.specs_asked:
        return Gate.SPECS
    return None


def apply_no_preference(query: AccumulatedQuery) -> tuple[AccumulatedQuery, Gate | None]:
    """Mark the open gate as asked so a "don't care" answer is not re-asked."""

    gate = open_gate(query)
    if gate is None:
        return query, None
    updated = query.model_copy()
    if gate is Gate.BUDGET:
        updated.budget_asked = True
    else:
        updated.specs_asked = True
        updated.brand_asked = True
    return updated, gate


def repeat_pending_question(query: AccumulatedQuery) -> PolicyStep:
    """Return the question the user still owes an answer to, marking nothing."""

    gate = current_gate(query)
    if gate in (Gate.KEYWORD, Gate.CONFIRMATION):
        return describe_gate(gate, query)
    if query.budget_asked:
        return describe_gate(Gate.BUDGET, query)
    return PolicyStep(
        gate,
        ResponseType.CLARIFICATION,
        f"Hi again! Tell me a bit more about the {query.keyword} you're looking for.",
        None,
    )


def validate_query(query: AccumulatedQuery) -> QueryValidation:
    """Report which fields still block a search."""

    missing: list[str] = []
    if not query.is_searchable:
        missing.append("keyword")
    return QueryValidation(valid=not missing, missing_fields=missing)


def generate_clarification_message(missing_fields: Sequence[str]) -> str:
    """Return a question asking for the first missing field."""

    if "keyword" in missing_fields:
        return PRODUCT_QUESTION
    if "budget" in missing_fields:
        return "What is your budget?"
    if missing_fields:
        return f"Could you tell me your preferred {missing_fields[0].replace('_', ' ')}?"
    return "Could you tell me more about what you're looking for?"


def _finish(
    query: AccumulatedQuery,
    response_type: ResponseType,
    message: str,
    quick_replies: list[str] | None,
    source: TurnSource,
) -> AccumulationResult:
    needs_clarification = response_type is ResponseType.CLARIFICATION
    query.needs_clarification = needs_clarification
    query.clarification_question = message if needs_clarification else None
    return AccumulationResult(
        updated_query=query,
        response_message=message,
        response_type=response_type,
        quick_replies=quick_replies,
        source=source,
    )


def _budget_question_pending(query: AccumulatedQuery) -> bool:
    return query.budget_asked and not query.has_price_bounds and not query.specs_asked


def resolve_turn(
    query: AccumulatedQuery,
    message: str,
    *,
    source: TurnSource,
    proposed_type: ResponseType | None = None,
    proposed_message: str | None = None,
    proposed_replies: Sequence[str] | None = None,
) -> AccumulationResult:
    """Apply the no-preference rule, then classify the merged turn.

    A "don't care" answer marks the next unasked gate before the machine
    runs, unless it answers a budget question that is still pending.
    Without proposed quick replies the gate machine decides the reply; a
    proposed message is kept only when it agrees with the machine's type and
    no gate was just declined.
    Proposed ``search`` replies are downgraded to ``confirmation``.
    """

    declined: Gate | None = None
    if is_no_preference(message) and not _budget_question_pending(query):
        query, declined = apply_no_preference(query)
        if declined is not None:
            logfire.info("conversation.no_preference", gate=declined.value)

    step: PolicyStep | None = None
    if proposed_replies is None:
        query, step = advance(query)
        response_type = step.response_type
        response_message = step.message
        quick_replies = step.quick_replies
        if (
            proposed_message
            and declined is None
            and proposed_type is step.response_type
            and step.gate is not Gate.CONFIRMATION
        ):
            response_message = proposed_message
    else:
        response_type = proposed_type or ResponseType.CLARIFICATION
        if response_type is ResponseType.SEARCH:
            response_type = ResponseType.CONFIRMATION
        response_message = proposed_message or ""
        quick_replies = list(proposed_replies)
        if response_type is ResponseType.CONFIRMATION:
            if query.is_searchable:
                response_message = build_confirmation_message(query)
            else:
                query, step = advance(query)
                response_type = step.response_type
                response_message = step.message
                quick_replies = step.quick_replies

    logfire.info(
        "conversation.gate",
        gate=step.gate.value if step else None,
        response_type=response_type.value,
        source=source.value,
    )
    return _finish(query, response_type, response_message, quick_replies, source)


def greeting_turn(
    prior: AccumulatedQuery,
    user_location: str | None,
    *,
    source: TurnSource = TurnSource.FALLBACK,
) -> AccumulationResult:
    """Answer a bare greeting; mid-conversation greetings change nothing."""

    if prior.is_searchable:
        step = repeat_pending_question(prior)
        return AccumulationResult(
            updated_query=prior.model_copy(deep=True),
            response_message=step.message,
            response_type=step.response_type,
            quick_replies=step.quick_replies,
            source=source,
        )

    updated = prior.model_copy(deep=True)
    updated.is_search = False
    updated.user_location = user_location or prior.user_location
    return _finish(updated, ResponseType.GREETING, GREETING_MESSAGE, list(GREETING_REPLIES), source)


def confirm_turn(prior: AccumulatedQuery, user_location: str | None) -> AccumulationResult:
    """Honour an explicit "search now" signal from the caller."""

    updated = prior.model_copy(deep=True)
    updated.user_location = user_location or prior.user_location
    if not updated.is_searchable:
        step = describe_gate(Gate.KEYWORD, updated)
        return _finish(updated, step.response_type, step.message, step.quick_replies, TurnSource.CALLER)

    updated.is_search = True
    return _finish(
        updated,
        ResponseType.SEARCH,
        f"Searching for {updated.keyword} across all marketplaces...",
        None,
        TurnSource.CALLER,
    )


def modify_turn(prior: AccumulatedQuery) -> AccumulationResult:
    """Offer the modification menu without touching the accumulated query."""

    return AccumulationResult(
        updated_query=prior.model_copy(deep=True),
        response_message=MODIFY_QUESTION,
        response_type=ResponseType.CLARIFICATION,
        quick_replies=list(MODIFY_REPLIES),
        source=TurnSource.CALLER,
    )


__all__ = [
    "BUDGET_REPLIES",
    "CONFIRMATION_REPLIES",
    "GREETING_MESSAGE",
    "GREETING_REPLIES",
    "MODIFY_REPLIES",
    "PRODUCT_QUESTION",
    "PRODUCT_REPLIES",
    "SPECS_REPLIES",
    "Gate",
    "PolicyStep",
    "QueryValidation",
    "advance",
    "apply_no_preference",
    "build_confirmation_message",
    "confirm_turn",
    "current_gate",
    "describe_gate",
    "format_price",
    "generate_clarification_message",
    "greeting_turn",
    "modify_turn",
    "open_gate",
    "repeat_pending_question",
    "resolve_turn",
    "validate_query",
]
