"""Conversation contracts shared by the accumulator, fallback and delegate."""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import Field

from ..schemas import CamelModel


class ResponseType(str, Enum):
    """Classification of the assistant reply for a turn."""

    GREETING = "greeting"
    CLARIFICATION = "clarification"
    CONFIRMATION = "confirmation"
    SEARCH = "search"


class TurnSource(str, Enum):
    """Which path produced the accumulated state for a turn."""

    DELEGATE = "delegate"
    FALLBACK = "fallback"
    CALLER = "caller"


class ConversationTurn(CamelModel):
    """A single utterance in the chat transcript."""

    role: Literal["user", "assistant"]
    content: str


class AccumulatedQuery(CamelModel):
    """Everything understood about the user's product request so far."""

    is_search: bool = False
    keyword: str | None = None
    category: str | None = None
    preferred_brand: str | None = None
    min_price: int | None = Field(None, ge=0)
    max_price: int | None = Field(None, ge=0)
    min_rating: float | None = Field(None, ge=0, le=5)
    spec_constraints: list[str] = Field(default_factory=list)
    user_location: str | None = None
    needs_clarification: bool = False
    clarification_question: str | None = None
    budget_asked: bool = False
    specs_asked: bool = False
    brand_asked: bool = False

    @property
    def is_searchable(self) -> bool:
        """Return ``True`` once the keyword is long enough to search for."""

        return bool(self.keyword and len(self.keyword.strip()) >= 2)

    @property
    def has_price_bounds(self) -> bool:
        """Return ``True`` when either price bound is known."""

        return self.min_price is not None or self.max_price is not None


class QueryCandidate(CamelModel):
    """Fields proposed for the current turn; ``None`` means "not mentioned"."""

    is_search: bool | None = None
    keyword: str | None = None
    category: str | None = None
    preferred_brand: str | None = None
    min_price: int | None = Field(None, ge=0)
    max_price: int | None = Field(None, ge=0)
    min_rating: float | None = Field(None, ge=0, le=5)
    spec_constraints: list[str] | None = None


class AccumulationResult(CamelModel):
    """Outcome of merging one user message into the accumulated query."""

    updated_query: AccumulatedQuery
    response_message: str
    response_type: ResponseType
    quick_replies: list[str] | None = None
    source: TurnSource = TurnSource.FALLBACK


__all__ = [
    "AccumulatedQuery",
    "AccumulationResult",
    "ConversationTurn",
    "QueryCandidate",
    "ResponseType",
    "TurnSource",
]
