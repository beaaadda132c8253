"""Public exports for the conversational query accumulator."""

from __future__ import annotations

from .accumulator import accumulate
from .contracts import (
    AccumulatedQuery,
    AccumulationResult,
    ConversationTurn,
    QueryCandidate,
    ResponseType,
    TurnSource,
)
from .delegate import (
    DelegateEnvelope,
    DelegateRequest,
    DelegateUnavailableError,
    NLUDelegate,
    PydanticAIDelegate,
    UnavailableDelegate,
    get_nlu_delegate,
    reset_nlu_delegate_cache,
)
from .fallback import extract_candidate, fallback_accumulate
from .memory import ChatSession, SessionStore, get_session_store
from .policy import (
    Gate,
    QueryValidation,
    build_confirmation_message,
    generate_clarification_message,
    validate_query,
)

__all__ = [
    "AccumulatedQuery",
    "AccumulationResult",
    "ChatSession",
    "ConversationTurn",
    "DelegateEnvelope",
    "DelegateRequest",
    "DelegateUnavailableError",
    "Gate",
    "NLUDelegate",
    "PydanticAIDelegate",
    "QueryCandidate",
    "QueryValidation",
    "ResponseType",
    "SessionStore",
    "TurnSource",
    "UnavailableDelegate",
    "accumulate",
    "build_confirmation_message",
    "extract_candidate",
    "fallback_accumulate",
    "generate_clarification_message",
    "get_nlu_delegate",
    "get_session_store",
    "reset_nlu_delegate_cache",
    "validate_query",
]
