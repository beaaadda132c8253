"""Conversation state accumulator: one user message in, one updated query out."""

from __future__ import annotations

import asyncio
from typing import Any, Mapping, Sequence

import logfire

from ..config import settings
from .contracts import (
    AccumulatedQuery,
    AccumulationResult,
    ConversationTurn,
    TurnSource,
)
from .delegate import (
    DelegateEnvelope,
    DelegateRequest,
    DelegateUnavailableError,
    NLUDelegate,
    build_delegate_request,
    get_nlu_delegate,
)
from .fallback import fallback_accumulate
from .merge import fold_candidate
from .parsing import is_greeting
from .policy import confirm_turn, greeting_turn, modify_turn, resolve_turn


async def _consult_delegate(
    delegate: NLUDelegate,
    request: DelegateRequest,
    timeout: float,
) -> DelegateEnvelope | None:
    try:
        raw = await asyncio.wait_for(delegate.propose(request), timeout=timeout)
        if isinstance(raw, DelegateEnvelope):
            return raw
        return DelegateEnvelope.model_validate(raw)
    except DelegateUnavailableError:
        logfire.info("conversation.delegate_unavailable")
    except asyncio.TimeoutError:
        logfire.warning("conversation.delegate_timeout", timeout=timeout)
    except Exception as exc:
        logfire.warning(
            "conversation.delegate_failed",
            error=str(exc),
            error_type=type(exc).__name__,
        )
    return None


def _apply_envelope(
    envelope: DelegateEnvelope,
    message: str,
    prior: AccumulatedQuery,
    user_location: str | None,
) -> AccumulationResult:
    logfire.info(
        "conversation.delta",
        source=TurnSource.DELEGATE.value,
        **envelope.updated_query.model_dump(exclude_none=True),
    )
    merged = fold_candidate(prior, envelope.updated_query, message, user_location)
    return resolve_turn(
        merged,
        message,
        source=TurnSource.DELEGATE,
        proposed_type=envelope.response_type,
        proposed_message=envelope.response_message,
        proposed_replies=envelope.quick_replies,
    )


async def accumulate(
    message: str,
    prior_query: AccumulatedQuery | None = None,
    history: Sequence[ConversationTurn | Mapping[str, Any]] = (),
    user_location: str | None = None,
    *,
    delegate: NLUDelegate | None = None,
    confirm_search: bool = False,
    modify_search: bool = False,
    timeout: float | None = None,
) -> AccumulationResult:
    """Merge ``message`` into ``prior_query`` and decide how to reply.

    The delegate is consulted once under a timeout; any failure falls back to
    the deterministic extractor so the turn always produces a result. The
    caller's ``prior_query`` is never modified.
    """

    prior = prior_query.model_copy(deep=True) if prior_query is not None else AccumulatedQuery()

    with logfire.span(
        "conversation.turn",
        confirm_search=confirm_search,
        modify_search=modify_search,
        prior_keyword=prior.keyword,
    ):
        if confirm_search:
            result = confirm_turn(prior, user_location)
        elif modify_search:
            result = modify_turn(prior)
        elif is_greeting(message):
            result = greeting_turn(prior, user_location)
        else:
            request = build_delegate_request(message, prior, history, user_location)
            envelope = await _consult_delegate(
                delegate or get_nlu_delegate(),
                request,
                settings.nlu_timeout_seconds if timeout is None else timeout,
            )
            if envelope is None:
                result = fallback_accumulate(message, prior, user_location)
            else:
                result = _apply_envelope(envelope, message, prior, user_location)

        logfire.info(
            "conversation.result",
            response_type=result.response_type.value,
            source=result.source.value,
            keyword=result.updated_query.keyword,
            is_search=result.updated_query.is_search,
        )
        return result


__all__ = ["accumulate"]
