"""Language-model delegate that proposes query updates for a turn."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from pydantic import Field
from pydantic_ai import Agent, InstrumentationSettings
from pydantic_ai.models.openai import OpenAIChatModel
from pydantic_ai.providers.openai import OpenAIProvider
from pydantic_ai.settings import ModelSettings

from ..config import settings
from ..logging import configure_logfire
from ..schemas import CamelModel
from .contracts import AccumulatedQuery, ConversationTurn, QueryCandidate, ResponseType
from .prompts import NLU_SYSTEM_PROMPT


class DelegateUnavailableError(RuntimeError):
    """Raised when no language model is configured for the delegate."""


class DelegateRequest(CamelModel):
    """Everything the delegate may look at for a single turn."""

    system_instructions: str = NLU_SYSTEM_PROMPT
    history: list[ConversationTurn] = Field(default_factory=list)
    prior_query_json: str = "{}"
    location_hint: str | None = None
    current_message: str

    def render_prompt(self) -> str:
        """Return the user prompt sent alongside the system instructions."""

        payload = {
            "history": [turn.to_payload() for turn in self.history],
            "priorQuery": json.loads(self.prior_query_json),
            "locationHint": self.location_hint,
            "message": self.current_message,
        }
        return json.dumps(payload, ensure_ascii=False)


class DelegateEnvelope(CamelModel):
    """Structured answer expected from the delegate."""

    updated_query: QueryCandidate = Field(default_factory=QueryCandidate)
    response_message: str = Field(..., min_length=1)
    response_type: ResponseType
    quick_replies: list[str] | None = None


def build_delegate_request(
    message: str,
    prior_query: AccumulatedQuery,
    history: Sequence[ConversationTurn | Mapping[str, Any]] = (),
    user_location: str | None = None,
    *,
    window: int | None = None,
) -> DelegateRequest:
    """Assemble the request for one turn, keeping only the latest turns."""

    limit = settings.history_window if window is None else window
    turns = [
        turn if isinstance(turn, ConversationTurn) else ConversationTurn.model_validate(turn)
        for turn in history
    ]
    recent = turns[-limit:] if limit > 0 else []
    return DelegateRequest(
        history=recent,
        prior_query_json=prior_query.model_dump_json(by_alias=True),
        location_hint=user_location or prior_query.user_location,
        current_message=message,
    )


class NLUDelegate(ABC):
    """Interface for anything that can propose a :class:`DelegateEnvelope`."""

    @abstractmethod
    async def propose(self, request: DelegateRequest) -> DelegateEnvelope | Mapping[str, Any]:
        """Return the proposed query update and reply for one turn."""


class UnavailableDelegate(NLUDelegate):
    """Delegate used when no model is configured; always defers to the fallback."""

    async def propose(self, request: DelegateRequest) -> DelegateEnvelope:
        raise DelegateUnavailableError("No language model is configured for the NLU delegate.")


class PydanticAIDelegate(NLUDelegate):
    """Delegate backed by a pydantic-ai agent with a structured output type."""

    def __init__(self, agent: Agent[None, DelegateEnvelope]) -> None:
        self._agent = agent

    async def propose(self, request: DelegateRequest) -> DelegateEnvelope:
        result = await self._agent.run(request.render_prompt())
        return result.output


@dataclass(slots=True)
class _DelegateCache:
    """Container that allows tests to reset the cached delegate."""

    delegate: NLUDelegate | None = None
    initialised: bool = False


_CACHE = _DelegateCache()


def build_nlu_agent() -> Agent[None, DelegateEnvelope]:
    """Create the pydantic-ai agent used by :class:`PydanticAIDelegate`."""

    configure_logfire()

    model = OpenAIChatModel(
        settings.nlu_model,
        provider=OpenAIProvider(base_url=settings.openai_base_url, api_key=settings.openai_api_key),
        settings=ModelSettings(temperature=0.0, parallel_tool_calls=False),
    )
    return Agent(
        model=model,
        output_type=DelegateEnvelope,
        instructions=NLU_SYSTEM_PROMPT,
        instrument=InstrumentationSettings(),
        name="scrapedgit-nlu-delegate",
        retries=0,
    )


def get_nlu_delegate() -> NLUDelegate:
    """Return the cached delegate; a live one only when credentials exist."""

    global _CACHE

    if _CACHE.initialised and _CACHE.delegate is not None:
        return _CACHE.delegate

    if not settings.delegate_configured:
        delegate: NLUDelegate = UnavailableDelegate()
    else:
        delegate = PydanticAIDelegate(build_nlu_agent())

    _CACHE = _DelegateCache(delegate=delegate, initialised=True)
    return delegate


def reset_nlu_delegate_cache() -> None:
    """Reset the cached delegate (used in tests)."""

    global _CACHE
    _CACHE = _DelegateCache()


__all__ = [
    "DelegateEnvelope",
    "DelegateRequest",
    "DelegateUnavailableError",
    "NLUDelegate",
    "PydanticAIDelegate",
    "UnavailableDelegate",
    "build_delegate_request",
    "build_nlu_agent",
    "get_nlu_delegate",
    "reset_nlu_delegate_cache",
]
