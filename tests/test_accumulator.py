"""Tests for the turn accumulator and its delegate fallback behaviour."""

from __future__ import annotations

import asyncio
from dataclasses import replace

import pytest

from scrapedgit.conversation import (
    AccumulatedQuery,
    DelegateEnvelope,
    DelegateRequest,
    NLUDelegate,
    QueryCandidate,
    ResponseType,
    TurnSource,
    UnavailableDelegate,
    accumulate,
    build_confirmation_message,
)
from scrapedgit.conversation import delegate as delegate_module
from scrapedgit.conversation.policy import (
    BUDGET_REPLIES,
    GREETING_MESSAGE,
    MODIFY_QUESTION,
    MODIFY_REPLIES,
    PRODUCT_QUESTION,
    SPECS_REPLIES,
)


@pytest.fixture
def anyio_backend() -> str:
    """Restrict anyio-powered tests to the asyncio backend."""

    return "asyncio"


class _RecordingDelegate(NLUDelegate):
    def __init__(self, answer) -> None:
        self.answer = answer
        self.requests: list[DelegateRequest] = []

    async def propose(self, request: DelegateRequest):
        self.requests.append(request)
        return self.answer


class _SlowDelegate(NLUDelegate):
    async def propose(self, request: DelegateRequest):
        await asyncio.sleep(1)
        raise AssertionError("The timeout should have cancelled this call.")


class _ExplodingDelegate(NLUDelegate):
    async def propose(self, request: DelegateRequest):
        raise RuntimeError("model backend is down")


@pytest.mark.anyio("asyncio")
async def test_greeting_does_not_consult_the_delegate() -> None:
    delegate = _RecordingDelegate(None)

    result = await accumulate("Hi", delegate=delegate, user_location="Surabaya")

    assert delegate.requests == []
    assert result.response_type is ResponseType.GREETING
    assert result.response_message == GREETING_MESSAGE
    assert result.updated_query.is_search is False
    assert result.updated_query.user_location == "Surabaya"


@pytest.mark.anyio("asyncio")
async def test_unconfigured_delegate_falls_back_to_the_extractor() -> None:
    result = await accumulate("gaming laptop around 500K", delegate=UnavailableDelegate())

    query = result.updated_query
    assert result.source is TurnSource.FALLBACK
    assert query.keyword == "laptop"
    assert (query.min_price, query.max_price) == (400_000, 600_000)
    assert query.spec_constraints == ["gaming"]
    assert result.quick_replies == SPECS_REPLIES


@pytest.mark.anyio("asyncio")
async def test_later_turns_only_add_information() -> None:
    prior = AccumulatedQuery(
        keyword="TWS",
        spec_constraints=["red color"],
        max_price=1_000_000,
        budget_asked=True,
    )

    result = await accumulate("gaming", prior, delegate=UnavailableDelegate())

    query = result.updated_query
    assert query.keyword == "TWS"
    assert query.spec_constraints == ["red color", "gaming"]
    assert query.max_price == 1_000_000
    assert query.budget_asked is True


@pytest.mark.anyio("asyncio")
async def test_prior_query_is_never_mutated() -> None:
    prior = AccumulatedQuery(keyword="laptop", spec_constraints=["16GB RAM"])
    snapshot = prior.model_dump()

    result = await accumulate("black please", prior, delegate=UnavailableDelegate())

    assert prior.model_dump() == snapshot
    assert result.updated_query.spec_constraints == ["16GB RAM", "black color"]
    assert result.updated_query.budget_asked is True


@pytest.mark.anyio("asyncio")
async def test_delegate_proposal_is_merged_and_its_message_kept() -> None:
    delegate = _RecordingDelegate(
        DelegateEnvelope(
            updated_query=QueryCandidate(keyword="gaming laptop", is_search=True),
            response_message="What budget do you have in mind?",
            response_type=ResponseType.CLARIFICATION,
        )
    )
    history = [
        {"role": "user" if index % 2 == 0 else "assistant", "content": f"turn {index}"}
        for index in range(10)
    ]

    result = await accumulate("I need a gaming laptop", history=history, delegate=delegate)

    assert result.source is TurnSource.DELEGATE
    assert result.updated_query.keyword == "gaming laptop"
    assert result.response_message == "What budget do you have in mind?"
    assert result.quick_replies == BUDGET_REPLIES

    [request] = delegate.requests
    assert len(request.history) == 6
    assert request.history[-1].content == "turn 9"
    assert request.current_message == "I need a gaming laptop"


@pytest.mark.anyio("asyncio")
async def test_delegate_quick_replies_are_kept() -> None:
    delegate = _RecordingDelegate(
        DelegateEnvelope(
            updated_query=QueryCandidate(keyword="phone"),
            response_message="Android or iOS?",
            response_type=ResponseType.CLARIFICATION,
            quick_replies=["Android", "iOS"],
        )
    )

    result = await accumulate("a phone", delegate=delegate)

    assert result.response_message == "Android or iOS?"
    assert result.quick_replies == ["Android", "iOS"]
    assert result.updated_query.needs_clarification is True


@pytest.mark.anyio("asyncio")
async def test_delegate_search_is_downgraded_to_confirmation() -> None:
    delegate = _RecordingDelegate(
        DelegateEnvelope(
            updated_query=QueryCandidate(keyword="laptop", max_price=10_000_000),
            response_message="Searching!",
            response_type=ResponseType.SEARCH,
            quick_replies=["Go"],
        )
    )

    result = await accumulate("laptop under 10 juta", delegate=delegate)

    assert result.response_type is ResponseType.CONFIRMATION
    assert result.response_message == build_confirmation_message(result.updated_query)


@pytest.mark.anyio("asyncio")
async def test_camel_case_mapping_from_delegate_is_validated() -> None:
    delegate = _RecordingDelegate(
        {
            "updatedQuery": {"keyword": "tablet", "maxPrice": 3_000_000},
            "responseMessage": "Any brand in mind?",
            "responseType": "clarification",
        }
    )

    result = await accumulate("tablet max 3 juta", delegate=delegate)

    assert result.source is TurnSource.DELEGATE
    assert result.updated_query.max_price == 3_000_000
    assert result.response_message == "Any brand in mind?"
    assert result.quick_replies == SPECS_REPLIES


@pytest.mark.anyio("asyncio")
@pytest.mark.parametrize(
    "delegate",
    [
        _SlowDelegate(),
        _ExplodingDelegate(),
        _RecordingDelegate({"responseType": "bogus"}),
        UnavailableDelegate(),
    ],
)
async def test_delegate_failures_produce_a_fallback_result(delegate: NLUDelegate) -> None:
    result = await accumulate("wireless earbuds under 1 juta", delegate=delegate, timeout=0.01)

    assert result.source is TurnSource.FALLBACK
    assert result.updated_query.keyword == "earbuds"
    assert result.updated_query.max_price == 1_000_000
    assert result.updated_query.spec_constraints == ["wireless"]


@pytest.mark.anyio("asyncio")
async def test_confirm_search_starts_the_search() -> None:
    prior = AccumulatedQuery(keyword="laptop", budget_asked=True, specs_asked=True)
    delegate = _RecordingDelegate(None)

    result = await accumulate("Yes, search now", prior, confirm_search=True, delegate=delegate)

    assert delegate.requests == []
    assert result.response_type is ResponseType.SEARCH
    assert result.source is TurnSource.CALLER
    assert result.updated_query.is_search is True
    assert result.response_message == "Searching for laptop across all marketplaces..."


@pytest.mark.anyio("asyncio")
async def test_confirm_search_without_keyword_asks_for_a_product() -> None:
    result = await accumulate("search", confirm_search=True, delegate=UnavailableDelegate())

    assert result.response_type is ResponseType.CLARIFICATION
    assert result.response_message == PRODUCT_QUESTION
    assert result.updated_query.is_search is False


@pytest.mark.anyio("asyncio")
async def test_modify_search_offers_the_menu_and_keeps_the_query() -> None:
    prior = AccumulatedQuery(keyword="laptop", max_price=5_000_000, budget_asked=True)

    result = await accumulate("I want to modify", prior, modify_search=True)

    assert result.response_message == MODIFY_QUESTION
    assert result.quick_replies == MODIFY_REPLIES
    assert result.updated_query == prior


@pytest.mark.anyio("asyncio")
async def test_greeting_mid_conversation_repeats_the_pending_question() -> None:
    prior = AccumulatedQuery(keyword="laptop", budget_asked=True)

    result = await accumulate("hello", prior, delegate=UnavailableDelegate())

    assert result.updated_query == prior
    assert result.response_type is ResponseType.CLARIFICATION
    assert result.response_message == "What is your budget for the laptop?"


@pytest.mark.anyio("asyncio")
async def test_no_preference_answers_move_on_to_confirmation() -> None:
    delegate = UnavailableDelegate()

    first = await accumulate("laptop", delegate=delegate)
    assert first.response_message == "What is your budget for the laptop?"

    second = await accumulate("No budget limit", first.updated_query, delegate=delegate)
    assert second.updated_query.has_price_bounds is False
    assert second.quick_replies == SPECS_REPLIES

    third = await accumulate("No, please search", second.updated_query, delegate=delegate)
    assert third.response_type is ResponseType.CONFIRMATION
    assert third.response_message == "Ready to search for laptop. Shall I start the search?"


@pytest.mark.anyio("asyncio")
async def test_explicit_correction_replaces_the_keyword() -> None:
    prior = AccumulatedQuery(keyword="phone", category="phones")

    result = await accumulate("not phone, but headphone", prior, delegate=UnavailableDelegate())

    assert result.updated_query.keyword == "headphone"
    assert "headphone" not in result.updated_query.spec_constraints


@pytest.mark.anyio("asyncio")
async def test_unrelated_product_word_becomes_a_constraint() -> None:
    prior = AccumulatedQuery(keyword="laptop")

    result = await accumulate("tablet", prior, delegate=UnavailableDelegate())

    assert result.updated_query.keyword == "laptop"
    assert result.updated_query.spec_constraints == ["tablet"]


def test_missing_credentials_yield_unavailable_delegate(monkeypatch: pytest.MonkeyPatch) -> None:
    """Without an API key or base URL the fallback path is always used."""

    unconfigured = replace(delegate_module.settings, openai_api_key=None, openai_base_url=None)
    monkeypatch.setattr(delegate_module, "settings", unconfigured)
    delegate_module.reset_nlu_delegate_cache()
    try:
        delegate = delegate_module.get_nlu_delegate()
        assert isinstance(delegate, UnavailableDelegate)
        assert delegate_module.get_nlu_delegate() is delegate
    finally:
        delegate_module.reset_nlu_delegate_cache()


@pytest.mark.anyio("asyncio")
async def test_around_phrase_overrides_delegate_price_bounds() -> None:
    delegate = _RecordingDelegate(
        DelegateEnvelope(
            updated_query=QueryCandidate(keyword="laptop", min_price=1_000_000, max_price=2_000_000),
            response_message="Any brand in mind?",
            response_type=ResponseType.CLARIFICATION,
        )
    )

    result = await accumulate("laptop around 5 juta", delegate=delegate)

    assert result.source is TurnSource.DELEGATE
    assert (result.updated_query.min_price, result.updated_query.max_price) == (4_000_000, 6_000_000)


@pytest.mark.anyio("asyncio")
async def test_around_phrase_window_never_goes_below_zero() -> None:
    result = await accumulate("earbuds around 50K", delegate=UnavailableDelegate())

    assert (result.updated_query.min_price, result.updated_query.max_price) == (0, 150_000)


@pytest.mark.anyio("asyncio")
async def test_declining_the_budget_up_front_asks_for_specs_next() -> None:
    result = await accumulate("laptop, any budget is fine", delegate=UnavailableDelegate())

    assert result.response_message == (
        "Do you have any specific requirements or a preferred brand for the laptop?"
    )
    assert result.quick_replies == SPECS_REPLIES


def test_delegate_interface_cannot_be_instantiated() -> None:
    with pytest.raises(TypeError):
        NLUDelegate()
