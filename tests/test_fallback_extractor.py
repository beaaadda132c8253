import pytest

from scrapedgit.conversation import AccumulatedQuery, ResponseType, TurnSource
from scrapedgit.conversation.fallback import extract_candidate, fallback_accumulate
from scrapedgit.conversation.parsing import (
    detect_correction,
    extract_specs,
    is_greeting,
    is_no_preference,
    parse_number,
)


def test_gaming_laptop_around_budget() -> None:
    candidate = extract_candidate("gaming laptop around 500K")

    assert candidate.keyword == "laptop"
    assert candidate.category == "computers"
    assert candidate.min_price == 400_000
    assert candidate.max_price == 600_000
    assert candidate.spec_constraints == ["gaming"]
    assert candidate.is_search is True


def test_structural_specs_brand_and_unit_inheriting_range() -> None:
    candidate = extract_candidate("laptop asus 16GB RAM core i7 512GB SSD 15.6 inch 3-5 juta")

    assert candidate.keyword == "laptop"
    assert candidate.preferred_brand == "ASUS"
    assert candidate.spec_constraints == ["16GB RAM", "512GB SSD", "Core i7", "15.6 inch"]
    assert candidate.min_price == 3_000_000
    assert candidate.max_price == 5_000_000


@pytest.mark.parametrize(
    ("message", "expected"),
    [
        ("earbuds 500K-2M", (500_000, 2_000_000)),
        ("earbuds 2-5 million", (2_000_000, 5_000_000)),
        ("earbuds 3-5", (3_000_000, 5_000_000)),
        ("budget Rp 1.500.000 - 2.000.000 for earbuds", (1_500_000, 2_000_000)),
        ("earbuds 500rb sampai 1jt", (500_000, 1_000_000)),
        ("earbuds under 1.5jt", (None, 1_500_000)),
        ("earbuds below 750k", (None, 750_000)),
        ("earbuds above 1,5 juta", (1_500_000, None)),
        ("earbuds kira-kira 2 juta", (1_600_000, 2_400_000)),
        ("earbuds 5 juta", (None, 5_000_000)),
        ("earbuds please", (None, None)),
    ],
)
def test_price_expressions(message: str, expected: tuple[int | None, int | None]) -> None:
    candidate = extract_candidate(message)

    assert candidate.keyword == "earbuds"
    assert (candidate.min_price, candidate.max_price) == expected


def test_small_amounts_without_unit_are_not_ceilings() -> None:
    candidate = extract_candidate("earbuds for 2 people")

    assert candidate.min_price is None
    assert candidate.max_price is None


@pytest.mark.parametrize(
    ("message", "expected"),
    [
        ("laptop around 500", (0, 100_500)),
        ("laptop around 50K", (0, 150_000)),
        ("laptop sekitar 10 juta", (8_000_000, 12_000_000)),
    ],
)
def test_approximate_budget_window_from_any_amount(message: str, expected: tuple[int, int]) -> None:
    result = fallback_accumulate(message)

    query = result.updated_query
    assert query.keyword == "laptop"
    assert (query.min_price, query.max_price) == expected


@pytest.mark.parametrize(
    ("message", "rating"),
    [
        ("Samsung phone rating 4.5+", 4.5),
        ("phone with at least 4 stars", 4.0),
        ("phone rated above 4", 4.0),
    ],
)
def test_minimum_rating(message: str, rating: float) -> None:
    candidate = extract_candidate(message)

    assert candidate.min_rating == rating
    assert candidate.max_price is None


def test_phone_memory_and_brand_after_generic_term() -> None:
    candidate = extract_candidate("cari hp samsung 8/256 under 5 juta")

    assert candidate.keyword == "phone"
    assert candidate.category == "phones"
    assert candidate.preferred_brand == "Samsung"
    assert candidate.spec_constraints == ["8GB RAM", "256GB storage"]
    assert candidate.max_price == 5_000_000


def test_headphone_is_not_read_as_phone() -> None:
    assert extract_candidate("wireless headphone").keyword == "headphone"
    assert extract_candidate("ponsel murah").keyword == "phone"


def test_colours_become_constraints() -> None:
    candidate = extract_candidate("red TWS")

    assert candidate.keyword == "TWS"
    assert candidate.spec_constraints == ["red color"]


def test_chipset_and_cpu_model_patterns() -> None:
    specs, _ = extract_specs("Snapdragon 8 Gen 2 phone or a laptop with i7-1355U and RTX 4060")

    assert specs == ["Core i7-1355U", "Snapdragon 8 Gen 2", "RTX 4060"]


def test_residual_tokens_form_a_keyword_without_dictionary_hit() -> None:
    candidate = extract_candidate("looking for robin figure collectible")

    assert candidate.keyword == "robin figure collectible"
    assert candidate.category is None


def test_filler_only_messages_propose_nothing() -> None:
    for message in ("No, please search", "Yes, I have additional requirements", "Show me popular products"):
        candidate = extract_candidate(message)
        assert candidate.keyword is None
        assert candidate.is_search is None


def test_correction_segment_decides_keyword() -> None:
    assert extract_candidate("not phone, but headphone").keyword == "headphone"
    assert extract_candidate("actually I want a tablet").keyword == "tablet"

    correction = detect_correction("I meant a smartwatch")
    assert correction is not None
    assert correction.text == "smartwatch"
    assert detect_correction("a laptop for gaming") is None


def test_parse_number_accepts_separators_and_decimals() -> None:
    assert parse_number("1.500.000") == 1_500_000
    assert parse_number("1,500,000") == 1_500_000
    assert parse_number("1.5") == 1.5
    assert parse_number("2,5") == 2.5


def test_greeting_and_no_preference_detection() -> None:
    assert is_greeting("Hi!")
    assert is_greeting("  Selamat Pagi ")
    assert not is_greeting("hi, I want a laptop")

    assert is_no_preference("No budget limit")
    assert is_no_preference("doesn't matter")
    assert not is_no_preference("not phone, but headphone")


def test_fallback_accumulate_runs_the_gate_machine() -> None:
    result = fallback_accumulate("gaming laptop around 500K")

    assert result.source is TurnSource.FALLBACK
    assert result.response_type is ResponseType.CLARIFICATION
    assert result.quick_replies == ["Yes, I have additional requirements", "No, please search"]
    assert result.updated_query.specs_asked is True
    assert result.updated_query.brand_asked is True
    assert result.updated_query.needs_clarification is True
    assert result.updated_query.clarification_question == result.response_message


def test_fallback_accumulate_cleans_long_residual_keywords() -> None:
    result = fallback_accumulate("robin figure collectible", AccumulatedQuery(), "Bandung")

    assert result.updated_query.keyword == "robin figure"
    assert result.updated_query.user_location == "Bandung"
    assert result.response_message == "What is your budget for the robin figure?"


def test_every_non_empty_message_yields_a_result() -> None:
    for message in ("???", "-", "🙂"):
        result = fallback_accumulate(message)
        assert result.response_type is ResponseType.CLARIFICATION
        assert result.updated_query.keyword is None


def test_numeric_only_message_keeps_its_tokens_as_keyword() -> None:
    result = fallback_accumulate("12345")

    assert result.updated_query.keyword == "12345"
    assert result.response_message == "What is your budget for the 12345?"


def test_numeric_answer_does_not_disturb_an_existing_keyword() -> None:
    result = fallback_accumulate("15", AccumulatedQuery(keyword="laptop", budget_asked=True))

    assert result.updated_query.keyword == "laptop"
    assert result.updated_query.spec_constraints == []


def test_descriptive_not_but_phrase_is_not_a_keyword_correction() -> None:
    result = fallback_accumulate("not too heavy but powerful", AccumulatedQuery(keyword="laptop"))

    assert result.updated_query.keyword == "laptop"
    assert result.updated_query.spec_constraints == ["powerful"]


def test_correction_naming_the_current_keyword_replaces_it() -> None:
    result = fallback_accumulate("not a robin figure but a batman statue", AccumulatedQuery(keyword="robin figure"))

    assert result.updated_query.keyword == "batman statue"
