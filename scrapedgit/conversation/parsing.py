"""Regex helpers for reading English and Indonesian shopping messages.

Every ``extract_*`` helper returns its findings together with a copy of the
input in which the matched spans are blanked out. Blanking keeps character
offsets stable so later passes (and the residual keyword scan) never see the
same words twice.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Callable

from .lexicon import (
    BRANDS,
    COLORS,
    FEATURE_TERMS,
    FILLER_WORDS,
    GREETING_TOKENS,
    PRODUCT_TERMS,
    ProductTerm,
)

PriceBounds = tuple[int | None, int | None]

_PUNCTUATION = str.maketrans(
    {"–": "-", "—": "-", "‐": "-", "−": "-", "’": "'", "‘": "'", "“": '"', "”": '"'}
)

_NUMBER = r"\d+(?:[.,]\d+)*"
_UNIT = r"(?:k|rb|ribu|thousand|jt|juta|mio|millions?|m)(?![a-z])"
_CURRENCY = r"(?:rp\.?\s*|idr\s*)?"
_UNIT_MULTIPLIERS = {
    "k": 1_000,
    "rb": 1_000,
    "ribu": 1_000,
    "thousand": 1_000,
    "jt": 1_000_000,
    "juta": 1_000_000,
    "mio": 1_000_000,
    "million": 1_000_000,
    "millions": 1_000_000,
    "m": 1_000_000,
}
_BARE_MILLIONS_LIMIT = 100
_MIN_PLAUSIBLE_PRICE = 1_000
APPROX_MIN_VARIATION = 100_000
APPROX_RATIO = 0.2

_GROUPED_NUMBER = re.compile(r"\d{1,3}(?P<sep>[.,])\d{3}(?:(?P=sep)\d{3})*")
_RANGE_PATTERN = re.compile(
    rf"(?<![\w.]){_CURRENCY}(?P<low>{_NUMBER})\s*(?P<low_unit>{_UNIT})?\s*"
    rf"(?:-|to\b|sampai\b|hingga\b|until\b|s/d)\s*"
    rf"{_CURRENCY}(?P<high>{_NUMBER})\s*(?P<high_unit>{_UNIT})?",
    re.IGNORECASE,
)
_UPPER_PATTERN = re.compile(
    r"\b(?:under|below|less\s+than|cheaper\s+than|at\s+most|up\s+to|no\s+more\s+than|"
    r"not\s+more\s+than|max(?:imum|imal)?|maks(?:imal)?|(?:di\s*)?bawah|kurang\s+dari)"
    rf"\s*:?\s*{_CURRENCY}(?P<value>{_NUMBER})\s*(?P<unit>{_UNIT})?",
    re.IGNORECASE,
)
_LOWER_PATTERN = re.compile(
    r"\b(?:above|over|more\s+than|at\s+least|starting\s+(?:from|at)|min(?:imum|imal)?|"
    r"(?:di\s*)?atas|lebih\s+dari)"
    rf"\s*:?\s*{_CURRENCY}(?P<value>{_NUMBER})\s*(?P<unit>{_UNIT})?",
    re.IGNORECASE,
)
_APPROX_PATTERN = re.compile(
    r"(?:\b(?:around|about|approximately|approx\.?|roughly|sekitar|kira-kira|kisaran)|~)"
    rf"\s*{_CURRENCY}(?P<value>{_NUMBER})\s*(?P<unit>{_UNIT})?",
    re.IGNORECASE,
)
_RATING_PATTERNS = (
    re.compile(
        r"\b(?:rating|rated)\s*(?:of\s+|at\s+least\s+|above\s+|over\s+|min(?:imum)?\s*|>=?\s*)?"
        r"(?P<value>[0-5](?:[.,]\d)?)(?!\d)\s*\+?",
        re.IGNORECASE,
    ),
    re.compile(
        r"(?<![\w.])(?P<value>[0-5](?:[.,]\d)?)\s*\+?\s*(?:stars?|bintang|rating|\*)(?!\w)",
        re.IGNORECASE,
    ),
)

_CORRECTION_PATTERNS = (
    re.compile(
        r"\bnot\s+(?:an?\s+|the\s+)?[\w\s-]+?\s*,?\s*but\s+(?:an?\s+|the\s+)?(?P<new>.+)$",
        re.IGNORECASE,
    ),
    re.compile(
        r"\bbukan\s+[\w\s-]+?\s*,?\s*(?:tapi|tetapi|melainkan)\s+(?P<new>.+)$",
        re.IGNORECASE,
    ),
    re.compile(
        r"\bactually\s*,?\s*(?:i\s+)?(?:want|need|mean|meant|prefer|would\s+like|'d\s+like)\s+"
        r"(?:an?\s+|the\s+|some\s+)?(?P<new>.+)$",
        re.IGNORECASE,
    ),
    re.compile(r"\bi\s+meant?\s+(?:an?\s+|the\s+)?(?P<new>.+)$", re.IGNORECASE),
    re.compile(
        r"\b(?:change|switch)\s+(?:it\s+|that\s+|the\s+product\s+)?to\s+(?:an?\s+|the\s+)?(?P<new>.+)$",
        re.IGNORECASE,
    ),
    re.compile(r"^(?:an?\s+|the\s+)?(?P<new>.+?)\s+instead\b", re.IGNORECASE),
)

_NO_PREFERENCE_PATTERN = re.compile(
    r"\b(?:no(?!\s+(?:more|less)\b)|none|nope|nothing|idk|anything|whatever|terserah|bebas|"
    r"i\s+don'?t\s+know|doesn'?t\s+matter|does\s+not\s+matter|"
    r"don'?t\s+care|do\s+not\s+care|no\s+preference|any\s+budget|surprise\s+me|"
    r"tidak\s+ada|gak\s+ada|nggak\s+ada)\b",
    re.IGNORECASE,
)

_CURRENCY_AMOUNT_PATTERN = re.compile(
    rf"(?<![\w.])(?:rp\.?|idr)\s*(?P<value>{_NUMBER})\s*(?P<unit>{_UNIT})?",
    re.IGNORECASE,
)
_UNIT_AMOUNT_PATTERN = re.compile(
    rf"(?<![\w.])(?P<value>{_NUMBER})\s*(?P<unit>{_UNIT})",
    re.IGNORECASE,
)

_TOKEN_PATTERN = re.compile(r"[^\W_][\w'+-]*")
_TRAILING_NOISE = re.compile(r"[\s!.,?~]+$")


def _ram(match: re.Match[str]) -> list[str]:
    return [f"{int(match['size'])}GB RAM"]


def _phone_memory(match: re.Match[str]) -> list[str]:
    return [f"{int(match['ram'])}GB RAM", f"{int(match['rom'])}GB storage"]


def _storage(match: re.Match[str]) -> list[str]:
    kind = (match.groupdict().get("kind") or "storage").lower()
    label = "storage" if kind in {"storage", "rom", "internal"} else kind.upper()
    return [f"{int(match['size'])}{match['unit'].upper()} {label}"]


def _intel_model(match: re.Match[str]) -> list[str]:
    return [f"Core {match['tier'].lower()}-{match['model'].upper()}"]


def _intel_tier(match: re.Match[str]) -> list[str]:
    return [f"Core {match['tier'].lower()}"]


def _core_ultra(match: re.Match[str]) -> list[str]:
    return [f"Core Ultra {match['tier']}"]


def _ryzen(match: re.Match[str]) -> list[str]:
    model = match["model"]
    return [f"Ryzen {match['tier']} {model.upper()}" if model else f"Ryzen {match['tier']}"]


def _generation(match: re.Match[str]) -> list[str]:
    return [f"Gen {int(match['gen'] or match['ordinal'])}"]


def _screen(match: re.Match[str]) -> list[str]:
    return [f"{match['size'].replace(',', '.')} inch"]


def _refresh_rate(match: re.Match[str]) -> list[str]:
    return [f"{int(match['rate'])}Hz"]


def _snapdragon(match: re.Match[str]) -> list[str]:
    model = re.sub(r"\s*gen\s*", " Gen ", match["model"], flags=re.IGNORECASE)
    return [f"Snapdragon {' '.join(model.split())}"]


def _named_chip(prefix: str) -> Callable[[re.Match[str]], list[str]]:
    def render(match: re.Match[str]) -> list[str]:
        return [f"{prefix} {' '.join(match['model'].upper().split())}"]

    return render


def _apple_silicon(match: re.Match[str]) -> list[str]:
    variant = match["variant"]
    chip = f"Apple {match['chip'].upper()}"
    return [f"{chip} {variant.title()}" if variant else chip]


def _geforce(match: re.Match[str]) -> list[str]:
    suffix = match["suffix"]
    name = f"{match['series'].upper()} {match['model']}"
    return [f"{name} {suffix.title()}" if suffix else name]


# Structural patterns run in order; each one blanks its matches before the next.
_SPEC_PATTERNS: tuple[tuple[re.Pattern[str], Callable[[re.Match[str]], list[str]]], ...] = (
    (re.compile(r"\b(?P<ram>\d{1,2})\s*/\s*(?P<rom>\d{2,4})\s*(?:gb)?\b", re.I), _phone_memory),
    (re.compile(r"\b(?P<size>\d{1,3})\s*gb\s*(?:of\s+)?(?:ram|memory|memori|ddr\d)\b", re.I), _ram),
    (re.compile(r"\bram\s*:?\s*(?P<size>\d{1,3})\s*(?:gb)?\b", re.I), _ram),
    (
        re.compile(
            r"\b(?P<size>\d{1,4})\s*(?P<unit>gb|tb)\s*(?:of\s+)?"
            r"(?P<kind>ssd|hdd|emmc|nvme|ufs|storage|rom|internal)\b",
            re.I,
        ),
        _storage,
    ),
    (re.compile(r"\b(?P<kind>ssd|hdd|nvme)\s*:?\s*(?P<size>\d{1,4})\s*(?P<unit>gb|tb)\b", re.I), _storage),
    (re.compile(r"\b(?P<size>\d{1,4})\s*(?P<unit>gb|tb)\b", re.I), _storage),
    (re.compile(r"\b(?:intel\s+)?core\s+ultra\s*(?P<tier>[579])\b", re.I), _core_ultra),
    (
        re.compile(
            r"\b(?:intel\s+)?(?:core\s*)?(?P<tier>i[3579])(?:\s*-\s*|\s+)(?P<model>\d{4,5}[a-z]{0,2})\b",
            re.I,
        ),
        _intel_model,
    ),
    (re.compile(r"\b(?:intel\s+)?(?:core\s*)?(?P<tier>i[3579])\b", re.I), _intel_tier),
    (
        re.compile(r"\b(?:amd\s+)?ryzen\s*(?P<tier>[3579])(?:\s+(?P<model>\d{4}[a-z]{0,2}))?\b", re.I),
        _ryzen,
    ),
    (re.compile(r"\bsnapdragon\s*(?P<model>\d\s*\+?\s*gen\s*\d|\d{3})\b", re.I), _snapdragon),
    (re.compile(r"\b(?:mediatek\s+)?helio\s*(?P<model>[a-z]\d{2,3})\b", re.I), _named_chip("Helio")),
    (re.compile(r"\b(?:mediatek\s+)?dimensity\s*(?P<model>\d{3,4})\b", re.I), _named_chip("Dimensity")),
    (re.compile(r"\bexynos\s*(?P<model>\d{3,4})\b", re.I), _named_chip("Exynos")),
    (
        re.compile(r"\bapple\s+(?P<chip>m[1-4])(?:\s+(?P<variant>pro|max|ultra))?\b", re.I),
        _apple_silicon,
    ),
    (
        re.compile(
            r"\b(?:nvidia\s+)?(?:geforce\s+)?(?P<series>rtx|gtx)\s*(?P<model>\d{4})(?:\s*(?P<suffix>ti|super))?\b",
            re.I,
        ),
        _geforce,
    ),
    (re.compile(r"\b(?:amd\s+)?radeon\s+(?P<model>(?:rx\s*)?\d{3,4}[a-z]{0,2})\b", re.I), _named_chip("Radeon")),
    (
        re.compile(
            r"\b(?:gen(?:eration)?\s*(?P<gen>\d{1,2})|(?P<ordinal>\d{1,2})(?:st|nd|rd|th)\s*gen(?:eration)?)\b",
            re.I,
        ),
        _generation,
    ),
    (
        re.compile(r"(?<![\w.])(?P<size>\d{1,2}(?:[.,]\d{1,2})?)\s*(?:inch(?:es)?\b|inci\b|\")", re.I),
        _screen,
    ),
    (re.compile(r"\b(?P<rate>\d{2,3})\s*hz\b", re.I), _refresh_rate),
)


@dataclass(frozen=True, slots=True)
class Correction:
    """The replacement segment of a correction phrase and where it starts."""

    text: str
    start: int


@lru_cache(maxsize=None)
def _word_pattern(term: str) -> re.Pattern[str]:
    escaped = r"\s+".join(re.escape(part) for part in term.split())
    return re.compile(rf"(?<!\w){escaped}(?!\w)", re.IGNORECASE)


def _blank(match: re.Match[str]) -> str:
    return " " * len(match.group(0))


def _blank_span(text: str, start: int, end: int) -> str:
    return text[:start] + " " * (end - start) + text[end:]


def _append_unique(values: list[str], value: str) -> None:
    if value.casefold() not in {existing.casefold() for existing in values}:
        values.append(value)


def normalize_text(text: str | None) -> str:
    """Unify dashes and quotes and collapse whitespace."""

    if not text:
        return ""
    normalized = text.translate(_PUNCTUATION)
    return re.sub(r"\s+", " ", normalized).strip()


def parse_number(raw: str) -> float:
    """Parse ``1.500.000``, ``1,5`` or ``2.5`` style numerals."""

    if _GROUPED_NUMBER.fullmatch(raw):
        return float(re.sub(r"[.,]", "", raw))
    if raw.count(".") + raw.count(",") > 1:
        return float(re.sub(r"[.,]", "", raw))
    return float(raw.replace(",", "."))


def resolve_amount(raw: str, unit: str | None) -> int:
    """Resolve a numeral and optional unit suffix into whole rupiah."""

    value = parse_number(raw)
    if unit:
        value *= _UNIT_MULTIPLIERS[unit.lower()]
    return int(round(value))


def _single_amount(raw: str, unit: str | None) -> int | None:
    amount = resolve_amount(raw, unit)
    if not unit and amount < _MIN_PLAUSIBLE_PRICE:
        return None
    return amount


def _range_from_match(match: re.Match[str]) -> PriceBounds | None:
    low_raw, high_raw = match["low"], match["high"]
    low_unit, high_unit = match["low_unit"], match["high_unit"]

    if not low_unit and not high_unit:
        if parse_number(low_raw) <= _BARE_MILLIONS_LIMIT and parse_number(high_raw) <= _BARE_MILLIONS_LIMIT:
            low_unit = high_unit = "juta"
    elif not low_unit:
        if resolve_amount(low_raw, high_unit) <= resolve_amount(high_raw, high_unit):
            low_unit = high_unit
    elif not high_unit:
        high_unit = low_unit

    low = resolve_amount(low_raw, low_unit)
    high = resolve_amount(high_raw, high_unit)
    if low > high:
        low, high = high, low
    if high < _MIN_PLAUSIBLE_PRICE:
        return None
    return low, high


def approximate_bounds(amount: int) -> tuple[int, int]:
    """Return the budget window implied by "around <amount>"."""

    variation = max(APPROX_MIN_VARIATION, int(round(amount * APPROX_RATIO)))
    return max(0, amount - variation), amount + variation


def extract_approximate_budget(text: str) -> tuple[int, int] | None:
    """Return the window for an "around N" phrase, if the message has one."""

    match = _APPROX_PATTERN.search(text)
    if not match:
        return None
    return approximate_bounds(resolve_amount(match["value"], match["unit"]))


def extract_price(text: str) -> tuple[PriceBounds | None, str]:
    """Return ``(min, max)`` price bounds in rupiah and the blanked text."""

    for match in _RANGE_PATTERN.finditer(text):
        bounds = _range_from_match(match)
        if bounds is not None:
            return bounds, _blank_span(text, *match.span())

    masked = text
    low: int | None = None
    high: int | None = None

    upper = _UPPER_PATTERN.search(masked)
    if upper:
        high = _single_amount(upper["value"], upper["unit"])
        if high is not None:
            masked = _blank_span(masked, *upper.span())

    lower = _LOWER_PATTERN.search(masked)
    if lower:
        low = _single_amount(lower["value"], lower["unit"])
        if low is not None:
            masked = _blank_span(masked, *lower.span())

    if low is not None or high is not None:
        if low is not None and high is not None and low > high:
            low, high = high, low
        return (low, high), masked

    # "around N" takes any amount, even a unitless one below 1000.
    approx = _APPROX_PATTERN.search(masked)
    if approx:
        amount = resolve_amount(approx["value"], approx["unit"])
        return approximate_bounds(amount), _blank_span(masked, *approx.span())

    # A lone "5 juta" or "Rp 750.000" answers the budget question as a ceiling.
    for pattern in (_CURRENCY_AMOUNT_PATTERN, _UNIT_AMOUNT_PATTERN):
        match = pattern.search(masked)
        if match:
            amount = resolve_amount(match["value"], match["unit"])
            if amount >= _MIN_PLAUSIBLE_PRICE:
                return (None, amount), _blank_span(masked, *match.span())

    return None, masked


def extract_min_rating(text: str) -> tuple[float | None, str]:
    """Return a minimum star rating in ``[0, 5]`` and the blanked text."""

    for pattern in _RATING_PATTERNS:
        match = pattern.search(text)
        if match:
            value = min(5.0, float(match["value"].replace(",", ".")))
            return value, _blank_span(text, *match.span())
    return None, text


def extract_specs(text: str) -> tuple[list[str], str]:
    """Return structural specs followed by feature words, plus the blanked text."""

    specs: list[str] = []
    masked = text
    for pattern, render in _SPEC_PATTERNS:
        for match in pattern.finditer(masked):
            for value in render(match):
                _append_unique(specs, value)
        masked = pattern.sub(_blank, masked)

    for term, canonical in FEATURE_TERMS.items():
        pattern = _word_pattern(term)
        if pattern.search(masked):
            _append_unique(specs, canonical)
            masked = pattern.sub(_blank, masked)
    return specs, masked


def extract_colors(text: str) -> tuple[list[str], str]:
    """Return canonical colour names in message order and the blanked text."""

    found: list[tuple[int, str]] = []
    masked = text
    for surface, canonical in COLORS.items():
        pattern = _word_pattern(surface)
        for match in pattern.finditer(masked):
            found.append((match.start(), canonical))
        masked = pattern.sub(_blank, masked)

    colors: list[str] = []
    for _, canonical in sorted(found):
        _append_unique(colors, canonical)
    return colors, masked


def detect_brand(text: str) -> tuple[str | None, str]:
    """Return the first known brand and the text with every brand blanked."""

    brand: str | None = None
    masked = text
    for surface, display in BRANDS.items():
        pattern = _word_pattern(surface)
        if pattern.search(masked):
            brand = brand or display
            masked = pattern.sub(_blank, masked)
    return brand, masked


def detect_product(text: str) -> ProductTerm | None:
    """Return the first dictionary entry (in dictionary order) found in ``text``."""

    for entry in PRODUCT_TERMS:
        if _word_pattern(entry.term).search(text):
            return entry
    return None


def blank_term(text: str, term: str) -> str:
    """Blank every whole-word occurrence of ``term`` in ``text``."""

    return _word_pattern(term).sub(_blank, text)


def derive_keyword(text: str, limit: int = 3) -> str | None:
    """Build a keyword from the leftover non-filler tokens of ``text``."""

    tokens: list[str] = []
    numerals: list[str] = []
    for match in _TOKEN_PATTERN.finditer(text):
        token = match.group(0).strip("'-")
        if len(token) < 2 or token.lower() in FILLER_WORDS:
            continue
        if not any(char.isalpha() for char in token):
            numerals.append(token)
            continue
        tokens.append(token)
        if len(tokens) == limit:
            break
    # Numerals become the keyword only when no word survives.
    return " ".join(tokens or numerals[:limit]) or None


def detect_correction(text: str) -> Correction | None:
    """Return the replacement segment of "not X but Y" style phrases."""

    for pattern in _CORRECTION_PATTERNS:
        match = pattern.search(text)
        if not match:
            continue
        segment = match["new"].strip(" .,!?")
        if segment:
            return Correction(text=segment, start=match.start("new"))
    return None


def is_greeting(text: str | None) -> bool:
    """Return ``True`` when the whole message is a bare greeting."""

    if not text:
        return False
    normalized = _TRAILING_NOISE.sub("", normalize_text(text).lower())
    return normalized in GREETING_TOKENS


def is_no_preference(text: str | None) -> bool:
    """Return ``True`` when the message waves off the pending question."""

    return bool(text and _NO_PREFERENCE_PATTERN.search(text))


__all__ = [
    "APPROX_MIN_VARIATION",
    "APPROX_RATIO",
    "Correction",
    "PriceBounds",
    "approximate_bounds",
    "blank_term",
    "derive_keyword",
    "detect_brand",
    "detect_correction",
    "detect_product",
    "extract_approximate_budget",
    "extract_colors",
    "extract_min_rating",
    "extract_price",
    "extract_specs",
    "is_greeting",
    "is_no_preference",
    "normalize_text",
    "parse_number",
    "resolve_amount",
]
