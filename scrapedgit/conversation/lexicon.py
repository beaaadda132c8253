"""Word lists and dictionaries used by the deterministic extractor."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ProductTerm:
    """Dictionary entry mapping a surface form to its canonical keyword."""

    term: str
    canonical: str
    category: str


# Order matters: the first entry found in a message wins.
PRODUCT_TERMS: tuple[ProductTerm, ...] = (
    ProductTerm("laptop", "laptop", "computers"),
    ProductTerm("laptops", "laptop", "computers"),
    ProductTerm("notebook", "laptop", "computers"),
    ProductTerm("macbook", "laptop", "computers"),
    ProductTerm("headphones", "headphone", "audio"),
    ProductTerm("headphone", "headphone", "audio"),
    ProductTerm("headset", "headset", "audio"),
    ProductTerm("earphones", "earphone", "audio"),
    ProductTerm("earphone", "earphone", "audio"),
    ProductTerm("earbuds", "earbuds", "audio"),
    ProductTerm("earbud", "earbuds", "audio"),
    ProductTerm("tws", "TWS", "audio"),
    ProductTerm("smartwatch", "smartwatch", "wearables"),
    ProductTerm("smart watch", "smartwatch", "wearables"),
    ProductTerm("tablet", "tablet", "tablets"),
    ProductTerm("ipad", "tablet", "tablets"),
    ProductTerm("smartphone", "phone", "phones"),
    ProductTerm("handphone", "phone", "phones"),
    ProductTerm("cellphone", "phone", "phones"),
    ProductTerm("ponsel", "phone", "phones"),
    ProductTerm("iphone", "phone", "phones"),
    ProductTerm("hp", "phone", "phones"),
    ProductTerm("phone", "phone", "phones"),
    ProductTerm("keyboard", "keyboard", "computer accessories"),
    ProductTerm("mouse", "mouse", "computer accessories"),
    ProductTerm("monitor", "monitor", "computers"),
    ProductTerm("speaker", "speaker", "audio"),
    ProductTerm("power bank", "power bank", "phone accessories"),
    ProductTerm("powerbank", "power bank", "phone accessories"),
    ProductTerm("charger", "charger", "phone accessories"),
    ProductTerm("camera", "camera", "cameras"),
    ProductTerm("printer", "printer", "computers"),
    ProductTerm("router", "router", "networking"),
    ProductTerm("console", "game console", "gaming"),
)

# Canonical display names keyed by their lower-case surface form.
BRANDS: dict[str, str] = {
    "asus": "ASUS",
    "lenovo": "Lenovo",
    "hp": "HP",
    "acer": "Acer",
    "dell": "Dell",
    "msi": "MSI",
    "samsung": "Samsung",
    "apple": "Apple",
    "xiaomi": "Xiaomi",
    "redmi": "Redmi",
    "poco": "POCO",
    "oppo": "OPPO",
    "vivo": "vivo",
    "realme": "realme",
    "infinix": "Infinix",
    "huawei": "Huawei",
    "sony": "Sony",
    "jbl": "JBL",
    "logitech": "Logitech",
    "razer": "Razer",
    "anker": "Anker",
    "baseus": "Baseus",
    "google": "Google",
    "oneplus": "OnePlus",
}

COLORS: dict[str, str] = {
    "red": "red",
    "merah": "red",
    "blue": "blue",
    "biru": "blue",
    "navy": "navy",
    "black": "black",
    "hitam": "black",
    "white": "white",
    "putih": "white",
    "green": "green",
    "hijau": "green",
    "pink": "pink",
    "purple": "purple",
    "ungu": "purple",
    "grey": "gray",
    "gray": "gray",
    "abu-abu": "gray",
    "silver": "silver",
    "gold": "gold",
    "emas": "gold",
    "yellow": "yellow",
    "kuning": "yellow",
    "orange": "orange",
    "oranye": "orange",
    "brown": "brown",
    "coklat": "brown",
}

# Single feature words (and a few fixed phrases) captured after structural specs.
FEATURE_TERMS: dict[str, str] = {
    "noise cancelling": "noise cancelling",
    "noise canceling": "noise cancelling",
    "fast charging": "fast charging",
    "dual sim": "dual sim",
    "gaming": "gaming",
    "wireless": "wireless",
    "bluetooth": "bluetooth",
    "waterproof": "waterproof",
    "anc": "noise cancelling",
    "rgb": "rgb",
    "mechanical": "mechanical",
    "4k": "4K",
    "oled": "OLED",
    "amoled": "AMOLED",
    "touchscreen": "touchscreen",
    "lightweight": "lightweight",
    "ergonomic": "ergonomic",
    "portable": "portable",
    "foldable": "foldable",
    "backlit": "backlit",
    "5g": "5G",
    "nfc": "NFC",
}

GREETING_TOKENS: frozenset[str] = frozenset(
    {
        "hi",
        "hii",
        "hello",
        "helo",
        "halo",
        "hallo",
        "hai",
        "hey",
        "heya",
        "hiya",
        "yo",
        "bro",
        "p",
        "good morning",
        "good afternoon",
        "good evening",
        "selamat pagi",
        "selamat siang",
        "selamat sore",
        "selamat malam",
    }
)

# Determiners, politeness words and request verbs removed from keywords.
STOP_WORDS: frozenset[str] = frozenset(
    {
        "a",
        "an",
        "the",
        "some",
        "any",
        "this",
        "that",
        "these",
        "those",
        "my",
        "please",
        "pls",
        "plz",
        "kindly",
        "thanks",
        "thank",
        "you",
        "i",
        "im",
        "i'm",
        "me",
        "want",
        "wanna",
        "need",
        "looking",
        "look",
        "for",
        "find",
        "search",
        "show",
        "give",
        "get",
        "buy",
        "recommend",
        "suggest",
        "can",
        "could",
        "would",
        "like",
        "to",
        "color",
        "colour",
        "warna",
        "tolong",
        "dong",
        "cari",
        "carikan",
        "mau",
        "ingin",
        "butuh",
        "beli",
        "yang",
        "saya",
        "aku",
        "minta",
    }
)

# Words that never form a product keyword on their own.
FILLER_WORDS: frozenset[str] = STOP_WORDS | GREETING_TOKENS | frozenset(
    {
        "yes",
        "yeah",
        "yep",
        "ok",
        "okay",
        "sure",
        "no",
        "nope",
        "none",
        "not",
        "nothing",
        "anything",
        "whatever",
        "idk",
        "dont",
        "don't",
        "doesnt",
        "doesn't",
        "does",
        "do",
        "care",
        "matter",
        "know",
        "preference",
        "prefer",
        "surprise",
        "budget",
        "price",
        "limit",
        "around",
        "about",
        "approximately",
        "roughly",
        "under",
        "below",
        "above",
        "over",
        "max",
        "min",
        "maximum",
        "minimum",
        "less",
        "more",
        "than",
        "between",
        "and",
        "or",
        "with",
        "without",
        "in",
        "on",
        "of",
        "at",
        "from",
        "is",
        "are",
        "be",
        "it",
        "its",
        "just",
        "also",
        "only",
        "really",
        "very",
        "good",
        "best",
        "cheap",
        "new",
        "now",
        "start",
        "make",
        "modify",
        "change",
        "type",
        "have",
        "has",
        "additional",
        "requirement",
        "requirements",
        "spec",
        "specs",
        "specification",
        "specifications",
        "brand",
        "help",
        "something",
        "product",
        "products",
        "item",
        "items",
        "popular",
        "other",
        "too",
        "up",
        "least",
        "much",
        "what",
        "which",
        "rating",
        "rated",
        "star",
        "stars",
        "rp",
        "idr",
        "rupiah",
        "k",
        "rb",
        "ribu",
        "jt",
        "juta",
        "million",
        "mio",
        "m",
        "harga",
        "sekitar",
        "sampai",
        "dibawah",
        "bawah",
        "diatas",
        "atas",
        "di",
        "tidak",
        "gak",
        "nggak",
        "ga",
        "ada",
        "bebas",
        "terserah",
    }
)


__all__ = [
    "BRANDS",
    "COLORS",
    "FEATURE_TERMS",
    "FILLER_WORDS",
    "GREETING_TOKENS",
    "PRODUCT_TERMS",
    "ProductTerm",
    "STOP_WORDS",
]
