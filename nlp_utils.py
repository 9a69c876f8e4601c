import re
from typing import Iterable, Optional, Tuple

from constants import GREETING_WORDS, METRO_KEYWORDS

_WS_RE = re.compile(r"\s+")

# 1) Normalisation (lowercase only, the cascade measures raw length)
def normalize_text(text: str) -> str:
    return (text or "").lower()


# 2) Dedup body: collapsed whitespace, casefold
def dedup_body(text: str) -> str:
    return _WS_RE.sub(" ", (text or "").strip()).casefold()


def contains_any(text: str, keywords: Iterable[str]) -> bool:
    return any(k in text for k in keywords)


def is_genuine_greeting(lower_text: str) -> bool:
    """
    A short hello, not a question that happens to start with one.
    Up to 2 words: any greeting word inside wins. Longer: must start with a
    greeting word and mention nothing metro-related.
    """
    words = lower_text.strip().split()
    if len(words) <= 2:
        return contains_any(lower_text, GREETING_WORDS)
    if contains_any(lower_text, METRO_KEYWORDS):
        return False
    return any(lower_text.startswith(g) for g in GREETING_WORDS)


# 3) "X to Y" → (X, Y) for fare-between-stations questions
_FILLER_RE = re.compile(
    r"\b(?:what(?:'s| is)?|how much|is|the|fare|fares|cost|price|ticket|from|between|for|of|please|metro)\b",
    re.IGNORECASE,
)
_PAIR_RE = re.compile(r"^(?P<a>.+?)\s+(?:to|and)\s+(?P<b>.+?)$", re.IGNORECASE)


def _clean_station_phrase(s: str) -> str:
    s = re.sub(r"[?!.,;:]+", " ", s)
    s = _FILLER_RE.sub(" ", s)
    return _WS_RE.sub(" ", s).strip()


def extract_station_pair(text: str) -> Optional[Tuple[str, str]]:
    """
    'PCMC to Swargate fare' → ('PCMC', 'Swargate')
    'fare from vanaz to pmc?' → ('vanaz', 'pmc')
    """
    t = _WS_RE.sub(" ", (text or "").strip())
    if " to " not in f" {t.lower()} ":
        return None
    m = _PAIR_RE.match(t)
    if not m:
        return None
    a = _clean_station_phrase(m.group("a"))
    b = _clean_station_phrase(m.group("b"))
    if not a or not b:
        return None
    return a, b
