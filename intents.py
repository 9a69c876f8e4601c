"""
Rule cascade that maps an inbound message to an intent.

The rules are data: an ordered list of (tag, predicate, intent), evaluated top
to bottom, first match wins. The tag is what gets written to the context log.
Keyword sets overlap on purpose ("station" alone vs. with the length check),
so reordering the list changes behaviour.
"""
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from constants import (
    DELEGATE_LENGTH_THRESHOLD,
    FARE_BETWEEN_KEYWORDS,
    FARE_KEYWORDS,
    FESTIVAL_KEYWORDS,
    ROUTE_KEYWORDS,
    SCHEDULE_KEYWORDS,
    SHORT_STATION_QUERY_LIMIT,
    STATION_LISTING_CUES,
)
from models import Classification, Intent
from nlp_utils import contains_any, is_genuine_greeting, normalize_text

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Signals:
    text: str  # lowered message
    greeting_due: bool = False


@dataclass(frozen=True)
class IntentRule:
    tag: str
    predicate: Callable[[Signals], bool]
    intent: Intent


def _has_to(s: Signals) -> bool:
    return " to " in s.text


TEXT_RULES: List[IntentRule] = [
    IntentRule(
        "welcome",
        lambda s: s.greeting_due and is_genuine_greeting(s.text),
        Intent.GREETING,
    ),
    IntentRule(
        "fare_query",
        lambda s: _has_to(s) and contains_any(s.text, FARE_BETWEEN_KEYWORDS),
        Intent.DELEGATE_TO_AI,
    ),
    IntentRule(
        "station_query",
        lambda s: contains_any(s.text, STATION_LISTING_CUES) or len(s.text) > DELEGATE_LENGTH_THRESHOLD,
        Intent.DELEGATE_TO_AI,
    ),
    IntentRule(
        "route_info",
        lambda s: contains_any(s.text, ROUTE_KEYWORDS),
        Intent.SHOW_ROUTES,
    ),
    IntentRule(
        "station_info",
        lambda s: "station" in s.text and len(s.text) < SHORT_STATION_QUERY_LIMIT,
        Intent.SHOW_ROUTES,
    ),
    IntentRule(
        "fare_info",
        lambda s: contains_any(s.text, FARE_KEYWORDS) and not _has_to(s),
        Intent.SHOW_FARES,
    ),
    IntentRule(
        "schedule_info",
        lambda s: contains_any(s.text, SCHEDULE_KEYWORDS),
        Intent.SHOW_SCHEDULE,
    ),
    IntentRule(
        "festival_info",
        lambda s: contains_any(s.text, FESTIVAL_KEYWORDS),
        Intent.SHOW_FESTIVAL,
    ),
]

DEFAULT_CLASSIFICATION = Classification(Intent.DELEGATE_TO_AI, "ai_response")

BUTTON_SLOTS: Dict[int, Classification] = {
    0: Classification(Intent.SHOW_ROUTES, "button_route"),
    1: Classification(Intent.SHOW_FARES, "button_fare"),
    2: Classification(Intent.SHOW_SCHEDULE, "button_schedule"),
    3: Classification(Intent.SHOW_FESTIVAL, "button_festival"),
}
UNKNOWN_BUTTON = Classification(Intent.SHOW_MENU, "button_menu")

BUTTON_TAGS = frozenset(c.tag for c in BUTTON_SLOTS.values()) | {UNKNOWN_BUTTON.tag}

# Reduced re-scan used when the completion service fails: (topic, predicate)
FALLBACK_RULES: List[Tuple[str, Callable[[str], bool]]] = [
    ("fare_between", lambda t: " to " in t and "fare" in t),
    ("routes", lambda t: "route" in t or "station" in t),
    ("fares", lambda t: contains_any(t, FARE_BETWEEN_KEYWORDS)),
    ("schedule", lambda t: "time" in t or "schedule" in t),
]


class IntentClassifier:
    def __init__(self, rules: Optional[List[IntentRule]] = None) -> None:
        self.rules = list(rules if rules is not None else TEXT_RULES)

    def classify_button(self, button_index: Optional[int]) -> Classification:
        if button_index is None:
            return UNKNOWN_BUTTON
        return BUTTON_SLOTS.get(button_index, UNKNOWN_BUTTON)

    def classify_text(self, message: str, greeting_due: bool = False) -> Classification:
        signals = Signals(text=normalize_text(message), greeting_due=greeting_due)
        for rule in self.rules:
            if rule.predicate(signals):
                return Classification(rule.intent, rule.tag)
        return DEFAULT_CLASSIFICATION

    def classify(
        self,
        message: str,
        *,
        greeting_due: bool = False,
        is_button: bool = False,
        button_index: Optional[int] = None,
    ) -> Classification:
        if is_button:
            result = self.classify_button(button_index)
        else:
            result = self.classify_text(message, greeting_due)
        logger.info(f"📌 Intent: {result.intent.value} ({result.tag}) for input: '{message[:80]}'")
        return result


def fallback_topic(message: str) -> Optional[str]:
    text = normalize_text(message)
    for topic, predicate in FALLBACK_RULES:
        if predicate(text):
            return topic
    return None
