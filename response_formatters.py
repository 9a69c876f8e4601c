# response_formatters.py

from constants import (
    CONTEXTUAL_PREFIX,
    FARE_BETWEEN_FALLBACK_TEXT,
    FARE_DETAIL_TEXT,
    FARE_QUOTE_TEXT,
    FARE_TEXT,
    FESTIVAL_TEXT,
    GENERIC_FALLBACK_TEXT,
    MENU_OPTIONS,
    MENU_TEXT,
    ROUTE_DETAIL_TEXT,
    ROUTE_TEXT,
    SCHEDULE_DETAIL_TEXT,
    SCHEDULE_TEXT,
    TRANSFER_NOTE,
    WELCOME_OPTIONS,
    WELCOME_TEXT,
)
from metro_graph import RouteGraph
from models import Reply, RouteQuote


def welcome_reply() -> Reply:
    return Reply(WELCOME_TEXT, options=WELCOME_OPTIONS)


def menu_reply() -> Reply:
    return Reply(MENU_TEXT, options=MENU_OPTIONS)


def route_reply(graph: RouteGraph) -> Reply:
    return Reply(ROUTE_TEXT.format(station_lists=graph.station_lists()))


def fare_reply() -> Reply:
    return Reply(FARE_TEXT)


def schedule_reply() -> Reply:
    return Reply(SCHEDULE_TEXT)


def festival_reply() -> Reply:
    return Reply(FESTIVAL_TEXT)


def contextual_reply(topic: str, message: str, graph: RouteGraph) -> Reply:
    """
    Detailed variant of a canned reply, prefixed with the query it follows up on.
    topic: "route" | "fare" | "schedule"
    """
    details = {
        "route": lambda: ROUTE_DETAIL_TEXT.format(numbered_lines=graph.numbered_listing()),
        "fare": lambda: FARE_DETAIL_TEXT,
        "schedule": lambda: SCHEDULE_DETAIL_TEXT,
    }
    body = details[topic]()
    return Reply(CONTEXTUAL_PREFIX.format(message=message, topic=topic) + body)


def fare_quote_reply(quote: RouteQuote, source: str = "fallback") -> Reply:
    text = FARE_QUOTE_TEXT.format(
        origin=quote.origin,
        destination=quote.destination,
        stations=quote.stations,
        fare=quote.fare,
        minutes=f"{quote.minutes:g}",
        transfer_note=TRANSFER_NOTE if quote.transfer else "",
    )
    return Reply(text, source=source)


def fare_between_fallback_reply(message: str) -> Reply:
    return Reply(FARE_BETWEEN_FALLBACK_TEXT.format(message=message), source="fallback")


def generic_fallback_reply(message: str) -> Reply:
    return Reply(GENERIC_FALLBACK_TEXT.format(message=message), options=MENU_OPTIONS, source="fallback")
