# metro_graph.py
"""
Static two-line metro graph: station lookup, stop-count distance, fare and
travel time.

Lookup is a case-insensitive substring match against each line's station list,
first match in list order wins, so "court" resolves to Civil Court and "peth"
to Budhwar Peth on the Purple Line. Cross-line trips pivot on the single
interchange station shared by both lines.
"""
from __future__ import annotations

import logging
from typing import Dict, Optional, Sequence, Tuple

from constants import (
    FARE_MAX,
    FARE_TIERS,
    INTERCHANGE_PENALTY_MIN,
    LINES,
    MINUTES_PER_STATION,
    TRANSFER_SURCHARGE,
)
from errors import StationNotFound
from models import RouteQuote

logger = logging.getLogger(__name__)


def fare(station_count: int, is_transfer: bool) -> int:
    base = FARE_MAX
    for limit, amount in FARE_TIERS:
        if station_count <= limit:
            base = amount
            break
    return base + TRANSFER_SURCHARGE if is_transfer else base


def duration(station_count: int, is_transfer: bool) -> float:
    minutes = station_count * MINUTES_PER_STATION
    return minutes + INTERCHANGE_PENALTY_MIN if is_transfer else minutes


class RouteGraph:
    def __init__(self, lines: Dict[str, Sequence[str]]):
        if len(lines) != 2:
            raise ValueError("RouteGraph expects exactly two lines")
        self.lines: Dict[str, Tuple[str, ...]] = {name: tuple(st) for name, st in lines.items()}
        first, second = self.lines.values()
        shared = set(first) & set(second)
        if len(shared) != 1:
            raise ValueError(f"Lines must share exactly one interchange, got {sorted(shared)}")
        self.interchange: str = shared.pop()

    @classmethod
    def default(cls) -> "RouteGraph":
        return cls(LINES)

    # ── lookup ────────────────────────────────────────────────────────────────
    def _index_on(self, line: str, query: str) -> Optional[int]:
        q = query.strip().lower()
        if not q:
            return None
        for i, station in enumerate(self.lines[line]):
            if q in station.lower():
                return i
        return None

    def lookup(self, query: str) -> Tuple[str, str]:
        """(line name, station name) for the first line that matches the query."""
        for line in self.lines:
            idx = self._index_on(line, query)
            if idx is not None:
                return line, self.lines[line][idx]
        raise StationNotFound(query)

    # ── distance ──────────────────────────────────────────────────────────────
    def _to_interchange(self, line: str, idx: int) -> int:
        return abs(self.lines[line].index(self.interchange) - idx)

    def _resolve(self, station_a: str, station_b: str) -> Tuple[int, bool, str, str]:
        hits = {
            line: (self._index_on(line, station_a), self._index_on(line, station_b))
            for line in self.lines
        }

        # Same line: first line (in order) holding both endpoints
        for line, (ia, ib) in hits.items():
            if ia is not None and ib is not None:
                stations = self.lines[line]
                return abs(ib - ia), False, stations[ia], stations[ib]

        line_a = next((ln for ln, (ia, _) in hits.items() if ia is not None), None)
        line_b = next((ln for ln, (_, ib) in hits.items() if ib is not None), None)
        if line_a is None:
            raise StationNotFound(station_a)
        if line_b is None:
            raise StationNotFound(station_b)

        ia, ib = hits[line_a][0], hits[line_b][1]
        count = self._to_interchange(line_a, ia) + self._to_interchange(line_b, ib)
        return count, True, self.lines[line_a][ia], self.lines[line_b][ib]

    def route(self, station_a: str, station_b: str) -> Tuple[int, bool]:
        """(station count, is_transfer) between two station queries."""
        count, transfer, _, _ = self._resolve(station_a, station_b)
        return count, transfer

    def distance(self, station_a: str, station_b: str) -> int:
        return self.route(station_a, station_b)[0]

    def quote(self, station_a: str, station_b: str) -> RouteQuote:
        count, transfer, origin, destination = self._resolve(station_a, station_b)
        q = RouteQuote(
            origin=origin,
            destination=destination,
            stations=count,
            fare=fare(count, transfer),
            minutes=duration(count, transfer),
            transfer=transfer,
        )
        logger.info(f"🚇 Quote {origin} → {destination}: {count} stations, ₹{q.fare}, {q.minutes} min")
        return q

    def numbered_listing(self) -> str:
        """Station numbering reference, one block per line."""
        blocks = []
        for name, stations in self.lines.items():
            terminals = f"{stations[0]}-{stations[-1]}"
            numbered = " → ".join(f"{i}. {s}" for i, s in enumerate(stations, start=1))
            blocks.append(f"**{name} ({terminals}):**\n{numbered}")
        return "\n\n".join(blocks)

    def station_lists(self) -> str:
        blocks = []
        for name, stations in self.lines.items():
            rows = "\n".join(f"{i}. {s}" for i, s in enumerate(stations, start=1))
            blocks.append(f"*{name} Stations:*\n{rows}")
        return "*Complete Station Lists:*\n\n" + "\n\n".join(blocks)
