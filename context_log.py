# context_log.py
import logging
import threading
import time
from typing import Callable, Dict, List

from models import ContextEntry

logger = logging.getLogger(__name__)

MAX_HISTORY = 5
CONTEXT_TTL = 3600  # 1 hour


class ContextLog:
    """
    Short rolling history of (message, intent tag) per sender.
    Used only to personalise button replies, never to pick the route.
    Expired entries are dropped lazily, across all senders, on every access.
    """

    def __init__(
        self,
        max_entries: int = MAX_HISTORY,
        ttl: float = CONTEXT_TTL,
        clock: Callable[[], float] = time.time,
    ):
        self.max_entries = max_entries
        self.ttl = ttl
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: Dict[str, List[ContextEntry]] = {}

    def record(self, sender: str, text: str, tag: str) -> None:
        with self._lock:
            now = self._clock()
            history = self._entries.setdefault(sender, [])
            history.append(ContextEntry(sender=sender, message=text, tag=tag, at=now))
            del history[:-self.max_entries]
            self._expire(now)

    def recent_intents(self, sender: str, limit: int = 3) -> List[ContextEntry]:
        """Most recent entries for the sender, oldest first, most recent last."""
        with self._lock:
            self._expire(self._clock())
            history = self._entries.get(sender, [])
            return list(history[-limit:]) if limit > 0 else []

    def _expire(self, now: float) -> None:
        cutoff = now - self.ttl
        for sender in list(self._entries):
            fresh = [e for e in self._entries[sender] if e.at > cutoff]
            if fresh:
                self._entries[sender] = fresh
            else:
                del self._entries[sender]
