# session_manager.py

import logging
import threading
from datetime import date, timedelta
from typing import Callable, Dict, Optional

logger = logging.getLogger(__name__)

SESSION_MAX_ENTRIES = 1000
SESSION_RETENTION_DAYS = 30


class SessionTracker:
    """At most one greeting per sender per calendar day."""

    def __init__(
        self,
        max_entries: int = SESSION_MAX_ENTRIES,
        retention_days: int = SESSION_RETENTION_DAYS,
        today: Callable[[], date] = date.today,
    ):
        self.max_entries = max_entries
        self.retention = timedelta(days=retention_days)
        self._today = today
        self._lock = threading.Lock()
        self.sessions: Dict[str, date] = {}

    def should_greet(self, sender: str) -> bool:
        today = self._today()
        with self._lock:
            last = self.sessions.get(sender)
            if last == today:
                return False
            self.sessions[sender] = today
            if len(self.sessions) > self.max_entries:
                self._prune(today)
            return True

    def last_greeted(self, sender: str) -> Optional[date]:
        with self._lock:
            return self.sessions.get(sender)

    def _prune(self, today: date) -> None:
        cutoff = today - self.retention
        stale = [s for s, d in self.sessions.items() if d < cutoff]
        for s in stale:
            del self.sessions[s]
        if stale:
            logger.info(f"🧹 Pruned {len(stale)} greeting sessions older than {cutoff.isoformat()}")

    def __len__(self) -> int:
        with self._lock:
            return len(self.sessions)
