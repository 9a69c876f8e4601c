# file: dedup.py
from __future__ import annotations

import hashlib
import json
import logging
import threading
import time
from collections import OrderedDict
from typing import Callable, Dict

from models import InboundMessage
from nlp_utils import dedup_body

logger = logging.getLogger(__name__)


def dedup_key(message: InboundMessage) -> str:
    payload = json.dumps(
        [message.sender, message.kind.value, dedup_body(message.body)],
        ensure_ascii=False,
    )
    digest = hashlib.sha256(payload.encode("utf-8")).hexdigest()[:32]
    return f"{message.sender}_{message.kind.value}_{digest}"


class DedupWindow:
    """
    Suppresses webhook redeliveries.

    Two structures guarded by one lock:
    - ``_seen``: FIFO of the last ``capacity`` accepted keys (rejects any repeat still inside it)
    - ``_recent``: key → last accepted instant (rejects repeats within ``repeat_window``),
      swept of entries older than ``horizon`` on every accept
    """

    def __init__(
        self,
        capacity: int = 100,
        repeat_window: float = 5.0,
        horizon: float = 30.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.capacity = int(max(1, capacity))
        self.repeat_window = float(repeat_window)
        self.horizon = float(horizon)
        self._clock = clock
        self._lock = threading.Lock()
        self._seen: "OrderedDict[str, None]" = OrderedDict()
        self._recent: Dict[str, float] = {}

    def should_process(self, message: InboundMessage) -> bool:
        key = dedup_key(message)
        with self._lock:
            now = self._clock()
            if key in self._seen:
                logger.warning(f"🔁 Duplicate message skipped: {key}")
                return False
            last = self._recent.get(key)
            if last is not None and now - last < self.repeat_window:
                logger.warning(f"🔁 Recent duplicate skipped: {key}")
                return False

            self._seen[key] = None
            self._recent[key] = now
            while len(self._seen) > self.capacity:
                self._seen.popitem(last=False)
            for k in [k for k, ts in self._recent.items() if now - ts > self.horizon]:
                del self._recent[k]
            return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._seen)
