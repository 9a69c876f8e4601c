# errors.py
"""Exceptions raised inside the metro assistant core.

None of these are fatal: the router turns every one of them into either a
suppressed outcome or a canned reply.
"""

from __future__ import annotations


class MetroAssistantError(Exception):
    """Base class for assistant errors."""


class StationNotFound(MetroAssistantError):
    def __init__(self, query: str):
        super().__init__(f"Station not found: {query!r}")
        self.query = query


class DelegateError(MetroAssistantError):
    """The completion service did not produce a usable reply."""


class DelegateTimeout(DelegateError):
    pass


class DelegateServiceError(DelegateError):
    pass


class DelegateMalformedResponse(DelegateError):
    pass


class TransportError(MetroAssistantError):
    """Outbound send to the messaging provider failed."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
