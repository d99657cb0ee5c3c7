"""
Request gate.

A phonebook serves one caller request at a time. A request arriving while
another is outstanding is refused with Busy; nothing is queued.
"""

import logging
from contextlib import contextmanager
from enum import Enum
from typing import Iterator, Optional

from .errors import PhonebookBusy

logger = logging.getLogger(__name__)


class RequestKind(Enum):
    EXPORT = "export"
    FDN_READ = "fdn_read"
    FDN_INSERT = "fdn_insert"
    FDN_UPDATE = "fdn_update"
    FDN_DELETE = "fdn_delete"


class GateToken:
    """Proof of holding the gate, handed back on release."""

    def __init__(self, kind: RequestKind):
        self.kind = kind

    def __repr__(self):
        return f"GateToken({self.kind.value})"


class RequestGate:
    """Single-slot admission token shared by all requests on one phonebook."""

    def __init__(self):
        self._token: Optional[GateToken] = None

    @property
    def held(self) -> Optional[RequestKind]:
        return self._token.kind if self._token else None

    def acquire(self, kind: RequestKind) -> GateToken:
        if self._token is not None:
            logger.debug(f"Refusing {kind.value}: {self._token.kind.value} outstanding")
            raise PhonebookBusy()
        self._token = GateToken(kind)
        return self._token

    def release(self, token: GateToken) -> None:
        if token is not self._token:
            raise ValueError(f"{token!r} does not hold the gate")
        self._token = None

    @contextmanager
    def hold(self, kind: RequestKind) -> Iterator[GateToken]:
        """Hold the gate for the duration of the block, whatever its outcome."""
        token = self.acquire(kind)
        try:
            yield token
        finally:
            self.release(token)
