"""
==============================================================================
Scan Gate Module
==============================================================================

Single-slot admission gate for scan invocations.

Only one scan may be in flight per process. A request arriving while
the slot is taken is rejected immediately with SCAN_IN_PROGRESS; it is
never queued.

==============================================================================
"""

from __future__ import annotations

import logging
import threading
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from functools import lru_cache
from typing import Iterator, Optional

from docscan.core import exceptions


# Module logger
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScanTicket:
    """Handle of the invocation holding the gate."""
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class ScanGate:
    """
    Capacity-1 admission gate.

    The pending ticket is checked and set under one lock.

    Example:
        >>> gate = ScanGate()
        >>> with gate.admit() as ticket:
        ...     run_scan()
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._pending: Optional[ScanTicket] = None

    @property
    def pending(self) -> Optional[ScanTicket]:
        with self._lock:
            return self._pending

    @property
    def is_busy(self) -> bool:
        return self.pending is not None

    def acquire(self) -> ScanTicket:
        """
        Take the slot.

        Raises:
            AppException: SCAN_IN_PROGRESS when the slot is taken
        """
        with self._lock:
            if self._pending is not None:
                logger.warning(f"⛔ Scan rejected, {self._pending.id} still in progress")
                raise exceptions.scan_in_progress(self._pending.started_at.isoformat())

            self._pending = ScanTicket()
            ticket = self._pending

        logger.debug(f"Scan {ticket.id} admitted")
        return ticket

    def release(self, ticket: ScanTicket) -> None:
        """Free the slot if the ticket still holds it."""
        with self._lock:
            if self._pending is ticket:
                self._pending = None
                logger.debug(f"Scan {ticket.id} released")

    @contextmanager
    def admit(self) -> Iterator[ScanTicket]:
        ticket = self.acquire()
        try:
            yield ticket
        finally:
            self.release(ticket)


@lru_cache(maxsize=1)
def get_scan_gate() -> ScanGate:
    """Get the process-wide ScanGate instance."""
    return ScanGate()
