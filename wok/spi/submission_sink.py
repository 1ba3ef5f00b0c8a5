"""
SPI interface for session submission.

The engine hands a finished ``SessionSummary`` to a sink and moves on; how
the record travels and where it is stored is the sink's business.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from ..summary import SessionSummary


class SubmissionError(Exception):
    """Raised by a sink when a record could not be delivered."""


@dataclass(frozen=True)
class SubmissionReceipt:
    accepted: bool
    reference: Optional[str] = None
    status_code: Optional[int] = None


class SubmissionSink(Protocol):
    def submit(self, summary: SessionSummary) -> SubmissionReceipt:
        """Deliver a session record. Raises SubmissionError on failure."""
