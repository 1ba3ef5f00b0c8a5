"""
In-memory submission sink.
"""

from __future__ import annotations

from typing import Any, Dict, List

from ..spi.submission_sink import SubmissionReceipt
from ..summary import SessionSummary


class InMemorySink:
    def __init__(self) -> None:
        self._records: List[Dict[str, Any]] = []

    def submit(self, summary: SessionSummary) -> SubmissionReceipt:
        self._records.append(summary.to_dict())
        return SubmissionReceipt(accepted=True, reference=f"memory:{len(self._records) - 1}")

    @property
    def records(self) -> List[Dict[str, Any]]:
        return list(self._records)
