"""
HTTP submission sink.

POSTs the session record as JSON to a relay endpoint. One attempt, no
retries; delivery guarantees belong to the relay.
"""

from __future__ import annotations

from typing import Dict, Optional

import requests

from ..spi.submission_sink import SubmissionError, SubmissionReceipt
from ..summary import SessionSummary


class HttpSink:
    def __init__(
        self,
        url: str,
        timeout: float = 10.0,
        headers: Optional[Dict[str, str]] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self.headers = {"Content-Type": "application/json", **(headers or {})}
        self._session = session or requests.Session()

    def submit(self, summary: SessionSummary) -> SubmissionReceipt:
        try:
            response = self._session.post(
                self.url,
                json=summary.to_dict(),
                headers=self.headers,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise SubmissionError(f"Failed to reach {self.url}: {exc}") from exc
        if not response.ok:
            raise SubmissionError(f"Failed to submit ({response.status_code})")
        return SubmissionReceipt(
            accepted=True,
            reference=response.text or None,
            status_code=response.status_code,
        )
