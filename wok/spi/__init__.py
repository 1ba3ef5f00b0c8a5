"""SPI surface for session submission."""

from .submission_sink import SubmissionError, SubmissionReceipt, SubmissionSink

__all__ = [
    "SubmissionError",
    "SubmissionReceipt",
    "SubmissionSink",
]
