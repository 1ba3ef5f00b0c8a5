"""Submission sink implementations."""

from .http import HttpSink
from .memory import InMemorySink

__all__ = ["HttpSink", "InMemorySink"]
