"""
Search outcome taxonomy and failure classification.

  idle        -- neither prompt nor conditions; nothing was queried
  ok          -- results returned
  no_results  -- the backend found nothing (empty page, 404, or a
                 "no companies found" message); a neutral empty state
  error       -- transport / server failure, surfaced with its message
"""
from __future__ import annotations

import re
from enum import Enum


class SearchStatus(str, Enum):
    IDLE = "idle"
    OK = "ok"
    NO_RESULTS = "no_results"
    ERROR = "error"


GENERIC_FAILURE_MESSAGE = "An error occurred while searching for companies"

_NO_RESULTS_RE = re.compile(r"no companies found|matching your conditions", re.IGNORECASE)


class SearchBackendError(Exception):
    """Raised by a SearchBackend when a query does not yield an envelope."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code is None:
            return self.message
        return f"{self.status_code}: {self.message}"


def is_no_results(exc: SearchBackendError) -> bool:
    """A 404 or a "nothing matched" message is an empty result, not a failure."""
    if exc.status_code == 404:
        return True
    return bool(_NO_RESULTS_RE.search(exc.message or ""))


def failure_message(exc: SearchBackendError) -> str:
    return str(exc) if exc.message else GENERIC_FAILURE_MESSAGE
