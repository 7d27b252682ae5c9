"""Errors raised while talking to the Logseq HTTP API"""

from typing import Optional


class LogseqError(RuntimeError):
    """Base class for host API failures."""


class LogseqConnectionError(LogseqError):
    """The API could not be reached (refused, DNS failure, timeout)."""


class LogseqApiError(LogseqError):
    """The API answered with an HTTP error status or an error payload."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code

    @property
    def retryable(self) -> bool:
        return self.status_code is not None and self.status_code >= 500
