"""Logseq HTTP API client with retry and exponential backoff"""

import logging
import random
import time
from typing import Any, Callable, Optional

import httpx

from mdlogseq.client.base import BlockClient
from mdlogseq.client.errors import LogseqApiError, LogseqConnectionError, LogseqError
from mdlogseq.config import Settings


logger = logging.getLogger(__name__)

RETRY_BASE_DELAY = 1.0  # seconds
RETRY_MAX_DELAY = 8.0
RETRY_JITTER_MAX = 0.25


def compute_retry_delay(attempt: int) -> float:
    """Exponential backoff for a 0-indexed attempt, capped, with a little jitter."""
    return min(RETRY_BASE_DELAY * (2 ** attempt), RETRY_MAX_DELAY) + random.uniform(0, RETRY_JITTER_MAX)


def _is_retryable(error: LogseqError) -> bool:
    if isinstance(error, LogseqConnectionError):
        return True
    return isinstance(error, LogseqApiError) and error.retryable


class LogseqClient(BlockClient):
    """Calls the Logseq HTTP API: POST {method, args} to <api_url>/api."""

    def __init__(
        self,
        api_url: str,
        api_token: str = "",
        timeout: float = 10.0,
        max_retries: int = 3,
        transport: Optional[httpx.BaseTransport] = None,
        sleep: Callable[[float], None] = time.sleep,
        ):
        headers = {"Content-Type": "application/json"}
        if api_token:
            headers["Authorization"] = f"Bearer {api_token}"
        self._client = httpx.Client(
            base_url=api_url.rstrip('/'),
            headers=headers,
            timeout=timeout,
            transport=transport,
        )
        self.max_retries = max_retries
        self._sleep = sleep

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "LogseqClient":
        return cls(
            settings.api_url,
            settings.api_token,
            timeout=settings.timeout,
            max_retries=settings.max_retries,
            **kwargs,
        )

    def __enter__(self) -> "LogseqClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def _call_once(self, method: str, args: list) -> Any:
        logger.debug("API call %s", method)
        try:
            response = self._client.post("/api", json={"method": method, "args": args})
        except (httpx.ConnectError, httpx.TimeoutException) as e:
            raise LogseqConnectionError(
                f"Cannot reach Logseq API ({e}); make sure Logseq is running with the HTTP API enabled"
            ) from e
        except httpx.HTTPError as e:
            raise LogseqApiError(f"HTTP transport error: {e}") from e

        try:
            payload = response.json() if response.content else None
        except ValueError:
            payload = response.text

        error = payload.get("error") if isinstance(payload, dict) else None
        if response.status_code == 401:
            raise LogseqApiError("Unauthorized: invalid API token", 401)
        if response.status_code >= 400:
            raise LogseqApiError(error or f"HTTP {response.status_code}", response.status_code)
        if error:
            raise LogseqApiError(str(error))

        if isinstance(payload, dict) and "data" in payload:
            return payload["data"]
        return payload

    def call_api(self, method: str, args: Optional[list] = None) -> Any:
        """Invoke a host API method, retrying connection errors and 5xx responses."""
        args = list(args or [])
        for attempt in range(self.max_retries + 1):
            try:
                return self._call_once(method, args)
            except LogseqError as e:
                if attempt >= self.max_retries or not _is_retryable(e):
                    raise
                delay = compute_retry_delay(attempt)
                logger.warning("API call %s failed (%s), retrying in %.1fs", method, e, delay)
                self._sleep(delay)

    def insert_block(self, anchor: str, content: str, opts: dict[str, bool]) -> Any:
        return self.call_api("logseq.Editor.insertBlock", [anchor, content, opts])

    def test_connection(self) -> bool:
        """True when the API answers a lightweight call."""
        try:
            self.call_api("logseq.App.getCurrentGraph")
            return True
        except LogseqError as e:
            logger.warning("Connection test failed: %s", e)
            return False
