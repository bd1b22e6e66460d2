"""HTTP client for Overpass mirrors and request accounting."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from . import config

logger = logging.getLogger(__name__)


class HttpStatusError(RuntimeError):
    def __init__(self, url: str, status_code: int) -> None:
        super().__init__(f"HTTP {status_code} from {url}")
        self.url = url
        self.status_code = status_code


@dataclass
class RequestMetrics:
    attempts: int = 0
    failures: int = 0
    successes: int = 0
    fallbacks: int = 0
    skipped_busy: int = 0

    def inc(self, kind: str) -> None:
        if kind == "attempt":
            self.attempts += 1
        elif kind == "failure":
            self.failures += 1
        elif kind == "success":
            self.successes += 1
        elif kind == "fallback":
            self.fallbacks += 1
        elif kind == "skipped_busy":
            self.skipped_busy += 1
        else:
            raise ValueError(f"Unknown request metric: {kind}")


class HttpClient:
    """Single-attempt form POSTs. Mirror fallback happens one level up."""

    def __init__(
        self,
        timeout: Optional[float] = None,
        user_agent: Optional[str] = None,
    ) -> None:
        self.timeout = timeout if timeout is not None else config.HTTP_TIMEOUT_SECONDS
        self.user_agent = user_agent or os.environ.get("OVERPASS_USER_AGENT") or config.HTTP_USER_AGENT
        self.session = requests.Session()

    def post_form(
        self,
        url: str,
        body: str,
        extra_headers: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        headers = {
            "Content-Type": "application/x-www-form-urlencoded",
            "User-Agent": self.user_agent,
            "Accept": "application/json",
        }
        if extra_headers:
            headers.update(extra_headers)

        resp = self.session.post(url, data=body, headers=headers, timeout=self.timeout)
        status = resp.status_code
        if status != 200:
            logger.warning("HTTP %s from %s", status, url)
            raise HttpStatusError(url, status)
        try:
            payload = resp.json()
        except ValueError:
            logger.error("Non-JSON response from %s", url)
            raise
        if not isinstance(payload, dict):
            raise ValueError(f"Unexpected JSON payload type from {url}: {type(payload).__name__}")
        return payload

    def close(self) -> None:
        self.session.close()
