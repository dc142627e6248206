from __future__ import annotations

import logging
from typing import Any

import requests

logger = logging.getLogger(__name__)


class RequestsWebhookClient:
    """POST workflow payloads to tenant-configured URLs."""

    def __init__(self, timeout_seconds: float = 10.0, session: requests.Session | None = None) -> None:
        self._timeout = timeout_seconds
        self._session = session or requests.Session()

    def post(self, url: str, body: dict[str, Any], headers: dict[str, str] | None = None) -> None:
        resp = self._session.post(url, json=body, headers=headers, timeout=self._timeout)
        if resp.status_code >= 400:
            raise RuntimeError(f"Webhook returned HTTP {resp.status_code}")
        logger.info("Webhook delivered", extra={"url": url, "status_code": resp.status_code})

    def close(self) -> None:
        self._session.close()
