"""Outbound channels for marker payloads."""

from __future__ import annotations

import logging
import threading
from typing import Optional, Protocol

import httpx

from ...config import settings

logger = logging.getLogger(__name__)


class ResultPublisher(Protocol):
    def publish(self, order_id: int, markers: list[dict]) -> None: ...


class InMemoryPublisher:
    """Keeps the most recently published marker array for polling consumers."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._latest: Optional[dict] = None
        self.published_count = 0

    def publish(self, order_id: int, markers: list[dict]) -> None:
        with self._lock:
            self._latest = {"order_id": order_id, "markers": markers}
            self.published_count += 1

    def latest(self) -> Optional[dict]:
        with self._lock:
            return self._latest


class WebhookPublisher:
    """POSTs marker arrays to an external visualization endpoint."""

    def __init__(self, url: str | None = None, timeout: float | None = None) -> None:
        self.url = url or settings.result_webhook_url
        if not self.url:
            raise ValueError("Result webhook URL is not configured.")
        try:
            httpx.URL(self.url)
        except httpx.InvalidURL as exc:
            raise ValueError(f"Result webhook URL '{self.url}' is invalid: {exc}") from exc
        self.timeout = timeout if timeout is not None else settings.result_webhook_timeout_seconds

    def _get_client(self) -> httpx.Client:
        return httpx.Client(timeout=httpx.Timeout(self.timeout, connect=min(self.timeout, 5.0)))

    def publish(self, order_id: int, markers: list[dict]) -> None:
        with self._get_client() as client:
            try:
                response = client.post(self.url, json={"order_id": order_id, "markers": markers})
                response.raise_for_status()
            except (httpx.HTTPError, httpx.InvalidURL) as exc:
                # The order is already complete at this point; delivery failures are only logged.
                logger.warning(f"Failed to deliver markers for order {order_id} to {self.url}: {exc}")
                return
        logger.info(f"Delivered {len(markers)} markers for order {order_id} to {self.url}")


def build_publishers() -> list[ResultPublisher]:
    publishers: list[ResultPublisher] = [InMemoryPublisher()]
    if settings.result_webhook_url:
        publishers.append(WebhookPublisher())
    return publishers
