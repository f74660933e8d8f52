from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Dict, Optional

import httpx

from .fingerprint import canonical_json
from .models import DetectionEvent


logger = logging.getLogger(__name__)


class EventDispatcher:
    """
    Fire-and-forget delivery of detection events.

    `dispatch` hands the POST to a worker thread and returns the future at
    once. Nothing in the login flow waits on it; the future only exists so
    the outcome can be logged (and joined by tests). One attempt per event,
    no retries, and no exception ever escapes to the caller.
    """

    def __init__(self, endpoint: str, timeout: float = 5.0,
                 client: Optional[httpx.Client] = None, max_workers: int = 2):
        self.endpoint = endpoint
        self.timeout = timeout
        self._client = client or httpx.Client(timeout=timeout)
        self._owns_client = client is None
        self._pool = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="passwatch-dispatch")

    def dispatch(self, event: DetectionEvent, endpoint: Optional[str] = None) -> Optional[Future]:
        url = endpoint or self.endpoint
        try:
            fut = self._pool.submit(self._send, event.to_wire(), url)
        except RuntimeError as exc:
            # pool already shut down
            logger.error("dispatch_rejected url=%s error=%s", url, exc)
            return None
        fut.add_done_callback(_log_unexpected)
        return fut

    def _send(self, body: Dict[str, Any], url: str) -> Optional[Dict[str, Any]]:
        try:
            resp = self._client.post(
                url,
                content=canonical_json(body),
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except httpx.HTTPError as exc:
            logger.error("event_send_error url=%s error=%s", url, exc)
            return None

        if resp.is_success:
            logger.info("event_sent url=%s status=%s", url, resp.status_code)
            try:
                return resp.json()
            except ValueError:
                return {}
        logger.error("event_send_failed url=%s status=%s", url, resp.status_code)
        return None

    def close(self, wait: bool = True) -> None:
        self._pool.shutdown(wait=wait)
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "EventDispatcher":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()


def _log_unexpected(fut: Future) -> None:
    exc = fut.exception()
    if exc is not None:
        logger.error("event_send_crashed error=%r", exc)
