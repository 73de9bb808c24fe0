"""Webhook worker: processes payment callbacks off the request path.

The webhook route only enqueues the gateway's payment reference and answers
200 at once. This worker drains the queue on a background thread, runs the
authoritative status check for each reference, and logs (never raises) any
failure.
"""

from __future__ import annotations

import logging
import queue
import threading
from typing import Any

from lotterypay.core.context import new_correlation_id, set_correlation_id

logger = logging.getLogger(__name__)

_STOP = object()


class WebhookWorkerResult:
    """Outcome of a synchronous drain."""

    def __init__(self) -> None:
        self.processed: list[str] = []
        self.errors: list[str] = []

    @property
    def success(self) -> bool:
        return len(self.errors) == 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "processed": self.processed,
            "errors": self.errors,
            "success": self.success,
        }


class WebhookWorker:
    """In-process queue + consumer thread for payment callbacks."""

    def __init__(self, ticket_service: Any, join_timeout: float = 5.0) -> None:
        self.ticket_service = ticket_service
        self.join_timeout = join_timeout
        self._queue: queue.Queue[Any] = queue.Queue()
        self._thread: threading.Thread | None = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def enqueue(self, external_reference: str) -> None:
        """Hand a payment reference to the worker. Never blocks."""
        self._queue.put_nowait(external_reference)
        logger.debug("Queued payment callback %s", external_reference)

    def pending(self) -> int:
        return self._queue.qsize()

    def start(self) -> None:
        if self.is_running:
            return
        self._thread = threading.Thread(
            target=self._loop, name="webhook-worker", daemon=True
        )
        self._thread.start()
        logger.info("Webhook worker started")

    def stop(self) -> None:
        """Finish queued work, then stop the consumer thread."""
        thread = self._thread
        if thread is None or not thread.is_alive():
            return
        self._queue.put(_STOP)
        thread.join(timeout=self.join_timeout)
        if thread.is_alive():
            logger.warning("Webhook worker did not stop within %.1fs", self.join_timeout)
        else:
            logger.info("Webhook worker stopped")
        self._thread = None

    def process(self, external_reference: str) -> bool:
        """Run one callback. Returns False if it failed; never raises."""
        set_correlation_id(new_correlation_id("wh-"))
        try:
            status = self.ticket_service.handle_callback(external_reference)
            logger.info("Processed payment callback %s (status=%s)", external_reference, status)
            return True
        except Exception:
            logger.exception("Error processing payment callback %s", external_reference)
            return False
        finally:
            set_correlation_id(None)

    def run_pending(self) -> WebhookWorkerResult:
        """Drain the queue on the calling thread."""
        result = WebhookWorkerResult()
        while True:
            try:
                item = self._queue.get_nowait()
            except queue.Empty:
                break
            try:
                if item is _STOP:
                    continue
                if self.process(item):
                    result.processed.append(item)
                else:
                    result.errors.append(item)
            finally:
                self._queue.task_done()
        return result

    def _loop(self) -> None:
        while True:
            item = self._queue.get()
            try:
                if item is _STOP:
                    return
                self.process(item)
            finally:
                self._queue.task_done()
