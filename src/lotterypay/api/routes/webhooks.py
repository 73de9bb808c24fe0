"""Payment gateway webhook: /api/lottery/webhook.

The gateway only tells us *which* payment changed; the status itself is
always fetched from the gateway by the webhook worker.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import PlainTextResponse

from lotterypay.api.deps import get_webhook_worker

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/lottery", tags=["webhooks"])


async def _payment_reference(request: Request) -> str | None:
    """Read ``id`` from a form-encoded (Mollie's default) or JSON body."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            payload = await request.json()
        except ValueError:
            return None
        value = payload.get("id") if isinstance(payload, dict) else None
    else:
        form = await request.form()
        value = form.get("id")
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


@router.post("/webhook", response_class=PlainTextResponse)
async def payment_webhook(
    request: Request,
    worker: Any = Depends(get_webhook_worker),
) -> str:
    """Acknowledge at once; the status check runs on the webhook worker."""
    reference = await _payment_reference(request)
    if reference is None:
        raise HTTPException(status_code=400, detail="Missing payment ID")

    worker.enqueue(reference)
    logger.info("Webhook received for payment %s", reference)
    return "OK"
