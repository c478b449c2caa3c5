"""Ruter GH?"""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Header, HTTPException, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from gh_matrix.config import settings
from gh_matrix.services.github import format_event
from gh_matrix.services.matrix import send_notice
from gh_matrix.utils import gh_verify, transaction_id

logger = logging.getLogger(__name__)

router = APIRouter(tags=["github"])


def _sender(payload: object) -> str | None:
    if not isinstance(payload, dict):
        return None
    sender = payload.get("sender")
    return sender.get("login") if isinstance(sender, dict) else None


def is_filtered(event: str, payload: object) -> bool:
    """Label events from GitHub's own identities (e.g. ``ghost`` while a repo is created)."""
    return event == "label" and _sender(payload) in settings.ignored_label_senders


@router.post("/webhook")
@router.post("/webhook/", include_in_schema=False)
async def github_webhook(
    request: Request,
    x_hub_signature_256: str | None = Header(None),
    x_github_event: str | None = Header(None),
    x_github_delivery: str | None = Header(None),
):
    """
    GitHub webhook endpoint.

    The payload signature is validated against `X-Hub-Signature-256` with the
    shared webhook secret, then the event is rendered as a notice and sent to
    the configured Matrix room. Matrix's answer is passed back to GitHub.
    """
    body = await request.body()
    if not gh_verify(settings.github_webhook_secret, body, x_hub_signature_256):
        raise HTTPException(401, "Unauthorized")

    try:
        payload = json.loads(body)
    except ValueError:
        return PlainTextResponse("Invalid JSON", status_code=400)

    event = x_github_event or "unknown"
    if is_filtered(event, payload):
        logger.info("Filtered out GitHub system label event (sender %s)", _sender(payload))
        return JSONResponse(
            {"status": "filtered", "reason": "GitHub system label event"}
        )

    try:
        content = format_event(event, payload)
        logger.info(
            "GitHub event=%s delivery=%s action=%s sender=%s",
            event,
            x_github_delivery,
            payload.get("action") if isinstance(payload, dict) else None,
            _sender(payload),
        )
        resp = await send_notice(
            settings.matrix_token,
            settings.matrix_room_id,
            transaction_id(x_github_delivery),
            content,
            homeserver=settings.matrix_homeserver,
        )
    except Exception:
        logger.exception("Failed to forward %s event", event)
        return PlainTextResponse("Internal server error", status_code=500)

    return Response(
        content=resp.content,
        status_code=resp.status_code,
        media_type="application/json",
    )
