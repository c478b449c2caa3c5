"""Yet another matrix services"""

from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import quote

import httpx

from gh_matrix.schemas import NotificationContent

logger = logging.getLogger(__name__)

HTTP_TIMEOUT_SECONDS = 15


def room_message_url(homeserver: str, room_id: str, txn_id: str) -> str:
    """Client-server v3 endpoint for sending an ``m.room.message``."""
    base = homeserver.rstrip("/")
    return (
        f"{base}/_matrix/client/v3/rooms/{quote(room_id, safe='')}"
        f"/send/m.room.message/{quote(txn_id, safe='')}"
    )


async def send_notice(
    token: str,
    room_id: str,
    txn_id: str,
    content: NotificationContent,
    *,
    homeserver: str,
    client: Optional[httpx.AsyncClient] = None,
) -> httpx.Response:
    """
    PUT a notice into ``room_id``.

    Error answers from the homeserver are logged and returned as-is; only
    transport failures raise.
    """
    url = room_message_url(homeserver, room_id, txn_id)
    headers = {"Authorization": f"Bearer {token}"}
    logger.info("Sending to Matrix: %s (token set: %s)", url, bool(token))

    if client is None:
        async with httpx.AsyncClient(timeout=HTTP_TIMEOUT_SECONDS) as own_client:
            resp = await own_client.put(url, json=content.as_message(), headers=headers)
    else:
        resp = await client.put(url, json=content.as_message(), headers=headers)

    if resp.status_code >= 300:
        logger.error("Matrix error: %s - %s", resp.status_code, resp.text)
    return resp
