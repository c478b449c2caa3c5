"""the beautiful world start from here."""

from __future__ import annotations

import hashlib
import hmac
import uuid


def gh_verify(secret: str, body: bytes, signature_header: str | None) -> bool:
    """
    Verify GitHub webhook HMAC signature (X-Hub-Signature-256).

    Returns
    -------
    bool
        True if valid, False otherwise (including a missing or malformed header).
    """
    if not signature_header:
        return False
    parts = signature_header.split("=")
    if len(parts) != 2 or parts[0] != "sha256":
        return False
    mac = hmac.new(secret.encode(), msg=body, digestmod=hashlib.sha256).hexdigest()
    return hmac.compare_digest(mac.encode(), parts[1].encode())


def transaction_id(delivery_id: str | None) -> str:
    """
    Matrix transaction ID for a GitHub delivery.

    Redelivering the same GitHub delivery reuses the transaction ID, so the
    homeserver deduplicates it instead of posting the notice twice.
    """
    return f"github_{delivery_id or uuid.uuid4().hex}"
