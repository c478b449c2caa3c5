"""the beautiful world start from here."""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    """App Settings"""

    matrix_token: str = os.getenv("MATRIX_TOKEN", "")
    matrix_room_id: str = os.getenv("MATRIX_ROOM_ID", "")
    matrix_homeserver: str = os.getenv("MATRIX_HOMESERVER", "https://matrix.org")
    github_webhook_secret: str = os.getenv("GITHUB_WEBHOOK_SECRET", "")
    ignored_label_senders: frozenset[str] = frozenset(
        s.strip()
        for s in os.getenv("IGNORED_LABEL_SENDERS", "ghost").split(",")
        if s.strip()
    )
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


settings = Settings()
