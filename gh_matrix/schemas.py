"""Matrix message schemas"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel

NOTICE = "m.notice"
HTML_FORMAT = "org.matrix.custom.html"


class NotificationContent(BaseModel):
    """
    Content of an ``m.room.message`` notice.

    ``formatted_body`` and ``format`` travel together; ``external_url`` is only
    set when the receiving client should preview a linked page.
    """

    msgtype: str = NOTICE
    body: str
    format: Optional[str] = None
    formatted_body: Optional[str] = None
    external_url: Optional[str] = None

    @classmethod
    def plain(cls, body: str) -> "NotificationContent":
        return cls(body=body)

    @classmethod
    def html(
        cls,
        body: str,
        formatted_body: str,
        external_url: Optional[str] = None,
    ) -> "NotificationContent":
        return cls(
            body=body,
            format=HTML_FORMAT,
            formatted_body=formatted_body,
            external_url=external_url,
        )

    def as_message(self) -> dict[str, Any]:
        """JSON body for the Matrix send endpoint, unset fields dropped."""
        return self.model_dump(exclude_none=True)
