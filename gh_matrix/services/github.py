"""Matrix notices for GitHub webhook events."""

from __future__ import annotations

import logging
import re
from typing import Any, Mapping, Optional

from gh_matrix.schemas import NotificationContent
from gh_matrix.services.payload import (
    UNKNOWN,
    _dig,
    _ensure_mapping,
    action_of,
    get_str,
    repo_name,
    repo_url,
    sender_login,
)
from gh_matrix.services.registry import (
    Descriptors,
    EventTemplate,
    Handler,
    lookup,
)

logger = logging.getLogger(__name__)

FALLBACK_EMOJI = "📌"

_PLACEHOLDER = re.compile(r"\{(\w+)\}")


def fill_template(template: str, fields: Mapping[str, str]) -> str:
    """
    Replace every ``{name}`` token that has a value in ``fields``.

    Tokens without a value are kept verbatim, so a half-filled template is
    still readable and filling twice is harmless.
    """

    def _sub(match: re.Match[str]) -> str:
        value = fields.get(match.group(1))
        return match.group(0) if value is None else value

    return _PLACEHOLDER.sub(_sub, template)


def _assignees_suffix(item: Mapping[str, Any]) -> str:
    assignees = item.get("assignees")
    if not isinstance(assignees, list):
        return ""
    logins = [get_str(a, ("login",)) for a in assignees]
    names = ", ".join(login for login in logins if login)
    return f" assigned to {names}" if names else ""


def build_fields(
    event: str,
    action: str,
    payload: Mapping[str, Any],
    emoji: str,
) -> dict[str, str]:
    """Field bag for ``event``/``action``: the common four plus event extras."""
    fields = {
        "repo": repo_name(payload),
        "repoUrl": repo_url(payload),
        "sender": sender_login(payload),
        "emoji": emoji,
    }

    if event == "repository" and action == "renamed":
        fields["oldName"] = get_str(payload, ("changes", "repository", "name", "from"), UNKNOWN)
    elif event == "repository" and action == "transferred":
        fields["newOwner"] = get_str(payload, ("changes", "owner", "from", "login"), UNKNOWN)
    elif event == "label":
        fields["labelName"] = get_str(payload, ("label", "name"), UNKNOWN)
    elif event in ("issues", "pull_request"):
        issue = payload.get("issue")
        item = issue if isinstance(issue, Mapping) else payload.get("pull_request")
        if isinstance(item, Mapping):
            fields["number"] = get_str(item, ("number",))
            fields["title"] = get_str(item, ("title",))
            fields["url"] = get_str(item, ("html_url",))

            if action == "opened" and item is issue:
                fields["assignees"] = _assignees_suffix(item)
            if action in ("assigned", "unassigned"):
                fields["assignee"] = get_str(payload, ("assignee", "login"), UNKNOWN)
            if action in ("labeled", "unlabeled"):
                fields["labelName"] = get_str(payload, ("label", "name"), UNKNOWN)
    elif event == "release":
        release = payload.get("release")
        if isinstance(release, Mapping):
            fields["name"] = (
                get_str(release, ("name",))
                or get_str(release, ("tag_name",))
                or UNKNOWN
            )
            fields["url"] = get_str(release, ("html_url",))

    return fields


def select_template(
    event: str,
    action: str,
    actions: Mapping[str, EventTemplate],
    payload: Mapping[str, Any],
) -> Optional[EventTemplate]:
    template = actions.get(action)
    if template is None:
        return None
    if event == "pull_request" and action == "closed" and _dig(payload, ("pull_request", "merged")):
        return actions.get("merged", template)
    return template


def render_template(template: EventTemplate, fields: Mapping[str, str]) -> NotificationContent:
    body = f"{template.emoji} {fill_template(template.template, fields)}"
    if template.simple:
        return NotificationContent.plain(body)
    formatted = fill_template(template.html_template, fields) if template.html_template else body
    return NotificationContent.html(body, formatted)


def fallback_notice(event: str, action: str, payload: Mapping[str, Any]) -> NotificationContent:
    repo = repo_name(payload)
    repo_link = repo_url(payload)
    action_part = f" ({action})" if action else ""
    return NotificationContent.html(
        f"{FALLBACK_EMOJI} GitHub {event} event{action_part} occurred in {repo}",
        f"<p>{FALLBACK_EMOJI} GitHub {event} event{action_part} occurred in"
        f' <a href="{repo_link}">{repo}</a></p>\n',
    )


def format_event(event: str, payload: Mapping[str, Any] | None) -> NotificationContent:
    """
    Translate a GitHub webhook delivery into a Matrix notice.

    Never raises: unknown events, unknown actions and handlers that decline
    all end up as the generic fallback notice.
    """
    payload = _ensure_mapping(payload)
    action = action_of(payload)

    match lookup(event):
        case Handler(func=func):
            try:
                content = func(payload, action)
            except Exception:  # pragma: no cover - never crash on notices
                logger.exception("Handler for %s event failed", event)
                content = None
            if content is not None:
                return content
        case Descriptors(actions=actions):
            template = select_template(event, action, actions, payload)
            if template is not None:
                fields = build_fields(event, action, payload, template.emoji)
                return render_template(template, fields)
        case _:
            logger.debug("No registry entry for %s event", event)

    return fallback_notice(event, action, payload)
