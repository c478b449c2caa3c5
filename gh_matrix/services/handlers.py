"""Notices for events whose payload does not fit a flat template."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from gh_matrix.schemas import NotificationContent
from gh_matrix.services.payload import (
    UNKNOWN,
    UNKNOWN_REPO,
    _ensure_mapping,
    get_str,
    repo_name,
    repo_url,
    sender_login,
)

COMMENT_PREVIEW_LIMIT = 100

WORKFLOW_OUTCOMES: dict[str, tuple[str, str]] = {
    "failure": ("❌", "failed"),
    "cancelled": ("⚠️", "was cancelled"),
}
WORKFLOW_SUCCESS = ("☑", "completed successfully 🎉")


def _comment_preview(text: str) -> str:
    preview = text.split("\n")[0][:COMMENT_PREVIEW_LIMIT]
    if len(text) > COMMENT_PREVIEW_LIMIT or "\n" in text:
        return preview + "..."
    return preview


def handle_push(payload: Mapping[str, Any], _action: str) -> Optional[NotificationContent]:
    payload = _ensure_mapping(payload)
    repo = repo_name(payload)
    repo_link = repo_url(payload)
    sender = sender_login(payload)
    branch = get_str(payload, ("ref",)).replace("refs/heads/", "", 1) or UNKNOWN
    commits = payload.get("commits")
    commit_count = len(commits) if isinstance(commits, list) else 0
    commit_text = "commit" if commit_count == 1 else "commits"
    compare_url = get_str(payload, ("compare",))

    return NotificationContent.html(
        f"📤 **{sender}** pushed [{commit_count} {commit_text}]({compare_url})"
        f" to `{branch}` in {repo}",
        f"<p>📤 <strong>{sender}</strong> pushed"
        f' <a href="{compare_url}">{commit_count} {commit_text}</a>'
        f' to <code>{branch}</code> in <a href="{repo_link}">{repo}</a></p>\n',
    )


def _ref_notice(payload: Mapping[str, Any], emoji: str, verb: str) -> NotificationContent:
    payload = _ensure_mapping(payload)
    repo = repo_name(payload)
    repo_link = repo_url(payload)
    sender = sender_login(payload)
    ref_type = get_str(payload, ("ref_type",), "reference")
    ref = get_str(payload, ("ref",), UNKNOWN)

    return NotificationContent.html(
        f"{emoji} **{sender}** {verb} {ref_type} `{ref}` in {repo}",
        f"<p>{emoji} <strong>{sender}</strong> {verb} {ref_type}"
        f' <code>{ref}</code> in <a href="{repo_link}">{repo}</a></p>\n',
    )


def handle_create(payload: Mapping[str, Any], _action: str) -> Optional[NotificationContent]:
    return _ref_notice(payload, "🌱", "created")


def handle_delete(payload: Mapping[str, Any], _action: str) -> Optional[NotificationContent]:
    return _ref_notice(payload, "🗑️", "deleted")


def handle_workflow_run(payload: Mapping[str, Any], action: str) -> Optional[NotificationContent]:
    """Only finished runs are announced; queued and in-progress runs decline."""
    payload = _ensure_mapping(payload)
    workflow = payload.get("workflow_run")
    if not isinstance(workflow, Mapping) or action != "completed":
        return None

    repo = repo_name(payload)
    repo_link = repo_url(payload)
    conclusion = get_str(workflow, ("conclusion",))
    name = get_str(workflow, ("name",), UNKNOWN)
    branch = get_str(workflow, ("head_branch",), UNKNOWN)
    run_url = get_str(workflow, ("html_url",))
    emoji, status_text = WORKFLOW_OUTCOMES.get(conclusion, WORKFLOW_SUCCESS)

    return NotificationContent.html(
        f"{emoji} Workflow **{name}** [{status_text}]({run_url})"
        f" for {repo} on branch `{branch}`",
        f"<p>{emoji} Workflow <strong>{name}</strong>"
        f' <a href="{run_url}">{status_text}</a>'
        f' for <a href="{repo_link}">{repo}</a> on branch <code>{branch}</code></p>\n',
    )


def handle_issue_comment(payload: Mapping[str, Any], _action: str) -> Optional[NotificationContent]:
    payload = _ensure_mapping(payload)
    comment = payload.get("comment")
    issue = payload.get("issue")
    if not isinstance(comment, Mapping) or not isinstance(issue, Mapping):
        return None

    repo = repo_name(payload)
    sender = sender_login(payload)
    comment_url = get_str(comment, ("html_url",))
    preview = _comment_preview(get_str(comment, ("body",)))
    number = get_str(issue, ("number",))
    issue_url = get_str(issue, ("html_url",))

    return NotificationContent.html(
        f"🗣 **{sender}** [commented]({comment_url}) on [{repo}#{number}]({issue_url})"
        f"  \n> {preview}",
        f'🗣 <strong>{sender}</strong> <a href="{comment_url}">commented</a>'
        f' on <a href="{issue_url}">{repo}#{number}</a><br>\n&gt; {preview}',
        external_url=issue_url,
    )


def handle_fork(payload: Mapping[str, Any], _action: str) -> Optional[NotificationContent]:
    payload = _ensure_mapping(payload)
    forkee = payload.get("forkee")
    if not isinstance(forkee, Mapping):
        return None

    repo = repo_name(payload)
    repo_link = repo_url(payload)
    sender = sender_login(payload)
    fork_name = get_str(forkee, ("full_name",), UNKNOWN_REPO)
    fork_url = get_str(forkee, ("html_url",))

    return NotificationContent.html(
        f"🍴 **{sender}** forked {repo} to [{fork_name}]({fork_url})",
        f'<p>🍴 <strong>{sender}</strong> forked <a href="{repo_link}">{repo}</a>'
        f' to <a href="{fork_url}">{fork_name}</a></p>\n',
    )
