"""Event → notice template registry."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional, Union

from gh_matrix.schemas import NotificationContent
from gh_matrix.services.handlers import (
    handle_create,
    handle_delete,
    handle_fork,
    handle_issue_comment,
    handle_push,
    handle_workflow_run,
)

HandlerFunc = Callable[[Mapping[str, Any], str], Optional[NotificationContent]]


@dataclass(frozen=True)
class EventTemplate:
    """
    Template for one (event, action) pair.

    ``template`` renders the plain body and is always prefixed with ``emoji``.
    ``html_template`` renders the formatted body; when it is missing the plain
    body is reused. ``simple`` templates are sent without a formatted body.
    ``use_repo_url`` is informational only and never changes rendering.
    """

    emoji: str
    template: str
    html_template: Optional[str] = None
    use_repo_url: Optional[bool] = None
    simple: bool = False


@dataclass(frozen=True)
class Descriptors:
    actions: Mapping[str, EventTemplate]


@dataclass(frozen=True)
class Handler:
    func: HandlerFunc


RegistryEntry = Union[Descriptors, Handler]


def _actions(**templates: EventTemplate) -> Descriptors:
    return Descriptors(MappingProxyType(templates))


REPOSITORY = _actions(
    created=EventTemplate(
        emoji="🎉",
        template="**{sender}** created new repository {repo}",
        html_template='🎉 <strong>{sender}</strong> created new repository <a href="{repoUrl}">{repo}</a>',
        use_repo_url=True,
    ),
    deleted=EventTemplate(
        emoji="🗑️",
        template="Repository {repo} was deleted by **{sender}**",
        html_template="🗑️ Repository {repo} was deleted by <strong>{sender}</strong>",
        use_repo_url=False,
    ),
    archived=EventTemplate(
        emoji="📦",
        template="**{sender}** archived repository {repo}",
        html_template='📦 <strong>{sender}</strong> archived repository <a href="{repoUrl}">{repo}</a>',
        use_repo_url=True,
    ),
    unarchived=EventTemplate(
        emoji="📂",
        template="**{sender}** unarchived repository {repo}",
        html_template='📂 <strong>{sender}</strong> unarchived repository <a href="{repoUrl}">{repo}</a>',
        use_repo_url=True,
    ),
    publicized=EventTemplate(
        emoji="🌍",
        template="**{sender}** made {repo} public",
        html_template='🌍 <strong>{sender}</strong> made <a href="{repoUrl}">{repo}</a> public',
        use_repo_url=True,
    ),
    privatized=EventTemplate(
        emoji="🔒",
        template="**{sender}** made {repo} private",
        html_template='🔒 <strong>{sender}</strong> made <a href="{repoUrl}">{repo}</a> private',
        use_repo_url=True,
    ),
    renamed=EventTemplate(
        emoji="✏️",
        template="**{sender}** renamed repository from {oldName} to {repo}",
        html_template='✏️ <strong>{sender}</strong> renamed repository from {oldName} to <a href="{repoUrl}">{repo}</a>',
        use_repo_url=True,
    ),
    transferred=EventTemplate(
        emoji="➡️",
        template="**{sender}** transferred {repo} to {newOwner}",
        html_template='➡️ <strong>{sender}</strong> transferred <a href="{repoUrl}">{repo}</a> to {newOwner}',
        use_repo_url=True,
    ),
    edited=EventTemplate(
        emoji="📝",
        template="**{sender}** edited repository settings for {repo}",
        html_template='📝 <strong>{sender}</strong> edited repository settings for <a href="{repoUrl}">{repo}</a>',
        use_repo_url=True,
    ),
)

LABEL = _actions(
    created=EventTemplate(
        emoji="🏷️",
        template='**{sender}** created label "{labelName}" in {repo}',
        simple=True,
    ),
    edited=EventTemplate(
        emoji="🏷️",
        template='**{sender}** edited label "{labelName}" in {repo}',
        simple=True,
    ),
    deleted=EventTemplate(
        emoji="🏷️",
        template='**{sender}** deleted label "{labelName}" from {repo}',
        simple=True,
    ),
)

ISSUES = _actions(
    opened=EventTemplate(
        emoji="📥",
        template='**{sender}** created new issue [{repo}#{number}]({url}): "{title}"{assignees}',
        html_template='📥 <strong>{sender}</strong> created new issue <a href="{url}">{repo}#{number}</a>: &quot;{title}&quot;{assignees}',
    ),
    closed=EventTemplate(
        emoji="⬛",
        template='**{sender}** closed issue [{repo}#{number}]({url}): "{title}"',
        html_template='⬛ <strong>{sender}</strong> closed issue <a href="{url}">{repo}#{number}</a>: &quot;{title}&quot;',
    ),
    reopened=EventTemplate(
        emoji="🔄",
        template='**{sender}** reopened issue [{repo}#{number}]({url}): "{title}"',
        html_template='🔄 <strong>{sender}</strong> reopened issue <a href="{url}">{repo}#{number}</a>: &quot;{title}&quot;',
    ),
    edited=EventTemplate(
        emoji="📝",
        template='**{sender}** edited issue [{repo}#{number}]({url}): "{title}"',
        html_template='📝 <strong>{sender}</strong> edited issue <a href="{url}">{repo}#{number}</a>: &quot;{title}&quot;',
    ),
    assigned=EventTemplate(
        emoji="👤",
        template="**{sender}** assigned issue [{repo}#{number}]({url}) to {assignee}",
        html_template='👤 <strong>{sender}</strong> assigned issue <a href="{url}">{repo}#{number}</a> to {assignee}',
    ),
    unassigned=EventTemplate(
        emoji="👤",
        template="**{sender}** unassigned issue [{repo}#{number}]({url}) from {assignee}",
        html_template='👤 <strong>{sender}</strong> unassigned issue <a href="{url}">{repo}#{number}</a> from {assignee}',
    ),
    labeled=EventTemplate(
        emoji="🏷️",
        template='**{sender}** added label "{labelName}" to issue [{repo}#{number}]({url})',
        html_template='🏷️ <strong>{sender}</strong> added label &quot;{labelName}&quot; to issue <a href="{url}">{repo}#{number}</a>',
    ),
    unlabeled=EventTemplate(
        emoji="🏷️",
        template='**{sender}** removed label "{labelName}" from issue [{repo}#{number}]({url})',
        html_template='🏷️ <strong>{sender}</strong> removed label &quot;{labelName}&quot; from issue <a href="{url}">{repo}#{number}</a>',
    ),
)

# "merged" is never sent by GitHub as an action; it replaces "closed" for merged PRs.
PULL_REQUEST = _actions(
    opened=EventTemplate(
        emoji="📂",
        template="Pull request [#{number}: {title}]({url}) opened by {sender} in {repo}",
        html_template='<p>📂 Pull request <a href="{url}">#{number}: {title}</a> opened by {sender} in <a href="{repoUrl}">{repo}</a></p>\n',
    ),
    closed=EventTemplate(
        emoji="❌",
        template="Pull request [#{number}: {title}]({url}) closed by {sender} in {repo}",
        html_template='<p>❌ Pull request <a href="{url}">#{number}: {title}</a> closed by {sender} in <a href="{repoUrl}">{repo}</a></p>\n',
    ),
    merged=EventTemplate(
        emoji="✅",
        template="Pull request [#{number}: {title}]({url}) merged by {sender} in {repo}",
        html_template='<p>✅ Pull request <a href="{url}">#{number}: {title}</a> merged by {sender} in <a href="{repoUrl}">{repo}</a></p>\n',
    ),
    reopened=EventTemplate(
        emoji="♻️",
        template="Pull request [#{number}: {title}]({url}) reopened by {sender} in {repo}",
        html_template='<p>♻️ Pull request <a href="{url}">#{number}: {title}</a> reopened by {sender} in <a href="{repoUrl}">{repo}</a></p>\n',
    ),
    synchronize=EventTemplate(
        emoji="🔄",
        template="Pull request [#{number}: {title}]({url}) updated by {sender} in {repo}",
        html_template='<p>🔄 Pull request <a href="{url}">#{number}: {title}</a> updated by {sender} in <a href="{repoUrl}">{repo}</a></p>\n',
    ),
)

STAR = _actions(
    created=EventTemplate(
        emoji="⭐",
        template="**{sender}** starred {repo}",
        html_template='<p>⭐ <strong>{sender}</strong> starred <a href="{repoUrl}">{repo}</a></p>\n',
    ),
    deleted=EventTemplate(
        emoji="💫",
        template="**{sender}** unstarred {repo}",
        html_template='<p>💫 <strong>{sender}</strong> unstarred <a href="{repoUrl}">{repo}</a></p>\n',
    ),
)

RELEASE = _actions(
    published=EventTemplate(
        emoji="🎉",
        template="New release [{name}]({url}) published in {repo}",
        html_template='<p>🎉 New release <a href="{url}">{name}</a> published in <a href="{repoUrl}">{repo}</a></p>\n',
    ),
    created=EventTemplate(
        emoji="📦",
        template="Release [{name}]({url}) created in {repo}",
        html_template='<p>📦 Release <a href="{url}">{name}</a> created in <a href="{repoUrl}">{repo}</a></p>\n',
    ),
    edited=EventTemplate(
        emoji="✏️",
        template="Release [{name}]({url}) edited in {repo}",
        html_template='<p>✏️ Release <a href="{url}">{name}</a> edited in <a href="{repoUrl}">{repo}</a></p>\n',
    ),
    deleted=EventTemplate(
        emoji="🗑️",
        template="Release {name} deleted from {repo}",
        html_template='<p>🗑️ Release {name} deleted from <a href="{repoUrl}">{repo}</a></p>\n',
    ),
)

EVENT_ACTIONS: Mapping[str, RegistryEntry] = MappingProxyType(
    {
        "repository": REPOSITORY,
        "label": LABEL,
        "issues": ISSUES,
        "pull_request": PULL_REQUEST,
        "star": STAR,
        "release": RELEASE,
        "push": Handler(handle_push),
        "create": Handler(handle_create),
        "delete": Handler(handle_delete),
        "workflow_run": Handler(handle_workflow_run),
        "issue_comment": Handler(handle_issue_comment),
        "fork": Handler(handle_fork),
    }
)


def lookup(event: str) -> Optional[RegistryEntry]:
    return EVENT_ACTIONS.get(event)


def supported_events() -> list[str]:
    return sorted(EVENT_ACTIONS)
