##pytest tests/test_handlers.py -q

import pytest

from gh_matrix.schemas import HTML_FORMAT
from gh_matrix.services.github import format_event
from gh_matrix.services.handlers import (
    handle_fork,
    handle_issue_comment,
    handle_push,
    handle_workflow_run,
)


def test_push_summary(payload_factory):
    payload = {
        "repository": {"full_name": "acme/repo", "html_url": "https://x/acme/repo"},
        "sender": {"login": "bob"},
        "ref": "refs/heads/main",
        "commits": [{}, {}],
        "compare": "https://x/compare/ab..cd",
    }
    content = format_event("push", payload)
    assert "bob" in content.body
    assert "2 commits" in content.body
    assert "`main`" in content.body
    assert "https://x/compare/ab..cd" in content.body
    assert content.format == HTML_FORMAT
    assert content.formatted_body.startswith("<p>")
    assert '<a href="https://x/compare/ab..cd">2 commits</a>' in content.formatted_body


def test_push_single_commit_and_tag_ref(payload_factory):
    content = handle_push(payload_factory(ref="refs/tags/v1", commits=[{}], compare="c"), "")
    assert content.body == "📤 **bob** pushed [1 commit](c) to `refs/tags/v1` in acme/repo"


def test_push_without_ref(payload_factory):
    content = handle_push(payload_factory(), "")
    assert content.body == "📤 **bob** pushed [0 commits]() to `unknown` in acme/repo"


@pytest.mark.parametrize(
    "event,emoji,verb",
    [("create", "🌱", "created"), ("delete", "🗑️", "deleted")],
)
def test_ref_events(payload_factory, event, emoji, verb):
    content = format_event(event, payload_factory(ref_type="branch", ref="feature/x"))
    assert content.body == f"{emoji} **bob** {verb} branch `feature/x` in acme/repo"
    assert content.formatted_body == (
        f"<p>{emoji} <strong>bob</strong> {verb} branch <code>feature/x</code>"
        ' in <a href="https://github.com/acme/repo">acme/repo</a></p>\n'
    )

    content = format_event(event, payload_factory())
    assert content.body == f"{emoji} **bob** {verb} reference `unknown` in acme/repo"


@pytest.mark.parametrize(
    "conclusion,expected",
    [
        ("success", "☑ Workflow **CI** [completed successfully 🎉](https://run/1)"),
        ("failure", "❌ Workflow **CI** [failed](https://run/1)"),
        ("cancelled", "⚠️ Workflow **CI** [was cancelled](https://run/1)"),
        (None, "☑ Workflow **CI** [completed successfully 🎉](https://run/1)"),
    ],
)
def test_workflow_run_conclusions(payload_factory, conclusion, expected):
    payload = payload_factory(
        action="completed",
        workflow_run={
            "name": "CI",
            "conclusion": conclusion,
            "head_branch": "main",
            "html_url": "https://run/1",
        },
    )
    content = handle_workflow_run(payload, "completed")
    assert content.body == f"{expected} for acme/repo on branch `main`"


def test_workflow_run_declines_until_completed(payload_factory):
    assert handle_workflow_run(payload_factory(workflow_run={"name": "CI"}), "in_progress") is None
    assert handle_workflow_run(payload_factory(), "completed") is None


def _comment_payload(payload_factory, body):
    return payload_factory(
        action="created",
        comment={"html_url": "https://c/1", "body": body},
        issue={"number": 5, "html_url": "https://github.com/acme/repo/issues/5"},
    )


def test_issue_comment_short(payload_factory):
    content = handle_issue_comment(_comment_payload(payload_factory, "LGTM"), "created")
    assert content.body == (
        "🗣 **bob** [commented](https://c/1) on"
        " [acme/repo#5](https://github.com/acme/repo/issues/5)  \n> LGTM"
    )
    assert content.formatted_body.endswith("<br>\n&gt; LGTM")
    assert content.external_url == "https://github.com/acme/repo/issues/5"
    assert content.as_message()["external_url"] == "https://github.com/acme/repo/issues/5"


def test_issue_comment_preview_truncates(payload_factory):
    content = handle_issue_comment(_comment_payload(payload_factory, "first\nsecond"), "created")
    assert content.body.endswith("> first...")

    long_body = "x" * 150
    content = handle_issue_comment(_comment_payload(payload_factory, long_body), "created")
    assert content.body.endswith("> " + "x" * 100 + "...")


def test_issue_comment_declines_without_issue(payload_factory):
    payload = payload_factory(action="created", comment={"body": "hi"})
    assert handle_issue_comment(payload, "created") is None
    assert format_event("issue_comment", payload).body == (
        "📌 GitHub issue_comment event (created) occurred in acme/repo"
    )


def test_fork(payload_factory):
    payload = payload_factory(forkee={"full_name": "carol/repo", "html_url": "https://github.com/carol/repo"})
    content = handle_fork(payload, "")
    assert content.body == "🍴 **bob** forked acme/repo to [carol/repo](https://github.com/carol/repo)"
    assert handle_fork(payload_factory(), "") is None
