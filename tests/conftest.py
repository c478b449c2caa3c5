"""Shared payload fixtures."""

import pytest

REPO = {"full_name": "acme/repo", "html_url": "https://github.com/acme/repo"}


def make_payload(**extra):
    """Minimal delivery body with repository and sender, plus ``extra`` keys."""
    payload = {"repository": dict(REPO), "sender": {"login": "bob"}}
    payload.update(extra)
    return payload


@pytest.fixture
def payload_factory():
    return make_payload
