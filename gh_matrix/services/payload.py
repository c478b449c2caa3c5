"""Get-with-default accessors for GitHub webhook payloads."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

UNKNOWN = "unknown"
UNKNOWN_REPO = "unknown/repo"


def _dig(data: Any, path: Sequence[str]) -> Any:
    current = data
    for key in path:
        if not isinstance(current, Mapping):
            return None
        current = current.get(key)
        if current is None:
            return None
    return current


def _ensure_mapping(payload: Any) -> Mapping[str, Any]:
    return payload if isinstance(payload, Mapping) else {}


def get_str(data: Any, path: Sequence[str], default: str = "") -> str:
    """
    Read a nested string field.

    Missing, empty or non-scalar values fall back to ``default``; numbers are
    stringified so ``issue.number`` can be read the same way as ``title``.
    """
    value = _dig(data, path)
    if value is None or isinstance(value, (Mapping, list, tuple, bool)):
        return default
    text = str(value)
    return text if text else default


def repo_name(payload: Mapping[str, Any]) -> str:
    return get_str(payload, ("repository", "full_name"), UNKNOWN_REPO)


def repo_url(payload: Mapping[str, Any]) -> str:
    return get_str(payload, ("repository", "html_url"))


def sender_login(payload: Mapping[str, Any]) -> str:
    return get_str(payload, ("sender", "login"), UNKNOWN)


def action_of(payload: Mapping[str, Any]) -> str:
    return get_str(payload, ("action",))
